# complaints/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from complaints import models  # noqa: F401  registers every table
from complaints.admin.routes import router as admin_router
from complaints.attachment.routes import router as attachment_router
from complaints.category.routes import router as category_router
from complaints.chatbot.routes import router as chatbot_router
from complaints.core.config import get_settings
from complaints.core.database import Base, engine
from complaints.core.errors import register_exception_handlers
from complaints.core.logging import configure_logging
from complaints.notification.routes import router as notification_router
from complaints.ticket.routes import router as ticket_router
from complaints.user.routes import router as auth_router

settings = get_settings()
configure_logging(settings.LOG_LEVEL)

Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESC,
    version=settings.APP_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Routers
app.include_router(auth_router)
app.include_router(category_router)
app.include_router(ticket_router)
app.include_router(attachment_router)
app.include_router(notification_router)
app.include_router(admin_router)
app.include_router(chatbot_router)


@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}
