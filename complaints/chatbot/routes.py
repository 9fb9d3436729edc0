# complaints/chatbot/routes.py
from fastapi import APIRouter

from complaints.chatbot import services as chatbot_service
from complaints.chatbot.schemas import ChatMessage, ChatReply

router = APIRouter(prefix="/chatbot", tags=["Chatbot"])


@router.post("/", response_model=ChatReply)
def ask(chat: ChatMessage):
    return chatbot_service.chatbot_response(chat.message)
