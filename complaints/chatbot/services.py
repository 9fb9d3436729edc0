# complaints/chatbot/services.py
"""Help-desk assistant for the complaint system.

Answers come from Gemini when ``GEMINI_API_KEY`` is configured. Without a
key, or when the call fails or returns nothing usable, a small set of
keyword rules answers instead, so the endpoint always replies.
"""
import logging
import re

import httpx

from complaints.chatbot.schemas import ChatReply, ReplySource
from complaints.core.config import Settings, get_settings
from complaints.core.errors import ValidationError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an assistant for the ASTU (Adama Science and Technology University) Smart Complaint System.

Help students, staff and administrators understand and use the complaint system.

System information:
- Categories: Dormitory, Laboratory, Internet, Classroom, Library
- Roles: Student (submits complaints), Staff (handles complaints), Admin (full access)
- Ticket status: OPEN, IN_PROGRESS, RESOLVED
- Priority levels: LOW, MEDIUM, HIGH
- Features: create tickets, track status, attachments, notifications, remarks

Guidelines:
- Be friendly and professional
- Keep answers short (2-3 paragraphs at most) and use bullet points for lists
- If asked about unrelated topics, steer back to the complaint system

Answer the user's question:"""

GREETING_REPLY = (
    "Hello! I'm your ASTU Complaint Assistant. I can help you with:\n\n"
    "• Submitting complaints\n"
    "• Checking ticket status\n"
    "• Understanding categories\n"
    "• System features\n\n"
    "What would you like to know?"
)

SUBMIT_REPLY = (
    "To submit a complaint:\n\n"
    "1. Click \"Create Ticket\" in the sidebar\n"
    "2. Fill in title and description\n"
    "3. Select a category (Dormitory, Laboratory, Internet, ...)\n"
    "4. Choose a priority level\n"
    "5. Add a location (optional)\n"
    "6. Click \"Submit Complaint\"\n\n"
    "You'll get a unique ticket ID!"
)

STATUS_REPLY = (
    "To check your complaint status:\n\n"
    "1. Go to \"My Tickets\"\n"
    "2. Open any of your complaints\n"
    "3. Status meanings:\n"
    "   • OPEN - just submitted\n"
    "   • IN_PROGRESS - being worked on\n"
    "   • RESOLVED - completed\n\n"
    "Click any ticket for details!"
)

CATEGORIES_REPLY = (
    "Available categories:\n\n"
    "• Dormitory - room issues\n"
    "• Laboratory - lab equipment\n"
    "• Internet - network issues\n"
    "• Classroom - facility problems\n"
    "• Library - library services\n\n"
    "Choose the best match for your complaint!"
)

DEFAULT_REPLY = (
    "I can help you with:\n\n"
    "• Submitting complaints\n"
    "• Checking status\n"
    "• Understanding categories\n"
    "• System features\n\n"
    "Could you rephrase your question?"
)

# first match wins
FALLBACK_RULES = [
    (re.compile(r"^(hi|hello|hey|greetings)\b"), GREETING_REPLY),
    (re.compile(r"how.*(submit|create|file|make).*(complaint|ticket|issue)"), SUBMIT_REPLY),
    (re.compile(r"how.*(check|see|view|track).*(status|progress)"), STATUS_REPLY),
    (re.compile(r"what.*(categories|types)|categories"), CATEGORIES_REPLY),
]


def fallback_reply(message: str) -> str:
    text = message.lower().strip()
    for pattern, reply in FALLBACK_RULES:
        if pattern.search(text):
            return reply
    return DEFAULT_REPLY


def _extract_text(data) -> str | None:
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(text, str) or not text.strip():
        return None
    return text


def ask_gemini(message: str, settings: Settings, client: httpx.Client | None = None) -> str | None:
    """Return Gemini's answer, or None when it cannot be used."""
    url = f"{settings.GEMINI_API_URL.rstrip('/')}/{settings.GEMINI_MODEL}:generateContent"
    body = {
        "contents": [{"parts": [{"text": f"{SYSTEM_PROMPT}\n\nUser: {message}"}]}],
        "generationConfig": {"temperature": 0.7, "maxOutputTokens": 500},
    }
    owns_client = client is None
    client = client or httpx.Client(timeout=settings.CHATBOT_TIMEOUT_SECONDS)
    try:
        response = client.post(url, params={"key": settings.GEMINI_API_KEY}, json=body)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as exc:
        logger.warning("Gemini returned HTTP %s, using fallback", exc.response.status_code)
        return None
    except (httpx.HTTPError, ValueError):
        logger.warning("Gemini request failed, using fallback", exc_info=True)
        return None
    finally:
        if owns_client:
            client.close()

    text = _extract_text(data)
    if text is None:
        logger.warning("Gemini response had no candidate text, using fallback")
    return text


def chatbot_response(
    message: str,
    settings: Settings | None = None,
    client: httpx.Client | None = None,
) -> ChatReply:
    settings = settings or get_settings()
    message = message.strip()
    if not message:
        raise ValidationError("Message is required", field="message")

    if settings.GEMINI_API_KEY:
        answer = ask_gemini(message, settings, client)
        if answer is not None:
            return ChatReply(response=answer, source=ReplySource.AI)
    else:
        logger.debug("GEMINI_API_KEY not set, answering from rules")

    return ChatReply(response=fallback_reply(message), source=ReplySource.FALLBACK)
