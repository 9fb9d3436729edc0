# complaints/chatbot/schemas.py
from enum import Enum

from pydantic import BaseModel, Field


class ReplySource(str, Enum):
    AI = "ai"
    FALLBACK = "fallback"


class ChatMessage(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)


class ChatReply(BaseModel):
    response: str
    source: ReplySource
