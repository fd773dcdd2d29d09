"""Rule-based farming assistant with persisted sessions."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from krishi_mitra.localization import (
    Intent,
    Language,
    detect_intent,
    format_response,
    resolve_language,
)
from krishi_mitra.logging_config import get_logger
from krishi_mitra.store.base import RecordStore, StoreError

logger = get_logger(__name__)

SESSIONS_TABLE = "chat_sessions"
MESSAGES_TABLE = "chat_messages"

QUICK_ACTIONS = {
    "Check Soil Health": "I want to check my soil health. Can you help me with soil testing and recommendations?",
    "View Crop Insights": "Show me insights about my crops. I want to know about growth patterns and health.",
    "Pest Risk Alerts": "Are there any pest risks in my area? I need to know about potential threats to my crops.",
}


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class MessageType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    VOICE = "voice"


class ChatMessage(BaseModel):
    session_id: str
    role: MessageRole
    content: str = Field(min_length=1)
    message_type: MessageType = MessageType.TEXT
    file_url: str | None = None


class ChatReply(BaseModel):
    """Assistant reply and the intent it answered."""

    intent: Intent
    content: str
    persisted: bool


class ChatService:
    """Answers messages in the session language and records the exchange.

    Storage failures are logged and reported through ``ChatReply.persisted``;
    the user still gets an answer.
    """

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def start_session(self, language: "str | Language" = Language.EN, title: str = "New Chat") -> str | None:
        """Create a chat session; returns its id, or None if it was not stored."""
        resolved = resolve_language(language)
        result = self.store.insert(
            SESSIONS_TABLE, {"title": title, "language": resolved.value}
        )
        if not result.ok or result.row is None:
            logger.error(f"Failed to create chat session: {result.error}")
            return None

        logger.info(f"Started chat session {result.row['id']} ({resolved.value})")
        return str(result.row["id"])

    def reply(self, message: str, language: "str | Language" = Language.EN) -> ChatReply:
        """Answer a message without storing anything."""
        intent = detect_intent(message)
        return ChatReply(
            intent=intent,
            content=format_response(intent, language),
            persisted=False,
        )

    def send(
        self,
        session_id: str,
        content: str,
        language: "str | Language" = Language.EN,
        message_type: MessageType = MessageType.TEXT,
        file_url: str | None = None,
    ) -> ChatReply:
        """Record a user message, answer it, and record the answer."""
        user_message = ChatMessage(
            session_id=session_id,
            role=MessageRole.USER,
            content=content,
            message_type=message_type,
            file_url=file_url,
        )
        reply = self.reply(content, language)

        assistant_message = ChatMessage(
            session_id=session_id,
            role=MessageRole.ASSISTANT,
            content=reply.content,
        )

        persisted = True
        for chat_message in (user_message, assistant_message):
            result = self.store.insert(
                MESSAGES_TABLE, chat_message.model_dump(mode="json")
            )
            if not result.ok:
                logger.error(f"Failed to store chat message: {result.error}")
                persisted = False
                break

        return reply.model_copy(update={"persisted": persisted})

    def quick_action(self, session_id: str, action: str, language: "str | Language" = Language.EN) -> ChatReply:
        """Send the canned message behind a quick-action button."""
        return self.send(session_id, QUICK_ACTIONS.get(action, action), language)

    def history(self, session_id: str) -> list[dict[str, Any]]:
        """Messages of a session in the order they were sent."""
        return self.store.select(
            MESSAGES_TABLE, filters={"session_id": session_id}, order_by="created_at"
        )

    def sessions(self, limit: int | None = None) -> list[dict[str, Any]]:
        """Most recent sessions first; empty when the store is unreachable."""
        try:
            return self.store.select(
                SESSIONS_TABLE, order_by="created_at", descending=True, limit=limit
            )
        except StoreError as e:
            logger.warning(f"Could not load chat sessions: {e}")
            return []
