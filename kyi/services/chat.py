import logging
from typing import Optional

import aiosqlite

from kyi.auth import StudySession
from kyi.config import CHAT_HISTORY_LIMIT
from kyi.database import append_chat_message, list_chat_history, new_id, utcnow
from kyi.models import ChatMessage
from kyi.services.responder import resolve_language, select_response

logger = logging.getLogger(__name__)

IDLE = "idle"
SENDING = "sending"


class ChatSession:
    """One open conversation with the companion for the session's user.

    History is read once by load_history(); after that new messages are only
    appended locally, never re-queried.
    """

    def __init__(self, db: aiosqlite.Connection, session: StudySession,
                 language: Optional[str] = "burmese"):
        self.db = db
        self.session = session
        self.language = resolve_language(language)
        self.state = IDLE
        self.messages: list[ChatMessage] = []
        self._loaded = False

    async def load_history(self) -> list[ChatMessage]:
        if self._loaded or not self.session.authenticated:
            return self.messages
        try:
            self.messages = await list_chat_history(
                self.db, self.session.user_id, limit=CHAT_HISTORY_LIMIT
            )
        except aiosqlite.Error:
            logger.warning("Could not load chat history for %s", self.session.user_id, exc_info=True)
            self.messages = []
        self._loaded = True
        return self.messages

    async def submit(self, text: str) -> list[ChatMessage]:
        """Send a message and get the companion's reply.

        Returns the new (user, assistant) pair, or an empty list when there
        is nothing to send.
        """
        text = (text or "").strip()
        if not text or not self.session.authenticated or self.state != IDLE:
            return []

        self.state = SENDING
        try:
            user_msg = await self._append(text, "user")
            reply = await self._append(select_response(text, self.language), "assistant")
        finally:
            self.state = IDLE
        return [user_msg, reply]

    async def _append(self, text: str, role: str) -> ChatMessage:
        # Local copy first so the transcript shows it even if the write fails
        local = ChatMessage(id=new_id(), user_id=self.session.user_id, message=text,
                            role=role, language=self.language, created_at=utcnow())
        self.messages.append(local)
        try:
            stored = await append_chat_message(self.db, self.session.user_id, text, role, self.language)
            await self.db.commit()
        except aiosqlite.Error:
            logger.warning("Could not save %s chat message for %s", role, self.session.user_id, exc_info=True)
            return local
        self.messages[-1] = stored
        return stored
