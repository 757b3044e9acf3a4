"""
Session Store

In-memory chat session state for the question-capped chat widget.

Design choices
--------------
- In-memory only (a session lives until it is reset or the process exits).
- Each session holds an append-only message list plus a count of answered
  user turns, capped at ``max_turns``.
- Thread-safe access using a re-entrant lock.
- Copy-on-read semantics (callers cannot mutate internal state).
- The pipeline never sees this state; the HTTP boundary checks the cap
  before invoking it.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from threading import RLock
from typing import List, Optional, Sequence

from ..api.models import ChatMessage, SessionStatus
from ..config import settings
from ..retrieval.models import SourceRef

logger = logging.getLogger("geant.sessions")


class QuestionLimitReached(RuntimeError):
    """Raised when a session has used all of its questions."""


class ChatSession:
    """
    Message history and question budget for one browser session.
    """

    def __init__(self, session_id: str, max_turns: int) -> None:
        self.session_id = session_id
        self.max_turns = max_turns
        self.turn_count = 0
        self._reserved = 0
        self._messages: List[ChatMessage] = []

    @property
    def remaining(self) -> int:
        return max(0, self.max_turns - self.turn_count - self._reserved)

    @property
    def messages(self) -> List[ChatMessage]:
        return list(self._messages)

    def can_ask(self) -> bool:
        return self.turn_count + self._reserved < self.max_turns

    def reserve(self) -> None:
        """
        Hold one question of the budget for an in-flight request.

        Raises
        ------
        QuestionLimitReached
            If answered plus in-flight questions already reach the cap.
        """
        if not self.can_ask():
            raise QuestionLimitReached(self.session_id)
        self._reserved += 1

    def release(self) -> None:
        """Give back a reservation whose request failed."""
        self._reserved = max(0, self._reserved - 1)

    def record_turn(
        self,
        question: str,
        answer: str,
        sources: Sequence[SourceRef] = (),
    ) -> None:
        """
        Append one answered question and count it against the budget,
        consuming a reservation when one is held.

        Raises
        ------
        QuestionLimitReached
            If no reservation is held and the session is already at its cap.
        """
        if self._reserved > 0:
            self._reserved -= 1
        elif not self.can_ask():
            raise QuestionLimitReached(self.session_id)

        self._messages.append(ChatMessage(role="user", content=question))
        self._messages.append(
            ChatMessage(role="assistant", content=answer, sources=list(sources))
        )
        self.turn_count += 1

    def status(self) -> SessionStatus:
        return SessionStatus(
            session_id=self.session_id,
            turn_count=self.turn_count,
            max_turns=self.max_turns,
            remaining=self.remaining,
            messages=self.messages,
        )


class SessionStore:
    """
    In-memory store mapping session IDs to ChatSession objects.

    When ``max_sessions`` is set, the least recently created session is
    evicted once the store is full.
    """

    def __init__(
        self,
        max_turns: int = 5,
        max_sessions: Optional[int] = None,
    ) -> None:
        self._sessions: "OrderedDict[str, ChatSession]" = OrderedDict()
        self._lock = RLock()
        self._max_turns = max_turns
        self._max_sessions = max_sessions

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def get_or_create(self, session_id: str) -> ChatSession:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = ChatSession(session_id, self._max_turns)
                self._sessions[session_id] = session
                self._evict()
            return session

    def status(self, session_id: str) -> SessionStatus:
        """Status of a session; unknown IDs report a fresh budget."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return ChatSession(session_id, self._max_turns).status()
            return session.status()

    def can_ask(self, session_id: str) -> bool:
        with self._lock:
            session = self._sessions.get(session_id)
            return session is None or session.can_ask()

    def reserve_turn(self, session_id: str) -> None:
        """
        Atomically check the cap and hold one question for a request that
        is about to run the pipeline.
        """
        with self._lock:
            self.get_or_create(session_id).reserve()

    def release_turn(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                session.release()

    def record_turn(
        self,
        session_id: str,
        question: str,
        answer: str,
        sources: Sequence[SourceRef] = (),
    ) -> SessionStatus:
        with self._lock:
            session = self.get_or_create(session_id)
            session.record_turn(question, answer, sources)
            return session.status()

    def reset(self, session_id: str) -> None:
        """
        Drop a session, restoring its full question budget.
        """
        with self._lock:
            self._sessions.pop(session_id, None)

    # ------------------------------------------------------------------
    # Utility operations
    # ------------------------------------------------------------------

    def clear_all(self) -> None:
        with self._lock:
            self._sessions.clear()

    def has_session(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def _evict(self) -> None:
        if not self._max_sessions or self._max_sessions <= 0:
            return
        while len(self._sessions) > self._max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.debug("Evicted session %s", evicted)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


# Global singleton used by the application.
session_store = SessionStore(
    max_turns=settings.max_questions_per_session,
    max_sessions=settings.max_sessions,
)
