"""Session store: one document per collection, full transcripts embedded.

Document schema::

    {
        "sessions": [
            {
                "id": "1739012345678",
                "title": "New Chat",
                "version": 2,
                "messages": [
                    {"role": "user", "text": "Hello!"},
                    {"role": "assistant", "text": "Hi, how can I help?"}
                ]
            }
        ]
    }

The chat and code-generation pages each get an independent store with the
same contract. Transcripts are always replaced wholesale, never patched.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from app.errors import ConflictError, NotFoundError
from app.models.sessions import Session, Turn
from app.storage.backends import DocumentBackend, valid_entries
from app.storage.ids import new_id

logger = logging.getLogger(__name__)

_EMPTY: dict[str, Any] = {"sessions": []}


def _dump(session: Session) -> dict[str, Any]:
    return session.model_dump(mode="json", by_alias=True)


class SessionStore:
    """CRUD over one named collection of sessions."""

    def __init__(
        self,
        backend: DocumentBackend,
        name: str,
        default_title: str,
    ) -> None:
        self.backend = backend
        self.name = name
        self.default_title = default_title

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list(self) -> list[Session]:
        """Return all sessions in storage order."""
        document = self.backend.read(_EMPTY)
        return [
            Session.model_validate(raw)
            for raw in valid_entries(document, "sessions", Session)
        ]

    def get(self, session_id: str) -> Session:
        for session in self.list():
            if session.id == session_id:
                return session
        raise NotFoundError("Session not found")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, title: Optional[str] = None) -> Session:
        """Append an empty session and return it."""
        with self.backend.transaction(_EMPTY) as document:
            sessions = valid_entries(document, "sessions", Session)
            session = Session(
                id=new_id({raw.get("id") for raw in sessions}),
                title=title or self.default_title,
            )
            sessions.append(_dump(session))

        logger.info("Created %s session %s", self.name, session.id)
        return session

    def replace(
        self,
        session_id: str,
        turns: Sequence[Turn],
        title: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> Session:
        """Overwrite a session's transcript, and its title if one is given.

        ``expected_version`` enables a compare-and-set: a mismatch raises
        ``ConflictError`` unless the stored session already holds exactly the
        requested content. The version only moves when something changes.
        """
        with self.backend.transaction(_EMPTY) as document:
            sessions = valid_entries(document, "sessions", Session)
            index = _find(sessions, session_id)
            current = Session.model_validate(sessions[index])

            new_turns = list(turns)
            new_title = title or current.title
            unchanged = current.turns == new_turns and current.title == new_title
            if unchanged:
                return current

            if expected_version is not None and expected_version != current.version:
                raise ConflictError(
                    f"Session was modified (version {current.version}, "
                    f"expected {expected_version})"
                )

            updated = current.model_copy(
                update={
                    "turns": new_turns,
                    "title": new_title,
                    "version": current.version + 1,
                }
            )
            sessions[index] = _dump(updated)

        logger.debug(
            "Saved %s session %s (%d turns, version %d)",
            self.name,
            session_id,
            len(updated.turns),
            updated.version,
        )
        return updated

    def append(self, session_id: str, *turns: Turn) -> Session:
        """Append turns to the stored transcript and persist the whole of it."""
        with self.backend.transaction(_EMPTY) as document:
            sessions = valid_entries(document, "sessions", Session)
            index = _find(sessions, session_id)
            current = Session.model_validate(sessions[index])
            updated = current.model_copy(
                update={
                    "turns": [*current.turns, *turns],
                    "version": current.version + 1,
                }
            )
            sessions[index] = _dump(updated)
        return updated

    def delete(self, session_id: str) -> None:
        with self.backend.transaction(_EMPTY) as document:
            sessions = valid_entries(document, "sessions", Session)
            index = _find(sessions, session_id)
            del sessions[index]
        logger.info("Deleted %s session %s", self.name, session_id)


def _find(sessions: list[dict[str, Any]], session_id: str) -> int:
    for index, raw in enumerate(sessions):
        if raw.get("id") == session_id:
            return index
    raise NotFoundError("Session not found")
