"""Session collection endpoints for the chat and code-generation pages.

Both collections share one contract::

    GET    /{collection}                -> {"sessions": [...]}
    POST   /{collection}                -> created session
    GET    /{collection}/{id}           -> session
    PUT    /{collection}/{id}           -> session with replaced transcript
    DELETE /{collection}/{id}           -> confirmation
    POST   /{collection}/{id}/messages  -> session after one user/assistant exchange
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends

from app.conversation.controller import ConversationController
from app.dependencies import (
    get_chat_store,
    get_codegen_store,
    get_conversation_controller,
)
from app.models.sessions import (
    Session,
    SessionCreate,
    SessionListResponse,
    SessionUpdate,
)
from app.models.tasks import CodegenReply, MessageRequest
from app.storage.session_store import SessionStore

logger = logging.getLogger(__name__)


def build_session_router(get_store: Callable[[], SessionStore]) -> APIRouter:
    """Create the CRUD routes for the collection served by ``get_store``."""
    router = APIRouter()

    @router.get("", response_model=SessionListResponse)
    def list_sessions(
        store: SessionStore = Depends(get_store),
    ) -> dict[str, Any]:
        """Return all sessions in storage order."""
        return {"sessions": store.list()}

    @router.post("", response_model=Session, status_code=201)
    def create_session(
        body: Optional[SessionCreate] = None,
        store: SessionStore = Depends(get_store),
    ) -> Session:
        """Create an empty session; the title defaults per collection."""
        return store.create(body.title if body else None)

    @router.get("/{session_id}", response_model=Session)
    def get_session(
        session_id: str,
        store: SessionStore = Depends(get_store),
    ) -> Session:
        return store.get(session_id)

    @router.put("/{session_id}", response_model=Session)
    def replace_session(
        session_id: str,
        body: SessionUpdate,
        store: SessionStore = Depends(get_store),
    ) -> Session:
        """Overwrite the transcript (and title, if given).

        Send the ``version`` last read to get a 409 instead of silently
        overwriting someone else's change.
        """
        return store.replace(
            session_id,
            body.messages,
            title=body.title,
            expected_version=body.version,
        )

    @router.delete("/{session_id}")
    def delete_session(
        session_id: str,
        store: SessionStore = Depends(get_store),
    ) -> dict[str, str]:
        store.delete(session_id)
        return {"message": "Session deleted"}

    return router


chat_router = build_session_router(get_chat_store)
codegen_router = build_session_router(get_codegen_store)


@chat_router.post("/{session_id}/messages", response_model=Session)
async def send_chat_message(
    session_id: str,
    body: MessageRequest,
    store: SessionStore = Depends(get_chat_store),
    controller: ConversationController = Depends(get_conversation_controller),
) -> Session:
    """Send one chat message and store the reply (or the error) as the answer."""
    return await controller.send_message(
        store,
        session_id,
        body.integration_id,
        body.message,
        token_size=body.token_size,
    )


@codegen_router.post("/{session_id}/messages", response_model=CodegenReply)
async def send_codegen_message(
    session_id: str,
    body: MessageRequest,
    store: SessionStore = Depends(get_codegen_store),
    controller: ConversationController = Depends(get_conversation_controller),
) -> CodegenReply:
    """Send one code-generation request; the reply is also split into segments."""
    return await controller.send_codegen_message(
        store,
        session_id,
        body.integration_id,
        body.message,
        token_size=body.token_size,
    )
