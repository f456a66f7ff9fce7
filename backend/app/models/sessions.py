"""Session models for conversation management."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TurnRole(str, Enum):
    """Message sender role."""

    USER = "user"
    ASSISTANT = "assistant"


class Turn(BaseModel):
    """One message of a transcript. Never edited after it is appended."""

    model_config = ConfigDict(frozen=True)

    role: TurnRole
    text: str

    @field_validator("role", mode="before")
    @classmethod
    def _legacy_bot_role(cls, value: Any) -> Any:
        # Older stores wrote assistant turns as "bot".
        if value == "bot":
            return TurnRole.ASSISTANT
        return value


class Session(BaseModel):
    """A persisted conversation transcript.

    ``turns`` is serialized as ``messages`` to stay compatible with the
    existing JSON files and frontend.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    turns: list[Turn] = Field(default_factory=list, alias="messages")
    version: int = 0


class SessionCreate(BaseModel):
    """Body of ``POST /{collection}``."""

    title: Optional[str] = None


class SessionUpdate(BaseModel):
    """Body of ``PUT /{collection}/{id}``: the full transcript, never a delta."""

    messages: list[Turn]
    title: Optional[str] = None
    version: Optional[int] = None


class SessionListResponse(BaseModel):
    """Response for listing sessions."""

    sessions: list[Session]
