"""Request and response models for the AI task endpoints."""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.sessions import Session


class TokenSize(str, Enum):
    """Reply length presets offered by the chat and code-generation pages."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    XL = "xl"


TOKEN_BUDGETS: dict[TokenSize, int] = {
    TokenSize.SMALL: 256,
    TokenSize.MEDIUM: 512,
    TokenSize.LARGE: 1024,
    TokenSize.XL: 2048,
}


class TranslationDirection(str, Enum):
    CORPORATE_TO_NORMAL = "CorporateToNormal"
    NORMAL_TO_CORPORATE = "NormalToCorporate"


class _TaskRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    integration_id: Optional[str] = Field(default=None, alias="integrationId")


class MessageRequest(_TaskRequest):
    """Body of ``POST /{collection}/{id}/messages``."""

    message: str
    token_size: TokenSize = Field(default=TokenSize.MEDIUM, alias="tokenSize")


class PolicyRequest(_TaskRequest):
    text: str


class TranslateRequest(_TaskRequest):
    text: str
    direction: TranslationDirection = TranslationDirection.CORPORATE_TO_NORMAL


class TicketSuggestionsRequest(_TaskRequest):
    description: str


class TicketPreviewRequest(_TaskRequest):
    issue_type: str = Field(default="Question", alias="issueType")
    urgency: int = Field(default=3, ge=1, le=5)
    description: str


class CodeSegment(BaseModel):
    """A run of plain text or a fenced code block from a generated reply."""

    type: Literal["plain", "code"]
    content: str


class CodegenReply(Session):
    """Updated code-generation session plus the last reply split into segments."""

    segments: list[CodeSegment] = Field(default_factory=list)


class TaskOutput(BaseModel):
    output: str


class TicketSuggestions(BaseModel):
    suggestions: str


class TicketPreview(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    final_ticket: str = Field(alias="finalTicket")
    recommendations: str


class PolicySamples(BaseModel):
    samples: list[str]
