"""Integration models: connection settings for one inference backend."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IntegrationKind(str, Enum):
    """How the backend is reached.

    ``local`` backends are called directly; ``proxied`` ones only through the
    proxy forwarder, which attaches the stored credential.
    """

    LOCAL = "local"
    PROXIED = "proxied"


# Type names written by older configuration pages.
KIND_ALIASES: dict[str, IntegrationKind] = {
    "ollama": IntegrationKind.LOCAL,
    "nutanix": IntegrationKind.PROXIED,
}


def resolve_kind(value: Any) -> Any:
    """Map legacy type names onto ``IntegrationKind`` values."""
    if isinstance(value, str):
        return KIND_ALIASES.get(value.strip().lower(), value)
    return value


class Integration(BaseModel):
    """A registered inference backend as stored and returned by the API."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    kind: IntegrationKind = Field(alias="type")
    endpoint: str
    credential: str = Field(default="", alias="apiKey")
    active: bool = False

    @field_validator("kind", mode="before")
    @classmethod
    def _legacy_type(cls, value: Any) -> Any:
        return resolve_kind(value)


class IntegrationCreate(BaseModel):
    """Body of ``POST /integrations``.

    Every field is optional here so that missing values produce the registry's
    400 message rather than a schema error.
    """

    name: Optional[str] = None
    type: Optional[str] = None
    endpoint: Optional[str] = None
    apiKey: Optional[str] = None


class IntegrationUpdate(BaseModel):
    """Body of ``PUT /integrations/{id}``: field edits, re-validated on save."""

    name: Optional[str] = None
    endpoint: Optional[str] = None
    apiKey: Optional[str] = None


class ActiveFlagUpdate(BaseModel):
    """Body of ``PATCH /integrations/{id}``."""

    active: Optional[bool] = None


class ActiveSelection(BaseModel):
    """Body of ``PATCH /integrations/active``."""

    id: Optional[str] = None
