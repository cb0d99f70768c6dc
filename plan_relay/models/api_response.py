"""Relay outcome and response data models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class RelayOutcome(str, Enum):
    """How a single webhook invocation ended."""

    UNAUTHENTICATED = "unauthenticated"
    MALFORMED_PAYLOAD = "malformed_payload"
    IGNORED = "ignored"
    UNKNOWN_LABEL = "unknown_label"
    UNSUPPORTED_REPOSITORY = "unsupported_repository"
    DISPATCH_FAILED = "dispatch_failed"
    TRIGGERED = "triggered"


class RelayResult(BaseModel):
    """Transport-independent response to a webhook delivery."""

    outcome: RelayOutcome
    status_code: int
    body: str
    plan: Optional[str] = None


class OutboundRequest(BaseModel):
    """Bamboo plan trigger request, composed but not yet sent."""

    method: str = "POST"
    url: str
    params: dict[str, str]
    username: str
    password: str = Field(repr=False)

    @property
    def auth(self) -> tuple[str, str]:
        return (self.username, self.password)
