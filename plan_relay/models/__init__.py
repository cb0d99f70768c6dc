"""Data models for the Bamboo plan relay."""

from .api_response import OutboundRequest, RelayOutcome, RelayResult
from .pr_event import (
    Label,
    PullRequest,
    PullRequestBase,
    PullRequestEvent,
    PullRequestHead,
    Repo,
    Sender,
)

__all__ = [
    # PR event models
    "PullRequestEvent",
    "PullRequest",
    "PullRequestHead",
    "PullRequestBase",
    "Repo",
    "Label",
    "Sender",
    # Relay models
    "RelayOutcome",
    "RelayResult",
    "OutboundRequest",
]
