"""Pull request event data models."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _PayloadModel(BaseModel):
    """Frozen, lenient base: unknown fields are ignored, absent ones default."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # JSON null reads as an absent field, so the field default applies
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class Label(_PayloadModel):
    """Label attached by a `labeled` action."""

    name: str = ""


class Sender(_PayloadModel):
    """Actor who triggered the event."""

    login: str = ""


class Repo(_PayloadModel):
    full_name: str = ""


class PullRequestHead(_PayloadModel):
    ref: str = ""
    sha: str = ""
    # null when the head fork has been deleted
    repo: Optional[Repo] = None


class PullRequestBase(_PayloadModel):
    ref: str = ""


class PullRequest(_PayloadModel):
    number: int = 0
    head: PullRequestHead = Field(default_factory=PullRequestHead)
    base: PullRequestBase = Field(default_factory=PullRequestBase)


class PullRequestEvent(_PayloadModel):
    """GitHub `pull_request` webhook event (only the fields the relay reads)."""

    action: str = ""
    label: Optional[Label] = None
    sender: Sender = Field(default_factory=Sender)
    pull_request: PullRequest = Field(default_factory=PullRequest)

    @property
    def label_name(self) -> str:
        return self.label.name if self.label is not None else ""

    @property
    def sender_login(self) -> str:
        return self.sender.login

    @property
    def repository(self) -> str:
        """Full name of the head repository, used for the project lookup."""
        repo = self.pull_request.head.repo
        return repo.full_name if repo is not None else ""
