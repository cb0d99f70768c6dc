"""
Relay configuration management.

Two layers:
- `Settings`: values loaded from environment variables (and `.env`)
- `RelayConfig`: the immutable tables the decision path works from, built
  once from `Settings` and passed explicitly into each service
"""

from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Event actions worth evaluating
ACTIONABLE_ACTIONS: FrozenSet[str] = frozenset({"opened", "labeled", "reopened", "synchronize"})

# Pull request label -> test-intent flag
LABEL_FLAGS: Dict[str, str] = {
    "run init test": "init",
    "run init-lite test": "initLite",
    "run build test": "build",
    "run sonar test": "sonar",
    "run spring test": "spring",
    "run integration test": "integration",
    "run ui unit test": "uiUnit",
    "run unit + web test": "unitWeb",
    "run update test": "update",
    "run integration-lite test": "intLite",
}

# Only granted when the sender is a privileged actor
RESTART_LABEL = "RESTARTED"
RESTART_FLAG = "restart"

# Flag -> plan postfix. Declaration order is the priority order when more
# than one flag is set: earlier entries win.
PLAN_POSTFIXES: Tuple[Tuple[str, str], ...] = (
    ("init", "RTIO"),
    ("initLite", "RTILTO"),
    ("build", "RTBTO"),
    ("sonar", "RTSTO"),
    ("spring", "RTSCTO"),
    ("integration", "RTITO"),
    ("uiUnit", "RTUUTO"),
    ("unitWeb", "RTUWTO"),
    ("update", "RTUTO"),
    ("intLite", "RTILO"),
)

DEFAULT_PLAN_POSTFIX = "RT"
UI_BRANCH_PREFIX = "ui/"
UI_PRIVILEGED_POSTFIX = "RTWMU"
UI_POSTFIX = "RTU"
PRIVILEGED_POSTFIX = "RTWM"

DEFAULT_PROJECT_MAP: Dict[str, str] = {
    "lynx": "AM",
    "lynx-ru": "AER",
    "lynx-in": "AEI",
    "pymhd/go-simple-cache": "MHD",
}

# Header carrying the shared webhook secret (matched case-insensitively)
SECRET_HEADER = "x-hub-signature"


class Settings(BaseSettings):
    """Relay settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Webhook
    webhook_secret: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("secret", "webhook_secret"),
    )

    # Static tables
    project_map: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_PROJECT_MAP))
    privileged_actors: list[str] = Field(default_factory=lambda: ["user1", "user2"])

    # Bamboo
    bamboo_url: str = Field(
        default="https://bamboo.com/path/to/api/",
        validation_alias=AliasChoices("bamboo_url", "bamboo_base_url"),
    )
    bamboo_username: str = "bambooUserName"
    bamboo_password: str = "BambooPassword"
    bamboo_timeout_seconds: float = 5.0
    bamboo_dry_run: bool = False

    # Application
    log_level: str = "INFO"


class BambooCredentials(BaseModel):
    """HTTP Basic credentials presented to Bamboo."""

    model_config = ConfigDict(frozen=True)

    username: str
    password: str = Field(repr=False)


class RelayConfig(BaseModel):
    """Immutable decision tables for one relay instance."""

    model_config = ConfigDict(frozen=True)

    project_map: Mapping[str, str]
    privileged_actors: FrozenSet[str]
    bamboo_url: str
    credentials: BambooCredentials
    label_flags: Mapping[str, str] = Field(default_factory=lambda: MappingProxyType(dict(LABEL_FLAGS)))
    plan_postfixes: Tuple[Tuple[str, str], ...] = PLAN_POSTFIXES
    actionable_actions: FrozenSet[str] = ACTIONABLE_ACTIONS

    @field_validator("project_map", "label_flags")
    @classmethod
    def _read_only(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        # frozen=True only blocks reassignment; the tables themselves must not change either
        return MappingProxyType(dict(value))

    def is_privileged(self, actor: str) -> bool:
        return actor in self.privileged_actors

    def is_actionable(self, action: str) -> bool:
        return action in self.actionable_actions


def build_relay_config(settings: Settings) -> RelayConfig:
    """
    Build the immutable relay tables from loaded settings.

    Args:
        settings: Loaded settings

    Returns:
        RelayConfig ready to hand to the accumulator, selector and composer
    """
    return RelayConfig(
        project_map=dict(settings.project_map),
        privileged_actors=frozenset(settings.privileged_actors),
        bamboo_url=settings.bamboo_url,
        credentials=BambooCredentials(
            username=settings.bamboo_username,
            password=settings.bamboo_password,
        ),
    )


# Global settings instance
settings = Settings()
