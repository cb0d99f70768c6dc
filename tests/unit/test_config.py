"""
Unit tests for configuration management.
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from plan_relay.config import (
    DEFAULT_PROJECT_MAP,
    LABEL_FLAGS,
    PLAN_POSTFIXES,
    Settings,
    build_relay_config,
)


def test_settings_loads_from_environment():
    """Test that settings can be loaded from environment variables."""
    with patch.dict(os.environ, {
        'SECRET': 'test_secret',
        'BAMBOO_URL': 'https://ci.example.com/rest/api/latest/queue/',
        'BAMBOO_USERNAME': 'ci-bot',
        'BAMBOO_PASSWORD': 'hunter2',
        'BAMBOO_TIMEOUT_SECONDS': '2.5',
        'BAMBOO_DRY_RUN': 'true',
        'LOG_LEVEL': 'DEBUG',
        'PROJECT_MAP': '{"acme/web": "WEB"}',
        'PRIVILEGED_ACTORS': '["alice"]',
    }):
        settings = Settings()

        assert settings.webhook_secret == 'test_secret'
        assert settings.bamboo_url == 'https://ci.example.com/rest/api/latest/queue/'
        assert settings.bamboo_username == 'ci-bot'
        assert settings.bamboo_password == 'hunter2'
        assert settings.bamboo_timeout_seconds == 2.5
        assert settings.bamboo_dry_run is True
        assert settings.log_level == 'DEBUG'
        assert settings.project_map == {"acme/web": "WEB"}
        assert settings.privileged_actors == ["alice"]


def test_webhook_secret_alternate_env_name():
    with patch.dict(os.environ, {'WEBHOOK_SECRET': 'other'}):
        os.environ.pop('SECRET', None)
        assert Settings().webhook_secret == 'other'


def test_settings_has_default_values():
    """Test that settings have the reference defaults."""
    with patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=None)

        assert settings.webhook_secret is None
        assert settings.project_map == DEFAULT_PROJECT_MAP
        assert settings.privileged_actors == ["user1", "user2"]
        assert settings.bamboo_url == "https://bamboo.com/path/to/api/"
        assert settings.bamboo_username == "bambooUserName"
        assert settings.bamboo_password == "BambooPassword"
        assert settings.bamboo_timeout_seconds == 5.0
        assert settings.bamboo_dry_run is False
        assert settings.log_level == 'INFO'


def test_build_relay_config():
    settings = Settings(
        _env_file=None,
        privileged_actors=["alice", "bob"],
        project_map={"acme/web": "WEB"},
        bamboo_username="ci-bot",
        bamboo_password="hunter2",
    )

    config = build_relay_config(settings)

    assert config.project_map == {"acme/web": "WEB"}
    assert config.privileged_actors == frozenset({"alice", "bob"})
    assert config.credentials.username == "ci-bot"
    assert config.credentials.password == "hunter2"
    assert config.label_flags == LABEL_FLAGS
    assert config.plan_postfixes == PLAN_POSTFIXES
    assert config.is_privileged("alice")
    assert not config.is_privileged("user1")


def test_relay_config_is_immutable():
    config = build_relay_config(Settings(_env_file=None))

    with pytest.raises(ValidationError):
        config.bamboo_url = "https://elsewhere.example.com/"


def test_relay_config_tables_are_read_only():
    config = build_relay_config(Settings(_env_file=None, project_map={"acme/web": "WEB"}))

    with pytest.raises(TypeError):
        config.project_map["acme/evil"] = "EVIL"
    with pytest.raises(TypeError):
        config.label_flags["ship it"] = "init"

    assert "acme/evil" not in config.project_map
    assert "ship it" not in config.label_flags


@pytest.mark.parametrize("action,expected", [
    ("opened", True),
    ("labeled", True),
    ("reopened", True),
    ("synchronize", True),
    ("closed", False),
    ("unlabeled", False),
    ("", False),
])
def test_actionable_actions(action, expected):
    config = build_relay_config(Settings(_env_file=None))
    assert config.is_actionable(action) is expected


def test_postfix_table_covers_every_label_flag():
    assert {flag for flag, _ in PLAN_POSTFIXES} == set(LABEL_FLAGS.values())
