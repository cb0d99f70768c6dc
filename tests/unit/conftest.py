"""
Shared fixtures for relay unit tests.
"""

import copy

import pytest

from plan_relay.config import BambooCredentials, DEFAULT_PROJECT_MAP, RelayConfig


BASE_PAYLOAD = {
    "action": "opened",
    "sender": {"login": "user3"},
    "pull_request": {
        "number": 42,
        "head": {
            "ref": "feature/login",
            "sha": "0123456789abcdef0123456789abcdef01234567",
            "repo": {"full_name": "lynx"},
        },
        "base": {"ref": "develop"},
    },
}


@pytest.fixture
def relay_config():
    """Relay configuration with the reference tables."""
    return RelayConfig(
        project_map=dict(DEFAULT_PROJECT_MAP),
        privileged_actors=frozenset({"user1", "user2"}),
        bamboo_url="https://bamboo.example.com/rest/api/latest/queue/",
        credentials=BambooCredentials(username="bamboo", password="s3cret"),
    )


@pytest.fixture
def make_payload():
    """Build a pull request webhook payload with selected fields overridden."""
    def _make(action="opened", label=None, sender="user3", head_ref="feature/login",
              repository="lynx", number=42):
        payload = copy.deepcopy(BASE_PAYLOAD)
        payload["action"] = action
        payload["sender"]["login"] = sender
        payload["pull_request"]["number"] = number
        payload["pull_request"]["head"]["ref"] = head_ref
        payload["pull_request"]["head"]["repo"]["full_name"] = repository
        if label is not None:
            payload["label"] = {"name": label}
        return payload
    return _make
