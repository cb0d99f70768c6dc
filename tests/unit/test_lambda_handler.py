"""
Unit tests for the AWS Lambda entry point.
"""

import base64
import json
from unittest.mock import MagicMock, patch

import pytest

from plan_relay import lambda_handler
from plan_relay.services.bamboo_client import BambooClient
from plan_relay.services.webhook_relay import WebhookRelay


SECRET = "test_secret"


@pytest.fixture
def bamboo_client():
    client = MagicMock(spec=BambooClient)
    client.trigger.return_value = 200
    return client


@pytest.fixture(autouse=True)
def relay(relay_config, bamboo_client):
    """Route the Lambda handler to a relay with a mock Bamboo client."""
    relay = WebhookRelay(config=relay_config, webhook_secret=SECRET, bamboo_client=bamboo_client)
    with patch("plan_relay.lambda_handler.get_webhook_relay", return_value=relay):
        yield relay


def proxy_event(payload, headers=None, encode=False):
    raw = json.dumps(payload)
    if encode:
        raw = base64.b64encode(raw.encode()).decode()
    return {
        "headers": headers if headers is not None else {"X-Hub-Signature": SECRET},
        "body": raw,
        "isBase64Encoded": encode,
    }


def test_triggers_plan(make_payload, bamboo_client):
    response = lambda_handler.handler(proxy_event(make_payload(sender="user2")), None)

    assert response["statusCode"] == 200
    assert response["body"] == "bamboo was invoked"
    assert response["headers"]["content-type"].startswith("text/plain")
    assert bamboo_client.trigger.call_args.args[0].url.endswith("/AM-RTWM")


@pytest.mark.parametrize("header_name", ["x-hub-signature", "X-Hub-Signature", "X-HUB-SIGNATURE"])
def test_header_lookup_is_case_insensitive(make_payload, header_name):
    event = proxy_event(make_payload(), headers={header_name: SECRET})
    assert lambda_handler.handler(event, None)["statusCode"] == 200


def test_missing_header_is_forbidden(make_payload, bamboo_client):
    event = proxy_event(make_payload(), headers={"Content-Type": "application/json"})

    response = lambda_handler.handler(event, None)

    assert response["statusCode"] == 403
    bamboo_client.trigger.assert_not_called()


def test_null_headers_are_forbidden(make_payload):
    event = proxy_event(make_payload())
    event["headers"] = None

    assert lambda_handler.handler(event, None)["statusCode"] == 403


def test_base64_body(make_payload):
    event = proxy_event(make_payload(action="labeled", label="run update test"), encode=True)

    response = lambda_handler.handler(event, None)

    assert response["statusCode"] == 200


def test_invalid_base64_body_is_malformed():
    event = {"headers": {"X-Hub-Signature": SECRET}, "body": "%%%not-base64%%%", "isBase64Encoded": True}

    assert lambda_handler.handler(event, None)["statusCode"] == 500


def test_invalid_base64_body_without_secret_is_forbidden():
    event = {"headers": {}, "body": "%%%not-base64%%%", "isBase64Encoded": True}

    assert lambda_handler.handler(event, None)["statusCode"] == 403


def test_missing_body_is_malformed():
    event = {"headers": {"X-Hub-Signature": SECRET}}

    assert lambda_handler.handler(event, None)["statusCode"] == 500
