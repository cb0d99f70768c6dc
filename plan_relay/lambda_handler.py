"""
AWS Lambda entry point behind an API Gateway proxy integration.

Usage (handler setting): plan_relay.lambda_handler.handler
"""

import base64
import binascii
from typing import Any, Dict, Optional, Union

from plan_relay.config import SECRET_HEADER, settings
from plan_relay.services.webhook_relay import get_webhook_relay
from plan_relay.utils.logging import get_logger, setup_logging

setup_logging(settings.log_level)

logger = get_logger(__name__)

RESPONSE_HEADERS = {"content-type": "text/plain; charset=utf-8"}


def _find_header(headers: Optional[Dict[str, str]], name: str) -> Optional[str]:
    """Case-insensitive header lookup; API Gateway preserves the sender's casing."""
    for key, value in (headers or {}).items():
        if key.lower() == name:
            return value
    return None


def _decode_body(event: Dict[str, Any]) -> Union[str, bytes]:
    body = event.get("body") or ""
    if event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except binascii.Error as e:
            # Left encoded; the relay rejects it as malformed after the auth check
            logger.error(f"Could not decode base64 request body ({e})")
    return body


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Handle one API Gateway proxy event.

    Args:
        event: API Gateway proxy request (headers, body, isBase64Encoded)
        context: Lambda context (unused)

    Returns:
        API Gateway proxy response
    """
    secret = _find_header(event.get("headers"), SECRET_HEADER)
    result = get_webhook_relay().handle(secret, _decode_body(event))
    return {
        "statusCode": result.status_code,
        "headers": RESPONSE_HEADERS,
        "body": result.body,
    }
