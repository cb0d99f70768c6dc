"""
Webhook relay: authenticates a pull request webhook, selects a Bamboo plan
and triggers it.

The relay is transport-agnostic. The FastAPI route and the Lambda entry point
both hand it the secret header value and the raw body, and render the
returned RelayResult.

Outcomes (see RelayOutcome):
- missing or wrong secret            -> 403
- body does not decode               -> 500
- everything else, including business non-matches and dispatch failures,
  -> 200 with a short explanatory body so GitHub does not flag the delivery
"""

import hmac
from typing import Optional, Union

from pydantic import ValidationError

from plan_relay.config import RelayConfig, Settings, build_relay_config
from plan_relay.models.api_response import RelayOutcome, RelayResult
from plan_relay.models.pr_event import PullRequestEvent
from plan_relay.services.bamboo_client import BambooClient, DispatchError
from plan_relay.services.label_accumulator import LabelAccumulator, UnknownLabelError
from plan_relay.services.plan_selector import (
    PlanSelector,
    UnsupportedRepositoryError,
    resolve_project,
)
from plan_relay.services.request_composer import RequestComposer
from plan_relay.utils.logging import get_logger, log_pr_event


logger = get_logger(__name__)

FORBIDDEN_BODY = "Forbidden"
MALFORMED_BODY = "Internal Server Error"
IGNORED_BODY = "Unsupported action"
UNKNOWN_LABEL_BODY = "Unsupported label received"
TRIGGERED_BODY = "bamboo was invoked"


class WebhookRelay:
    """Orchestrates one webhook delivery end to end. Holds no per-event state."""

    def __init__(
        self,
        config: RelayConfig,
        webhook_secret: Optional[str],
        bamboo_client: BambooClient,
    ):
        self._config = config
        self._webhook_secret = webhook_secret
        self._accumulator = LabelAccumulator(config)
        self._selector = PlanSelector(config)
        self._composer = RequestComposer(config.bamboo_url, config.credentials)
        self._bamboo_client = bamboo_client

    def handle(self, secret_header: Optional[str], body: Union[str, bytes]) -> RelayResult:
        """
        Handle one webhook delivery.

        Args:
            secret_header: Value of the secret header, None if absent
            body: Raw request body

        Returns:
            RelayResult describing the outcome and the response to send
        """
        if secret_header is None:
            logger.error("Got request without github secret header, exit")
            return RelayResult(
                outcome=RelayOutcome.UNAUTHENTICATED, status_code=403, body=FORBIDDEN_BODY
            )
        if not self._secret_matches(secret_header):
            logger.error("Secret in header does not match the configured webhook secret")
            return RelayResult(
                outcome=RelayOutcome.UNAUTHENTICATED, status_code=403, body=FORBIDDEN_BODY
            )

        try:
            event = PullRequestEvent.model_validate_json(body)
        except ValidationError as e:
            logger.error(f"Could not parse json payload ({e})")
            return RelayResult(
                outcome=RelayOutcome.MALFORMED_PAYLOAD, status_code=500, body=MALFORMED_BODY
            )

        event_logger = logger.with_context(
            pr_number=event.pull_request.number,
            repository=event.repository,
            sender=event.sender_login,
        )
        log_pr_event(
            event_logger,
            action=event.action,
            pr_number=event.pull_request.number,
            head_ref=event.pull_request.head.ref,
            head_sha=event.pull_request.head.sha,
            sender=event.sender_login,
        )

        if not self._config.is_actionable(event.action):
            event_logger.info(f"Ignoring action: {event.action!r}")
            return RelayResult(outcome=RelayOutcome.IGNORED, status_code=200, body=IGNORED_BODY)

        try:
            flags = self._accumulator.apply(event)
        except UnknownLabelError:
            return RelayResult(
                outcome=RelayOutcome.UNKNOWN_LABEL, status_code=200, body=UNKNOWN_LABEL_BODY
            )

        try:
            project = resolve_project(self._config, event.repository)
        except UnsupportedRepositoryError as e:
            return RelayResult(
                outcome=RelayOutcome.UNSUPPORTED_REPOSITORY, status_code=200, body=str(e)
            )

        plan = self._selector.select(
            project, flags, event.pull_request.head.ref, event.sender_login
        )
        request = self._composer.build(plan, event)

        try:
            self._bamboo_client.trigger(request)
        except DispatchError as e:
            event_logger.error(f"Failed to trigger plan {plan}: {e}", extra={"plan": plan})
            return RelayResult(
                outcome=RelayOutcome.DISPATCH_FAILED, status_code=200, body=str(e), plan=plan
            )

        event_logger.info(f"Bamboo plan {plan} triggered", extra={"plan": plan})
        return RelayResult(
            outcome=RelayOutcome.TRIGGERED, status_code=200, body=TRIGGERED_BODY, plan=plan
        )

    def _secret_matches(self, secret_header: str) -> bool:
        if not self._webhook_secret:
            # An unset secret must never match an empty header
            return False
        return hmac.compare_digest(
            secret_header.encode("utf-8"), self._webhook_secret.encode("utf-8")
        )


def create_webhook_relay(settings: Settings) -> WebhookRelay:
    """
    Factory function to create a WebhookRelay from loaded settings.

    Args:
        settings: Loaded settings

    Returns:
        A configured WebhookRelay instance
    """
    return WebhookRelay(
        config=build_relay_config(settings),
        webhook_secret=settings.webhook_secret,
        bamboo_client=BambooClient(
            timeout_seconds=settings.bamboo_timeout_seconds,
            dry_run=settings.bamboo_dry_run,
        ),
    )


_webhook_relay: Optional[WebhookRelay] = None


def get_webhook_relay() -> WebhookRelay:
    """Get the process-wide relay built from the global settings."""
    global _webhook_relay
    if _webhook_relay is None:
        from plan_relay.config import settings
        _webhook_relay = create_webhook_relay(settings)
    return _webhook_relay
