"""Relay services package."""

from plan_relay.services.label_accumulator import (
    LabelAccumulator,
    LabelFlagSet,
    UnknownLabelError,
)
from plan_relay.services.plan_selector import (
    PlanSelector,
    UnsupportedRepositoryError,
    resolve_project,
)
from plan_relay.services.request_composer import RequestComposer
from plan_relay.services.bamboo_client import BambooClient, DispatchError
from plan_relay.services.webhook_relay import (
    WebhookRelay,
    create_webhook_relay,
    get_webhook_relay,
)

__all__ = [
    'LabelAccumulator',
    'LabelFlagSet',
    'UnknownLabelError',
    'PlanSelector',
    'UnsupportedRepositoryError',
    'resolve_project',
    'RequestComposer',
    'BambooClient',
    'DispatchError',
    'WebhookRelay',
    'create_webhook_relay',
    'get_webhook_relay',
]
