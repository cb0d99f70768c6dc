"""
Utility modules for the Bamboo plan relay.
"""

from plan_relay.utils.logging import (
    get_logger,
    setup_logging,
    log_pr_event,
    log_api_call,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "log_pr_event",
    "log_api_call",
]
