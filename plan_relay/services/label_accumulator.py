"""
Label accumulator: turns `labeled` pull request events into test-intent flags.

A fresh LabelFlagSet is created for every event; nothing is kept between
invocations.
"""

import logging
from typing import Iterator, Optional, Set

from plan_relay.config import RESTART_FLAG, RESTART_LABEL, RelayConfig
from plan_relay.models.pr_event import PullRequestEvent


logger = logging.getLogger(__name__)


class UnknownLabelError(Exception):
    """
    Raised when a `labeled` event carries a label outside the known vocabulary.

    This is an early exit, not a failure: the caller answers the webhook with
    an informational 200 and does not trigger any plan.
    """

    def __init__(self, label: str):
        super().__init__(f"Unsupported label: {label!r}")
        self.label = label


class LabelFlagSet:
    """Set of test-intent flags detected for a single event. Grows only."""

    def __init__(self, flags: Optional[Set[str]] = None):
        self._flags: Set[str] = set(flags or ())

    def add(self, flag: str) -> None:
        self._flags.add(flag)

    def is_empty(self) -> bool:
        return not self._flags

    def __contains__(self, flag: object) -> bool:
        return flag in self._flags

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._flags))

    def __len__(self) -> int:
        return len(self._flags)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LabelFlagSet):
            return self._flags == other._flags
        if isinstance(other, (set, frozenset)):
            return self._flags == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"LabelFlagSet({sorted(self._flags)!r})"


class LabelAccumulator:
    """
    Interprets label events against the configured label vocabulary.

    `RESTARTED` is actor-gated: it only produces the restart flag when the
    sender is a privileged actor. For anyone else the event is accepted and
    no flag is set.
    """

    def __init__(self, config: RelayConfig):
        self._config = config

    def apply(self, event: PullRequestEvent, flags: Optional[LabelFlagSet] = None) -> LabelFlagSet:
        """
        Apply one event to a flag set.

        Args:
            event: Decoded pull request event
            flags: Flag set to grow; a new empty one is created when omitted

        Returns:
            The flag set, unchanged for any action other than `labeled`

        Raises:
            UnknownLabelError: If a `labeled` event carries an unknown label
        """
        if flags is None:
            flags = LabelFlagSet()

        if event.action != "labeled":
            return flags

        label = event.label_name
        if label == RESTART_LABEL:
            if self._config.is_privileged(event.sender_login):
                logger.info(f"labeled action with '{label}' label, restart requested")
                flags.add(RESTART_FLAG)
            else:
                logger.info(
                    f"'{label}' label from non-privileged sender {event.sender_login}, no flag set"
                )
            return flags

        flag = self._config.label_flags.get(label)
        if flag is None:
            logger.warning(f"Labeled action with unknown label name {label!r}, skipping...")
            raise UnknownLabelError(label)

        logger.info(f"labeled action with '{label}' label")
        flags.add(flag)
        return flags
