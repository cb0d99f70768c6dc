"""
Plan selector: the decision engine that names the Bamboo plan to trigger.

Precedence, lowest to highest:
1. `{project}-RT` default
2. the postfix of the highest-priority test flag (postfix table order)
3. branch/actor overrides:
   - head ref under `ui/`, privileged sender, no flags or restart -> `-RTWMU`
   - head ref under `ui/`, non-privileged sender (flags ignored)  -> `-RTU`
   - any other ref, privileged sender, no flags or restart        -> `-RTWM`
"""

import logging
from typing import Optional

from plan_relay.config import (
    DEFAULT_PLAN_POSTFIX,
    PRIVILEGED_POSTFIX,
    RESTART_FLAG,
    UI_BRANCH_PREFIX,
    UI_POSTFIX,
    UI_PRIVILEGED_POSTFIX,
    RelayConfig,
)
from plan_relay.services.label_accumulator import LabelFlagSet


logger = logging.getLogger(__name__)


class UnsupportedRepositoryError(Exception):
    """Raised when a repository has no project code in the project table."""

    def __init__(self, repository: str):
        super().__init__("Unsupported repo")
        self.repository = repository


def resolve_project(config: RelayConfig, repository: str) -> str:
    """
    Look up the Bamboo project code for a repository.

    Args:
        config: Relay configuration
        repository: Repository full name from the event

    Returns:
        Project code

    Raises:
        UnsupportedRepositoryError: If the repository is not configured
    """
    project = config.project_map.get(repository)
    if project is None:
        logger.warning(f"Unsupported project for repository {repository!r}")
        raise UnsupportedRepositoryError(repository)
    return project


class PlanSelector:
    """Pure plan selection over an immutable RelayConfig."""

    def __init__(self, config: RelayConfig):
        self._config = config

    def _flag_postfix(self, flags: LabelFlagSet) -> Optional[str]:
        for flag, postfix in self._config.plan_postfixes:
            if flag in flags:
                return postfix
        return None

    def select(self, project: str, flags: LabelFlagSet, head_ref: str, actor: str) -> str:
        """
        Select the plan name for one event.

        Args:
            project: Project code from `resolve_project`
            flags: Flags detected for this event
            head_ref: Pull request head branch name
            actor: Sender login

        Returns:
            Plan name, e.g. `AM-RT` or `AM-RTWMU`
        """
        plan = f"{project}-{DEFAULT_PLAN_POSTFIX}"

        postfix = self._flag_postfix(flags)
        if postfix is not None:
            plan = f"{project}-{postfix}"
            logger.info(f"test flag detected, rewriting default plan to: {plan}")

        privileged = self._config.is_privileged(actor)
        # An empty set and a set holding restart both leave overrides open
        overridable = flags.is_empty() or RESTART_FLAG in flags

        if head_ref.startswith(UI_BRANCH_PREFIX):
            if privileged:
                if overridable:
                    plan = f"{project}-{UI_PRIVILEGED_POSTFIX}"
                    logger.info(
                        f"head ref starts with '{UI_BRANCH_PREFIX}', privileged sender and "
                        f"restart label or no labels set, plan is {plan} now"
                    )
            else:
                plan = f"{project}-{UI_POSTFIX}"
                logger.info(
                    f"head ref starts with '{UI_BRANCH_PREFIX}' and sender is not privileged "
                    f"(labels ignored), plan is {plan}"
                )
        elif overridable and privileged:
            plan = f"{project}-{PRIVILEGED_POSTFIX}"
            logger.info(
                f"privileged sender and restart label or no labels set, plan is {plan} now"
            )

        return plan
