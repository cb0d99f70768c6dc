"""
Request composer: builds the Bamboo trigger request for a selected plan.
"""

from plan_relay.config import BambooCredentials
from plan_relay.models.api_response import OutboundRequest
from plan_relay.models.pr_event import PullRequestEvent


PULL_NUM_PARAM = "bamboo.variable.pull_num"
PULL_EVENT_PARAM = "bamboo.variable.pull_event"
SENDER_LOGIN_PARAM = "bamboo.variable.sender_login"
PULL_BASE_REF_PARAM = "bamboo.variable.pull_base_ref"
PULL_SHA_PARAM = "bamboo.variable.pull_sha"


class RequestComposer:
    """Composes plan trigger requests; never touches the network."""

    def __init__(self, base_url: str, credentials: BambooCredentials):
        self._base_url = base_url
        self._credentials = credentials

    def build(self, plan: str, event: PullRequestEvent) -> OutboundRequest:
        """
        Build the POST request that triggers `plan` for this event.

        Args:
            plan: Plan name from the selector
            event: Event the plan was selected for

        Returns:
            OutboundRequest with exactly five Bamboo variables as query params
        """
        pull_request = event.pull_request
        params = {
            PULL_NUM_PARAM: str(pull_request.number),
            PULL_EVENT_PARAM: event.action,
            SENDER_LOGIN_PARAM: event.sender_login,
            PULL_BASE_REF_PARAM: pull_request.base.ref,
            PULL_SHA_PARAM: pull_request.head.sha,
        }
        return OutboundRequest(
            url=self._base_url + plan,
            params=params,
            username=self._credentials.username,
            password=self._credentials.password,
        )
