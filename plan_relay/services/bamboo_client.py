"""
Bamboo client: sends composed plan trigger requests.

Errors are raised, not swallowed, so the relay can report them. There is no
retry: a failed trigger is logged and answered, and the next webhook delivery
starts from scratch.
"""

import time
from typing import Optional

import httpx

from plan_relay.models.api_response import OutboundRequest
from plan_relay.utils.logging import get_logger, log_api_call


logger = get_logger(__name__)


class DispatchError(Exception):
    """Raised when a plan trigger request cannot be delivered to Bamboo."""
    pass


class BambooClient:
    """
    Minimal Bamboo REST client for queueing plan builds.

    Args:
        timeout_seconds: Upper bound for the whole request
        dry_run: Log the request instead of sending it
        http_client: Optional preconfigured httpx.Client (tests inject one
            backed by httpx.MockTransport)
    """

    def __init__(
        self,
        timeout_seconds: float = 5.0,
        dry_run: bool = False,
        http_client: Optional[httpx.Client] = None,
    ):
        self._timeout = httpx.Timeout(timeout_seconds)
        self._dry_run = dry_run
        self._http_client = http_client

    def trigger(self, request: OutboundRequest) -> Optional[int]:
        """
        Send one trigger request.

        Args:
            request: Request built by RequestComposer

        Returns:
            Bamboo response status code, or None in dry-run mode

        Raises:
            DispatchError: On an unbuildable URL, timeout, connection failure
                or a 4xx/5xx answer
        """
        start = time.monotonic()
        try:
            # Same URL object httpx sends, so the log shows the exact encoding
            url = httpx.URL(request.url, params=request.params)
            logger.debug(f"Bamboo will be triggered: {url}")
            if self._dry_run:
                logger.info(f"Dry run, Bamboo not called: {request.method} {url}")
                return None

            if self._http_client is not None:
                response = self._send(self._http_client, request, url)
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    response = self._send(client, request, url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            duration_ms = (time.monotonic() - start) * 1000
            log_api_call(
                logger, "bamboo", request.url, request.method,
                duration_ms=duration_ms, error=str(e) or type(e).__name__,
            )
            raise DispatchError(f"Bamboo request failed: {type(e).__name__}: {e}") from e

        duration_ms = (time.monotonic() - start) * 1000
        if response.status_code >= 400:
            log_api_call(
                logger, "bamboo", request.url, request.method,
                status_code=response.status_code, duration_ms=duration_ms,
                error=response.text[:200],
            )
            raise DispatchError(f"Bamboo API error {response.status_code}")

        log_api_call(
            logger, "bamboo", request.url, request.method,
            status_code=response.status_code, duration_ms=duration_ms,
        )
        return response.status_code

    def _send(self, client: httpx.Client, request: OutboundRequest, url: httpx.URL) -> httpx.Response:
        return client.request(
            request.method,
            url,
            auth=request.auth,
            timeout=self._timeout,
        )
