from typing import Any

import httpx

from rfamsearch.search.client_base import BaseSearchClient
from rfamsearch.search.exceptions import (
    FatalProtocolError,
    RateLimitExceeded,
    RejectedByService,
    TransientNetworkError,
)
from rfamsearch.search.models import PollResult, SubmitResult
from rfamsearch.search.response_parser import parse_poll_response, parse_submit_response

_TRANSIENT_STATUS_CODES = frozenset({502, 503, 504})
_REJECTED_STATUS_CODES = frozenset({400, 422})


class RfamClientAdapter(BaseSearchClient):
    """Search client adapter for the Rfam sequence search REST API."""

    def __init__(
        self,
        *,
        search_url: str,
        timeout_seconds: int,
        max_connections: int = 100,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._search_url = search_url
        self._client = httpx.Client(
            timeout=timeout_seconds,
            limits=httpx.Limits(
                max_connections=max_connections,
                max_keepalive_connections=max_connections,
            ),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    def submit(self, sequence: str) -> SubmitResult:
        response = self._send("POST", self._search_url, data={"seq": sequence})
        if response.status_code in _REJECTED_STATUS_CODES:
            raise RejectedByService(
                f"Search service rejected sequence: HTTP {response.status_code}"
            )
        self._raise_for_status(response)
        return parse_submit_response(self._decode(response))

    def poll(self, result_location: str) -> PollResult:
        response = self._send("GET", result_location)
        self._raise_for_status(response)
        return parse_poll_response(self._decode(response))

    def close(self) -> None:
        self._client.close()

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise TransientNetworkError(f"Search service timed out: {exc}") from exc
        except httpx.TransportError as exc:
            raise TransientNetworkError(f"Search service network error: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        code = response.status_code
        if code < 400:
            return
        if code == 429:
            raise RateLimitExceeded(
                "Search service rate limit exceeded",
                retry_after=_parse_retry_after(response.headers.get("Retry-After")),
            )
        if code in _TRANSIENT_STATUS_CODES:
            raise TransientNetworkError(f"Search service unavailable: HTTP {code}")
        raise FatalProtocolError(f"Search service returned HTTP {code}")

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise FatalProtocolError(f"Invalid JSON response: {exc}") from exc


def _parse_retry_after(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None
