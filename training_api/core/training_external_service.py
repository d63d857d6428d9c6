"""
External service integration for the training game-server API.

This module provides the client used to proxy requests to the upstream API.
"""

import time
from typing import Any, NamedTuple, Optional
from urllib.parse import quote

import httpx
from fastapi import status
from pydantic import ValidationError

from training_api.core.exceptions import (
    UpstreamDecodeError,
    UpstreamStatusError,
    UpstreamTransportError,
)
from training_api.core.logging import get_logger, log_upstream_call
from training_api.domain.models.user import UpstreamUser, UpstreamUserEnvelope

logger = get_logger(__name__)

TRAINING_API_URL = "https://training-server.com/api"
TRAINING_API_TIMEOUT = 10.0


class UpstreamResult(NamedTuple):
    """Uniform result of an upstream call."""

    payload: Any
    status_code: int
    error: Optional[Exception] = None


def status_text(response: httpx.Response) -> str:
    """Status line text such as '404 Not Found'."""
    return f"{response.status_code} {response.reason_phrase}".strip()


class TrainingApiClient:
    """Client for the upstream game-server API."""

    def __init__(
        self,
        base_url: str = TRAINING_API_URL,
        timeout: float = TRAINING_API_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize client without opening connections."""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def connect(self) -> None:
        """Open the shared HTTP connection pool."""
        if not self._client:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
            logger.info(f"Training API client ready for {self.base_url}")

    async def disconnect(self) -> None:
        """Close the HTTP connection pool."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Training API client closed")

    async def _get(self, path: str) -> httpx.Response:
        """
        Perform a single GET against the upstream API.

        Raises:
            UpstreamTransportError: On connection failures and timeouts
            UpstreamStatusError: On any non-200 status
        """
        if not self._client:
            await self.connect()

        url = f"{self.base_url}{path}"
        started = time.perf_counter()
        try:
            response = await self._client.get(path)
        except httpx.HTTPError as exc:
            log_upstream_call(url, status.HTTP_500_INTERNAL_SERVER_ERROR, time.perf_counter() - started, error=str(exc))
            raise UpstreamTransportError(str(exc) or type(exc).__name__) from exc

        log_upstream_call(url, response.status_code, time.perf_counter() - started)

        if response.status_code != status.HTTP_200_OK:
            raise UpstreamStatusError(response.status_code, status_text(response))

        return response

    async def fetch(self, path: str) -> UpstreamResult:
        """
        Fetch a path and decode its body as arbitrary JSON.

        Args:
            path: Path below the base URL, e.g. "/online"

        Returns:
            UpstreamResult: Decoded JSON with 200, or an error payload with
            the upstream status (non-200) or 500 (transport or decode failure).
        """
        try:
            response = await self._get(path)
        except UpstreamStatusError as exc:
            return UpstreamResult({"Error": exc.message}, exc.status_code)
        except UpstreamTransportError as exc:
            logger.error(f"Failed to reach training API at {path}: {exc.message}")
            return UpstreamResult({"Error": exc.message}, status.HTTP_500_INTERNAL_SERVER_ERROR, exc)

        try:
            return UpstreamResult(response.json(), status.HTTP_200_OK)
        except ValueError as exc:
            logger.error(f"Failed to decode training API response from {path}: {exc}")
            return UpstreamResult({"Error": str(exc)}, status.HTTP_500_INTERNAL_SERVER_ERROR, exc)

    async def get_user(self, nickname: str) -> UpstreamUser:
        """
        Get a single user by nickname.

        Args:
            nickname: Upstream login

        Returns:
            UpstreamUser: The decoded user

        Raises:
            UpstreamTransportError: On connection failures and timeouts
            UpstreamStatusError: On any non-200 status
            UpstreamDecodeError: If the body is not a user envelope
        """
        response = await self._get(f"/user/{quote(nickname, safe='')}")

        try:
            envelope = UpstreamUserEnvelope.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise UpstreamDecodeError(str(exc)) from exc

        return envelope.data
