"""Retrying JSON reads."""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from .exceptions import DecodeError, PermissionError, TransportError
from .session import Session

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]

RETRYABLE_ERRORS = (TransportError, DecodeError)


class RetryableJSONFetcher:
    """GET-and-decode with bounded retries and linear backoff.

    Attempt ``n`` that fails sleeps ``n * backoff`` seconds before the next
    one, so three attempts wait at most 1 + 2 units in total.
    """

    def __init__(
        self,
        session: Session,
        max_attempts: int = 3,
        backoff: float = 1.0,
        sleep: Sleep | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.session = session
        self.max_attempts = max_attempts
        self.backoff = backoff
        self._sleep = sleep or asyncio.sleep

    async def fetch(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        max_attempts: int | None = None,
    ) -> dict[str, Any]:
        """Read a JSON object, retrying transient failures.

        Args:
            path: Endpoint path
            params: Query parameters (e.g. a ``where`` predicate)
            max_attempts: Override for the configured attempt count

        Returns:
            Decoded JSON object

        Raises:
            TransportError: If every attempt failed on the network or HTTP level
            DecodeError: If every attempt returned an unusable body
        """
        attempts = self.max_attempts if max_attempts is None else max_attempts
        if attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        attempt = 1
        while True:
            try:
                data = await self.session.get_json(path, params=params)
                if not isinstance(data, dict):
                    raise DecodeError("Expected a JSON object", context=f"GET {path}")
                return data
            except PermissionError:
                raise
            except RETRYABLE_ERRORS as e:
                if attempt >= attempts:
                    raise
                delay = attempt * self.backoff
                logger.debug(
                    "Sleeping for %s seconds before asking url %s (attempt %d/%d failed: %s)",
                    delay, path, attempt, attempts, e,
                )
            await self._sleep(delay)
            attempt += 1
