"""
Base REST client with common functionality.

This module provides the foundation for the Strapi and WooCommerce clients,
including session management, retries with exponential backoff, and the
mapping of HTTP failures onto the application's exception taxonomy.
"""

import asyncio
import logging
import math
import time
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import ClientTimeout

from intranet.core.config import get_settings
from intranet.core.logging_config import log_api_call
from intranet.utils.error_handler import AuthException, TransportException

logger = logging.getLogger(__name__)

# Métodos que se pueden reintentar sin riesgo de duplicar registros
IDEMPOTENT_METHODS = {"GET", "PUT", "DELETE"}


class BaseRESTClient:
    """
    Base client for JSON REST APIs.

    Provides connection management, retry with backoff for network errors,
    429 and 5xx responses, and consistent error handling that every
    specialized client inherits.
    """

    service_name = "http"

    def __init__(
        self,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        auth: Optional[aiohttp.BasicAuth] = None,
    ):
        """
        Initialize the base REST client.

        Args:
            base_url: API root, without trailing slash
            headers: Default headers for every request
            auth: Optional basic auth credentials
        """
        self.settings = get_settings()
        self.base_url = base_url.rstrip("/")
        self.headers = headers or {"Content-Type": "application/json"}
        self.auth = auth
        self.max_retries = max(1, self.settings.HTTP_MAX_RETRIES)
        self.backoff_factor = self.settings.RETRY_BACKOFF_FACTOR

        self.session: Optional[aiohttp.ClientSession] = None

    async def initialize(self):
        """Create the HTTP session if it does not exist yet."""
        if self.session is None or self.session.closed:
            timeout = ClientTimeout(
                total=self.settings.HTTP_TIMEOUT_SECONDS,
                connect=self.settings.HTTP_CONNECT_TIMEOUT_SECONDS,
            )
            connector = aiohttp.TCPConnector(limit=100, limit_per_host=30)
            self.session = aiohttp.ClientSession(
                timeout=timeout,
                connector=connector,
                headers=self.headers,
                auth=self.auth,
            )
            logger.debug(f"HTTP session opened for {self.service_name} ({self.base_url})")

    async def close(self):
        """Close the HTTP session and clean up resources."""
        if self.session and not self.session.closed:
            await self.session.close()
            logger.info(f"{self.service_name} client closed")
        self.session = None

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """
        Execute a request with retries and error mapping.

        Args:
            method: HTTP method
            path: Path relative to base_url
            params: Query string parameters
            json: JSON body

        Returns:
            Parsed JSON body (None for empty responses)

        Raises:
            AuthException: On 401/403
            TransportException: On any other HTTP or network failure
        """
        await self.initialize()

        url = self._url(path)
        method = method.upper()
        query = {key: str(value) for key, value in (params or {}).items() if value is not None}
        retryable = method in IDEMPOTENT_METHODS
        last_exception: Optional[TransportException] = None

        for attempt in range(self.max_retries):
            start = time.time()
            try:
                async with self.session.request(method, url, params=query or None, json=json) as response:
                    duration = time.time() - start
                    body = await self._read_body(response)
                    log_api_call(self.service_name, method, path, response.status, duration)

                    if response.status in (401, 403):
                        raise AuthException(
                            message=f"{self.service_name} rechazó las credenciales ({response.status})",
                            service=self.service_name,
                            api_response_code=response.status,
                            endpoint=path,
                        )

                    if response.status == 429 and attempt < self.max_retries - 1:
                        retry_after = self._retry_after_seconds(response.headers.get("Retry-After"))
                        if retry_after is None:
                            await self._backoff(attempt, "HTTP 429")
                        else:
                            logger.warning(f"Rate limit on {self.service_name}, waiting {retry_after}s (attempt {attempt + 1})")
                            await asyncio.sleep(retry_after)
                        continue

                    if response.status >= 400:
                        error = TransportException(
                            message=f"{self.service_name} HTTP {response.status}: {self._error_message(body)}",
                            service=self.service_name,
                            endpoint=path,
                            api_response_code=response.status,
                            response_body=body,
                        )
                        if response.status >= 500 and retryable and attempt < self.max_retries - 1:
                            last_exception = error
                            await self._backoff(attempt, f"HTTP {response.status}")
                            continue
                        raise error

                    return body

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_exception = TransportException(
                    message=f"{self.service_name} network error: {type(e).__name__}: {e}",
                    service=self.service_name,
                    endpoint=path,
                )
                if retryable and attempt < self.max_retries - 1:
                    await self._backoff(attempt, type(e).__name__)
                    continue
                raise last_exception from e

        raise last_exception or TransportException(
            message=f"{self.service_name} request failed after retries",
            service=self.service_name,
            endpoint=path,
        )

    async def _backoff(self, attempt: int, reason: str) -> None:
        wait_time = min(self.backoff_factor**attempt, 10)  # Exponential backoff, max 10s
        logger.warning(f"{self.service_name}: {reason}, retrying in {wait_time}s (attempt {attempt + 1})")
        await asyncio.sleep(wait_time)

    @staticmethod
    def _retry_after_seconds(value: Optional[str]) -> Optional[float]:
        """Seconds from a Retry-After header; None for HTTP-date or malformed values."""
        try:
            seconds = float(value)
        except (TypeError, ValueError):
            return None
        return seconds if math.isfinite(seconds) and seconds >= 0 else None

    @staticmethod
    async def _read_body(response: aiohttp.ClientResponse) -> Any:
        text = await response.text()
        if not text:
            return None
        try:
            return await response.json(content_type=None)
        except ValueError:
            return {"raw": text}

    @staticmethod
    def _error_message(body: Any) -> str:
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                return str(error.get("message") or error)
            return str(body.get("message") or error or body)
        return str(body)
