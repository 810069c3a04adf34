"""HTTP transport: executes exactly one request against the API."""

from __future__ import annotations

import asyncio
import logging
import ssl
from typing import Any
from urllib.parse import urlsplit

import httpx

from .config import (
    ACCEPT_ENCODING,
    FORM_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    SUCCESS_STATUS_CODES,
    USER_AGENT,
    Config,
)
from .decoding import is_json_payload
from .exceptions import (
    AuthorizationRequired,
    HTTPStatusError,
    TimeoutError,
    TransportError,
)
from .token import Token

logger = logging.getLogger(__name__)

_BODY_METHODS = frozenset({"POST", "PUT"})


def token_authorization(token: Token) -> str:
    """Format the custom authorization header value for ``token``."""
    return f'cc_auth_token="{token.key()}"'


class Transport:
    """Executes one HTTP call and returns the raw body or a classified error.

    The underlying ``httpx.AsyncClient`` is created on first use and keeps
    its connection pool until :meth:`close`. Nothing is retried here.
    """

    def __init__(self, config: Config) -> None:
        """Initialize the transport.

        Args:
            config: TLS and timeout settings for the pooled client.
        """
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Transport:
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _verify(self) -> ssl.SSLContext | bool:
        if not self._config.ssl_verify:
            logger.warning("TLS certificate verification is disabled")
            return False
        ca_certs = self._config.ca_certs
        if ca_certs is not None:
            try:
                return ssl.create_default_context(cafile=str(ca_certs))
            except (OSError, ssl.SSLError) as e:
                raise TransportError(f"Cannot load trust roots from {ca_certs}: {e}", e) from e
        return True

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure the HTTP client is initialized."""
        if self._client is None:
            kwargs: dict[str, Any] = {"verify": self._verify()}
            if self._config.timeout is not None:
                kwargs["timeout"] = httpx.Timeout(self._config.timeout)
            self._client = httpx.AsyncClient(**kwargs)
        return self._client

    async def close(self) -> None:
        """Close the pooled HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def build_headers(
        self,
        method: str,
        url: str,
        content: bytes,
        token: Token | None = None,
        email: str = "",
        password: str = "",
    ) -> tuple[dict[str, str], httpx.Auth | None]:
        """Build request headers and the auth scheme for one call.

        A token wins over credentials. Without either the request is refused
        before anything is sent.

        Returns:
            The header mapping and, for credential auth, an ``httpx.BasicAuth``.

        Raises:
            AuthorizationRequired: If neither a token nor credentials are given.
        """
        headers = {
            "Host": urlsplit(url).netloc,
            "User-Agent": USER_AGENT,
            "Accept-Encoding": ACCEPT_ENCODING,
        }

        auth: httpx.Auth | None = None
        if token is not None:
            headers["Authorization"] = token_authorization(token)
        elif email and password:
            auth = httpx.BasicAuth(email, password)
        else:
            raise AuthorizationRequired("Request not authorized.")

        if method in _BODY_METHODS:
            headers["Content-Type"] = (
                JSON_CONTENT_TYPE if is_json_payload(content) else FORM_CONTENT_TYPE
            )
            headers["Content-Length"] = str(len(content))

        return headers, auth

    async def request(
        self,
        method: str,
        url: str,
        *,
        content: bytes = b"",
        token: Token | None = None,
        email: str = "",
        password: str = "",
    ) -> bytes:
        """Send one request and return the raw response body.

        Args:
            method: HTTP method.
            url: Absolute target URL, used verbatim.
            content: Encoded body for POST and PUT.
            token: Token to authenticate with.
            email: Account email for basic auth when there is no token.
            password: Account password for basic auth when there is no token.

        Returns:
            The body bytes exactly as received, possibly gzip-compressed.

        Raises:
            AuthorizationRequired: If no token or credentials are available.
            HTTPStatusError: If the status is not 200, 201 or 204.
            TimeoutError: If the HTTP stack timed out.
            TransportError: On DNS, TLS or connection failures, or if the
                trust roots cannot be loaded.
            asyncio.CancelledError: If the caller cancelled the request. The
                cancellation is re-raised unchanged.
        """
        method = method.upper()
        headers, auth = self.build_headers(method, url, content, token, email, password)
        client = await self._ensure_client()

        logger.debug("Request >>> %s %s", method, url)
        try:
            response = await client.request(
                method,
                url,
                headers=headers,
                content=content if method in _BODY_METHODS else None,
                auth=auth if auth is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.TimeoutException as e:
            timeout = self._config.timeout
            raise TimeoutError(f"{method} {url} timed out", timeout, e) from e
        except httpx.TransportError as e:
            raise TransportError(f"Cannot connect to {url}: {e}", e) from e
        except asyncio.CancelledError:
            logger.debug("Request cancelled >>> %s %s", method, url)
            raise

        logger.debug(
            "Response <<< %s %s: %d (%d bytes)",
            method,
            url,
            response.status_code,
            len(response.content),
        )

        if response.status_code not in SUCCESS_STATUS_CODES:
            status_line = f"{response.status_code} {response.reason_phrase}".strip()
            raise HTTPStatusError(response.status_code, status_line)

        return response.content
