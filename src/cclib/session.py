"""Session facade for the cloudControl API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any
from urllib.parse import urlencode

from .config import Config
from .credentials import read_credentials_file
from .decoding import decode_content
from .exceptions import AuthorizationRequired, DecodeError, HTTPStatusError
from .resources import Endpoint, get_endpoint, map_record
from .token import Token
from .transport import Transport

logger = logging.getLogger(__name__)

FormData = Mapping[str, Any] | Sequence[tuple[str, Any]]

REGISTER_ADDON_PATH = "/provider/addons"
VERIFY_TOKEN_PATH = "/user/"
VERSION_PATH = "/.meta/version/"


def encode_form(data: FormData | None) -> bytes:
    """Encode form data as ``application/x-www-form-urlencoded``.

    Accepts a mapping (values may be sequences for repeated keys) or a
    sequence of pairs. Insertion order is preserved.
    """
    if not data:
        return b""
    return urlencode(data, doseq=True).encode("ascii")


class Session:
    """Authenticated client for the cloudControl API.

    A session holds the configuration and the current token. ``get``,
    ``post``, ``put`` and ``delete`` all require a token; obtain one with
    :meth:`authenticate` or hand one in with :meth:`set_token`.

    A session is meant for one logical caller flow at a time. Replacing the
    token is not atomic with requests already in flight, and concurrent use
    from several tasks or threads needs external synchronization. Calls are
    never serialized internally.

    Example:
        ```python
        import asyncio
        from cclib import Session

        async def main():
            async with Session() as session:
                await session.authenticate("name@example.com", "secretpassword")
                apps = await session.invoke("app.list")
                print([app.name for app in apps])

        asyncio.run(main())
        ```
    """

    def __init__(self, token: Token | None = None, config: Config | None = None) -> None:
        """Initialize the session.

        Args:
            token: Previously issued token, if any.
            config: Connection settings. Defaults to ``Config.from_env()``.
        """
        self._config = config or Config.from_env()
        self._token = token
        self._transport = Transport(self._config)

    async def __aenter__(self) -> Session:
        """Enter async context manager."""
        await self._transport.__aenter__()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._transport.close()

    @property
    def config(self) -> Config:
        return self._config

    @property
    def token(self) -> Token | None:
        """The current token, or None before authentication."""
        return self._token

    def set_token(self, token: Token | None) -> None:
        """Replace the current token. ``None`` drops authentication."""
        self._token = token
        if token is None:
            logger.info("Token cleared")
        else:
            logger.info("Token replaced")

    def check_token(self) -> bool:
        """Return True if the session holds a token."""
        return self._token is not None

    def requires_token(self) -> Token:
        """Return the current token.

        Raises:
            AuthorizationRequired: If there is no token.
        """
        token = self._token
        if token is None:
            raise AuthorizationRequired()
        return token

    def url(self, path: str) -> str:
        """Build the absolute URL for ``path``, which is appended unchanged.

        Raises:
            ValueError: If ``path`` does not start with a slash.
        """
        if not path.startswith("/"):
            raise ValueError(f'Path must start with "/": {path!r}')
        return f"{self._config.api_url}{path}"

    # ==================== TOKEN ====================

    async def authenticate(self, email: str, password: str) -> Token:
        """Obtain a token with email and password and keep it.

        The token endpoint is called with basic auth and no body. On failure
        the session keeps whatever token it had before.

        Args:
            email: Account email.
            password: Account password.

        Returns:
            The new token.

        Raises:
            AuthorizationRequired: If email or password is empty.
            HTTPStatusError: If the credentials are rejected.
            DecodeError: If the response is not a valid token document.
        """
        content = await self._transport.request(
            "POST",
            self._config.token_source_url,
            email=email,
            password=password,
        )

        token = Token.decode(content)
        if not token.key():
            raise DecodeError("Token response has no token key")

        self._token = token
        logger.info("Token acquired (expires %s)", token.expires or "unknown")
        return token

    async def authenticate_from_file(self, path: Path | str) -> Token:
        """Authenticate with the email and password stored in a credentials file.

        Raises:
            CredentialsFileError: If the file cannot be read.
        """
        email, password = read_credentials_file(path)
        return await self.authenticate(email, password)

    async def verify_token(self) -> bool:
        """Check whether the server still accepts the current token.

        Returns:
            True if the token is valid, False if the server answers 401.

        Raises:
            AuthorizationRequired: If there is no token.
        """
        token = self.requires_token()
        try:
            await self._transport.request("HEAD", self.url(VERIFY_TOKEN_PATH), token=token)
        except HTTPStatusError as e:
            if e.is_unauthorized:
                return False
            raise
        return True

    # ==================== GENERIC VERBS ====================

    async def get(self, path: str) -> Any:
        """GET ``path`` and return the decoded tree."""
        token = self.requires_token()
        content = await self._transport.request("GET", self.url(path), token=token)
        return decode_content(content)

    async def post(self, path: str, data: FormData | None = None) -> Any:
        """POST form ``data`` to ``path`` and return the decoded tree."""
        token = self.requires_token()
        content = await self._transport.request(
            "POST", self.url(path), content=encode_form(data), token=token
        )
        return decode_content(content)

    async def put(self, path: str, data: FormData | None = None) -> Any:
        """PUT form ``data`` to ``path`` and return the decoded tree."""
        token = self.requires_token()
        content = await self._transport.request(
            "PUT", self.url(path), content=encode_form(data), token=token
        )
        return decode_content(content)

    async def delete(self, path: str) -> None:
        """DELETE ``path``.

        The body is decoded and discarded; a malformed body still raises
        ``DecodeError``.
        """
        token = self.requires_token()
        content = await self._transport.request("DELETE", self.url(path), token=token)
        decode_content(content)

    # ==================== RESOURCES ====================

    async def invoke(
        self,
        endpoint: Endpoint | str,
        data: FormData | None = None,
        **params: Any,
    ) -> Any:
        """Call a resource endpoint and map the response onto its record type.

        Args:
            endpoint: An ``Endpoint`` or the dotted name of one in ``ENDPOINTS``.
            data: Form data for POST and PUT endpoints.
            **params: Path template values and optional query parameters.

        Returns:
            A record, a list of records, or None for DELETE endpoints.

        Raises:
            FieldMappingError: If the response does not fit the record type.
        """
        if isinstance(endpoint, str):
            endpoint = get_endpoint(endpoint)

        path = endpoint.resolve(**params)
        method = endpoint.method

        if method == "GET":
            tree = await self.get(path)
        elif method == "POST":
            tree = await self.post(path, data)
        elif method == "PUT":
            tree = await self.put(path, data)
        elif method == "DELETE":
            await self.delete(path)
            return None
        else:
            raise ValueError(f"Unsupported method for {path}: {method}")

        return map_record(endpoint, tree)

    async def check_versions(self) -> Any:
        """Return the API's version information."""
        return await self.get(VERSION_PATH)

    async def register_addon(self, email: str, password: str, data: Any) -> Any:
        """Register an add-on manifest with the platform.

        The manifest is sent as JSON using the provider's credentials, not
        the session token.

        Args:
            email: Provider account email.
            password: Provider account password.
            data: Add-on manifest, serialized to JSON.

        Returns:
            The decoded response tree.
        """
        url = f"{self._config.register_addon_url.rstrip('/')}{REGISTER_ADDON_PATH}"
        content = await self._transport.request(
            "POST",
            url,
            content=json.dumps(data).encode("utf-8"),
            email=email,
            password=password,
        )
        return decode_content(content)
