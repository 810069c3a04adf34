"""Synchronous wrapper for the cloudControl session."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, TypeVar

from .config import Config
from .resources import Endpoint
from .session import FormData, Session
from .token import Token

T = TypeVar("T")


def _run_sync(loop: asyncio.AbstractEventLoop, coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine to completion on ``loop``.

    The session's HTTP connections belong to ``loop``, so every call goes
    through the same loop. When the caller is itself inside a running event
    loop, ``loop`` is driven from a helper thread instead.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return loop.run_until_complete(coro)

    result: Any = None
    exception: BaseException | None = None

    def run_in_thread() -> None:
        nonlocal result, exception
        try:
            result = loop.run_until_complete(coro)
        except BaseException as e:
            exception = e

    thread = threading.Thread(target=run_in_thread)
    thread.start()
    thread.join()

    if exception is not None:
        raise exception
    return result


class SessionSync:
    """Blocking client for the cloudControl API.

    Wraps :class:`Session`; every method blocks until the request finishes.

    Example:
        ```python
        from cclib import SessionSync

        with SessionSync() as session:
            session.authenticate("name@example.com", "secretpassword")
            app = session.invoke("app.read", app_name="myapp")
            print(app.name)
        ```
    """

    def __init__(self, token: Token | None = None, config: Config | None = None) -> None:
        """Initialize the synchronous session.

        Args:
            token: Previously issued token, if any.
            config: Connection settings. Defaults to ``Config.from_env()``.
        """
        self._loop: asyncio.AbstractEventLoop | None = None
        self._session = Session(token=token, config=config)

    def __del__(self) -> None:
        loop = getattr(self, "_loop", None)
        if loop is not None and not loop.is_closed() and not loop.is_running():
            loop.close()

    def __enter__(self) -> SessionSync:
        """Enter context manager."""
        _run_sync(self._get_loop(), self._session.__aenter__())
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit context manager."""
        self.close()

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        """Return the private event loop, creating it on first use."""
        if self._loop is None:
            self._loop = asyncio.new_event_loop()
        elif self._loop.is_closed():
            raise RuntimeError("SessionSync is closed")
        return self._loop

    def close(self) -> None:
        """Close the HTTP client and the private event loop."""
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        _run_sync(loop, self._session.close())
        loop.close()

    @property
    def config(self) -> Config:
        return self._session.config

    @property
    def token(self) -> Token | None:
        return self._session.token

    def set_token(self, token: Token | None) -> None:
        self._session.set_token(token)

    def check_token(self) -> bool:
        return self._session.check_token()

    def authenticate(self, email: str, password: str) -> Token:
        """Obtain a token with email and password and keep it."""
        return _run_sync(self._get_loop(), self._session.authenticate(email, password))

    def authenticate_from_file(self, path: Path | str) -> Token:
        """Authenticate with a two-line credentials file."""
        return _run_sync(self._get_loop(), self._session.authenticate_from_file(path))

    def verify_token(self) -> bool:
        """Check whether the server still accepts the current token."""
        return _run_sync(self._get_loop(), self._session.verify_token())

    def get(self, path: str) -> Any:
        return _run_sync(self._get_loop(), self._session.get(path))

    def post(self, path: str, data: FormData | None = None) -> Any:
        return _run_sync(self._get_loop(), self._session.post(path, data))

    def put(self, path: str, data: FormData | None = None) -> Any:
        return _run_sync(self._get_loop(), self._session.put(path, data))

    def delete(self, path: str) -> None:
        _run_sync(self._get_loop(), self._session.delete(path))

    def invoke(self, endpoint: Endpoint | str, data: FormData | None = None, **params: Any) -> Any:
        """Call a resource endpoint and map the response onto its record type."""
        return _run_sync(self._get_loop(), self._session.invoke(endpoint, data, **params))

    def check_versions(self) -> Any:
        return _run_sync(self._get_loop(), self._session.check_versions())

    def register_addon(self, email: str, password: str, data: Any) -> Any:
        """Register an add-on manifest with the platform."""
        return _run_sync(self._get_loop(), self._session.register_addon(email, password, data))
