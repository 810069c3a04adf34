"""Token value object issued by the token endpoint."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .exceptions import DecodeError


class Token(BaseModel):
    """Bearer credential returned by ``POST /token/``.

    The server sends a flat JSON object of strings. ``token`` and ``expires``
    are the documented keys; anything else is kept so that a token written to
    disk and read back is identical to the one received.

    Tokens are immutable. A session replaces its token wholesale.

    Example:
        ```python
        token = Token.decode(b'{"token": "A2wY7qgUNM5eTRM3Lz6D4RZHuGmYPP"}')
        token.key()  # "A2wY7qgUNM5eTRM3Lz6D4RZHuGmYPP"
        ```
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    token: str = Field(default="", description="Bearer credential")
    expires: str | None = Field(default=None, description="Expiry timestamp")

    @model_validator(mode="before")
    @classmethod
    def _string_values(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("token document must be a JSON object")
        for name, value in data.items():
            if name == "expires" and value is None:
                continue
            if not isinstance(value, str):
                raise ValueError(f"token field {name!r} must be a string")
        return data

    def key(self) -> str:
        """Return the bearer credential, or an empty string if there is none."""
        return self.token or ""

    @classmethod
    def decode(cls, data: bytes | str) -> Token:
        """Parse a token from its JSON form.

        Args:
            data: Raw JSON object, as sent by the server.

        Returns:
            The decoded token.

        Raises:
            DecodeError: If the document is not a JSON object of strings.
        """
        try:
            document = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"Invalid token document: {e}", e) from e

        try:
            return cls.model_validate(document)
        except ValidationError as e:
            raise DecodeError(f"Invalid token document: {e}", e) from e

    def encode(self) -> bytes:
        """Serialize the token back to a JSON object."""
        return self.model_dump_json(exclude_none=True).encode("utf-8")

    def write(self, path: Path | str) -> None:
        """Write the token to ``path``, readable by the owner only."""
        token_path = Path(path)
        token_path.parent.mkdir(parents=True, exist_ok=True)
        token_path.write_bytes(self.encode())
        token_path.chmod(0o600)

    @classmethod
    def read(cls, path: Path | str) -> Token:
        """Read a token previously stored with :meth:`write`."""
        return cls.decode(Path(path).read_bytes())
