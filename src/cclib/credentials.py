"""Credentials file reader."""

from __future__ import annotations

from pathlib import Path

from .exceptions import CredentialsFileError


def read_credentials_file(path: Path | str) -> tuple[str, str]:
    """Read an email and password from a two-line credentials file.

    The first line holds the email, the second the password. Further lines
    are ignored.

    Args:
        path: Path to the credentials file.

    Returns:
        The ``(email, password)`` pair.

    Raises:
        CredentialsFileError: If the file is unreadable or has fewer than two lines.
    """
    try:
        text = Path(path).read_text()
    except OSError as e:
        raise CredentialsFileError(f"Cannot read credentials file {path}: {e}") from e

    lines = text.splitlines()
    if len(lines) < 2:
        raise CredentialsFileError("Not enough lines in credentials file.")

    return lines[0], lines[1]
