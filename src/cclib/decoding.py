"""Response body decoding.

The API may gzip a body without declaring it, so the decoder sniffs the
payload instead of trusting ``Content-Encoding``: valid UTF-8 is parsed as
JSON directly, anything else is treated as a gzip stream first.
"""

from __future__ import annotations

import gzip
import json
import zlib
from typing import Any

from .exceptions import DecodeError


def _is_utf8(content: bytes) -> bool:
    try:
        content.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


def _parse_json(text: str) -> Any:
    # An empty document is a clean end of stream, not an error.
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON response: {e}", e) from e


def decode_content(content: bytes) -> Any:
    """Decode a response body into a JSON tree.

    Args:
        content: Raw body bytes, plain or gzip-compressed UTF-8 JSON.

    Returns:
        The decoded tree (dict, list, str, int, float, bool or None).

    Raises:
        DecodeError: If the body is neither plain nor gzip-wrapped JSON.
    """
    if _is_utf8(content):
        return _parse_json(content.decode("utf-8"))

    try:
        decompressed = gzip.decompress(content)
    except (OSError, EOFError, zlib.error) as e:
        raise DecodeError(f"Response is neither JSON nor gzip: {e}", e) from e

    try:
        text = decompressed.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"Decompressed response is not UTF-8: {e}", e) from e

    return _parse_json(text)


def is_json_payload(body: bytes) -> bool:
    """Return True if ``body`` is a JSON object or array rather than form data."""
    if not body:
        return False
    try:
        document = json.loads(body)
    except ValueError:
        return False
    return isinstance(document, (dict, list))
