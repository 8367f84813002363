"""Unpadded base64url encoding as used by compact JWS serialization."""

import base64
import re

from webjwt.core.errors import DecodeError

_WHITESPACE = re.compile(r"\s")
_ALPHABET = re.compile(r"[A-Za-z0-9+/]*")


def stringify(data: bytes) -> str:
    """Encode bytes as base64url text without padding."""
    return (
        base64.b64encode(data)
        .decode("ascii")
        .replace("=", "")
        .replace("+", "-")
        .replace("/", "_")
    )


def parse(text: str) -> bytes:
    """Decode base64url text, tolerating whitespace and a missing pad tail."""
    return decode_base64(text.replace("-", "+").replace("_", "/"))


def decode_base64(text: str) -> bytes:
    """Decode standard base64 the way browsers' atob does.

    Whitespace is dropped and the ``=`` tail is optional, but a length
    remainder of 1 or any character outside the alphabet is rejected.
    """
    data = _WHITESPACE.sub("", text)
    if len(data) % 4 == 0 and data.endswith("="):
        data = data[:-2] if data.endswith("==") else data[:-1]
    if len(data) % 4 == 1 or not _ALPHABET.fullmatch(data):
        raise DecodeError("invalid base64 input")
    return base64.b64decode(data + "=" * (-len(data) % 4))


def encode_text(text: str) -> bytes:
    """Return the UTF-8 bytes of text."""
    return text.encode("utf-8")
