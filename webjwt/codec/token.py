"""Compact three-part token construction and segment decoding."""

import base64
import binascii
import json
from collections.abc import Mapping
from typing import Any

from webjwt.codec.base64url import encode_text, stringify
from webjwt.core.errors import (
    InvalidPayloadError,
    MalformedSegmentError,
    MalformedTokenError,
)

SEPARATOR = "."
TOKEN_PARTS = 3

_PADDING = {0: "", 2: "==", 3: "="}


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-JSON constant: {name}")


def _to_json(value: Mapping[str, Any]) -> str:
    return json.dumps(
        dict(value), separators=(",", ":"), ensure_ascii=False, allow_nan=False
    )


def encode_header(header: Mapping[str, Any], alg: str) -> str:
    """Serialize the header with alg forced to the active algorithm."""
    try:
        text = _to_json({**header, "alg": alg})
    except (TypeError, ValueError) as exc:
        raise InvalidPayloadError(f"header is not JSON serializable: {exc}") from exc
    return stringify(encode_text(text))


def encode_payload(payload: Mapping[str, Any]) -> str:
    """Serialize the claims to a base64url segment."""
    try:
        text = _to_json(payload)
    except (TypeError, ValueError) as exc:
        raise InvalidPayloadError(f"payload is not JSON serializable: {exc}") from exc
    return stringify(encode_text(text))


def build_signing_input(header_part: str, payload_part: str) -> str:
    """Join header and payload segments into the bytes-to-be-signed text."""
    return f"{header_part}{SEPARATOR}{payload_part}"


def assemble_token(signing_input: str, signature_part: str) -> str:
    """Append the signature segment to the signing input."""
    return f"{signing_input}{SEPARATOR}{signature_part}"


def decode_segment(segment: str) -> Any | None:
    """Decode a base64url JSON segment, returning None if it is unparseable.

    A length remainder of 1 can never be valid base64 and is reported as a
    structural error rather than a parse failure.
    """
    raw = segment.replace("-", "+").replace("_", "/")
    padding = _PADDING.get(len(raw) % 4)
    if padding is None:
        raise MalformedSegmentError("illegal base64url string")
    try:
        data = base64.b64decode((raw + padding).encode("ascii"), validate=True)
        return json.loads(data.decode("utf-8"), parse_constant=_reject_constant)
    except (binascii.Error, UnicodeError, ValueError):
        return None


def split_token(token: str) -> tuple[str, str, str]:
    """Split a token into header, payload, and signature segments."""
    parts = token.split(SEPARATOR)
    if len(parts) != TOKEN_PARTS:
        raise MalformedTokenError("token must consist of 3 parts")
    header_part, payload_part, signature_part = parts
    return header_part, payload_part, signature_part
