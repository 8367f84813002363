"""PEM armor removal and key material resolution."""

import re
from enum import StrEnum

from webjwt.codec.base64url import decode_base64, encode_text

PEM_PREFIX = "-----BEGIN"

_BEGIN_MARKER = re.compile(r"-----BEGIN.*?-----")
_END_MARKER = re.compile(r"-----END.*?-----")
_WHITESPACE = re.compile(r"\s")


class KeyFormat(StrEnum):
    """Key import formats understood by the crypto primitive."""

    RAW = "raw"
    PKCS8 = "pkcs8"
    SPKI = "spki"


def is_pem(secret: str) -> bool:
    """Return True if the secret is PEM-armored key text."""
    return secret.startswith(PEM_PREFIX)


def decode_pem(text: str) -> bytes:
    """Strip PEM markers and whitespace, then base64-decode the body."""
    body = _END_MARKER.sub("", _BEGIN_MARKER.sub("", text))
    return decode_base64(_WHITESPACE.sub("", body))


def decode_key_material(secret: str, *, private: bool) -> tuple[KeyFormat, bytes]:
    """Resolve a secret to an import format and key bytes.

    PEM text becomes DER bytes, imported as PKCS8 when signing and SPKI when
    verifying. Anything else is used as raw UTF-8 key bytes. The algorithm
    family is not consulted here; a mismatch surfaces at key import.
    """
    if is_pem(secret):
        key_format = KeyFormat.PKCS8 if private else KeyFormat.SPKI
        return key_format, decode_pem(secret)
    return KeyFormat.RAW, encode_text(secret)
