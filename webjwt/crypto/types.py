"""Type definitions for sign/verify options, decoded tokens, and key handles."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from webjwt.codec.pem import KeyFormat
from webjwt.core.settings import DEFAULT_TYP
from webjwt.crypto.algorithms import Algorithm, AlgorithmParams


class SignOptions(BaseModel):
    """Options for signing a payload."""

    algorithm: str = Algorithm.HS256
    header: dict[str, Any] = Field(default_factory=lambda: {"typ": DEFAULT_TYP})


class VerifyOptions(BaseModel):
    """Options for verifying a token."""

    algorithm: str = Algorithm.HS256
    throw_error: bool = False


class JwtData(BaseModel):
    """Header and payload of a token, unverified.

    Either field is None when its segment could not be parsed.
    """

    header: Any | None = None
    payload: Any | None = None


class KeyUsage(StrEnum):
    """The single operation an imported key may perform."""

    SIGN = "sign"
    VERIFY = "verify"


class CryptoKey(BaseModel):
    """Imported key bound to one algorithm and one usage."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    params: AlgorithmParams
    usage: KeyUsage
    key_format: KeyFormat
    handle: Any
