"""Static registry mapping algorithm identifiers to primitive parameters."""

from enum import StrEnum
from types import MappingProxyType
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from webjwt.core.errors import AlgorithmNotFoundError, InvalidAlgorithmError


class Algorithm(StrEnum):
    """Supported JWS algorithm identifiers."""

    ES256 = "ES256"
    ES384 = "ES384"
    ES512 = "ES512"
    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"


class HashName(StrEnum):
    """Digest names in SubtleCrypto notation."""

    SHA256 = "SHA-256"
    SHA384 = "SHA-384"
    SHA512 = "SHA-512"


class CurveName(StrEnum):
    """Named curves for ECDSA."""

    P256 = "P-256"
    P384 = "P-384"
    P521 = "P-521"


class HmacParams(BaseModel):
    """HMAC with a given digest."""

    model_config = ConfigDict(frozen=True)

    family: Literal["HMAC"] = "HMAC"
    hash: HashName


class RsaParams(BaseModel):
    """RSASSA-PKCS1-v1_5 with a given digest."""

    model_config = ConfigDict(frozen=True)

    family: Literal["RSASSA-PKCS1-v1_5"] = "RSASSA-PKCS1-v1_5"
    hash: HashName


class EcdsaParams(BaseModel):
    """ECDSA over a named curve with a given digest."""

    model_config = ConfigDict(frozen=True)

    family: Literal["ECDSA"] = "ECDSA"
    hash: HashName
    curve: CurveName


AlgorithmParams = Annotated[
    HmacParams | RsaParams | EcdsaParams, Field(discriminator="family")
]

ALGORITHMS: MappingProxyType[str, AlgorithmParams] = MappingProxyType(
    {
        Algorithm.ES256: EcdsaParams(hash=HashName.SHA256, curve=CurveName.P256),
        Algorithm.ES384: EcdsaParams(hash=HashName.SHA384, curve=CurveName.P384),
        Algorithm.ES512: EcdsaParams(hash=HashName.SHA512, curve=CurveName.P521),
        Algorithm.HS256: HmacParams(hash=HashName.SHA256),
        Algorithm.HS384: HmacParams(hash=HashName.SHA384),
        Algorithm.HS512: HmacParams(hash=HashName.SHA512),
        Algorithm.RS256: RsaParams(hash=HashName.SHA256),
        Algorithm.RS384: RsaParams(hash=HashName.SHA384),
        Algorithm.RS512: RsaParams(hash=HashName.SHA512),
    }
)


def get_algorithm(name: object) -> AlgorithmParams:
    """Look up primitive parameters for an algorithm identifier."""
    if not isinstance(name, str):
        raise InvalidAlgorithmError("options.algorithm must be a string")
    try:
        return ALGORITHMS[name]
    except KeyError:
        raise AlgorithmNotFoundError(name) from None


def supported_algorithms() -> list[str]:
    """Return the registered identifiers in registry order."""
    return [str(name) for name in ALGORITHMS]
