"""JWT signing, verification, and unverified decoding."""

import functools
import logging
import math
import time
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError

from webjwt.codec.base64url import encode_text, parse, stringify
from webjwt.codec.pem import decode_key_material
from webjwt.codec.token import (
    assemble_token,
    build_signing_input,
    decode_segment,
    encode_header,
    encode_payload,
    split_token,
)
from webjwt.core.errors import (
    OUTCOME_ERRORS,
    InvalidAlgorithmError,
    InvalidOptionsError,
    InvalidPayloadError,
    InvalidSecretError,
    InvalidTokenError,
    VerifyOutcome,
)
from webjwt.core.settings import JwtSettings
from webjwt.crypto.algorithms import get_algorithm
from webjwt.crypto.primitive import CryptographyPrimitive, CryptoPrimitive
from webjwt.crypto.types import JwtData, KeyUsage, SignOptions, VerifyOptions

logger = logging.getLogger(__name__)

SignOptionsArg = SignOptions | Mapping[str, Any] | str | None
VerifyOptionsArg = VerifyOptions | Mapping[str, Any] | str | None

_TIME_CLAIMS = ("nbf", "exp")


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _merge_options(
    model: type[SignOptions] | type[VerifyOptions],
    defaults: dict[str, Any],
    options: Mapping[str, Any],
) -> Any:
    merged = {**defaults, **options}
    if not isinstance(merged.get("algorithm"), str):
        raise InvalidAlgorithmError("options.algorithm must be a string")
    try:
        return model.model_validate(merged)
    except ValidationError as exc:
        raise InvalidOptionsError(str(exc)) from exc


class JWTManager:
    """Creates and verifies signed tokens for the supported algorithms.

    The algorithm used to verify a token always comes from the caller. The
    ``alg`` field in the token's own header is never consulted, so a token
    cannot pick the algorithm it is checked with.
    """

    def __init__(
        self,
        settings: JwtSettings | None = None,
        primitive: CryptoPrimitive | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings or JwtSettings()
        self._primitive = primitive or CryptographyPrimitive()
        self._clock = clock

    def _now(self) -> int:
        return math.floor(self._clock())

    def _sign_options(self, options: SignOptionsArg) -> SignOptions:
        if isinstance(options, SignOptions):
            return options
        defaults = {
            "algorithm": self._settings.default_algorithm,
            "header": self._settings.default_header(),
        }
        if options is None:
            return SignOptions(**defaults)
        if isinstance(options, str):
            return SignOptions(algorithm=options, header=defaults["header"])
        if isinstance(options, Mapping):
            return _merge_options(SignOptions, defaults, options)
        raise InvalidOptionsError("options must be an algorithm or SignOptions")

    def _verify_options(self, options: VerifyOptionsArg) -> VerifyOptions:
        if isinstance(options, VerifyOptions):
            return options
        defaults = {
            "algorithm": self._settings.default_algorithm,
            "throw_error": self._settings.throw_error,
        }
        if options is None:
            return VerifyOptions(**defaults)
        if isinstance(options, str):
            return VerifyOptions(algorithm=options, throw_error=defaults["throw_error"])
        if isinstance(options, Mapping):
            return _merge_options(VerifyOptions, defaults, options)
        raise InvalidOptionsError("options must be an algorithm or VerifyOptions")

    async def sign(
        self,
        payload: Mapping[str, Any],
        secret: str,
        options: SignOptionsArg = None,
    ) -> str:
        """Sign a payload and return the compact token.

        ``iat`` is always set to the current time. Add ``nbf`` and/or ``exp``
        to the payload to bound the token's validity. A PEM secret is read as
        a PKCS8 private key; any other string is used as raw key bytes.
        """
        if not isinstance(payload, Mapping):
            raise InvalidPayloadError("payload must be an object")
        if not isinstance(secret, str):
            raise InvalidSecretError("secret must be a string")
        opts = self._sign_options(options)
        params = get_algorithm(opts.algorithm)
        alg = str(opts.algorithm)

        claims = {**payload, "iat": self._now()}
        signing_input = build_signing_input(
            encode_header(opts.header, alg), encode_payload(claims)
        )
        key_format, key_data = decode_key_material(secret, private=True)
        key = await self._primitive.import_key(
            key_format, key_data, params, KeyUsage.SIGN
        )
        signature = await self._primitive.sign(params, key, encode_text(signing_input))
        logger.debug("Signed token with %s using a %s key", alg, key_format)
        return assemble_token(signing_input, stringify(signature))

    async def verify(
        self,
        token: str,
        secret: str,
        options: VerifyOptionsArg = None,
    ) -> bool:
        """Verify the token's signature, ``nbf`` and ``exp``.

        Returns True only when the signature is valid and the time claims
        hold. Claim failures return False, or raise a TokenValidationError
        when ``throw_error`` is set. Argument and structure errors always
        raise.
        """
        if not isinstance(token, str):
            raise InvalidTokenError("token must be a string")
        if not isinstance(secret, str):
            raise InvalidSecretError("secret must be a string")
        opts = self._verify_options(options)
        header_part, payload_part, signature_part = split_token(token)
        params = get_algorithm(opts.algorithm)

        outcome = self._check_claims(decode_segment(payload_part))
        if outcome is not None:
            logger.debug("Token rejected: %s", outcome)
            if opts.throw_error:
                raise OUTCOME_ERRORS[outcome]()
            return False

        key_format, key_data = decode_key_material(secret, private=False)
        key = await self._primitive.import_key(
            key_format, key_data, params, KeyUsage.VERIFY
        )
        valid = await self._primitive.verify(
            params,
            key,
            parse(signature_part),
            encode_text(build_signing_input(header_part, payload_part)),
        )
        logger.debug(
            "Signature %s under %s", "valid" if valid else "invalid", opts.algorithm
        )
        return valid

    def _check_claims(self, payload: Any) -> VerifyOutcome | None:
        """Return the first failed claim check, or None if all pass."""
        if not isinstance(payload, dict):
            return VerifyOutcome.PARSE_ERROR
        if any(
            payload.get(claim) is not None and not _is_number(payload[claim])
            for claim in _TIME_CLAIMS
        ):
            return VerifyOutcome.PARSE_ERROR
        now = self._now()
        nbf = payload.get("nbf")
        if nbf is not None and nbf > now:
            return VerifyOutcome.NOT_YET_VALID
        exp = payload.get("exp")
        if exp is not None and exp <= now:
            return VerifyOutcome.EXPIRED
        return None

    def decode(self, token: str) -> JwtData:
        """Return header and payload **without** verifying anything.

        Never base a trust decision on this result; call ``verify`` first.
        """
        if not isinstance(token, str):
            raise InvalidTokenError("token must be a string")
        header_part, payload_part, _ = split_token(token)
        return JwtData(
            header=decode_segment(header_part),
            payload=decode_segment(payload_part),
        )


@functools.cache
def get_default_manager() -> JWTManager:
    """Build the process-wide manager from environment settings."""
    return JWTManager()


async def sign(
    payload: Mapping[str, Any], secret: str, options: SignOptionsArg = None
) -> str:
    """Sign with the default manager."""
    return await get_default_manager().sign(payload, secret, options)


async def verify(token: str, secret: str, options: VerifyOptionsArg = None) -> bool:
    """Verify with the default manager."""
    return await get_default_manager().verify(token, secret, options)


def decode(token: str) -> JwtData:
    """Decode with the default manager. Performs no verification."""
    return get_default_manager().decode(token)
