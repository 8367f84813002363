"""Key import, signing, and verification backed by the cryptography library.

The interface mirrors SubtleCrypto: a key is imported for exactly one
algorithm and one usage, then passed to ``sign`` or ``verify``. ECDSA
signatures use the fixed-width ``r || s`` encoding of JWS rather than DER.
"""

import asyncio
import logging
from typing import Any, Protocol

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from webjwt.codec.pem import KeyFormat
from webjwt.core.errors import KeyImportError
from webjwt.crypto.algorithms import (
    AlgorithmParams,
    CurveName,
    EcdsaParams,
    HashName,
    HmacParams,
    RsaParams,
)
from webjwt.crypto.types import CryptoKey, KeyUsage

logger = logging.getLogger(__name__)

_HASHES: dict[HashName, type[hashes.HashAlgorithm]] = {
    HashName.SHA256: hashes.SHA256,
    HashName.SHA384: hashes.SHA384,
    HashName.SHA512: hashes.SHA512,
}

_CURVES: dict[CurveName, type[ec.EllipticCurve]] = {
    CurveName.P256: ec.SECP256R1,
    CurveName.P384: ec.SECP384R1,
    CurveName.P521: ec.SECP521R1,
}

_CURVE_SIZES: dict[CurveName, int] = {
    CurveName.P256: 32,
    CurveName.P384: 48,
    CurveName.P521: 66,
}

_FORMAT_USAGE: dict[KeyFormat, KeyUsage] = {
    KeyFormat.PKCS8: KeyUsage.SIGN,
    KeyFormat.SPKI: KeyUsage.VERIFY,
}


class CryptoPrimitive(Protocol):
    """Signature primitive used by JWTManager."""

    async def import_key(
        self,
        key_format: KeyFormat,
        key_data: bytes,
        params: AlgorithmParams,
        usage: KeyUsage,
    ) -> CryptoKey: ...

    async def sign(
        self, params: AlgorithmParams, key: CryptoKey, data: bytes
    ) -> bytes: ...

    async def verify(
        self,
        params: AlgorithmParams,
        key: CryptoKey,
        signature: bytes,
        data: bytes,
    ) -> bool: ...


def _check_format_usage(key_format: KeyFormat, usage: KeyUsage) -> None:
    expected = _FORMAT_USAGE.get(key_format)
    if expected is not None and expected != usage:
        raise KeyImportError(f"{key_format} keys cannot be used to {usage}")


def _import_hmac(key_format: KeyFormat, key_data: bytes) -> bytes:
    if key_format != KeyFormat.RAW:
        raise KeyImportError(f"HMAC keys must be imported as raw, not {key_format}")
    if not key_data:
        raise KeyImportError("HMAC key must not be empty")
    return key_data


def _import_rsa(key_format: KeyFormat, key_data: bytes) -> Any:
    if key_format == KeyFormat.PKCS8:
        key = serialization.load_der_private_key(key_data, password=None)
        expected: type = rsa.RSAPrivateKey
    elif key_format == KeyFormat.SPKI:
        key = serialization.load_der_public_key(key_data)
        expected = rsa.RSAPublicKey
    else:
        raise KeyImportError("RSA keys must be imported as pkcs8 or spki")
    if not isinstance(key, expected):
        raise KeyImportError("key data is not an RSA key")
    return key


def _import_ecdsa(key_format: KeyFormat, key_data: bytes, curve: CurveName) -> Any:
    curve_cls = _CURVES[curve]
    if key_format == KeyFormat.PKCS8:
        key = serialization.load_der_private_key(key_data, password=None)
        if not isinstance(key, ec.EllipticCurvePrivateKey):
            raise KeyImportError("key data is not an EC private key")
    elif key_format == KeyFormat.SPKI:
        key = serialization.load_der_public_key(key_data)
        if not isinstance(key, ec.EllipticCurvePublicKey):
            raise KeyImportError("key data is not an EC public key")
    else:
        key = ec.EllipticCurvePublicKey.from_encoded_point(curve_cls(), key_data)
    if key.curve.name != curve_cls.name:
        raise KeyImportError(f"key curve {key.curve.name} does not match {curve}")
    return key


def _check_key(params: AlgorithmParams, key: CryptoKey, usage: KeyUsage) -> None:
    if key.params != params:
        raise KeyImportError("key was imported for a different algorithm")
    if key.usage != usage:
        raise KeyImportError(f"key was imported for {key.usage}, not {usage}")


def _load_handle(
    key_format: KeyFormat,
    key_data: bytes,
    params: AlgorithmParams,
    usage: KeyUsage,
) -> Any:
    _check_format_usage(key_format, usage)
    if isinstance(params, HmacParams):
        return _import_hmac(key_format, key_data)
    if isinstance(params, RsaParams):
        return _import_rsa(key_format, key_data)
    if key_format == KeyFormat.RAW and usage == KeyUsage.SIGN:
        raise KeyImportError("raw ECDSA keys can only verify")
    return _import_ecdsa(key_format, key_data, params.curve)


def _sign(params: AlgorithmParams, key: CryptoKey, data: bytes) -> bytes:
    _check_key(params, key, KeyUsage.SIGN)
    digest = _HASHES[params.hash]()
    if isinstance(params, HmacParams):
        mac = hmac.HMAC(key.handle, digest)
        mac.update(data)
        return mac.finalize()
    if isinstance(params, RsaParams):
        return key.handle.sign(data, padding.PKCS1v15(), digest)
    return _sign_ecdsa(params, key.handle, digest, data)


def _verify(
    params: AlgorithmParams, key: CryptoKey, signature: bytes, data: bytes
) -> bool:
    _check_key(params, key, KeyUsage.VERIFY)
    digest = _HASHES[params.hash]()
    try:
        if isinstance(params, HmacParams):
            mac = hmac.HMAC(key.handle, digest)
            mac.update(data)
            mac.verify(signature)
        elif isinstance(params, RsaParams):
            key.handle.verify(signature, data, padding.PKCS1v15(), digest)
        else:
            return _verify_ecdsa(params, key.handle, digest, signature, data)
    except InvalidSignature:
        return False
    return True


class CryptographyPrimitive:
    """CryptoPrimitive implementation using pyca/cryptography.

    Key parsing and the signature math run in a worker thread, so RSA and
    ECDSA work never blocks the event loop.
    """

    async def import_key(
        self,
        key_format: KeyFormat,
        key_data: bytes,
        params: AlgorithmParams,
        usage: KeyUsage,
    ) -> CryptoKey:
        """Import key bytes for one algorithm and one usage."""
        handle = await asyncio.to_thread(
            _load_handle, key_format, key_data, params, usage
        )
        logger.debug("Imported %s key for %s (%s)", key_format, params.family, usage)
        return CryptoKey(
            params=params, usage=usage, key_format=key_format, handle=handle
        )

    async def sign(self, params: AlgorithmParams, key: CryptoKey, data: bytes) -> bytes:
        """Sign data with a sign-only key."""
        return await asyncio.to_thread(_sign, params, key, data)

    async def verify(
        self,
        params: AlgorithmParams,
        key: CryptoKey,
        signature: bytes,
        data: bytes,
    ) -> bool:
        """Check a signature with a verify-only key."""
        return await asyncio.to_thread(_verify, params, key, signature, data)


def _sign_ecdsa(
    params: EcdsaParams,
    key: ec.EllipticCurvePrivateKey,
    digest: hashes.HashAlgorithm,
    data: bytes,
) -> bytes:
    """Sign and convert the DER signature to fixed-width r || s."""
    size = _CURVE_SIZES[params.curve]
    r, s = decode_dss_signature(key.sign(data, ec.ECDSA(digest)))
    return r.to_bytes(size, "big") + s.to_bytes(size, "big")


def _verify_ecdsa(
    params: EcdsaParams,
    key: ec.EllipticCurvePublicKey,
    digest: hashes.HashAlgorithm,
    signature: bytes,
    data: bytes,
) -> bool:
    size = _CURVE_SIZES[params.curve]
    if len(signature) != 2 * size:
        return False
    r = int.from_bytes(signature[:size], "big")
    s = int.from_bytes(signature[size:], "big")
    try:
        key.verify(encode_dss_signature(r, s), data, ec.ECDSA(digest))
    except InvalidSignature:
        return False
    return True
