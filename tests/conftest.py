"""Shared test fixtures for webjwt."""

from collections.abc import Iterator

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from pydantic import BaseModel

from webjwt.crypto.jwt_manager import get_default_manager

HMAC_SECRET = "a-sufficiently-long-shared-secret-for-hs512-tests-0123456789abcdef"
RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537


class PemKeyPair(BaseModel):
    """PEM-armored private (PKCS8) and public (SPKI) keys."""

    private_key_pem: str
    public_key_pem: str


def _to_pem_pair(
    private_key: rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey,
) -> PemKeyPair:
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = (
        private_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )
    return PemKeyPair(private_key_pem=private_pem, public_key_pem=public_pem)


def generate_rsa_keypair() -> PemKeyPair:
    """Generate a new RSA-2048 keypair."""
    return _to_pem_pair(
        rsa.generate_private_key(
            public_exponent=RSA_PUBLIC_EXPONENT,
            key_size=RSA_KEY_SIZE,
        )
    )


def generate_ec_keypair(curve: ec.EllipticCurve) -> PemKeyPair:
    """Generate a new EC keypair on the given curve."""
    return _to_pem_pair(ec.generate_private_key(curve))


@pytest.fixture(autouse=True)
def _set_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Pin environment settings and reset the cached default manager."""
    monkeypatch.delenv("WEBJWT_DEFAULT_ALGORITHM", raising=False)
    monkeypatch.delenv("WEBJWT_DEFAULT_TYP", raising=False)
    monkeypatch.delenv("WEBJWT_THROW_ERROR", raising=False)
    get_default_manager.cache_clear()
    yield
    get_default_manager.cache_clear()


@pytest.fixture(scope="session")
def rsa_keys() -> PemKeyPair:
    """A session-wide RSA keypair."""
    return generate_rsa_keypair()


@pytest.fixture(scope="session")
def ec_keys() -> dict[str, PemKeyPair]:
    """Session-wide EC keypairs keyed by algorithm identifier."""
    return {
        "ES256": generate_ec_keypair(ec.SECP256R1()),
        "ES384": generate_ec_keypair(ec.SECP384R1()),
        "ES512": generate_ec_keypair(ec.SECP521R1()),
    }


@pytest.fixture(scope="session")
def signing_keys(
    rsa_keys: PemKeyPair, ec_keys: dict[str, PemKeyPair]
) -> dict[str, tuple[str, str]]:
    """(signing secret, verifying secret) for every supported algorithm."""
    keys = {alg: (HMAC_SECRET, HMAC_SECRET) for alg in ("HS256", "HS384", "HS512")}
    for alg in ("RS256", "RS384", "RS512"):
        keys[alg] = (rsa_keys.private_key_pem, rsa_keys.public_key_pem)
    for alg, pair in ec_keys.items():
        keys[alg] = (pair.private_key_pem, pair.public_key_pem)
    return keys
