"""Exception hierarchy for token signing, verification, and decoding."""

from enum import StrEnum


class JwtError(Exception):
    """Base class for all webjwt errors."""


class InvalidArgumentError(JwtError, TypeError):
    """An argument has the wrong type."""


class InvalidPayloadError(InvalidArgumentError):
    """Payload is not a JSON object."""


class InvalidSecretError(InvalidArgumentError):
    """Secret is not a string."""


class InvalidTokenError(InvalidArgumentError):
    """Token is not a string."""


class InvalidAlgorithmError(InvalidArgumentError):
    """Algorithm identifier is not a string."""


class InvalidOptionsError(InvalidArgumentError):
    """Options are neither an algorithm nor an options object."""


class AlgorithmNotFoundError(JwtError, LookupError):
    """Algorithm identifier is not registered."""

    def __init__(self, algorithm: str) -> None:
        super().__init__(f"algorithm not found: {algorithm}")
        self.algorithm = algorithm


class MalformedTokenError(JwtError, ValueError):
    """Token does not have the three-part structure."""


class MalformedSegmentError(MalformedTokenError):
    """Segment length is not a valid base64url length."""


class DecodeError(JwtError, ValueError):
    """Text is not valid base64."""


class KeyImportError(JwtError, ValueError):
    """Key material cannot be imported or used for the requested operation."""


class VerifyOutcome(StrEnum):
    """Claim-level reasons a token fails verification."""

    PARSE_ERROR = "PARSE_ERROR"
    NOT_YET_VALID = "NOT_YET_VALID"
    EXPIRED = "EXPIRED"


class TokenValidationError(JwtError):
    """Raised by verify when throw_error is set and the token is rejected."""

    outcome: VerifyOutcome

    def __init__(self) -> None:
        super().__init__(self.outcome.value)


class ParseError(TokenValidationError):
    """Payload segment could not be parsed."""

    outcome = VerifyOutcome.PARSE_ERROR


class NotYetValidError(TokenValidationError):
    """The nbf claim lies in the future."""

    outcome = VerifyOutcome.NOT_YET_VALID


class ExpiredError(TokenValidationError):
    """The exp claim has passed."""

    outcome = VerifyOutcome.EXPIRED


OUTCOME_ERRORS: dict[VerifyOutcome, type[TokenValidationError]] = {
    VerifyOutcome.PARSE_ERROR: ParseError,
    VerifyOutcome.NOT_YET_VALID: NotYetValidError,
    VerifyOutcome.EXPIRED: ExpiredError,
}
