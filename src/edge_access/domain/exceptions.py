from typing import Optional

from .constants import FailureKind


class AuthenticationError(Exception):
    """Raised when authentication fails."""
    kind: FailureKind = FailureKind.UNEXPECTED


class KeySetFetchError(AuthenticationError):
    """Raised when the identity edge's key set cannot be retrieved."""
    kind = FailureKind.KEY_SET_FETCH

    def __init__(self, url: str, status_code: Optional[int] = None, reason: Optional[str] = None) -> None:
        self.url = url
        self.status_code = status_code
        detail = status_code if status_code is not None else reason or "request failed"
        super().__init__(f"Failed to fetch key set from {url}: {detail}")


class InvalidTokenError(AuthenticationError):
    """Raised when token is malformed or invalid."""
    pass


class MalformedTokenError(InvalidTokenError):
    """Raised when the token is not a structurally valid JWT."""
    kind = FailureKind.MALFORMED


class UnknownKeyError(InvalidTokenError):
    """Raised when the token's `kid` is not in the current key set."""
    kind = FailureKind.UNKNOWN_KEY


class InvalidSignatureError(InvalidTokenError):
    """Raised when the RS256 signature does not verify."""
    kind = FailureKind.INVALID_SIGNATURE


class ExpiredTokenError(InvalidTokenError):
    """Raised when `exp` is missing or not in the future."""
    kind = FailureKind.EXPIRED


class AudienceMismatchError(InvalidTokenError):
    kind = FailureKind.AUDIENCE_MISMATCH


class IssuerMismatchError(InvalidTokenError):
    kind = FailureKind.ISSUER_MISMATCH
