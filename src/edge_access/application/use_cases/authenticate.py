from __future__ import annotations

from dataclasses import dataclass

from ...domain.entities import VerificationResult
from ...domain.exceptions import AuthenticationError
from ...domain.ports import TokenDecoder


@dataclass(slots=True)
class AuthenticateTokenUseCase:
    """
    Application use case:
    - Decode a token via the TokenDecoder port for this service's domain
    - Report the outcome as a VerificationResult instead of raising

    Callers can branch on `result.failure` without losing which check failed.
    """

    token_decoder: TokenDecoder
    domain: str  # identity edge team domain for this service

    def execute(self, token: str) -> VerificationResult:
        try:
            claims = self.token_decoder.decode(token, self.domain)
        except AuthenticationError as exc:
            return VerificationResult.failed(exc)
        except Exception as exc:
            # Wrap unexpected errors in a generic AuthenticationError
            error = AuthenticationError(f"Token validation failed: {exc}")
            error.__cause__ = exc
            return VerificationResult.failed(error)

        return VerificationResult.success(claims)
