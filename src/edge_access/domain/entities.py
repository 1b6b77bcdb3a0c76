from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Set

from .constants import DecisionOutcome, FailureKind
from .exceptions import AuthenticationError
from .ports import SigningKeySet


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """
    Signing keys for one provider domain and the time they were fetched.

    Entries are replaced wholesale, never mutated.
    """
    keys: SigningKeySet
    fetched_at_ms: int

    def is_fresh(self, now_ms: int, ttl_ms: int) -> bool:
        return now_ms - self.fetched_at_ms < ttl_ms


@dataclass(frozen=True, slots=True)
class ParsedToken:
    header: Mapping[str, Any]
    payload: Mapping[str, Any]
    signature: bytes
    signing_input: bytes

    @property
    def kid(self) -> Optional[str]:
        kid = self.header.get("kid")
        return kid if isinstance(kid, str) else None


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """
    Outcome of verifying one token: either the decoded payload or a typed
    failure, never both.
    """
    payload: Optional[Mapping[str, Any]] = None
    failure: Optional[FailureKind] = None
    error: Optional[AuthenticationError] = None

    @classmethod
    def success(cls, payload: Mapping[str, Any]) -> "VerificationResult":
        return cls(payload=payload)

    @classmethod
    def failed(cls, error: AuthenticationError) -> "VerificationResult":
        return cls(failure=error.kind, error=error)

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass(slots=True)
class AccessIdentity:
    """
    Identity of the caller as asserted by a verified edge token.
    """
    subject: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    issuer: Optional[str] = None
    audiences: Set[str] = field(default_factory=set)
    issued_at: Optional[int] = None
    expires_at: Optional[int] = None
    claims: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "AccessIdentity":
        aud_raw = claims.get("aud") or []
        if isinstance(aud_raw, str):
            audiences = {aud_raw}
        elif isinstance(aud_raw, (list, tuple, set)):
            audiences = {a for a in aud_raw if isinstance(a, str)}
        else:
            audiences = set()

        return cls(
            subject=claims.get("sub"),
            email=claims.get("email"),
            name=claims.get("name"),
            issuer=claims.get("iss"),
            audiences=audiences,
            issued_at=claims.get("iat"),
            expires_at=claims.get("exp"),
            claims=dict(claims),
        )


@dataclass(frozen=True, slots=True)
class AccessDecision:
    """
    Terminal decision for one request.

    - PROCEED: identity is set
    - BYPASS: dev mode, identity may be None
    - REDIRECT: location is the edge's login entry point
    - REJECT: respond 401
    """
    outcome: DecisionOutcome
    identity: Optional[AccessIdentity] = None
    failure: Optional[FailureKind] = None
    location: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.outcome in (DecisionOutcome.PROCEED, DecisionOutcome.BYPASS)
