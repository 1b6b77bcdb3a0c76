"""
edge_access

Verification core for services behind an SSO identity edge: checks the
edge-issued identity token on each request against the edge's published
RS256 key set, and decides whether the request proceeds, is redirected to
the edge login, or is rejected.
"""

__version__ = "0.1.0"

from .domain.constants import DecisionOutcome, FailureKind, KeyEntryKind, ResponseMode
from .domain.entities import (
    AccessDecision,
    AccessIdentity,
    CacheEntry,
    ParsedToken,
    VerificationResult,
)
from .domain.exceptions import (
    AuthenticationError,
    KeySetFetchError,
    InvalidTokenError,
    MalformedTokenError,
    UnknownKeyError,
    InvalidSignatureError,
    ExpiredTokenError,
    AudienceMismatchError,
    IssuerMismatchError,
)
from .domain.value_objects import AccessPolicy, ProviderDomain
from .domain.ports import KeySetSource, TokenDecoder

from .application.use_cases.authenticate import AuthenticateTokenUseCase
from .application.use_cases.decide_access import AccessDecisionUseCase

from .adapters.cloudflare.jwt_decoder import AccessJWTDecoder, base64url_decode, parse_token
from .adapters.cloudflare.key_cache import KeySetCache
from .adapters.cloudflare.key_fetcher import KeySetFetcher
from .adapters.cloudflare.key_provider import CachedKeySetProvider

from .config import AccessSettings, settings_from_env

__all__ = [
    "__version__",
    # domain core
    "AccessDecision",
    "AccessIdentity",
    "AccessPolicy",
    "CacheEntry",
    "DecisionOutcome",
    "FailureKind",
    "KeyEntryKind",
    "ParsedToken",
    "ProviderDomain",
    "ResponseMode",
    "VerificationResult",
    "KeySetSource",
    "TokenDecoder",
    # exceptions
    "AuthenticationError",
    "KeySetFetchError",
    "InvalidTokenError",
    "MalformedTokenError",
    "UnknownKeyError",
    "InvalidSignatureError",
    "ExpiredTokenError",
    "AudienceMismatchError",
    "IssuerMismatchError",
    # use cases
    "AuthenticateTokenUseCase",
    "AccessDecisionUseCase",
    # adapters
    "AccessJWTDecoder",
    "CachedKeySetProvider",
    "KeySetCache",
    "KeySetFetcher",
    "base64url_decode",
    "parse_token",
    # config
    "AccessSettings",
    "settings_from_env",
]
