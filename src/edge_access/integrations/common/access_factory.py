from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from requests import Session

from ...adapters.clock import system_clock_ms
from ...adapters.cloudflare.jwt_decoder import AccessJWTDecoder
from ...adapters.cloudflare.key_cache import KeySetCache
from ...adapters.cloudflare.key_fetcher import KeySetFetcher
from ...adapters.cloudflare.key_provider import CachedKeySetProvider
from ...application.use_cases.authenticate import AuthenticateTokenUseCase
from ...application.use_cases.decide_access import AccessDecisionUseCase
from ...config.settings import AccessSettings
from ...domain.constants import ResponseMode
from ...domain.entities import AccessDecision, VerificationResult
from ...domain.ports import Clock, KeySetSource
from ...domain.value_objects import AccessPolicy


@dataclass(slots=True)
class AccessDependencies:
    """
    Framework-agnostic access facade.

    Integrations (FastAPI, ...) adapt this to their own dependency systems.
    """

    settings: AccessSettings
    key_provider: CachedKeySetProvider
    auth_use_case: AuthenticateTokenUseCase
    decision_use_case: AccessDecisionUseCase

    # --- Core operations --------------------------------------------------

    def verify(self, token: str) -> VerificationResult:
        """Token -> VerificationResult (never raises for bad tokens)."""
        return self.auth_use_case.execute(token)

    def decide(self, token: Optional[str], policy: AccessPolicy) -> AccessDecision:
        """Token (or None) + route policy -> terminal decision."""
        return self.decision_use_case.execute(token, policy)

    def clear_key_cache(self) -> None:
        """Force the next verification to refetch key material."""
        self.key_provider.clear()

    # --- Convenience helpers to build policies ----------------------------

    def html_policy(self, *, redirect_on_missing_token: bool = True) -> AccessPolicy:
        return AccessPolicy(
            response_mode=ResponseMode.HTML,
            redirect_on_missing_token=redirect_on_missing_token,
        )

    def api_policy(self) -> AccessPolicy:
        return AccessPolicy(response_mode=ResponseMode.API)


def create_access_dependencies(
        settings: AccessSettings,
        *,
        session: Optional[Session] = None,
        fetcher: Optional[KeySetSource] = None,
        cache: Optional[KeySetCache] = None,
        clock: Clock = system_clock_ms,
) -> AccessDependencies:
    """
    High-level factory: AccessSettings -> AccessDependencies.

    - builds the key fetcher and its read-through cache
    - builds an AccessJWTDecoder bound to the configured audience/issuer
    - wires AuthenticateTokenUseCase + AccessDecisionUseCase
    """
    key_fetcher = fetcher or KeySetFetcher(session=session, timeout=settings.http_timeout)
    key_provider = CachedKeySetProvider(
        fetcher=key_fetcher,
        cache=cache,
        clock=clock,
    )

    decoder = AccessJWTDecoder(
        key_source=key_provider,
        audience=settings.audience,
        issuer=settings.issuer,
        clock=clock,
    )

    auth_uc = AuthenticateTokenUseCase(
        token_decoder=decoder,
        domain=settings.team_domain or "",
    )
    decision_uc = AccessDecisionUseCase(
        authenticate=auth_uc,
        login_url=settings.login_url,
        dev_mode=settings.dev_mode,
    )

    return AccessDependencies(
        settings=settings,
        key_provider=key_provider,
        auth_use_case=auth_uc,
        decision_use_case=decision_uc,
    )
