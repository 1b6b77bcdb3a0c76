from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...domain.constants import DecisionOutcome, FailureKind
from ...domain.entities import AccessDecision, AccessIdentity
from ...domain.value_objects import AccessPolicy
from ...logging_config import get_logger
from .authenticate import AuthenticateTokenUseCase

logger = get_logger(__name__)


@dataclass(slots=True)
class AccessDecisionUseCase:
    """
    Application use case for one protected request.

    Takes the token found on the request (or None) and the route's
    AccessPolicy and returns a terminal AccessDecision:

        no token      -> BYPASS (dev mode) | REDIRECT | REJECT
        token present -> PROCEED | BYPASS (dev mode) | REDIRECT | REJECT

    A missing token and a failed verification get the same disposition, so
    callers cannot tell why they were turned away.
    """

    authenticate: AuthenticateTokenUseCase
    login_url: str
    dev_mode: bool = False

    def execute(self, token: Optional[str], policy: AccessPolicy) -> AccessDecision:
        if not token:
            if self.dev_mode:
                logger.warning(
                    "Dev mode: allowing unauthenticated request",
                    insecure=True,
                )
                return AccessDecision(outcome=DecisionOutcome.BYPASS)
            return self._deny(policy, failure=None)

        result = self.authenticate.execute(token)
        if result.ok:
            identity = AccessIdentity.from_claims(result.payload)
            return AccessDecision(outcome=DecisionOutcome.PROCEED, identity=identity)

        logger.info(
            "Access token rejected",
            failure=result.failure.value,
            error=str(result.error),
        )
        if self.dev_mode:
            logger.warning(
                "Dev mode: allowing request with rejected token",
                insecure=True,
                failure=result.failure.value,
            )
            return AccessDecision(outcome=DecisionOutcome.BYPASS, failure=result.failure)

        return self._deny(policy, failure=result.failure)

    def _deny(self, policy: AccessPolicy, failure: Optional[FailureKind]) -> AccessDecision:
        if policy.redirects:
            logger.info("Redirecting to identity edge login", location=self.login_url)
            return AccessDecision(
                outcome=DecisionOutcome.REDIRECT,
                failure=failure,
                location=self.login_url,
            )
        return AccessDecision(outcome=DecisionOutcome.REJECT, failure=failure)
