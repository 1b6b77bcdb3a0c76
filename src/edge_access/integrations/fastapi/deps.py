from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import HTTPException, Request, status

from .security import extract_token_from_request
from ..common.access_factory import AccessDependencies
from ...domain.constants import DecisionOutcome, ResponseMode
from ...domain.entities import AccessIdentity
from ...domain.value_objects import AccessPolicy

REQUEST_STATE_ATTR = "access_identity"


@dataclass(slots=True)
class FastAPIAccess:
    """
    FastAPI integration for edge_access.

    Built on top of the framework-agnostic AccessDependencies facade.
    """

    access: AccessDependencies

    # ------------------------------------------------------------------ #
    # Route protection
    # ------------------------------------------------------------------ #

    def protect(
            self,
            response_mode: ResponseMode | str = ResponseMode.API,
            *,
            redirect_on_missing_token: bool = False,
    ) -> Callable[[Request], Optional[AccessIdentity]]:
        """
        Dependency factory: enforce a valid edge token on a route or router.

        The dependency stores the identity (None on a dev-mode bypass) on
        `request.state.access_identity` and returns it. Denied requests get
        a 302 to the edge login (HTML routes that opt in) or a bare 401.
        """
        policy = AccessPolicy(
            response_mode=ResponseMode(response_mode),
            redirect_on_missing_token=redirect_on_missing_token,
        )
        access = self.access
        settings = access.settings

        # must stay sync: key fetches use blocking requests
        def dependency(request: Request) -> Optional[AccessIdentity]:
            token = extract_token_from_request(
                request,
                header_name=settings.token_header,
                cookie_name=settings.token_cookie,
            )
            decision = access.decide(token, policy)

            if decision.outcome is DecisionOutcome.REDIRECT:
                raise HTTPException(
                    status_code=status.HTTP_302_FOUND,
                    headers={"Location": decision.location},
                )
            if decision.outcome is DecisionOutcome.REJECT:
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Unauthorized",
                )

            setattr(request.state, REQUEST_STATE_ATTR, decision.identity)
            return decision.identity

        return dependency

    # ------------------------------------------------------------------ #
    # Downstream helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def get_access_identity(request: Request) -> Optional[AccessIdentity]:
        """Dependency: identity attached by `protect` (None if bypassed)."""
        return getattr(request.state, REQUEST_STATE_ATTR, None)

    def clear_key_cache(self) -> None:
        self.access.clear_key_cache()


"""

from fastapi import APIRouter, Depends
from edge_access.integrations.fastapi import create_fastapi_access
from edge_access.config import settings_from_env

fastapi_access = create_fastapi_access(settings_from_env())

admin = APIRouter(
    dependencies=[Depends(fastapi_access.protect("html", redirect_on_missing_token=True))],
)
api = APIRouter(dependencies=[Depends(fastapi_access.protect("api"))])

@api.get("/me")
def me(identity=Depends(fastapi_access.get_access_identity)):
    return {"sub": identity.subject if identity else None}

"""
