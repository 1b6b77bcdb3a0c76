from __future__ import annotations

from typing import Optional

from requests import Session

from .deps import FastAPIAccess
from .security import extract_token_from_request
from ..common.access_factory import AccessDependencies, create_access_dependencies
from ...adapters.clock import system_clock_ms
from ...adapters.cloudflare.key_cache import KeySetCache
from ...config.settings import AccessSettings
from ...domain.ports import Clock, KeySetSource


def create_fastapi_access(
    settings: AccessSettings,
    *,
    session: Optional[Session] = None,
    fetcher: Optional[KeySetSource] = None,
    cache: Optional[KeySetCache] = None,
    clock: Clock = system_clock_ms,
) -> FastAPIAccess:
    """
    High-level helper for FastAPI apps:

    - Creates AccessDependencies from AccessSettings
    - Wraps them in FastAPIAccess, exposing:

        fastapi_access.protect("html", redirect_on_missing_token=True)
        fastapi_access.protect("api")
        fastapi_access.get_access_identity
        fastapi_access.clear_key_cache()
    """
    access: AccessDependencies = create_access_dependencies(
        settings,
        session=session,
        fetcher=fetcher,
        cache=cache,
        clock=clock,
    )
    return FastAPIAccess(access=access)


__all__ = ["FastAPIAccess", "create_fastapi_access", "extract_token_from_request"]
