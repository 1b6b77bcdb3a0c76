from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..domain.constants import DEFAULT_TOKEN_COOKIE, DEFAULT_TOKEN_HEADER
from ..domain.value_objects import ProviderDomain


@dataclass(slots=True)
class AccessSettings:
    """
    Identity edge connection + enforcement settings.

    Host code decides how to construct this (env, config file, etc.).
    `dev_mode` disables enforcement for the whole process and must never be
    set in production.
    """
    team_domain: Optional[str] = None
    audience: Optional[str] = None
    issuer: Optional[str] = None
    dev_mode: bool = False

    # Token transport
    token_header: str = DEFAULT_TOKEN_HEADER
    token_cookie: str = DEFAULT_TOKEN_COOKIE

    http_timeout: float = 10.0

    def __post_init__(self) -> None:
        if self.team_domain:
            self.team_domain = str(ProviderDomain.parse(self.team_domain))

    @property
    def provider_domain(self) -> ProviderDomain:
        if not self.team_domain:
            raise RuntimeError("Identity edge team domain is not configured")
        return ProviderDomain(self.team_domain)

    @property
    def login_url(self) -> str:
        return self.provider_domain.login_url if self.team_domain else "/"
