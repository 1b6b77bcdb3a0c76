# src/edge_access/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass

from .constants import KEY_SET_PATH, ResponseMode


@dataclass(frozen=True, slots=True)
class ProviderDomain:
    """
    Team domain of the identity edge, e.g. "myteam.cloudflareaccess.com".

    Comes from static configuration, never from request data.
    """
    value: str

    def __post_init__(self) -> None:
        if not self.value or "/" in self.value or ":" in self.value:
            raise ValueError(f"Invalid provider domain: {self.value!r}")

    @classmethod
    def parse(cls, raw: str) -> ProviderDomain:
        """Accept "https://team.example.com/" style input as well as a bare host."""
        value = raw.strip()
        for prefix in ("https://", "http://"):
            if value.startswith(prefix):
                value = value[len(prefix):]
        return cls(value.rstrip("/"))

    @property
    def certs_url(self) -> str:
        return f"https://{self.value}{KEY_SET_PATH}"

    @property
    def login_url(self) -> str:
        return f"https://{self.value}"

    @property
    def issuer(self) -> str:
        return f"https://{self.value}"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class AccessPolicy:
    """
    Per-route enforcement settings.

    - response_mode: HTML routes may redirect, API routes only ever get 401
    - redirect_on_missing_token: send HTML callers to the edge's login page
    """

    response_mode: ResponseMode = ResponseMode.API
    redirect_on_missing_token: bool = False

    @property
    def redirects(self) -> bool:
        return self.redirect_on_missing_token and self.response_mode is ResponseMode.HTML
