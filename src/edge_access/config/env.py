from __future__ import annotations

import os

from ..domain.constants import DEFAULT_TOKEN_COOKIE, DEFAULT_TOKEN_HEADER
from .settings import AccessSettings


def settings_from_env() -> AccessSettings:
    def _bool(key: str, default: bool = False) -> bool:
        raw = os.getenv(key)
        if raw is None:
            return default
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}

    dev_mode = _bool("DEV_MODE", False)
    team_domain = os.getenv("CF_ACCESS_TEAM_DOMAIN")
    audience = os.getenv("CF_ACCESS_AUD")
    if not dev_mode and not all([team_domain, audience]):
        missing = [
            n
            for n, v in [
                ("CF_ACCESS_TEAM_DOMAIN", team_domain),
                ("CF_ACCESS_AUD", audience),
            ]
            if not v
        ]
        raise RuntimeError(f"Missing identity edge settings: {', '.join(missing)}")

    timeout_raw = os.getenv("CF_ACCESS_HTTP_TIMEOUT")
    try:
        http_timeout = float(timeout_raw) if timeout_raw else 10.0
    except ValueError as exc:
        raise RuntimeError(f"Invalid CF_ACCESS_HTTP_TIMEOUT: {timeout_raw!r}") from exc

    return AccessSettings(
        team_domain=team_domain or None,
        audience=audience or None,
        issuer=os.getenv("CF_ACCESS_ISSUER") or None,
        dev_mode=dev_mode,
        token_header=os.getenv("CF_ACCESS_TOKEN_HEADER") or DEFAULT_TOKEN_HEADER,
        token_cookie=os.getenv("CF_ACCESS_TOKEN_COOKIE") or DEFAULT_TOKEN_COOKIE,
        http_timeout=http_timeout,
    )
