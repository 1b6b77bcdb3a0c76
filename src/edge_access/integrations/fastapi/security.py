from __future__ import annotations

from typing import Optional

from fastapi import Request

from ...domain.constants import DEFAULT_TOKEN_COOKIE, DEFAULT_TOKEN_HEADER


def extract_token_from_request(
    request: Request,
    header_name: str = DEFAULT_TOKEN_HEADER,
    cookie_name: str = DEFAULT_TOKEN_COOKIE,
) -> Optional[str]:
    """
    Extract an edge token from either:

      1. the configured header (preferred; injected by the identity edge)
      2. a cookie (e.g. 'CF_Authorization')

    Returns None if no token is found.
    """
    # 1) Header
    header_value = (request.headers.get(header_name) or "").strip()
    if header_name.lower() == "authorization":
        if header_value.startswith("Bearer "):
            header_value = header_value.removeprefix("Bearer ").strip()
        else:
            header_value = ""
    if header_value:
        return header_value

    # 2) Fallback to cookie
    cookie_token = (request.cookies.get(cookie_name) or "").strip()
    if cookie_token:
        return cookie_token

    return None
