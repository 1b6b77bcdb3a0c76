# tests/conftest.py
import json
from typing import Any, Dict, List, Optional

import jwt
import pytest
import requests
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm

DOMAIN = "myteam.cloudflareaccess.com"
AUDIENCE = "aud-tag-123"
NOW_MS = 1_700_000_000_000
NOW_S = NOW_MS // 1000


class FakeClock:
    def __init__(self, now_ms: int = NOW_MS) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, raw: Optional[str] = None) -> None:
        self.status_code = status_code
        self._body = body
        self._raw = raw

    def json(self) -> Any:
        if self._raw is not None:
            return json.loads(self._raw)
        return self._body


class FakeSession:
    """Stands in for requests.Session; records every GET."""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None) -> None:
        self.response = response or FakeResponse(body={"keys": []})
        self.error = error
        self.calls: List[str] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.response


class CountingSource:
    """KeySetSource returning a fixed key set and counting calls."""

    def __init__(self, keys: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None) -> None:
        self.keys = keys or {}
        self.error = error
        self.calls: List[str] = []

    def get_keys(self, domain: str) -> Dict[str, Any]:
        self.calls.append(domain)
        if self.error is not None:
            raise self.error
        return dict(self.keys)


def public_jwk(private_key: rsa.RSAPrivateKey, kid: Optional[str]) -> Dict[str, Any]:
    jwk = json.loads(RSAAlgorithm.to_jwk(private_key.public_key()))
    if kid is not None:
        jwk["kid"] = kid
    return jwk


def make_token(
    private_key: rsa.RSAPrivateKey,
    kid: Optional[str] = "key1",
    **claims: Any,
) -> str:
    payload = {
        "iss": f"https://{DOMAIN}",
        "aud": [AUDIENCE],
        "sub": "user-42",
        "email": "dev@example.com",
        "iat": NOW_S - 60,
        "exp": NOW_S + 300,
    }
    payload.update(claims)
    headers = {"kid": kid} if kid is not None else {}
    return jwt.encode(payload, private_key, algorithm="RS256", headers=headers)


@pytest.fixture(scope="session")
def signing_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def key_set_body(signing_key):
    return {"keys": [public_jwk(signing_key, "key1")]}


@pytest.fixture
def session(key_set_body) -> FakeSession:
    return FakeSession(FakeResponse(200, key_set_body))


@pytest.fixture
def requests_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")
