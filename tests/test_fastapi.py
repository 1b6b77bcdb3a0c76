# tests/test_fastapi.py
import pytest
from fastapi import APIRouter, Depends, FastAPI
from fastapi.testclient import TestClient

from edge_access.adapters.cloudflare.key_cache import KeySetCache
from edge_access.config.settings import AccessSettings
from edge_access.domain.entities import CacheEntry
from edge_access.domain.exceptions import KeySetFetchError
from edge_access.integrations.fastapi import create_fastapi_access

from conftest import AUDIENCE, DOMAIN, CountingSource, make_token

LOGIN_URL = "https://myteam.cloudflareaccess.com"


def _build_app(fastapi_access):
    app = FastAPI()

    admin = APIRouter(
        prefix="/_admin",
        dependencies=[Depends(fastapi_access.protect("html", redirect_on_missing_token=True))],
    )
    api = APIRouter(prefix="/api", dependencies=[Depends(fastapi_access.protect("api"))])
    plain = APIRouter(prefix="/page", dependencies=[Depends(fastapi_access.protect("html"))])

    @admin.get("/")
    def admin_index():
        return {"page": "admin"}

    @api.get("/me")
    def me(identity=Depends(fastapi_access.get_access_identity)):
        return {"sub": identity.subject if identity else None}

    @plain.get("/")
    def page():
        return {"page": "plain"}

    app.include_router(admin)
    app.include_router(api)
    app.include_router(plain)
    return app


@pytest.fixture
def key_source(signing_key):
    return CountingSource(keys={"key1": signing_key.public_key()})


@pytest.fixture
def settings():
    return AccessSettings(team_domain=DOMAIN, audience=AUDIENCE)


@pytest.fixture
def fastapi_access(settings, key_source, clock):
    return create_fastapi_access(settings, fetcher=key_source, clock=clock)


@pytest.fixture
def client(fastapi_access):
    return TestClient(_build_app(fastapi_access), follow_redirects=False)


# --- missing token --------------------------------------------------------


def test_api_without_token_is_unauthorized(client):
    response = client.get("/api/me")

    assert response.status_code == 401
    assert "location" not in response.headers
    assert response.json() == {"detail": "Unauthorized"}


def test_html_without_token_redirects_to_login(client):
    response = client.get("/_admin/")

    assert response.status_code == 302
    assert response.headers["location"] == LOGIN_URL


def test_html_without_redirect_flag_is_unauthorized(client):
    assert client.get("/page/").status_code == 401


def test_dev_mode_without_token_proceeds_unauthenticated(key_source, clock):
    settings = AccessSettings(dev_mode=True)
    fastapi_access = create_fastapi_access(settings, fetcher=key_source, clock=clock)
    client = TestClient(_build_app(fastapi_access), follow_redirects=False)

    response = client.get("/api/me")

    assert response.status_code == 200
    assert response.json() == {"sub": None}
    assert key_source.calls == []


# --- token present --------------------------------------------------------


def test_valid_token_with_cached_key_proceeds(settings, signing_key, clock):
    cache = KeySetCache()
    cache.put(DOMAIN, CacheEntry(keys={"key1": signing_key.public_key()}, fetched_at_ms=clock()))
    unreachable = CountingSource(error=AssertionError("key set should come from the cache"))
    fastapi_access = create_fastapi_access(settings, fetcher=unreachable, cache=cache, clock=clock)
    client = TestClient(_build_app(fastapi_access), follow_redirects=False)

    response = client.get(
        "/api/me",
        headers={"Cf-Access-Jwt-Assertion": make_token(signing_key, kid="key1")},
    )

    assert response.status_code == 200
    assert response.json() == {"sub": "user-42"}
    assert unreachable.calls == []


def test_cookie_is_used_when_header_missing(client, signing_key):
    client.cookies.set("CF_Authorization", make_token(signing_key, sub="cookie-user"))

    response = client.get("/api/me")

    assert response.status_code == 200
    assert response.json() == {"sub": "cookie-user"}


def test_header_wins_over_cookie(client, signing_key):
    client.cookies.set("CF_Authorization", make_token(signing_key, sub="cookie-user"))

    response = client.get(
        "/api/me",
        headers={"Cf-Access-Jwt-Assertion": make_token(signing_key, sub="header-user")},
    )

    assert response.json() == {"sub": "header-user"}


def test_invalid_token_api_is_unauthorized_without_detail(client, other_key):
    response = client.get("/api/me", headers={"Cf-Access-Jwt-Assertion": make_token(other_key)})

    assert response.status_code == 401
    assert response.json() == {"detail": "Unauthorized"}


def test_invalid_token_html_redirects(client):
    response = client.get("/_admin/", headers={"Cf-Access-Jwt-Assertion": "not-a-jwt"})

    assert response.status_code == 302
    assert response.headers["location"] == LOGIN_URL


def test_key_set_fetch_failure_is_unauthorized_not_5xx(settings, signing_key, clock):
    failing = CountingSource(error=KeySetFetchError("https://x", status_code=500))
    fastapi_access = create_fastapi_access(settings, fetcher=failing, clock=clock)
    client = TestClient(_build_app(fastapi_access), follow_redirects=False)

    response = client.get("/api/me", headers={"Cf-Access-Jwt-Assertion": make_token(signing_key)})

    assert response.status_code == 401


def test_keys_fetched_once_across_requests_and_after_clear(client, fastapi_access, key_source, signing_key):
    headers = {"Cf-Access-Jwt-Assertion": make_token(signing_key)}

    client.get("/api/me", headers=headers)
    client.get("/api/me", headers=headers)
    assert key_source.calls == [DOMAIN]

    fastapi_access.clear_key_cache()
    client.get("/api/me", headers=headers)
    assert key_source.calls == [DOMAIN, DOMAIN]


def test_authorization_bearer_header(key_source, clock, signing_key):
    settings = AccessSettings(team_domain=DOMAIN, audience=AUDIENCE, token_header="Authorization")
    fastapi_access = create_fastapi_access(settings, fetcher=key_source, clock=clock)
    client = TestClient(_build_app(fastapi_access), follow_redirects=False)

    ok = client.get("/api/me", headers={"Authorization": f"Bearer {make_token(signing_key)}"})
    no_scheme = client.get("/api/me", headers={"Authorization": make_token(signing_key)})

    assert ok.status_code == 200
    assert no_scheme.status_code == 401


@pytest.mark.parametrize("aud", [42, True])
def test_scalar_audience_without_configured_audience_proceeds(key_source, clock, signing_key, aud):
    settings = AccessSettings(team_domain=DOMAIN)
    fastapi_access = create_fastapi_access(settings, fetcher=key_source, clock=clock)
    client = TestClient(_build_app(fastapi_access), follow_redirects=False)

    response = client.get("/api/me", headers={"Cf-Access-Jwt-Assertion": make_token(signing_key, aud=aud)})

    assert response.status_code == 200
    assert response.json() == {"sub": "user-42"}
