import base64
import json
import pytest
import respx
from httpx import Response
from ota_cli.api.client import ApiClient
from ota_cli.api.errors import AuthError, TokenError
from ota_cli.session import Session, TokenManager
from conftest import OSTREE, make_config, make_zip

TOKEN_URL = "https://auth.example.com/token"
TOKEN_BODY = {"access_token": "fresh", "scope": "namespace.acme", "token_type": "bearer", "expires_in": 3600}


@respx.mock
def test_no_auth_returns_no_token_without_network(store, no_auth_zip):
    route = respx.post(TOKEN_URL).mock(return_value=Response(200, json=TOKEN_BODY))
    config = make_config(no_auth_zip)
    with ApiClient() as client:
        assert TokenManager(store, client).token(config) is None
    assert not route.called
    assert not store.path.exists()


@respx.mock
def test_refresh_uses_client_credentials_and_persists(store, oauth_zip):
    route = respx.post(TOKEN_URL).mock(return_value=Response(200, json=TOKEN_BODY))
    config = make_config(oauth_zip)

    with ApiClient() as client:
        token = TokenManager(store, client).token(config)

    assert token.access_token == "fresh"
    assert config.token == token
    req = route.calls.last.request
    assert req.headers["Authorization"] == "Basic " + base64.b64encode(b"client:secret").decode()
    assert req.content == b"grant_type=client_credentials"

    on_disk = json.loads(store.path.read_text())
    assert on_disk["token"] == {"access_token": "fresh", "scope": "namespace.acme"}
    assert "credentials" not in on_disk
    assert store.load().token.access_token == "fresh"


@respx.mock
def test_cached_token_reused_within_run(store, oauth_zip):
    route = respx.post(TOKEN_URL).mock(return_value=Response(200, json=TOKEN_BODY))
    config = make_config(oauth_zip)
    with ApiClient() as client:
        tokens = TokenManager(store, client)
        first = tokens.token(config)
        second = tokens.token(config)
    assert first is second
    assert route.call_count == 1


@respx.mock
def test_token_from_config_file_skips_credentials(store, tmp_path, token):
    # the archive does not even exist: a cached token never touches it
    config = make_config(tmp_path / "missing.zip", token=token)
    with ApiClient() as client:
        assert TokenManager(store, client).token(config) is token
    assert config.credentials is None


def test_resolve_credentials_parses_once(store, oauth_zip):
    config = make_config(oauth_zip)
    with ApiClient() as client:
        tokens = TokenManager(store, client)
        first = tokens.resolve_credentials(config)
        oauth_zip.unlink()
        assert tokens.resolve_credentials(config) is first
    assert config.credentials is first
    assert first.oauth2.client_id == "client"


def test_missing_auth_method(store, tmp_path):
    config = make_config(make_zip(tmp_path / "c.zip", {"ostree": OSTREE}))
    with ApiClient() as client:
        with pytest.raises(AuthError):
            TokenManager(store, client).token(config)
    assert not store.path.exists()


@respx.mock
def test_token_endpoint_rejects(store, oauth_zip):
    respx.post(TOKEN_URL).mock(return_value=Response(401, text="bad client"))
    config = make_config(oauth_zip)
    with ApiClient() as client:
        with pytest.raises(TokenError, match="401"):
            TokenManager(store, client).token(config)
    assert config.token is None


@respx.mock
def test_malformed_token_response(store, oauth_zip):
    respx.post(TOKEN_URL).mock(return_value=Response(200, json={"scope": "namespace.acme"}))
    with ApiClient() as client:
        with pytest.raises(TokenError):
            TokenManager(store, client).token(make_config(oauth_zip))


@respx.mock
def test_session_send_attaches_fetched_token(store, oauth_zip):
    respx.post(TOKEN_URL).mock(return_value=Response(200, json=TOKEN_BODY))
    devices = respx.get("https://registry.example.com/api/v1/devices").mock(return_value=Response(200, json=[]))

    with Session(make_config(oauth_zip), store) as s:
        s.send("GET", f"{s.config.registry}api/v1/devices")
        s.send("GET", f"{s.config.registry}api/v1/devices")

    assert devices.call_count == 2
    assert devices.calls.last.request.headers["Authorization"] == "Bearer fresh"
    assert devices.calls.last.request.headers["x-ats-namespace"] == "acme"
