import json

import httpx
import pytest

from loveconnect_session.auth_client import AuthClient

from .helpers.fakes import ANN, BASE_URL, FakeAuthority


def _client(authority: FakeAuthority, base_url: str = BASE_URL) -> AuthClient:
    return AuthClient(base_url, client=httpx.AsyncClient(transport=httpx.MockTransport(authority.handler)))


@pytest.mark.asyncio
async def test_fetch_identity_sends_bearer_token():
    authority = FakeAuthority(user=ANN, valid_tokens={"t1"})
    res = await _client(authority).fetch_identity("t1")
    assert res.ok
    assert res.identity.id == "u1"
    req = authority.calls("get-user/")[0]
    assert req.method == "GET"
    assert req.headers["Authorization"] == "Bearer t1"
    assert str(req.url) == f"{BASE_URL}/get-user/"


@pytest.mark.asyncio
async def test_fetch_identity_without_token_omits_header():
    authority = FakeAuthority(user=ANN, valid_tokens={"t1"})
    res = await _client(authority).fetch_identity(None)
    assert not res.ok
    assert res.reason == "http_401"
    assert "Authorization" not in authority.calls("get-user/")[0].headers


@pytest.mark.asyncio
async def test_fetch_identity_non_json_body_is_malformed():
    authority = FakeAuthority(user=ANN, valid_tokens={"t1"}, get_user_raw="<html>oops</html>")
    res = await _client(authority).fetch_identity("t1")
    assert not res.ok
    assert res.reason == "malformed_response"
    assert res.status_code == 200


@pytest.mark.asyncio
async def test_network_error_becomes_failed_result():
    authority = FakeAuthority(fail_on={"login/"})
    res = await _client(authority).login("ann@x.com", "1234")
    assert not res.ok
    assert res.reason == "network_error"
    assert res.status_code is None


@pytest.mark.asyncio
async def test_login_posts_email_and_pin():
    authority = FakeAuthority()
    res = await _client(authority).login("ann@x.com", "1234")
    assert res.ok
    req = authority.calls("login/")[0]
    assert req.method == "POST"
    assert json.loads(req.content) == {"email": "ann@x.com", "pin": "1234"}


@pytest.mark.asyncio
async def test_login_cookie_lands_in_shared_jar():
    authority = FakeAuthority(cookie_token="fresh")
    client = _client(authority)
    await client.login("ann@x.com", "1234")
    assert client.cookies.get("loveconnect") == "fresh"


@pytest.mark.asyncio
async def test_signup_posts_all_three_fields():
    authority = FakeAuthority(signup_status=201)
    res = await _client(authority).signup("Ann", "ann@x.com", "1234")
    assert res.ok
    assert res.status_code == 201
    assert json.loads(authority.calls("signup/")[0].content) == {"name": "Ann", "email": "ann@x.com", "pin": "1234"}


@pytest.mark.asyncio
async def test_signup_conflict_fails():
    res = await _client(FakeAuthority(signup_status=409)).signup("Ann", "ann@x.com", "1234")
    assert not res.ok
    assert res.reason == "http_409"


@pytest.mark.asyncio
async def test_logout_sends_bearer_token():
    authority = FakeAuthority()
    res = await _client(authority).logout("t1")
    assert res.ok
    assert authority.calls("logout/")[0].headers["Authorization"] == "Bearer t1"


@pytest.mark.asyncio
async def test_empty_base_url_is_not_configured():
    authority = FakeAuthority()
    res = await _client(authority, base_url="").fetch_identity("t1")
    assert res.reason == "not_configured"
    assert authority.requests == []


@pytest.mark.asyncio
async def test_aclose_leaves_injected_client_open():
    http = httpx.AsyncClient(transport=httpx.MockTransport(FakeAuthority().handler))
    await AuthClient(BASE_URL, client=http).aclose()
    assert not http.is_closed
    await http.aclose()


@pytest.mark.asyncio
async def test_unsendable_token_becomes_failed_result():
    authority = FakeAuthority(user=ANN, valid_tokens={"tök"})
    client = _client(authority)
    res = await client.fetch_identity("tök")
    assert not res.ok
    assert res.reason == "invalid_request"
    assert (await client.logout("tök")).reason == "invalid_request"
    assert authority.requests == []
