import asyncio
import json

import httpx
import pytest

from app.core.exceptions import AuthenticationError
from app.models.account import Profile
from app.services.session_store import SupabaseSessionStore


def store_for(handler):
    return SupabaseSessionStore(url="https://proj.supabase.test", anon_key="anon",
                                transport=httpx.MockTransport(handler))


def test_existing_profile_is_loaded():
    def handler(req):
        assert req.headers["authorization"] == "Bearer tok"
        assert req.headers["apikey"] == "anon"
        if req.url.path == "/auth/v1/user":
            return httpx.Response(200, json={"id": "u1", "email": "a@b.c"})
        if req.url.path == "/rest/v1/profiles":
            assert req.url.params["id"] == "eq.u1"
            return httpx.Response(200, json=[{"id": "u1", "email": "a@b.c", "usage_count": 2}])
        raise AssertionError(req.url)

    profile = asyncio.run(store_for(handler).get_profile("tok"))

    assert profile.id == "u1"
    assert profile.usage_count == 2
    assert profile.access_token == "tok"


def test_missing_profile_is_created_with_zero_usage():
    inserted = {}

    def handler(req):
        if req.url.path == "/auth/v1/user":
            return httpx.Response(200, json={"id": "u9", "email": "new@b.c"})
        if req.method == "GET":
            return httpx.Response(200, json=[])
        inserted.update(json.loads(req.content))
        return httpx.Response(201, json=[{"id": "u9", "email": "new@b.c", "usage_count": 0}])

    profile = asyncio.run(store_for(handler).get_profile("tok"))

    assert inserted == {"id": "u9", "email": "new@b.c", "usage_count": 0}
    assert profile.usage_count == 0


def test_rejected_token_means_no_session():
    def handler(req):
        return httpx.Response(401, json={"msg": "invalid JWT"})

    assert asyncio.run(store_for(handler).get_profile("expired")) is None


def test_unreachable_backend_is_an_authentication_error():
    def handler(req):
        raise httpx.ConnectError("down", request=req)

    with pytest.raises(AuthenticationError, match="authentication service"):
        asyncio.run(store_for(handler).get_profile("tok"))


def test_increment_patches_usage_count():
    captured = {}

    def handler(req):
        captured["method"] = req.method
        captured["id"] = req.url.params["id"]
        captured["body"] = json.loads(req.content)
        return httpx.Response(204)

    profile = Profile(id="u1", usage_count=1, access_token="tok")
    new_count = asyncio.run(store_for(handler).increment_usage(profile))

    assert new_count == 2
    assert captured == {"method": "PATCH", "id": "eq.u1", "body": {"usage_count": 2}}


def test_failed_increment_keeps_stored_count():
    def handler(req):
        return httpx.Response(500)

    profile = Profile(id="u1", usage_count=1, access_token="tok")
    assert asyncio.run(store_for(handler).increment_usage(profile)) == 1


def test_magic_link_is_requested():
    captured = {}

    def handler(req):
        captured["path"] = req.url.path
        captured["body"] = json.loads(req.content)
        return httpx.Response(200, json={})

    asyncio.run(store_for(handler).send_magic_link("a@b.c", redirect_to="http://app.test"))

    assert captured["path"] == "/auth/v1/otp"
    assert captured["body"]["email"] == "a@b.c"
