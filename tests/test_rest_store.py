import json

import httpx
import pytest

from guidari.remote import RemoteStoreError, RestRemoteStore


def make_store(handler):
    return RestRemoteStore("https://demo.supabase.co/", "anon-key", transport=httpx.MockTransport(handler))


async def test_select_all_sends_key_headers():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        seen["select"] = request.url.params["select"]
        seen["apikey"] = request.headers["apikey"]
        seen["auth"] = request.headers["authorization"]
        return httpx.Response(200, json=[{"id": "1"}])

    store = make_store(handler)
    assert await store.select_all("patients") == [{"id": "1"}]
    await store.close()

    assert seen["url"] == "https://demo.supabase.co/rest/v1/patients"
    assert seen["select"] == "*"
    assert seen["apikey"] == "anon-key"
    assert seen["auth"] == "Bearer anon-key"


async def test_upsert_merges_duplicates_by_id():
    seen = {}

    def handler(request: httpx.Request):
        seen["method"] = request.method
        seen["params"] = dict(request.url.params)
        seen["prefer"] = request.headers["prefer"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(201)

    store = make_store(handler)
    await store.upsert("users", [{"id": "u1", "name": "Ana"}])
    await store.close()

    assert seen["method"] == "POST"
    assert seen["params"] == {"on_conflict": "id"}
    assert "resolution=merge-duplicates" in seen["prefer"]
    assert seen["body"] == [{"id": "u1", "name": "Ana"}]


async def test_empty_upsert_makes_no_request():
    def handler(request):
        raise AssertionError("no debería llamar")

    store = make_store(handler)
    await store.upsert("users", [])
    await store.close()


async def test_delete_by_id():
    seen = {}

    def handler(request: httpx.Request):
        seen["method"] = request.method
        seen["params"] = dict(request.url.params)
        return httpx.Response(204)

    store = make_store(handler)
    await store.delete("appointments", "a1")
    await store.close()

    assert seen == {"method": "DELETE", "params": {"id": "eq.a1"}}


async def test_error_body_is_parsed():
    def handler(request):
        return httpx.Response(400, json={
            "code": "22P02", "message": "invalid input syntax for type uuid", "details": "p123",
        })

    store = make_store(handler)
    with pytest.raises(RemoteStoreError) as err:
        await store.select_all("patients")
    await store.close()

    assert err.value.status == 400
    assert err.value.code == "22P02"
    assert err.value.message == "invalid input syntax for type uuid (p123)"
    assert not err.value.is_network


async def test_transport_failure_is_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    store = make_store(handler)
    with pytest.raises(RemoteStoreError) as err:
        await store.upsert("users", [{"id": "u1"}])
    await store.close()

    assert err.value.is_network
