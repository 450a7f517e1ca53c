import json

import httpx
import pytest

from toolkit.core.exceptions import SerializationError
from toolkit.core.exceptions import TransportError
from toolkit.services.remote import apost_json
from toolkit.services.remote import post_json


def _echo_handler(seen: list[httpx.Request]):
    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"received": json.loads(request.content)})

    return _handler


def test_post_json_with_custom_client():
    seen: list[httpx.Request] = []
    client = httpx.Client(transport=httpx.MockTransport(_echo_handler(seen)))

    response, status = post_json("http://remote.test/hook", {"foo": "bar"}, client=client)

    assert status == 201
    assert response.json() == {"received": {"foo": "bar"}}
    assert seen[0].method == "POST"
    assert seen[0].headers["content-type"] == "application/json"
    # The caller's client stays usable
    assert not client.is_closed
    client.close()


def test_post_json_default_client(monkeypatch):
    seen: list[httpx.Request] = []
    real_client = httpx.Client

    # Route the default client through a mock transport
    monkeypatch.setattr(
        "toolkit.services.remote.httpx.Client",
        lambda: real_client(transport=httpx.MockTransport(_echo_handler(seen))),
    )

    response, status = post_json("http://remote.test/hook", [1, 2, 3])

    assert status == 201
    assert response.json() == {"received": [1, 2, 3]}


def test_post_json_transport_failure():
    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.Client(transport=httpx.MockTransport(_refuse))

    with pytest.raises(TransportError) as exc:
        post_json("http://remote.test/hook", {"foo": "bar"}, client=client)

    assert isinstance(exc.value.__cause__, httpx.ConnectError)


def test_post_json_unserializable_payload():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))

    with pytest.raises(SerializationError):
        post_json("http://remote.test/hook", {"bad": float("inf")}, client=client)


def test_post_json_non_2xx_is_not_an_error():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(503)))

    response, status = post_json("http://remote.test/hook", {}, client=client)

    assert status == 503
    assert response.status_code == 503


@pytest.mark.asyncio
async def test_apost_json():
    seen: list[httpx.Request] = []
    async with httpx.AsyncClient(transport=httpx.MockTransport(_echo_handler(seen))) as client:
        response, status = await apost_json("http://remote.test/hook", {"foo": "bar"}, client=client)

    assert status == 201
    assert response.json() == {"received": {"foo": "bar"}}


@pytest.mark.asyncio
async def test_apost_json_transport_failure():
    def _timeout(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(_timeout)) as client:
        with pytest.raises(TransportError):
            await apost_json("http://remote.test/hook", {"foo": "bar"}, client=client)
