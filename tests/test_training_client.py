import anyio
import httpx
import pytest

from training_api.core.exceptions import (
    UpstreamDecodeError,
    UpstreamStatusError,
    UpstreamTransportError,
)
from training_api.core.training_external_service import (
    TRAINING_API_TIMEOUT,
    TRAINING_API_URL,
    TrainingApiClient,
)

pytestmark = pytest.mark.anyio


def make_client(handler) -> TrainingApiClient:
    return TrainingApiClient(transport=httpx.MockTransport(handler))


async def test_fetch_decodes_json_and_uses_fixed_base_url():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[{"id": 1}])

    client = make_client(handler)
    result = await client.fetch("/online")
    await client.disconnect()

    assert result.payload == [{"id": 1}]
    assert result.status_code == 200
    assert result.error is None
    assert str(seen[0].url) == f"{TRAINING_API_URL}/online"


async def test_fetch_applies_ten_second_timeout():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={})

    client = make_client(handler)
    await client.fetch("/online")
    await client.disconnect()

    assert TRAINING_API_TIMEOUT == 10.0
    assert seen[0].extensions["timeout"]["read"] == 10.0


async def test_fetch_non_200_keeps_upstream_status_without_error():
    client = make_client(lambda request: httpx.Response(418))

    result = await client.fetch("/admin")

    assert result.status_code == 418
    assert result.payload == {"Error": "418 I'm a teapot"}
    assert result.error is None


async def test_fetch_timeout_is_500_with_error():
    def handler(request):
        raise httpx.ConnectTimeout("timed out")

    client = make_client(handler)
    result = await client.fetch("/online")

    assert result.status_code == 500
    assert result.payload == {"Error": "timed out"}
    assert isinstance(result.error, UpstreamTransportError)


async def test_fetch_decode_failure_is_500_with_error():
    client = make_client(lambda request: httpx.Response(200, content=b"{"))

    result = await client.fetch("/user")

    assert result.status_code == 500
    assert "Error" in result.payload
    assert result.error is not None


async def test_get_user_decodes_envelope():
    client = make_client(
        lambda request: httpx.Response(
            200, json={"data": {"id": 5, "login": "Five", "verifyText": "ok", "playerid": 3}}
        )
    )

    user = await client.get_user("Five")

    assert user.id == 5
    assert user.login == "Five"
    assert user.verify_text == "ok"
    assert user.player_id == 3
    assert user.warn is None


async def test_get_user_raises_on_status():
    client = make_client(lambda request: httpx.Response(404))

    with pytest.raises(UpstreamStatusError) as exc_info:
        await client.get_user("Nobody")

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "404 Not Found"


async def test_get_user_raises_on_transport_failure():
    def handler(request):
        raise httpx.ConnectError("refused")

    client = make_client(handler)

    with pytest.raises(UpstreamTransportError):
        await client.get_user("Anyone")


async def test_get_user_raises_on_bad_envelope():
    client = make_client(lambda request: httpx.Response(200, json={"data": {"id": "not-a-number"}}))

    with pytest.raises(UpstreamDecodeError):
        await client.get_user("Broken")


async def test_cancelling_the_caller_cancels_the_upstream_call():
    started = anyio.Event()
    cancelled = []

    async def handler(request):
        started.set()
        try:
            await anyio.sleep_forever()
        except anyio.get_cancelled_exc_class():
            cancelled.append(True)
            raise

    client = make_client(handler)

    async with anyio.create_task_group() as tg:
        tg.start_soon(client.fetch, "/online")
        await started.wait()
        tg.cancel_scope.cancel()

    await client.disconnect()

    assert cancelled == [True]
