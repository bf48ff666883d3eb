import httpx
import pytest

from tugza.errors import UpstreamFailure
from tugza.location_service import LocationClient

from conftest import RecordingHandler


def client_for(*responses):
    handler = RecordingHandler(*responses)
    return LocationClient("https://locations.test", timeout=1, transport=httpx.MockTransport(handler)), handler


@pytest.mark.asyncio
async def test_cascade_lookups(locations):
    countries = await locations.list_countries()
    states = await locations.list_states("1")
    cities = await locations.list_cities("1", "11")

    assert [(c.id, c.name) for c in countries] == [("1", "Ethiopia"), ("2", "Kenya")]
    assert [s.name for s in states] == ["Addis Ababa", "Oromia"]
    assert [c.name for c in cities] == ["Adama"]


@pytest.mark.asyncio
async def test_query_parameters():
    locations, handler = client_for(httpx.Response(200, json={"cities": []}))

    await locations.list_cities("1", "10")

    request = handler.requests[0]
    assert request.url.path == "/api/locations"
    assert request.url.params["countryId"] == "1"
    assert request.url.params["stateId"] == "10"


@pytest.mark.asyncio
async def test_server_error_is_upstream_failure():
    locations, _ = client_for(httpx.Response(500, text="boom"))
    with pytest.raises(UpstreamFailure):
        await locations.list_countries()


@pytest.mark.asyncio
async def test_timeout_is_upstream_failure():
    locations, _ = client_for(httpx.ReadTimeout("too slow"))
    with pytest.raises(UpstreamFailure):
        await locations.list_states("1")


@pytest.mark.asyncio
async def test_unexpected_body_is_upstream_failure():
    locations, _ = client_for(httpx.Response(200, json={"states": []}))
    with pytest.raises(UpstreamFailure):
        await locations.list_countries()


@pytest.mark.asyncio
async def test_invalid_json_is_upstream_failure():
    locations, _ = client_for(httpx.Response(200, text="<html>maintenance</html>"))
    with pytest.raises(UpstreamFailure):
        await locations.list_countries()
