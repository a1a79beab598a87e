"""Unit tests for radar statistics fetching (radarwatch.fetch); httpx.MockTransport, no network."""
import httpx
import pytest
from radarwatch.errors import FetchFailed
from radarwatch.fetch import StatsFetcher, is_accessible, parse_service_statistics


def make_fetcher(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client, StatsFetcher(client, base_url="https://radar.test/api")


def test_is_accessible():
    assert is_accessible(0) is True
    assert is_accessible(0.0) is True
    assert is_accessible(1) is False
    assert is_accessible(-2.5) is False


def test_parse_picks_last_value():
    stats = parse_service_statistics({"google": [1, 0, 3], "github": [0]}, "google", "mci")
    assert stats.latest == 3
    assert stats.is_accessible_now() is False


def test_parse_missing_service():
    with pytest.raises(FetchFailed) as exc:
        parse_service_statistics({"github": [0]}, "google", "mci")
    assert "no data for service: google" in str(exc.value)
    assert exc.value.datacenter == "mci"


def test_parse_empty_series():
    with pytest.raises(FetchFailed):
        parse_service_statistics({"google": []}, "google", "mci")


def test_parse_non_object_body():
    with pytest.raises(FetchFailed):
        parse_service_statistics([0, 1], "google", "mci")


def test_parse_non_numeric_sample():
    with pytest.raises(FetchFailed):
        parse_service_statistics({"google": [0, None]}, "google", "mci")


@pytest.mark.asyncio
async def test_fetch_sends_isp_query_and_returns_last():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"google": [0, 0, 2.5], "bing": [0]})

    client, fetcher = make_fetcher(handler)
    async with client:
        value = await fetcher.fetch("tehran-2", "google")
    assert value == 2.5
    assert seen[0].url.params["isp"] == "tehran-2"
    assert seen[0].method == "GET"


@pytest.mark.asyncio
async def test_fetch_statistics_full_series():
    client, fetcher = make_fetcher(lambda r: httpx.Response(200, json={"github": [1, 0]}))
    async with client:
        stats = await fetcher.fetch_statistics("mci", "github")
    assert stats.service == "github"
    assert stats.statistics == [1, 0]
    assert stats.is_accessible_now() is True


@pytest.mark.asyncio
async def test_fetch_bad_status():
    client, fetcher = make_fetcher(lambda r: httpx.Response(503, text="busy"))
    async with client:
        with pytest.raises(FetchFailed) as exc:
            await fetcher.fetch("mci", "google")
    assert "503" in exc.value.cause


@pytest.mark.asyncio
async def test_fetch_malformed_json():
    client, fetcher = make_fetcher(lambda r: httpx.Response(200, text="<html>nope</html>"))
    async with client:
        with pytest.raises(FetchFailed) as exc:
            await fetcher.fetch("mci", "google")
    assert "JSON parse error" in exc.value.cause


@pytest.mark.asyncio
async def test_fetch_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client, fetcher = make_fetcher(handler)
    async with client:
        with pytest.raises(FetchFailed) as exc:
            await fetcher.fetch("irancell", "google")
    assert exc.value.datacenter == "irancell"
    assert "request error" in exc.value.cause


@pytest.mark.asyncio
async def test_fetch_timeout():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    client, fetcher = make_fetcher(handler)
    async with client:
        with pytest.raises(FetchFailed) as exc:
            await fetcher.fetch("mci", "google")
    assert "timeout" in exc.value.cause


def test_parse_rejects_gap_inside_series():
    with pytest.raises(FetchFailed) as exc:
        parse_service_statistics({"google": [0, None, 1]}, "google", "mci")
    assert "non-numeric" in exc.value.cause


def test_parse_keeps_series_aligned():
    stats = parse_service_statistics({"google": [0, 1, 0.5, 0]}, "google", "mci")
    assert stats.statistics == [0, 1, 0.5, 0]
