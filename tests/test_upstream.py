import json

import httpx
import pytest

from astroai.upstream import fetch_api_data, is_error, post_api_data

pytestmark = pytest.mark.anyio

URL = "https://api.nasa.gov/planetary/apod"


async def test_fetch_returns_decoded_json_and_forwards_params(upstream):
    upstream.route("/planetary/apod", json={"title": "Pillars of Creation"})

    async with upstream.client() as client:
        result = await fetch_api_data(URL, client, params={"api_key": "DEMO_KEY"})

    assert result == {"title": "Pillars of Creation"}
    request = upstream.requests[0]
    assert request.url.params["api_key"] == "DEMO_KEY"
    assert request.headers["user-agent"] == "astroai-server/1.0"
    assert request.headers["accept"] == "application/json"


async def test_fetch_maps_status_errors(upstream):
    upstream.route("/planetary/apod", json={"msg": "Date must be between Jun 16, 1995 and today"}, status_code=400)

    async with upstream.client() as client:
        result = await fetch_api_data(URL, client)

    assert is_error(result)
    assert result["status_code"] == 400
    assert result["details"] == {"msg": "Date must be between Jun 16, 1995 and today"}


async def test_fetch_labels_rate_limit(upstream):
    upstream.route("/planetary/apod", json={"error": {"code": "OVER_RATE_LIMIT"}}, status_code=429)

    async with upstream.client() as client:
        result = await fetch_api_data(URL, client)

    assert result["error"] == "HTTP Status Error 429 (Rate Limited)"
    assert result["status_code"] == 429


async def test_fetch_exposes_redirect_location(upstream):
    upstream.route("/planetary/apod", status_code=302, headers={"location": "https://proxy.example/login"})

    async with upstream.client() as client:
        result = await fetch_api_data(URL, client)

    assert result["status_code"] == 302
    assert result["redirect"] == "https://proxy.example/login"


@pytest.mark.parametrize(
    "exc, message",
    [
        (httpx.ReadTimeout, "Timeout Error"),
        (httpx.ConnectError, "Connection Failed"),
    ],
)
async def test_fetch_maps_transport_errors(upstream, exc, message):
    def fail(request):
        raise exc("upstream trouble", request=request)

    upstream.routes["/planetary/apod"] = fail

    async with upstream.client() as client:
        result = await fetch_api_data(URL, client)

    assert result == {"error": message}


async def test_fetch_maps_malformed_json(upstream):
    upstream.routes["/planetary/apod"] = lambda request: httpx.Response(200, text="<html>maintenance</html>")

    async with upstream.client() as client:
        result = await fetch_api_data(URL, client)

    assert result == {"error": "Malformed Response"}


async def test_post_sends_json_payload(upstream):
    upstream.route("/v1beta/models/m:generateContent", json={"ok": True})

    async with upstream.client() as client:
        result = await post_api_data(
            "https://generativelanguage.googleapis.com/v1beta/models/m:generateContent",
            {"contents": []},
            client,
        )

    assert result == {"ok": True}
    assert upstream.requests[0].method == "POST"
    assert json.loads(upstream.requests[0].content) == {"contents": []}


async def test_post_shares_the_error_mapping(upstream):
    upstream.route("/v1beta/models/m:generateContent", json={"error": {"status": "RESOURCE_EXHAUSTED"}}, status_code=429)

    async with upstream.client() as client:
        result = await post_api_data(
            "https://generativelanguage.googleapis.com/v1beta/models/m:generateContent",
            {"contents": []},
            client,
        )

    assert result["error"] == "HTTP Status Error 429 (Rate Limited)"
    assert result["status_code"] == 429
    assert result["details"] == {"error": {"status": "RESOURCE_EXHAUSTED"}}


async def test_post_maps_malformed_json(upstream):
    upstream.routes["/v1beta/models/m:generateContent"] = lambda request: httpx.Response(200, text="oops")

    async with upstream.client() as client:
        result = await post_api_data(
            "https://generativelanguage.googleapis.com/v1beta/models/m:generateContent",
            {"contents": []},
            client,
        )

    assert result == {"error": "Malformed Response"}


def test_is_error_only_flags_error_dicts():
    assert is_error({"error": "Timeout Error"})
    assert not is_error({"photos": []})
    assert not is_error([{"error": "inside a list"}])
