from datetime import date
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
import pytest

from astroai.upstream import DEFAULT_HEADERS

TODAY = date(2026, 10, 17)
YESTERDAY = date(2026, 10, 16)

Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeUpstream:
    """
    Stands in for every upstream host. Routes are keyed by URL path; each
    request is recorded so tests can assert on call order and counts.
    """

    def __init__(self) -> None:
        self.routes: Dict[str, Responder] = {}
        self.requests: List[httpx.Request] = []

    def route(self, path: str, json: Any = None, status_code: int = 200, **kwargs: Any) -> None:
        self.routes[path] = lambda request: httpx.Response(status_code, json=json, **kwargs)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder: Optional[Responder] = self.routes.get(request.url.path)
        if responder is None:
            return httpx.Response(404, json={"error": "no route"})
        if callable(responder):
            return responder(request)
        return responder

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.MockTransport(self.handler), headers=DEFAULT_HEADERS
        )

    def calls(self, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


def rover_path(rover: str, endpoint: str) -> str:
    return f"/mars-photos/api/v1/rovers/{rover}/{endpoint}"


def rover_photo(rover: str, photo_id: int, earth_date: str, camera: str = "NAVCAM_LEFT") -> Dict[str, Any]:
    return {
        "id": photo_id,
        "sol": 1650,
        "camera": {"id": 42, "name": camera, "rover_id": 8, "full_name": "Navigation Camera - Left"},
        "img_src": f"https://mars.nasa.gov/mars2020-raw-images/{rover}/{photo_id}.png",
        "earth_date": earth_date,
        "rover": {
            "id": 8,
            "name": rover.capitalize(),
            "landing_date": "2021-02-18",
            "launch_date": "2020-07-30",
            "status": "active",
        },
    }


def search_item(nasa_id: Optional[str], title: str, description: str = "", date_created: Optional[str] = "2019-03-04T00:00:00Z", href: str = "") -> Dict[str, Any]:
    meta: Dict[str, Any] = {"title": title, "description": description}
    if nasa_id is not None:
        meta["nasa_id"] = nasa_id
    if date_created is not None:
        meta["date_created"] = date_created
    return {
        "href": f"https://images-assets.nasa.gov/image/{nasa_id}/collection.json",
        "data": [meta],
        "links": [{"href": href or f"https://images-assets.nasa.gov/image/{nasa_id}/{nasa_id}~thumb.jpg", "rel": "preview"}],
    }


def insight_payload(first_utc: str, **overrides: Any) -> Dict[str, Any]:
    entry = {
        "AT": {"av": -62.3, "mn": -96.9, "mx": -15.9},
        "PRE": {"av": 750.6, "mn": 722.0, "mx": 768.8},
        "Season": "fall",
        "First_UTC": first_utc,
        "Last_UTC": first_utc,
    }
    entry.update(overrides)
    return {
        "sol_keys": ["675", "676"],
        "675": {**entry, "First_UTC": "2020-10-18T11:00:00Z"},
        "676": entry,
        "validity_checks": {},
    }


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()
