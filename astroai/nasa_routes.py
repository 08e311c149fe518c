# nasa_routes.py
# /api/nasa: APOD, Mars rover photos, the daily Mars image and the NEO feed.

import logging
from typing import Any, Dict, List, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from . import config
from .mars_daily import NoImageAvailable, resolve_daily_mars_image
from .schemas import ResolutionResult, Rover
from .upstream import fetch_api_data, is_error

logger = logging.getLogger("astroai.nasa")

router = APIRouter(prefix="/api/nasa", tags=["NASA"])


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def _upstream_failure(result: Dict[str, Any], message: str) -> HTTPException:
    return HTTPException(
        status_code=result.get("status_code") or status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"{message}: {result['error']}",
    )


# Served for /mars?mock=1 so the frontend can be developed offline.
MOCK_MARS_PHOTOS: List[Dict[str, Any]] = [
    {
        "id": 102693,
        "sol": 1000,
        "camera": {"id": 20, "name": "FHAZ", "rover_id": 5, "full_name": "Front Hazard Avoidance Camera"},
        "img_src": "https://mars.nasa.gov/msl-raw-images/proj/msl/redops/ods/surface/sol/01000/opgs/edr/fcam/FRB_488897928EDR_F0481570FHAZ00323M_.JPG",
        "earth_date": "2015-05-30",
        "rover": {"id": 5, "name": "Curiosity", "landing_date": "2012-08-06", "launch_date": "2011-11-26", "status": "active"},
    },
    {
        "id": 102694,
        "sol": 1000,
        "camera": {"id": 21, "name": "RHAZ", "rover_id": 5, "full_name": "Rear Hazard Avoidance Camera"},
        "img_src": "https://mars.nasa.gov/msl-raw-images/proj/msl/redops/ods/surface/sol/01000/opgs/edr/rcam/RRB_488897928EDR_F0481570RHAZ00323M_.JPG",
        "earth_date": "2015-05-30",
        "rover": {"id": 5, "name": "Curiosity", "landing_date": "2012-08-06", "launch_date": "2011-11-26", "status": "active"},
    },
]


@router.get("/apod", summary="Astronomy Picture of the Day.")
async def get_apod(
    date: Optional[str] = Query(None, description="Optional day (YYYY-MM-DD)."),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    params: Dict[str, Any] = {"api_key": config.NASA_API_KEY}
    if date:
        params["date"] = date
    result = await fetch_api_data(config.APOD_URL, client, params=params)
    if is_error(result):
        raise _upstream_failure(result, "Failed to fetch APOD")
    return result


async def _rover_photos(
    client: httpx.AsyncClient, url: str, params: Dict[str, Any], key: str
) -> Any:
    """
    Returns the photo list under ``key``, or the error dict when the call
    failed or the payload has no such list.
    """
    result = await fetch_api_data(url, client, params=params)
    if is_error(result):
        return result
    if not isinstance(result, dict) or not isinstance(result.get(key), list):
        return {"error": "Unexpected payload from NASA Mars API"}
    return result[key]


@router.get("/mars", summary="Mars rover photos by sol or Earth date.")
async def get_mars_photos(
    rover: Rover = Query(Rover.curiosity, description="Rover name."),
    sol: Optional[int] = Query(None, ge=0, description="Martian sol."),
    earth_date: Optional[str] = Query(None, description="Earth date (YYYY-MM-DD)."),
    mock: Optional[str] = Query(None, description="Set to 1 for fixed sample photos."),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Dated photos when a sol or Earth date is given, otherwise the latest
    ones. Falls back to latest_photos and then to the manifest's max_date.
    """
    if mock == "1":
        return {"photos": MOCK_MARS_PHOTOS}

    api_key = {"api_key": config.NASA_API_KEY}
    base = f"{config.MARS_PHOTOS_BASE}/rovers/{rover.value}"
    failures: List[Dict[str, Any]] = []

    if earth_date or sol is not None:
        query = {**api_key, **({"earth_date": earth_date} if earth_date else {"sol": sol})}
        photos = await _rover_photos(client, f"{base}/photos", query, "photos")
        if not is_error(photos):
            return {"photos": photos}
        failures.append(photos)

    photos = await _rover_photos(client, f"{base}/latest_photos", api_key, "latest_photos")
    if not is_error(photos):
        return {"photos": photos}
    failures.append(photos)

    manifest = await fetch_api_data(
        f"{config.MARS_PHOTOS_BASE}/manifests/{rover.value}", client, params=api_key
    )
    max_date = None
    if isinstance(manifest, dict) and not is_error(manifest):
        max_date = (manifest.get("photo_manifest") or {}).get("max_date")
    if max_date:
        photos = await _rover_photos(
            client, f"{base}/photos", {**api_key, "earth_date": max_date}, "photos"
        )
        if not is_error(photos):
            return {"photos": photos}

    first = failures[0]
    logger.error(f"Mars photos unavailable for {rover.value}: {first}")
    detail: Dict[str, Any] = {"error": "Failed to fetch Mars photos", "details": first.get("details") or first["error"]}
    redirect = next((f["redirect"] for f in failures if f.get("redirect")), None)
    if redirect:
        detail["redirect"] = redirect
    raise HTTPException(
        status_code=first.get("status_code") or status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=detail,
    )


@router.get(
    "/mars/daily",
    response_model=ResolutionResult,
    summary="One Mars image for today with the latest InSight weather.",
)
async def get_daily_mars_image(client: httpx.AsyncClient = Depends(get_http_client)):
    try:
        return await resolve_daily_mars_image(client)
    except NoImageAvailable as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        )


@router.get("/asteroids", summary="Near Earth Object feed.")
async def get_asteroids(
    start_date: Optional[str] = Query(None, description="Feed start (YYYY-MM-DD)."),
    end_date: Optional[str] = Query(None, description="Feed end (YYYY-MM-DD)."),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    params: Dict[str, Any] = {"api_key": config.NASA_API_KEY}
    if start_date:
        params["start_date"] = start_date
    if end_date:
        params["end_date"] = end_date
    result = await fetch_api_data(config.NEO_FEED_URL, client, params=params)
    if is_error(result):
        raise _upstream_failure(result, "Failed to fetch asteroid feed")
    return result
