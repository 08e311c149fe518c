# mars_daily.py
# Daily Mars image: rover photos first, NASA image library as a last resort,
# InSight weather attached to whatever was found.

import logging
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, List, NamedTuple, Optional, Union

import httpx
from pydantic import ValidationError

from . import config
from .schemas import (
    CameraInfo,
    PhotoRecord,
    PhotoSource,
    ResolutionResult,
    Rover,
    RoverInfo,
    WeatherRecord,
)
from .upstream import fetch_api_data, is_error

logger = logging.getLogger("astroai.mars_daily")

EXCLUDE_RE = re.compile(config.MARS_IMAGE_EXCLUDE_PATTERN, re.IGNORECASE)
WEATHER_UNAVAILABLE_NOTE = "Weather unavailable; using last known or none"


class NoImageAvailable(Exception):
    """Every source in the fallback chain came up empty."""


class PhotoMatch(NamedTuple):
    source: PhotoSource
    photo: PhotoRecord


PhotoLookup = Callable[..., Awaitable[Optional[PhotoMatch]]]


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _first_usable_photo(result: Any, key: str) -> Optional[PhotoRecord]:
    if not isinstance(result, dict) or is_error(result):
        return None
    candidates = result.get(key)
    if not isinstance(candidates, list):
        return None
    for raw in candidates:
        if not isinstance(raw, dict) or not raw.get("img_src"):
            continue
        try:
            return PhotoRecord(**raw)
        except ValidationError as exc:
            logger.warning(f"Skipping malformed rover photo {raw.get('id')}: {exc}")
    return None


# -----------------------------------------------------------------------------
# Rover photos
# -----------------------------------------------------------------------------
async def lookup_rover_photo(
    rover: Union[Rover, str],
    earth_date: date,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[PhotoMatch]:
    """
    Dated photo for the rover, else its most recent one, else None.
    """
    rover = Rover(rover)
    base = f"{config.MARS_PHOTOS_BASE}/rovers/{rover.value}"

    dated = await fetch_api_data(
        f"{base}/photos",
        client,
        params={"api_key": config.NASA_API_KEY, "earth_date": earth_date.isoformat()},
    )
    photo = _first_usable_photo(dated, "photos")
    if photo is None:
        latest = await fetch_api_data(
            f"{base}/latest_photos", client, params={"api_key": config.NASA_API_KEY}
        )
        photo = _first_usable_photo(latest, "latest_photos")

    if photo is None:
        return None
    return PhotoMatch(PhotoSource(rover.value), photo)


# -----------------------------------------------------------------------------
# NASA image library
# -----------------------------------------------------------------------------
def is_excluded(title: str, description: str) -> bool:
    return bool(EXCLUDE_RE.search(title) or EXCLUDE_RE.search(description))


def _candidate_link(item: Dict[str, Any]) -> str:
    links = item.get("links")
    if isinstance(links, list) and links and isinstance(links[0], dict) and links[0].get("href"):
        return str(links[0]["href"])
    return str(item.get("href") or "")


def _photo_from_search_item(item: Dict[str, Any], today: date) -> Optional[PhotoRecord]:
    data = item.get("data")
    meta = data[0] if isinstance(data, list) and data and isinstance(data[0], dict) else {}
    title = str(meta.get("title") or "")
    description = str(meta.get("description") or "")
    if is_excluded(title, description):
        return None

    link = _candidate_link(item)
    if not link:
        return None

    created = str(meta.get("date_created") or "")[:10]
    try:
        return PhotoRecord(
            id=meta.get("nasa_id") or "mars-image",
            sol=None,
            camera=CameraInfo(full_name=title or "Mars surface image"),
            img_src=link,
            earth_date=created or today.isoformat(),
            rover=RoverInfo(),
        )
    except ValidationError as exc:
        logger.warning(f"Skipping malformed image-library item: {exc}")
        return None


async def search_mars_image(
    client: Optional[httpx.AsyncClient] = None,
    today: Optional[date] = None,
) -> Optional[PhotoMatch]:
    """
    First image-library result for the search topic that is not a rover,
    selfie, hardware or mock-up shot.
    """
    today = today or utc_today()
    result = await fetch_api_data(
        f"{config.IMAGES_API_BASE}/search",
        client,
        params={"q": config.MARS_SEARCH_TOPIC, "media_type": "image"},
    )
    if is_error(result) or not isinstance(result, dict):
        return None

    collection = result.get("collection")
    items = collection.get("items") if isinstance(collection, dict) else None
    if not isinstance(items, list):
        return None

    for item in items:
        if not isinstance(item, dict):
            continue
        photo = _photo_from_search_item(item, today)
        if photo is not None:
            return PhotoMatch(PhotoSource.images_api, photo)
    return None


# -----------------------------------------------------------------------------
# InSight weather
# -----------------------------------------------------------------------------
def _unavailable_weather() -> WeatherRecord:
    return WeatherRecord(source="nasa-insight", stale=True, note=WEATHER_UNAVAILABLE_NOTE)


async def fetch_mars_weather(
    client: Optional[httpx.AsyncClient] = None,
    today: Optional[date] = None,
) -> WeatherRecord:
    """
    Latest InSight reading. Never raises; anything short of a complete
    reading dated today is flagged stale.
    """
    today = today or utc_today()
    result = await fetch_api_data(
        config.INSIGHT_WEATHER_URL,
        client,
        params={"api_key": config.NASA_API_KEY, "feedtype": "json", "ver": "1.0"},
    )
    if is_error(result) or not isinstance(result, dict):
        return _unavailable_weather()

    keys = result.get("sol_keys")
    if not isinstance(keys, list) or not keys:
        return _unavailable_weather()

    last_sol = str(keys[-1])
    entry = result.get(last_sol)
    if not isinstance(entry, dict):
        logger.warning(f"InSight feed lists sol {last_sol} without an entry")
        return _unavailable_weather()

    temps = entry.get("AT") or {}
    pressure = entry.get("PRE") or {}
    terrestrial = str(entry.get("First_UTC") or "")[:10] or None
    try:
        readings = (temps.get("mn"), temps.get("mx"), pressure.get("av"))
        return WeatherRecord(
            source="nasa-insight",
            sol=last_sol,
            terrestrial_date=terrestrial,
            min_temp=readings[0],
            max_temp=readings[1],
            pressure=readings[2],
            season=entry.get("Season"),
            stale=terrestrial != today.isoformat() or any(v is None for v in readings),
        )
    except (AttributeError, ValidationError) as exc:
        logger.warning(f"Malformed InSight entry for sol {last_sol}: {exc}")
        return _unavailable_weather()


# -----------------------------------------------------------------------------
# Resolver
# -----------------------------------------------------------------------------
class FallbackStep(NamedTuple):
    lookup: PhotoLookup
    kwargs: Dict[str, Any]
    attempt_date: date


def build_fallback_chain(today: date) -> List[FallbackStep]:
    """
    Ordered attempts; the first one that returns a match wins.
    """
    yesterday = today - timedelta(days=1)
    primary = Rover(config.PRIMARY_ROVER)
    secondary = Rover(config.SECONDARY_ROVER)
    return [
        FallbackStep(lookup_rover_photo, {"rover": primary, "earth_date": today}, today),
        FallbackStep(lookup_rover_photo, {"rover": secondary, "earth_date": today}, today),
        FallbackStep(lookup_rover_photo, {"rover": primary, "earth_date": yesterday}, yesterday),
        FallbackStep(lookup_rover_photo, {"rover": secondary, "earth_date": yesterday}, yesterday),
        FallbackStep(search_mars_image, {"today": today}, today),
    ]


async def resolve_daily_mars_image(
    client: Optional[httpx.AsyncClient] = None,
    today: Optional[date] = None,
) -> ResolutionResult:
    """
    Walks the fallback chain sequentially and attaches the weather once.

    Raises NoImageAvailable when no source produced a photo.
    """
    today = today or utc_today()

    for step in build_fallback_chain(today):
        match = await step.lookup(client=client, **step.kwargs)
        if match is not None:
            break
        logger.debug(f"[MARS DAILY] {step.lookup.__name__} {step.kwargs} found nothing")
    else:
        logger.warning(f"[MARS DAILY] No image from any source for {today.isoformat()}")
        raise NoImageAvailable("No Mars image available right now")

    logger.info(f"[MARS DAILY] Image resolved from {match.source.value}")
    weather = await fetch_mars_weather(client, today)
    return ResolutionResult(
        date=match.photo.earth_date or step.attempt_date.isoformat(),
        source=match.source,
        photo=match.photo,
        weather=weather,
    )
