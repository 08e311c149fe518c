# upstream.py
# Shared outbound HTTP for NASA and Gemini calls.

import logging
from typing import Any, Dict, Optional

import httpx

from . import config

logger = logging.getLogger("astroai.upstream")

DEFAULT_HEADERS = {"Accept": "application/json", "User-Agent": config.USER_AGENT}


def create_http_client(**kwargs: Any) -> httpx.AsyncClient:
    """
    Builds the shared client used for every upstream call.
    """
    timeout = httpx.Timeout(config.HTTP_TIMEOUT_SECONDS, connect=config.HTTP_TIMEOUT_SECONDS)
    limits = httpx.Limits(max_keepalive_connections=20, max_connections=50)
    return httpx.AsyncClient(
        timeout=timeout, limits=limits, headers=DEFAULT_HEADERS, **kwargs
    )


def is_error(result: Any) -> bool:
    return isinstance(result, dict) and "error" in result


def _response_details(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text or None


async def request_api_data(
    method: str,
    url: str,
    client: Optional[httpx.AsyncClient] = None,
    **kwargs: Any,
) -> Any:
    """
    Performs an HTTP request and returns the decoded JSON.

    Upstream problems never raise: they come back as a dict with an
    ``error`` key, plus ``status_code``/``details``/``redirect`` when the
    upstream answered with a non-2xx status.
    """
    if client is None:
        async with create_http_client() as transient:
            return await request_api_data(method, url, transient, **kwargs)

    try:
        resp = await client.request(method, url, **kwargs)
        resp.raise_for_status()
        return resp.json()
    except httpx.TimeoutException:
        logger.warning(f"Timeout contacting external API: {url}")
        return {"error": "Timeout Error"}
    except httpx.HTTPStatusError as exc:
        status_code = exc.response.status_code
        logger.warning(f"HTTP {status_code} from external API: {url}")
        error: Dict[str, Any] = {
            "error": f"HTTP Status Error {status_code}",
            "status_code": status_code,
            "details": _response_details(exc.response),
        }
        if status_code == 429:
            error["error"] = "HTTP Status Error 429 (Rate Limited)"
        if exc.response.is_redirect:
            error["redirect"] = exc.response.headers.get("location")
        return error
    except httpx.RequestError as exc:
        logger.warning(f"Connection failed for external API: {url} ({exc})")
        return {"error": "Connection Failed"}
    except ValueError:
        logger.warning(f"Malformed JSON from external API: {url}")
        return {"error": "Malformed Response"}


async def fetch_api_data(
    url: str,
    client: Optional[httpx.AsyncClient] = None,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Any:
    return await request_api_data("GET", url, client, params=params, headers=headers)


async def post_api_data(
    url: str,
    payload: Dict[str, Any],
    client: Optional[httpx.AsyncClient] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Any:
    return await request_api_data("POST", url, client, json=payload, headers=headers)
