import logging
from typing import Any, List, Optional

import httpx

from .config import settings

log = logging.getLogger(__name__)

client: Optional[httpx.AsyncClient] = None

FALLBACK_MESSAGE = "Request failed"


class ApiError(Exception):
    """Non-2xx answer (or transport failure) from the ERMS API."""

    def __init__(self, status_code: int, message: str = FALLBACK_MESSAGE):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return FALLBACK_MESSAGE
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return FALLBACK_MESSAGE


async def get_client() -> httpx.AsyncClient:
    """Get or create the shared upstream HTTP client."""
    global client

    if client is not None:
        return client

    base_url = settings.build_api_base()
    log.info("Initializing ERMS API client for %s", base_url)
    client = httpx.AsyncClient(
        base_url=base_url,
        timeout=settings.request_timeout,
        headers={"Content-Type": "application/json"},
    )
    return client


async def close_client():
    """Close the shared upstream HTTP client"""
    global client

    if client:
        await client.aclose()
        client = None
        log.info("ERMS API client closed")


async def request(method: str, path: str, token: Optional[str] = None, data: Any = None, params: Optional[dict] = None) -> Any:
    """Send one request upstream and return the decoded JSON body (None when empty)."""
    http = await get_client()
    headers = {"Authorization": f"Bearer {token}"} if token else {}

    try:
        response = await http.request(method, path, headers=headers, json=data, params=params)
    except httpx.HTTPError as exc:
        log.warning("ERMS API %s %s failed: %s", method, path, exc)
        raise ApiError(502, "ERMS API unavailable") from exc

    if response.is_error:
        message = _error_message(response)
        log.warning("ERMS API %s %s returned %s: %s", method, path, response.status_code, message)
        raise ApiError(response.status_code, message)

    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


async def get(path: str, token: Optional[str], params: Optional[dict] = None) -> Any:
    return await request("GET", path, token, params=params)


async def post(path: str, token: Optional[str], data: Any = None) -> Any:
    return await request("POST", path, token, data=data)


async def put(path: str, token: Optional[str], data: Any = None) -> Any:
    return await request("PUT", path, token, data=data)


async def delete(path: str, token: Optional[str]) -> Any:
    return await request("DELETE", path, token)


def unwrap_list(payload: Any) -> List[dict]:
    """Accept `{"data": [...]}` or a bare list; anything else is empty."""
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        return payload["data"]
    if isinstance(payload, list):
        return payload
    return []


def unwrap_object(payload: Any) -> Optional[dict]:
    if isinstance(payload, dict):
        inner = payload.get("data")
        if isinstance(inner, dict):
            return inner
        return payload
    return None
