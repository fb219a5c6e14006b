"""
Image proxy
Fetches a question image and returns it as a base64 data URL.

Failures never reach the caller: any transport error, error status or
non-image response yields PLACEHOLDER_DATA_URL instead.
"""

import base64
import logging
import os
from typing import Optional

import httpx

from bank.normalizer import get_direct_image_url

log = logging.getLogger(__name__)

# ─── Config ────────────────────────────────────────────────────────────────────

IMAGE_FETCH_TIMEOUT = float(os.getenv("IMAGE_FETCH_TIMEOUT", "10"))

FETCH_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    ),
    "Referer": "https://drive.google.com",
}

PLACEHOLDER_DATA_URL = (
    "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAADIAAAAyCAYAAAAeP4ixAAAACXBIWXMAAAsTAAALEwEAmpwYAAAAvElEQVR4"
    "nO3YQQqDMBAF0L/KnW+/Q6+xu1oSLeI4DAgAAAAAAAAA7rZpm7Zt2/9eNpvNZrPZdrsdANxut9vt9nq9PgAwGo1Go9FoNBr9MabX6/U2m01m"
    "M5vNZnO5XC6X+wDAXC6Xy+VyuVwul8sFAKPRaDQajUaj0Wg0Go1Goz8A8Hg8Ho/H4/F4PB6Px+MBgMFoNBqNRqPRaDQajUaj0Wg0Go1Goz8A"
    "AAAAAAAA7rYBAK3eVREcAAAAAElFTkSuQmCC"
)


def to_data_url(content_type: str, data: bytes) -> str:
    return f"data:{content_type};base64,{base64.b64encode(data).decode('ascii')}"


async def _fetch(client: httpx.AsyncClient, url: str) -> str:
    response = await client.get(url, headers=FETCH_HEADERS, follow_redirects=True)
    response.raise_for_status()
    content_type = response.headers.get("content-type", "").split(";")[0].strip()
    if not content_type.startswith("image/"):
        raise ValueError(f"URL does not point to an image (content-type={content_type or 'missing'})")
    return to_data_url(content_type, response.content)


async def fetch_image_data_url(url: str, client: Optional[httpx.AsyncClient] = None) -> str:
    """
    Resolve `url` (Drive share links included) and return its image as a data URL.

    Args:
        url: Image or share-link URL
        client: Optional shared client; a short-lived one is created otherwise

    Returns:
        "data:<mime>;base64,<data>", or PLACEHOLDER_DATA_URL on any failure
    """
    direct_url = get_direct_image_url(url)
    log.info(f"[IMAGE] Fetching image from: {direct_url}")
    try:
        if client is not None:
            data_url = await _fetch(client, direct_url)
        else:
            async with httpx.AsyncClient(timeout=IMAGE_FETCH_TIMEOUT) as own_client:
                data_url = await _fetch(own_client, direct_url)
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        log.warning(f"[IMAGE] Proxy error for {direct_url}: {e}; serving placeholder")
        return PLACEHOLDER_DATA_URL

    log.info(f"[IMAGE] Fetched {direct_url}, data URL length: {len(data_url)}")
    return data_url
