"""
Image Proxy Router — /api/image-proxy-base64

Lets the frontend embed question images (Google Drive links included) without
cross-origin fetches.
"""

from typing import AsyncIterator, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, status

from services.image_proxy import IMAGE_FETCH_TIMEOUT, fetch_image_data_url

router = APIRouter(prefix="/api", tags=["images"])


async def get_image_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=IMAGE_FETCH_TIMEOUT) as client:
        yield client


@router.get("/image-proxy-base64")
async def image_proxy_base64(
    url: Optional[str] = Query(None, description="Image URL or Google Drive share link"),
    client: httpx.AsyncClient = Depends(get_image_client),
):
    """
    Return `{"dataUrl": "data:<mime>;base64,..."}` for the image at `url`.

    Fetch failures answer 200 with a placeholder image.
    """
    if not url or not url.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No URL provided")

    data_url = await fetch_image_data_url(url.strip(), client=client)
    return {"dataUrl": data_url}
