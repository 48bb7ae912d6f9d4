# file: services/image_service.py

import asyncio
import io
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import httpx
from PIL import Image

from quorumflow.config import IMAGE_FETCH_CONCURRENCY, IMAGE_FETCH_TIMEOUT
from quorumflow.utils.concurrency import first_error, run_bounded

logger = logging.getLogger(__name__)

MAX_IMAGE_WIDTH = 450


@dataclass
class SizedImage:
    data: bytes
    width: float
    height: float


@dataclass
class ImageRequest:
    """The images belonging to one report item (an activity or a baptism)."""
    item_id: str
    urls: List[str]


def compute_display_size(width: int, height: int, max_width: int = MAX_IMAGE_WIDTH) -> Tuple[float, float]:
    """Caps the width at max_width and scales the height to keep the aspect ratio. Never enlarges."""
    aspect_ratio = width / height
    display_width = min(max_width, width)
    return display_width, display_width / aspect_ratio


def measure_image(data: bytes) -> Tuple[int, int]:
    """Reads the native pixel size from the image header. Raises on corrupt or unknown formats."""
    with Image.open(io.BytesIO(data)) as image:
        return image.size


async def fetch_image(client: httpx.AsyncClient, url: str, retries: int = 1) -> bytes:
    """Downloads the whole image body into memory, retrying once on network or HTTP errors."""
    attempt = 0
    while True:
        try:
            response = await client.get(url, headers={"Accept": "image/*"}, timeout=IMAGE_FETCH_TIMEOUT)
            response.raise_for_status()
            return response.content
        except httpx.HTTPError as e:
            if attempt >= retries:
                raise
            attempt += 1
            logger.warning("Retrying image download %s after error: %s", url, e)


async def _fetch_and_size(client: httpx.AsyncClient, url: str) -> SizedImage:
    data = await fetch_image(client, url)
    width, height = compute_display_size(*measure_image(data))
    return SizedImage(data=data, width=width, height=height)


async def resolve_images(client: httpx.AsyncClient, urls: Sequence[str],
                         semaphore: asyncio.Semaphore) -> List[SizedImage]:
    """Fetches and sizes every url of one item. Any single failure fails the whole item."""
    results = await asyncio.gather(
        *(run_bounded(semaphore, _fetch_and_size(client, url)) for url in urls if url),
        return_exceptions=True,
    )
    error = first_error(results)
    if error is not None:
        raise error
    return list(results)


class ImageResolver:
    """
    Resolves the images of many report items over one bounded pool of downloads.

    A failing item is logged and degrades to an empty image list; the other
    items are unaffected. Output is aligned with the input by position.
    """

    def __init__(self, client: httpx.AsyncClient, concurrency: int = IMAGE_FETCH_CONCURRENCY):
        self.client = client
        self.semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _resolve_item(self, request: ImageRequest) -> List[SizedImage]:
        if not request.urls:
            return []
        try:
            return await resolve_images(self.client, request.urls, self.semaphore)
        except Exception as e:
            logger.error("Error processing images for report item %s: %s", request.item_id, e)
            return []

    async def resolve_all(self, requests: Sequence[ImageRequest]) -> List[List[SizedImage]]:
        return list(await asyncio.gather(*(self._resolve_item(r) for r in requests)))


async def resolve_report_images(requests: Sequence[ImageRequest],
                                client: Optional[httpx.AsyncClient] = None) -> List[List[SizedImage]]:
    if client is not None:
        return await ImageResolver(client).resolve_all(requests)
    async with httpx.AsyncClient(follow_redirects=True) as owned_client:
        return await ImageResolver(owned_client).resolve_all(requests)
