"""Profile photo fetching and cropping."""

import asyncio
import io
import uuid
from pathlib import Path
from typing import Protocol

import httpx
from PIL import Image, UnidentifiedImageError

from ..config import AVATAR_DIR, DEFAULT_IMAGE_DIR, DEFAULT_PHOTO_NAME
from ..errors import ValidationFailure
from ..logging_config import context, get_logger

logger = get_logger(__name__)

JPEG_SUFFIXES = (".jpg", ".jpeg")
FETCH_TIMEOUT = 10.0
DEFAULT_SIZE = (200, 200)
DEFAULT_COLOUR = (158, 173, 186)


class IPhotoProcessor(Protocol):
    """Turns an image URL and crop box into a stored avatar file name."""

    async def process(
        self, img_url: str, x_start: int, y_start: int, x_end: int, y_end: int
    ) -> str:
        ...

    def ensure_default(self) -> Path:
        ...


class PhotoProcessor:
    """Fetches JPEGs over HTTP and crops them with Pillow."""

    def __init__(
        self,
        avatar_dir: Path = AVATAR_DIR,
        default_dir: Path = DEFAULT_IMAGE_DIR,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._avatar_dir = Path(avatar_dir)
        self._default_dir = Path(default_dir)
        self._transport = transport

    async def process(
        self, img_url: str, x_start: int, y_start: int, x_end: int, y_end: int
    ) -> str:
        """Fetch, crop and store; returns the file name under the avatar dir."""
        data = await self.fetch(img_url)
        return await asyncio.to_thread(
            self._crop_and_save, data, (x_start, y_start, x_end, y_end)
        )

    async def fetch(self, img_url: str) -> bytes:
        path = httpx.URL(img_url).path.lower() if img_url else ""
        if not path.endswith(JPEG_SUFFIXES):
            raise ValidationFailure("image must be a JPEG")

        try:
            async with httpx.AsyncClient(
                timeout=FETCH_TIMEOUT, transport=self._transport
            ) as client:
                response = await client.get(img_url)
        except httpx.HTTPError as e:
            logger.warning("Photo fetch failed: %s", e, extra=context(url=img_url))
            raise ValidationFailure("image could not be fetched") from e

        if response.status_code != 200:
            raise ValidationFailure("image could not be fetched")
        return response.content

    def ensure_default(self) -> Path:
        """Create the shared default avatar if it does not exist yet."""
        self._default_dir.mkdir(parents=True, exist_ok=True)
        target = self._default_dir / DEFAULT_PHOTO_NAME
        if not target.exists():
            Image.new("RGB", DEFAULT_SIZE, DEFAULT_COLOUR).save(target, "JPEG")
            logger.info("Default avatar written to %s", target)
        return target

    def _crop_and_save(self, data: bytes, box: tuple[int, int, int, int]) -> str:
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ValidationFailure("image could not be read") from e

        x_start, y_start, x_end, y_end = box
        width, height = image.size
        if x_start < 0 or y_start < 0 or x_end > width or y_end > height:
            raise ValidationFailure("crop box is outside the image")

        self._avatar_dir.mkdir(parents=True, exist_ok=True)
        filename = f"{uuid.uuid4().hex}.jpg"
        image.crop(box).convert("RGB").save(self._avatar_dir / filename, "JPEG")
        return filename
