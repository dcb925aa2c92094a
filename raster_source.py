# raster_source.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional, Tuple, Union

import requests
from PIL import Image

from errors import RasterDecodeError
from storage_client import download_url_bytes

RasterLike = Union["RasterSource", bytes, Path, str]


def _guess_mime_type(path: Path) -> Optional[str]:
    ext = path.suffix.lower()
    if ext in [".jpg", ".jpeg"]:
        return "image/jpeg"
    if ext == ".png":
        return "image/png"
    if ext == ".gif":
        return "image/gif"
    if ext == ".webp":
        return "image/webp"
    if ext in [".bmp", ".dib"]:
        return "image/bmp"
    if ext in [".txt", ".md"]:
        return "text/plain"
    if ext == ".pdf":
        return "application/pdf"
    return None


def is_image_type(content_type: Optional[str]) -> bool:
    """No declared type counts as an image; decoding decides."""
    if not content_type:
        return True
    return content_type.lower().startswith("image/")


@dataclass(frozen=True)
class RasterSource:
    """
    Opaque, immutable reference to pixel data: in-memory bytes, a local
    file, or an http(s) URL. `content_type` is the declared MIME type, if any.
    """

    data: Optional[bytes] = None
    path: Optional[Path] = None
    url: Optional[str] = None
    content_type: Optional[str] = None

    def __post_init__(self):
        given = [v for v in (self.data, self.path, self.url) if v is not None]
        if len(given) != 1:
            raise ValueError("RasterSource needs exactly one of data, path or url")

    @classmethod
    def from_bytes(cls, data: bytes, content_type: Optional[str] = None) -> "RasterSource":
        return cls(data=bytes(data), content_type=content_type)

    @classmethod
    def from_path(cls, path: Union[str, Path], content_type: Optional[str] = None) -> "RasterSource":
        path = Path(path)
        return cls(path=path, content_type=content_type or _guess_mime_type(path))

    @classmethod
    def from_url(cls, url: str, content_type: Optional[str] = None) -> "RasterSource":
        return cls(url=url, content_type=content_type)

    @classmethod
    def coerce(cls, value: RasterLike) -> "RasterSource":
        if isinstance(value, RasterSource):
            return value
        if isinstance(value, (bytes, bytearray)):
            return cls.from_bytes(bytes(value))
        if isinstance(value, Path):
            return cls.from_path(value)
        if isinstance(value, str):
            if value.startswith(("http://", "https://")):
                return cls.from_url(value)
            return cls.from_path(value)
        raise TypeError(f"Cannot use {type(value).__name__} as a raster source")

    def describe(self) -> str:
        if self.url is not None:
            return self.url
        if self.path is not None:
            return str(self.path)
        return f"<{len(self.data)} bytes>"

    @property
    def declares_image(self) -> bool:
        """True unless a content type is declared and it is not image/*."""
        return is_image_type(self.content_type)

    def _fetch_sync(self) -> Tuple[bytes, Optional[str]]:
        if self.data is not None:
            return self.data, self.content_type
        if self.path is not None:
            return self.path.read_bytes(), self.content_type
        body, served_type = download_url_bytes(self.url)
        return body, self.content_type or served_type

    async def fetch(self) -> Tuple[bytes, Optional[str]]:
        """
        (bytes, content type). For URLs without a declared type the
        response's Content-Type is used.
        """
        if self.data is not None:
            return self.data, self.content_type
        try:
            return await asyncio.to_thread(self._fetch_sync)
        except (OSError, requests.RequestException) as e:
            raise RasterDecodeError(f"Could not read {self.describe()}: {e}") from e

    async def read_bytes(self) -> bytes:
        body, _ = await self.fetch()
        return body

    async def dimensions(self) -> Tuple[int, int]:
        """
        Read (width, height). The decode handle is closed before returning.
        """
        raw = await self.read_bytes()

        def _size() -> Tuple[int, int]:
            with Image.open(BytesIO(raw)) as img:
                return img.size

        try:
            return await asyncio.to_thread(_size)
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise RasterDecodeError(f"Could not decode {self.describe()}: {e}") from e

    async def decode(self) -> Image.Image:
        """Fully decode the pixels. Single attempt, no retries."""
        raw = await self.read_bytes()

        def _load() -> Image.Image:
            img = Image.open(BytesIO(raw))
            img.load()
            return img

        try:
            return await asyncio.to_thread(_load)
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise RasterDecodeError(f"Could not decode {self.describe()}: {e}") from e
