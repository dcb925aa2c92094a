import asyncio
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

import pytest
from PIL import Image

from errors import RasterDecodeError
from raster_source import RasterSource

RED = (255, 0, 0)
BLUE = (0, 0, 255)


def make_png(size=(400, 400), color=RED, mode="RGB") -> bytes:
    buf = BytesIO()
    Image.new(mode, size, color).save(buf, format="PNG")
    return buf.getvalue()


@dataclass(frozen=True)
class GatedSource(RasterSource):
    """
    Decodes only once `gate` is set; with no `inner` the decode fails.
    """

    gate: Optional[asyncio.Event] = None
    inner: Optional[RasterSource] = None

    async def decode(self):
        await self.gate.wait()
        if self.inner is None:
            raise RasterDecodeError("gated source has nothing to decode")
        return await self.inner.decode()


def gated(gate: asyncio.Event, png: Optional[bytes] = None) -> GatedSource:
    inner = RasterSource.from_bytes(png, "image/png") if png is not None else None
    return GatedSource(url="gated://test", content_type="image/png", gate=gate, inner=inner)


@pytest.fixture
def red_png() -> bytes:
    return make_png(color=RED)


@pytest.fixture
def blue_png() -> bytes:
    return make_png(color=BLUE)
