# composite_renderer.py

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image

from config import CANVAS_SIZE, EXPORT_FILENAME_STEM, MEDIA_DIR, OVERLAY_OPACITY
from errors import BaseDecodeFailed, OverlayDecodeFailed, RasterDecodeError
from raster_source import RasterLike, RasterSource


@dataclass(frozen=True)
class CompositeRequest:
    base: RasterSource
    overlay: Optional[RasterSource] = None

    @classmethod
    def build(cls, base: RasterLike, overlay: Optional[RasterLike] = None) -> "CompositeRequest":
        return cls(
            base=RasterSource.coerce(base),
            overlay=RasterSource.coerce(overlay) if overlay is not None else None,
        )


class CompositeResult:
    """
    Square RGBA buffer owned by a single render call.
    """

    def __init__(self, size: int):
        self.image = Image.new("RGBA", (size, size), (0, 0, 0, 0))

    @property
    def size(self) -> int:
        return self.image.width

    def to_exportable_bytes(self) -> bytes:
        """PNG of the buffer as it is right now."""
        buf = BytesIO()
        self.image.save(buf, format="PNG")
        return buf.getvalue()

    def to_array(self) -> np.ndarray:
        return np.array(self.image)

    def save(self, path: Optional[Path] = None) -> Path:
        if path is None:
            MEDIA_DIR.mkdir(parents=True, exist_ok=True)
            path = MEDIA_DIR / f"{EXPORT_FILENAME_STEM}_{uuid.uuid4().hex}.png"
        path = Path(path)
        path.write_bytes(self.to_exportable_bytes())
        return path


def _discard(task: Optional[asyncio.Future]) -> None:
    if task is None:
        return
    if not task.done():
        task.cancel()
    elif not task.cancelled():
        # mark the outcome as retrieved
        task.exception()


class RenderJob:
    """
    One in-flight render. Must be created from inside a running event loop.

    Both decodes start immediately; the overlay is only ever drawn after the
    base has been committed to the buffer.
    """

    def __init__(self, renderer: "CompositeRenderer", request: CompositeRequest):
        self.request = request
        self._renderer = renderer
        self._result: Optional[CompositeResult] = None
        self._base_committed = asyncio.Event()
        self._task = asyncio.ensure_future(self._run())

    @property
    def task(self) -> asyncio.Future:
        return self._task

    def cancel(self) -> None:
        self._task.cancel()

    def done(self) -> bool:
        return self._task.done()

    async def _run(self) -> CompositeResult:
        result = CompositeResult(self._renderer.size)

        base_task = asyncio.ensure_future(self.request.base.decode())
        overlay_task = None
        if self.request.overlay is not None:
            overlay_task = asyncio.ensure_future(self.request.overlay.decode())

        try:
            base = await base_task
        except RasterDecodeError as e:
            _discard(overlay_task)
            raise BaseDecodeFailed(str(e)) from e
        except asyncio.CancelledError:
            _discard(overlay_task)
            raise

        self._renderer.draw_base(result, base)
        self._result = result
        self._base_committed.set()

        if overlay_task is None:
            return result

        try:
            overlay = await self._await_overlay(overlay_task)
        except OverlayDecodeFailed as e:
            print(f"[renderer] Overlay skipped, keeping base only: {e}")
            return result

        self._renderer.draw_overlay(result, overlay)
        return result

    @staticmethod
    async def _await_overlay(overlay_task: asyncio.Future) -> Image.Image:
        try:
            return await overlay_task
        except RasterDecodeError as e:
            raise OverlayDecodeFailed(str(e)) from e

    async def preview(self) -> CompositeResult:
        """
        Live buffer as soon as the base is drawn. Exporting it before the
        overlay lands gives the base-only image.
        """
        waiter = asyncio.ensure_future(self._base_committed.wait())
        try:
            await asyncio.wait({waiter, self._task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()

        if self._result is None:
            return await self._task
        return self._result

    async def wait(self) -> CompositeResult:
        return await self._task

    def __await__(self):
        return self.wait().__await__()


class CompositeRenderer:
    def __init__(self, size: int = CANVAS_SIZE, overlay_opacity: float = OVERLAY_OPACITY):
        if size <= 0:
            raise ValueError("size must be > 0")
        if not 0.0 <= overlay_opacity <= 1.0:
            raise ValueError("overlay_opacity must be between 0 and 1")
        self.size = size
        self.overlay_opacity = overlay_opacity

    def draw_base(self, result: CompositeResult, base: Image.Image) -> None:
        """Stretch to the full buffer, full opacity, origin (0, 0)."""
        base = base.convert("RGBA")
        if base.size != result.image.size:
            base = base.resize(result.image.size, Image.LANCZOS)
        result.image.paste(base, (0, 0))

    def draw_overlay(self, result: CompositeResult, overlay: Image.Image) -> None:
        overlay = overlay.convert("RGBA")
        if overlay.size != result.image.size:
            overlay = overlay.resize(result.image.size, Image.LANCZOS)

        opacity = self.overlay_opacity
        alpha = overlay.getchannel("A").point(lambda p: int(p * opacity))
        overlay.putalpha(alpha)

        result.image.alpha_composite(overlay)

    def start(self, request: CompositeRequest) -> RenderJob:
        return RenderJob(self, request)

    async def render_request(self, request: CompositeRequest) -> CompositeResult:
        return await self.start(request)

    async def render(
        self,
        base: RasterLike,
        overlay: Optional[RasterLike] = None,
    ) -> CompositeResult:
        """
        Base decode failure raises BaseDecodeFailed; a broken overlay
        degrades to the base-only composite.
        """
        return await self.render_request(CompositeRequest.build(base, overlay))


async def render(base: RasterLike, overlay: Optional[RasterLike] = None) -> CompositeResult:
    return await CompositeRenderer().render(base, overlay)
