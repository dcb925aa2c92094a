# render_surface.py

from __future__ import annotations

import asyncio
import itertools
from typing import Optional

from composite_renderer import CompositeRenderer, CompositeRequest, CompositeResult, RenderJob
from raster_source import RasterLike


class RenderSurface:
    """
    One display surface (e.g. the preview pane). Each submit gets a new,
    higher token; only the newest job may commit to `current`. Older
    in-flight jobs are cancelled and their late completions dropped.
    """

    def __init__(self, renderer: Optional[CompositeRenderer] = None, name: str = "preview"):
        self.renderer = renderer or CompositeRenderer()
        self.name = name
        self.current: Optional[CompositeResult] = None
        self.current_token: Optional[int] = None
        self._tokens = itertools.count(1)
        self._latest = 0
        self._job: Optional[RenderJob] = None

    @property
    def latest_token(self) -> int:
        return self._latest

    def is_stale(self, token: int) -> bool:
        return token != self._latest

    def submit(self, base: RasterLike, overlay: Optional[RasterLike] = None) -> RenderJob:
        token = next(self._tokens)
        self._latest = token

        if self._job is not None and not self._job.done():
            self._job.cancel()

        job = self.renderer.start(CompositeRequest.build(base, overlay))
        self._job = job
        job.task.add_done_callback(lambda task: self._on_done(token, task))
        return job

    def _on_done(self, token: int, task: asyncio.Future) -> None:
        if task.cancelled():
            return
        if task.exception() is not None:
            # failure is reported to whoever awaits the job
            return
        if self.is_stale(token):
            print(f"[surface:{self.name}] Dropping stale render #{token} (latest #{self._latest})")
            return
        self.current = task.result()
        self.current_token = token
