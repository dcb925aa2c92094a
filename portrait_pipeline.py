# portrait_pipeline.py

from pathlib import Path
from typing import Callable, Optional, Sequence, TypedDict

from catalog import DEFAULT_OVERLAYS, OverlayOption, find_overlay
from composite_renderer import CompositeRenderer
from image_validator import check_upload
from raster_source import RasterLike, RasterSource
from storage_client import upload_bytes_to_firebase

Publisher = Callable[[bytes, str], str]


class PortraitRunResult(TypedDict):
    card_path: str
    card_url: Optional[str]
    overlay_id: Optional[str]


async def run_portrait_pipeline(
    base: RasterLike,
    overlay_id: Optional[str] = None,
    overlays: Sequence[OverlayOption] = DEFAULT_OVERLAYS,
    *,
    custom_upload: bool = False,
    publish: bool = False,
    output_path: Optional[Path] = None,
    renderer: Optional[CompositeRenderer] = None,
    publisher: Publisher = upload_bytes_to_firebase,
) -> PortraitRunResult:
    """
    Base image + chosen overlay -> saved PNG (+ public URL when publishing).

    Args:
        base: catalog image URL/path, or the raw bytes of a user upload
        overlay_id: id from `overlays`; unknown or None renders base-only
        custom_upload: run the near-square check first (user uploads only)
        publish: hand the PNG bytes to `publisher` and return its URL

    Raises ImageRejected for refused uploads and BaseDecodeFailed when the
    base cannot be decoded.
    """
    source = RasterSource.coerce(base)

    # 1) Gate user uploads; catalog images were checked when added
    if custom_upload:
        source = await check_upload(source)

    # 2) Resolve overlay
    overlay = find_overlay(overlays, overlay_id)
    if overlay_id and overlay is None:
        print(f"[pipeline] Unknown overlay id {overlay_id!r}, rendering base only")

    # 3) Composite
    renderer = renderer or CompositeRenderer()
    result = await renderer.render(source, overlay.source if overlay else None)

    # 4) Export
    card_path = result.save(output_path)
    print(f"[pipeline] Composite saved: {card_path}")

    card_url = None
    if publish:
        card_url = publisher(result.to_exportable_bytes(), card_path.name)
        print(f"[pipeline] Composite published: {card_url}")

    return {
        "card_path": str(card_path),
        "card_url": card_url,
        "overlay_id": overlay.id if overlay else None,
    }
