# catalog.py

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, TypeVar

from raster_source import RasterSource


@dataclass(frozen=True)
class _CatalogEntry:
    id: str
    name: str
    description: str
    image_url: str

    @classmethod
    def from_record(cls, record: Dict[str, Any]):
        """
        Build from a stored record. Accepts both `image_url` (storage
        column) and `imageUrl` (client payloads).
        """
        image_url = record.get("image_url") or record.get("imageUrl")
        if not record.get("id") or not image_url:
            raise ValueError(f"Catalog record needs id and image_url: {record}")
        return cls(
            id=str(record["id"]),
            name=record.get("name") or "",
            description=record.get("description") or "",
            image_url=image_url,
        )

    @property
    def source(self) -> RasterSource:
        return RasterSource.coerce(self.image_url)


class OverlayOption(_CatalogEntry):
    """Decorative overlay drawn semi-transparently over the base."""


class BaseImage(_CatalogEntry):
    """Pre-seeded square base portrait."""


Entry = TypeVar("Entry", bound=_CatalogEntry)


DEFAULT_OVERLAYS = [
    OverlayOption(
        id="frame1",
        name="Golden Frame",
        image_url="https://images.unsplash.com/photo-1579965342575-16428a7c8881?auto=format&fit=crop&w=800&q=80",
        description="Elegant golden frame overlay",
    ),
    OverlayOption(
        id="frame2",
        name="Vintage Border",
        image_url="https://images.unsplash.com/photo-1584285418504-045785c9eedc?auto=format&fit=crop&w=800&q=80",
        description="Classic vintage border effect",
    ),
    OverlayOption(
        id="frame3",
        name="Modern Lines",
        image_url="https://images.unsplash.com/photo-1603513492128-ba7bc9b3e143?auto=format&fit=crop&w=800&q=80",
        description="Contemporary geometric overlay",
    ),
]


def find_overlay(overlays: Iterable[Entry], overlay_id: Optional[str]) -> Optional[Entry]:
    if not overlay_id:
        return None
    return next((o for o in overlays if o.id == overlay_id), None)
