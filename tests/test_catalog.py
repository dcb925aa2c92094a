import pytest

import catalog_client
from catalog import DEFAULT_OVERLAYS, BaseImage, OverlayOption, find_overlay
from raster_source import RasterSource


def test_from_record_accepts_storage_and_client_keys():
    a = OverlayOption.from_record({"id": "o1", "name": "Glow", "description": "d", "image_url": "https://x/o1.png"})
    b = OverlayOption.from_record({"id": "o1", "name": "Glow", "description": "d", "imageUrl": "https://x/o1.png"})

    assert a == b
    assert a.source == RasterSource.from_url("https://x/o1.png")


def test_from_record_requires_id_and_image():
    with pytest.raises(ValueError):
        BaseImage.from_record({"name": "no id", "image_url": "https://x/a.png"})
    with pytest.raises(ValueError):
        BaseImage.from_record({"id": "b1"})


def test_local_image_url_becomes_path_source(tmp_path):
    image = BaseImage.from_record({"id": "b1", "image_url": str(tmp_path / "b1.png")})
    assert image.source.path == tmp_path / "b1.png"
    assert image.source.content_type == "image/png"


def test_find_overlay():
    assert find_overlay(DEFAULT_OVERLAYS, "frame2").name == "Vintage Border"
    assert find_overlay(DEFAULT_OVERLAYS, "nope") is None
    assert find_overlay(DEFAULT_OVERLAYS, None) is None


class _Doc:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    def to_dict(self):
        return dict(self._data)


class _Query:
    def __init__(self, docs):
        self.docs = docs
        self.ordered_by = None

    def order_by(self, field, direction=None):
        self.ordered_by = (field, direction)
        return self

    def stream(self):
        return iter(self.docs)


class _FakeDb:
    def __init__(self, collections):
        self.collections = collections
        self.queries = {}

    def collection(self, name):
        query = _Query(self.collections.get(name, []))
        self.queries[name] = query
        return query


def test_list_overlays_reads_newest_first_and_skips_bad_records(monkeypatch):
    db = _FakeDb(
        {
            "overlays": [
                _Doc("o2", {"name": "Neon", "description": "", "image_url": "https://x/o2.png"}),
                _Doc("o1", {"name": "Broken"}),
            ]
        }
    )
    monkeypatch.setattr(catalog_client, "_db", lambda: db)

    overlays = catalog_client.list_overlays()

    assert [o.id for o in overlays] == ["o2"]
    assert db.queries["overlays"].ordered_by[0] == "created_at"


def test_list_base_images(monkeypatch):
    db = _FakeDb(
        {"base_images": [_Doc("b1", {"id": "b1", "name": "Model", "image_url": "https://x/b1.png"})]}
    )
    monkeypatch.setattr(catalog_client, "_db", lambda: db)

    images = catalog_client.list_base_images()

    assert images == [BaseImage(id="b1", name="Model", description="", image_url="https://x/b1.png")]
