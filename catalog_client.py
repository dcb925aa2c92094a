from typing import List

import firebase_admin
from firebase_admin import credentials, firestore

from catalog import BaseImage, OverlayOption
from config import FIREBASE_STORAGE_BUCKET, SERVICE_ACCOUNT_PATH

OVERLAYS_COLLECTION = "overlays"
BASE_IMAGES_COLLECTION = "base_images"


def _db():
    if not firebase_admin._apps:
        cred = credentials.Certificate(str(SERVICE_ACCOUNT_PATH))
        firebase_admin.initialize_app(cred, {"storageBucket": FIREBASE_STORAGE_BUCKET})
    return firestore.client()


def _newest_first(collection: str) -> List[dict]:
    query = _db().collection(collection).order_by(
        "created_at", direction=firestore.Query.DESCENDING
    )
    records = []
    for doc in query.stream():
        data = doc.to_dict() or {}
        data.setdefault("id", doc.id)
        records.append(data)
    return records


def list_overlays() -> List[OverlayOption]:
    """
    Read-only listing of the admin-managed overlays, newest first.
    Records missing an id or image URL are skipped.
    """
    overlays = []
    for record in _newest_first(OVERLAYS_COLLECTION):
        try:
            overlays.append(OverlayOption.from_record(record))
        except ValueError as e:
            print(f"[catalog] Skipping overlay record: {e}")
    return overlays


def list_base_images() -> List[BaseImage]:
    """
    Read-only listing of the pre-seeded base portraits, newest first.
    """
    images = []
    for record in _newest_first(BASE_IMAGES_COLLECTION):
        try:
            images.append(BaseImage.from_record(record))
        except ValueError as e:
            print(f"[catalog] Skipping base image record: {e}")
    return images
