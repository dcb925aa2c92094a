import uuid
from typing import Optional, Tuple

import firebase_admin
import requests
from firebase_admin import credentials
from firebase_admin import storage as fb_storage

from config import (
    FIREBASE_STORAGE_BUCKET,
    PUBLISH_PREFIX,
    SERVICE_ACCOUNT_PATH,
    URL_FETCH_TIMEOUT_SECONDS,
)


def _bucket():
    """
    Firebase is initialised on first use so that importing this module
    (e.g. for URL downloads only) never needs credentials.
    """
    if not firebase_admin._apps:
        cred = credentials.Certificate(str(SERVICE_ACCOUNT_PATH))
        firebase_admin.initialize_app(cred, {"storageBucket": FIREBASE_STORAGE_BUCKET})
    return fb_storage.bucket()


def upload_bytes_to_firebase(
    data: bytes,
    filename: Optional[str] = None,
    prefix: str = PUBLISH_PREFIX,
    content_type: str = "image/png",
) -> str:
    """
    Upload an exported composite under gs://<bucket>/<prefix>/<filename>.
    Returns a public HTTPS URL.
    """
    filename = filename or f"{uuid.uuid4().hex}.png"
    blob = _bucket().blob(f"{prefix}/{filename}")
    blob.upload_from_string(data, content_type=content_type)
    blob.make_public()
    return blob.public_url


def download_url_bytes(public_url: str) -> Tuple[bytes, Optional[str]]:
    """
    Fetch any public HTTPS URL.
    Returns (body, content type without parameters or None).
    """
    response = requests.get(public_url, timeout=URL_FETCH_TIMEOUT_SECONDS)
    response.raise_for_status()

    content_type = response.headers.get("Content-Type")
    if content_type:
        content_type = content_type.split(";")[0].strip().lower() or None

    return response.content, content_type
