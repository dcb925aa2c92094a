"""
Global configuration for the portrait overlay project.

Loads secrets from .env (FIREBASE_STORAGE_BUCKET, ...) and defines the paths
and compositing constants used across the app.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


BASE_DIR = Path(__file__).resolve().parent
MEDIA_DIR = Path(os.getenv("MEDIA_DIR", str(BASE_DIR / "media")))
MEDIA_DIR.mkdir(parents=True, exist_ok=True)


SERVICE_ACCOUNT_PATH = Path(
    os.getenv("SERVICE_ACCOUNT_PATH", str(BASE_DIR / "firebase-key.json"))
)

FIREBASE_STORAGE_BUCKET = os.getenv("FIREBASE_STORAGE_BUCKET")


# ----------------------------
# Compositing
# ----------------------------

# Side length of the square output buffer.
CANVAS_SIZE = int(os.getenv("CANVAS_SIZE", "400"))

# Overlay is drawn at this fixed opacity over the base.
OVERLAY_OPACITY = float(os.getenv("OVERLAY_OPACITY", "0.5"))

# Absolute pixel tolerance: |w - h| must be strictly below this.
SQUARE_TOLERANCE_PX = int(os.getenv("SQUARE_TOLERANCE_PX", "2"))


# ----------------------------
# Export / publish
# ----------------------------

EXPORT_FILENAME_STEM = os.getenv("EXPORT_FILENAME_STEM", "edited-image")
PUBLISH_PREFIX = os.getenv("PUBLISH_PREFIX", "creations")

URL_FETCH_TIMEOUT_SECONDS = int(os.getenv("URL_FETCH_TIMEOUT_SECONDS", "30"))
