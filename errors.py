# errors.py


class PortraitError(Exception):
    """Root of every error raised by the compositing engine."""


class ImageRejected(PortraitError):
    """
    A candidate upload was refused. `user_message` is safe to show as-is.
    """

    user_message = "This image cannot be used."

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.user_message)
        self.detail = detail


class UnsupportedMediaError(ImageRejected):
    user_message = "Please upload an image file."


class AspectRatioRejected(ImageRejected):
    user_message = "Please upload a square image (1:1 ratio)."


class RasterDecodeError(PortraitError):
    """A raster source could not be read or decoded."""


class BaseDecodeFailed(PortraitError):
    """Terminal for a single render call. No composite is produced."""


class OverlayDecodeFailed(PortraitError):
    """Absorbed by the renderer; the composite degrades to base-only."""
