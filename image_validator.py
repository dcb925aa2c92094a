# image_validator.py

from errors import AspectRatioRejected, RasterDecodeError, UnsupportedMediaError
from raster_source import RasterLike, RasterSource, is_image_type
from config import SQUARE_TOLERANCE_PX


def is_near_square(width: int, height: int) -> bool:
    # Absolute pixel difference; a 1px gap absorbs encoder rounding.
    return abs(width - height) < SQUARE_TOLERANCE_PX


async def check_upload(raster: RasterLike) -> RasterSource:
    """
    Gate a custom upload before it can be used as a base image.

    Raises UnsupportedMediaError when the content type (declared, or served
    for URLs) is not image/* or the bytes do not decode, AspectRatioRejected
    when the image is not square. Returns the accepted source.
    """
    source = RasterSource.coerce(raster)

    if not source.declares_image:
        raise UnsupportedMediaError(f"{source.describe()} is {source.content_type}")

    try:
        raw, content_type = await source.fetch()
    except RasterDecodeError as e:
        raise UnsupportedMediaError(str(e)) from e

    if not is_image_type(content_type):
        raise UnsupportedMediaError(f"{source.describe()} is {content_type}")

    try:
        width, height = await RasterSource.from_bytes(raw, content_type).dimensions()
    except RasterDecodeError as e:
        raise UnsupportedMediaError(f"Could not decode {source.describe()}: {e}") from e

    if not is_near_square(width, height):
        raise AspectRatioRejected(f"{source.describe()} is {width}x{height}")

    return source


async def validate(raster: RasterLike) -> bool:
    """True when the raster is an image with near-square dimensions."""
    try:
        await check_upload(raster)
    except (UnsupportedMediaError, AspectRatioRejected) as e:
        print(f"[validator] Rejected: {e}")
        return False
    return True


is_acceptable = validate
