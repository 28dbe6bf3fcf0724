"""Pillow-based image decoding, resizing and WebP re-encoding."""

from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

from lyntfeed.exceptions import MediaProcessingFailed, UnsupportedMedia


TARGET_FORMAT = "WEBP"
TARGET_EXTENSION = "webp"
TARGET_CONTENT_TYPE = "image/webp"

DEFAULT_MAX_WIDTH = 800
DEFAULT_QUALITY = 50


def fit_within_width(width: int, height: int, max_width: int) -> tuple[int, int]:
    """
    Compute output size for a width-bounded box without upscaling.

    Examples:
        (2000, 1000, 800) -> (800, 400)
        (400, 300, 800) -> (400, 300)
    """
    if width <= max_width:
        return width, height
    scaled_height = max(1, round(height * max_width / width))
    return max_width, scaled_height


def _normalize_mode(img: Image.Image) -> Image.Image:
    """Convert to a mode the WebP encoder accepts."""
    if img.mode in ("RGB", "RGBA"):
        return img
    if img.mode in ("LA", "PA") or (img.mode == "P" and "transparency" in img.info):
        return img.convert("RGBA")
    return img.convert("RGB")


def transcode(
    raw: bytes,
    max_width: int = DEFAULT_MAX_WIDTH,
    quality: int = DEFAULT_QUALITY,
) -> bytes:
    """
    Decode an uploaded image and re-encode it as bounded-size WebP.

    Args:
        raw: Uploaded bytes in any format Pillow can decode
        max_width: Width of the bounding box
        quality: Lossy encoder quality (0-100)

    Returns:
        Encoded WebP bytes

    Raises:
        UnsupportedMedia: If the bytes are not a decodable image
        MediaProcessingFailed: If re-encoding fails
    """
    if not raw:
        raise UnsupportedMedia("Empty image upload")

    try:
        img = Image.open(BytesIO(raw))
        img.load()
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,  # Pillow's signal for some corrupt files
        ValueError,
    ) as e:
        raise UnsupportedMedia(f"Cannot decode image: {e}") from e

    try:
        img = ImageOps.exif_transpose(img)
        size = fit_within_width(img.width, img.height, max_width)
        if size != img.size:
            img = img.resize(size, Image.Resampling.LANCZOS)

        out = BytesIO()
        _normalize_mode(img).save(out, format=TARGET_FORMAT, quality=quality)
    except (OSError, ValueError) as e:
        raise MediaProcessingFailed(f"Cannot encode image: {e}") from e

    return out.getvalue()
