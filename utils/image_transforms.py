"""
Image transformation utilities for the resize cache.

Resizing, metadata stripping, alpha flattening and encoding.
"""

import os
import tempfile

from resize.errors import ConfigurationError, ProcessingError
from utils.image_loading import has_alpha

# Lazy imports for heavy modules
_Image = None

# Canonical format code -> Pillow format name
PIL_FORMATS = {
    'jpg': 'JPEG',
    'webp': 'WEBP',
}

# Formats that cannot store alpha
OPAQUE_FORMATS = ('jpg',)

RESAMPLE_FILTERS = ('lanczos', 'bicubic', 'bilinear', 'nearest')


def _ensure_pil():
    """Lazy load PIL."""
    global _Image
    if _Image is None:
        from PIL import Image
        _Image = Image
    return _Image


def resample_filter(name):
    """Map a configured resample name to a Pillow resampling filter."""
    Image = _ensure_pil()
    key = str(name).strip().lower()
    if key not in RESAMPLE_FILTERS:
        raise ConfigurationError(
            f"Unknown resample filter {name!r}. Supported: {', '.join(RESAMPLE_FILTERS)}"
        )
    return getattr(Image.Resampling, key.upper())


def resize_image(pil_img, size, resample='lanczos'):
    """Resize to an exact (width, height); returns the image unchanged if already that size."""
    if tuple(size) == pil_img.size:
        return pil_img
    try:
        return pil_img.resize(tuple(size), resample_filter(resample))
    except (OSError, ValueError, MemoryError) as e:
        raise ProcessingError(f"Could not resize image to {size[0]}x{size[1]}: {e}") from e


def strip_metadata(pil_img):
    """Drop EXIF, ICC profiles, comments and other non-pixel data."""
    if 'transparency' in pil_img.info and pil_img.mode != 'RGBA':
        pil_img = pil_img.convert('RGBA')
    stripped = pil_img.copy()
    stripped.info = {}
    return stripped


def flatten_alpha(pil_img, background='white'):
    """
    Composite any alpha channel onto a solid background.

    Args:
        pil_img: PIL Image
        background: Pillow colour (name, hex string or RGB tuple)

    Returns:
        PIL Image in RGB mode (L and CMYK images without alpha are returned as-is)
    """
    Image = _ensure_pil()

    if not has_alpha(pil_img):
        return pil_img if pil_img.mode in ('RGB', 'L', 'CMYK') else pil_img.convert('RGB')

    rgba = pil_img if pil_img.mode == 'RGBA' else pil_img.convert('RGBA')
    try:
        flat = Image.new('RGB', rgba.size, background)
    except ValueError as e:
        raise ConfigurationError(f"Invalid background colour {background!r}: {e}") from e
    flat.paste(rgba, mask=rgba.getchannel('A'))
    return flat


def pil_format_for(out_format, source_format=None, src_path=None):
    """
    Pillow format name used to encode the output.

    Args:
        out_format: Canonical output format ("jpg", "webp") or None
        source_format: Pillow format name of the source, used when out_format is None
        src_path: Source path, used to guess the format from its extension

    Raises:
        ProcessingError: If no encoder can be determined
    """
    if out_format:
        return PIL_FORMATS[out_format]
    if source_format:
        return source_format
    Image = _ensure_pil()
    ext = os.path.splitext(str(src_path or ''))[1].lower()
    fmt = Image.registered_extensions().get(ext)
    if fmt is None:
        raise ProcessingError(f"Cannot determine output format for {src_path}")
    return fmt


def encoder_options(pil_format, settings=None):
    """Encoder keyword arguments for a Pillow format name."""
    settings = settings or {}
    if pil_format == 'JPEG':
        return {'quality': settings.get('jpeg_quality', 90)}
    if pil_format == 'WEBP':
        if settings.get('webp_lossless', False):
            return {'lossless': True}
        return {'quality': settings.get('webp_quality', 90)}
    return {}


def write_image_atomic(pil_img, dest_path, pil_format, **save_kwargs):
    """
    Encode into a temporary file next to dest_path, then rename it into place.

    Readers never observe a partially written artifact.

    Raises:
        ProcessingError: If encoding or any filesystem step fails
    """
    dest_dir = os.path.dirname(os.path.abspath(dest_path))
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(dir=dest_dir, prefix='.resize-', suffix='.tmp')
        with os.fdopen(fd, 'wb') as f:
            pil_img.save(f, format=pil_format, **save_kwargs)
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, dest_path)
        tmp_path = None
    except (OSError, ValueError, KeyError, MemoryError) as e:
        raise ProcessingError(f"Could not write image {dest_path}: {e}") from e
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)
