"""
Image loading utilities for the resize cache.

Decodes source images with Pillow and applies EXIF orientation so that
geometry works on the visually correct width and height.
"""

from resize.errors import ProcessingError

# Register HEIC/HEIF support via pillow-heif (if available)
try:
    import pillow_heif
    pillow_heif.register_heif_opener()
except ImportError:
    pass

# Lazy imports for heavy modules
_Image = None
_ImageOps = None

# Modes that resample correctly without conversion
_TRUE_COLOR_MODES = ('RGB', 'RGBA', 'L', 'CMYK')
_ALPHA_MODES = ('RGBA', 'LA', 'PA', 'La', 'RGBa')


def _ensure_pil():
    """Lazy load PIL."""
    global _Image, _ImageOps
    if _Image is None:
        from PIL import Image, ImageOps
        _Image = Image
        _ImageOps = ImageOps
    return _Image, _ImageOps


def has_alpha(pil_img):
    """True if the image carries an alpha channel or a transparency key."""
    return pil_img.mode in _ALPHA_MODES or 'transparency' in pil_img.info


def normalize_mode(pil_img):
    """
    Convert palette and bilevel images to RGB or RGBA, high bit-depth
    grayscale to 8-bit L.

    Images with alpha (or a palette transparency key) become RGBA so the
    transparency survives resampling.
    """
    if has_alpha(pil_img):
        return pil_img if pil_img.mode == 'RGBA' else pil_img.convert('RGBA')
    if pil_img.mode in _TRUE_COLOR_MODES:
        return pil_img
    if pil_img.mode.startswith('I') or pil_img.mode == 'F':
        return _to_8bit_grayscale(pil_img)
    return pil_img.convert('RGB')


def _to_8bit_grayscale(pil_img):
    """Scale 16/32-bit integer or float grayscale down to 8-bit L.

    A plain convert('L') clips everything above 255.
    """
    wide = pil_img.convert('F') if pil_img.mode == 'F' else pil_img.convert('I')
    _, high = wide.getextrema()
    if high > 255:
        wide = wide.point(lambda v: v / 256)
    return wide.convert('L')


def load_image(src_path):
    """
    Decode an image and apply its EXIF orientation.

    Args:
        src_path: Path to the image file (str or Path)

    Returns:
        tuple: (pil_img, source_format) - oriented, mode-normalized PIL Image and
               the Pillow format name of the source (e.g. "PNG"), or None if unknown

    Raises:
        ProcessingError: If the file cannot be decoded
    """
    Image, ImageOps = _ensure_pil()

    try:
        with Image.open(src_path) as opened:
            opened.load()
            source_format = opened.format
            oriented = ImageOps.exif_transpose(opened)
            pil_img = normalize_mode(oriented)
            # Detach from the file handle before the context closes it
            if pil_img is opened:
                pil_img = opened.copy()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ProcessingError(f"Could not decode image {src_path}: {e}") from e

    return pil_img, source_format
