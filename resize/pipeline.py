"""
Transform pipeline for resized images.

Steps, in order: decode, auto-orient, resolve percentages against the
oriented size, resize, strip metadata, flatten alpha for opaque formats,
encode (converting when a format was requested) and write.
"""

import logging

from resize.geometry import percent_to_geometry, target_size
from resize.options import PERCENT_RE
from utils.image_loading import load_image
from utils.image_transforms import (
    OPAQUE_FORMATS,
    encoder_options,
    flatten_alpha,
    pil_format_for,
    resize_image,
    strip_metadata,
    write_image_atomic,
)

logger = logging.getLogger(__name__)


def process_image(src_path, geometry, dest_path, out_format=None, settings=None):
    """
    Resize src_path according to geometry and write the result to dest_path.

    Args:
        src_path: Source image path
        geometry: Geometry expression ("800x800", "50%", "x300", "200x200^", ...)
        dest_path: Cache file to write
        out_format: Canonical output format ("jpg", "webp"), or None to keep the source's
        settings: Output settings dict (jpeg_quality, webp_quality, webp_lossless,
                  background, resample); defaults apply to missing keys

    Returns:
        tuple: (width, height) of the written image

    Raises:
        ConfigurationError: For a non-positive percentage or invalid geometry
        ProcessingError: For decode, resize, encode or write failures
    """
    settings = settings or {}

    pil_img, source_format = load_image(src_path)

    geometry = geometry.strip()
    if PERCENT_RE.match(geometry):
        geometry = percent_to_geometry(pil_img.size, geometry)
        logger.debug("Resolved percentage for %s to %s", src_path, geometry)

    size = target_size(pil_img.size, geometry)
    pil_img = resize_image(pil_img, size, settings.get('resample', 'lanczos'))
    pil_img = strip_metadata(pil_img)

    if out_format in OPAQUE_FORMATS:
        pil_img = flatten_alpha(pil_img, settings.get('background', 'white'))

    pil_format = pil_format_for(out_format, source_format, src_path)
    write_image_atomic(pil_img, dest_path, pil_format, **encoder_options(pil_format, settings))
    return pil_img.size
