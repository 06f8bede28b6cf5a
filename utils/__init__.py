"""
Resize cache utilities package.

Re-exports image helpers and logging setup.
"""

from utils.image_loading import load_image, normalize_mode, has_alpha
from utils.image_transforms import (
    resize_image, strip_metadata, flatten_alpha, write_image_atomic,
    pil_format_for, encoder_options, resample_filter,
    PIL_FORMATS, OPAQUE_FORMATS, RESAMPLE_FILTERS,
)
from utils.log import setup_logging
