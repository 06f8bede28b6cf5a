"""
Resize cache package.

Re-exports the lightweight public API. The orchestrator and pipeline pull in
Pillow-backed helpers from utils; import them from resize.cache and
resize.pipeline.
"""

from resize.errors import ResizeError, ConfigurationError, NotFoundError, ProcessingError
from resize.options import (
    TransformSpec, parse_options, normalize_format, build_cache_key,
    SUPPORTED_FORMATS, PERCENT_RE,
)
from resize.fingerprint import file_digest, options_slug, dest_filename, needs_rebuild, HASH_LENGTH
from resize.geometry import percent_to_geometry, target_size
from resize.publisher import ArtifactPublisher, StaticFile, StaticFileList
from resize.cache_admin import get_cache_info, clear_cache
