"""
Cache addressing for resized images.

An artifact's filename is derived from the source file's content hash and
the normalized options, so no index is needed: the same bytes and options
always land on the same file.
"""

import hashlib
import os
import re

HASH_LENGTH = 32
_CHUNK_SIZE = 1024 * 1024

_SLUG_STRIP_RE = re.compile(r'[^0-9a-z]+')


def file_digest(path):
    """SHA-256 hex digest of a file's bytes."""
    h = hashlib.sha256()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b''):
            h.update(chunk)
    return h.hexdigest()


def options_slug(cache_key):
    """Filesystem-safe slug: lowercase, '%' -> 'pct', '.' -> 'p', then [0-9a-z] only."""
    s = str(cache_key).strip().lower()
    s = s.replace('%', 'pct').replace('.', 'p')
    return _SLUG_STRIP_RE.sub('', s)


def dest_filename(src_path, cache_key, out_ext=None):
    """
    Build the cache filename for a source image and normalized options.

    Args:
        src_path: Path to the source image
        cache_key: Normalized cache key string (geometry plus format)
        out_ext: Output extension ("webp" or ".webp"); None keeps the source's

    Returns:
        str: "<hash-prefix>_<slug><ext>"
    """
    short_hash = file_digest(src_path)[:HASH_LENGTH]
    if out_ext:
        ext = out_ext if out_ext.startswith('.') else f".{out_ext}"
    else:
        ext = os.path.splitext(src_path)[1]
    return f"{short_hash}_{options_slug(cache_key)}{ext}"


def needs_rebuild(src_path, dest_path):
    """True when the artifact is missing or not strictly newer than its source.

    Equal mtimes rebuild: coarse timestamp resolution can hide a fresh source.
    """
    try:
        dest_mtime = os.stat(dest_path).st_mtime_ns
    except FileNotFoundError:
        return True
    return dest_mtime <= os.stat(src_path).st_mtime_ns
