"""Cache management helpers for resized images."""

import os


def _cache_files(cache_dir):
    if not os.path.isdir(cache_dir):
        return []
    with os.scandir(cache_dir) as entries:
        return [entry for entry in entries if entry.is_file(follow_symlinks=False)]


def get_cache_info(cache_dir):
    """Return file count, total size and newest mtime for a cache directory."""
    files = _cache_files(cache_dir)
    total_size = 0
    latest_mtime = 0.0
    for entry in files:
        st = entry.stat(follow_symlinks=False)
        total_size += st.st_size
        latest_mtime = max(latest_mtime, st.st_mtime)

    return {
        'n_files': len(files),
        'total_size_mb': round(total_size / (1024 * 1024), 2),
        'latest_mtime': latest_mtime,
        'cache_dir': str(cache_dir),
    }


def clear_cache(cache_dir, confirm=True):
    """Delete every cached artifact in cache_dir.

    Artifacts are otherwise never removed; this is the manual way to reclaim space.
    """
    files = _cache_files(cache_dir)
    if not files:
        return {'files_deleted': 0, 'bytes_deleted': 0}

    if confirm:
        msg = f"Delete {len(files)} cached images in {cache_dir}?\nProceed? (y/n): "
        if input(msg).strip().lower() != 'y':
            return {'files_deleted': 0, 'bytes_deleted': 0}

    files_deleted = 0
    bytes_deleted = 0
    for entry in files:
        size = entry.stat(follow_symlinks=False).st_size
        os.remove(entry.path)
        files_deleted += 1
        bytes_deleted += size

    return {'files_deleted': files_deleted, 'bytes_deleted': bytes_deleted}
