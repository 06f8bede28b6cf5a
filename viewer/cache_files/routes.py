from flask import current_app, send_from_directory
from viewer.cache_files import cache_files_bp


@cache_files_bp.route('/<path:filename>')
def cached_image(filename):
    """Serve a resized image straight from the cache directory."""
    cache = current_app.extensions['resize_cache']
    response = send_from_directory(cache.cache_path, filename)
    # A cached filename never changes content
    response.headers['Cache-Control'] = 'public, max-age=31536000, immutable'
    return response
