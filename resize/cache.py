"""
Resize cache orchestrator.

Resolves a source image under the site root, derives the cache filename,
builds the artifact only when it is missing or stale, and returns its URL.
"""

import logging
import os
import threading
import weakref

from resize.errors import ConfigurationError, NotFoundError
from resize.fingerprint import dest_filename, needs_rebuild
from resize.options import parse_options
from resize.pipeline import process_image

logger = logging.getLogger(__name__)

CACHE_DIR = 'cache/resize/'


class _KeyedLocks:
    """One lock per destination path, dropped once no caller holds it."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = weakref.WeakValueDictionary()

    def get(self, key):
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def __len__(self):
        return len(self._locks)


# Shared across instances so two caches over one directory still serialize builds
_dest_locks = _KeyedLocks()


def join_url(base_url, relative_path):
    """Join a site base URL and a cache-relative path with exactly one slash."""
    return f"{(base_url or '').rstrip('/')}/{relative_path.lstrip('/')}"


def _require_string(name, value):
    if not isinstance(value, str):
        raise ConfigurationError(f"`{name}` must be a string - got: {type(value).__name__}")
    if not value:
        raise ConfigurationError(f"`{name}` may not be empty")


class ResizeCache:
    """
    Content-addressed cache of resized images for one site.

    Usage:
        cache = ResizeCache('/srv/site', base_url='/blog', publisher=static_files)
        url = cache.resize('/assets/a.png', '800x800', 'webp')
    """

    def __init__(self, site_root, base_url='', cache_dir=CACHE_DIR, publisher=None,
                 settings=None, publish_on_hit=True, pipeline=None):
        """
        Args:
            site_root: Source root of the site; sources and the cache live under it
            base_url: Prefix for returned URLs
            cache_dir: Cache directory relative to site_root
            publisher: ArtifactPublisher notified about artifacts to ship, or None
            settings: Output settings passed to the pipeline
            publish_on_hit: Also publish fresh artifacts left by earlier runs
            pipeline: Callable with process_image's signature
        """
        self.site_root = str(site_root)
        self.base_url = base_url or ''
        self.cache_dir = cache_dir
        self.publisher = publisher
        self.settings = dict(settings or {})
        self.publish_on_hit = publish_on_hit
        self.pipeline = pipeline or process_image
        self._published = set()

    @property
    def cache_path(self):
        """Absolute cache directory."""
        return os.path.join(self.site_root, self.cache_dir)

    def source_path(self, source):
        """Absolute path of a site-relative source.

        Raises:
            NotFoundError: If the file is missing or unreadable
        """
        src_path = os.path.join(self.site_root, source.lstrip('/'))
        if not os.path.isfile(src_path) or not os.access(src_path, os.R_OK):
            raise NotFoundError(f"Image at {src_path} is not readable (source: {source!r})")
        return src_path

    def resize(self, source, options, format=None):
        """
        Return the URL of `source` resized per `options`, building it if needed.

        Args:
            source: Site-relative image path, e.g. "/assets/a.png"
            options: Geometry with an optional embedded format, e.g. "800x800|webp"
            format: Optional explicit output format ("jpg", "jpeg", "webp")

        Returns:
            str: base_url joined with the cache-relative artifact path

        Raises:
            ConfigurationError: Invalid arguments
            NotFoundError: Unreadable source
            ProcessingError: Image or filesystem failure while building
        """
        _require_string('source', source)
        _require_string('options', options)
        if format is not None and not isinstance(format, str):
            raise ConfigurationError(f"`format` must be a string - got: {type(format).__name__}")

        spec = parse_options(options, format)
        src_path = self.source_path(source)

        filename = dest_filename(src_path, spec.cache_key, spec.extension)
        dest_path = os.path.join(self.cache_path, filename)
        dest_path_rel = os.path.join(self.cache_dir, filename)

        os.makedirs(self.cache_path, exist_ok=True)

        with _dest_locks.get(os.path.abspath(dest_path)):
            if needs_rebuild(src_path, dest_path):
                suffix = f" (format={spec.format})" if spec.format else ""
                logger.info("Resizing '%s' to '%s' - using options: '%s'%s",
                            source, dest_path_rel, options, suffix)
                self.pipeline(src_path, spec.geometry, dest_path, spec.format, self.settings)
                self._publish(filename)
            else:
                logger.debug("Cache hit for '%s': %s", source, dest_path_rel)
                if self.publish_on_hit and dest_path not in self._published:
                    self._publish(filename)

        return join_url(self.base_url, dest_path_rel)

    def _publish(self, filename):
        self._published.add(os.path.join(self.cache_path, filename))
        if self.publisher is not None:
            self.publisher.publish(self.site_root, self.cache_dir, filename)
