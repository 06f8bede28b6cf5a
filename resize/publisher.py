"""
Publishing of cache artifacts into the site's build output.
"""

import os
import shutil
from typing import NamedTuple, Protocol, runtime_checkable


@runtime_checkable
class ArtifactPublisher(Protocol):
    """Receives every artifact that must ship with the built site."""

    def publish(self, site_root, relative_dir, filename):
        ...


class StaticFile(NamedTuple):
    site_root: str
    relative_dir: str
    filename: str

    @property
    def relative_path(self):
        return os.path.join(self.relative_dir, self.filename)

    @property
    def path(self):
        return os.path.join(self.site_root, self.relative_path)


class StaticFileList:
    """
    Ordered, de-duplicated list of static files registered during a build.

    Usage:
        static_files = StaticFileList()
        cache = ResizeCache(site_root, publisher=static_files)
        ...
        static_files.write('_site')
    """

    def __init__(self):
        self._files = []
        self._seen = set()

    def publish(self, site_root, relative_dir, filename):
        entry = StaticFile(str(site_root), relative_dir, filename)
        if entry.path in self._seen:
            return False
        self._seen.add(entry.path)
        self._files.append(entry)
        return True

    def __iter__(self):
        return iter(self._files)

    def __len__(self):
        return len(self._files)

    def __contains__(self, path):
        return str(path) in self._seen

    def write(self, output_dir):
        """
        Copy every registered file into output_dir, keeping its relative directory.

        Args:
            output_dir: Root of the build output

        Returns:
            list: Destination paths written
        """
        written = []
        for entry in self._files:
            dest = os.path.join(output_dir, entry.relative_path)
            os.makedirs(os.path.dirname(dest), exist_ok=True)
            shutil.copy2(entry.path, dest)
            written.append(dest)
        return written
