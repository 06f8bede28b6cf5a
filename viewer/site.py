"""
Site model for the template host.

Holds the source root, the base URL and the list of static files that
must be copied into the build output.
"""

import os

from resize.publisher import StaticFileList


class Site:
    """A site being rendered: where sources live and what ships with it."""

    def __init__(self, source, baseurl=''):
        self.source = os.path.abspath(source)
        self.baseurl = baseurl or ''
        self.static_files = StaticFileList()

    @classmethod
    def from_config(cls, cfg):
        """Create a Site from a ResizeConfig."""
        return cls(cfg.site_root, cfg.base_url)

    def write(self, output_dir):
        """Copy every registered static file into output_dir."""
        return self.static_files.write(output_dir)
