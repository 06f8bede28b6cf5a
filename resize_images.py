#!/usr/bin/env python3
"""
Resize cache command line.

Usage:
    python resize_images.py /assets/a.png 800x800            # Print the URL of the resized image
    python resize_images.py /assets/a.png "800x800|webp"      # Embedded output format
    python resize_images.py /assets/a.png 50% --format jpg    # Explicit output format
    python resize_images.py --info                           # Cache statistics
    python resize_images.py --clear                          # Delete cached images
"""

import os
import sys
import argparse
from datetime import datetime

# Ensure the script's directory is in Python path for local imports
_script_dir = os.path.dirname(os.path.abspath(__file__))
if _script_dir not in sys.path:
    sys.path.insert(0, _script_dir)


def build_parser():
    parser = argparse.ArgumentParser(description='Content-addressed image resize cache')
    parser.add_argument('source', nargs='?', help='Image path relative to the site root (e.g. /assets/a.png)')
    parser.add_argument('options', nargs='?', help='Resize geometry, optionally with a format (e.g. "800x800|webp")')
    parser.add_argument('--format', dest='fmt', default=None, help='Output format: jpg, jpeg or webp')
    parser.add_argument('--root', default=None, help='Site source root (default: site.source from config)')
    parser.add_argument('--base-url', default=None, help='Base URL for returned paths (default: site.baseurl)')
    parser.add_argument('--config', default=None, help='Path to resize_config.json')
    parser.add_argument('--info', action='store_true', help='Print cache statistics and exit')
    parser.add_argument('--clear', action='store_true', help='Delete every cached image and exit')
    parser.add_argument('--yes', action='store_true', help='Do not ask for confirmation with --clear')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    from config import load_resize_config
    from resize.cache import ResizeCache
    from resize.cache_admin import clear_cache, get_cache_info
    from resize.errors import ResizeError
    from utils.log import setup_logging

    overrides = {'site': {}}
    if args.root is not None:
        overrides['site']['source'] = args.root
    if args.base_url is not None:
        overrides['site']['baseurl'] = args.base_url

    try:
        cfg = load_resize_config(args.config, overrides)
    except ResizeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    setup_logging(cfg.log_level)

    cache = ResizeCache(
        cfg.site_root,
        base_url=cfg.base_url,
        cache_dir=cfg.cache_dir,
        settings=cfg.output_settings,
        publish_on_hit=cfg.publish_on_hit,
    )

    if args.info:
        info = get_cache_info(cache.cache_path)
        print(f"Cache directory: {info['cache_dir']}")
        print(f"  Files: {info['n_files']}")
        print(f"  Total size: {info['total_size_mb']} MB")
        if info['latest_mtime']:
            print(f"  Newest: {datetime.fromtimestamp(info['latest_mtime']).isoformat(timespec='seconds')}")
        return 0

    if args.clear:
        stats = clear_cache(cache.cache_path, confirm=not args.yes)
        print(f"Deleted {stats['files_deleted']} files ({stats['bytes_deleted']} bytes)")
        return 0

    if not args.source or not args.options:
        parser.error('source and options are required unless --info or --clear is given')

    try:
        print(cache.resize(args.source, args.options, args.fmt))
    except ResizeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
