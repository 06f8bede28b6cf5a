"""
Resize cache configuration package.

Re-exports all public classes and functions.
"""

from config.resize_config import ResizeConfig, load_resize_config, DEFAULT_CONFIG
