"""
Resize geometry expressions.

Follows ImageMagick resize geometry:
    W, Wx     width W, height keeps the aspect ratio
    xH        height H, width keeps the aspect ratio
    WxH       fit inside the box
    WxH!      exact size
    WxH^      fill the box (smallest size covering it)
    WxH>      only shrink larger images
    WxH<      only enlarge smaller images
    P%, PxQ%  scale by percentages
"""

import math
import re

from resize.errors import ConfigurationError
from resize.options import PERCENT_RE

_GEOMETRY_RE = re.compile(
    r'^\s*(?P<width>\d+(?:\.\d+)?)?'
    r'(?:[xX](?P<height>\d+(?:\.\d+)?)?)?'
    r'\s*(?P<flags>[!^<>%]*)\s*$'
)


def round_half_up(value):
    return int(math.floor(value + 0.5))


def _scaled(width, height, sx, sy):
    return max(round_half_up(width * sx), 1), max(round_half_up(height * sy), 1)


def percent_to_geometry(size, percent_options):
    """
    Resolve a pure percentage ("50%") against pixel dimensions.

    Each dimension is rounded half-up and clamped to 1 on its own.

    Args:
        size: (width, height) of the oriented image
        percent_options: Percentage string, e.g. "50%" or "12.5%"

    Returns:
        str: "<width>x<height>"

    Raises:
        ConfigurationError: If the percentage is not positive
    """
    percent = float(str(percent_options).strip()[:-1])
    if percent <= 0:
        raise ConfigurationError(f"Resize percentage must be > 0 (got {percent_options!r})")
    new_w, new_h = _scaled(size[0], size[1], percent / 100.0, percent / 100.0)
    return f"{new_w}x{new_h}"


def target_size(size, geometry):
    """
    Compute the output size for a geometry expression.

    Args:
        size: (width, height) of the image being resized
        geometry: Geometry expression, see module docstring

    Returns:
        tuple: (width, height); equal to size when no resize applies
    """
    if PERCENT_RE.match(geometry):
        geometry = percent_to_geometry(size, geometry)

    m = _GEOMETRY_RE.match(geometry)
    if not m or (m.group('width') is None and m.group('height') is None):
        raise ConfigurationError(f"Invalid resize geometry: {geometry!r}")

    width, height = size
    flags = m.group('flags')
    req_w = float(m.group('width')) if m.group('width') is not None else None
    req_h = float(m.group('height')) if m.group('height') is not None else None

    if '%' in flags:
        pct_w = req_w if req_w is not None else req_h
        pct_h = req_h if req_h is not None else pct_w
        if pct_w <= 0 or pct_h <= 0:
            raise ConfigurationError(f"Resize percentage must be > 0 (got {geometry!r})")
        return _scaled(width, height, pct_w / 100.0, pct_h / 100.0)

    if (req_w is not None and req_w <= 0) or (req_h is not None and req_h <= 0):
        raise ConfigurationError(f"Resize dimensions must be > 0 (got {geometry!r})")

    if '>' in flags and (req_w is None or width <= req_w) and (req_h is None or height <= req_h):
        return size
    if '<' in flags and (req_w is None or width >= req_w) and (req_h is None or height >= req_h):
        return size

    if req_w is not None and req_h is not None:
        if '!' in flags:
            new_size = max(round_half_up(req_w), 1), max(round_half_up(req_h), 1)
        else:
            sx, sy = req_w / width, req_h / height
            scale = max(sx, sy) if '^' in flags else min(sx, sy)
            new_size = _scaled(width, height, scale, scale)
    elif req_w is not None:
        new_size = _scaled(width, height, req_w / width, req_w / width)
    else:
        new_size = _scaled(width, height, req_h / height, req_h / height)

    # '<' never shrinks and '>' never enlarges either dimension
    if '<' in flags and (new_size[0] < width or new_size[1] < height):
        return size
    if '>' in flags and (new_size[0] > width or new_size[1] > height):
        return size
    return new_size
