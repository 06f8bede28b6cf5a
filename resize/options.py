"""
Resize option parsing.

Turns a raw option string (plus an optional explicit format) into a
TransformSpec: the geometry expression, the output format and the cache key
string used to name the artifact.

Embedded formats are tried in this order, first match wins:
    "800x800 format=webp"
    "800x800|webp" / "800x800,webp"
    "800x800 webp"
"""

import re
from dataclasses import dataclass

from resize.errors import ConfigurationError

# Recognized format names -> canonical code
SUPPORTED_FORMATS = {
    'jpg': 'jpg',
    'jpeg': 'jpg',
    'webp': 'webp',
}

PERCENT_RE = re.compile(r'^\s*[-+]?\d+(?:\.\d+)?%\s*$')

_FORMAT_TOKEN_RE = re.compile(r'(?:^|[\s|,])format\s*=\s*([a-z0-9]+)\s*$', re.IGNORECASE)
_DELIMITER_RE = re.compile(r'[|,]')
_TRIM_CHARS = ' \t\r\n|,'


@dataclass(frozen=True)
class TransformSpec:
    """Normalized resize request."""

    geometry: str
    format: str = None
    cache_key: str = ''

    @property
    def extension(self):
        """Output extension including the dot, or None to keep the source's."""
        return f".{self.format}" if self.format else None


def supported_formats_label():
    return ', '.join(sorted(set(SUPPORTED_FORMATS.values())))


def normalize_format(fmt):
    """Map a format name (any case, aliases allowed) to its canonical code.

    Raises:
        ConfigurationError: If the name is empty or not supported
    """
    if not isinstance(fmt, str):
        raise ConfigurationError(f"`format` must be a string - got: {type(fmt).__name__}")
    name = fmt.strip().lower()
    if not name:
        raise ConfigurationError("`format` may not be empty")
    normalized = SUPPORTED_FORMATS.get(name)
    if normalized is None:
        raise ConfigurationError(
            f"Unsupported output format '{fmt}'. Supported: {supported_formats_label()}"
        )
    return normalized


def _is_format_name(token):
    return token.lower() in SUPPORTED_FORMATS


def _match_format_token(opts):
    """Trailing `format=<fmt>` token."""
    m = _FORMAT_TOKEN_RE.search(opts)
    if not m:
        return None
    return opts[:m.start()] + opts[m.end():], normalize_format(m.group(1))


def _match_delimited(opts):
    """Trailing `|fmt` or `,fmt` segment."""
    parts = [p.strip() for p in _DELIMITER_RE.split(opts)]
    if len(parts) < 2 or not _is_format_name(parts[-1]):
        return None
    return '|'.join(parts[:-1]), normalize_format(parts[-1])


def _match_whitespace(opts):
    """Trailing whitespace-separated format name."""
    parts = opts.split()
    if len(parts) < 2 or not _is_format_name(parts[-1]):
        return None
    return ' '.join(parts[:-1]), normalize_format(parts[-1])


FORMAT_STRATEGIES = (_match_format_token, _match_delimited, _match_whitespace)


def build_cache_key(geometry, fmt=None):
    """Cache key string; the format is part of it so a format change always misses."""
    return f"{geometry} format={fmt}" if fmt else geometry


def parse_options(options, explicit_format=None):
    """
    Parse resize options into a TransformSpec.

    Args:
        options: Raw option string, e.g. "800x800", "50%", "800x800|webp"
        explicit_format: Optional output format that overrides any embedded one

    Returns:
        TransformSpec

    Raises:
        ConfigurationError: For empty options, an empty geometry, or an
            unsupported format
    """
    if not isinstance(options, str):
        raise ConfigurationError(f"`options` must be a string - got: {type(options).__name__}")
    opts = options.strip()
    if not opts:
        raise ConfigurationError(f"`options` may not be empty - got: {options!r}")

    fmt = normalize_format(explicit_format) if explicit_format is not None else None

    if fmt is None:
        for strategy in FORMAT_STRATEGIES:
            matched = strategy(opts)
            if matched is not None:
                opts, fmt = matched
                break

    geometry = opts.strip(_TRIM_CHARS)
    if not geometry:
        raise ConfigurationError(f"`options` has no resize geometry - got: {options!r}")

    return TransformSpec(geometry=geometry, format=fmt, cache_key=build_cache_key(geometry, fmt))
