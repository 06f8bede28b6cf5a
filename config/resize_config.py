"""
Resize cache configuration.

Loads resize_config.json and merges it over built-in defaults.
"""

import copy
import json
import os

from resize.errors import ConfigurationError

_CONFIG_PATH = os.environ.get(
    'RESIZE_CONFIG',
    os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'resize_config.json'),
)

DEFAULT_CONFIG = {
    'site': {
        'source': '.',
        'baseurl': '',
    },
    'cache': {
        'dir': 'cache/resize/',
        'publish_on_hit': True,
    },
    'output': {
        'jpeg_quality': 90,
        'webp_quality': 90,
        'webp_lossless': False,
        'background': 'white',
        'resample': 'lanczos',
    },
    'logging': {
        'level': 'INFO',
    },
}


class ResizeConfig:
    """Loads and validates resize cache settings from a JSON file.

    Missing sections and keys fall back to DEFAULT_CONFIG; a missing file
    means all defaults.
    """

    def __init__(self, config_path=None, config=None):
        self.config_path = config_path or _CONFIG_PATH
        loaded = self._load_config() if config is None else config
        self.config = self._merge_configs(DEFAULT_CONFIG, loaded)
        self.validate()

    def _load_config(self):
        """Load config from file.

        Raises:
            ConfigurationError: If the file exists but is not a JSON object
        """
        if not os.path.exists(self.config_path):
            return {}
        try:
            with open(self.config_path, 'r') as f:
                config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Could not load config from {self.config_path}: {e}") from e
        if not isinstance(config, dict):
            raise ConfigurationError(
                f"Config file {self.config_path} must contain a JSON object - got: {type(config).__name__}"
            )
        return config

    def _merge_configs(self, base, override):
        """Deep merge override into base config."""
        result = copy.deepcopy(base)
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value
        return result

    def validate(self):
        """Check output settings.

        Raises:
            ConfigurationError: Naming the offending key and value
        """
        from utils.image_transforms import RESAMPLE_FILTERS

        output = self.config['output']
        for key in ('jpeg_quality', 'webp_quality'):
            value = output[key]
            if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 100:
                raise ConfigurationError(f"output.{key} must be an integer 1-100 - got: {value!r}")
        if str(output['resample']).lower() not in RESAMPLE_FILTERS:
            raise ConfigurationError(
                f"output.resample must be one of {', '.join(RESAMPLE_FILTERS)} - got: {output['resample']!r}"
            )
        if not isinstance(self.config['cache']['dir'], str) or not self.config['cache']['dir'].strip('/'):
            raise ConfigurationError(f"cache.dir may not be empty - got: {self.config['cache']['dir']!r}")

    @property
    def site_root(self):
        return os.path.abspath(self.config['site']['source'])

    @property
    def base_url(self):
        return self.config['site']['baseurl'] or ''

    @property
    def cache_dir(self):
        cache_dir = self.config['cache']['dir']
        return cache_dir if cache_dir.endswith('/') else f"{cache_dir}/"

    @property
    def publish_on_hit(self):
        return bool(self.config['cache']['publish_on_hit'])

    @property
    def output_settings(self):
        return dict(self.config['output'])

    @property
    def log_level(self):
        return self.config['logging']['level']


def load_resize_config(config_path=None, overrides=None):
    """
    Load settings from a JSON file and apply overrides last.

    Args:
        config_path: Path to a JSON file; defaults to $RESIZE_CONFIG or resize_config.json
        overrides: Nested dict merged over the file contents

    Returns:
        ResizeConfig
    """
    cfg = ResizeConfig(config_path)
    if overrides:
        cfg = ResizeConfig(cfg.config_path, config=cfg._merge_configs(cfg.config, overrides))
    return cfg
