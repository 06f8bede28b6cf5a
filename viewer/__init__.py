import os
import sys

# Ensure the project root is in Python path for local imports
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from flask import Flask
from config import ResizeConfig
from resize.cache import ResizeCache
from utils.log import setup_logging
from viewer.filters import register_filters
from viewer.site import Site


def create_app(config=None):
    """Flask application factory.

    Args:
        config: ResizeConfig, or None to load resize_config.json
    """
    cfg = config if config is not None else ResizeConfig()
    setup_logging(cfg.log_level)

    app = Flask(__name__, template_folder=os.path.join(cfg.site_root, '_templates'))

    site = Site.from_config(cfg)
    cache = ResizeCache(
        site.source,
        base_url=site.baseurl,
        cache_dir=cfg.cache_dir,
        publisher=site.static_files,
        settings=cfg.output_settings,
        publish_on_hit=cfg.publish_on_hit,
    )
    app.extensions['resize_site'] = site
    app.extensions['resize_cache'] = cache

    # Register template filters
    register_filters(app, cache)

    # Register blueprints
    from viewer.cache_files import cache_files_bp
    app.register_blueprint(cache_files_bp, url_prefix='/' + cache.cache_dir.strip('/'))

    return app
