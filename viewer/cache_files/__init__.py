from flask import Blueprint

cache_files_bp = Blueprint('cache_files', __name__)

from viewer.cache_files import routes  # noqa: E402,F401
