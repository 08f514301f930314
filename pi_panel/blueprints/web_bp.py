import os
from flask import Blueprint, current_app, send_from_directory

bp = Blueprint("web", __name__)


def _ui_dir() -> str:
    return os.path.abspath(current_app.config["UI_DIR"])


@bp.route("/", methods=["GET"])
def index():
    """Serve the main HTML UI."""
    return send_from_directory(_ui_dir(), "index.html")


@bp.route("/<path:path>", methods=["GET"])
def send_ui(path):
    """Serve UI assets; unknown files are 404."""
    return send_from_directory(_ui_dir(), path)
