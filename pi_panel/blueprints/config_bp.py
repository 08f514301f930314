from flask import Blueprint, current_app, jsonify


bp = Blueprint("config", __name__)


@bp.route("/config", methods=["GET"])
def get_config():
    """
    Return the effective configuration for the client UI.

    Read-only: the mount base is fixed at startup.

    Returns:
        JSON with development_mode, bind, mount_base, sample_interval_ms, use_sudo.
    """
    config = current_app.config
    st = current_app.extensions["state"]
    return jsonify({
        "development_mode": config["DEVELOPMENT_MODE"],
        "bind": config["BIND"],
        "mount_base": str(st.MOUNT_BASE_PATH),
        "sample_interval_ms": config["SAMPLE_INTERVAL_MS"],
        "use_sudo": config["USE_SUDO"],
    })
