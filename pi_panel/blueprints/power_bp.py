from flask import Blueprint, current_app, jsonify
from ..core.logger import _log


bp = Blueprint("power", __name__)


def _power_action(action: str):
    config = current_app.config
    st = current_app.extensions["state"]
    _log(config, st, "INFO", f"{action}():Requested")
    result = st.power.shutdown() if action == "shutdown" else st.power.reboot()
    if not result.ok:
        _log(config, st, "ERROR", f"{action}():Failed to {action} the device: {result.message}")
    return jsonify(result.to_dict())


@bp.route("/shutdown", methods=["GET"])
def shutdown():
    """Halt the device now. JSON: {code, msg}."""
    return _power_action("shutdown")


@bp.route("/reboot", methods=["GET"])
def reboot():
    """Reboot the device. JSON: {code, msg}."""
    return _power_action("reboot")
