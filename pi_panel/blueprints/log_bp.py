import io
import os
from typing import Optional, Tuple
from flask import Blueprint, current_app, jsonify, request
from ..core.logger import _log


bp = Blueprint("log", __name__)

MAX_RESET_HOURS = 720  # 30 days


def _read_tail(path: str, limit: int) -> Tuple[int, Optional[float], str]:
    """(size, mtime, text) of a log file; the text is cut to the last `limit` bytes."""
    if not os.path.isfile(path):
        return 0, None, ""
    info = os.stat(path)
    with open(path, "rb") as f:
        if info.st_size > limit:
            f.seek(-limit, io.SEEK_END)
            return info.st_size, info.st_mtime, "[…truncated…]\n" + f.read().decode("utf-8", errors="replace")
        return info.st_size, info.st_mtime, f.read().decode("utf-8", errors="replace")


@bp.route("/log", methods=["GET"])
def get_log():
    """
    Tail of the current service log.
    JSON: { ok, path, started_ts, reset_hours, size, mtime, text }
    """
    config = current_app.config
    st = current_app.extensions["state"]
    try:
        size, mtime, text = _read_tail(st._log_path, st._log_max_return_bytes)
    except OSError as e:
        _log(config, st, "ERROR", f"get_log():Failed to read {st._log_path}: {e}")
        return jsonify({"ok": False, "error": str(e)}), 500
    return jsonify({
        "ok": True,
        "path": st._log_path,
        "started_ts": int(st._log_started.timestamp()),
        "reset_hours": st._log_reset_hours,
        "size": size,
        "mtime": mtime,
        "text": text,
    })


@bp.route("/log/config", methods=["POST", "GET"])
def log_config():
    """
    GET -> { ok, reset_hours }
    POST -> { ok, reset_hours } with body: { "reset_hours": int(1..720) }
    """
    config = current_app.config
    st = current_app.extensions["state"]
    if request.method == "POST":
        body = request.get_json(force=True, silent=True) or {}
        try:
            hrs = int(body.get("reset_hours", st._log_reset_hours))
        except (TypeError, ValueError, AttributeError) as e:
            _log(config, st, "ERROR", f"log_config():Bad reset_hours: {e}")
            return jsonify({"ok": False, "error": str(e)}), 400
        st._log_reset_hours = max(1, min(hrs, MAX_RESET_HOURS))
        _log(config, st, "INFO", f"log_config():reset_hours set to {st._log_reset_hours}")
    return jsonify({"ok": True, "reset_hours": st._log_reset_hours})
