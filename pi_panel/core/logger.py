import os
import datetime as dt
from .state import AppState
from flask.config import Config


KEEP_LOG_FILES = 4


def _log_file_name(started: dt.datetime) -> str:
    return f"log_{started.strftime('%Y%m%d_%H%M%S')}.txt"


def _prune_logs(log_dir: str, keep: int = KEEP_LOG_FILES) -> None:
    """Delete all but the newest `keep` log files (names sort by start time)."""
    try:
        names = sorted(n for n in os.listdir(log_dir) if n.startswith("log_") and n.endswith(".txt"))
    except OSError:
        return
    for name in names[:-keep] if keep else names:
        try:
            os.remove(os.path.join(log_dir, name))
        except OSError:
            continue


def _rotation_due(st: AppState, now: dt.datetime) -> bool:
    hours_open = (now - st._log_started).total_seconds() / 3600.0
    return hours_open >= max(1, float(st._log_reset_hours))


def _start_log_file(config: Config, st: AppState, now: dt.datetime) -> None:
    st._log_started = now
    st._log_path = os.path.join(config["LOG_DIR"], _log_file_name(now))
    header = f"=== New log started at {now.isoformat(timespec='seconds')} (reset_hours={st._log_reset_hours}) ===\n"
    try:
        with open(st._log_path, "w", encoding="utf-8") as f:
            f.write(header)
    except OSError:
        # the next append retries creating the file
        return


def _log_rotate_if_needed(config: Config, st: AppState, now: dt.datetime | None = None):
    """Switch to a fresh log file once the current one is `reset_hours` old."""
    now = now or dt.datetime.now()
    if _rotation_due(st, now):
        _start_log_file(config, st, now)


def _format_line(level: str, message: str, when: dt.datetime) -> str:
    return f"{when.strftime('%Y-%m-%d %H:%M:%S')} [{level}] {message}\n"


def _log(config: Config, st: AppState, level: str, message: str):
    """Append `message` to the service log; I/O errors are dropped."""
    now = dt.datetime.now()
    with st._log_lock:
        _log_rotate_if_needed(config, st, now)
        try:
            with open(st._log_path, "a", encoding="utf-8") as f:
                f.write(_format_line(level, message, now))
        except OSError:
            return
