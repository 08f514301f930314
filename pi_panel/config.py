import os, json


CONFIG_ENV = "PI_PANEL_CONFIG"
CONFIG_FILE = "configurations.json"

DEFAULTS = {
    "development_mode": False,
    "bind": "0.0.0.0:8000",
    "mount_base": "/mnt/",
    "ui_dir": "ui",
    "log_dir": "logs",
    "log_reset_hours_default": 24,
    "sample_interval_ms": 1000,
    "use_sudo": False,
}


def _config_path() -> str:
    return os.environ.get(CONFIG_ENV) or os.path.join(os.path.abspath(os.getcwd()), CONFIG_FILE)


def load_configurations(path: str | None = None) -> dict:
    """
    Read configurations.json over the built-in defaults.
    A missing file means defaults; a malformed one is an error.
    """
    cfg = dict(DEFAULTS)
    path = path or _config_path()
    if os.path.isfile(path):
        with open(path, "r") as file:
            data = json.load(file)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object")
        cfg.update({k: v for k, v in data.items() if k in DEFAULTS})
    return cfg


class AppConfig:
    def __init__(self, path: str | None = None, overrides: dict | None = None):
        cfg = load_configurations(path)
        cfg.update(overrides or {})

        # Development mode
        self.DEVELOPMENT_MODE = bool(cfg["development_mode"])

        # Server
        self.BIND = cfg["bind"]
        self.UI_DIR = cfg["ui_dir"]

        # Mounting
        self.MOUNT_BASE = cfg["mount_base"]
        self.USE_SUDO = bool(cfg["use_sudo"])

        # Metrics
        self.SAMPLE_INTERVAL_MS = int(cfg["sample_interval_ms"])

        # Logger
        self.LOG_DIR = cfg["log_dir"]
        os.makedirs(self.LOG_DIR, exist_ok=True)

        # Rotate every N hours (no thread; checked on each write)
        self.LOG_RESET_HOURS_DEFAULT = cfg["log_reset_hours_default"]
