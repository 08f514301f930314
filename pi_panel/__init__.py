from __future__ import annotations
from typing import Optional
from flask import Flask
from .config import AppConfig
from .core.hardware import MetricsProvider
from .core.state import AppState
from .core.logger import _log, _prune_logs
from .core.tools import CommandRunner, SubprocessRunner, SimulatedRunner, PRIVILEGED_TOOLS

# Blueprints
from .blueprints.web_bp import bp as web_bp
from .blueprints.config_bp import bp as config_bp
from .blueprints.status_bp import bp as status_bp
from .blueprints.disk_bp import bp as disk_bp
from .blueprints.power_bp import bp as power_bp
from .blueprints.log_bp import bp as log_bp


def create_app(dev_mode: bool = False, mount_base: Optional[str] = None,
               runner: Optional[CommandRunner] = None,
               metrics: Optional[MetricsProvider] = None,
               overrides: Optional[dict] = None) -> Flask:
    overrides = dict(overrides or {})
    if mount_base is not None:
        overrides["mount_base"] = mount_base
    if dev_mode:
        overrides["development_mode"] = True

    app = Flask(__name__, static_folder=None)

    # Load config (configurations.json, then explicit overrides)
    app.config.from_object(AppConfig(overrides=overrides))
    config = app.config
    _prune_logs(config["LOG_DIR"])

    if runner is None:
        runner = SubprocessRunner(use_sudo=config["USE_SUDO"], privileged=PRIVILEGED_TOOLS)
    if config["DEVELOPMENT_MODE"]:
        # privileged tools are logged, not run
        runner = SimulatedRunner(
            runner, PRIVILEGED_TOOLS,
            on_simulate=lambda argv: _log(config, state, "INFO", f"DEV mode, not running: {' '.join(argv)}"),
        )

    # Attach shared state and logger
    app.extensions = getattr(app, "extensions", {})
    state = AppState(config, runner, metrics)
    app.extensions["state"] = state

    state.sampler.on_error = lambda what, e: _log(config, state, "DEBUG", f"status_data():{what} unavailable: {e}")

    _log(config, state, "INFO", f"Building Application : {'DEVELOPMENT MODE' if config['DEVELOPMENT_MODE'] else 'PRODUCTION MODE'}")
    _log(config, state, "INFO", f"Mount base path: {state.MOUNT_BASE_PATH}")

    # Register blueprints
    app.register_blueprint(config_bp)
    app.register_blueprint(status_bp)
    app.register_blueprint(disk_bp)
    app.register_blueprint(power_bp)
    app.register_blueprint(log_bp)
    app.register_blueprint(web_bp)

    _log(config, state, "INFO", "Built Application Successfully")
    return app
