import datetime as dt
import os, threading
from typing import Optional
from .models import MountBasePath
from .hardware import MetricsProvider, MetricsSampler, PsutilMetrics
from .inventory import BlockDeviceInspector
from .mount import MountGuard
from .power import PowerControl
from .tools import CommandRunner


class AppState:
    """
    Process-lifetime state: the log file bookkeeping and the components the
    blueprints call. The components only read the immutable mount base, so
    request threads share them without locking.
    """

    def __init__(self, config, runner: CommandRunner, metrics: Optional[MetricsProvider] = None):
        # Logger
        self._log_max_return_bytes = 200 * 1024
        self._log_started = dt.datetime.now()
        self._log_reset_hours = config["LOG_RESET_HOURS_DEFAULT"]
        self._log_path = os.path.join(config["LOG_DIR"], f"log_{self._log_started.strftime('%Y%m%d_%H%M%S')}.txt")
        self._log_lock = threading.Lock()
        os.makedirs(os.path.dirname(self._log_path) or ".", exist_ok=True)

        # Sandbox root, fixed for the lifetime of the process
        self.MOUNT_BASE_PATH = MountBasePath.canonical(config["MOUNT_BASE"])

        # Components
        self.runner = runner
        self.mount_guard = MountGuard(self.MOUNT_BASE_PATH, runner)
        self.inspector = BlockDeviceInspector(runner)
        self.power = PowerControl(runner)
        self.sampler = MetricsSampler(
            metrics if metrics is not None else PsutilMetrics(),
            interval_ms=int(config["SAMPLE_INTERVAL_MS"]),
        )
