from __future__ import annotations
import time
from typing import Callable, Dict, List, Optional, Protocol, Tuple

import psutil

from .models import NetCounters, StatusReport, StatusSample


THERMAL_ZONE = "/sys/class/thermal/thermal_zone0/temp"
SENSOR_PREFERENCE = ("cpu_thermal", "cpu-thermal", "coretemp", "k10temp", "soc_thermal")
LOOPBACK = "lo"
ELAPSED_FALLBACK_MS = 1500


class MetricsProvider(Protocol):
    def cpu_temp(self) -> float: ...
    def memory(self) -> Dict[str, int]: ...
    def interfaces(self) -> List[str]: ...
    def net_counters(self, name: str) -> Tuple[int, int]: ...
    def cpu_times(self) -> list: ...


def _read_cpu_temp_c() -> Optional[float]:
    """Return CPU temperature in °C from the sysfs thermal zone, or None if unavailable."""
    try:
        with open(THERMAL_ZONE) as f:
            return float(f.read().strip()) / 1000.0
    except (OSError, ValueError):
        return None


class PsutilMetrics:
    """OS metrics through psutil. Every method raises when the value cannot be read."""

    def cpu_temp(self) -> float:
        sensors = getattr(psutil, "sensors_temperatures", None)
        temps = sensors() if sensors else {}
        for name in SENSOR_PREFERENCE:
            if temps.get(name):
                return float(temps[name][0].current)
        for entries in temps.values():
            if entries:
                return float(entries[0].current)
        temp = _read_cpu_temp_c()
        if temp is None:
            raise RuntimeError("no CPU temperature sensor")
        return temp

    def memory(self) -> Dict[str, int]:
        vm = psutil.virtual_memory()
        return {"total": int(vm.total), "free": int(vm.available)}

    def interfaces(self) -> List[str]:
        return sorted(psutil.net_io_counters(pernic=True).keys())

    def net_counters(self, name: str) -> Tuple[int, int]:
        c = psutil.net_io_counters(pernic=True)[name]
        return int(c.bytes_recv), int(c.bytes_sent)

    def cpu_times(self) -> list:
        return psutil.cpu_times(percpu=True)


def _busy(t) -> float:
    return t.user + t.system + getattr(t, "irq", 0.0) + getattr(t, "softirq", 0.0)


def _total(t) -> float:
    # guest time is already counted in user/nice on Linux
    total = sum(t)
    return total - getattr(t, "guest", 0.0) - getattr(t, "guest_nice", 0.0)


def core_utilization(before: list, after: list) -> List[float]:
    """
    Per-core utilization over the window between two cpu_times snapshots:
    (user + system + interrupt) fraction of the elapsed core time, times 100.
    """
    cores = []
    for a, b in zip(before, after):
        total = _total(b) - _total(a)
        if total <= 0:
            cores.append(0.0)
            continue
        busy = max(0.0, _busy(b) - _busy(a))
        cores.append(min(1.0, busy / total) * 100.0)
    return cores


class MetricsSampler:
    """
    Best-effort status report from two OS snapshots one sample window apart.
    Each field degrades independently; nothing is raised to the caller.
    """

    def __init__(self, provider: MetricsProvider, interval_ms: int = 1000,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.time,
                 on_error: Optional[Callable[[str, Exception], None]] = None):
        self.provider = provider
        self.interval_ms = interval_ms
        self.sleep = sleep
        self.clock = clock
        self.on_error = on_error

    def _try(self, what: str, fn, *args):
        try:
            return fn(*args)
        except Exception as e:
            if self.on_error:
                self.on_error(what, e)
            return None

    def _first_interface(self) -> Optional[NetCounters]:
        names = self._try("interfaces", self.provider.interfaces)
        if names is None:
            return None
        for name in names:
            if name == LOOPBACK:
                continue
            counters = self._try(f"net_counters({name})", self.provider.net_counters, name)
            if counters is not None:
                return NetCounters(interface=name, rx_bytes=counters[0], tx_bytes=counters[1], ts=self.clock())
        return None

    def take_sample(self) -> StatusSample:
        """Sample A: everything read before the window opens."""
        return StatusSample(
            temperature=self._try("cpu_temp", self.provider.cpu_temp),
            memory=self._try("memory", self.provider.memory),
            net=self._first_interface(),
            cpu_times=self._try("cpu_times", self.provider.cpu_times),
        )

    def _net_traffic(self, start: Optional[NetCounters]) -> Optional[dict]:
        if start is None:
            return None
        counters = self._try(f"net_counters({start.interface})", self.provider.net_counters, start.interface)
        if counters is None:
            return None
        elapsed = self.clock() - start.ts
        millis = int(round(elapsed * 1000)) if elapsed >= 0 else ELAPSED_FALLBACK_MS
        # a counter that went backwards (interface reset, wrap) reads as no traffic
        return {
            "time": millis,
            "traffic": [max(0, counters[0] - start.rx_bytes), max(0, counters[1] - start.tx_bytes)],
        }

    def sample_status(self) -> StatusReport:
        start = self.take_sample()
        self.sleep(self.interval_ms / 1000.0)

        cores = None
        if start.cpu_times is not None:
            after = self._try("cpu_times", self.provider.cpu_times)
            if after is not None:
                cores = core_utilization(start.cpu_times, after)

        return StatusReport(
            temperature=start.temperature if start.temperature is not None else 0.0,
            memory=start.memory,
            cores=cores,
            net_traffic=self._net_traffic(start.net),
        )
