import json
from collections import namedtuple

import pytest

from pi_panel import create_app
from pi_panel.core.models import MountBasePath, ToolResult


CpuTimes = namedtuple("CpuTimes", "user nice system idle iowait irq softirq")

LSBLK_FIXTURE = {
    "blockdevices": [
        {"vendor": "SanDisk ", "kname": "sda", "name": "sda", "type": "disk", "rm": True,
         "mountpoint": None, "label": None, "model": "Ultra Fit", "fstype": None, "size": "28.7G",
         "tran": "usb",
         "children": [
             {"vendor": None, "kname": "sda1", "name": "sda1", "type": "part", "rm": True,
              "mountpoint": None, "label": "BOOT", "model": None, "fstype": "vfat", "size": "256M",
              "tran": None},
             {"vendor": None, "kname": "sda2", "name": "sda2", "type": "part", "rm": True,
              "mountpoint": "/mnt/data", "model": None, "fstype": "ext4", "size": "28.4G",
              "tran": None},
         ]},
        {"vendor": "ATA     ", "kname": "sdb", "name": "sdb", "type": "disk", "rm": False,
         "mountpoint": None, "label": None, "model": "Samsung SSD", "fstype": None, "size": "465.8G",
         "tran": "sata",
         "children": [
             {"kname": "sdb1", "name": "sdb1", "type": "part", "mountpoint": "/", "label": "root",
              "fstype": "ext4", "size": "465.8G"},
         ]},
        {"vendor": "Generic ", "kname": "sdc", "name": "sdc", "type": "disk", "rm": True,
         "mountpoint": None, "label": None, "model": "Card Reader", "fstype": None, "size": "0B",
         "tran": "usb"},
    ]
}


class FakeRunner:
    """Records argv lists; answers from `results` keyed by tool name (ToolResult or exception)."""

    def __init__(self, results=None):
        self.calls = []
        self.results = dict(results or {})

    def run(self, argv):
        self.calls.append(list(argv))
        result = self.results.get(argv[0], ToolResult(0, "", ""))
        if isinstance(result, Exception):
            raise result
        return result


class FakeMetrics:
    """Scripted metrics provider; list values are consumed one call at a time."""

    def __init__(self, temp=48.5, memory=None, interfaces=("lo", "eth0"),
                 counters=None, cpu_times=None):
        self.temp = temp
        self._memory = memory if memory is not None else {"total": 4_000_000_000, "free": 3_000_000_000}
        self._interfaces = interfaces
        self.counters = {k: list(v) for k, v in (counters or {"eth0": [(100, 50), (350, 80)]}).items()}
        self._cpu_times = list(cpu_times if cpu_times is not None else [
            [CpuTimes(10, 0, 5, 85, 0, 0, 0)],
            [CpuTimes(40, 0, 20, 130, 0, 10, 0)],
        ])

    @staticmethod
    def _value(v):
        if isinstance(v, Exception):
            raise v
        return v

    def cpu_temp(self):
        return self._value(self.temp)

    def memory(self):
        return self._value(self._memory)

    def interfaces(self):
        return list(self._value(self._interfaces))

    def net_counters(self, name):
        seq = self.counters.get(name)
        if not seq:
            raise KeyError(name)
        return self._value(seq.pop(0) if len(seq) > 1 else seq[0])

    def cpu_times(self):
        if not self._cpu_times:
            raise RuntimeError("no cpu times")
        return self._value(self._cpu_times.pop(0))


@pytest.fixture
def lsblk_json():
    return json.dumps(LSBLK_FIXTURE)


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def metrics():
    return FakeMetrics()


@pytest.fixture
def base_dir(tmp_path):
    d = tmp_path / "mnt"
    d.mkdir()
    return d


@pytest.fixture
def base(base_dir):
    return MountBasePath.canonical(str(base_dir))


@pytest.fixture
def ui_dir(tmp_path):
    d = tmp_path / "ui"
    d.mkdir()
    (d / "index.html").write_text("<html>panel</html>")
    (d / "app.js").write_text("console.log('panel')")
    return d


@pytest.fixture
def make_app(tmp_path, base_dir, ui_dir, runner, metrics):
    def _make(dev_mode=False, **overrides):
        cfg = {
            "log_dir": str(tmp_path / "logs"),
            "ui_dir": str(ui_dir),
            "sample_interval_ms": 0,
        }
        cfg.update(overrides)
        app = create_app(dev_mode, mount_base=str(base_dir), runner=runner,
                         metrics=metrics, overrides=cfg)
        app.config["TESTING"] = True
        return app
    return _make


@pytest.fixture
def client(make_app):
    return make_app().test_client()
