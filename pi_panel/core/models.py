from __future__ import annotations
import os
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional


DISK_FIELDS = ("vendor", "kname", "device_name", "label", "fs_type", "size", "mount_point")


@dataclass(frozen=True)
class DiskInfo:
    """One mountable partition. Values are passed through from lsblk or the client untouched."""
    vendor: Any = None
    kname: Any = None
    device_name: Any = None
    label: Any = None
    fs_type: Any = None
    size: Any = None
    mount_point: Any = None

    @classmethod
    def from_json(cls, body: Any) -> "DiskInfo":
        """Build from a request body; unknown keys are ignored, missing keys become None."""
        if not isinstance(body, dict):
            return cls()
        return cls(**{k: body.get(k) for k in DISK_FIELDS})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a privileged operation: code 0 on success, -1 otherwise."""
    code: int
    message: str = ""
    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.code == 0

    def to_dict(self, data_key: str = "data") -> Dict[str, Any]:
        out: Dict[str, Any] = {"code": self.code, "msg": self.message}
        if self.data is not None:
            out[data_key] = self.data
        return out

    @classmethod
    def success(cls, message: str = "", data: Any = None) -> "CommandResult":
        return cls(code=0, message=message, data=data)

    @classmethod
    def failure(cls, error: str, message: str) -> "CommandResult":
        return cls(code=-1, message=message, error=error)


@dataclass(frozen=True)
class ToolResult:
    exit_code: int
    stdout: str
    stderr: str


@dataclass(frozen=True)
class NetCounters:
    interface: str
    rx_bytes: int
    tx_bytes: int
    ts: float


@dataclass(frozen=True)
class StatusSample:
    """OS counters captured at one instant."""
    temperature: Optional[float]
    memory: Optional[Dict[str, int]]
    cpu_times: Optional[list]
    net: Optional[NetCounters]


@dataclass
class StatusReport:
    temperature: float = 0.0
    memory: Optional[Dict[str, int]] = None
    cores: Optional[List[float]] = None
    net_traffic: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"temperature": self.temperature}
        # memory is left out entirely when it could not be read
        if self.memory is not None:
            out["memory"] = self.memory
        out["cores"] = self.cores
        out["net_traffic"] = self.net_traffic
        return out


@dataclass(frozen=True)
class MountBasePath:
    """Sandbox root for mount targets: absolute and always slash-terminated."""
    path: str = "/mnt/"

    @classmethod
    def canonical(cls, raw: Optional[str]) -> "MountBasePath":
        raw = (raw or "").strip()
        if not raw:
            raise ValueError("mount base path must not be empty")
        # relative roots resolve against the working directory at startup
        raw = os.path.abspath(raw)
        if not raw.endswith("/"):
            raw += "/"
        return cls(raw)

    def __str__(self) -> str:
        return self.path
