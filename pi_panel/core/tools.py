from __future__ import annotations
import subprocess
from typing import Callable, List, Optional, Protocol, Sequence
from .models import ToolResult


PRIVILEGED_TOOLS = ("mount", "umount", "shutdown", "reboot")

TOOL_EXECUTION_FAILED = "ToolExecutionFailed"
TOOL_LAUNCH_FAILED = "ToolLaunchFailed"


class ToolLaunchError(Exception):
    """The tool binary could not be started (missing, not executable, ...)."""

    def __init__(self, tool: str, reason: str = ""):
        super().__init__(f"{tool}: {reason}" if reason else tool)
        self.tool = tool
        self.reason = reason


class CommandRunner(Protocol):
    def run(self, argv: Sequence[str]) -> ToolResult:
        ...


class SubprocessRunner:
    """
    Run OS tools with captured output. No timeout is applied: a hung tool
    hangs the calling request thread.
    """

    def __init__(self, use_sudo: bool = False, privileged: Sequence[str] = ()):
        self.use_sudo = use_sudo
        self.privileged = set(privileged)

    def _argv(self, argv: Sequence[str]) -> List[str]:
        cmd = list(argv)
        if self.use_sudo and cmd and cmd[0] in self.privileged:
            cmd = ["sudo"] + cmd
        return cmd

    def run(self, argv: Sequence[str]) -> ToolResult:
        cmd = self._argv(argv)
        try:
            res = subprocess.run(
                cmd, capture_output=True, text=True,
                encoding="utf-8", errors="replace", check=False
            )
        except OSError as e:
            raise ToolLaunchError(argv[0], str(e)) from e
        return ToolResult(exit_code=res.returncode, stdout=res.stdout or "", stderr=res.stderr or "")


class SimulatedRunner:
    """
    DEV mode runner: privileged tools are only reported, never executed.
    Everything else goes to the wrapped runner.
    """

    def __init__(self, inner: CommandRunner, privileged: Sequence[str],
                 on_simulate: Optional[Callable[[List[str]], None]] = None):
        self.inner = inner
        self.privileged = set(privileged)
        self.on_simulate = on_simulate

    def run(self, argv: Sequence[str]) -> ToolResult:
        if argv and argv[0] in self.privileged:
            if self.on_simulate:
                self.on_simulate(list(argv))
            return ToolResult(exit_code=0, stdout="", stderr="")
        return self.inner.run(argv)

