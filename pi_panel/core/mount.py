from __future__ import annotations
import os
from typing import List
from .models import CommandResult, DiskInfo, MountBasePath
from .tools import CommandRunner, ToolLaunchError, TOOL_EXECUTION_FAILED, TOOL_LAUNCH_FAILED


MISSING_MOUNT_POINT = "MissingMountPoint"
MISSING_DEVICE_NAME = "MissingDeviceName"
INVALID_MOUNT_POINT = "InvalidMountPoint"
PATH_NOT_FOUND = "PathNotFound"
NOT_A_DIRECTORY = "NotADirectory"

VFAT_OPTIONS = ["-o", "rw,umask=0000"]


class MountError(Exception):
    """A mount/unmount target was rejected before any tool ran."""

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def to_result(self) -> CommandResult:
        return CommandResult.failure(self.kind, self.message)


def _within_base(path: str, base: str) -> bool:
    """True only for proper descendants of base (base itself is rejected)."""
    return len(path) > len(base) and path.startswith(base)


def resolve_mount_point(base: MountBasePath, raw) -> str:
    """
    Resolve a client-supplied mount point against the sandbox root.

    Absolute paths must lie strictly below the root. Relative paths are
    appended to the root verbatim, without collapsing '..' or '//'.

    Raises:
        MountError: MissingMountPoint if raw is not a string,
                    InvalidMountPoint if an absolute path leaves the root.
    """
    if not isinstance(raw, str):
        raise MountError(MISSING_MOUNT_POINT, "Invalid parameters: no mount point specified")
    mount_point = raw.strip().lstrip(".")
    root = str(base)
    if mount_point.startswith("/"):
        if not _within_base(mount_point, root):
            raise MountError(INVALID_MOUNT_POINT, "Invalid mount point")
        return mount_point
    return root + mount_point


def check_directory(path: str) -> None:
    if not os.path.exists(path):
        raise MountError(PATH_NOT_FOUND, "Mount point path does not exist")
    if not os.path.isdir(path):
        raise MountError(NOT_A_DIRECTORY, "Mount point path is not a directory!")


class MountGuard:
    """Sandboxed mount/umount of removable partitions."""

    def __init__(self, base: MountBasePath, runner: CommandRunner):
        self.base = base
        self.runner = runner

    def mount_args(self, target: DiskInfo, mount_point: str) -> List[str]:
        args = ["/dev/" + target.kname, mount_point]
        if target.fs_type == "vfat":
            args += VFAT_OPTIONS
        return args

    def mount(self, target: DiskInfo) -> CommandResult:
        try:
            if not isinstance(target.mount_point, str):
                raise MountError(MISSING_MOUNT_POINT, "Invalid parameters: no mount point specified")
            if not isinstance(target.kname, str) or not target.kname.strip():
                raise MountError(MISSING_DEVICE_NAME, "Invalid parameters: no device specified")
            mount_point = resolve_mount_point(self.base, target.mount_point)
            check_directory(mount_point)
        except MountError as e:
            return e.to_result()

        argv = ["mount"] + self.mount_args(target, mount_point)
        return self._run(argv, data=mount_point)

    def unmount(self, target: DiskInfo) -> CommandResult:
        try:
            mount_point = resolve_mount_point(self.base, target.mount_point)
            check_directory(mount_point)
        except MountError as e:
            return e.to_result()
        return self._run(["umount", mount_point])

    def _run(self, argv: List[str], data=None) -> CommandResult:
        tool = argv[0]
        try:
            res = self.runner.run(argv)
        except ToolLaunchError:
            return CommandResult.failure(TOOL_LAUNCH_FAILED, f"{tool} command failed to execute")
        if res.exit_code != 0:
            return CommandResult.failure(
                TOOL_EXECUTION_FAILED,
                f"{tool} command exited abnormally, error output:\n{res.stderr}"
            )
        return CommandResult.success("Success", data=data)
