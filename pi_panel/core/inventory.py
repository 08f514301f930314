import json
from typing import Any, Dict, List
from .models import CommandResult, DiskInfo
from .tools import CommandRunner, ToolLaunchError, TOOL_EXECUTION_FAILED, TOOL_LAUNCH_FAILED


LSBLK_COLUMNS = "VENDOR,KNAME,NAME,TYPE,RM,MOUNTPOINT,LABEL,MODEL,FSTYPE,SIZE,TRAN"
LSBLK_ARGV = ["lsblk", "-J", "-o", LSBLK_COLUMNS]

INVENTORY_PARSE_FAILED = "InventoryParseFailed"


def flatten_usb_partitions(devices: List[Dict[str, Any]]) -> List[DiskInfo]:
    """
    One DiskInfo per partition of every USB-transport disk.
    Vendor and model come from the parent device; the rest from the partition.

    Raises:
        ValueError: a USB disk's children are not a list of objects.
    """
    disks = []
    for device in devices:
        if not isinstance(device, dict) or device.get("tran") != "usb":
            continue
        children = device.get("children")
        if not children:
            continue
        if not isinstance(children, list):
            raise ValueError(f"lsblk device {device.get('kname')!r} has malformed 'children'")
        for child in children:
            if not isinstance(child, dict):
                raise ValueError(f"lsblk device {device.get('kname')!r} has a malformed partition entry")
            disks.append(DiskInfo(
                vendor=device.get("vendor"),
                kname=child.get("kname"),
                device_name=device.get("model"),
                label=child.get("label"),
                fs_type=child.get("fstype"),
                size=child.get("size"),
                mount_point=child.get("mountpoint"),
            ))
    return disks


def parse_lsblk(stdout: str) -> List[DiskInfo]:
    """
    Parse `lsblk -J` output.

    Raises:
        ValueError: output is not JSON, has no 'blockdevices' list, or a USB disk is malformed.
    """
    doc = json.loads(stdout)
    devices = doc.get("blockdevices") if isinstance(doc, dict) else None
    if not isinstance(devices, list):
        raise ValueError("lsblk output has no 'blockdevices' array")
    return flatten_usb_partitions(devices)


class BlockDeviceInspector:

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def disk_info(self) -> CommandResult:
        try:
            res = self.runner.run(LSBLK_ARGV)
        except ToolLaunchError:
            return CommandResult.failure(TOOL_LAUNCH_FAILED, "lsblk command failed to execute")
        if res.exit_code != 0:
            return CommandResult.failure(TOOL_EXECUTION_FAILED, res.stderr)
        try:
            disks = parse_lsblk(res.stdout)
        except ValueError as e:
            # json.JSONDecodeError is a ValueError too
            return CommandResult.failure(INVENTORY_PARSE_FAILED, f"Failed to parse lsblk output: {e}")
        return CommandResult.success("", data=[d.to_dict() for d in disks])
