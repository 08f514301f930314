from flask import Blueprint, current_app, jsonify, request
from ..core.logger import _log
from ..core.models import DiskInfo


bp = Blueprint("disk", __name__)


def _disk_from_body() -> DiskInfo:
    body = request.get_json(force=True, silent=True)
    return DiskInfo.from_json(body)


@bp.route("/disk_info", methods=["GET"])
def disk_info():
    """
    List partitions of USB-attached disks.

    Returns:
        JSON: { code, msg, data?: [{vendor, kname, device_name, label, fs_type, size, mount_point}] }
    """
    config = current_app.config
    st = current_app.extensions["state"]
    result = st.inspector.disk_info()
    if not result.ok:
        _log(config, st, "ERROR", f"disk_info():{result.error}: {result.message}")
    return jsonify(result.to_dict())


@bp.route("/mount_disk", methods=["POST"])
def mount_disk():
    """
    Mount a partition under the mount base.

    Body:
        DiskInfo; mount_point and kname are required, fs_type is optional.
        A relative mount_point is taken relative to the mount base.

    Returns:
        JSON: { code, msg, mount_point? }
    """
    config = current_app.config
    st = current_app.extensions["state"]
    disk = _disk_from_body()
    result = st.mount_guard.mount(disk)
    if result.ok:
        _log(config, st, "INFO", f"mount_disk():Mounted /dev/{disk.kname} at '{result.data}'")
    else:
        _log(config, st, "ERROR", f"mount_disk():{result.error} mount_point={disk.mount_point!r}: {result.message}")
    return jsonify(result.to_dict(data_key="mount_point"))


@bp.route("/remove_disk", methods=["POST"])
def remove_disk():
    """
    Unmount the filesystem at mount_point.

    Body:
        DiskInfo; only mount_point is required.

    Returns:
        JSON: { code, msg }
    """
    config = current_app.config
    st = current_app.extensions["state"]
    disk = _disk_from_body()
    result = st.mount_guard.unmount(disk)
    if result.ok:
        _log(config, st, "INFO", f"remove_disk():Unmounted '{disk.mount_point}'")
    else:
        _log(config, st, "ERROR", f"remove_disk():{result.error} mount_point={disk.mount_point!r}: {result.message}")
    return jsonify(result.to_dict())
