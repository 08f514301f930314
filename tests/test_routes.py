from pi_panel.core.models import ToolResult


def test_status_data(client):
    body = client.get("/status_data").get_json()
    assert body["temperature"] == 48.5
    assert body["memory"] == {"total": 4_000_000_000, "free": 3_000_000_000}
    assert len(body["cores"]) == 1
    assert body["net_traffic"]["traffic"] == [250, 30]
    assert body["net_traffic"]["time"] >= 0


def test_disk_info(client, runner, lsblk_json):
    runner.results["lsblk"] = ToolResult(0, lsblk_json, "")
    resp = client.get("/disk_info")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["code"] == 0
    assert [d["kname"] for d in body["data"]] == ["sda1", "sda2"]
    assert set(body["data"][0]) == {"vendor", "kname", "device_name", "label", "fs_type", "size", "mount_point"}


def test_disk_info_failure_is_still_200(client, runner):
    runner.results["lsblk"] = ToolResult(0, "garbage", "")
    resp = client.get("/disk_info")
    assert resp.status_code == 200
    assert resp.get_json()["code"] == -1


def test_disk_info_with_malformed_partitions_is_still_200(client, runner):
    runner.results["lsblk"] = ToolResult(0, '{"blockdevices": [{"tran": "usb", "children": [null]}]}', "")
    resp = client.get("/disk_info")
    assert resp.status_code == 200
    assert resp.get_json()["code"] == -1


def test_mount_disk(client, runner, base_dir):
    (base_dir / "usb1").mkdir()
    body = client.post("/mount_disk", json={
        "vendor": "SanDisk", "kname": "sda1", "device_name": "Ultra Fit", "label": "BOOT",
        "fs_type": "vfat", "size": "256M", "mount_point": "usb1",
    }).get_json()
    assert body == {"code": 0, "msg": "Success", "mount_point": str(base_dir / "usb1")}
    assert runner.calls == [["mount", "/dev/sda1", str(base_dir / "usb1"), "-o", "rw,umask=0000"]]


def test_mount_disk_outside_base(client, runner):
    body = client.post("/mount_disk", json={"kname": "sda1", "mount_point": "/etc"}).get_json()
    assert body == {"code": -1, "msg": "Invalid mount point"}
    assert runner.calls == []


def test_mount_disk_without_json_body(client):
    resp = client.post("/mount_disk", data="not json", content_type="text/plain")
    assert resp.status_code == 200
    assert resp.get_json() == {"code": -1, "msg": "Invalid parameters: no mount point specified"}


def test_remove_disk(client, runner, base_dir):
    (base_dir / "usb1").mkdir()
    body = client.post("/remove_disk", json={"mount_point": str(base_dir / "usb1")}).get_json()
    assert body == {"code": 0, "msg": "Success"}
    assert runner.calls == [["umount", str(base_dir / "usb1")]]


def test_remove_disk_base_itself(client, base_dir):
    body = client.post("/remove_disk", json={"mount_point": str(base_dir) + "/"}).get_json()
    assert body["code"] == -1


def test_shutdown_and_reboot(client, runner):
    assert client.get("/shutdown").get_json() == {"code": 0, "msg": "Shutting down..."}
    assert client.get("/reboot").get_json() == {"code": 0, "msg": "Rebooting..."}
    assert runner.calls == [["shutdown", "-h", "now"], ["reboot"]]


def test_failed_shutdown(client, runner):
    runner.results["shutdown"] = ToolResult(1, "", "Access denied")
    body = client.get("/shutdown").get_json()
    assert body["code"] == -1
    assert "Access denied" in body["msg"]


def test_dev_mode_does_not_run_privileged_tools(make_app, runner, base_dir, lsblk_json):
    (base_dir / "usb1").mkdir()
    runner.results["lsblk"] = ToolResult(0, lsblk_json, "")
    client = make_app(dev_mode=True).test_client()
    assert client.get("/reboot").get_json()["code"] == 0
    assert client.post("/mount_disk", json={"kname": "sda1", "mount_point": "usb1"}).get_json()["code"] == 0
    assert client.get("/disk_info").get_json()["code"] == 0
    assert runner.calls == [["lsblk", "-J", "-o", "VENDOR,KNAME,NAME,TYPE,RM,MOUNTPOINT,LABEL,MODEL,FSTYPE,SIZE,TRAN"]]


def test_config(client, base_dir):
    body = client.get("/config").get_json()
    assert body["mount_base"] == str(base_dir) + "/"
    assert body["development_mode"] is False
    assert body["sample_interval_ms"] == 0


def test_log_records_actions(client, runner):
    runner.results["reboot"] = ToolResult(1, "", "Must be root.")
    client.get("/reboot")
    body = client.get("/log").get_json()
    assert body["ok"] is True
    assert "Built Application Successfully" in body["text"]
    assert "reboot():Failed to reboot the device" in body["text"]


def test_log_config(client):
    assert client.get("/log/config").get_json() == {"ok": True, "reset_hours": 24}
    assert client.post("/log/config", json={"reset_hours": 9999}).get_json()["reset_hours"] == 720
    assert client.post("/log/config", json={"reset_hours": "soon"}).status_code == 400


def test_ui_files(client):
    assert client.get("/").data == b"<html>panel</html>"
    assert client.get("/app.js").status_code == 200
    assert client.get("/missing.js").status_code == 404
