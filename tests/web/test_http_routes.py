from __future__ import annotations

from datetime import datetime

import pytest

from src.canteen_attendance.canteen_attendance.common.datetime_utils import reference_zone
from src.canteen_attendance.canteen_attendance.core.exceptions import DeviceIOError
from src.canteen_attendance.canteen_attendance.device.model import RawRecord
from src.canteen_attendance.canteen_attendance.main import create_app

IST = reference_zone("Asia/Kolkata")


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container, start_sync=False)


@pytest.fixture
def http(app):
    return app.test_client()


def _login(http, role="Super Admin", user_id=1, plant_id=None):
    with http.session_transaction() as sess:
        sess.clear()
        sess["user_id"] = user_id
        sess["role"] = role
        if plant_id is not None:
            sess["plant_id"] = plant_id


def test_requires_session(http):
    res = http.get("/api/v1/canteen/entries/today")

    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_entries_for_date_resync_and_list(http, client):
    client.logs["Chennai"] = [RawRecord("2025-03-2311:34:52", "E1001", "Chennai Canteen", "Chennai", "in")]
    _login(http)

    res = http.get("/api/v1/canteen/entries/today?date=2025-03-23")

    body = res.get_json()
    assert res.status_code == 200
    assert body["success"] is True
    assert body["message"] == "Entries retrieved successfully"
    assert [e["employeeNo"] for e in body["data"]["entries"]] == ["E1001"]


def test_entries_bad_date_and_employee_role(http):
    _login(http)
    assert http.get("/api/v1/canteen/entries/today?date=23-03-2025").status_code == 400

    _login(http, role="Employee", user_id=4, plant_id=1)
    assert http.get("/api/v1/canteen/entries/today").status_code == 403


def test_approve_route(http, entries):
    entry = entries.add(employee_id=1, site_id=1, log_time=datetime(2025, 3, 23, 9, 0, tzinfo=IST))
    _login(http)

    missing_status = http.put(f"/api/v1/canteen/entries/{entry.entry_id}/approve", json={})
    approved = http.put(f"/api/v1/canteen/entries/{entry.entry_id}/approve", json={"status": "APPROVED"})
    unknown = http.put("/api/v1/canteen/entries/999/approve", json={"status": "APPROVED"})

    assert missing_status.status_code == 400
    assert approved.status_code == 200
    assert approved.get_json()["data"]["status"] == "APPROVED"
    assert approved.get_json()["data"]["approveTime"] is not None
    assert unknown.status_code == 404


def test_approve_other_plant_is_forbidden(http, entries):
    entry = entries.add(employee_id=1, site_id=1, log_time=datetime(2025, 3, 23, 9, 0, tzinfo=IST))
    _login(http, role="HR", user_id=2, plant_id=2)

    res = http.put(f"/api/v1/canteen/entries/{entry.entry_id}/approve", json={"status": "APPROVED"})

    assert res.status_code == 403


def test_report_routes(http, entries):
    entries.add(employee_id=1, site_id=1, log_time=datetime(2025, 3, 3, 12, 0, tzinfo=IST))
    _login(http)

    assert http.get("/api/v1/canteen/report").status_code == 400
    report = http.get("/api/v1/canteen/report?fromDate=2025-03-01&toDate=2025-03-31")
    assert report.status_code == 200
    assert report.get_json()["data"]["total"] == 1

    assert http.get("/api/v1/canteen/report/monthly?month=abc").status_code == 400
    monthly = http.get("/api/v1/canteen/report/monthly?month=0")
    assert monthly.status_code == 200
    assert monthly.get_json()["data"]["reportType"] == "Current Month"


def test_manual_sync_is_admin_only(http, client):
    client.logs["Pune"] = DeviceIOError("GetDeviceLogs: timed out after 30s")

    _login(http, role="HR", user_id=2, plant_id=2)
    assert http.post("/api/v1/canteen/sync", json={"date": "2025-03-23"}).status_code == 403

    _login(http)
    res = http.post("/api/v1/canteen/sync", json={"date": "2025-03-23"})
    data = res.get_json()["data"]
    assert res.status_code == 200
    assert data["date"] == "2025-03-23"
    assert data["failedSites"] == 1


def test_location_registry_routes(http):
    _login(http)

    listed = http.get("/api/v1/essl/locations")
    created = http.post(
        "/api/v1/essl/locations",
        json={"deviceName": "Hosur Canteen", "serialNumber": "SN-HSR-01", "locationType": "Hosur"},
    )
    new_id = created.get_json()["data"]["id"]
    updated = http.put(f"/api/v1/essl/locations/{new_id}", json={"locationType": "Hosur Plant"})
    deleted = http.delete(f"/api/v1/essl/locations/{new_id}")

    assert len(listed.get_json()["data"]) == 2
    assert created.status_code == 201
    assert updated.get_json()["data"]["locationType"] == "Hosur Plant"
    assert deleted.status_code == 200
    assert http.delete(f"/api/v1/essl/locations/{new_id}").status_code == 404

    _login(http, role="HR", user_id=2, plant_id=2)
    assert http.post("/api/v1/essl/locations", json={"deviceName": "X"}).status_code == 403


def test_device_routes(http, client):
    _login(http)

    devices = http.get("/api/v1/essl/devices")
    assert devices.status_code == 200
    assert devices.get_json()["data"][0]["serial_number"] == "SN-CHN-01"

    assert http.get("/api/v1/essl/logs?location=Chennai").status_code == 400

    client.logs["Chennai"] = DeviceIOError("GetDeviceLogs: cannot reach access-control server")
    assert http.get("/api/v1/essl/logs?date=2025-03-23&location=Chennai").status_code == 502

    enrolled = http.post(
        "/api/v1/essl/employees",
        json={"employeeCode": "E1001", "employeeName": "Anitha Raman", "serialNumber": "SN-CHN-01"},
    )
    assert enrolled.status_code == 200
    assert client.enrolled[0]["worker_code"] == "E1001"

    reset = http.post("/api/v1/essl/devices/SN-CHN-01/reset")
    assert reset.status_code == 200
    assert client.resets == ["SN-CHN-01"]
