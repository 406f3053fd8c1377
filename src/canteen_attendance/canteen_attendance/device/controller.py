from __future__ import annotations

from dataclasses import asdict

from flask import Flask, request

from ..common.web import current_caller, error_response, login_required, ok
from ..container import Container
from ..core.constants import DEFAULT_DEVICE_LIST_LOCATION
from ..directory.model import DeviceLocation


def _location_dict(loc: DeviceLocation) -> dict:
    return {
        "id": loc.location_id,
        "deviceName": loc.device_name,
        "serialNumber": loc.serial_number,
        "locationType": loc.location_label,
    }


def register(app: Flask, container: Container, *, url_prefix: str = "/api/v1/essl") -> None:
    @app.route(f"{url_prefix}/devices", methods=["GET"], endpoint="essl_devices")
    @login_required
    def essl_devices():
        try:
            devices = container.device_service.list_devices(request.args.get("location") or DEFAULT_DEVICE_LIST_LOCATION)
            return ok("Devices retrieved successfully", [asdict(d) for d in devices])
        except Exception as e:
            return error_response(e)

    @app.route(f"{url_prefix}/logs", methods=["GET"], endpoint="essl_logs")
    @login_required
    def essl_logs():
        try:
            logs = container.device_service.get_logs(
                request.args.get("date") or "",
                request.args.get("location") or DEFAULT_DEVICE_LIST_LOCATION,
            )
            return ok("Device logs retrieved successfully", [asdict(r) for r in logs])
        except Exception as e:
            return error_response(e)

    @app.route(f"{url_prefix}/locations", methods=["GET"], endpoint="essl_locations")
    @login_required
    def essl_locations():
        try:
            return ok(
                "Locations retrieved successfully",
                [_location_dict(loc) for loc in container.location_service.list_locations()],
            )
        except Exception as e:
            return error_response(e)

    @app.route(f"{url_prefix}/locations", methods=["POST"], endpoint="essl_locations_add")
    @login_required
    def essl_locations_add():
        data = request.get_json(silent=True) or {}
        try:
            loc = container.location_service.add_location(
                current_caller(),
                device_name=data.get("deviceName") or "",
                serial_number=data.get("serialNumber") or "",
                location_label=data.get("locationType") or "",
            )
            return ok("New location added successfully", _location_dict(loc), 201)
        except Exception as e:
            return error_response(e)

    @app.route(f"{url_prefix}/locations/<int:location_id>", methods=["PUT"], endpoint="essl_locations_update")
    @login_required
    def essl_locations_update(location_id: int):
        data = request.get_json(silent=True) or {}
        try:
            loc = container.location_service.update_location(current_caller(), location_id, data)
            return ok("Location updated successfully", _location_dict(loc))
        except Exception as e:
            return error_response(e)

    @app.route(f"{url_prefix}/locations/<int:location_id>", methods=["DELETE"], endpoint="essl_locations_delete")
    @login_required
    def essl_locations_delete(location_id: int):
        try:
            loc = container.location_service.delete_location(current_caller(), location_id)
            return ok("Location deleted successfully", _location_dict(loc))
        except Exception as e:
            return error_response(e)

    @app.route(f"{url_prefix}/employees", methods=["POST"], endpoint="essl_employee_enroll")
    @login_required
    def essl_employee_enroll():
        data = request.get_json(silent=True) or {}
        try:
            reply = container.device_service.enroll_employee(
                current_caller(),
                worker_code=data.get("employeeCode") or "",
                name=data.get("employeeName") or "",
                serial_number=data.get("serialNumber") or "",
                card_number=data.get("cardNumber") or "",
            )
            return ok("Employee sent to device", {"result": reply})
        except Exception as e:
            return error_response(e)

    @app.route(f"{url_prefix}/devices/<serial_number>/reset", methods=["POST"], endpoint="essl_device_reset")
    @login_required
    def essl_device_reset(serial_number: str):
        try:
            reply = container.device_service.reset_checkpoint(current_caller(), serial_number)
            return ok("Device checkpoint reset", {"result": reply})
        except Exception as e:
            return error_response(e)
