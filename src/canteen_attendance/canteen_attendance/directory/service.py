from __future__ import annotations

from typing import Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import AuthorizationError, NotFoundError
from .model import Caller, DeviceLocation
from .repository import LocationRegistry


class LocationService:
    """Maintenance of the device-location registry used for site fallback matching."""

    def __init__(self, locations: LocationRegistry):
        self._locations = locations

    @staticmethod
    def _require_admin(caller: Caller) -> None:
        if not caller.is_elevated:
            raise AuthorizationError("Only administrators can manage device locations")

    def list_locations(self) -> Sequence[DeviceLocation]:
        return self._locations.list_all()

    def add_location(self, caller: Caller, *, device_name: str, serial_number: str, location_label: str) -> DeviceLocation:
        self._require_admin(caller)
        location_id = self._locations.create(
            device_name=require_non_empty(device_name, "Device name"),
            serial_number=require_non_empty(serial_number, "Serial number"),
            location_label=require_non_empty(location_label, "Location type"),
        )
        created = self._locations.get_by_id(location_id)
        if created is None:
            raise NotFoundError(f"Location {location_id} not found")
        return created

    def update_location(self, caller: Caller, location_id: int, changes: dict) -> DeviceLocation:
        self._require_admin(caller)
        current = self._locations.get_by_id(int(location_id))
        if current is None:
            raise NotFoundError(f"Location {location_id} not found")

        device_name = changes.get("deviceName", current.device_name)
        serial_number = changes.get("serialNumber", current.serial_number)
        location_label = changes.get("locationType", current.location_label)

        self._locations.update(
            location_id=current.location_id,
            device_name=require_non_empty(device_name, "Device name"),
            serial_number=require_non_empty(serial_number, "Serial number"),
            location_label=require_non_empty(location_label, "Location type"),
        )
        return self._locations.get_by_id(current.location_id) or current

    def delete_location(self, caller: Caller, location_id: int) -> DeviceLocation:
        self._require_admin(caller)
        current = self._locations.get_by_id(int(location_id))
        if current is None:
            raise NotFoundError(f"Location {location_id} not found")
        self._locations.delete(location_id=current.location_id)
        return current
