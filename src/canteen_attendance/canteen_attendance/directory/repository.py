from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import DeviceLocation, EmployeeRef, Plant


class EmployeeDirectory(Protocol):
    """Employee lookups owned by the HR module; never written by this package."""

    def get_by_worker_code(self, worker_code: str) -> Optional[EmployeeRef]:
        raise NotImplementedError


class PlantDirectory(Protocol):
    def get_by_id(self, plant_id: int) -> Optional[Plant]:
        raise NotImplementedError

    def get_by_location(self, location: str) -> Optional[Plant]:
        raise NotImplementedError

    def get_headed_by(self, user_id: int) -> Optional[Plant]:
        raise NotImplementedError


class LocationRegistry(Protocol):
    """The device-location reference table (device name/serial -> label)."""

    def list_all(self) -> Sequence[DeviceLocation]:
        raise NotImplementedError

    def get_by_id(self, location_id: int) -> Optional[DeviceLocation]:
        raise NotImplementedError

    def create(self, *, device_name: str, serial_number: str, location_label: str) -> int:
        raise NotImplementedError

    def update(self, *, location_id: int, device_name: str, serial_number: str, location_label: str) -> bool:
        raise NotImplementedError

    def delete(self, *, location_id: int) -> bool:
        raise NotImplementedError
