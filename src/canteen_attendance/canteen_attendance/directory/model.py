from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class EmployeeRef:
    """Read-only view of an employee from the employee directory."""

    employee_id: int
    worker_code: str
    site_id: Optional[int]
    full_name: str = ""


@dataclass(frozen=True)
class Plant:
    plant_id: int
    name: str
    plant_code: str
    location: Optional[str]
    plant_head_id: Optional[int] = None


@dataclass(frozen=True)
class DeviceLocation:
    """Row of the device registry: which device serves which location label."""

    location_id: int
    device_name: str
    serial_number: str
    location_label: str


@dataclass(frozen=True)
class SiteRef:
    """A location label as polled from the server, with its plant (if any)."""

    site_id: Optional[int]
    location_label: str
    device_serials: tuple[str, ...] = field(default_factory=tuple)
    device_names: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Caller:
    """The authenticated operator on whose behalf a request runs."""

    user_id: Optional[int]
    role: Role
    plant_id: Optional[int] = None

    @property
    def is_elevated(self) -> bool:
        return self.role.is_elevated
