from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Operator roles as issued by the auth layer."""

    SUPER_ADMIN = "Super Admin"
    PLANT_HEAD = "Plant Head"
    HR = "HR"
    CATERER = "Caterer"
    EMPLOYEE = "Employee"

    @property
    def is_elevated(self) -> bool:
        return self is Role.SUPER_ADMIN

    @classmethod
    def parse(cls, value) -> "Role":
        if isinstance(value, Role):
            return value
        text = str(value or "").strip().lower()
        for role in cls:
            if role.value.lower() == text or role.name.lower() == text:
                return role
        raise ValueError(f"Unknown role: {value!r}")


class EntryStatus(str, Enum):
    """Canteen entry approval state."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"


class PunchDirection(str, Enum):
    IN = "IN"
    OUT = "OUT"
    UNKNOWN = "UNKNOWN"
