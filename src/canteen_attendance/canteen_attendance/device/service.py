from __future__ import annotations

from typing import List

from ..common.validators import require_iso_date, require_non_empty
from ..core.constants import DEFAULT_DEVICE_LIST_LOCATION
from ..core.exceptions import AuthorizationError, ValidationError
from ..directory.model import Caller
from .client import EsslClient
from .model import DeviceInfo, RawRecord


class DeviceService:
    """Operator-facing pass-through to the access-control server."""

    def __init__(self, client: EsslClient):
        self._client = client

    @staticmethod
    def _require_admin(caller: Caller) -> None:
        if not caller.is_elevated:
            raise AuthorizationError("Only administrators can send device commands")

    def list_devices(self, location: str = DEFAULT_DEVICE_LIST_LOCATION) -> List[DeviceInfo]:
        return self._client.list_devices(location or DEFAULT_DEVICE_LIST_LOCATION)

    def get_logs(self, day: str, location: str) -> List[RawRecord]:
        if not day:
            raise ValidationError("Date is required in YYYY-MM-DD format")
        return self._client.fetch_logs(require_iso_date(day), require_non_empty(str(location), "Location"))

    def enroll_employee(
        self,
        caller: Caller,
        *,
        worker_code: str,
        name: str,
        serial_number: str,
        card_number: str = "",
    ) -> str:
        self._require_admin(caller)
        return self._client.update_employee(
            worker_code=worker_code,
            name=name,
            serial_number=serial_number,
            card_number=card_number,
        )

    def reset_checkpoint(self, caller: Caller, serial_number: str) -> str:
        self._require_admin(caller)
        return self._client.reset_checkpoint(serial_number)
