from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Mapping, Optional

import requests

from ..common.validators import require_iso_date, require_non_empty
from ..core.constants import DEFAULT_DEVICE_LIST_LOCATION, DEFAULT_DEVICE_TIMEOUT_SECONDS
from ..core.exceptions import DeviceIOError
from . import protocol
from .model import DeviceInfo, RawRecord

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class EsslConfig:
    base_url: str
    username: str
    password: str
    timeout_seconds: float = DEFAULT_DEVICE_TIMEOUT_SECONDS

    @classmethod
    def from_mapping(cls, essl_config: Mapping[str, Any]) -> "EsslConfig":
        return cls(
            base_url=str(essl_config.get("base_url") or ""),
            username=str(essl_config.get("username") or ""),
            password=str(essl_config.get("password") or ""),
            timeout_seconds=float(essl_config.get("timeout_seconds") or DEFAULT_DEVICE_TIMEOUT_SECONDS),
        )


class EsslClient:
    """Request/response client for the access-control server.

    Stateless between calls. Transport problems raise DeviceIOError, envelope
    problems raise DeviceProtocolError; nothing is retried here.
    """

    def __init__(self, config: EsslConfig, *, session: Optional[requests.Session] = None):
        self._config = config
        self._http = session or requests.Session()

    def _credentials(self) -> list[tuple[str, object]]:
        return [("UserName", self._config.username), ("Password", self._config.password)]

    def _call(self, operation: str, fields: list[tuple[str, object]]) -> str:
        if not self._config.base_url:
            raise DeviceIOError("Access-control server URL is not configured")

        url = protocol.operation_url(self._config.base_url, operation)
        envelope = protocol.build_envelope(operation, self._credentials() + fields)
        try:
            response = self._http.post(
                url,
                data=envelope,
                headers={
                    "Content-Type": "text/xml; charset=utf-8",
                    "SOAPAction": protocol.soap_action(operation),
                },
                timeout=self._config.timeout_seconds,
            )
        except requests.Timeout as e:
            raise DeviceIOError(f"{operation}: timed out after {self._config.timeout_seconds}s") from e
        except requests.RequestException as e:
            raise DeviceIOError(f"{operation}: cannot reach access-control server ({e})") from e

        if not 200 <= response.status_code < 300:
            raise DeviceIOError(f"{operation}: server returned HTTP {response.status_code}")

        return protocol.extract_result(response.content, operation)

    def list_devices(self, location: str = DEFAULT_DEVICE_LIST_LOCATION) -> List[DeviceInfo]:
        result = self._call(protocol.OP_DEVICE_LIST, [("Location", location)])
        return [
            DeviceInfo(
                name=protocol.field(fields, 0),
                serial_number=protocol.field(fields, 1),
                location=protocol.field(fields, 2),
            )
            for fields in protocol.split_records(result, min_fields=2)
        ]

    def fetch_logs(self, day: date | str, location: str) -> List[RawRecord]:
        """Punch records for one calendar day at one location label.

        An empty or absent result is "no activity" and returns [].
        """
        log_date = require_iso_date(day, "log date")
        result = self._call(
            protocol.OP_DEVICE_LOGS,
            [("Location", location), ("LogDate", log_date.isoformat())],
        )

        records = [
            RawRecord(
                log_time=_WHITESPACE_RE.sub("", fields[0]),
                worker_code=protocol.field(fields, 1),
                device_name=protocol.field(fields, 2),
                location=protocol.field(fields, 3),
                direction=protocol.field(fields, 4),
            )
            for fields in protocol.split_records(result, min_fields=2)
        ]
        logger.debug("Fetched %d records for %s on %s", len(records), location, log_date)
        return records

    def update_employee(
        self,
        *,
        worker_code: str,
        name: str,
        serial_number: str,
        card_number: str = "",
    ) -> str:
        """Enroll or update a worker on one device. Returns the server's reply text."""
        result = self._call(
            protocol.OP_UPDATE_EMPLOYEE,
            [
                ("EmployeeCode", require_non_empty(worker_code, "Employee code")),
                ("EmployeeName", require_non_empty(name, "Employee name")),
                ("CardNumber", card_number or ""),
                ("SerialNumber", require_non_empty(serial_number, "Serial number")),
            ],
        )
        return result.strip()

    def reset_checkpoint(self, serial_number: str) -> str:
        """Ask the server to re-deliver a device's logs from the beginning."""
        result = self._call(
            protocol.OP_RESET_CHECKPOINT,
            [("SerialNumber", require_non_empty(serial_number, "Serial number"))],
        )
        return result.strip()
