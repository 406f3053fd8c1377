from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import DeviceLocation, EmployeeRef, Plant
from .repository import EmployeeDirectory, LocationRegistry, PlantDirectory


def _to_plant(r: dict) -> Plant:
    return Plant(
        plant_id=int(r["plant_id"]),
        name=r["name"],
        plant_code=r.get("plant_code") or "",
        location=r.get("location"),
        plant_head_id=r.get("plant_head_id"),
    )


def _to_location(r: dict) -> DeviceLocation:
    return DeviceLocation(
        location_id=int(r["location_id"]),
        device_name=r.get("device_name") or "",
        serial_number=r.get("serial_number") or "",
        location_label=r.get("location_type") or "",
    )


class MySQLEmployeeDirectory(EmployeeDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_worker_code(self, worker_code: str) -> Optional[EmployeeRef]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, employee_no, plant_id,
                       CONCAT_WS(' ', first_name, last_name) AS full_name
                FROM employees
                WHERE employee_no=%s
                LIMIT 1
                """,
                (worker_code,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return EmployeeRef(
                employee_id=int(r["employee_id"]),
                worker_code=r["employee_no"],
                site_id=r.get("plant_id"),
                full_name=r.get("full_name") or "",
            )


class MySQLPlantDirectory(PlantDirectory):
    _COLUMNS = "plant_id, name, plant_code, location, plant_head_id"

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value: object) -> Optional[Plant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {self._COLUMNS} FROM plants WHERE {where}=%s ORDER BY plant_id LIMIT 1", (value,))
            r = fetchone(cur)
            return _to_plant(r) if r else None

    def get_by_id(self, plant_id: int) -> Optional[Plant]:
        return self._get_one("plant_id", int(plant_id))

    def get_by_location(self, location: str) -> Optional[Plant]:
        return self._get_one("location", location)

    def get_headed_by(self, user_id: int) -> Optional[Plant]:
        return self._get_one("plant_head_id", int(user_id))


class MySQLLocationRegistry(LocationRegistry):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[DeviceLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT location_id, device_name, serial_number, location_type
                FROM device_locations
                ORDER BY location_id
                """
            )
            return [_to_location(r) for r in fetchall(cur)]

    def get_by_id(self, location_id: int) -> Optional[DeviceLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT location_id, device_name, serial_number, location_type
                FROM device_locations
                WHERE location_id=%s
                """,
                (int(location_id),),
            )
            r = fetchone(cur)
            return _to_location(r) if r else None

    def create(self, *, device_name: str, serial_number: str, location_label: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO device_locations(device_name, serial_number, location_type)
                VALUES(%s,%s,%s)
                """,
                (device_name, serial_number, location_label),
            )
            return int(cur.lastrowid)

    def update(self, *, location_id: int, device_name: str, serial_number: str, location_label: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE device_locations
                SET device_name=%s, serial_number=%s, location_type=%s
                WHERE location_id=%s
                """,
                (device_name, serial_number, location_label, int(location_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, location_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM device_locations WHERE location_id=%s", (int(location_id),))
            return cur.rowcount > 0
