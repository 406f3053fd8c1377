from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Any, Mapping, Optional

from .common.datetime_utils import reference_zone
from .core.constants import DEFAULT_TIMEZONE
from .database.connection import DatabaseConnection, DBConfig
from .device.client import EsslClient, EsslConfig
from .device.service import DeviceService
from .directory.mysql_directory_repository import MySQLEmployeeDirectory, MySQLLocationRegistry, MySQLPlantDirectory
from .directory.repository import EmployeeDirectory, LocationRegistry, PlantDirectory
from .directory.resolver import IdentitySiteResolver
from .directory.service import LocationService
from .entries.mysql_entry_repository import MySQLEntryRepository
from .entries.reconciler import ReconciliationStore
from .entries.repository import EntryStore
from .entries.service import EntryService
from .punches.normalizer import LogNormalizer
from .reports.service import EntryReportService
from .sync.service import SyncService


@dataclass(frozen=True)
class Container:
    tz: tzinfo

    employees_repo: EmployeeDirectory
    plants_repo: PlantDirectory
    locations_repo: LocationRegistry
    entries_repo: EntryStore

    essl_client: EsslClient
    resolver: IdentitySiteResolver
    reconciler: ReconciliationStore
    sync_service: SyncService
    entry_service: EntryService
    report_service: EntryReportService
    location_service: LocationService
    device_service: DeviceService

    conn: Optional[DatabaseConnection] = None


def assemble_container(
    *,
    employees: EmployeeDirectory,
    plants: PlantDirectory,
    locations: LocationRegistry,
    entries: EntryStore,
    client: EsslClient,
    tz: Optional[tzinfo] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over whatever repositories are handed in (MySQL or in-memory)."""
    tz = tz or reference_zone()

    resolver = IdentitySiteResolver(employees, plants, locations)
    reconciler = ReconciliationStore(entries)
    sync_service = SyncService(client, resolver, reconciler, normalizer=LogNormalizer(tz), tz=tz)

    return Container(
        tz=tz,
        employees_repo=employees,
        plants_repo=plants,
        locations_repo=locations,
        entries_repo=entries,
        essl_client=client,
        resolver=resolver,
        reconciler=reconciler,
        sync_service=sync_service,
        entry_service=EntryService(entries, resolver, sync_service, tz=tz),
        report_service=EntryReportService(entries, resolver, tz=tz),
        location_service=LocationService(locations),
        device_service=DeviceService(client),
        conn=conn,
    )


def build_container(
    *,
    db_config: Mapping[str, Any],
    essl_config: Mapping[str, Any],
    timezone: str = DEFAULT_TIMEZONE,
) -> Container:
    tz = reference_zone(timezone)
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    return assemble_container(
        employees=MySQLEmployeeDirectory(conn),
        plants=MySQLPlantDirectory(conn),
        locations=MySQLLocationRegistry(conn),
        entries=MySQLEntryRepository(conn, tz=tz),
        client=EsslClient(EsslConfig.from_mapping(essl_config)),
        tz=tz,
        conn=conn,
    )
