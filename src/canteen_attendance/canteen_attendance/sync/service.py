from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, tzinfo
from typing import List, Optional, Sequence

from ..common.datetime_utils import reference_zone, today_local
from ..core.exceptions import DeviceIOError, DeviceProtocolError, StorageError
from ..device.client import EsslClient
from ..directory.model import SiteRef
from ..directory.resolver import IdentitySiteResolver
from ..entries.model import AttendanceEntry
from ..entries.reconciler import ReconciliationStore
from ..punches.normalizer import LogNormalizer

logger = logging.getLogger(__name__)


@dataclass
class SiteSyncResult:
    location_label: str
    site_id: Optional[int]
    fetched: int = 0
    created: int = 0
    existing: int = 0
    skipped_unparsed: int = 0
    skipped_unmatched: int = 0
    failed: int = 0
    error_kind: Optional[str] = None
    error: Optional[str] = None
    entries: List[AttendanceEntry] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    def as_dict(self) -> dict:
        return {
            "location": self.location_label,
            "siteId": self.site_id,
            "fetched": self.fetched,
            "created": self.created,
            "existing": self.existing,
            "skippedUnparsed": self.skipped_unparsed,
            "skippedUnmatched": self.skipped_unmatched,
            "failed": self.failed,
            "errorKind": self.error_kind,
            "error": self.error,
        }


@dataclass
class SyncRunReport:
    day: date
    sites: List[SiteSyncResult] = field(default_factory=list)

    @property
    def created(self) -> int:
        return sum(s.created for s in self.sites)

    @property
    def failed_sites(self) -> List[SiteSyncResult]:
        return [s for s in self.sites if not s.ok]

    def as_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "created": self.created,
            "failedSites": len(self.failed_sites),
            "sites": [s.as_dict() for s in self.sites],
        }


class SyncService:
    """Device -> normalizer -> resolver -> store, one site at a time.

    Sites are polled sequentially; the server is a single shared resource. A
    fetch failure abandons only that site's batch.
    """

    def __init__(
        self,
        client: EsslClient,
        resolver: IdentitySiteResolver,
        store: ReconciliationStore,
        *,
        normalizer: Optional[LogNormalizer] = None,
        tz: Optional[tzinfo] = None,
    ):
        self._client = client
        self._resolver = resolver
        self._store = store
        self._tz = tz or reference_zone()
        self._normalizer = normalizer or LogNormalizer(self._tz)

    def sync_site(self, day: date, site: SiteRef) -> SiteSyncResult:
        result = SiteSyncResult(location_label=site.location_label, site_id=site.site_id)

        logger.info("Fetching logs for location: %s on date: %s", site.location_label, day)
        try:
            records = self._client.fetch_logs(day, site.location_label)
        except DeviceIOError as e:
            result.error_kind, result.error = "io", str(e)
            logger.error("Device unreachable for location %s: %s", site.location_label, e)
            return result
        except DeviceProtocolError as e:
            result.error_kind, result.error = "protocol", str(e)
            logger.error("Unexpected device response for location %s: %s", site.location_label, e)
            return result

        result.fetched = len(records)
        if not records:
            logger.info("No logs found for location: %s", site.location_label)
            return result

        for record in records:
            event = self._normalizer.normalize(record)
            if event is None:
                result.skipped_unparsed += 1
                continue

            try:
                employee = self._resolver.resolve_employee(event.worker_code)
                if employee is None:
                    logger.info("No employee found for code: %s", event.worker_code)
                    result.skipped_unmatched += 1
                    continue
                entry, created = self._store.upsert(employee, event, self._resolver.entry_site(site, employee))
            except StorageError:
                logger.exception("Error storing entry for %s at %s", event.worker_code, event.normalized_time)
                result.failed += 1
                continue

            result.entries.append(entry)
            if created:
                result.created += 1
            else:
                result.existing += 1

        return result

    def run(self, day: Optional[date] = None, sites: Optional[Sequence[SiteRef]] = None) -> SyncRunReport:
        day = day or today_local(self._tz)
        targets = list(sites) if sites is not None else self._resolver.all_sites()
        report = SyncRunReport(day=day)

        for site in targets:
            report.sites.append(self.sync_site(day, site))

        logger.info(
            "Sync for %s done: %d sites, %d new entries, %d failed sites",
            day,
            len(report.sites),
            report.created,
            len(report.failed_sites),
        )
        return report
