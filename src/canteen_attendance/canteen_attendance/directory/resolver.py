from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, List, Optional, Sequence

from ..core.enums import Role
from .model import Caller, DeviceLocation, EmployeeRef, Plant, SiteRef
from .repository import EmployeeDirectory, LocationRegistry, PlantDirectory

logger = logging.getLogger(__name__)


def _norm(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def _leading_token(label: str) -> str:
    parts = label.split()
    return parts[0] if parts else ""


class IdentitySiteResolver:
    """Maps worker codes to employees and operator site labels to polled sites.

    Device location labels are typed in by operators and rarely match the plant
    registry, so site matching falls through three containment tiers:

    1. a registered location label contains the site label;
    2. a device name contains the site label, or the label contains the device name;
    3. a registered location label contains the first word of the site label.

    The first tier that yields anything wins; within a tier, registry order wins.
    """

    def __init__(self, employees: EmployeeDirectory, plants: PlantDirectory, locations: LocationRegistry):
        self._employees = employees
        self._plants = plants
        self._locations = locations

    def resolve_employee(self, worker_code: str) -> Optional[EmployeeRef]:
        code = (worker_code or "").strip()
        if not code:
            return None
        return self._employees.get_by_worker_code(code)

    def all_sites(self) -> List[SiteRef]:
        return self._group(self._locations.list_all())

    def match_sites(self, site_label: str) -> List[SiteRef]:
        label = _norm(site_label)
        if not label:
            return []

        rows = list(self._locations.list_all())
        token = _norm(_leading_token(label))
        tiers: Sequence[Callable[[DeviceLocation], bool]] = (
            lambda row: label in _norm(row.location_label),
            lambda row: bool(_norm(row.device_name))
            and (label in _norm(row.device_name) or _norm(row.device_name) in label),
            lambda row: bool(token) and token in _norm(row.location_label),
        )
        for tier, predicate in enumerate(tiers, start=1):
            matched = [row for row in rows if predicate(row)]
            if matched:
                logger.debug("Site label %r matched %d registry rows at tier %d", site_label, len(matched), tier)
                return self._group(matched)

        logger.info("Site label %r matched no registered location", site_label)
        return []

    def resolve_site(
        self,
        location_label: Optional[str],
        caller_role: Optional[Role] = None,
        caller_site_id: Optional[int] = None,
    ) -> Optional[SiteRef]:
        """Single best site for a label.

        Without a label, the caller's own plant location is used. A scoped caller
        only ever gets a site of their own plant when one of the matches is.
        """
        label = location_label
        if not (label or "").strip() and caller_site_id is not None:
            plant = self._plants.get_by_id(caller_site_id)
            label = plant.location if plant else None

        matches = self.match_sites(label or "")
        if not matches:
            return None

        if caller_site_id is not None and not (caller_role and caller_role.is_elevated):
            own = [s for s in matches if s.site_id == caller_site_id]
            if own:
                return own[0]
        return matches[0]

    def caller_plant(self, caller: Caller) -> Optional[Plant]:
        if caller.plant_id is not None:
            return self._plants.get_by_id(caller.plant_id)
        if caller.role == Role.PLANT_HEAD and caller.user_id is not None:
            return self._plants.get_headed_by(caller.user_id)
        return None

    def resolve_sites(self, caller: Caller) -> List[SiteRef]:
        """Sites a caller's batch covers: everything for elevated callers,
        tiered matches of the caller's plant location otherwise, else nothing."""
        if caller.is_elevated:
            return self.all_sites()

        plant = self.caller_plant(caller)
        label = plant.location if plant else None
        if not (label or "").strip():
            logger.info("User %s with role %s has no assigned plant location", caller.user_id, caller.role.value)
            return []
        # Matches on the caller's own plant location belong to that plant even
        # when the device label is not a registered plant location.
        return [s if s.site_id is not None else replace(s, site_id=plant.plant_id) for s in self.match_sites(label)]

    @staticmethod
    def entry_site(site: SiteRef, employee: EmployeeRef) -> SiteRef:
        """Site an entry is stored under; an unmapped device label falls back to
        the employee's home plant."""
        if site.site_id is None and employee.site_id is not None:
            return replace(site, site_id=employee.site_id)
        return site

    def _group(self, rows: Sequence[DeviceLocation]) -> List[SiteRef]:
        grouped: dict[str, list[DeviceLocation]] = {}
        for row in rows:
            label = (row.location_label or "").strip()
            if label:
                grouped.setdefault(label, []).append(row)

        sites: List[SiteRef] = []
        for label, members in grouped.items():
            plant = self._plants.get_by_location(label)
            sites.append(
                SiteRef(
                    site_id=plant.plant_id if plant else None,
                    location_label=label,
                    device_serials=tuple(m.serial_number for m in members if m.serial_number),
                    device_names=tuple(m.device_name for m in members if m.device_name),
                )
            )
        return sites
