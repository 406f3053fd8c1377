"""Example: use the service layer directly (no Flask).

Runs one reconciliation pass for today and prints the pending entries a
Super Admin would see afterwards.
"""

import importlib

from config import get_settings_module

from src.canteen_attendance.canteen_attendance.container import build_container
from src.canteen_attendance.canteen_attendance.core.enums import Role
from src.canteen_attendance.canteen_attendance.directory.model import Caller


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        essl_config=settings.ESSL_CONFIG,
        timezone=settings.TIMEZONE,
    )
    report = container.sync_service.run()
    print(report.as_dict())

    admin = Caller(user_id=1, role=Role.SUPER_ADMIN)
    print(container.entry_service.list_entries(admin, resync=False))


if __name__ == "__main__":
    main()
