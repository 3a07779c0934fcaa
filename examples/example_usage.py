"""Example: use the service layer directly (no Flask).

Prints the current month for employee 1 and today's fleet-wide counts.
"""

import importlib

from config import get_settings_module

from src.attendance_ledger.attendance_ledger.attendance.reconstructor import summarize
from src.attendance_ledger.attendance_ledger.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, timezone=settings.TIMEZONE)

    today = container.clock.now().date()
    entries = container.reconstructor.reconstruct_month(1, today.month, today.year)
    print(summarize(entries))
    print(container.stats_service.get_daily_stats())


if __name__ == "__main__":
    main()
