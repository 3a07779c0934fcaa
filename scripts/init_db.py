"""Apply database/schema.sql and check the ledger's one-record-per-day key.

Exits non-zero when attendance_records lacks the (employee_id, work_date)
unique key, since every ledger write depends on it.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_ledger.attendance_ledger.database.bootstrap import apply_schema, list_tables, list_unique_keys

LEDGER_TABLE = "attendance_records"
LEDGER_KEY = ["employee_id", "work_date"]


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = list_tables(db_config)
    keys = list_unique_keys(db_config, LEDGER_TABLE)

    target = f"{db_config.get('database')}@{db_config.get('host')}:{db_config.get('port', 3306)}"
    print(f"schema applied to {target}: {len(tables)} tables ({', '.join(sorted(tables))})")

    ledger_keys = [name for name, cols in keys.items() if cols == LEDGER_KEY]
    if not ledger_keys:
        print(f"ERROR: {LEDGER_TABLE} has no UNIQUE ({', '.join(LEDGER_KEY)}); found {keys}", file=sys.stderr)
        return 1
    print(f"{LEDGER_TABLE}: unique key {ledger_keys[0]} on ({', '.join(LEDGER_KEY)})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
