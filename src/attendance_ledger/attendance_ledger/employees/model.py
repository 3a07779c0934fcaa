from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee, as seen by the attendance ledger (read-only)."""

    employee_id: int
    name: str
    photo_url: Optional[str] = None
    created_at: Optional[datetime] = None
