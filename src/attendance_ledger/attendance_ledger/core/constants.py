"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

# Two shift windows split at noon, each with a fixed clock-in target.
NOON_HOUR = 12
MORNING_TARGET = time(9, 0)
AFTERNOON_TARGET = time(15, 0)

LATENESS_BUCKET_MINUTES = 30

# Local hour after which an unrecorded "today" counts as concluded.
DEFAULT_CLOSING_HOUR = 22

SYNTHETIC_ID_PREFIX = "absent-"
