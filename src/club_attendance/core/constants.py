"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SETTINGS_DOC_ID = "attendance_config"

DEFAULT_DAY_OF_WEEK = 2
DEFAULT_SESSION1_START = (15, 20)
DEFAULT_SESSION2_START = (16, 35)
DEFAULT_SESSION_DURATION = 5
DEFAULT_WEEK_START_DATE = "2026-01-06"

DEFAULT_CODE_TTL_MINUTES = 10
DEFAULT_ROSTER_LIMIT = 500
DEFAULT_LEGACY_TOLERANCE_MINUTES = 30
MAX_SESSION_DURATION = 240

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

NOTE_PENDING = "awaiting check-in"
NOTE_DEBUG_CHECKIN = "[DEBUG] checked in while debug mode was on"
NOTE_LATE_CHECKIN = "checked in during the late window"
NOTE_SYSTEM_CLOSED = "system auto-marked - window closed"
NOTE_SYSTEM_BACKFILL = "system auto-marked - no record when window closed"
