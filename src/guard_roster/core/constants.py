"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import ShiftId

# Display window of each shift. Exactly three shifts per day.
SHIFT_TIMES = {
    ShiftId.SHIFT1: "19:00 - 19:30",
    ShiftId.SHIFT2: "19:30 - 20:00",
    ShiftId.SHIFT3: "20:00 - 20:30",
}

# One approved guard per (date, shift).
SLOT_CAPACITY = 1

ADMIN_CONFIG_KEY = "admin"
DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin123"
DEFAULT_ADMIN_NAME = "Administrador"
ADMIN_SESSION_ID = "admin"

# Approver recorded on schedules created by a coverage claim.
SYSTEM_APPROVER = "system"

MIN_PASSWORD_LENGTH = 6
GENERATED_PASSWORD_LENGTH = 8
