"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MPL_HOURS_PER_UNIT = 8
CUTOFF_BOUNDARY_DAY = 15

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_LIST_LIMIT = 200

# Remark stored on a record closed before office end.
EARLY_DEPARTURE_REMARK = "EarlyDeparture"

NOTIFICATION_LINK = "/api/notification/view/{id}"

NOTIFY_ATTENDANCE_ALERT = "Attendance Alert"
NOTIFY_ATTENDANCE_UPDATE = "Attendance Update"
NOTIFY_OVERTIME_REQUEST = "Overtime Request"
NOTIFY_OVERTIME_REVIEW = "Overtime Review"
NOTIFY_MPL_CONVERSION = "MPL Conversion"
NOTIFY_CONFIG_UPDATE = "Configuration Update"
