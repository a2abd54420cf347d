import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker_test"),
}

DEBUG = False
TESTING = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
LOG_JSON = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

DEFAULT_OVERTIME_CONFIG = {
    "office_start_time": "08:00",
    "office_end_time": "17:00",
    "break_max_minutes": 60,
    "night_diff_start_time": "22:00",
    "night_diff_end_time": "06:00",
    "overtime_daily_max_minutes": 240,
}
