import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker"),
}

DEBUG = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
# Plain text is easier to read in a terminal while developing.
LOG_JSON = bool(int(os.getenv("LOG_JSON", "0")))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
# and seed the overtime configuration and a demo admin.
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

DEFAULT_OVERTIME_CONFIG = {
    "office_start_time": os.getenv("OFFICE_START_TIME", "08:00"),
    "office_end_time": os.getenv("OFFICE_END_TIME", "17:00"),
    "break_max_minutes": int(os.getenv("BREAK_MAX_MINUTES", "60")),
    "night_diff_start_time": os.getenv("NIGHT_DIFF_START_TIME", "22:00"),
    "night_diff_end_time": os.getenv("NIGHT_DIFF_END_TIME", "06:00"),
    "overtime_daily_max_minutes": int(os.getenv("OVERTIME_DAILY_MAX_MINUTES", "240")),
}
