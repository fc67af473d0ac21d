import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "club_attendance"),
}

DEBUG = False
TESTING = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")

ATTENDANCE_CODE_TTL_MINUTES = int(os.getenv("ATTENDANCE_CODE_TTL_MINUTES", "10"))
ROSTER_LIMIT = int(os.getenv("ROSTER_LIMIT", "500"))
LEGACY_LABEL_TOLERANCE_MINUTES = int(os.getenv("LEGACY_LABEL_TOLERANCE_MINUTES", "30"))
