import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "file")
STORAGE_DIR = os.getenv("STORAGE_DIR", "/var/lib/workforce-system")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workforce_db"),
}

# Must be provided; an empty hash rejects every admin login.
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH", "")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

STRICT_STORAGE_READS = bool(int(os.getenv("STRICT_STORAGE_READS", "1")))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
SEED_SAMPLE_DATA = bool(int(os.getenv("SEED_SAMPLE_DATA", "0")))

REVERSE_GEOCODING = bool(int(os.getenv("REVERSE_GEOCODING", "1")))
NOMINATIM_URL = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org")
