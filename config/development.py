import os

from werkzeug.security import generate_password_hash

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# file | mysql | memory
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "file")
STORAGE_DIR = os.getenv("STORAGE_DIR", "instance/storage")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workforce_db"),
}

ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH") or generate_password_hash(
    os.getenv("ADMIN_PASSWORD", "admin123")
)

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Raise StorageError on unreadable collections instead of treating them as empty
STRICT_STORAGE_READS = bool(int(os.getenv("STRICT_STORAGE_READS", "0")))

# If enabled, the mysql backend creates its database/table on startup
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Write sample employees/locations when those collections were never created
SEED_SAMPLE_DATA = bool(int(os.getenv("SEED_SAMPLE_DATA", "1")))

REVERSE_GEOCODING = bool(int(os.getenv("REVERSE_GEOCODING", "0")))
NOMINATIM_URL = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org")
