from werkzeug.security import generate_password_hash

SECRET_KEY = "test-secret"

STORAGE_BACKEND = "memory"
STORAGE_DIR = None
DB_CONFIG = None

ADMIN_PASSWORD_HASH = generate_password_hash("admin123")

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

STRICT_STORAGE_READS = False
AUTO_INIT_DB = False
SEED_SAMPLE_DATA = False

REVERSE_GEOCODING = False
NOMINATIM_URL = "https://nominatim.openstreetmap.org"
