import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "eduscan_db"),
}

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_DIR = os.getenv("LOG_DIR", "logs")

# Live scanner
CAMERA_INDEX = int(os.getenv("CAMERA_INDEX", "0"))
SCAN_INTERVAL_SECONDS = float(os.getenv("SCAN_INTERVAL_SECONDS", "8"))
DEDUP_WINDOW_SECONDS = int(os.getenv("DEDUP_WINDOW_SECONDS", "60"))
REFERENCE_POOL_CAP = int(os.getenv("REFERENCE_POOL_CAP", "5"))
FACE_MATCH_TOLERANCE = float(os.getenv("FACE_MATCH_TOLERANCE", "0.5"))
LIVENESS_TEXTURE_THRESHOLD = float(os.getenv("LIVENESS_TEXTURE_THRESHOLD", "100"))

BOOTSTRAP_ADMIN = {
    "username": os.getenv("BOOTSTRAP_ADMIN_USERNAME", "admin"),
    "password": os.getenv("BOOTSTRAP_ADMIN_PASSWORD", "admin123"),
    "name": os.getenv("BOOTSTRAP_ADMIN_NAME", "Super Admin"),
}
