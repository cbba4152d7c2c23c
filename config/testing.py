import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "eduscan_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

LOG_LEVEL = "WARNING"
LOG_DIR = None

CAMERA_INDEX = 0
SCAN_INTERVAL_SECONDS = 8
DEDUP_WINDOW_SECONDS = 60
REFERENCE_POOL_CAP = 5
FACE_MATCH_TOLERANCE = 0.5
LIVENESS_TEXTURE_THRESHOLD = 100.0

BOOTSTRAP_ADMIN = {
    "username": "admin",
    "password": "admin123",
    "name": "Super Admin",
}
