"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SCAN_INTERVAL_SECONDS = 8
DEFAULT_DEDUP_WINDOW_SECONDS = 60
DEFAULT_REFERENCE_POOL_CAP = 5
DEFAULT_FACE_MATCH_TOLERANCE = 0.5
DEFAULT_LIVENESS_TEXTURE_THRESHOLD = 100.0
DEFAULT_SCAN_LOG_SIZE = 10

DEFAULT_SCHOOL_NAME = "EduScan AI"
UNASSIGNED_CLASS_LABEL = "Unassigned"

SPOOFING_NOTE_PREFIX = "Spoofing Detected: "

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"
