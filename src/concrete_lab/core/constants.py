# Global constants

# Date formats
DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DISPLAY_DATE_FORMAT = "%d/%m/%Y"

# Test reference numbering: 2025-B-0001
REFERENCE_LETTER = "B"
REFERENCE_SEQUENCE_WIDTH = 4

# Pack defaults
DEFAULT_PACK_COUNT = 3
DEFAULT_PACK_AGE = 28
SURFACE_DECIMALS = 2

# Reports
PROVISIONAL_MAX_AGE = 7     # PV only lists specimens up to 7 days
EARLY_AGE = 7
CHARACTERISTIC_AGE = 28
EARLY_STRENGTH_RATIO = 0.7  # 7-day mean expected to reach 70% of fc28
MISSING_VALUE_PLACEHOLDER = "-"

# Consistency bands on slump (mm), upper edge inclusive
SLUMP_INDETERMINATE_BELOW = 10
SLUMP_BANDS = [
    (40, "S1"),
    (90, "S2"),
    (150, "S3"),
    (210, "S4"),
]
SLUMP_TOP_CLASS = "S5"

# Notification look-ahead (days after today still surfaced)
NOTIFICATION_HORIZON_DAYS = 1
UNKNOWN_PROJECT_NAME = "Projet Inconnu"
