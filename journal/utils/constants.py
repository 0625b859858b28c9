"""Shared constants for trade records and summaries."""

POSITION_TYPES = ["buy", "sell"]

RULE_PRIORITIES = ["low", "medium", "high"]

CUSTOM_FIELD_KINDS = ["open", "close"]

MAX_RATING = 5

# Calendar bucket key formats
DAY_KEY_FORMAT = "{day:02d}-{month:02d}-{year:04d}"  # DD-MM-YYYY
MONTH_KEY_FORMAT = "{month}-{year:04d}"  # M-YYYY
YEAR_KEY_FORMAT = "{year:04d}"  # YYYY
TOTAL_KEY = "total"

USER_HEADER = "X-Journal-User"
