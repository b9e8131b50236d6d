"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000.0
DEFAULT_PROXIMITY_RADIUS_METERS = 100.0

# Daily/weekly labor thresholds, in hours.
DAILY_APPROACHING_HOURS = 7.0
DAILY_OVERTIME_HOURS = 8.0
DAILY_DOUBLE_TIME_HOURS = 12.0
WEEKLY_OVERTIME_HOURS = 40.0

OVERTIME_MULTIPLIER = 1.5
DOUBLE_TIME_MULTIPLIER = 2.0

DEFAULT_RETENTION_DAYS = 90
DEFAULT_PENDING_LIMIT = 200
REPORT_DECIMALS = 2
