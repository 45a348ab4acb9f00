"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

# Fallbacks applied when a business has no active attendance rule.
DEFAULT_LATE_GRACE_MINUTES = 30
DEFAULT_HALF_DAY_THRESHOLD_MINUTES = 240
DEFAULT_STANDARD_DAY_MINUTES = 480
DEFAULT_OVERTIME_RATE = Decimal("1.5")

# Implied monthly hours used to derive an hourly rate for non-hourly employees.
STANDARD_MONTHLY_HOURS = Decimal("160")

DEFAULT_CHARITY_RATE = Decimal("0.025")

# Python weekday numbers (Monday == 0).
DEFAULT_WEEKEND_DAYS = frozenset({5, 6})
