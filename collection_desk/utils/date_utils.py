"""Date manipulation utilities"""

import math
from datetime import datetime

SECONDS_PER_DAY = 24 * 60 * 60

# Friday work ends early; from this hour on the day counts as weekend
FRIDAY_CUTOFF_HOUR = 14


def age_in_days(moment: datetime, now: datetime) -> int:
    """Whole days elapsed from moment to now (negative when moment is in the future)"""
    return math.floor((now - moment).total_seconds() / SECONDS_PER_DAY)


def is_business_day(moment: datetime) -> bool:
    """Default business-time predicate: Saturday and Friday afternoon are off (doesn't account for holidays)"""
    weekday = moment.weekday()
    if weekday == 5:
        return False
    if weekday == 4 and moment.hour >= FRIDAY_CUTOFF_HOUR:
        return False
    return True
