"""Calendar rules - weekend checks, draw-date validation and expiry projection"""

from datetime import date, timedelta
from typing import Dict, Optional

from rewards_recorder.domain.models import ValidationResult
from rewards_recorder.utils.date_utils import DateLike, to_date

SATURDAY = 5
SUNDAY = 6

WEEKEND_DRAW_ERROR = "Draw date cannot be on weekends (Saturday or Sunday)"
PAST_DRAW_ERROR = "Draw date cannot be in the past"
INVALID_DRAW_DATE = "invalid_draw_date"


def is_weekend(value: DateLike) -> bool:
    """True for Saturday and Sunday"""
    return to_date(value).weekday() in (SATURDAY, SUNDAY)


def validate_draw_date(
    value: DateLike,
    today: Optional[DateLike] = None,
    reject_past: bool = False,
) -> ValidationResult:
    """
    Check that a draw date is acceptable for entry.

    Weekend dates always fail. Past dates fail only when ``reject_past`` is
    set and a reference ``today`` is supplied. Failures are reported through
    the result, never raised.
    """
    day = to_date(value)
    if is_weekend(day):
        return ValidationResult(is_valid=False, error=WEEKEND_DRAW_ERROR, code=INVALID_DRAW_DATE)

    if reject_past and today is not None and day < to_date(today):
        return ValidationResult(is_valid=False, error=PAST_DRAW_ERROR, code=INVALID_DRAW_DATE)

    return ValidationResult(is_valid=True)


class ExpiryPolicy:
    """Strategy deciding when an award expires and on which days it may be spent"""

    name = "base"

    def expiry_for(self, draw_date: date) -> date:
        raise NotImplementedError

    def usage_window_open(self, now: DateLike) -> bool:
        raise NotImplementedError


class NextSundayPolicy(ExpiryPolicy):
    """
    Weekly e-voucher model: awards are spent on the weekend right after the draw.

    - Monday..Friday draw: expires the Sunday ending that week
    - Saturday draw: expires the next day
    - Sunday draw: expires the following Sunday
    """

    name = "next_sunday"

    def expiry_for(self, draw_date: date) -> date:
        day = to_date(draw_date)
        weekday = day.weekday()
        if weekday == SUNDAY:
            return day + timedelta(days=7)
        return day + timedelta(days=SUNDAY - weekday)

    def usage_window_open(self, now: DateLike) -> bool:
        return is_weekend(now)


class FixedWindowPolicy(ExpiryPolicy):
    """Award usable on any day within a fixed number of days after the draw"""

    name = "fixed_window"

    def __init__(self, window_days: int = 30):
        self.window_days = window_days

    def expiry_for(self, draw_date: date) -> date:
        return to_date(draw_date) + timedelta(days=self.window_days)

    def usage_window_open(self, now: DateLike) -> bool:
        return True


DEFAULT_POLICY = NextSundayPolicy()

_POLICIES: Dict[str, type] = {
    NextSundayPolicy.name: NextSundayPolicy,
    FixedWindowPolicy.name: FixedWindowPolicy,
}


def get_expiry_policy(name: str, window_days: int = 30) -> ExpiryPolicy:
    """Resolve a configured policy name"""
    if name not in _POLICIES:
        raise ValueError(f"Unknown expiry policy: {name}")
    if name == FixedWindowPolicy.name:
        return FixedWindowPolicy(window_days)
    return _POLICIES[name]()


def expiry_from_draw_date(draw_date: DateLike, policy: ExpiryPolicy = DEFAULT_POLICY) -> date:
    """Project the last valid day of an award from its draw date"""
    return policy.expiry_for(to_date(draw_date))
