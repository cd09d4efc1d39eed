"""Eligibility and status engine - is an award expired, spendable or waiting"""

from rewards_recorder.domain.calendar import DEFAULT_POLICY, ExpiryPolicy
from rewards_recorder.domain.models import Award, AwardStatus
from rewards_recorder.utils.date_utils import DateLike, to_date


def is_expired(award: Award, now: DateLike) -> bool:
    """Unredeemed and past its expiry day (day precision)"""
    return not award.redeemed and to_date(award.expiry_date) < to_date(now)


def usage_window_open(now: DateLike, policy: ExpiryPolicy = DEFAULT_POLICY) -> bool:
    """Whether awards may be spent at this instant"""
    return policy.usage_window_open(now)


def status_of(award: Award, now: DateLike, policy: ExpiryPolicy = DEFAULT_POLICY) -> AwardStatus:
    """
    Classify an award at ``now``.

    Precedence: redeemed, expired, usable now, waiting. Only ``redeemed`` is
    stored; everything else is recomputed on every call.
    """
    if award.redeemed:
        return AwardStatus.REDEEMED
    if is_expired(award, now):
        return AwardStatus.EXPIRED
    if usage_window_open(now, policy):
        return AwardStatus.USABLE_NOW
    return AwardStatus.WAITING_FOR_USAGE_WINDOW


def can_toggle_redeemed(award: Award, now: DateLike) -> bool:
    """Expired awards cannot be marked as redeemed; un-redeeming is always allowed"""
    return award.redeemed or not is_expired(award, now)


def days_until_expiry(award: Award, now: DateLike) -> int:
    """Whole days left until expiry (0 on the last day, negative once past)"""
    return (to_date(award.expiry_date) - to_date(now)).days
