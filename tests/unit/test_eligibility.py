"""Unit tests for the eligibility and status engine"""

from datetime import date, datetime
from rewards_recorder.domain.calendar import FixedWindowPolicy
from rewards_recorder.domain.eligibility import (
    can_toggle_redeemed,
    days_until_expiry,
    is_expired,
    status_of,
    usage_window_open,
)
from rewards_recorder.domain.models import AwardStatus


def test_is_expired_after_expiry_day(make_award):
    """Expired only once the expiry day has fully passed"""
    award = make_award(draw_date=date(2025, 9, 1))  # expires Sunday 2025-09-07

    assert is_expired(award, datetime(2025, 9, 7, 23, 59)) is False
    assert is_expired(award, datetime(2025, 9, 8, 0, 1)) is True


def test_is_expired_never_for_redeemed(make_award):
    """Redeemed awards are never reported as expired"""
    award = make_award(draw_date=date(2025, 9, 1), redeemed=True)

    for now in (date(2025, 9, 8), date(2026, 1, 1), date(2030, 12, 31)):
        assert is_expired(award, now) is False


def test_usage_window_open_on_weekend_only():
    assert usage_window_open(datetime(2025, 9, 5, 12, 0)) is False  # Friday
    assert usage_window_open(datetime(2025, 9, 6, 0, 0)) is True  # Saturday
    assert usage_window_open(datetime(2025, 9, 7, 23, 0)) is True  # Sunday
    assert usage_window_open(datetime(2025, 9, 5), FixedWindowPolicy()) is True


def test_status_monday_award_on_following_saturday(make_award):
    """100 MOP drawn Monday is usable on Saturday and expires that Sunday"""
    award = make_award(value=100, bank="A", draw_date=date(2025, 9, 1))

    assert award.expiry_date == date(2025, 9, 7)
    assert status_of(award, datetime(2025, 9, 6, 10, 0)) == AwardStatus.USABLE_NOW


def test_status_transitions_over_a_week(make_award):
    """Waiting on weekdays, usable at the weekend, expired the next Monday"""
    award = make_award(draw_date=date(2025, 9, 2))

    assert status_of(award, date(2025, 9, 2)) == AwardStatus.WAITING_FOR_USAGE_WINDOW
    assert status_of(award, date(2025, 9, 6)) == AwardStatus.USABLE_NOW
    assert status_of(award, date(2025, 9, 7)) == AwardStatus.USABLE_NOW
    assert status_of(award, date(2025, 9, 8)) == AwardStatus.EXPIRED


def test_status_redeemed_takes_precedence(make_award):
    """Redeemed stays redeemed; un-redeeming falls back to the computed state"""
    award = make_award(draw_date=date(2025, 9, 1), redeemed=True)
    assert status_of(award, date(2025, 9, 20)) == AwardStatus.REDEEMED

    award.redeemed = False
    assert status_of(award, date(2025, 9, 20)) == AwardStatus.EXPIRED
    assert status_of(award, date(2025, 9, 6)) == AwardStatus.USABLE_NOW


def test_status_fixed_window_usable_any_day(make_award):
    """Policy B awards are usable on weekdays"""
    policy = FixedWindowPolicy()
    award = make_award(draw_date=date(2025, 9, 1), expiry_date=date(2025, 10, 1))

    assert status_of(award, date(2025, 9, 10), policy) == AwardStatus.USABLE_NOW
    assert status_of(award, date(2025, 10, 2), policy) == AwardStatus.EXPIRED


def test_can_toggle_redeemed(make_award):
    """Expired awards cannot be redeemed, but a redeemed one can always be undone"""
    award = make_award(draw_date=date(2025, 9, 1))
    assert can_toggle_redeemed(award, date(2025, 9, 6)) is True
    assert can_toggle_redeemed(award, date(2025, 9, 8)) is False

    redeemed = make_award(draw_date=date(2025, 9, 1), redeemed=True)
    assert can_toggle_redeemed(redeemed, date(2025, 9, 30)) is True


def test_days_until_expiry(make_award):
    award = make_award(draw_date=date(2025, 9, 1))
    assert days_until_expiry(award, datetime(2025, 9, 1, 22, 0)) == 6
    assert days_until_expiry(award, date(2025, 9, 7)) == 0
    assert days_until_expiry(award, date(2025, 9, 9)) == -2
