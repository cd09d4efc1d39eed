"""Unit tests for the aggregation engine"""

from datetime import date, datetime, timedelta
from rewards_recorder.domain.aggregation import (
    UNSPECIFIED_MERCHANT,
    bank_breakdown,
    bank_distribution,
    build_summary,
    compute_totals,
    merchant_totals,
    this_week_bank_gaps,
    this_week_bank_status,
    top_big_award_banks,
    value_breakdown,
    value_distribution,
    weekly_trends,
)
from rewards_recorder.domain.banks import banks_for
from rewards_recorder.domain.models import AWARD_VALUES

BANKS = banks_for()
BOC, ICBC, TAI_FUNG, LUSO, BNU, MACAU_PASS, ANT, UEPAY = BANKS

MONDAY = date(2025, 9, 1)
NOW = datetime(2025, 9, 3, 12, 0)  # Wednesday of the same week


def _mixed_collection(make_award):
    """Two weeks of awards across several banks and states"""
    return [
        make_award(value=200, bank=BOC, draw_date=MONDAY, redeemed=True, merchant="超市"),
        make_award(value=100, bank=BOC, draw_date=MONDAY),
        make_award(value=10, bank=BOC, draw_date=MONDAY + timedelta(days=2)),
        make_award(value=50, bank=ICBC, draw_date=MONDAY + timedelta(days=1), redeemed=True),
        make_award(value=0, bank=ICBC, draw_date=MONDAY + timedelta(days=1)),
        # Previous week: already expired by NOW unless redeemed
        make_award(value=20, bank=TAI_FUNG, draw_date=MONDAY - timedelta(days=7)),
        make_award(value=100, bank=LUSO, draw_date=MONDAY - timedelta(days=6), redeemed=True, merchant="超市"),
    ]


def test_empty_collection_yields_zeroes():
    """No awards is not an error: every aggregate is zero"""
    totals = compute_totals([], NOW)
    assert totals.total_count == 0
    assert totals.total_value == 0
    assert totals.redemption_rate == 0.0

    assert all(row.total_count == 0 for row in value_breakdown([], NOW))
    assert all(row.probability == 0 for row in bank_breakdown([]).values())
    assert top_big_award_banks([]) == []
    assert weekly_trends([]) == []
    assert this_week_bank_gaps([], NOW) == list(BANKS)


def test_compute_totals(make_award):
    """Counts, sums and the 3x consumption figures"""
    totals = compute_totals(_mixed_collection(make_award), NOW)

    assert totals.total_count == 7
    assert totals.total_value == 480
    assert totals.redeemed_count == 3
    assert totals.redeemed_value == 350
    assert totals.pending_count == 4
    assert totals.pending_value == 130
    assert totals.expired_count == 1
    assert totals.expired_value == 20
    assert totals.pending_consumption_value == 390
    assert totals.expired_consumption_value == 60
    assert totals.redeemed_consumption_value == 1050
    assert totals.redemption_rate == 42.9


def test_totals_are_additive(make_award):
    """total == redeemed + pending for any mix of redeemed flags"""
    values = [0, 10, 20, 50, 100, 200, 50, 10]
    for mask in range(1 << len(values)):
        awards = [
            make_award(value=v, redeemed=bool(mask & (1 << i))) for i, v in enumerate(values)
        ]
        totals = compute_totals(awards, NOW)
        assert totals.total_value == totals.redeemed_value + totals.pending_value
        assert totals.total_count == totals.redeemed_count + totals.pending_count


def test_value_breakdown(make_award):
    """One row per face value with redeemed / pending / expired split"""
    rows = {row.value: row for row in value_breakdown(_mixed_collection(make_award), NOW)}

    assert list(rows) == list(AWARD_VALUES)

    assert rows[100].total_count == 2
    assert rows[100].redeemed_count == 1
    assert rows[100].pending_count == 1
    assert rows[100].pending_value == 100
    assert rows[100].pending_consumption_value == 300

    assert rows[20].expired_count == 1
    assert rows[20].expired_value == 20
    assert rows[20].expired_consumption_value == 60

    assert rows[0].total_count == 1
    assert rows[0].total_value == 0


def test_value_and_bank_distribution(make_award):
    awards = _mixed_collection(make_award)

    assert value_distribution(awards) == {200: 1, 100: 2, 10: 1, 50: 1, 0: 1, 20: 1}
    assert bank_distribution(awards) == {BOC: 3, ICBC: 2, TAI_FUNG: 1, LUSO: 1}


def test_bank_breakdown_probability(make_award):
    """Probability is big awards over total awards, 0 for unused banks"""
    rows = bank_breakdown(_mixed_collection(make_award))

    boc = rows[BOC]
    assert boc.total_awards == 3
    assert boc.big_awards == 2
    assert boc.big_award_value == 300
    assert boc.value_breakdown == {200: 1, 100: 1, 10: 1}
    assert abs(boc.probability - 66.6667) < 0.001

    assert rows[LUSO].probability == 100.0
    assert rows[UEPAY].total_awards == 0
    assert rows[UEPAY].probability == 0

    for row in rows.values():
        assert 0 <= row.probability <= 100
        assert (row.probability == 0) == (row.big_awards == 0)


def test_bank_breakdown_keeps_unknown_banks(make_award):
    """Unknown bank names show up in the breakdown but never in the ranking"""
    awards = [
        make_award(value=200, bank="Corrupted Bank"),
        make_award(value=10, bank=BNU),
    ]

    rows = bank_breakdown(awards)
    assert list(rows)[: len(BANKS)] == list(BANKS)
    assert rows["Corrupted Bank"].big_awards == 1

    ranking = top_big_award_banks(awards)
    assert [r.bank for r in ranking] == [BNU]


def test_top_big_award_banks_ordering(make_award):
    """Sorted by probability, then big-award count; at most 3; no empty banks"""
    awards = [
        # BOC: 1/2 = 50%, 1 big
        make_award(value=100, bank=BOC),
        make_award(value=10, bank=BOC),
        # ICBC: 2/4 = 50%, 2 big
        make_award(value=200, bank=ICBC),
        make_award(value=100, bank=ICBC),
        make_award(value=10, bank=ICBC),
        make_award(value=20, bank=ICBC),
        # BNU: 1/1 = 100%
        make_award(value=100, bank=BNU),
        # ANT: 0%
        make_award(value=50, bank=ANT),
        # UEPAY: 1/3 = 33.33%
        make_award(value=100, bank=UEPAY),
        make_award(value=0, bank=UEPAY),
        make_award(value=0, bank=UEPAY),
    ]

    ranking = top_big_award_banks(awards)

    assert [r.bank for r in ranking] == [BNU, ICBC, BOC]
    assert ranking[0].probability == 100.0
    assert ranking[1].big_awards == 2
    assert ranking[1].big_award_value == 300

    assert top_big_award_banks(awards, limit=5)[3].probability == 33.33


def test_weekly_trends_partition(make_award):
    """Each award appears in exactly one Monday-start bucket, weeks ascending"""
    awards = _mixed_collection(make_award)
    buckets = weekly_trends(reversed(awards))

    assert [b.week_start for b in buckets] == [MONDAY - timedelta(days=7), MONDAY]
    assert all(b.week_start.weekday() == 0 for b in buckets)
    assert all(b.week_end == b.week_start + timedelta(days=6) for b in buckets)

    obtained = [a.id for b in buckets for a in b.awards_obtained]
    assert sorted(obtained) == sorted(a.id for a in awards)
    assert len(obtained) == len(set(obtained))


def test_weekly_trends_values_and_merchants(make_award):
    """Obtained value is raw, spent value is 3x the redeemed awards"""
    buckets = weekly_trends(_mixed_collection(make_award))
    current = buckets[1]

    assert current.week_label == "09/01-09/07"
    assert len(current.awards_obtained) == 5
    assert len(current.awards_redeemed) == 2
    assert current.total_award_value == 360
    assert current.total_spent_value == 750

    supermarket = current.merchant_breakdown["超市"]
    assert (supermarket.obtained, supermarket.spent, supermarket.count) == (200, 600, 1)

    unspecified = current.merchant_breakdown[UNSPECIFIED_MERCHANT]
    assert (unspecified.obtained, unspecified.spent, unspecified.count) == (160, 150, 4)


def test_merchant_totals_across_weeks(make_award):
    totals = merchant_totals(weekly_trends(_mixed_collection(make_award)))

    assert [m.merchant for m in totals] == sorted([UNSPECIFIED_MERCHANT, "超市"])
    supermarket = next(m for m in totals if m.merchant == "超市")
    assert (supermarket.obtained, supermarket.spent, supermarket.count) == (300, 900, 2)


def test_this_week_bank_gaps(make_award):
    """A bank leaves the gap list as soon as it has an award this week"""
    awards = _mixed_collection(make_award)

    gaps = this_week_bank_gaps(awards, NOW)
    assert BOC not in gaps
    assert ICBC not in gaps
    # Only drawn last week
    assert TAI_FUNG in gaps
    assert LUSO in gaps
    assert UEPAY in gaps

    awards.append(make_award(value=10, bank=UEPAY, draw_date=MONDAY + timedelta(days=4)))
    assert UEPAY not in this_week_bank_gaps(awards, NOW)


def test_this_week_bank_gaps_ignore_unknown_banks(make_award):
    awards = [make_award(bank="Unknown", draw_date=MONDAY)]
    assert this_week_bank_gaps(awards, NOW) == list(BANKS)


def test_this_week_bank_status(make_award):
    """Status per bank with 3x consumption figures"""
    statuses = {s.bank: s for s in this_week_bank_status(_mixed_collection(make_award), NOW)}

    boc = statuses[BOC]
    assert boc.status == "pending"
    assert boc.award_amounts == [200, 100, 10]
    assert boc.total_award_value == 310
    assert boc.pending_consumption_value == 330
    assert boc.redeemed_consumption_value == 600

    assert statuses[TAI_FUNG].status == "no_awards"

    completed = this_week_bank_status([make_award(bank=BNU, redeemed=True)], NOW)
    assert next(s for s in completed if s.bank == BNU).status == "completed"


def test_build_summary(make_award):
    summary = build_summary(_mixed_collection(make_award), NOW)

    assert summary.totals.total_count == 7
    assert len(summary.value_breakdown) == len(AWARD_VALUES)
    assert summary.top_big_award_banks[0].bank == LUSO
    assert TAI_FUNG in summary.this_week_bank_gaps
