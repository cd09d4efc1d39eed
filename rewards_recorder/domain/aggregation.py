"""Aggregation engine - summary statistics, bank rankings and weekly trends"""

from datetime import date, timedelta
from typing import Dict, Iterable, List, Sequence

from rewards_recorder.domain.banks import banks_for
from rewards_recorder.domain.eligibility import is_expired
from rewards_recorder.domain.models import (
    AWARD_VALUES,
    Award,
    AwardSummary,
    AwardTotals,
    BankBreakdown,
    BankRanking,
    BankWeekStatus,
    MerchantRollup,
    ValueBreakdown,
    WeeklyBucket,
)
from rewards_recorder.utils.date_utils import DateLike, to_date, week_label, week_range, week_start

CONSUMPTION_MULTIPLIER = 3  # Spend required to use an award, as a multiple of its face value
BIG_AWARD_THRESHOLD = 100
TOP_BANK_LIMIT = 3
UNSPECIFIED_MERCHANT = "未指定商戶"


def consumption_value(award_value: int) -> int:
    """Spend-equivalent MOP for an award face value"""
    return award_value * CONSUMPTION_MULTIPLIER


def compute_totals(awards: Sequence[Award], now: DateLike) -> AwardTotals:
    """
    Collection-wide totals.

    Pending is everything not redeemed (so expired awards are a subset of
    pending); raw values are never multiplied, consumption figures always are.
    """
    total_value = sum(a.value for a in awards)
    redeemed = [a for a in awards if a.redeemed]
    expired = [a for a in awards if is_expired(a, now)]

    redeemed_value = sum(a.value for a in redeemed)
    pending_value = total_value - redeemed_value
    expired_value = sum(a.value for a in expired)

    return AwardTotals(
        total_count=len(awards),
        total_value=total_value,
        redeemed_count=len(redeemed),
        redeemed_value=redeemed_value,
        pending_count=len(awards) - len(redeemed),
        pending_value=pending_value,
        expired_count=len(expired),
        expired_value=expired_value,
        redeemed_consumption_value=consumption_value(redeemed_value),
        pending_consumption_value=consumption_value(pending_value),
        expired_consumption_value=consumption_value(expired_value),
        redemption_rate=round(len(redeemed) / len(awards) * 100, 1) if awards else 0.0,
    )


def value_breakdown(awards: Sequence[Award], now: DateLike) -> List[ValueBreakdown]:
    """One row per face value in AWARD_VALUES, in ascending order"""
    rows = {value: ValueBreakdown(value=value) for value in AWARD_VALUES}

    for award in awards:
        row = rows.get(award.value)
        if row is None:
            continue
        row.total_count += 1
        row.total_value += award.value
        if award.redeemed:
            row.redeemed_count += 1
            row.redeemed_value += award.value
        else:
            row.pending_count += 1
            row.pending_value += award.value
            if is_expired(award, now):
                row.expired_count += 1
                row.expired_value += award.value

    for row in rows.values():
        row.pending_consumption_value = consumption_value(row.pending_value)
        row.expired_consumption_value = consumption_value(row.expired_value)

    return list(rows.values())


def value_distribution(awards: Iterable[Award]) -> Dict[int, int]:
    """Award count per face value (only values that occur)"""
    distribution: Dict[int, int] = {}
    for award in awards:
        distribution[award.value] = distribution.get(award.value, 0) + 1
    return distribution


def bank_distribution(awards: Iterable[Award]) -> Dict[str, int]:
    """Award count per bank name as stored, unknown banks included"""
    distribution: Dict[str, int] = {}
    for award in awards:
        distribution[award.bank] = distribution.get(award.bank, 0) + 1
    return distribution


def bank_breakdown(awards: Iterable[Award], banks: Sequence[str] | None = None) -> Dict[str, BankBreakdown]:
    """
    Per-bank statistics.

    Every bank of the fixed list gets a row (zeroed when unused). Banks not in
    the list but present in the data are appended as they are found.
    """
    banks = banks_for() if banks is None else banks
    rows: Dict[str, BankBreakdown] = {bank: BankBreakdown(bank=bank) for bank in banks}

    for award in awards:
        row = rows.setdefault(award.bank, BankBreakdown(bank=award.bank))
        row.total_awards += 1
        row.value_breakdown[award.value] = row.value_breakdown.get(award.value, 0) + 1
        row.total_value += award.value
        if award.value >= BIG_AWARD_THRESHOLD:
            row.big_awards += 1
            row.big_award_value += award.value

    for row in rows.values():
        # Avoid division by zero for banks without awards
        row.probability = row.big_awards / row.total_awards * 100 if row.total_awards > 0 else 0.0

    return rows


def top_big_award_banks(
    awards: Iterable[Award],
    banks: Sequence[str] | None = None,
    limit: int = TOP_BANK_LIMIT,
) -> List[BankRanking]:
    """
    Banks most likely to hand out big awards.

    Only banks of the fixed list with at least one award are ranked: by
    probability, then by big-award count (both descending). Equal entries keep
    catalog order.
    """
    banks = banks_for() if banks is None else banks
    breakdown = bank_breakdown(awards, banks)
    candidates = [breakdown[bank] for bank in banks if breakdown[bank].total_awards > 0]
    candidates.sort(key=lambda row: (row.probability, row.big_awards), reverse=True)

    return [
        BankRanking(
            bank=row.bank,
            probability=round(row.probability, 2),
            big_awards=row.big_awards,
            total_awards=row.total_awards,
            big_award_value=row.big_award_value,
        )
        for row in candidates[:limit]
    ]


def weekly_trends(awards: Iterable[Award]) -> List[WeeklyBucket]:
    """
    Partition awards into Monday-start weeks by draw date.

    Each award lands in exactly one bucket. Buckets come back in ascending
    week order.
    """
    buckets: Dict[date, WeeklyBucket] = {}

    for award in awards:
        start = week_start(award.draw_date)
        bucket = buckets.get(start)
        if bucket is None:
            bucket = WeeklyBucket(
                week_start=start,
                week_end=start + timedelta(days=6),
                week_label=week_label(start),
            )
            buckets[start] = bucket

        bucket.awards_obtained.append(award)
        bucket.total_award_value += award.value

        merchant = award.merchant or UNSPECIFIED_MERCHANT
        rollup = bucket.merchant_breakdown.setdefault(merchant, MerchantRollup(merchant=merchant))
        rollup.obtained += award.value
        rollup.count += 1

        if award.redeemed:
            spent = consumption_value(award.value)
            bucket.awards_redeemed.append(award)
            bucket.total_spent_value += spent
            rollup.spent += spent

    return [buckets[start] for start in sorted(buckets)]


def merchant_totals(buckets: Iterable[WeeklyBucket]) -> List[MerchantRollup]:
    """Merchant rollups summed across weeks, sorted by merchant name"""
    totals: Dict[str, MerchantRollup] = {}
    for bucket in buckets:
        for merchant, rollup in bucket.merchant_breakdown.items():
            total = totals.setdefault(merchant, MerchantRollup(merchant=merchant))
            total.obtained += rollup.obtained
            total.spent += rollup.spent
            total.count += rollup.count
    return [totals[name] for name in sorted(totals)]


def _drawn_this_week(awards: Iterable[Award], now: DateLike) -> List[Award]:
    monday, sunday = week_range(now)
    return [a for a in awards if monday.date() <= to_date(a.draw_date) <= sunday.date()]


def this_week_bank_status(
    awards: Iterable[Award],
    now: DateLike,
    banks: Sequence[str] | None = None,
) -> List[BankWeekStatus]:
    """Spending progress of each fixed-list bank for awards drawn this week"""
    banks = banks_for() if banks is None else banks
    current = _drawn_this_week(awards, now)

    statuses = []
    for bank in banks:
        bank_awards = [a for a in current if a.bank == bank]
        redeemed = [a for a in bank_awards if a.redeemed]
        pending = [a for a in bank_awards if not a.redeemed]

        if not bank_awards:
            status = "no_awards"
        elif pending:
            status = "pending"
        else:
            status = "completed"

        statuses.append(
            BankWeekStatus(
                bank=bank,
                total_awards=len(bank_awards),
                redeemed_awards=len(redeemed),
                pending_awards=len(pending),
                total_award_value=sum(a.value for a in bank_awards),
                award_amounts=[a.value for a in bank_awards],
                pending_consumption_value=consumption_value(sum(a.value for a in pending)),
                redeemed_consumption_value=consumption_value(sum(a.value for a in redeemed)),
                status=status,
            )
        )
    return statuses


def this_week_bank_gaps(
    awards: Iterable[Award],
    now: DateLike,
    banks: Sequence[str] | None = None,
) -> List[str]:
    """Fixed-list banks with no award drawn in the week containing ``now``"""
    banks = banks_for() if banks is None else banks
    seen = {a.bank for a in _drawn_this_week(awards, now)}
    return [bank for bank in banks if bank not in seen]


def build_summary(awards: Sequence[Award], now: DateLike, banks: Sequence[str] | None = None) -> AwardSummary:
    """Main entry point for the summary view"""
    banks = banks_for() if banks is None else banks
    return AwardSummary(
        totals=compute_totals(awards, now),
        value_breakdown=value_breakdown(awards, now),
        value_distribution=value_distribution(awards),
        bank_distribution=bank_distribution(awards),
        bank_breakdown=bank_breakdown(awards, banks),
        top_big_award_banks=top_big_award_banks(awards, banks),
        this_week_bank_gaps=this_week_bank_gaps(awards, now, banks),
    )
