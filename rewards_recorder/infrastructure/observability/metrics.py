"""Prometheus metrics for award activity and request latency"""

from prometheus_client import Counter, Histogram

award_change_counter = Counter(
    "rewards_award_changes_total",
    "Award mutations applied",
    ["action"],  # create | edit | merchant | toggle | delete | clear
)

award_value_counter = Counter(
    "rewards_award_value_mop_total",
    "Face value of recorded awards in MOP",
    ["bucket"],  # thank_you | small | big
)

import_record_counter = Counter(
    "rewards_import_records_total",
    "Records seen in import files",
    ["outcome"],  # accepted | rejected
)

storage_failure_counter = Counter(
    "rewards_storage_failures_total",
    "Failed reads or writes of the award store",
)

request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_award_change(action: str, count: int = 1) -> None:
    award_change_counter.labels(action=action).inc(count)


def record_award_values(values: list[int]) -> None:
    """Bucket newly recorded award values the same way the big-award ranking does"""
    for value in values:
        if value == 0:
            bucket = "thank_you"
        elif value < 100:
            bucket = "small"
        else:
            bucket = "big"
        award_value_counter.labels(bucket=bucket).inc(value)


def record_import(accepted: int, rejected: int) -> None:
    import_record_counter.labels(outcome="accepted").inc(accepted)
    import_record_counter.labels(outcome="rejected").inc(rejected)
