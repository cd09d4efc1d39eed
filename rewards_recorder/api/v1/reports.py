"""/v1/reports - summary statistics, weekly trends and this-week bank status"""

import logging
from datetime import datetime
from typing import Tuple

from fastapi import APIRouter, Depends, HTTPException

from rewards_recorder.api.dependencies import get_award_repository, get_banks, get_now, get_request_id
from rewards_recorder.api.v1.schemas import BankStatusResponse, SummaryResponse, TrendResponse
from rewards_recorder.domain.aggregation import (
    build_summary,
    merchant_totals,
    this_week_bank_gaps,
    this_week_bank_status,
    weekly_trends,
)
from rewards_recorder.domain.exceptions import StorageError
from rewards_recorder.infrastructure.database.repositories import AwardRepository
from rewards_recorder.infrastructure.observability.metrics import storage_failure_counter
from rewards_recorder.utils.date_utils import week_range

router = APIRouter()


def _load_awards(repo: AwardRepository, request_id: str):
    try:
        return repo.list()
    except StorageError as e:
        storage_failure_counter.inc()
        logging.error(f"Storage error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Award storage unavailable")


@router.get("/reports/summary", response_model=SummaryResponse)
def get_summary(
    repo: AwardRepository = Depends(get_award_repository),
    now: datetime = Depends(get_now),
    banks: Tuple[str, ...] = Depends(get_banks),
    request_id: str = Depends(get_request_id),
):
    """
    Totals, value and bank breakdowns, big-award ranking and this week's gaps.

    Recomputed from the full collection on every call.
    """
    awards = _load_awards(repo, request_id)
    return SummaryResponse.model_validate(build_summary(awards, now, banks))


@router.get("/reports/trends", response_model=TrendResponse)
def get_trends(
    repo: AwardRepository = Depends(get_award_repository),
    request_id: str = Depends(get_request_id),
):
    """Weekly buckets by draw date plus merchant totals across all weeks"""
    buckets = weekly_trends(_load_awards(repo, request_id))
    return TrendResponse.model_validate(
        {"weeks": buckets, "merchants": merchant_totals(buckets)}, from_attributes=True
    )


@router.get("/reports/bank-status", response_model=BankStatusResponse)
def get_bank_status(
    repo: AwardRepository = Depends(get_award_repository),
    now: datetime = Depends(get_now),
    banks: Tuple[str, ...] = Depends(get_banks),
    request_id: str = Depends(get_request_id),
):
    """Per-bank spending progress for awards drawn this week"""
    awards = _load_awards(repo, request_id)
    statuses = this_week_bank_status(awards, now, banks)
    monday, sunday = week_range(now)

    return BankStatusResponse.model_validate(
        {
            "week_start": monday.date(),
            "week_end": sunday.date(),
            "banks": statuses,
            "gaps": this_week_bank_gaps(awards, now, banks),
            "pending_consumption_value": sum(s.pending_consumption_value for s in statuses),
            "redeemed_consumption_value": sum(s.redeemed_consumption_value for s in statuses),
        },
        from_attributes=True,
    )
