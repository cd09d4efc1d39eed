"""GET /v1/calendar/validate - check a draw date before submitting the form"""

from datetime import date, datetime

from fastapi import APIRouter, Depends, Query

from rewards_recorder.api.dependencies import get_now, get_policy
from rewards_recorder.api.v1.schemas import DrawDateCheckResponse
from rewards_recorder.config import settings
from rewards_recorder.domain.calendar import ExpiryPolicy, expiry_from_draw_date, validate_draw_date

router = APIRouter()


@router.get("/calendar/validate", response_model=DrawDateCheckResponse)
def check_draw_date(
    draw_date: date = Query(..., description="Candidate draw date (YYYY-MM-DD)"),
    now: datetime = Depends(get_now),
    policy: ExpiryPolicy = Depends(get_policy),
):
    """Validation result and the expiry date the award would get"""
    result = validate_draw_date(draw_date, today=now, reject_past=settings.reject_past_draw_dates)
    return DrawDateCheckResponse(
        draw_date=draw_date,
        is_valid=result.is_valid,
        error=result.error,
        expiry_date=expiry_from_draw_date(draw_date, policy) if result.is_valid else None,
        expiry_policy=policy.name,
    )
