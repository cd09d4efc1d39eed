"""/v1/awards - record, edit, redeem and delete awards"""

import logging
from datetime import datetime
from typing import List, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from rewards_recorder.api.dependencies import (
    get_award_repository,
    get_banks,
    get_now,
    get_policy,
    get_request_id,
)
from rewards_recorder.api.v1.schemas import (
    AwardInput,
    AwardListResponse,
    AwardResponse,
    AwardSchema,
    CreateAwardsRequest,
    CreateAwardsResponse,
    MerchantUpdate,
)
from rewards_recorder.config import settings
from rewards_recorder.domain.calendar import ExpiryPolicy
from rewards_recorder.domain.eligibility import days_until_expiry, status_of, usage_window_open
from rewards_recorder.domain.entry import edit_changes, prepare_awards, toggle_redeemed_changes
from rewards_recorder.domain.exceptions import AwardValidationError, RedemptionBlocked, StorageError
from rewards_recorder.domain.models import Award, AwardDraft
from rewards_recorder.infrastructure.database.repositories import AwardRepository
from rewards_recorder.infrastructure.observability.logging import log_award_change
from rewards_recorder.infrastructure.observability.metrics import (
    record_award_change,
    record_award_values,
    storage_failure_counter,
)

router = APIRouter()


def to_response(award: Award, now: datetime, policy: ExpiryPolicy) -> AwardResponse:
    """Attach the status computed at ``now``"""
    return AwardResponse(
        **AwardSchema.model_validate(award).model_dump(),
        status=status_of(award, now, policy).value,
        days_until_expiry=days_until_expiry(award, now),
    )


def _to_draft(item: AwardInput) -> AwardDraft:
    return AwardDraft(
        value=item.value,
        bank=item.bank,
        draw_date=item.draw_date,
        merchant=item.merchant,
        notes=item.notes,
    )


def _storage_unavailable(e: StorageError, request_id: str) -> HTTPException:
    storage_failure_counter.inc()
    logging.error(f"Storage error: {e}", extra={"request_id": request_id})
    return HTTPException(status_code=503, detail="Award storage unavailable, nothing was changed")


@router.get("/awards", response_model=AwardListResponse)
def list_awards(
    repo: AwardRepository = Depends(get_award_repository),
    now: datetime = Depends(get_now),
    policy: ExpiryPolicy = Depends(get_policy),
    request_id: str = Depends(get_request_id),
):
    """All awards with their current status"""
    try:
        awards = repo.list()
    except StorageError as e:
        raise _storage_unavailable(e, request_id)

    return AwardListResponse(
        awards=[to_response(a, now, policy) for a in awards],
        usage_window_open=usage_window_open(now, policy),
    )


@router.post("/awards", response_model=CreateAwardsResponse, status_code=201)
def create_awards(
    request_body: CreateAwardsRequest,
    request: Request,
    repo: AwardRepository = Depends(get_award_repository),
    now: datetime = Depends(get_now),
    policy: ExpiryPolicy = Depends(get_policy),
    banks: Tuple[str, ...] = Depends(get_banks),
):
    """
    Record one to three awards from a single form submission.

    Flow:
    1. Validate every draft (value set, bank catalog, draw date)
    2. Derive expiry dates from the configured policy
    3. Persist the batch in one write
    """
    request_id = get_request_id(request)
    try:
        drafts = prepare_awards(
            [_to_draft(item) for item in request_body.awards],
            policy=policy,
            today=now,
            reject_past=settings.reject_past_draw_dates,
            banks=banks,
        )
    except AwardValidationError as e:
        logging.info(f"Award form rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail={"errors": e.errors})

    try:
        created = repo.create_many(drafts, now)
    except StorageError as e:
        raise _storage_unavailable(e, request_id)

    record_award_change("create", len(created))
    record_award_values([a.value for a in created])
    log_award_change(request_id, "create", [a.id for a in created])

    return CreateAwardsResponse(awards=[to_response(a, now, policy) for a in created])


@router.put("/awards/{award_id}", response_model=AwardResponse)
def edit_award(
    award_id: str,
    request_body: AwardInput,
    request: Request,
    repo: AwardRepository = Depends(get_award_repository),
    now: datetime = Depends(get_now),
    policy: ExpiryPolicy = Depends(get_policy),
    banks: Tuple[str, ...] = Depends(get_banks),
):
    """Full edit; expiry is re-derived from the new draw date"""
    request_id = get_request_id(request)
    try:
        (draft,) = prepare_awards(
            [_to_draft(request_body)],
            policy=policy,
            today=now,
            reject_past=settings.reject_past_draw_dates,
            banks=banks,
        )
    except AwardValidationError as e:
        raise HTTPException(status_code=422, detail={"errors": e.errors})

    try:
        award = repo.update(award_id, **edit_changes(draft))
    except StorageError as e:
        raise _storage_unavailable(e, request_id)

    if award is None:
        raise HTTPException(status_code=404, detail="Award not found")

    record_award_change("edit")
    log_award_change(request_id, "edit", [award.id])
    return to_response(award, now, policy)


@router.patch("/awards/{award_id}/merchant", response_model=AwardResponse)
def update_merchant(
    award_id: str,
    request_body: MerchantUpdate,
    request: Request,
    repo: AwardRepository = Depends(get_award_repository),
    now: datetime = Depends(get_now),
    policy: ExpiryPolicy = Depends(get_policy),
):
    """Set or clear the merchant an award was spent at"""
    request_id = get_request_id(request)
    merchant = (request_body.merchant or "").strip() or None
    try:
        award = repo.update(award_id, merchant=merchant)
    except StorageError as e:
        raise _storage_unavailable(e, request_id)

    if award is None:
        raise HTTPException(status_code=404, detail="Award not found")

    record_award_change("merchant")
    log_award_change(request_id, "merchant", [award.id])
    return to_response(award, now, policy)


@router.post("/awards/{award_id}/toggle-redeemed", response_model=AwardResponse)
def toggle_redeemed(
    award_id: str,
    request: Request,
    repo: AwardRepository = Depends(get_award_repository),
    now: datetime = Depends(get_now),
    policy: ExpiryPolicy = Depends(get_policy),
):
    """Flip the redeemed flag; expired awards cannot be redeemed"""
    request_id = get_request_id(request)
    try:
        award = repo.get(award_id)
        if award is None:
            raise HTTPException(status_code=404, detail="Award not found")

        try:
            changes = toggle_redeemed_changes(award, now)
        except RedemptionBlocked as e:
            raise HTTPException(status_code=409, detail=str(e))

        award = repo.update(award_id, **changes)
    except StorageError as e:
        raise _storage_unavailable(e, request_id)

    record_award_change("toggle")
    log_award_change(request_id, "toggle", [award_id])
    return to_response(award, now, policy)


@router.delete("/awards/{award_id}")
def delete_award(
    award_id: str,
    request: Request,
    repo: AwardRepository = Depends(get_award_repository),
):
    """Delete a single award"""
    request_id = get_request_id(request)
    try:
        deleted = repo.delete(award_id)
    except StorageError as e:
        raise _storage_unavailable(e, request_id)

    if not deleted:
        raise HTTPException(status_code=404, detail="Award not found")

    record_award_change("delete")
    log_award_change(request_id, "delete", [award_id])
    return {"deleted": award_id}


@router.delete("/awards")
def clear_awards(
    request: Request,
    confirm: bool = Query(False, description="Must be true to discard every award"),
    repo: AwardRepository = Depends(get_award_repository),
):
    """Discard the whole collection (requires explicit confirmation)"""
    request_id = get_request_id(request)
    if not confirm:
        raise HTTPException(status_code=400, detail="Pass confirm=true to delete all awards")

    try:
        removed: List[Award] = repo.list()
        repo.clear()
    except StorageError as e:
        raise _storage_unavailable(e, request_id)

    record_award_change("clear", len(removed))
    log_award_change(request_id, "clear", [a.id for a in removed])
    return {"deleted": len(removed)}
