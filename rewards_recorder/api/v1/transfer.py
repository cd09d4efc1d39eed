"""/v1/export and /v1/import - whole-collection backup and restore"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request

from rewards_recorder.api.dependencies import get_award_repository, get_now, get_request_id
from rewards_recorder.api.v1.schemas import ImportRequest, ImportResponse
from rewards_recorder.config import settings
from rewards_recorder.domain.exceptions import MalformedImport, StorageError
from rewards_recorder.domain.transfer import build_export, parse_import
from rewards_recorder.infrastructure.database.repositories import AwardRepository
from rewards_recorder.infrastructure.observability.logging import log_import
from rewards_recorder.infrastructure.observability.metrics import record_import, storage_failure_counter

router = APIRouter()


@router.get("/export")
def export_awards(
    request: Request,
    repo: AwardRepository = Depends(get_award_repository),
    now: datetime = Depends(get_now),
):
    """Download every award as an export document"""
    try:
        awards = repo.list()
    except StorageError as e:
        storage_failure_counter.inc()
        logging.error(f"Storage error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Award storage unavailable")

    return build_export(awards, now, settings.app_name, settings.export_version)


@router.post("/import", response_model=ImportResponse)
def import_awards(
    request_body: ImportRequest,
    request: Request,
    repo: AwardRepository = Depends(get_award_repository),
):
    """
    Validate an import file and, once confirmed, replace every stored award.

    Without ``confirm`` the call only reports how many records would be kept,
    so the caller can ask the user before existing data is discarded.
    """
    request_id = get_request_id(request)
    try:
        result = parse_import(request_body.payload, settings.timezone, settings.bank_catalog_version)
    except MalformedImport as e:
        logging.warning(f"Import rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    try:
        existing = len(repo.list())
        if request_body.confirm:
            repo.replace_all(result.awards)
    except StorageError as e:
        storage_failure_counter.inc()
        logging.error(f"Storage error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Award storage unavailable, nothing was changed")

    if request_body.confirm:
        record_import(result.accepted, result.rejected)
    log_import(request_id, result.accepted, result.rejected, request_body.confirm)

    return ImportResponse(
        accepted=result.accepted,
        rejected=result.rejected,
        replaced=request_body.confirm,
        existing=existing,
    )
