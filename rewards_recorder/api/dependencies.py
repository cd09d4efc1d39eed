"""Dependency injection for FastAPI endpoints"""

from datetime import datetime
from typing import Tuple
from zoneinfo import ZoneInfo

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from rewards_recorder.config import settings
from rewards_recorder.domain.banks import banks_for
from rewards_recorder.domain.calendar import ExpiryPolicy, get_expiry_policy
from rewards_recorder.infrastructure.database.repositories import AwardRepository
from rewards_recorder.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_now() -> datetime:
    """Current local wall-clock time; the only place the API reads the clock"""
    return datetime.now(ZoneInfo(settings.timezone)).replace(tzinfo=None)


def get_policy() -> ExpiryPolicy:
    """Expiry policy selected in settings"""
    return get_expiry_policy(settings.expiry_policy, settings.expiry_window_days)


def get_banks() -> Tuple[str, ...]:
    """Fixed bank list of the configured catalog version"""
    return banks_for(settings.bank_catalog_version)


def get_award_repository(db: Session = Depends(get_db)) -> AwardRepository:
    """Provide award repository bound to the request's session"""
    return AwardRepository(db)
