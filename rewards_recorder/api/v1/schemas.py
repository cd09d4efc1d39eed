"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AttributeModel(BaseModel):
    """Response model populated from domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


class AwardInput(BaseModel):
    """One award as entered on the form"""

    value: int = Field(..., description="Face value in MOP (0 = thank you)")
    bank: str = Field(..., description="Issuing bank, from the active catalog")
    draw_date: Optional[date] = Field(None, description="Day the award was drawn")
    merchant: Optional[str] = None
    notes: Optional[str] = None


class CreateAwardsRequest(BaseModel):
    """Request body for POST /v1/awards"""

    awards: List[AwardInput] = Field(..., description="One to three awards submitted together")


class MerchantUpdate(BaseModel):
    """Request body for PATCH /v1/awards/{award_id}/merchant"""

    merchant: Optional[str] = None


class ImportRequest(BaseModel):
    """Request body for POST /v1/import"""

    payload: Any = Field(..., description="Export document or bare award array")
    confirm: bool = Field(False, description="Replace all stored awards with the valid records")


class AwardSchema(AttributeModel):
    """Stored award fields"""

    id: str
    value: int
    is_thank_you: bool
    bank: str
    draw_date: date
    expiry_date: date
    redeemed: bool
    redeemed_date: Optional[datetime] = None
    merchant: Optional[str] = None
    notes: Optional[str] = None


class AwardResponse(AwardSchema):
    """Award with its status at request time"""

    status: str
    days_until_expiry: int


class AwardListResponse(BaseModel):
    """Response for GET /v1/awards"""

    awards: List[AwardResponse]
    usage_window_open: bool


class CreateAwardsResponse(BaseModel):
    """Response for POST /v1/awards"""

    awards: List[AwardResponse]


class TotalsSchema(AttributeModel):
    total_count: int
    total_value: int
    redeemed_count: int
    redeemed_value: int
    pending_count: int
    pending_value: int
    expired_count: int
    expired_value: int
    redeemed_consumption_value: int
    pending_consumption_value: int
    expired_consumption_value: int
    redemption_rate: float


class ValueBreakdownSchema(AttributeModel):
    value: int
    total_count: int
    redeemed_count: int
    pending_count: int
    expired_count: int
    total_value: int
    redeemed_value: int
    pending_value: int
    expired_value: int
    pending_consumption_value: int
    expired_consumption_value: int


class BankBreakdownSchema(AttributeModel):
    bank: str
    total_awards: int
    value_breakdown: Dict[int, int]
    total_value: int
    big_awards: int
    big_award_value: int
    probability: float


class BankRankingSchema(AttributeModel):
    bank: str
    probability: float
    big_awards: int
    total_awards: int
    big_award_value: int


class SummaryResponse(AttributeModel):
    """Response for GET /v1/reports/summary"""

    totals: TotalsSchema
    value_breakdown: List[ValueBreakdownSchema]
    value_distribution: Dict[int, int]
    bank_distribution: Dict[str, int]
    bank_breakdown: Dict[str, BankBreakdownSchema]
    top_big_award_banks: List[BankRankingSchema]
    this_week_bank_gaps: List[str]


class MerchantRollupSchema(AttributeModel):
    merchant: str
    obtained: int
    spent: int
    count: int


class WeeklyBucketSchema(AttributeModel):
    week_start: date
    week_end: date
    week_label: str
    awards_obtained: List[AwardSchema]
    awards_redeemed: List[AwardSchema]
    total_award_value: int
    total_spent_value: int
    merchant_breakdown: Dict[str, MerchantRollupSchema]


class TrendResponse(BaseModel):
    """Response for GET /v1/reports/trends"""

    weeks: List[WeeklyBucketSchema]
    merchants: List[MerchantRollupSchema]


class BankWeekStatusSchema(AttributeModel):
    bank: str
    total_awards: int
    redeemed_awards: int
    pending_awards: int
    total_award_value: int
    award_amounts: List[int]
    pending_consumption_value: int
    redeemed_consumption_value: int
    status: str


class BankStatusResponse(BaseModel):
    """Response for GET /v1/reports/bank-status"""

    week_start: date
    week_end: date
    banks: List[BankWeekStatusSchema]
    gaps: List[str]
    pending_consumption_value: int
    redeemed_consumption_value: int


class DrawDateCheckResponse(BaseModel):
    """Response for GET /v1/calendar/validate"""

    draw_date: date
    is_valid: bool
    error: Optional[str] = None
    expiry_date: Optional[date] = None
    expiry_policy: str


class ImportResponse(BaseModel):
    """Response for POST /v1/import"""

    accepted: int
    rejected: int
    replaced: bool
    existing: int
