"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional

AWARD_VALUES = (0, 10, 20, 50, 100, 200)  # MOP face values; 0 is "thank you"


@dataclass
class Award:
    """Single recorded prize / e-voucher"""

    id: str
    value: int
    bank: str
    draw_date: date
    expiry_date: date
    redeemed: bool = False
    redeemed_date: Optional[datetime] = None
    merchant: Optional[str] = None
    notes: Optional[str] = None

    @property
    def is_thank_you(self) -> bool:
        """'No prize' entries are exactly the zero-value ones"""
        return self.value == 0


@dataclass
class AwardDraft:
    """Award fields as submitted from the entry form (no id yet)"""

    value: int
    bank: str
    draw_date: Optional[date]
    expiry_date: Optional[date] = None
    merchant: Optional[str] = None
    notes: Optional[str] = None


class AwardStatus(str, Enum):
    """Display state of an award at a given instant"""

    REDEEMED = "redeemed"
    EXPIRED = "expired"
    USABLE_NOW = "usable_now"
    WAITING_FOR_USAGE_WINDOW = "waiting_for_usage_window"


@dataclass
class ValidationResult:
    """Outcome of a field-level check"""

    is_valid: bool
    error: Optional[str] = None
    code: Optional[str] = None


@dataclass
class AwardTotals:
    """Collection-wide counts and MOP sums"""

    total_count: int = 0
    total_value: int = 0
    redeemed_count: int = 0
    redeemed_value: int = 0
    pending_count: int = 0
    pending_value: int = 0
    expired_count: int = 0
    expired_value: int = 0
    redeemed_consumption_value: int = 0
    pending_consumption_value: int = 0
    expired_consumption_value: int = 0
    redemption_rate: float = 0.0


@dataclass
class ValueBreakdown:
    """Counts and sums for a single face value"""

    value: int
    total_count: int = 0
    redeemed_count: int = 0
    pending_count: int = 0
    expired_count: int = 0
    total_value: int = 0
    redeemed_value: int = 0
    pending_value: int = 0
    expired_value: int = 0
    pending_consumption_value: int = 0
    expired_consumption_value: int = 0


@dataclass
class BankBreakdown:
    """Award statistics for one bank"""

    bank: str
    total_awards: int = 0
    value_breakdown: Dict[int, int] = field(default_factory=dict)
    total_value: int = 0
    big_awards: int = 0
    big_award_value: int = 0
    probability: float = 0.0


@dataclass
class BankRanking:
    """Entry in the big-award probability ranking"""

    bank: str
    probability: float
    big_awards: int
    total_awards: int
    big_award_value: int


@dataclass
class MerchantRollup:
    """Obtained / spent MOP for a merchant"""

    merchant: str
    obtained: int = 0
    spent: int = 0
    count: int = 0


@dataclass
class WeeklyBucket:
    """Awards drawn in one Monday-Sunday week"""

    week_start: date
    week_end: date
    week_label: str
    awards_obtained: List[Award] = field(default_factory=list)
    awards_redeemed: List[Award] = field(default_factory=list)
    total_award_value: int = 0
    total_spent_value: int = 0
    merchant_breakdown: Dict[str, MerchantRollup] = field(default_factory=dict)


@dataclass
class BankWeekStatus:
    """How far one bank's awards for the current week have been spent"""

    bank: str
    total_awards: int
    redeemed_awards: int
    pending_awards: int
    total_award_value: int
    award_amounts: List[int]
    pending_consumption_value: int
    redeemed_consumption_value: int
    status: str  # "no_awards" | "pending" | "completed"


@dataclass
class AwardSummary:
    """Everything the summary view renders"""

    totals: AwardTotals
    value_breakdown: List[ValueBreakdown]
    value_distribution: Dict[int, int]
    bank_distribution: Dict[str, int]
    bank_breakdown: Dict[str, BankBreakdown]
    top_big_award_banks: List[BankRanking]
    this_week_bank_gaps: List[str]
