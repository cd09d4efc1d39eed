"""Award entry - form validation, batch preparation and update payloads"""

import random
import string
import time
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from rewards_recorder.domain.banks import banks_for
from rewards_recorder.domain.calendar import DEFAULT_POLICY, ExpiryPolicy, expiry_from_draw_date, validate_draw_date
from rewards_recorder.domain.eligibility import can_toggle_redeemed
from rewards_recorder.domain.exceptions import AwardValidationError, RedemptionBlocked
from rewards_recorder.domain.models import AWARD_VALUES, Award, AwardDraft
from rewards_recorder.utils.date_utils import DateLike

MAX_BATCH_SIZE = 3

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(number: int) -> str:
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits)) or "0"


def generate_award_id(now: Optional[datetime] = None) -> str:
    """Millisecond timestamp in base 36 followed by a random suffix"""
    millis = int((now.timestamp() if now else time.time()) * 1000)
    suffix = "".join(random.choices(_BASE36, k=9))
    return _to_base36(millis) + suffix


def validate_award_form(
    draft: AwardDraft,
    today: Optional[DateLike] = None,
    reject_past: bool = False,
    banks: Sequence[str] | None = None,
) -> Dict[str, str]:
    """Return field name -> message for every invalid field (empty when valid)"""
    banks = banks_for() if banks is None else banks
    errors: Dict[str, str] = {}

    if draft.value not in AWARD_VALUES:
        allowed = ", ".join(str(v) for v in AWARD_VALUES)
        errors["value"] = f"Award value must be one of {allowed} MOP"

    if not draft.bank or draft.bank not in banks:
        errors["bank"] = "Please choose a participating bank"

    if draft.draw_date is None:
        errors["draw_date"] = "Draw date is required"
    else:
        result = validate_draw_date(draft.draw_date, today=today, reject_past=reject_past)
        if not result.is_valid:
            errors["draw_date"] = result.error or "Invalid draw date"

    return errors


def _clean_text(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    return text.strip() or None


def prepare_awards(
    drafts: Sequence[AwardDraft],
    policy: ExpiryPolicy = DEFAULT_POLICY,
    today: Optional[DateLike] = None,
    reject_past: bool = False,
    banks: Sequence[str] | None = None,
) -> List[AwardDraft]:
    """
    Validate a form submission of one to MAX_BATCH_SIZE awards.

    Returns drafts with expiry dates derived from the policy and text fields
    trimmed.

    Raises:
        AwardValidationError: with errors keyed "<index>.<field>"
    """
    if not drafts:
        raise AwardValidationError({"awards": "At least one award is required"})
    if len(drafts) > MAX_BATCH_SIZE:
        raise AwardValidationError({"awards": f"At most {MAX_BATCH_SIZE} awards can be added at once"})

    errors: Dict[str, str] = {}
    for index, draft in enumerate(drafts):
        for field_name, message in validate_award_form(draft, today, reject_past, banks).items():
            errors[f"{index}.{field_name}"] = message
    if errors:
        raise AwardValidationError(errors)

    return [
        replace(
            draft,
            expiry_date=expiry_from_draw_date(draft.draw_date, policy),
            merchant=_clean_text(draft.merchant),
            notes=_clean_text(draft.notes),
        )
        for draft in drafts
    ]


def toggle_redeemed_changes(award: Award, now: datetime) -> Dict[str, Any]:
    """
    Field updates for flipping an award's redeemed flag.

    Raises:
        RedemptionBlocked: the award has already expired
    """
    if not can_toggle_redeemed(award, now):
        raise RedemptionBlocked(f"Award {award.id} expired on {award.expiry_date.isoformat()}")
    if award.redeemed:
        return {"redeemed": False, "redeemed_date": None}
    return {"redeemed": True, "redeemed_date": now}


def edit_changes(draft: AwardDraft) -> Dict[str, Any]:
    """Field updates for a full edit of an already validated draft"""
    return {
        "value": draft.value,
        "bank": draft.bank,
        "draw_date": draft.draw_date,
        "expiry_date": draft.expiry_date,
        "merchant": draft.merchant,
        "notes": draft.notes,
    }
