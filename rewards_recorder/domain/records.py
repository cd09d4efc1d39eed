"""Conversion between stored JSON award records and Award objects"""

from datetime import date, datetime
from typing import Any, Dict, Optional

from rewards_recorder.domain.banks import CURRENT_CATALOG_VERSION, migrate_bank_name
from rewards_recorder.domain.models import AWARD_VALUES, Award
from rewards_recorder.utils.date_utils import parse_date, parse_datetime

REQUIRED_FIELDS = ("id", "value", "drawDate", "expiryDate", "bank")


def award_to_record(award: Award) -> Dict[str, Any]:
    """Serialize an award using the camelCase layout of the stored array"""
    record: Dict[str, Any] = {
        "id": award.id,
        "value": award.value,
        "isThankYou": award.is_thank_you,
        "bank": award.bank,
        "drawDate": award.draw_date.isoformat(),
        "expiryDate": award.expiry_date.isoformat(),
        "redeemed": award.redeemed,
    }
    if award.redeemed_date is not None:
        record["redeemedDate"] = award.redeemed_date.isoformat()
    if award.merchant:
        record["merchant"] = award.merchant
    if award.notes:
        record["notes"] = award.notes
    return record


def _as_date(raw: Any, tz: Optional[str]) -> date:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    return parse_date(str(raw), tz)


def _optional_text(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def _redeemed_flag(raw: Any) -> bool:
    if raw is None:
        return False
    if not isinstance(raw, bool):
        raise ValueError(f"redeemed must be true or false, got {raw!r}")
    return raw


def award_from_record(
    record: Dict[str, Any],
    tz: Optional[str] = None,
    catalog_version: str = CURRENT_CATALOG_VERSION,
) -> Award:
    """
    Build an Award from a stored record, applying read-time migration.

    - missing bank -> fallback bank, names from any catalog version ->
      names in ``catalog_version``
    - isThankYou is ignored and re-derived from value
    - timestamps in drawDate/expiryDate are truncated to the calendar day

    Raises:
        KeyError, ValueError, TypeError: record is missing fields, unparsable,
            or breaks the award rules (face value, expiry before draw,
            non-boolean redeemed flag)
    """
    value = record["value"]
    if isinstance(value, bool) or int(value) not in AWARD_VALUES:
        raise ValueError(f"Unsupported award value: {value!r}")

    draw_date = _as_date(record["drawDate"], tz)
    expiry_date = _as_date(record["expiryDate"], tz)
    if expiry_date < draw_date:
        raise ValueError(f"Expiry {expiry_date} is before draw date {draw_date}")

    redeemed_raw = record.get("redeemedDate")
    return Award(
        id=str(record["id"]),
        value=int(value),
        bank=migrate_bank_name(record.get("bank"), catalog_version),
        draw_date=draw_date,
        expiry_date=expiry_date,
        redeemed=_redeemed_flag(record.get("redeemed")),
        redeemed_date=parse_datetime(str(redeemed_raw)) if redeemed_raw else None,
        merchant=_optional_text(record.get("merchant")),
        notes=_optional_text(record.get("notes")),
    )


def missing_required_fields(record: Any) -> list[str]:
    """Names of import-required fields that are absent or empty"""
    if not isinstance(record, dict):
        return list(REQUIRED_FIELDS)
    missing = []
    for key in REQUIRED_FIELDS:
        raw = record.get(key)
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            missing.append(key)
    return missing
