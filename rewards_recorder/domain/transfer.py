"""Bulk import / export of the whole award collection"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from rewards_recorder.domain.banks import CURRENT_CATALOG_VERSION
from rewards_recorder.domain.exceptions import MalformedImport
from rewards_recorder.domain.models import Award
from rewards_recorder.domain.records import award_from_record, award_to_record, missing_required_fields


@dataclass
class ImportResult:
    """Validated subset of an import file"""

    awards: List[Award] = field(default_factory=list)
    rejected: int = 0

    @property
    def accepted(self) -> int:
        return len(self.awards)


def build_export(
    awards: Iterable[Award],
    exported_at: datetime,
    app_name: str,
    version: str,
) -> Dict[str, Any]:
    """Export document: every award record plus file metadata"""
    return {
        "awards": [award_to_record(a) for a in awards],
        "exportDate": exported_at.isoformat(),
        "version": version,
        "appName": app_name,
    }


def _extract_records(payload: Union[str, bytes, Dict[str, Any], List[Any]]) -> List[Any]:
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as e:
            raise MalformedImport("Import file is not valid JSON") from e

    if isinstance(payload, dict):
        payload = payload.get("awards")
    if not isinstance(payload, list):
        raise MalformedImport("Import file does not contain an award list")
    return payload


def parse_import(
    payload: Union[str, bytes, Dict[str, Any], List[Any]],
    tz: Optional[str] = None,
    catalog_version: str = CURRENT_CATALOG_VERSION,
) -> ImportResult:
    """
    Validate an export document (or a bare award array).

    Records missing id, value, drawDate, expiryDate or bank, records that do
    not parse or break the award rules, and repeated ids are dropped and counted as rejected.

    Raises:
        MalformedImport: nothing usable was found
    """
    result = ImportResult()
    seen_ids = set()

    for record in _extract_records(payload):
        if missing_required_fields(record):
            result.rejected += 1
            continue
        try:
            award = award_from_record(record, tz, catalog_version)
        except (KeyError, ValueError, TypeError):
            result.rejected += 1
            continue
        if award.id in seen_ids:
            result.rejected += 1
            continue

        seen_ids.add(award.id)
        result.awards.append(award)

    if not result.awards:
        raise MalformedImport("No valid award records found in import file")

    return result
