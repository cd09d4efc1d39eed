"""Versioned catalog of participating banks / payment providers"""

from typing import Dict, Tuple

# v1 shipped short display names; v2 switched to full registered names.
BANK_CATALOGS: Dict[str, Tuple[str, ...]] = {
    "v1": (
        "中銀",
        "工銀",
        "大豐",
        "國際",
        "大西洋",
        "澳門通",
        "螞蟻",
        "極易付",
    ),
    "v2": (
        "中國銀行股份有限公司澳門分行",
        "中國工商銀行（澳門）股份有限公司",
        "大豐銀行股份有限公司",
        "澳門國際銀行股份有限公司",
        "大西洋銀行股份有限公司",
        "澳門通股份有限公司",
        "螞蟻銀行（澳門）股份有限公司",
        "澳門極易付股份有限公司",
    ),
}

CURRENT_CATALOG_VERSION = "v2"

# Records written before the bank field existed are attributed to this bank
FALLBACK_BANK = "螞蟻銀行（澳門）股份有限公司"


def banks_for(version: str = CURRENT_CATALOG_VERSION) -> Tuple[str, ...]:
    """Return the fixed bank list for a catalog version"""
    try:
        return BANK_CATALOGS[version]
    except KeyError:
        raise ValueError(f"Unknown bank catalog version: {version}") from None


def fallback_bank(version: str = CURRENT_CATALOG_VERSION) -> str:
    """FALLBACK_BANK as it is named in the given catalog version"""
    current = BANK_CATALOGS[CURRENT_CATALOG_VERSION]
    return banks_for(version)[current.index(FALLBACK_BANK)]


def migrate_bank_name(name: str | None, version: str = CURRENT_CATALOG_VERSION) -> str:
    """
    Map a stored bank name onto the catalog of ``version``.

    Catalogs list the same banks in the same order, so a name from any
    version is translated by position. Missing names fall back to the
    fallback bank, and anything else is returned untouched so that unknown
    banks survive a round trip.
    """
    target = banks_for(version)
    if not name:
        return fallback_bank(version)
    name = name.strip()
    for catalog in BANK_CATALOGS.values():
        if name in catalog:
            return target[catalog.index(name)]
    return name
