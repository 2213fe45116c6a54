"""
Address Auto-fill

Queries the remote Butler County tax lookup service for an address and maps
the returned tax distribution onto the eleven tax profile fields.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Any, NamedTuple

import requests

from levy_share.core import ZERO, parse_amount
from levy_share.profile import TaxProfile

logger = logging.getLogger(__name__)

# Field id -> authority names as the service spells them (matched case-insensitively).
DISTRIBUTION_ALIASES: dict[str, tuple[str, ...]] = {
    "butler": ("Butler County",),
    "csd": ("Fairfield Csd", "Fairfield CSD"),
    "city": ("Fairfield City",),
    "jvsd": ("Butler County Jvsd", "Butler County JVSD"),
    "parks": ("Metro Parks Of Butler County", "Metro Parks of Butler County"),
    "library": ("Lane Public Library District",),
}

COUNTY_PORTION_ALIASES: dict[str, tuple[str, ...]] = {
    "gf": ("General Fund",),
    "dd": ("Developmental Disabilities",),
    "mh": ("Mental Health",),
    "cs": ("Children Services",),
    "sc": ("Senior Citizens",),
}

COUNTY_TOTAL_AUTHORITY = "County Total Tax"


class TaxLookupError(Exception):
    """Raised when the auto-fill lookup fails; the caller's fields stay untouched."""

    pass


class LookupResult(NamedTuple):
    amounts: dict[str, Decimal]
    county_total: Decimal | None
    pin: str | None


def authority_map(rows: Any) -> dict[str, Any]:
    if not isinstance(rows, list):
        return {}
    mapped: dict[str, Any] = {}
    for row in rows:
        if not isinstance(row, dict):
            continue
        name = str(row.get("authority") or "").strip().lower()
        if name:
            mapped[name] = row.get("amount")
    return mapped


def pick_amount(mapped: dict[str, Any], aliases: tuple[str, ...]) -> Decimal:
    for alias in aliases:
        value = mapped.get(alias.lower())
        if value:
            return parse_amount(value)
    return ZERO


def parse_lookup_response(payload: Any) -> LookupResult:
    """
    Map a successful lookup payload onto profile field ids.

    Authorities missing from the response map to zero, so applying the
    result replaces all eleven fields.

    Raises:
        TaxLookupError: If the payload is not a successful lookup response.
    """
    if not isinstance(payload, dict) or payload.get("ok") is not True:
        error = payload.get("error") if isinstance(payload, dict) else None
        message = str(error or "Malformed lookup response")
        logger.warning(f"Tax lookup response rejected: {message}")
        raise TaxLookupError(message)

    taxes = payload.get("taxes") or {}
    if not isinstance(taxes, dict):
        logger.warning("Tax lookup response rejected: `taxes` is not an object")
        raise TaxLookupError("Malformed lookup response: `taxes` is not an object")

    distribution = authority_map(taxes.get("distribution"))
    county = authority_map(taxes.get("countyPortionOnly"))

    amounts = {field_id: pick_amount(distribution, aliases) for field_id, aliases in DISTRIBUTION_ALIASES.items()}
    amounts.update({field_id: pick_amount(county, aliases) for field_id, aliases in COUNTY_PORTION_ALIASES.items()})

    raw_total = county.get(COUNTY_TOTAL_AUTHORITY.lower())
    county_total = parse_amount(raw_total) if raw_total else None

    picked = payload.get("picked") or {}
    pin = picked.get("PIN") if isinstance(picked, dict) else None

    return LookupResult(amounts=amounts, county_total=county_total, pin=str(pin) if pin else None)


def lookup_address(address: str, url: str, timeout: float = 10.0) -> LookupResult:
    """
    Look up the tax distribution for an address.

    Raises:
        TaxLookupError: On an empty address, transport failure, non-2xx
            status, undecodable body, or an unsuccessful response.
    """
    address = (address or "").strip()
    if not address:
        raise TaxLookupError("Enter an address first.")

    try:
        response = requests.get(url, params={"address": address}, timeout=timeout)
    except requests.RequestException as e:
        logger.warning(f"Tax lookup request failed for {address!r}: {e}")
        raise TaxLookupError(str(e)) from e

    try:
        payload = response.json()
    except ValueError:
        payload = None

    if not response.ok or not isinstance(payload, dict) or payload.get("ok") is not True:
        error = payload.get("error") if isinstance(payload, dict) else None
        message = str(error or f"HTTP {response.status_code}")
        logger.warning(f"Tax lookup failed for {address!r}: {message}")
        raise TaxLookupError(message)

    return parse_lookup_response(payload)


def apply_lookup(profile: TaxProfile, result: LookupResult) -> TaxProfile:
    updated = profile.with_amounts(result.amounts)
    if result.county_total is not None:
        return replace(updated, county_total=result.county_total)
    return updated


def lookup_status(result: LookupResult) -> str:
    pin = f" (PIN {result.pin})" if result.pin else ""
    return f"Auto-fill complete{pin}. You can edit any box below."
