"""
Tax Profile

The six taxing-authority lines printed on a parcel's tax bill, plus the
voluntary five-item breakdown of the county line. All totals here are
parcel-level; per-unit scaling is applied by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Mapping, NamedTuple

from levy_share.core import CENT, ZERO, format_money, parse_amount


@dataclass(frozen=True)
class TaxLine:
    id: str
    label: str
    description: str
    amount: Decimal = ZERO


@dataclass(frozen=True)
class CountyItem:
    id: str
    label: str
    description: str
    amount: Decimal = ZERO


# (id, label, description) in bill order.
TAX_LINE_DEFINITIONS: tuple[tuple[str, str, str], ...] = (
    (
        "butler",
        "Butler County",
        "Countywide services (courts/jail, sheriff functions, some roads & infrastructure, "
        "human services/public health, admin).",
    ),
    ("csd", "Fairfield CSD", "School district tax line. This drives “Your City Schools Share.”"),
    (
        "city",
        "Fairfield City",
        "City services can include streets/roads, police, fire, EMS/911, parks, admin (structure varies).",
    ),
    ("jvsd", "Butler County JVSD", "Joint vocational school district (career/tech education)."),
    ("parks", "Metro Parks of Butler County", "MetroParks levy and operations (parks, trails, conservation)."),
    ("library", "Lane Public Library District", "Public library levy and operations."),
)

COUNTY_ITEM_DEFINITIONS: tuple[tuple[str, str, str], ...] = (
    ("gf", "General Fund", "General county operations and services."),
    ("dd", "Developmental Disabilities", "DDS levy and services."),
    ("mh", "Mental Health", "Mental health services and programs."),
    ("cs", "Children Services", "Children Services levy and operations."),
    ("sc", "Senior Citizens", "Senior services levy and programs."),
)

COUNTY_LINE_ID = "butler"
CSD_LINE_ID = "csd"
TAX_LINE_IDS = tuple(line_id for line_id, _, _ in TAX_LINE_DEFINITIONS)
COUNTY_ITEM_IDS = tuple(item_id for item_id, _, _ in COUNTY_ITEM_DEFINITIONS)
FIELD_IDS = TAX_LINE_IDS + COUNTY_ITEM_IDS


def default_tax_lines() -> tuple[TaxLine, ...]:
    return tuple(TaxLine(line_id, label, desc) for line_id, label, desc in TAX_LINE_DEFINITIONS)


def default_county_items() -> tuple[CountyItem, ...]:
    return tuple(CountyItem(item_id, label, desc) for item_id, label, desc in COUNTY_ITEM_DEFINITIONS)


@dataclass(frozen=True)
class TaxProfile:
    tax_lines: tuple[TaxLine, ...] = field(default_factory=default_tax_lines)
    county_items: tuple[CountyItem, ...] = field(default_factory=default_county_items)
    # The bill's own "County Total Tax" figure, if the user typed it in.
    county_total: Decimal | None = None

    @classmethod
    def from_inputs(cls, inputs: Mapping[str, Any], county_total: Any = None) -> TaxProfile:
        """Build a profile from raw field text keyed by line/item id."""
        profile = cls()
        profile = profile.with_amounts({key: inputs[key] for key in FIELD_IDS if key in inputs})
        if county_total is not None and str(county_total).strip():
            profile = replace(profile, county_total=parse_amount(county_total))
        return profile

    def with_amounts(self, amounts: Mapping[str, Any]) -> TaxProfile:
        tax_lines = tuple(
            replace(line, amount=parse_amount(amounts[line.id])) if line.id in amounts else line
            for line in self.tax_lines
        )
        county_items = tuple(
            replace(item, amount=parse_amount(amounts[item.id])) if item.id in amounts else item
            for item in self.county_items
        )
        return replace(self, tax_lines=tax_lines, county_items=county_items)

    def amounts(self) -> dict[str, Decimal]:
        values = {line.id: line.amount for line in self.tax_lines}
        values.update({item.id: item.amount for item in self.county_items})
        return values

    def line_amount(self, line_id: str) -> Decimal:
        for line in self.tax_lines:
            if line.id == line_id:
                return line.amount
        raise KeyError(line_id)

    def csd_amount(self) -> Decimal:
        return self.line_amount(CSD_LINE_ID)

    def total_tax_lines(self) -> Decimal:
        return sum((line.amount for line in self.tax_lines), ZERO)

    def total_county_items(self) -> Decimal:
        return sum((item.amount for item in self.county_items), ZERO)

    def scaled(self, factor: Decimal) -> TaxProfile:
        return replace(
            self,
            tax_lines=tuple(replace(line, amount=line.amount * factor) for line in self.tax_lines),
            county_items=tuple(replace(item, amount=item.amount * factor) for item in self.county_items),
            county_total=None if self.county_total is None else self.county_total * factor,
        )


class ReconciliationResult(NamedTuple):
    matches: bool
    notes: list[str]


def reconcile_county(profile: TaxProfile, tolerance: Decimal = CENT) -> ReconciliationResult:
    """
    Compare the county breakdown against the county figures on the bill.

    Informational only: the breakdown is a voluntary entry, so differences
    produce notes and never change any amount.
    """
    notes: list[str] = []
    items_total = profile.total_county_items()
    if items_total == ZERO:
        return ReconciliationResult(matches=True, notes=notes)

    if profile.county_total is not None:
        diff = items_total - profile.county_total
        if abs(diff) > tolerance:
            notes.append(
                f"County items total {format_money(items_total)} differs from the reported county total "
                f"{format_money(profile.county_total)} by {format_money(diff)}."
            )

    county_line = profile.line_amount(COUNTY_LINE_ID)
    if county_line != ZERO and abs(items_total - county_line) > tolerance:
        notes.append(
            f"County items total {format_money(items_total)} differs from the Butler County line "
            f"{format_money(county_line)}."
        )

    return ReconciliationResult(matches=not notes, notes=notes)


class DemoProfile(NamedTuple):
    profile: TaxProfile
    per_unit: bool
    units: str
    income: str


DEMO_PROFILES: dict[str, DemoProfile] = {
    # Single-family parcel.
    "house": DemoProfile(
        profile=TaxProfile.from_inputs(
            {
                "butler": "772.00",
                "csd": "3066.17",
                "city": "1095.69",
                "jvsd": "241.78",
                "parks": "71.33",
                "library": "54.77",
                "gf": "125.28",
                "dd": "190.19",
                "mh": "133.81",
                "cs": "142.51",
                "sc": "180.21",
            },
            county_total="772.00",
        ),
        per_unit=False,
        units="",
        income="50000",
    ),
    # 72-unit apartment parcel, shown per unit.
    "apt72": DemoProfile(
        profile=TaxProfile.from_inputs(
            {
                "butler": "12354.10",
                "csd": "56508.66",
                "city": "15912.32",
                "jvsd": "3095.70",
                "parks": "1001.80",
                "library": "941.10",
                "gf": "1603.99",
                "dd": "3626.85",
                "mh": "2010.94",
                "cs": "2417.90",
                "sc": "2694.42",
            },
            county_total="12354.10",
        ),
        per_unit=True,
        units="72",
        income="50000",
    ),
}
