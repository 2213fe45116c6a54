"""
App State & Summary

`AppState` is the immutable snapshot of everything a user has entered plus
the loaded dataset. Shells build a new one on every change and pass it to
`build_summary`, which recomputes every derived figure from scratch.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any

from levy_share.allocation import AllocationResult, allocate
from levy_share.core import as_float, format_money, per_unit_factor, per_unit_status, to_cents
from levy_share.dataset import SpendingDataset, year_key
from levy_share.eit import DEFAULT_EIT_RATE, EitEstimate, estimate_eit
from levy_share.profile import CountyItem, TaxLine, TaxProfile, reconcile_county

SUMMARY_SCHEMA_VERSION = "1.0.0"
FALLBACK_YEAR = "2024"


def default_year(dataset: SpendingDataset | None) -> str:
    if dataset is None or not dataset.years:
        return FALLBACK_YEAR
    return dataset.years[-1]


@dataclass(frozen=True)
class AppState:
    dataset: SpendingDataset | None = None
    year: str = FALLBACK_YEAR
    profile: TaxProfile = field(default_factory=TaxProfile)
    per_unit: bool = False
    units: str = ""
    income: str = ""
    eit_rate: Decimal = DEFAULT_EIT_RATE

    @classmethod
    def for_dataset(cls, dataset: SpendingDataset | None, **kwargs: Any) -> AppState:
        return cls(dataset=dataset, year=default_year(dataset), **kwargs)

    def with_year(self, year: Any) -> AppState:
        return replace(self, year=year_key(year))

    def with_profile(self, profile: TaxProfile) -> AppState:
        return replace(self, profile=profile)

    def cleared(self) -> AppState:
        return replace(self, profile=TaxProfile(), per_unit=False, units="", income="")


@dataclass(frozen=True)
class Summary:
    factor: Decimal
    per_unit_status: str
    tax_lines: tuple[TaxLine, ...]
    county_items: tuple[CountyItem, ...]
    total_property_tax: Decimal
    county_portion_total: Decimal
    csd_line: Decimal
    allocation: AllocationResult | None
    eit: EitEstimate
    county_notes: list[str]


def build_summary(state: AppState) -> Summary:
    factor = per_unit_factor(state.per_unit, state.units)
    profile = state.profile
    scaled = profile.scaled(factor)

    allocation = None
    if state.dataset is not None:
        allocation = allocate(state.dataset, state.year, profile.csd_amount(), factor)

    return Summary(
        factor=factor,
        per_unit_status=per_unit_status(state.per_unit, state.units),
        tax_lines=scaled.tax_lines,
        county_items=scaled.county_items,
        total_property_tax=profile.total_tax_lines() * factor,
        county_portion_total=profile.total_county_items() * factor,
        csd_line=profile.csd_amount() * factor,
        allocation=allocation,
        eit=estimate_eit(state.income, state.eit_rate),
        county_notes=reconcile_county(profile).notes,
    )


def summary_to_dict(summary: Summary) -> dict[str, Any]:
    allocation: dict[str, Any] | None = None
    if summary.allocation is not None:
        result = summary.allocation
        allocation = {
            "year": result.year,
            "district_total_cents": to_cents(result.district_total),
            "csd_line_cents": to_cents(result.csd_line),
            "categories": [
                {
                    "id": row.id,
                    "name": row.name,
                    "amount_cents": to_cents(row.amount),
                    "share": as_float(row.share),
                    "children": [
                        {
                            "id": child.id,
                            "name": child.name,
                            "amount_cents": to_cents(child.amount),
                            "share": as_float(child.share),
                            "included": child.included,
                        }
                        for child in row.children
                    ],
                }
                for row in result.rows
            ],
        }

    return {
        "schema_version": SUMMARY_SCHEMA_VERSION,
        # 1/N is not representable in cents; keep full precision here.
        "per_unit_factor": float(summary.factor),
        "per_unit_status": summary.per_unit_status,
        "tax_lines": {line.id: as_float(line.amount) for line in summary.tax_lines},
        "county_items": {item.id: as_float(item.amount) for item in summary.county_items},
        "total_property_tax": as_float(summary.total_property_tax),
        "county_portion_total": as_float(summary.county_portion_total),
        "allocation": allocation,
        "eit": {"yearly": as_float(summary.eit.yearly), "monthly": as_float(summary.eit.monthly)},
        "county_notes": list(summary.county_notes),
    }


def summary_to_markdown(summary: Summary) -> str:
    lines: list[str] = []
    lines.append("# Property Tax Breakdown")
    lines.append("")
    lines.append(f"- {summary.per_unit_status}")
    lines.append(f"- Total property tax: {format_money(summary.total_property_tax)}")
    lines.append(f"- County portion total: {format_money(summary.county_portion_total)}")
    lines.append("")

    lines.append("## Tax Distribution")
    lines.append("| Authority | Amount |")
    lines.append("| :--- | ---: |")
    for line in summary.tax_lines:
        lines.append(f"| {line.label} | {format_money(line.amount)} |")
    lines.append("")

    lines.append("### County Portion Only")
    lines.append("| Item | Amount |")
    lines.append("| :--- | ---: |")
    for item in summary.county_items:
        lines.append(f"| {item.label} | {format_money(item.amount)} |")
    for note in summary.county_notes:
        lines.append(f"- Note: {note}")
    lines.append("")

    if summary.allocation is not None:
        result = summary.allocation
        lines.append(f"## School District Spending ({result.year})")
        lines.append(f"- District spending total: {format_money(result.district_total)}")
        lines.append(f"- Your city schools share: {format_money(result.csd_line)}")
        lines.append("")
        lines.append("| Category | District Amount | Your Share |")
        lines.append("| :--- | ---: | ---: |")
        for row in result.iter_rows():
            name = f"↳ {row.name}" if row.is_child else row.name
            if row.included:
                name += " (included)"
            lines.append(f"| {name} | {format_money(row.amount)} | {format_money(row.share)} |")
        lines.append("")

    lines.append("## Earned Income Tax Estimate")
    lines.append(f"- Yearly: {format_money(summary.eit.yearly)}")
    lines.append(f"- Monthly: {format_money(summary.eit.monthly)}")

    return "\n".join(lines) + "\n"
