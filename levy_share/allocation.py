"""
Allocation Engine

Attributes the school-district line of a tax bill across the district's
spending categories, in proportion to each category's share of the
district's total spending for the selected year.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterator

from levy_share.core import ONE, ZERO
from levy_share.dataset import SpendingCategory, SpendingDataset, describe, year_key


@dataclass(frozen=True)
class AllocationRow:
    id: str
    name: str
    description: str
    amount: Decimal
    share: Decimal
    is_child: bool = False
    included: bool = False
    children: tuple[AllocationRow, ...] = ()


@dataclass(frozen=True)
class AllocationResult:
    year: str
    district_total: Decimal
    csd_line: Decimal
    rows: tuple[AllocationRow, ...]

    def iter_rows(self) -> Iterator[AllocationRow]:
        """Rows in display order, each parent followed by its children."""
        for row in self.rows:
            yield row
            yield from row.children

    def total_share(self) -> Decimal:
        return sum((row.share for row in self.rows), ZERO)

    def find(self, category_id: str) -> AllocationRow:
        for row in self.iter_rows():
            if row.id == category_id:
                return row
        raise KeyError(category_id)


def allocate_children(parent: SpendingCategory, year: str, parent_share: Decimal) -> tuple[AllocationRow, ...]:
    # Memo ("included") children are already inside the parent's amount.
    denom = sum((child.amount(year) for child in parent.children if not child.included), ZERO)
    safe_denom = denom if denom != ZERO else ONE

    rows = []
    for child in parent.children:
        amount = child.amount(year)
        share = ZERO if child.included else amount / safe_denom * parent_share
        rows.append(
            AllocationRow(
                id=child.id,
                name=child.display_name,
                description=describe(child),
                amount=amount,
                share=share,
                is_child=True,
                included=child.included,
            )
        )
    return tuple(rows)


def allocate(
    dataset: SpendingDataset,
    year: Any,
    csd_line_amount: Decimal,
    per_unit_factor: Decimal = ONE,
) -> AllocationResult:
    """
    Split the (per-unit scaled) school tax line across spending categories.

    A zero or negative district total is replaced by a divisor of one so the
    result is always defined. A year the dataset does not list reads like a
    year with no values: every amount is zero. Spending amounts are district
    dollars and are never scaled by the per-unit factor.
    """
    key = year_key(year)
    district_total = dataset.district_total(key)
    safe_total = district_total if district_total > ZERO else ONE
    csd_line = csd_line_amount * per_unit_factor

    rows = []
    for use in dataset.uses:
        amount = use.amount(key)
        share = amount / safe_total * csd_line
        rows.append(
            AllocationRow(
                id=use.id,
                name=use.display_name,
                description=describe(use),
                amount=amount,
                share=share,
                children=allocate_children(use, key, share) if use.children else (),
            )
        )

    return AllocationResult(year=key, district_total=district_total, csd_line=csd_line, rows=tuple(rows))
