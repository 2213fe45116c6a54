"""
Spending Dataset

Loads the year-keyed school district spending tree from a static JSON
document. Candidate locations are tried in order; the first one that
retrieves, decodes and passes the `spending_dataset` contract wins.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, Mapping

import requests

from levy_share.core import ZERO, parse_amount
from levy_share.utils.contracts import ContractError, validate_payload

logger = logging.getLogger(__name__)

BUNDLED_DATASET_PATH = Path(__file__).parent / "data" / "fairfield.json"

CATEGORY_DESCRIPTIONS: dict[str, str] = {
    "instruction": "Direct classroom instruction and teaching-related costs.",
    "instruction_regular": "General K–12 classroom instruction (non-special education).",
    "instruction_special": "Special education instruction and required services.",
    "instruction_other": "Other instructional costs not classified elsewhere.",
    "instruction_benefits": "District-paid health insurance and benefits already included.",
    "instruction_strs": "STRS employer retirement contributions for certified teachers.",
    "instruction_sers": "SERS employer retirement contributions for non-teaching staff.",
    "support": "Administrative, counseling, health, library, IT, finance, and central office services.",
    "operations": "Building utilities, custodial services, maintenance, repairs, and grounds.",
    "transportation": "Busing, fleet operations, routing, fuel, and transportation support.",
    "food": "School meal programs, cafeteria staff, food purchases, and kitchen operations.",
    "extracurricular": "Athletics, clubs, activities, and extracurricular programs.",
    "interest": "Interest and financing costs on bonds and long-term district debt.",
}


class DatasetLoadError(Exception):
    """Raised when no candidate location yields a usable spending dataset."""

    pass


class UnknownYearError(KeyError):
    """Raised when a year is requested that the dataset does not list."""

    pass


def year_key(year: Any) -> str:
    return str(year).strip()


@dataclass(frozen=True)
class SpendingCategory:
    id: str
    name: str
    description: str | None = None
    values: Mapping[str, Decimal] = field(default_factory=dict)
    children: tuple[SpendingCategory, ...] = ()
    included: bool = False

    def amount(self, year: Any) -> Decimal:
        """Dollars for the given year; a year without a value reads as zero."""
        return self.values.get(year_key(year), ZERO)

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass(frozen=True)
class SpendingDataset:
    years: tuple[str, ...]
    uses: tuple[SpendingCategory, ...]
    district: str | None = None

    def has_year(self, year: Any) -> bool:
        return year_key(year) in self.years

    def require_year(self, year: Any) -> str:
        key = year_key(year)
        if key not in self.years:
            raise UnknownYearError(f"Year {key} not in dataset years {list(self.years)}")
        return key

    def district_total(self, year: Any) -> Decimal:
        return sum((use.amount(year) for use in self.uses), ZERO)


def describe(category: SpendingCategory) -> str:
    """Description text for a category: dataset first, static table second."""
    if category.description:
        return category.description
    return CATEGORY_DESCRIPTIONS.get(category.id, "")


def parse_values(raw: Mapping[str, Any] | None) -> dict[str, Decimal]:
    if not raw:
        return {}
    return {year_key(key): parse_amount(value) for key, value in raw.items() if value is not None}


def parse_category(raw: Mapping[str, Any], is_child: bool = False) -> SpendingCategory:
    children: tuple[SpendingCategory, ...] = ()
    if not is_child:
        children = tuple(parse_category(child, is_child=True) for child in raw.get("children") or [])
    return SpendingCategory(
        id=str(raw["id"]),
        name=str(raw.get("name") or raw["id"]),
        description=raw.get("desc") or None,
        values=parse_values(raw.get("values")),
        children=children,
        included=bool(raw.get("included", False)) if is_child else False,
    )


def parse_dataset(payload: Any) -> SpendingDataset:
    """
    Validate a decoded dataset document and convert it to frozen types.

    Raises:
        ContractError: If the document violates the `spending_dataset` schema.
    """
    validate_payload(payload, "spending_dataset", mode="STRICT")
    return SpendingDataset(
        years=tuple(year_key(year) for year in payload["years"]),
        uses=tuple(parse_category(use) for use in payload["uses"]),
        district=payload.get("district"),
    )


def read_candidate(candidate: str | Path, timeout: float = 10.0) -> Any:
    text = str(candidate)
    if text.startswith(("http://", "https://")):
        response = requests.get(text, timeout=timeout, headers={"Cache-Control": "no-store"})
        if not response.ok:
            raise DatasetLoadError(f"{text} HTTP {response.status_code}")
        return response.json()

    path = Path(candidate).expanduser()
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def load_dataset(candidates: Iterable[str | Path], timeout: float = 10.0) -> SpendingDataset:
    """
    Load the spending dataset from the first candidate that works.

    Each candidate gets a single attempt. A failure is logged and the next
    candidate is tried; when all fail, the last error is raised as a
    DatasetLoadError.
    """
    last_error: Exception | None = None
    for candidate in candidates:
        try:
            dataset = parse_dataset(read_candidate(candidate, timeout=timeout))
        except (OSError, ValueError, requests.RequestException, ContractError, DatasetLoadError) as e:
            logger.warning(f"Could not load spending dataset from {candidate}: {e}")
            last_error = e
            continue
        logger.info(f"Loaded spending dataset from {candidate} ({len(dataset.uses)} categories)")
        return dataset

    if last_error is None:
        raise DatasetLoadError("No dataset locations were given.")
    raise DatasetLoadError(f"Could not load spending dataset: {last_error}") from last_error
