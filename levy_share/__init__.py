from levy_share.core import (
    as_float,
    format_money,
    parse_amount,
    per_unit_factor,
    per_unit_status,
)
from levy_share.profile import (
    DEMO_PROFILES,
    CountyItem,
    TaxLine,
    TaxProfile,
    reconcile_county,
)
from levy_share.dataset import (
    DatasetLoadError,
    SpendingCategory,
    SpendingDataset,
    UnknownYearError,
    describe,
    load_dataset,
    parse_dataset,
)
from levy_share.allocation import AllocationResult, AllocationRow, allocate
from levy_share.eit import EitEstimate, estimate_eit
from levy_share.state import AppState, Summary, build_summary, summary_to_dict, summary_to_markdown

__all__ = [
    "AllocationResult",
    "AllocationRow",
    "AppState",
    "CountyItem",
    "DEMO_PROFILES",
    "DatasetLoadError",
    "EitEstimate",
    "SpendingCategory",
    "SpendingDataset",
    "Summary",
    "TaxLine",
    "TaxProfile",
    "UnknownYearError",
    "allocate",
    "as_float",
    "build_summary",
    "describe",
    "estimate_eit",
    "format_money",
    "load_dataset",
    "parse_amount",
    "parse_dataset",
    "per_unit_factor",
    "per_unit_status",
    "reconcile_county",
    "summary_to_dict",
    "summary_to_markdown",
]
