"""
CLI Entry Point: levy-share

Shows how a property tax bill splits across taxing authorities, how the
school district line is attributed across the district's spending
categories, and the estimated local earned income tax.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from levy_share.config import AppConfig, load_config
from levy_share.core import format_money, parse_amount
from levy_share.dataset import DatasetLoadError, UnknownYearError, load_dataset
from levy_share.lookup import TaxLookupError, apply_lookup, lookup_address, lookup_status
from levy_share.profile import COUNTY_ITEM_DEFINITIONS, DEMO_PROFILES, TAX_LINE_DEFINITIONS, TaxProfile
from levy_share.state import AppState, Summary, build_summary, default_year, summary_to_dict, summary_to_markdown
from levy_share.utils import console
from levy_share.utils.contracts import validate_payload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Break a property tax bill down by taxing authority and school district spending."
    )
    parser.add_argument(
        "--dataset",
        action="append",
        default=None,
        help="Spending dataset path or URL. Repeat to give fallbacks; defaults come from config.",
    )
    parser.add_argument("--config", type=Path, default=None, help="Optional JSON config file.")
    parser.add_argument("--year", default=None, help="Fiscal year to allocate (default: latest in dataset).")
    for line_id, label, _ in TAX_LINE_DEFINITIONS:
        parser.add_argument(f"--{line_id}", default=None, metavar="AMOUNT", help=f"{label} tax line.")
    for item_id, label, _ in COUNTY_ITEM_DEFINITIONS:
        parser.add_argument(f"--{item_id}", default=None, metavar="AMOUNT", help=f"County portion: {label}.")
    parser.add_argument("--county-total", default=None, metavar="AMOUNT", help="County total printed on the bill.")
    parser.add_argument("--income", default=None, metavar="AMOUNT", help="Annual earned income for the EIT estimate.")
    parser.add_argument("--per-unit", action="store_true", help="Show amounts per apartment unit.")
    parser.add_argument("--units", default=None, help="Unit count used with --per-unit.")
    parser.add_argument("--demo", choices=sorted(DEMO_PROFILES), default=None, help="Start from a demo bill.")
    parser.add_argument("--address", default=None, help="Pre-fill tax lines from the county lookup service.")
    parser.add_argument("--json", action="store_true", help="Output machine-readable JSON.")
    parser.add_argument("--markdown-out", type=Path, default=None, help="Also write a Markdown report here.")
    parser.add_argument("--verbose", action="store_true", help="Log dataset and lookup activity.")
    return parser


def state_from_args(args: argparse.Namespace, config: AppConfig) -> AppState:
    profile = TaxProfile()
    per_unit = False
    units = ""
    income = ""

    if args.demo:
        demo = DEMO_PROFILES[args.demo]
        profile, per_unit, units, income = demo.profile, demo.per_unit, demo.units, demo.income

    if args.address:
        try:
            result = lookup_address(args.address, config.lookup_url, timeout=config.lookup_timeout)
        except TaxLookupError as e:
            # stdout is reserved for the JSON payload.
            if args.json:
                logger.warning(f"Auto-fill failed: {e}")
            else:
                console.print_warning(f"Auto-fill failed: {e}")
        else:
            profile = apply_lookup(profile, result)
            if not args.json:
                console.print_success(lookup_status(result))

    overrides = {
        key: getattr(args, key)
        for key, _, _ in TAX_LINE_DEFINITIONS + COUNTY_ITEM_DEFINITIONS
        if getattr(args, key) is not None
    }
    profile = profile.with_amounts(overrides)
    if args.county_total is not None:
        profile = replace(profile, county_total=parse_amount(args.county_total))

    if args.per_unit:
        per_unit = True
    if args.units is not None:
        units = args.units
    if args.income is not None:
        income = args.income

    return AppState(profile=profile, per_unit=per_unit, units=units, income=income, eit_rate=config.eit_rate)


def output_human(summary: Summary) -> None:
    console.print_step("Tax Distribution")
    console.print_line(summary.per_unit_status)
    console.print_table(
        "Taxing Authorities",
        ["Authority", "Amount"],
        [[line.label, format_money(line.amount)] for line in summary.tax_lines]
        + [["Total Property Tax", format_money(summary.total_property_tax)]],
        numeric_columns=[1],
    )
    console.print_table(
        "County Portion Only",
        ["Item", "Amount"],
        [[item.label, format_money(item.amount)] for item in summary.county_items]
        + [["County Portion Total", format_money(summary.county_portion_total)]],
        numeric_columns=[1],
    )
    for note in summary.county_notes:
        console.print_warning(note)

    if summary.allocation is not None:
        result = summary.allocation
        console.print_step(f"School District Spending ({result.year})")
        console.print_line(f"District Spending Total: {format_money(result.district_total)}")
        console.print_line(f"Your City Schools Share: {format_money(result.csd_line)}")
        rows = []
        memo_rows = []
        for row in result.iter_rows():
            name = f"  ↳ {row.name}" if row.is_child else row.name
            if row.included:
                name += " (included)"
                memo_rows.append(len(rows))
            rows.append([name, format_money(row.amount), format_money(row.share)])
        console.print_table(
            "Spending Categories",
            ["Category", "District Amount", "Your Share"],
            rows,
            numeric_columns=[1, 2],
            dim_rows=memo_rows,
        )

    console.print_step("Earned Income Tax Estimate")
    console.print_line(f"Yearly: {format_money(summary.eit.yearly)}")
    console.print_line(f"Monthly: {format_money(summary.eit.monthly)}")


def main() -> None:
    args = build_parser().parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_config(args.config)
    except Exception as e:
        sys.exit(f"Invalid configuration: {e}")

    candidates = args.dataset or list(config.dataset_paths)
    try:
        dataset = load_dataset(candidates, timeout=config.lookup_timeout)
    except DatasetLoadError as e:
        console.print_error(str(e), exit_code=1)
        return

    try:
        year = dataset.require_year(args.year) if args.year else default_year(dataset)
    except UnknownYearError:
        console.print_error(f"Unknown year {args.year}; available: {', '.join(dataset.years)}", exit_code=1)
        return

    state = replace(state_from_args(args, config), dataset=dataset, year=year)
    summary = build_summary(state)

    payload = summary_to_dict(summary)
    validate_payload(payload, "allocation_summary", mode="REVIEW")

    if args.markdown_out:
        args.markdown_out.parent.mkdir(parents=True, exist_ok=True)
        args.markdown_out.write_text(summary_to_markdown(summary), encoding="utf-8")

    if args.json:
        print(json.dumps(payload, indent=2))
    else:
        output_human(summary)
        if args.markdown_out:
            console.print_success(f"Markdown report: {args.markdown_out}")


if __name__ == "__main__":
    main()
