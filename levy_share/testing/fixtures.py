#!/usr/bin/env python3
"""
Generates synthetic spending dataset fixtures for tests and demos.
"""

import json
import sys
from pathlib import Path
from typing import Any


def category(
    category_id: str,
    values: dict[str, Any],
    name: str | None = None,
    children: list[dict[str, Any]] | None = None,
    included: bool | None = None,
    desc: str | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"id": category_id, "name": name or category_id.title(), "values": values}
    if desc is not None:
        payload["desc"] = desc
    if children is not None:
        payload["children"] = children
    if included is not None:
        payload["included"] = included
    return payload


def scenario_dataset() -> dict[str, Any]:
    """
    A one-million-dollar district year with a memo line under instruction.

    2024: instruction 600k (regular 300k, special 250k, benefits memo 50k),
    support 250k, transportation 150k.
    2023: every top-level amount is zero.
    """
    return {
        "district": "Scenario District",
        "years": ["2023", "2024"],
        "uses": [
            category(
                "instruction",
                {"2023": 0, "2024": 600000},
                children=[
                    category("instruction_regular", {"2024": 300000}, name="Regular"),
                    category("instruction_special", {"2024": 250000}, name="Special"),
                    category("instruction_benefits", {"2024": 50000}, name="Benefits", included=True),
                ],
            ),
            category("support", {"2023": 0, "2024": 250000}, desc="Central office and student services."),
            category("transportation", {"2023": 0, "2024": 150000}),
        ],
    }


def multi_year_dataset() -> dict[str, Any]:
    """Three years with different amounts, numeric year keys, and a category missing one year."""
    return {
        "years": [2022, 2023, 2024],
        "uses": [
            category("instruction", {"2022": 500, "2023": 600, "2024": 700}),
            category("operations", {"2022": 300, "2023": 250, "2024": 200}),
            category("interest", {"2023": 150, "2024": 100}),
        ],
    }


def main_gen(output_dir: Path) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)
    for name, payload in (("scenario.json", scenario_dataset()), ("multi_year.json", multi_year_dataset())):
        path = output_dir / name
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Generated dataset: {path}")


if __name__ == "__main__":
    if len(sys.argv) > 1:
        out = Path(sys.argv[1])
    else:
        out = Path("dataset_fixtures")
    main_gen(out)
