import json
from pathlib import Path
from typing import Any

import pytest

from levy_share.dataset import SpendingDataset, parse_dataset
from levy_share.testing.fixtures import multi_year_dataset, scenario_dataset


@pytest.fixture
def scenario_payload() -> dict[str, Any]:
    """Decoded dataset document: $1,000,000 district total in 2024, all zeros in 2023."""
    return scenario_dataset()


@pytest.fixture
def scenario(scenario_payload: dict[str, Any]) -> SpendingDataset:
    return parse_dataset(scenario_payload)


@pytest.fixture
def multi_year() -> SpendingDataset:
    return parse_dataset(multi_year_dataset())


@pytest.fixture
def scenario_file(tmp_path: Path, scenario_payload: dict[str, Any]) -> Path:
    path = tmp_path / "scenario.json"
    path.write_text(json.dumps(scenario_payload), encoding="utf-8")
    return path


@pytest.fixture
def lookup_payload() -> dict[str, Any]:
    """Returns a successful response from the county tax lookup service."""
    return {
        "ok": True,
        "picked": {"PIN": "A0700012000045"},
        "taxes": {
            "distribution": [
                {"authority": "BUTLER COUNTY", "amount": "$772.00"},
                {"authority": "Fairfield Csd", "amount": "$3,066.17"},
                {"authority": "Fairfield City", "amount": "$1,095.69"},
                {"authority": "Butler County Jvsd", "amount": "$241.78"},
                {"authority": "Metro Parks Of Butler County", "amount": "$71.33"},
                {"authority": "Lane Public Library District", "amount": "$54.77"},
                {"authority": "Total Tax", "amount": "$5,301.74"},
            ],
            "countyPortionOnly": [
                {"authority": "General Fund", "amount": "$125.28"},
                {"authority": "Developmental Disabilities", "amount": "$190.19"},
                {"authority": "Mental Health", "amount": "$133.81"},
                {"authority": "Children Services", "amount": "$142.51"},
                {"authority": "Senior Citizens", "amount": "$180.21"},
                {"authority": "County Total Tax", "amount": "$772.00"},
            ],
        },
    }
