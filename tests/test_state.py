from dataclasses import replace
from decimal import Decimal

import pytest

from levy_share.core import format_money
from levy_share.profile import DEMO_PROFILES, TaxProfile
from levy_share.state import AppState, build_summary, default_year, summary_to_dict, summary_to_markdown
from levy_share.utils.contracts import validate_payload


@pytest.fixture
def house_state(scenario) -> AppState:
    demo = DEMO_PROFILES["house"]
    return AppState.for_dataset(scenario, profile=demo.profile, income="80000")


@pytest.mark.unit
def test_default_year_is_last_listed(scenario):
    assert default_year(scenario) == "2024"
    assert default_year(None) == "2024"


@pytest.mark.unit
def test_summary_without_dataset_has_no_allocation():
    state = AppState(profile=TaxProfile.from_inputs({"csd": "100"}), income="80000")
    summary = build_summary(state)
    assert summary.allocation is None
    assert summary.csd_line == Decimal("100")
    assert format_money(summary.eit.yearly) == "$1,000.00"


@pytest.mark.unit
def test_summary_totals_for_house(house_state):
    summary = build_summary(house_state)
    assert summary.factor == Decimal("1")
    assert summary.per_unit_status == "Per-unit factor: Off"
    assert format_money(summary.total_property_tax) == "$5,301.74"
    assert format_money(summary.county_portion_total) == "$772.00"
    assert format_money(summary.allocation.find("instruction").share) == "$1,839.70"
    assert summary.county_notes == []


@pytest.mark.unit
def test_per_unit_mode_scales_every_user_amount(scenario):
    demo = DEMO_PROFILES["apt72"]
    state = AppState.for_dataset(scenario, profile=demo.profile, per_unit=True, units="72")
    summary = build_summary(state)

    assert summary.per_unit_status == "Per-unit factor: 1/72"
    assert format_money(summary.csd_line) == "$784.84"
    assert format_money(summary.allocation.csd_line) == "$784.84"
    assert format_money(summary.total_property_tax) == format_money(Decimal("89813.68") / 72)
    assert format_money(summary.county_portion_total) == format_money(Decimal("12354.10") / 72)
    csd_row = next(line for line in summary.tax_lines if line.id == "csd")
    assert format_money(csd_row.amount) == "$784.84"
    # District dollars stay absolute.
    assert summary.allocation.district_total == Decimal("1000000")


@pytest.mark.unit
def test_toggle_off_ignores_unit_count(house_state):
    summary = build_summary(replace(house_state, per_unit=False, units="72"))
    assert summary.factor == Decimal("1")
    assert format_money(summary.csd_line) == "$3,066.17"


@pytest.mark.unit
def test_year_change_leaves_inputs_untouched(multi_year):
    profile = TaxProfile.from_inputs({"csd": "1000", "butler": "250"})
    state = AppState.for_dataset(multi_year, profile=profile)
    newer = build_summary(state)
    older_state = state.with_year(2022)
    older = build_summary(older_state)

    assert older_state.profile == state.profile
    assert older.total_property_tax == newer.total_property_tax
    assert older.allocation.year == "2022"
    assert newer.allocation.year == "2024"
    for old_row, new_row in zip(older.allocation.rows, newer.allocation.rows):
        assert old_row.amount != new_row.amount
        assert old_row.share != new_row.share


@pytest.mark.unit
def test_cleared_state_keeps_dataset_and_year(house_state):
    cleared = house_state.with_year("2023").cleared()
    assert cleared.dataset is house_state.dataset
    assert cleared.year == "2023"
    assert cleared.profile.total_tax_lines() == Decimal("0")
    assert cleared.income == ""


@pytest.mark.unit
def test_summary_to_dict_meets_contract(house_state):
    payload = summary_to_dict(build_summary(house_state))
    validate_payload(payload, "allocation_summary", mode="STRICT")

    assert payload["total_property_tax"] == 5301.74
    assert payload["allocation"]["district_total_cents"] == 100000000
    instruction = payload["allocation"]["categories"][0]
    assert instruction["share"] == 1839.7
    assert [child["included"] for child in instruction["children"]] == [False, False, True]
    assert instruction["children"][2]["share"] == 0.0
    assert payload["eit"] == {"yearly": 1000.0, "monthly": 83.33}


@pytest.mark.unit
def test_summary_to_dict_without_dataset_meets_contract():
    payload = summary_to_dict(build_summary(AppState()))
    validate_payload(payload, "allocation_summary", mode="STRICT")
    assert payload["allocation"] is None


@pytest.mark.unit
def test_summary_markdown_flags_memo_rows(house_state):
    md = summary_to_markdown(build_summary(house_state))
    assert "## School District Spending (2024)" in md
    assert "| Instruction | $600,000.00 | $1,839.70 |" in md
    assert "| ↳ Regular | $300,000.00 | $1,003.47 |" in md
    assert "| ↳ Benefits (included) | $50,000.00 | $0.00 |" in md
    assert "- Monthly: $83.33" in md
