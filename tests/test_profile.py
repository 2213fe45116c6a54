from decimal import Decimal

import pytest

from levy_share.profile import (
    COUNTY_ITEM_IDS,
    DEMO_PROFILES,
    TAX_LINE_IDS,
    TaxProfile,
    reconcile_county,
)


@pytest.mark.unit
def test_empty_profile_is_all_zero():
    profile = TaxProfile()
    assert profile.total_tax_lines() == Decimal("0")
    assert profile.total_county_items() == Decimal("0")
    assert [line.id for line in profile.tax_lines] == list(TAX_LINE_IDS)
    assert [item.id for item in profile.county_items] == list(COUNTY_ITEM_IDS)


@pytest.mark.unit
def test_from_inputs_coerces_loose_text():
    profile = TaxProfile.from_inputs(
        {"butler": "$772.00", "csd": "3,066.17", "city": "oops", "gf": " 125.28 ", "unknown": "999"}
    )
    assert profile.line_amount("butler") == Decimal("772.00")
    assert profile.csd_amount() == Decimal("3066.17")
    assert profile.line_amount("city") == Decimal("0")
    assert profile.line_amount("library") == Decimal("0")
    assert profile.total_tax_lines() == Decimal("3838.17")
    assert profile.total_county_items() == Decimal("125.28")
    assert "unknown" not in profile.amounts()


@pytest.mark.unit
def test_negative_amounts_are_kept():
    profile = TaxProfile.from_inputs({"butler": "-50", "csd": "100"})
    assert profile.total_tax_lines() == Decimal("50")


@pytest.mark.unit
def test_with_amounts_returns_new_profile():
    original = TaxProfile.from_inputs({"csd": "100"})
    updated = original.with_amounts({"csd": "200", "dd": "5"})
    assert original.csd_amount() == Decimal("100")
    assert updated.csd_amount() == Decimal("200")
    assert updated.total_county_items() == Decimal("5")


@pytest.mark.unit
def test_totals_are_unscaled_and_scaled_copy_is_separate():
    profile = DEMO_PROFILES["apt72"].profile
    factor = Decimal(1) / Decimal(72)
    scaled = profile.scaled(factor)

    assert profile.total_tax_lines() == Decimal("89813.68")
    assert profile.total_county_items() == Decimal("12354.10")
    assert scaled.csd_amount().quantize(Decimal("0.01")) == Decimal("784.84")
    assert abs(scaled.total_tax_lines() - profile.total_tax_lines() * factor) < Decimal("1e-12")


@pytest.mark.unit
def test_county_items_are_not_forced_to_match_county_line():
    profile = TaxProfile.from_inputs({"butler": "772.00", "gf": "100.00"})
    assert profile.total_county_items() == Decimal("100.00")
    assert profile.line_amount("butler") == Decimal("772.00")


@pytest.mark.unit
def test_reconcile_notes_mismatch_without_changing_amounts():
    profile = TaxProfile.from_inputs({"butler": "772.00", "gf": "100.00"}, county_total="772.00")
    result = reconcile_county(profile)
    assert result.matches is False
    assert len(result.notes) == 2
    assert "-$672.00" in result.notes[0]
    assert profile.total_county_items() == Decimal("100.00")


@pytest.mark.unit
def test_reconcile_quiet_when_nothing_entered_or_matching():
    assert reconcile_county(TaxProfile()).matches is True
    for name, demo in DEMO_PROFILES.items():
        result = reconcile_county(demo.profile)
        assert result.matches is True, name
        assert result.notes == []


@pytest.mark.unit
def test_demo_presets():
    house = DEMO_PROFILES["house"]
    apt = DEMO_PROFILES["apt72"]
    assert house.per_unit is False
    assert house.profile.csd_amount() == Decimal("3066.17")
    assert apt.per_unit is True
    assert apt.units == "72"
    assert apt.profile.csd_amount() == Decimal("56508.66")
