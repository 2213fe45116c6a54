#!/usr/bin/env python3

from __future__ import annotations

from typing import Any

import streamlit as st

from levy_share.config import AppConfig, load_config
from levy_share.core import format_money
from levy_share.dataset import DatasetLoadError, SpendingDataset, load_dataset
from levy_share.lookup import TaxLookupError, apply_lookup, lookup_address, lookup_status
from levy_share.profile import COUNTY_ITEM_DEFINITIONS, DEMO_PROFILES, FIELD_IDS, TAX_LINE_DEFINITIONS, TaxProfile
from levy_share.state import AppState, Summary, build_summary, default_year

APP_SESSION_SCHEMA_VERSION = "2025-01-levy-share-v1"


def apply_theme() -> None:
    st.markdown(
        """
<style>
:root {
  --bg-surface: #f8f9fa;
  --text-tertiary: #6c757d;
  --brand-primary: #0f5d75;
  --border-subtle: #dee2e6;
}

.metric-card {
  background: var(--bg-surface);
  border: 1px solid var(--border-subtle);
  border-radius: 8px;
  padding: 1rem 1.25rem;
  margin-bottom: 0.5rem;
}

.metric-card .label {
  font-size: 0.75rem;
  text-transform: uppercase;
  letter-spacing: 0.05em;
  color: var(--text-tertiary);
  font-weight: 600;
}

.metric-card .value {
  font-size: 1.25rem;
  font-weight: 700;
  color: var(--brand-primary);
}

.notice { padding: 0.5rem 0.75rem; border-radius: 6px; margin: 0.25rem 0; }
.notice-ok { background: #dcfce7; color: #166534; }
.notice-bad { background: #fee2e2; color: #991b1b; }
</style>
        """,
        unsafe_allow_html=True,
    )


def reset_session_if_schema_changed() -> None:
    existing = st.session_state.get("_app_schema_version")
    if existing == APP_SESSION_SCHEMA_VERSION:
        return
    for key in list(st.session_state.keys()):
        if key in FIELD_IDS or key in ("county_total", "income", "per_unit", "units", "auto_status"):
            st.session_state.pop(key, None)
    st.session_state["_app_schema_version"] = APP_SESSION_SCHEMA_VERSION


def metric_card(label: str, value: str) -> None:
    st.markdown(
        f"""
<div class="metric-card">
  <div class="label">{label}</div>
  <div class="value">{value}</div>
</div>
        """,
        unsafe_allow_html=True,
    )


def show_notice(message: str, level: str = "ok") -> None:
    st.markdown(f"<div class='notice notice-{level}'>{message}</div>", unsafe_allow_html=True)


@st.cache_resource
def get_dataset(candidates: tuple[str, ...], timeout: float) -> SpendingDataset:
    return load_dataset(candidates, timeout=timeout)


def money_text(value: Any) -> str:
    if value is None:
        return ""
    return format_money(value).replace("$", "").replace(",", "")


def fill_demo(name: str) -> None:
    demo = DEMO_PROFILES[name]
    for key, value in demo.profile.amounts().items():
        st.session_state[key] = money_text(value)
    st.session_state["county_total"] = money_text(demo.profile.county_total)
    st.session_state["per_unit"] = demo.per_unit
    st.session_state["units"] = demo.units
    st.session_state["income"] = demo.income


def clear_all() -> None:
    for key in FIELD_IDS:
        st.session_state[key] = ""
    st.session_state["county_total"] = ""
    st.session_state["income"] = ""
    st.session_state["per_unit"] = False
    st.session_state["units"] = ""
    st.session_state["auto_status"] = None


def run_autofill(config: AppConfig) -> None:
    address = st.session_state.get("address", "")
    try:
        result = lookup_address(address, config.lookup_url, timeout=config.lookup_timeout)
    except TaxLookupError as e:
        st.session_state["auto_status"] = (f"Auto-fill failed: {e}", "bad")
        return

    profile = apply_lookup(profile_from_session(), result)
    for key, value in profile.amounts().items():
        st.session_state[key] = money_text(value)
    if profile.county_total is not None:
        st.session_state["county_total"] = money_text(profile.county_total)
    st.session_state["auto_status"] = (lookup_status(result), "ok")


def profile_from_session() -> TaxProfile:
    inputs = {key: st.session_state.get(key, "") for key in FIELD_IDS}
    return TaxProfile.from_inputs(inputs, county_total=st.session_state.get("county_total", ""))


def render_inputs() -> None:
    st.subheader("Tax Distribution")
    st.caption("Enter each line from your tax bill. Loose formats like $1,234.56 are fine.")
    c1, c2 = st.columns(2)
    for index, (line_id, label, _) in enumerate(TAX_LINE_DEFINITIONS):
        with c1 if index % 2 == 0 else c2:
            st.text_input(label, key=line_id, placeholder="0.00")

    st.markdown("#### County Portion Only")
    st.caption("Optional breakdown of the Butler County line.")
    c1, c2 = st.columns(2)
    for index, (item_id, label, _) in enumerate(COUNTY_ITEM_DEFINITIONS):
        with c1 if index % 2 == 0 else c2:
            st.text_input(label, key=item_id, placeholder="0.00")
    st.text_input("County total (optional)", key="county_total", placeholder="0.00")

    st.markdown("#### Earned Income Tax")
    st.text_input("Annual earned income", key="income", placeholder="0")


def render_breakdown(summary: Summary) -> None:
    st.subheader("Your Tax Breakdown")
    for line in summary.tax_lines:
        st.markdown(f"**{line.label}** · {format_money(line.amount)}")
        st.caption(line.description)
    st.markdown(f"**Total** · {format_money(summary.total_property_tax)}")

    st.markdown("##### County Portion Only (breakdown of the Butler County line)")
    for item in summary.county_items:
        st.markdown(f"{item.label} · {format_money(item.amount)}")
        st.caption(item.description)
    st.markdown(f"**County items total** · {format_money(summary.county_portion_total)}")
    for note in summary.county_notes:
        st.info(note)


def render_schools(summary: Summary) -> None:
    result = summary.allocation
    if result is None:
        return
    st.subheader(f"Where Your School Tax Goes ({result.year})")
    c1, c2 = st.columns(2)
    with c1:
        metric_card("District Spending Total", format_money(result.district_total))
    with c2:
        metric_card("Your City Schools Share", format_money(result.csd_line))

    rows = []
    for row in result.iter_rows():
        name = f"↳ {row.name}" if row.is_child else row.name
        rows.append(
            {
                "Category": name + (" (included)" if row.included else ""),
                "Description": row.description,
                "District Amount": format_money(row.amount),
                "Your Share": format_money(row.share),
            }
        )
    st.dataframe(rows, use_container_width=True, hide_index=True)
    st.caption("Rows marked (included) are already counted inside their parent and are not allocated again.")


def main() -> None:
    st.set_page_config(layout="wide", page_title="Property Tax Breakdown")
    apply_theme()
    reset_session_if_schema_changed()

    try:
        config = load_config()
    except Exception as e:
        st.error(f"Invalid configuration: {e}")
        st.stop()

    try:
        dataset = get_dataset(tuple(config.dataset_paths), config.lookup_timeout)
    except DatasetLoadError as e:
        st.error(f"Could not load the school spending data: {e}")
        st.stop()

    st.title("Property Tax Breakdown")

    with st.sidebar:
        st.header("Options")
        years = list(dataset.years)
        latest = default_year(dataset)
        year = st.selectbox("Fiscal year", years, index=years.index(latest) if latest in years else 0)

        st.checkbox("Per-unit mode (apartments)", key="per_unit")
        st.text_input("Number of units", key="units", placeholder="e.g. 72")

        st.markdown("#### Examples")
        st.button("Demo: single-family house", on_click=fill_demo, args=("house",), use_container_width=True)
        st.button("Demo: 72-unit apartment", on_click=fill_demo, args=("apt72",), use_container_width=True)
        st.button("Clear", on_click=clear_all, use_container_width=True)

        st.markdown("#### Auto-fill")
        st.text_input("Property address", key="address")
        st.button("Auto-fill from address", on_click=run_autofill, args=(config,), use_container_width=True)
        auto_status = st.session_state.get("auto_status")
        if auto_status:
            show_notice(*auto_status)
        st.link_button("Open county auditor", config.auditor_url, use_container_width=True)

    left, right = st.columns([1, 1])
    with left:
        render_inputs()

    state = AppState(
        dataset=dataset,
        year=str(year),
        profile=profile_from_session(),
        per_unit=bool(st.session_state.get("per_unit", False)),
        units=str(st.session_state.get("units", "")),
        income=str(st.session_state.get("income", "")),
        eit_rate=config.eit_rate,
    )
    summary = build_summary(state)

    with right:
        st.caption(summary.per_unit_status)
        c1, c2, c3 = st.columns(3)
        with c1:
            metric_card("Total Property Tax", format_money(summary.total_property_tax))
        with c2:
            metric_card("EIT / Year", format_money(summary.eit.yearly))
        with c3:
            metric_card("EIT / Month", format_money(summary.eit.monthly))
        render_breakdown(summary)

    render_schools(summary)


if __name__ == "__main__":
    main()
