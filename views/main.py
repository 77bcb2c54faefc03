"""
MotoSetup - Garage Page
Kits, click positions and front/rear balance for each motorcycle
"""

from typing import List

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from moto_setup.models.models import ADJUSTERS, ClickRange, SuspensionKit
from moto_setup.services.balance_analyzer import BalanceAnalyzer
from moto_setup.services.click_normalizer import clicks_to_percentage, get_percentage_zone, get_position_description
from moto_setup.utils.helpers import (
    format_balance,
    format_clicks,
    format_timestamp,
    get_adjuster_display_name,
)
from moto_setup.utils.sidebar import init_session_state, render_sidebar

# Note: Page config is handled by app.py entry point via st.navigation

ZONE_COLORS = {"soft": "#34d399", "medium": "#fbbf24", "firm": "#f87171"}


def kits_dataframe(kits: List[SuspensionKit]) -> pd.DataFrame:
    """Summary table of a motorcycle's kits"""
    return pd.DataFrame([
        {
            "Default": "⭐" if kit.is_default else "",
            "Name": kit.name,
            "Fork": " ".join(filter(None, [kit.fork_brand, kit.fork_model])) or "-",
            "Shock": " ".join(filter(None, [kit.shock_brand, kit.shock_model])) or "-",
            "Terrain": kit.terrain_type or "-",
            "Calibrated": "yes" if kit.is_calibrated() else "no",
            "Created": format_timestamp(kit.created_at),
        }
        for kit in kits
    ])


def visualize_positions(settings, ranges: ClickRange, key_suffix: str = ""):
    """Horizontal bar chart of each adjuster's position in percent"""
    labels, values, colors, texts = [], [], [], []
    for adjuster in ADJUSTERS:
        clicks = settings.current_clicks(adjuster)
        pct = clicks_to_percentage(clicks, ranges.get(adjuster))
        labels.append(get_adjuster_display_name(adjuster))
        values.append(pct)
        colors.append(ZONE_COLORS[get_percentage_zone(pct)])
        texts.append(f"{pct}% · {format_clicks(clicks, ranges.get(adjuster))}")

    fig = go.Figure(go.Bar(x=values, y=labels, orientation="h", marker_color=colors,
                           text=texts, textposition="auto"))
    fig.update_layout(xaxis=dict(range=[0, 100], title="Position (%)"),
                      yaxis=dict(autorange="reversed"), height=300,
                      margin=dict(l=10, r=10, t=10, b=10))
    st.plotly_chart(fig, use_container_width=True, key=f"positions_{key_suffix}")


def render_balance(kit: SuspensionKit):
    balance = BalanceAnalyzer.balance_for_settings(kit, kit.click_range())

    col1, col2, col3 = st.columns(3)
    col1.metric("Compression", format_balance(balance.compression_balance), f"{balance.compression_diff:+d} pts")
    col2.metric("Rebound", format_balance(balance.rebound_balance), f"{balance.rebound_diff:+d} pts")
    col3.metric("Overall", format_balance(balance.overall_balance))

    recommendations = BalanceAnalyzer.get_recommendations(balance)
    if balance.is_balanced and not recommendations:
        st.success("Front and rear are balanced.")
    for recommendation in recommendations:
        st.info(recommendation)


def render_kit_actions(kit: SuspensionKit):
    km = st.session_state.kit_manager
    col1, col2, col3 = st.columns(3)
    with col1:
        if st.button("⭐ Make default", disabled=kit.is_default, use_container_width=True, key=f"default_{kit.kit_id}"):
            km.set_default_kit(kit.kit_id)
            st.rerun()
    with col2:
        if st.button("📄 Duplicate", use_container_width=True, key=f"dup_{kit.kit_id}"):
            km.duplicate_kit(kit.kit_id)
            st.rerun()
    with col3:
        if st.button("🗑️ Delete", use_container_width=True, key=f"del_{kit.kit_id}"):
            km.delete_kit(kit.kit_id)
            st.rerun()


def render_current_settings_editor(kit: SuspensionKit):
    with st.form(f"settings_{kit.kit_id}"):
        values = {}
        for adjuster in ADJUSTERS:
            max_clicks = kit.max_clicks(adjuster)
            pct = clicks_to_percentage(kit.current_clicks(adjuster), max_clicks)
            values[adjuster] = st.number_input(
                f"{get_adjuster_display_name(adjuster)} ({get_position_description(pct)})",
                min_value=0,
                max_value=max_clicks if max_clicks > 0 else None,
                value=kit.current_clicks(adjuster),
                step=1,
                key=f"{adjuster}_{kit.kit_id}",
            )
        if st.form_submit_button("💾 Save settings"):
            st.session_state.kit_manager.update_kit(kit.kit_id, **values)
            st.rerun()


def render_configs(kit: SuspensionKit):
    configs = st.session_state.orphan_repair.get_configs_for_kit(kit.kit_id, st.session_state.user_id)
    if not configs:
        st.caption("No configs for this kit yet.")
    else:
        st.dataframe(pd.DataFrame([
            {
                "Name": c.name,
                "Kit": "legacy (no kit)" if c.is_orphan else "this kit",
                "Visibility": c.visibility,
                "Likes": c.likes,
                "Created": format_timestamp(c.created_at),
            }
            for c in configs
        ]), use_container_width=True, hide_index=True)

    with st.form(f"new_config_{kit.kit_id}", clear_on_submit=True):
        name = st.text_input("Config name")
        visibility = st.selectbox("Visibility", ["private", "link", "public"])
        if st.form_submit_button("➕ Save current settings as config") and name:
            settings = {a: kit.current_clicks(a) for a in ADJUSTERS}
            result = st.session_state.config_service.create_config(
                kit.moto_id, st.session_state.user_id, name,
                suspension_kit_id=kit.kit_id, visibility=visibility, **settings,
            )
            st.success(f"Config saved on kit {result.effective_kit_id}")
            st.rerun()


def render_new_kit_form(moto_id: str):
    with st.expander("➕ New kit"):
        with st.form(f"new_kit_{moto_id}", clear_on_submit=True):
            name = st.text_input("Kit name")
            terrain = st.text_input("Terrain")
            make_default = st.checkbox("Make default")
            if st.form_submit_button("Create kit") and name:
                st.session_state.kit_manager.create_kit(
                    moto_id, st.session_state.user_id, name,
                    is_default=make_default, terrain_type=terrain or None,
                )
                st.rerun()


def main():
    init_session_state()
    render_sidebar()

    km = st.session_state.kit_manager
    st.title("🏍️ MotoSetup")

    motos = km.get_motorcycles_for_user(st.session_state.user_id)
    if not motos:
        st.info("Your garage is empty. Enable diagnostic mode to load a demo garage.")
        return

    moto = st.selectbox("Motorcycle", motos, format_func=lambda m: m.display_name, key="moto_select")
    kits = km.get_kits_for_moto(moto.moto_id)

    st.header("🧰 Kits")
    if kits:
        st.dataframe(kits_dataframe(kits), use_container_width=True, hide_index=True)
    render_new_kit_form(moto.moto_id)
    if not kits:
        return

    default_kit = km.get_default_kit(moto.moto_id)
    kit = st.selectbox(
        "Kit",
        kits,
        index=[k.kit_id for k in kits].index(default_kit.kit_id),
        format_func=lambda k: f"{k.name}{' ⭐' if k.is_default else ''}",
        key="kit_select",
    )

    render_kit_actions(kit)

    if kit.uncalibrated_adjusters():
        names = ", ".join(get_adjuster_display_name(a) for a in kit.uncalibrated_adjusters())
        st.warning(f"No click range for: {names}. These positions show as 0%.")

    st.subheader("🎚️ Positions")
    visualize_positions(kit, kit.click_range(), key_suffix=kit.kit_id)
    render_current_settings_editor(kit)

    st.subheader("⚖️ Front / Rear Balance")
    render_balance(kit)

    others = [k for k in kits if k.kit_id != kit.kit_id]
    if others:
        st.subheader("🔀 Compare with another kit")
        other = st.selectbox("Compare with", others, format_func=lambda k: k.name, key="compare_select")
        st.dataframe(BalanceAnalyzer.compare_setups(kit, other, kit.click_range()),
                     use_container_width=True, hide_index=True)

    st.subheader("📋 Configs")
    render_configs(kit)


# Called via st.navigation from app.py
main()
