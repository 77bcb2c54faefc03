"""
Maintenance Page
Default-kit health and orphan config repair
"""

import pandas as pd
import streamlit as st

from moto_setup.utils.sidebar import init_session_state, render_sidebar

init_session_state()


def get_kit_stats() -> pd.DataFrame:
    """Per-motorcycle kit/config statistics for the current rider"""
    dm = st.session_state.data_manager
    km = st.session_state.kit_manager

    rows = []
    for moto in km.get_motorcycles_for_user(st.session_state.user_id):
        kits = dm.find("kits", moto_id=moto.moto_id)
        configs = dm.find("configs", moto_id=moto.moto_id)
        defaults = sum(1 for k in kits if k.get("is_default"))
        rows.append({
            "Motorcycle": moto.display_name,
            "Kits": len(kits),
            "Default kits": defaults,
            "Configs": len(configs),
            "Orphan configs": sum(1 for c in configs if not c.get("suspension_kit_id")),
            "Status": "✅" if (defaults == 1 or not kits) else "⚠️",
        })
    return pd.DataFrame(rows)


def main():
    render_sidebar()

    km = st.session_state.kit_manager
    repair = st.session_state.orphan_repair

    st.title("🔧 Maintenance")

    stats = get_kit_stats()
    if stats.empty:
        st.info("No motorcycles yet.")
    else:
        st.dataframe(stats, use_container_width=True, hide_index=True)

    drift = km.find_default_drift()
    if drift:
        st.warning(f"{len(drift)} motorcycle(s) do not have exactly one default kit.")

    col1, col2 = st.columns(2)
    with col1:
        if st.button("⭐ Reconcile default kits", use_container_width=True):
            sweep = km.ensure_all_motos_have_default()
            fixes = km.reconcile_all()
            st.success(
                f"Sweep fixed {sweep.fixed_count} of {sweep.total_motos} motorcycles; "
                f"{sum(1 for r in fixes.values() if r.fixed)} more repaired."
            )
    with col2:
        if st.button("🧩 Migrate legacy configs", use_container_width=True):
            result = repair.migrate_user_configs_to_default_kit(st.session_state.user_id)
            st.success(f"Migrated {result.migrated_count} of {result.total_without_kit} configs without kit.")


main()
