"""
Shared Sidebar Component
Provides consistent sidebar navigation and controls across all pages
"""

import streamlit as st


def init_session_state():
    """Create the shared services once per session"""
    from moto_setup.config import get_current_user_id
    from moto_setup.services.config_service import ConfigService
    from moto_setup.services.data_manager import DataManager
    from moto_setup.services.kit_manager import KitManager
    from moto_setup.services.orphan_repair import OrphanConfigRepair

    if 'data_manager' not in st.session_state:
        st.session_state.data_manager = DataManager()
    dm = st.session_state.data_manager

    if 'kit_manager' not in st.session_state:
        st.session_state.kit_manager = KitManager(dm)
    if 'config_service' not in st.session_state:
        st.session_state.config_service = ConfigService(dm)
    if 'orphan_repair' not in st.session_state:
        st.session_state.orphan_repair = OrphanConfigRepair(dm)
    if 'user_id' not in st.session_state:
        st.session_state.user_id = get_current_user_id()


def render_sidebar():
    """Render the consistent sidebar with navigation and controls for all pages"""
    from moto_setup.config import is_diagnostic_mode
    from moto_setup.utils.mock_data import MockDataGenerator

    init_session_state()
    dm = st.session_state.data_manager

    with st.sidebar:
        st.header("🏍️ Garage")
        st.caption(f"Rider: {st.session_state.user_id}")
        motos = st.session_state.kit_manager.get_motorcycles_for_user(st.session_state.user_id)
        st.caption(f"{len(motos)} motorcycle(s)")

        st.divider()

        st.header("📍 Navigation")
        st.page_link("views/main.py", label="Garage", icon="🏠")
        st.page_link("pages/maintenance.py", label="Maintenance", icon="🔧")

        if is_diagnostic_mode():
            st.divider()
            st.header("🔧 Developer Tools")

            if st.button("🗑️ Clear All Data", use_container_width=True, key="sidebar_clear_data"):
                dm.clear_all_data()
                st.success("Data cleared!")
                st.rerun()

            st.subheader("🎲 Demo Data")
            if st.button("🎲 Load Demo Garage", use_container_width=True, key="sidebar_load_mock"):
                with st.spinner("Generating demo garage..."):
                    MockDataGenerator.generate_garage(dm, st.session_state.user_id)
                st.rerun()
