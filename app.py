"""
MotoSetup - Streamlit Application
Suspension kits, click positions and tuning configs for your motorcycles
"""

import streamlit as st

from moto_setup.config import configure_logging

configure_logging()

# Page config
st.set_page_config(
    page_title="MotoSetup",
    page_icon="🏍️",
    layout="wide"
)

pages = [
    st.Page("views/main.py", title="Garage", icon="🏠", default=True),
    st.Page("pages/maintenance.py", title="Maintenance", icon="🔧"),
]

st.navigation(pages, position="hidden").run()
