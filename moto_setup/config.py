"""
Configuration constants for MotoSetup
Centralized settings for kit bookkeeping, balance analysis, storage and defaults
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# BALANCE ANALYSIS
# =============================================================================

# Front/rear percentage gap (in points) above which a setup is unbalanced
BALANCE_THRESHOLD = 10

# Positions outside this range get an "extreme position" recommendation
EXTREME_SOFT_PERCENTAGE = 20
EXTREME_FIRM_PERCENTAGE = 80

# =============================================================================
# KIT BOOKKEEPING
# =============================================================================

# Name of the kit synthesized when a config is created for a kit-less motorcycle
STANDARD_KIT_NAME = "Kit Standard"

# Name of the first kit of a motorcycle registered with stock suspension
STOCK_KIT_NAME = "Stock Kit"
STOCK_KIT_DESCRIPTION = "Factory setup"
CUSTOM_KIT_DESCRIPTION = "Custom setup"

# Appended to the name of a duplicated kit
COPY_SUFFIX = " (copy)"

# =============================================================================
# CONFIGS
# =============================================================================

VISIBILITY_PRIVATE = "private"
VISIBILITY_LINK = "link"
VISIBILITY_PUBLIC = "public"
VISIBILITIES = (VISIBILITY_PRIVATE, VISIBILITY_LINK, VISIBILITY_PUBLIC)

SHARE_LINK_LENGTH = 12

# Fields that can be nudged one at a time (+/- buttons)
ADJUSTABLE_CONFIG_FIELDS = (
    "fork_compression",
    "fork_rebound",
    "shock_compression_low",
    "shock_compression_high",
    "shock_rebound",
    "static_sag",
    "dynamic_sag",
    "tire_pressure_front",
    "tire_pressure_rear",
)

# =============================================================================
# MOCK DATA SETTINGS
# =============================================================================

MOCK_MOTORCYCLES = 3
MOCK_EXTRA_KITS_MAX = 2
MOCK_CONFIGS_PER_MOTO_MIN = 1
MOCK_CONFIGS_PER_MOTO_MAX = 4

# =============================================================================
# ENVIRONMENT
# =============================================================================

DEFAULT_DATA_DIR = "data"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_USER_ID = "demo_user"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_data_dir() -> Path:
    """Directory holding the JSON record files"""
    return Path(os.getenv("MOTO_SETUP_DATA_DIR", DEFAULT_DATA_DIR))


def get_log_level() -> str:
    return os.getenv("MOTO_SETUP_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()


def is_diagnostic_mode() -> bool:
    """Maintenance tools are only shown in diagnostic mode"""
    return os.getenv("MOTO_SETUP_DIAGNOSTIC_MODE", "").strip().lower() in ("1", "true", "yes", "on")


def configure_logging(level: str = None) -> None:
    """Configure root logging once for the app and scripts"""
    logging.basicConfig(level=level or get_log_level(), format=LOG_FORMAT)


def get_current_user_id() -> str:
    """User the Streamlit app acts as; identity is handled outside the app"""
    return os.getenv("MOTO_SETUP_USER_ID", DEFAULT_USER_ID)
