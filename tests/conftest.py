"""
Shared test fixtures for MotoSetup test suite

This module provides reusable fixtures for testing all components of the MotoSetup application.
Fixtures are organized by category: data models, storage, services, and utilities.
"""

import pytest
from typing import Callable, Dict

from moto_setup.models.models import SuspensionKit, Config, Motorcycle
from moto_setup.services.click_normalizer import get_default_click_range
from moto_setup.services.config_service import ConfigService
from moto_setup.services.data_manager import DataManager
from moto_setup.services.kit_manager import KitManager
from moto_setup.services.kit_resolver import KitResolver
from moto_setup.services.orphan_repair import OrphanConfigRepair


# =============================================================================
# DATA MODEL FIXTURES - Sample data for testing
# =============================================================================

@pytest.fixture
def sample_motorcycle() -> Motorcycle:
    """
    Provides a sample Motorcycle object for testing.

    Returns:
        Motorcycle: A KTM with stock WP suspension
    """
    return Motorcycle(
        moto_id="moto123",
        user_id="rider123",
        brand="KTM",
        model="300 EXC",
        year=2023,
        fork_brand="WP",
        fork_model="XPLOR 48",
        shock_brand="WP",
        shock_model="XPLOR PDS",
        created_at=1705318200000,
    )


@pytest.fixture
def sample_kit() -> SuspensionKit:
    """
    Provides a calibrated SuspensionKit with current settings.

    Returns:
        SuspensionKit: Fully calibrated kit, marked default
    """
    return SuspensionKit(
        kit_id="kit123",
        moto_id="moto123",
        user_id="rider123",
        name="Sand GP kit",
        terrain_type="sand",
        fork_brand="WP",
        shock_brand="WP",
        max_fork_compression=20,
        max_fork_rebound=20,
        max_shock_compression_low=20,
        max_shock_compression_high=15,
        max_shock_rebound=20,
        base_fork_compression=12,
        base_fork_rebound=12,
        base_shock_compression_low=12,
        base_shock_compression_high=8,
        base_shock_rebound=12,
        fork_compression=10,
        fork_rebound=12,
        shock_compression_low=5,
        shock_compression_high=8,
        shock_rebound=12,
        is_default=True,
        created_at=1705318200000,
    )


@pytest.fixture
def sample_config() -> Config:
    """
    Provides a legacy Config with no kit (an orphan).

    Returns:
        Config: Config bound to a motorcycle only
    """
    return Config(
        config_id="config123",
        user_id="rider123",
        moto_id="moto123",
        name="Enduro sprint",
        fork_compression=14,
        fork_rebound=10,
        shock_compression_low=12,
        shock_compression_high=2,
        shock_rebound=11,
        static_sag=35,
        dynamic_sag=105,
        created_at=1705318200000,
    )


# =============================================================================
# STORAGE FIXTURES - Isolated JSON storage
# =============================================================================

@pytest.fixture
def temp_data_dir(tmp_path):
    """
    Provides a temporary directory for test data files.
    Automatically cleaned up after test completes.

    Returns:
        Path: Temporary directory path
    """
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def data_manager(temp_data_dir) -> DataManager:
    """
    Provides a DataManager instance configured with a temporary directory.

    Returns:
        DataManager: Configured with isolated temporary storage
    """
    return DataManager(str(temp_data_dir))


# =============================================================================
# SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def kit_manager(data_manager) -> KitManager:
    return KitManager(data_manager)


@pytest.fixture
def resolver(data_manager) -> KitResolver:
    return KitResolver(data_manager)


@pytest.fixture
def config_service(data_manager) -> ConfigService:
    return ConfigService(data_manager)


@pytest.fixture
def orphan_repair(data_manager) -> OrphanConfigRepair:
    return OrphanConfigRepair(data_manager)


@pytest.fixture
def user_id() -> str:
    return "rider123"


@pytest.fixture
def registered_moto(kit_manager, user_id) -> str:
    """
    Registers a motorcycle through the normal path (it gets a default kit).

    Returns:
        str: The motorcycle id
    """
    wp = get_default_click_range("WP")
    return kit_manager.register_motorcycle(
        user_id, "KTM", "300 EXC", 2023,
        fork_brand="WP", shock_brand="WP",
        **wp.to_kit_fields(),
        base_fork_compression=15,
        base_fork_rebound=15,
        base_shock_compression_low=15,
        base_shock_compression_high=10,
        base_shock_rebound=15,
    )


@pytest.fixture
def bare_moto(data_manager, user_id) -> str:
    """
    A motorcycle stored without any kit, as data from before kits existed.

    Returns:
        str: The motorcycle id
    """
    return data_manager.insert("motos", {
        "user_id": user_id,
        "brand": "Yamaha",
        "model": "YZ450F",
        "year": 2019,
    })


@pytest.fixture
def insert_legacy_config(data_manager, user_id) -> Callable[..., str]:
    """
    Factory inserting a config with no suspension_kit_id.

    Usage:
        def test_repair(insert_legacy_config, bare_moto):
            config_id = insert_legacy_config(bare_moto)
    """
    def _insert(moto_id: str, owner: str = None, **fields) -> str:
        record: Dict = {
            "user_id": owner or user_id,
            "moto_id": moto_id,
            "name": "Legacy config",
            "visibility": "private",
            "is_public": False,
            "likes": 0,
        }
        record.update(fields)
        return data_manager.insert("configs", record)

    return _insert


# =============================================================================
# CONFIGURATION FIXTURES - Test environment setup
# =============================================================================

@pytest.fixture(autouse=True)
def reset_environment_variables(monkeypatch, tmp_path):
    """
    Automatically resets environment variables for each test to ensure isolation.
    This prevents tests from interfering with each other via env vars.

    Note:
        This fixture runs automatically for every test (autouse=True)
    """
    monkeypatch.setenv("MOTO_SETUP_DIAGNOSTIC_MODE", "false")
    monkeypatch.setenv("MOTO_SETUP_DATA_DIR", str(tmp_path / "env_data"))
    monkeypatch.delenv("MOTO_SETUP_USER_ID", raising=False)
    monkeypatch.delenv("MOTO_SETUP_LOG_LEVEL", raising=False)


# =============================================================================
# MARKER FIXTURES - Pytest markers for test organization
# =============================================================================

# Use these markers in tests:
# @pytest.mark.unit - Fast unit tests with no dependencies
# @pytest.mark.integration - Tests spanning several services over real storage
# @pytest.mark.slow - Tests that take significant time
