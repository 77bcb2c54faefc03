"""
Tests for KitResolver and config creation through it
"""

import pytest

from moto_setup.config import STANDARD_KIT_NAME
from moto_setup.services.data_manager import MotorcycleNotFoundError


@pytest.mark.unit
def test_resolves_default_kit(resolver, kit_manager, registered_moto, user_id):
    stock = kit_manager.get_default_kit(registered_moto)
    kit_manager.create_kit(registered_moto, user_id, "Mud kit")

    resolution = resolver.resolve_kit_for_config_creation(registered_moto, requesting_user_id=user_id)

    assert resolution.effective_kit_id == stock.kit_id
    assert resolution.created_kit is False


@pytest.mark.unit
def test_explicit_kit_wins(resolver, kit_manager, registered_moto, user_id):
    other_id = kit_manager.create_kit(registered_moto, user_id, "Mud kit")

    resolution = resolver.resolve_kit_for_config_creation(registered_moto, other_id, user_id)

    assert resolution.effective_kit_id == other_id
    assert resolution.created_kit is False


@pytest.mark.unit
def test_explicit_kit_is_used_as_given(resolver, data_manager):
    """The explicit id is not checked here; callers verify ownership"""
    resolution = resolver.resolve_kit_for_config_creation("any-moto", "kit-from-elsewhere")

    assert resolution.effective_kit_id == "kit-from-elsewhere"
    assert data_manager.count("kits") == 0


@pytest.mark.unit
def test_falls_back_to_newest_kit_without_default(resolver, data_manager, bare_moto, user_id):
    data_manager.insert("kits", {"moto_id": bare_moto, "user_id": user_id, "name": "K1", "is_default": False})
    k2 = data_manager.insert("kits", {"moto_id": bare_moto, "user_id": user_id, "name": "K2", "is_default": False})

    resolution = resolver.resolve_kit_for_config_creation(bare_moto, requesting_user_id=user_id)

    assert resolution.effective_kit_id == k2
    assert resolution.created_kit is False
    assert data_manager.count("kits") == 2


@pytest.mark.unit
def test_creates_standard_kit_for_kitless_moto(resolver, kit_manager, bare_moto, user_id):
    resolution = resolver.resolve_kit_for_config_creation(bare_moto, requesting_user_id=user_id)

    assert resolution.created_kit is True
    kit = kit_manager.get_kit(resolution.effective_kit_id)
    assert kit.name == STANDARD_KIT_NAME
    assert kit.is_default is True
    assert kit.user_id == user_id
    assert kit.moto_id == bare_moto
    assert kit.max_fork_compression is None


@pytest.mark.unit
def test_second_resolution_reuses_created_kit(resolver, bare_moto, user_id):
    first = resolver.resolve_kit_for_config_creation(bare_moto, requesting_user_id=user_id)
    second = resolver.resolve_kit_for_config_creation(bare_moto, requesting_user_id=user_id)

    assert second.effective_kit_id == first.effective_kit_id
    assert second.created_kit is False


@pytest.mark.unit
def test_unknown_moto_raises(resolver, data_manager):
    with pytest.raises(MotorcycleNotFoundError):
        resolver.resolve_kit_for_config_creation("missing", requesting_user_id="rider")

    assert data_manager.count("kits") == 0


@pytest.mark.integration
def test_create_config_on_kitless_moto(config_service, kit_manager, bare_moto, user_id):
    """Creating a config for a motorcycle without kits synthesizes Kit Standard"""
    result = config_service.create_config(bare_moto, user_id, "First ride", fork_compression=8)

    assert result.created_kit is True
    config = config_service.get_config(result.config_id)
    assert config.suspension_kit_id == result.effective_kit_id
    assert config.fork_compression == 8
    assert kit_manager.get_default_kit(bare_moto).kit_id == result.effective_kit_id


@pytest.mark.integration
def test_create_config_unknown_moto_creates_nothing(config_service, data_manager, user_id):
    with pytest.raises(MotorcycleNotFoundError):
        config_service.create_config("missing", user_id, "Ghost")

    assert data_manager.count("configs") == 0
    assert data_manager.count("kits") == 0
