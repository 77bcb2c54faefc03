"""
Tests for data models
"""

import pytest

from moto_setup.models.models import (
    UNSET,
    ClickRange,
    Config,
    KitPatch,
    Motorcycle,
    SuspensionKit,
)


@pytest.mark.unit
def test_motorcycle_from_dict_ignores_unknown_keys(sample_motorcycle):
    data = sample_motorcycle.to_dict()
    data["legacy_column"] = "whatever"

    moto = Motorcycle.from_dict(data)

    assert moto == sample_motorcycle


@pytest.mark.unit
def test_kit_round_trip(sample_kit):
    assert SuspensionKit.from_dict(sample_kit.to_dict()) == sample_kit


@pytest.mark.unit
def test_kit_click_range(sample_kit):
    click_range = sample_kit.click_range()

    assert click_range == ClickRange(20, 20, 20, 15, 20)
    assert sample_kit.max_clicks("shock_compression_high") == 15
    assert sample_kit.current_clicks("shock_compression_low") == 5
    assert sample_kit.is_calibrated()


@pytest.mark.unit
def test_uncalibrated_kit_reports_adjusters():
    kit = SuspensionKit(
        kit_id="k", moto_id="m", user_id="u", name="Partial",
        max_fork_compression=20, max_fork_rebound=0, max_shock_compression_low=-1,
        max_shock_compression_high=15, max_shock_rebound=20,
    )

    assert kit.uncalibrated_adjusters() == ["fork_rebound", "shock_compression_low"]
    assert not kit.is_calibrated()
    assert kit.max_clicks("fork_rebound") == 0


@pytest.mark.unit
def test_click_range_get_unset_is_zero():
    assert ClickRange().get("fork_compression") == 0


@pytest.mark.unit
def test_config_orphan(sample_config):
    assert sample_config.is_orphan
    assert not Config.from_dict({**sample_config.to_dict(), "suspension_kit_id": "kit123"}).is_orphan


@pytest.mark.unit
def test_config_unset_clicks_read_zero():
    config = Config(config_id="c", user_id="u", moto_id="m", name="Empty")

    assert config.current_clicks("shock_rebound") == 0


@pytest.mark.unit
def test_unset_is_falsy_singleton():
    assert not UNSET
    assert repr(UNSET) == "UNSET"
    assert type(UNSET)() is UNSET


@pytest.mark.unit
def test_kit_patch_default_states():
    assert KitPatch().is_default is UNSET
    assert KitPatch(is_default=False).is_default is False
    assert not KitPatch(is_default=False).promotes
    assert "is_default" not in KitPatch(name="x").to_fields()


@pytest.mark.unit
def test_kit_patch_rejects_unknown_field():
    with pytest.raises(ValueError, match="wheel_size"):
        KitPatch(wheel_size=21)
