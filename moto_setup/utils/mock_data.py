"""
Mock data generator for trying MotoSetup without real garage data
"""

import random
from typing import Dict, List

from moto_setup.config import (
    MOCK_CONFIGS_PER_MOTO_MAX,
    MOCK_CONFIGS_PER_MOTO_MIN,
    MOCK_EXTRA_KITS_MAX,
    MOCK_MOTORCYCLES,
)
from moto_setup.models.models import ADJUSTERS, base_field
from moto_setup.services.click_normalizer import get_default_click_range
from moto_setup.services.config_service import ConfigService
from moto_setup.services.data_manager import DataManager
from moto_setup.services.kit_manager import KitManager


class MockDataGenerator:
    """Generates a realistic demo garage"""

    MOTORCYCLES = [
        ("KTM", "300 EXC", "WP"),
        ("Husqvarna", "FE 350", "WP"),
        ("Yamaha", "YZ450F", "KYB"),
        ("Honda", "CRF450R", "Showa"),
        ("Beta", "RR 300", "Sachs"),
        ("GasGas", "EC 250", "WP"),
    ]

    KIT_NAMES = ["Sand GP kit", "Mud kit", "Hard pack kit", "Rocky enduro kit", "Supermoto kit"]
    TERRAINS = ["sand", "mud", "hard", "rocky", "mixed"]
    SPORTS = ["enduro", "motocross", "supermoto"]

    @staticmethod
    def random_settings(click_range, rng: random.Random) -> Dict[str, int]:
        """Random current click values within a range"""
        return {a: rng.randint(0, click_range.get(a)) for a in ADJUSTERS}

    @staticmethod
    def generate_garage(data_manager: DataManager, user_id: str = "demo_user",
                        seed: int = None, legacy_configs: bool = True) -> List[str]:
        """
        Fill storage with motorcycles, kits and configs for one user

        Args:
            data_manager: Storage to write to
            user_id: Owner of the generated data
            seed: Random seed for reproducible data
            legacy_configs: Also add orphan configs without a kit, to try the
                repair tools on

        Returns:
            Ids of the generated motorcycles
        """
        rng = random.Random(seed)
        kit_manager = KitManager(data_manager)
        config_service = ConfigService(data_manager)

        moto_ids = []
        for brand, model, suspension_brand in rng.sample(MockDataGenerator.MOTORCYCLES, MOCK_MOTORCYCLES):
            click_range = get_default_click_range(suspension_brand)
            baseline = MockDataGenerator.random_settings(click_range, rng)

            moto_id = kit_manager.register_motorcycle(
                user_id, brand, model, rng.randint(2018, 2025),
                fork_brand=suspension_brand,
                shock_brand=suspension_brand,
                **click_range.to_kit_fields(),
                **{base_field(a): v for a, v in baseline.items()},
            )
            moto_ids.append(moto_id)

            for name in rng.sample(MockDataGenerator.KIT_NAMES, rng.randint(0, MOCK_EXTRA_KITS_MAX)):
                kit_manager.create_kit(
                    moto_id, user_id, name,
                    is_default=rng.random() < 0.3,
                    terrain_type=rng.choice(MockDataGenerator.TERRAINS),
                    sport_type=rng.choice(MockDataGenerator.SPORTS),
                    fork_brand=suspension_brand,
                    shock_brand=suspension_brand,
                    **click_range.to_kit_fields(),
                    **MockDataGenerator.random_settings(click_range, rng),
                )

            for i in range(rng.randint(MOCK_CONFIGS_PER_MOTO_MIN, MOCK_CONFIGS_PER_MOTO_MAX)):
                config_service.create_config(
                    moto_id, user_id, f"{model} session {i + 1}",
                    visibility=rng.choice(["private", "link", "public"]),
                    terrain_type=rng.choice(MockDataGenerator.TERRAINS),
                    static_sag=rng.randint(30, 40),
                    dynamic_sag=rng.randint(95, 110),
                    **MockDataGenerator.random_settings(click_range, rng),
                )

            if legacy_configs:
                data_manager.insert("configs", {
                    "user_id": user_id,
                    "moto_id": moto_id,
                    "name": f"{model} (before kits)",
                    "visibility": "private",
                    "is_public": False,
                    "likes": 0,
                    **MockDataGenerator.random_settings(click_range, rng),
                })

        return moto_ids
