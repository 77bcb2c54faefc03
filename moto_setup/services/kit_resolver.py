"""
Kit Resolver - Picks the kit a new config is bound to
"""

import logging
from typing import Optional

from moto_setup.config import STANDARD_KIT_NAME
from moto_setup.models.models import KitResolution
from moto_setup.services.data_manager import DataManager
from moto_setup.services.kit_manager import pick_newest

logger = logging.getLogger(__name__)


class KitResolver:
    """Resolves the effective kit for config creation"""

    def __init__(self, data_manager: DataManager):
        self.dm = data_manager

    def resolve_kit_for_config_creation(self, moto_id: str,
                                        explicit_kit_id: Optional[str] = None,
                                        requesting_user_id: str = None) -> KitResolution:
        """
        Resolve the kit a new config of this motorcycle should use.

        First match wins:
        1. the explicit kit id, as given (ownership is checked by the caller)
        2. the motorcycle's default kit
        3. the motorcycle's most recently created kit
        4. a new default "Kit Standard" owned by the requesting user

        Raises:
            MotorcycleNotFoundError: no explicit kit and unknown motorcycle
        """
        if explicit_kit_id:
            return KitResolution(effective_kit_id=explicit_kit_id)

        with self.dm.transaction():
            self.dm.require("motos", moto_id)

            default_kit = pick_newest(self.dm.find("kits", moto_id=moto_id, is_default=True))
            if default_kit:
                return KitResolution(effective_kit_id=default_kit["kit_id"])

            any_kit = pick_newest(self.dm.find("kits", moto_id=moto_id))
            if any_kit:
                return KitResolution(effective_kit_id=any_kit["kit_id"])

            # No hardware and no click ranges: the rider fills them in later
            kit_id = self.dm.insert("kits", {
                "moto_id": moto_id,
                "user_id": requesting_user_id,
                "name": STANDARD_KIT_NAME,
                "is_default": True,
            })

        logger.info("Moto %s had no kit, created %s %s", moto_id, STANDARD_KIT_NAME, kit_id)
        return KitResolution(effective_kit_id=kit_id, created_kit=True)
