"""
Orphan Config Repair - Binds configs created before kits existed to a kit

A config is an orphan when it references a motorcycle but no kit. Both
procedures only touch orphans, so running them again changes nothing.
"""

import logging
from typing import List, Optional

from moto_setup.models.models import Config, MigrationResult, RepairResult
from moto_setup.services.data_manager import DataManager
from moto_setup.services.kit_manager import pick_newest

logger = logging.getLogger(__name__)


def _is_orphan(config: dict) -> bool:
    return not config.get("suspension_kit_id")


class OrphanConfigRepair:
    """Idempotent backfill of suspension_kit_id on legacy configs"""

    def __init__(self, data_manager: DataManager):
        self.dm = data_manager

    def repair_orphan_configs_for_kit(self, kit_id: str) -> RepairResult:
        """
        Assign a kit to its motorcycle's orphan configs.

        Only the motorcycle's default kit may claim orphans; for any other
        kit (or an unknown one) nothing is repaired.
        """
        with self.dm.transaction():
            kit = self.dm.get("kits", kit_id)
            if kit is None or not kit.get("is_default"):
                return RepairResult(repaired=0)

            orphans = [c for c in self.dm.find("configs", moto_id=kit["moto_id"]) if _is_orphan(c)]
            for config in orphans:
                self.dm.patch("configs", config["config_id"], {"suspension_kit_id": kit_id})

        if orphans:
            logger.info("Assigned kit %s to %d orphan config(s)", kit_id, len(orphans))
        return RepairResult(repaired=len(orphans))

    def migrate_user_configs_to_default_kit(self, user_id: str) -> MigrationResult:
        """
        Assign every orphan config of a user to its motorcycle's default kit

        Falls back to the newest kit when the motorcycle has no default.
        Configs of motorcycles without kits stay orphaned.
        """
        with self.dm.transaction():
            orphans = [c for c in self.dm.find("configs", user_id=user_id) if _is_orphan(c)]

            migrated = 0
            for config in orphans:
                kits = self.dm.find("kits", moto_id=config["moto_id"])
                if not kits:
                    continue
                target = pick_newest([k for k in kits if k.get("is_default")]) or pick_newest(kits)
                self.dm.patch("configs", config["config_id"], {"suspension_kit_id": target["kit_id"]})
                migrated += 1

        if orphans:
            logger.info("Migrated %d of %d orphan config(s) for user %s", migrated, len(orphans), user_id)
        return MigrationResult(migrated_count=migrated, total_without_kit=len(orphans))

    def get_configs_for_kit(self, kit_id: str, user_id: Optional[str] = None) -> List[Config]:
        """
        Configs bound to a kit, plus the orphan configs of its motorcycle

        Args:
            kit_id: Kit to list configs for
            user_id: Only return configs owned by this user

        Returns:
            Configs, newest first
        """
        configs = self.dm.find("configs", suspension_kit_id=kit_id)
        kit = self.dm.get("kits", kit_id)
        if kit:
            seen = {c["config_id"] for c in configs}
            configs += [
                c for c in self.dm.find("configs", moto_id=kit["moto_id"])
                if _is_orphan(c) and c["config_id"] not in seen
            ]

        if user_id:
            configs = [c for c in configs if c["user_id"] == user_id]

        configs.sort(key=lambda c: c.get("created_at", 0), reverse=True)
        return [Config.from_dict(c) for c in configs]
