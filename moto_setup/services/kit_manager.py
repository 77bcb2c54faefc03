"""
Kit Manager - Suspension kits and the one-default-kit-per-motorcycle rule

Every motorcycle that owns at least one kit has exactly one default kit.
All mutations below preserve that, each inside a single storage transaction.
Where a kit has to be picked among several, the most recently created one
wins; the same rule is used by the resolver and the orphan repair.
"""

import logging
from dataclasses import fields
from typing import Dict, List, Optional

from moto_setup.config import (
    COPY_SUFFIX,
    CUSTOM_KIT_DESCRIPTION,
    STANDARD_KIT_NAME,
    STOCK_KIT_DESCRIPTION,
    STOCK_KIT_NAME,
)
from moto_setup.models.models import (
    ADJUSTERS,
    DefaultFixResult,
    KitPatch,
    Motorcycle,
    SuspensionKit,
    SweepResult,
    base_field,
    max_field,
)
from moto_setup.services.data_manager import DataManager

logger = logging.getLogger(__name__)

CALIBRATION_FIELDS = frozenset(
    [max_field(a) for a in ADJUSTERS] + [base_field(a) for a in ADJUSTERS] + ["base_sag"]
)

MOTO_IMMUTABLE_FIELDS = frozenset({"moto_id", "user_id", "created_at"})


def pick_newest(records: List[Dict]) -> Optional[Dict]:
    """Most recently created record, None for an empty list"""
    if not records:
        return None
    return max(records, key=lambda r: r.get("created_at", 0))


class KitManager:
    """Creates, updates and reconciles suspension kits"""

    def __init__(self, data_manager: DataManager):
        self.dm = data_manager

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_kit(self, kit_id: str) -> Optional[SuspensionKit]:
        record = self.dm.get("kits", kit_id)
        return SuspensionKit.from_dict(record) if record else None

    def require_kit(self, kit_id: str) -> SuspensionKit:
        """Get a kit or raise KitNotFoundError"""
        return SuspensionKit.from_dict(self.dm.require("kits", kit_id))

    def get_kits_for_moto(self, moto_id: str) -> List[SuspensionKit]:
        """Kits of a motorcycle, oldest first"""
        return [SuspensionKit.from_dict(r) for r in self.dm.find("kits", moto_id=moto_id)]

    def get_kits_for_user(self, user_id: str) -> List[SuspensionKit]:
        return [SuspensionKit.from_dict(r) for r in self.dm.find("kits", user_id=user_id)]

    def get_default_kit(self, moto_id: str) -> Optional[SuspensionKit]:
        """
        The motorcycle's default kit.

        Falls back to the newest kit while the invariant is broken, and
        returns None for a motorcycle without kits.
        """
        record = pick_newest(self.dm.find("kits", moto_id=moto_id, is_default=True))
        if record is None:
            record = pick_newest(self.dm.find("kits", moto_id=moto_id))
        return SuspensionKit.from_dict(record) if record else None

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _demote_others(self, moto_id: str, keep_kit_id: str = None) -> int:
        demoted = 0
        for kit in self.dm.find("kits", moto_id=moto_id, is_default=True):
            if kit["kit_id"] != keep_kit_id:
                self.dm.patch("kits", kit["kit_id"], {"is_default": False})
                demoted += 1
        return demoted

    def create_kit(self, moto_id: str, user_id: str, name: str,
                   is_default: Optional[bool] = None, **kit_fields) -> str:
        """
        Create a kit for a motorcycle

        Args:
            moto_id: Owning motorcycle
            user_id: Owning user
            name: Kit name (e.g. "Sand GP kit")
            is_default: Requested default flag; the first kit of a
                motorcycle is always default
            **kit_fields: Any other SuspensionKit field

        Returns:
            The new kit id
        """
        changes = KitPatch(**kit_fields).changes

        with self.dm.transaction():
            self.dm.require("motos", moto_id)
            existing = self.dm.find("kits", moto_id=moto_id)
            make_default = True if not existing else bool(is_default)

            if make_default:
                demoted = self._demote_others(moto_id)
                if demoted:
                    logger.info("Demoted %d kit(s) of moto %s for new default kit", demoted, moto_id)

            # Current settings start from the baseline when not given
            for adjuster in ADJUSTERS:
                if changes.get(adjuster) is None:
                    base = changes.get(base_field(adjuster))
                    changes[adjuster] = base if base is not None else 0

            record = {
                **changes,
                "moto_id": moto_id,
                "user_id": user_id,
                "name": name,
                "is_default": make_default,
            }
            return self.dm.insert("kits", record)

    def update_kit(self, kit_id: str, patch: KitPatch = None, **changes) -> SuspensionKit:
        """
        Apply a partial update to a kit

        Args:
            kit_id: Kit to update
            patch: A KitPatch; built from **changes when omitted

        Returns:
            The updated kit
        """
        if patch is None:
            patch = KitPatch(**changes)

        with self.dm.transaction():
            kit = self.dm.require("kits", kit_id)
            if patch.promotes:
                self._demote_others(kit["moto_id"], keep_kit_id=kit_id)
            return SuspensionKit.from_dict(self.dm.patch("kits", kit_id, patch.to_fields()))

    def set_default_kit(self, kit_id: str) -> None:
        """Make a kit its motorcycle's default, demoting the others"""
        with self.dm.transaction():
            kit = self.dm.require("kits", kit_id)
            self._demote_others(kit["moto_id"], keep_kit_id=kit_id)
            if not kit.get("is_default"):
                self.dm.patch("kits", kit_id, {"is_default": True})
                logger.info("Kit %s is now default for moto %s", kit_id, kit["moto_id"])

    def delete_kit(self, kit_id: str) -> bool:
        """
        Delete a kit, promoting the newest remaining kit if it was the default

        Returns:
            False if the kit did not exist
        """
        with self.dm.transaction():
            kit = self.dm.get("kits", kit_id)
            if kit is None:
                return False

            self.dm.delete("kits", kit_id)

            if kit.get("is_default"):
                replacement = pick_newest(self.dm.find("kits", moto_id=kit["moto_id"]))
                if replacement:
                    self.dm.patch("kits", replacement["kit_id"], {"is_default": True})
                    logger.info("Deleted default kit %s, promoted %s", kit_id, replacement["kit_id"])
            return True

    def duplicate_kit(self, kit_id: str) -> str:
        """Copy a kit under a "(copy)" name; the copy is never default"""
        with self.dm.transaction():
            kit = self.dm.require("kits", kit_id)
            data = {k: v for k, v in kit.items()
                    if k not in ("kit_id", "created_at", "name", "is_default")}
            data["name"] = f"{kit['name']}{COPY_SUFFIX}"
            data["is_default"] = False
            return self.dm.insert("kits", data)

    # -------------------------------------------------------------------------
    # Reconciliation
    # -------------------------------------------------------------------------

    def ensure_single_default_for_moto(self, moto_id: str) -> DefaultFixResult:
        """
        Repair the default flag of one motorcycle's kits

        No defaults: the newest kit becomes default. Several defaults: the
        newest of them stays default. Safe to call repeatedly.
        """
        with self.dm.transaction():
            kits = self.dm.find("kits", moto_id=moto_id)
            if not kits:
                return DefaultFixResult(fixed=False, default_kit_id=None)

            defaults = [k for k in kits if k.get("is_default")]

            if not defaults:
                keep = pick_newest(kits)
                self.dm.patch("kits", keep["kit_id"], {"is_default": True})
                logger.info("Moto %s had no default kit, promoted %s", moto_id, keep["kit_id"])
                return DefaultFixResult(fixed=True, default_kit_id=keep["kit_id"])

            keep = pick_newest(defaults)
            for kit in defaults:
                if kit["kit_id"] != keep["kit_id"]:
                    self.dm.patch("kits", kit["kit_id"], {"is_default": False})

            if len(defaults) > 1:
                logger.info("Moto %s had %d default kits, kept %s", moto_id, len(defaults), keep["kit_id"])
            return DefaultFixResult(fixed=len(defaults) > 1, default_kit_id=keep["kit_id"])

    def ensure_all_motos_have_default(self) -> SweepResult:
        """
        Give a default kit to every motorcycle that owns kits but has none

        Motorcycles with several defaults are left to
        ensure_single_default_for_moto().
        """
        with self.dm.transaction():
            kits_by_moto: Dict[str, List[Dict]] = {}
            for kit in self.dm.all("kits"):
                kits_by_moto.setdefault(kit["moto_id"], []).append(kit)

            fixed_count = 0
            for moto_id, kits in kits_by_moto.items():
                if not any(k.get("is_default") for k in kits):
                    keep = pick_newest(kits)
                    self.dm.patch("kits", keep["kit_id"], {"is_default": True})
                    fixed_count += 1

            if fixed_count:
                logger.info("Default kit sweep fixed %d of %d motos", fixed_count, len(kits_by_moto))
            return SweepResult(fixed_count=fixed_count, total_motos=len(kits_by_moto))

    def find_default_drift(self) -> Dict[str, int]:
        """Motorcycles whose kits do not have exactly one default, with their default count"""
        counts: Dict[str, int] = {}
        for kit in self.dm.all("kits"):
            counts[kit["moto_id"]] = counts.get(kit["moto_id"], 0) + (1 if kit.get("is_default") else 0)
        return {moto_id: n for moto_id, n in counts.items() if n != 1}

    def reconcile_all(self) -> Dict[str, DefaultFixResult]:
        """
        Run ensure_single_default_for_moto() on every drifted motorcycle

        Returns:
            Fix result per repaired motorcycle
        """
        with self.dm.transaction():
            return {
                moto_id: self.ensure_single_default_for_moto(moto_id)
                for moto_id in self.find_default_drift()
            }

    # -------------------------------------------------------------------------
    # Motorcycles
    # -------------------------------------------------------------------------

    def get_motorcycle(self, moto_id: str) -> Optional[Motorcycle]:
        record = self.dm.get("motos", moto_id)
        return Motorcycle.from_dict(record) if record else None

    def get_motorcycles_for_user(self, user_id: str) -> List[Motorcycle]:
        return [Motorcycle.from_dict(r) for r in self.dm.find("motos", user_id=user_id)]

    def register_motorcycle(self, user_id: str, brand: str, model: str, year: int,
                            is_stock_suspension: bool = True,
                            fork_brand: str = None, fork_model: str = None,
                            shock_brand: str = None, shock_model: str = None,
                            suspension_notes: str = None, is_public: bool = False,
                            **calibration) -> str:
        """
        Register a motorcycle together with its first (default) kit

        Args:
            calibration: max_* click ranges and base_* settings for the first
                kit; its current settings start equal to the baseline

        Returns:
            The new motorcycle id
        """
        unknown = set(calibration) - CALIBRATION_FIELDS
        if unknown:
            raise ValueError(f"Unknown calibration fields: {', '.join(sorted(unknown))}")

        hardware = {
            "fork_brand": fork_brand,
            "fork_model": fork_model,
            "shock_brand": shock_brand,
            "shock_model": shock_model,
        }

        with self.dm.transaction():
            moto_id = self.dm.insert("motos", {
                "user_id": user_id,
                "brand": brand,
                "model": model,
                "year": year,
                "is_stock_suspension": is_stock_suspension,
                "suspension_notes": suspension_notes,
                "is_public": is_public,
                **hardware,
            })
            self.create_kit(
                moto_id,
                user_id,
                STOCK_KIT_NAME if is_stock_suspension else STANDARD_KIT_NAME,
                is_default=True,
                description=STOCK_KIT_DESCRIPTION if is_stock_suspension else CUSTOM_KIT_DESCRIPTION,
                is_stock_suspension=is_stock_suspension,
                **hardware,
                **calibration,
            )

        logger.info("Registered moto %s (%s %s %s) for user %s", moto_id, brand, model, year, user_id)
        return moto_id

    def update_motorcycle(self, moto_id: str, **changes) -> Motorcycle:
        """Patch motorcycle fields; the owner can never change"""
        allowed = {f.name for f in fields(Motorcycle)} - MOTO_IMMUTABLE_FIELDS
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Unknown or immutable motorcycle fields: {', '.join(sorted(unknown))}")
        return Motorcycle.from_dict(self.dm.patch("motos", moto_id, changes))

    def delete_motorcycle(self, moto_id: str) -> int:
        """
        Delete a motorcycle and all of its kits

        Returns:
            Number of kits deleted
        """
        with self.dm.transaction():
            self.dm.require("motos", moto_id)
            kits = self.dm.find("kits", moto_id=moto_id)
            for kit in kits:
                self.dm.delete("kits", kit["kit_id"])
            self.dm.delete("motos", moto_id)

        logger.info("Deleted moto %s and %d kit(s)", moto_id, len(kits))
        return len(kits)
