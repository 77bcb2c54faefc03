#!/usr/bin/env python3
"""
Maintenance jobs for MotoSetup

Heals default-kit drift and binds legacy configs to kits. Every job is
idempotent, so it can run on a schedule.

Usage:
  python scripts/run_maintenance.py reconcile
  python scripts/run_maintenance.py migrate --user USER_ID
  python scripts/run_maintenance.py repair --kit KIT_ID

Storage location comes from MOTO_SETUP_DATA_DIR (see .env).
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from moto_setup.config import configure_logging  # noqa: E402
from moto_setup.services.data_manager import DataManager  # noqa: E402
from moto_setup.services.kit_manager import KitManager  # noqa: E402
from moto_setup.services.orphan_repair import OrphanConfigRepair  # noqa: E402


# =============================================================================
# Jobs
# =============================================================================

def reconcile(dm: DataManager) -> int:
    km = KitManager(dm)
    sweep = km.ensure_all_motos_have_default()
    fixes = km.reconcile_all()
    print(f"Sweep: fixed {sweep.fixed_count} of {sweep.total_motos} motorcycles with kits")
    for moto_id, result in fixes.items():
        print(f"  {moto_id}: default kit is now {result.default_kit_id}")
    print(f"Reconciled {sum(1 for r in fixes.values() if r.fixed)} motorcycle(s) with several defaults")
    return 0


def migrate(dm: DataManager, user_id: str) -> int:
    result = OrphanConfigRepair(dm).migrate_user_configs_to_default_kit(user_id)
    print(f"Migrated {result.migrated_count} of {result.total_without_kit} configs without kit")
    return 0


def repair(dm: DataManager, kit_id: str) -> int:
    result = OrphanConfigRepair(dm).repair_orphan_configs_for_kit(kit_id)
    print(f"Repaired {result.repaired} orphan config(s)")
    return 0


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="MotoSetup maintenance jobs")
    parser.add_argument("--data-dir", help="Override MOTO_SETUP_DATA_DIR")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("reconcile", help="Ensure exactly one default kit per motorcycle")

    migrate_parser = sub.add_parser("migrate", help="Bind a user's configs without kit")
    migrate_parser.add_argument("--user", required=True, dest="user_id")

    repair_parser = sub.add_parser("repair", help="Let a default kit claim its motorcycle's orphan configs")
    repair_parser.add_argument("--kit", required=True, dest="kit_id")

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()
    dm = DataManager(args.data_dir)

    if args.command == "reconcile":
        return reconcile(dm)
    if args.command == "migrate":
        return migrate(dm, args.user_id)
    return repair(dm, args.kit_id)


if __name__ == "__main__":
    sys.exit(main())
