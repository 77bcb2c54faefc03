"""
Config Service - Creates and edits tuning configs
"""

import logging
import secrets
import string
from dataclasses import fields
from typing import List, Optional

from moto_setup.config import (
    ADJUSTABLE_CONFIG_FIELDS,
    SHARE_LINK_LENGTH,
    VISIBILITIES,
    VISIBILITY_LINK,
    VISIBILITY_PRIVATE,
    VISIBILITY_PUBLIC,
)
from moto_setup.models.models import Config, ConfigCreationResult
from moto_setup.services.data_manager import DataManager
from moto_setup.services.kit_resolver import KitResolver

logger = logging.getLogger(__name__)

SHARE_LINK_ALPHABET = string.ascii_letters + string.digits

# Set by the service, never by callers
CONFIG_MANAGED_FIELDS = frozenset({
    "config_id", "user_id", "moto_id", "suspension_kit_id", "visibility",
    "share_link", "is_public", "likes", "created_at",
})


class InvalidFieldError(ValueError):
    """A config field or value that cannot be written"""
    pass


def generate_share_link() -> str:
    """Random 12 character alphanumeric share token"""
    return "".join(secrets.choice(SHARE_LINK_ALPHABET) for _ in range(SHARE_LINK_LENGTH))


def _needs_share_link(visibility: str) -> bool:
    return visibility in (VISIBILITY_LINK, VISIBILITY_PUBLIC)


def _check_visibility(visibility: str) -> None:
    if visibility not in VISIBILITIES:
        raise InvalidFieldError(f"Invalid visibility: {visibility}")


def _check_fields(changes: dict) -> None:
    allowed = {f.name for f in fields(Config)} - CONFIG_MANAGED_FIELDS
    unknown = set(changes) - allowed
    if unknown:
        raise InvalidFieldError(f"Unknown or read-only config fields: {', '.join(sorted(unknown))}")


class ConfigService:
    """Config creation through kit resolution, plus edits and sharing"""

    def __init__(self, data_manager: DataManager, resolver: KitResolver = None):
        self.dm = data_manager
        self.resolver = resolver or KitResolver(data_manager)

    def create_config(self, moto_id: str, requesting_user_id: str, name: str,
                      suspension_kit_id: Optional[str] = None,
                      visibility: str = VISIBILITY_PRIVATE,
                      is_public: bool = False,
                      **config_fields) -> ConfigCreationResult:
        """
        Create a config, binding it to a kit

        Args:
            moto_id: Motorcycle the config is for
            requesting_user_id: Owner of the new config
            name: Config name
            suspension_kit_id: Explicit kit; resolved automatically when None
            visibility: "private", "link" or "public"
            is_public: Legacy public flag
            **config_fields: Settings snapshot and other Config fields

        Returns:
            The config id and the kit it was bound to
        """
        _check_visibility(visibility)
        _check_fields(config_fields)

        with self.dm.transaction():
            resolution = self.resolver.resolve_kit_for_config_creation(
                moto_id, suspension_kit_id, requesting_user_id
            )
            config_id = self.dm.insert("configs", {
                **config_fields,
                "user_id": requesting_user_id,
                "moto_id": moto_id,
                "name": name,
                "suspension_kit_id": resolution.effective_kit_id,
                "visibility": visibility,
                "share_link": generate_share_link() if _needs_share_link(visibility) else None,
                "is_public": visibility == VISIBILITY_PUBLIC or bool(is_public),
                "likes": 0,
            })

        return ConfigCreationResult(
            config_id=config_id,
            effective_kit_id=resolution.effective_kit_id,
            created_kit=resolution.created_kit,
        )

    def update_config(self, config_id: str, visibility: Optional[str] = None, **changes) -> Config:
        """
        Patch a config

        Changing visibility also updates the legacy public flag and creates a
        share link when the new visibility needs one and none exists yet.
        """
        _check_fields(changes)
        patch = dict(changes)

        with self.dm.transaction():
            existing = self.dm.require("configs", config_id)
            if visibility:
                _check_visibility(visibility)
                patch["visibility"] = visibility
                patch["is_public"] = visibility == VISIBILITY_PUBLIC
                if _needs_share_link(visibility) and not existing.get("share_link"):
                    patch["share_link"] = generate_share_link()
            return Config.from_dict(self.dm.patch("configs", config_id, patch))

    def update_field(self, config_id: str, field: str, value: float) -> Config:
        """Set a single adjustable numeric field (+/- adjustments)"""
        if field not in ADJUSTABLE_CONFIG_FIELDS:
            raise InvalidFieldError(f"Field cannot be adjusted: {field}")
        return Config.from_dict(self.dm.patch("configs", config_id, {field: value}))

    def like_config(self, config_id: str) -> int:
        """Increment the like counter, returning the new count"""
        with self.dm.transaction():
            config = self.dm.require("configs", config_id)
            likes = (config.get("likes") or 0) + 1
            self.dm.patch("configs", config_id, {"likes": likes})
        return likes

    def delete_config(self, config_id: str) -> bool:
        return self.dm.delete("configs", config_id)

    def get_config(self, config_id: str) -> Optional[Config]:
        record = self.dm.get("configs", config_id)
        return Config.from_dict(record) if record else None

    def get_configs_for_user(self, user_id: str) -> List[Config]:
        """User's configs, newest first"""
        return [Config.from_dict(r) for r in reversed(self.dm.find("configs", user_id=user_id))]

    def get_config_by_share_link(self, share_link: str) -> Optional[Config]:
        if not share_link:
            return None
        record = self.dm.find_first("configs", share_link=share_link)
        return Config.from_dict(record) if record else None
