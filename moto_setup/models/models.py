"""
Data models for MotoSetup application
"""

from dataclasses import dataclass, fields, asdict
from typing import Dict, List, Optional


class _Unset:
    """Marker for "leave this field unchanged" in partial updates"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()

# Adjustable parameters, in display order (fork first, then shock)
ADJUSTERS = (
    "fork_compression",
    "fork_rebound",
    "shock_compression_low",
    "shock_compression_high",
    "shock_rebound",
)

ADJUSTER_LABELS = {
    "fork_compression": "Fork Compression",
    "fork_rebound": "Fork Rebound",
    "shock_compression_low": "Shock Compression (LS)",
    "shock_compression_high": "Shock Compression (HS)",
    "shock_rebound": "Shock Rebound",
}


def max_field(adjuster: str) -> str:
    """Name of the calibration ceiling field for an adjuster"""
    return f"max_{adjuster}"


def base_field(adjuster: str) -> str:
    """Name of the baseline field for an adjuster"""
    return f"base_{adjuster}"


def _known_fields(cls, data: Dict) -> Dict:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


@dataclass
class Motorcycle:
    """A rider's motorcycle"""
    moto_id: str
    user_id: str
    brand: str
    model: str
    year: int
    is_stock_suspension: bool = True
    fork_brand: Optional[str] = None
    fork_model: Optional[str] = None
    shock_brand: Optional[str] = None
    shock_model: Optional[str] = None
    suspension_notes: Optional[str] = None
    is_public: bool = False
    created_at: int = 0  # epoch milliseconds

    @property
    def display_name(self) -> str:
        return f"{self.brand} {self.model} ({self.year})"

    def to_dict(self) -> Dict:
        """Convert to dictionary"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> 'Motorcycle':
        """Create Motorcycle from a stored record, ignoring unknown keys"""
        return cls(**_known_fields(cls, data))


@dataclass(frozen=True)
class ClickRange:
    """Maximum click count per adjuster (calibration ceiling)"""
    fork_compression: Optional[int] = None
    fork_rebound: Optional[int] = None
    shock_compression_low: Optional[int] = None
    shock_compression_high: Optional[int] = None
    shock_rebound: Optional[int] = None

    def get(self, adjuster: str) -> int:
        return getattr(self, adjuster) or 0

    def to_kit_fields(self) -> Dict:
        """Map to the max_* fields of a SuspensionKit"""
        return {max_field(a): getattr(self, a) for a in ADJUSTERS}


@dataclass
class SuspensionKit:
    """One physical suspension build for a motorcycle"""
    kit_id: str
    moto_id: str
    user_id: str
    name: str
    description: Optional[str] = None
    sport_type: Optional[str] = None
    terrain_type: Optional[str] = None
    country: Optional[str] = None
    conditions: Optional[str] = None
    is_stock_suspension: Optional[bool] = None
    # Hardware
    fork_brand: Optional[str] = None
    fork_model: Optional[str] = None
    shock_brand: Optional[str] = None
    shock_model: Optional[str] = None
    fork_spring_rate: Optional[str] = None  # e.g. "4.8 N/mm"
    shock_spring_rate: Optional[str] = None
    fork_oil_weight: Optional[str] = None  # e.g. "5W"
    fork_oil_level: Optional[str] = None  # e.g. "130mm"
    valving_notes: Optional[str] = None
    other_mods: Optional[str] = None
    # Click ranges
    max_fork_compression: Optional[int] = None
    max_fork_rebound: Optional[int] = None
    max_shock_compression_low: Optional[int] = None
    max_shock_compression_high: Optional[int] = None
    max_shock_rebound: Optional[int] = None
    # Baseline settings
    base_fork_compression: Optional[int] = None
    base_fork_rebound: Optional[int] = None
    base_shock_compression_low: Optional[int] = None
    base_shock_compression_high: Optional[int] = None
    base_shock_rebound: Optional[int] = None
    base_sag: Optional[float] = None  # mm
    # Current settings
    fork_compression: Optional[int] = None
    fork_rebound: Optional[int] = None
    shock_compression_low: Optional[int] = None
    shock_compression_high: Optional[int] = None
    shock_rebound: Optional[int] = None
    is_default: bool = False
    created_at: int = 0  # epoch milliseconds

    def max_clicks(self, adjuster: str) -> int:
        """Calibration ceiling for an adjuster, 0 when not calibrated"""
        return getattr(self, max_field(adjuster)) or 0

    def current_clicks(self, adjuster: str) -> int:
        return getattr(self, adjuster) or 0

    def click_range(self) -> ClickRange:
        return ClickRange(**{a: getattr(self, max_field(a)) for a in ADJUSTERS})

    def uncalibrated_adjusters(self) -> List[str]:
        """Adjusters whose max click count is missing or not positive"""
        return [a for a in ADJUSTERS if self.max_clicks(a) <= 0]

    def is_calibrated(self) -> bool:
        return not self.uncalibrated_adjusters()

    def to_dict(self) -> Dict:
        """Convert to dictionary"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> 'SuspensionKit':
        """Create SuspensionKit from a stored record, ignoring unknown keys"""
        return cls(**_known_fields(cls, data))


# Kit fields a patch may never touch
KIT_IMMUTABLE_FIELDS = frozenset({"kit_id", "moto_id", "user_id", "created_at"})


class KitPatch:
    """
    Partial update for a SuspensionKit.

    Only fields passed to the constructor are written. ``is_default`` is
    three-state: UNSET (or None) leaves the flag alone, True promotes the kit,
    False clears the flag on this kit only.
    """

    def __init__(self, is_default=UNSET, **changes):
        allowed = {f.name for f in fields(SuspensionKit)} - KIT_IMMUTABLE_FIELDS - {"is_default"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Unknown or immutable kit fields: {', '.join(sorted(unknown))}")
        self.is_default = UNSET if is_default is None or is_default is UNSET else bool(is_default)
        self.changes = dict(changes)

    @property
    def promotes(self) -> bool:
        return self.is_default is True

    def to_fields(self) -> Dict:
        """Fields to write, with is_default only when it was given"""
        data = dict(self.changes)
        if self.is_default is not UNSET:
            data["is_default"] = self.is_default
        return data

    def __repr__(self) -> str:
        return f"KitPatch(is_default={self.is_default!r}, changes={self.changes!r})"


@dataclass
class Config:
    """A tuning session / recommendation for a motorcycle"""
    config_id: str
    user_id: str
    moto_id: str
    name: str
    suspension_kit_id: Optional[str] = None  # None for configs predating kits
    conversation_id: Optional[str] = None
    description: Optional[str] = None
    # Rider snapshot
    rider_weight: Optional[float] = None  # kg
    rider_level: Optional[str] = None
    rider_style: Optional[str] = None
    rider_objective: Optional[str] = None
    # Fork
    fork_compression: Optional[int] = None  # clicks
    fork_rebound: Optional[int] = None
    fork_preload: Optional[str] = None
    # Shock
    shock_compression_low: Optional[int] = None
    shock_compression_high: Optional[int] = None
    shock_rebound: Optional[int] = None
    shock_preload: Optional[str] = None
    # Sag (mm) and tires (bar)
    static_sag: Optional[float] = None
    dynamic_sag: Optional[float] = None
    tire_pressure_front: Optional[float] = None
    tire_pressure_rear: Optional[float] = None
    # Classification
    sport_type: Optional[str] = None
    terrain_type: Optional[str] = None
    terrain: Optional[str] = None
    conditions: Optional[str] = None
    # Sharing
    visibility: str = "private"
    share_link: Optional[str] = None
    is_public: bool = False  # legacy flag
    likes: int = 0
    created_at: int = 0  # epoch milliseconds

    @property
    def is_orphan(self) -> bool:
        """True for configs that reference a motorcycle but no kit"""
        return not self.suspension_kit_id

    def current_clicks(self, adjuster: str) -> int:
        return getattr(self, adjuster) or 0

    def to_dict(self) -> Dict:
        """Convert to dictionary"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> 'Config':
        """Create Config from a stored record, ignoring unknown keys"""
        return cls(**_known_fields(cls, data))


# =============================================================================
# DERIVED VALUES AND OPERATION RESULTS
# =============================================================================

@dataclass(frozen=True)
class ClickAdjustment:
    """How far and which way to turn an adjuster"""
    clicks: int
    direction: str  # "open" or "close"
    from_percentage: int
    to_percentage: int


@dataclass(frozen=True)
class SuspensionBalance:
    """Front/rear comparison of normalized adjuster positions"""
    front_compression: int
    front_rebound: int
    rear_compression: int
    rear_rebound: int
    compression_diff: int
    rebound_diff: int
    compression_balance: str
    rebound_balance: str
    overall_balance: str

    @property
    def is_balanced(self) -> bool:
        return self.compression_balance == "balanced" and self.rebound_balance == "balanced"


@dataclass(frozen=True)
class DefaultFixResult:
    fixed: bool
    default_kit_id: Optional[str]


@dataclass(frozen=True)
class SweepResult:
    fixed_count: int
    total_motos: int


@dataclass(frozen=True)
class KitResolution:
    effective_kit_id: str
    created_kit: bool = False


@dataclass(frozen=True)
class RepairResult:
    repaired: int


@dataclass(frozen=True)
class MigrationResult:
    migrated_count: int
    total_without_kit: int


@dataclass(frozen=True)
class ConfigCreationResult:
    config_id: str
    effective_kit_id: str
    created_kit: bool = False
