"""
Core Domain Objects for the DeviceRank Engine.

All domain objects are immutable and created fresh per ranking request.
Nothing here is persisted; the engine is a stateless function of its inputs.

Domain Objects:
    DeviceRecord    — A partially-populated device from the catalog
    WeightVector    — 8 normalized category coefficients
    ScoreBreakdown  — 8 independent category sub-scores in [0, 100]
    RankedResult    — A device with its total score, breakdown and rank
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional


# =============================================================================
# ERRORS
# =============================================================================

class DeviceRankError(Exception):
    """Base class for all DeviceRank errors."""
    pass


class WeightValidationError(DeviceRankError):
    """Raised when a WeightVector violates its invariants at construction."""
    pass


class DeviceRecordError(DeviceRankError):
    """Raised when a catalog entry cannot be turned into a DeviceRecord."""
    pass


class ScoringInvariantError(DeviceRankError):
    """
    Raised when an aggregated score leaves [0, 100] or is not finite.

    This is a defect detector. The scoring path is total by contract,
    so seeing this error means a scorer or weight vector is broken.
    """
    pass


class ConfigError(DeviceRankError):
    """Raised when an EngineConfig is constructed with invalid values."""
    pass


# =============================================================================
# CATEGORIES
# =============================================================================

# Fixed category order. Every WeightVector and ScoreBreakdown uses it.
CATEGORIES: tuple[str, ...] = (
    "performance",
    "battery",
    "camera",
    "display",
    "build",
    "price",
    "reviews",
    "recency",
)

WEIGHT_SUM_TOLERANCE = 1e-9

MIN_SCORE = 0.0
MAX_SCORE = 100.0


def clamp_score(value: float) -> float:
    """Clamp a sub-score into [0, 100]. Non-finite values collapse to 0."""
    if not math.isfinite(value):
        return MIN_SCORE
    return max(MIN_SCORE, min(MAX_SCORE, float(value)))


# =============================================================================
# DEVICE RECORD
# =============================================================================

@dataclass(frozen=True)
class DeviceRecord:
    """
    A device as supplied by the catalog layer.

    Only id and name are required. Every attribute consumed by a scorer
    is an explicit optional field so each scorer's data dependency is
    visible here rather than hidden in dynamic lookups.
    """
    id: str
    name: str
    brand: Optional[str] = None

    # Performance
    ram_configurations: tuple[float, ...] = ()
    chipset: Optional[str] = None

    # Battery
    battery_capacity: Optional[float] = None

    # Camera (megapixels)
    main_camera_mp: Optional[float] = None
    front_camera_mp: Optional[float] = None

    # Display (inches)
    display_size: Optional[float] = None

    # Build
    water_resistance: Optional[str] = None
    weight: Optional[float] = None
    security_features: tuple[str, ...] = ()
    wireless_charging: Optional[float] = None

    # Price
    current_price: Optional[float] = None
    launch_price: Optional[float] = None
    currency: Optional[str] = None

    # Recency
    release_date: Optional[date] = None

    # Reviews
    review_ratings: tuple[float, ...] = ()
    review_count: Optional[int] = None

    @property
    def effective_review_count(self) -> int:
        """Review count, falling back to the number of ratings supplied."""
        if self.review_count is None:
            return len(self.review_ratings)
        return max(0, int(self.review_count))

    @property
    def average_rating(self) -> Optional[float]:
        """Mean of the supplied ratings, or None when there are none."""
        if not self.review_ratings:
            return None
        return sum(self.review_ratings) / len(self.review_ratings)


# =============================================================================
# WEIGHT VECTOR
# =============================================================================

@dataclass(frozen=True)
class WeightVector:
    """
    Eight named, non-negative coefficients that sum to 1.

    Invariants enforced at construction:
    1. Every coefficient is finite
    2. Every coefficient is >= 0
    3. The sum is 1 within WEIGHT_SUM_TOLERANCE
    """
    performance: float
    battery: float
    camera: float
    display: float
    build: float
    price: float
    reviews: float
    recency: float

    def __post_init__(self):
        """Enforce invariants at construction time."""
        for name in CATEGORIES:
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise WeightValidationError(
                    f"weight '{name}' must be a number, got {type(value).__name__}"
                )
            if not math.isfinite(value):
                raise WeightValidationError(f"weight '{name}' must be finite, got {value}")
            if value < 0:
                raise WeightValidationError(f"weight '{name}' must be >= 0, got {value}")

        total = self.total
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise WeightValidationError(
                f"weights must sum to 1 (±{WEIGHT_SUM_TOLERANCE}), got {total!r}"
            )

    @property
    def total(self) -> float:
        return math.fsum(getattr(self, name) for name in CATEGORIES)

    def as_dict(self) -> dict[str, float]:
        """Coefficients keyed by category, in category order."""
        return {name: getattr(self, name) for name in CATEGORIES}

    @classmethod
    def from_mapping(cls, values: Mapping[str, float]) -> WeightVector:
        """
        Build a vector from a complete mapping of the 8 categories.

        Raises:
            WeightValidationError: If a category is missing or unknown
        """
        missing = [name for name in CATEGORIES if name not in values]
        if missing:
            raise WeightValidationError(f"missing weights: {', '.join(missing)}")
        unknown = sorted(set(values) - set(CATEGORIES))
        if unknown:
            raise WeightValidationError(f"unknown weights: {', '.join(unknown)}")
        return cls(**{name: float(values[name]) for name in CATEGORIES})

    @classmethod
    def normalized(cls, values: Mapping[str, float]) -> WeightVector:
        """
        Build a vector by dividing every coefficient by their sum.

        Raises:
            WeightValidationError: If the sum is zero or a value is invalid
        """
        if any(name not in values for name in CATEGORIES):
            return cls.from_mapping(values)
        total = math.fsum(float(values[name]) for name in CATEGORIES)
        if not math.isfinite(total) or total <= 0:
            raise WeightValidationError(f"cannot normalize weights with sum {total!r}")
        return cls.from_mapping({name: float(values[name]) / total for name in CATEGORIES})


# =============================================================================
# SCORE BREAKDOWN
# =============================================================================

@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Per-category sub-scores for one device.

    Each field is produced independently and lies in [0, 100].
    """
    performance: float
    battery: float
    camera: float
    display: float
    build: float
    price: float
    reviews: float
    recency: float

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in CATEGORIES}

    def weighted(self, weights: WeightVector) -> dict[str, float]:
        """Each category's contribution to the total under the given weights."""
        return {
            name: getattr(self, name) * getattr(weights, name)
            for name in CATEGORIES
        }


# =============================================================================
# RANKED RESULT
# =============================================================================

@dataclass(frozen=True)
class RankedResult:
    """
    A device with its ranking information.

    Contains:
    - The original DeviceRecord (callers join back to full detail by id)
    - Total score rounded to 2 decimals, in [0, 100]
    - The full score breakdown
    - Dense 1-based rank
    """
    device: DeviceRecord
    total_score: float
    breakdown: ScoreBreakdown
    rank: int

    @property
    def device_id(self) -> str:
        return self.device.id

    @property
    def average_rating(self) -> Optional[float]:
        return self.device.average_rating

    def to_dict(self) -> dict[str, Any]:
        """Plain representation for JSON output."""
        return {
            "rank": self.rank,
            "deviceId": self.device.id,
            "name": self.device.name,
            "brand": self.device.brand,
            "score": self.total_score,
            "breakdown": self.breakdown.as_dict(),
            "reviewCount": self.device.effective_review_count,
            "averageRating": self.average_rating,
        }
