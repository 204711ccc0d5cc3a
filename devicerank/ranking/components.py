"""
Scoring Components for the DeviceRank Engine.

Each component is a pure, total function of one DeviceRecord: it never
raises, never looks at another device, and returns a sub-score in [0, 100].

Components:
    - Performance: RAM tier + chipset tier
    - Battery: capacity buckets
    - Camera: main + front camera megapixels
    - Display: diagonal size buckets (neutral when unknown)
    - Build: water resistance, weight, security and charging bonuses
    - Price: inverse price buckets in a common currency unit
    - Reviews: average rating + review count confidence (neutral when none)
    - Recency: months since release (neutral when unknown)

Numeric attributes that are missing, non-finite or <= 0 count as absent.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..config import EngineConfig
from ..domain import DeviceRecord, clamp_score


# Neutral scores used when the data a category needs is missing
NEUTRAL_DISPLAY_SCORE = 50.0
NEUTRAL_REVIEWS_SCORE = 50.0
NEUTRAL_RECENCY_SCORE = 25.0

NPR_CURRENCY = "NPR"
DAYS_PER_MONTH = 30


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _present(value: Optional[float]) -> bool:
    """A numeric attribute is present when it is a finite number above zero."""
    if value is None or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value) and value > 0
    except TypeError:
        return False


def _bucket(value: float, thresholds: tuple[tuple[float, float], ...], floor: float) -> float:
    """First (threshold, points) pair with value >= threshold wins."""
    for threshold, points in thresholds:
        if value >= threshold:
            return points
    return floor


def _bucket_at_most(value: float, thresholds: tuple[tuple[float, float], ...], ceiling: float) -> float:
    """First (threshold, points) pair with value <= threshold wins."""
    for threshold, points in thresholds:
        if value <= threshold:
            return points
    return ceiling


# =============================================================================
# COMPONENT SCORE
# =============================================================================

@dataclass(frozen=True)
class ComponentScore:
    """
    A single category score with full transparency.

    Every component exposes:
    - name: Which category this is
    - raw_value: The underlying measurement (0.0 when absent)
    - score: Sub-score in [0, 100]
    - reason: Human-readable explanation
    """
    name: str
    raw_value: float
    score: float
    reason: str


# =============================================================================
# PERFORMANCE COMPONENT
# =============================================================================

RAM_TIERS = (
    (16, 50.0),
    (12, 40.0),
    (8, 30.0),
    (6, 20.0),
    (4, 10.0),
)


def chipset_points(chipset: Optional[str], config: EngineConfig) -> tuple[float, Optional[str]]:
    """
    Points for a chipset label via the configured ordered keyword rules.

    Returns (points, matched keyword). An unmatched non-empty label earns
    the fallback points; an empty label earns nothing.
    """
    if not chipset or not chipset.strip():
        return 0.0, None

    label = chipset.lower()
    for rule in config.chipset_rules:
        if rule.keyword.lower() in label:
            return float(rule.points), rule.keyword
    return float(config.fallback_chipset_points), None


def compute_performance(device: DeviceRecord, config: EngineConfig) -> ComponentScore:
    """
    Compute performance from the largest RAM tier and the chipset.

    RAM (max 50 points):
    - >= 16GB: 50, >= 12GB: 40, >= 8GB: 30, >= 6GB: 20, >= 4GB: 10

    Chipset (max 50 points): ordered keyword rules from the config.

    Returns: ComponentScore with 0-100 points
    """
    ram_values = [r for r in device.ram_configurations if _present(r)]
    max_ram = max(ram_values) if ram_values else 0.0
    ram_score = _bucket(max_ram, RAM_TIERS, 0.0)

    chip_score, keyword = chipset_points(device.chipset, config)

    score = clamp_score(ram_score + chip_score)

    if keyword:
        chip_reason = f"chipset '{device.chipset}' matches '{keyword}' (+{chip_score:.0f})"
    elif chip_score > 0:
        chip_reason = f"chipset '{device.chipset}' unranked (+{chip_score:.0f})"
    else:
        chip_reason = "no chipset listed (+0)"

    ram_reason = f"{max_ram:g}GB RAM (+{ram_score:.0f})" if max_ram else "no RAM listed (+0)"

    return ComponentScore(
        name="performance",
        raw_value=float(max_ram),
        score=score,
        reason=f"Performance {score:.0f}/100: {ram_reason}, {chip_reason}",
    )


# =============================================================================
# BATTERY COMPONENT
# =============================================================================

BATTERY_TIERS = (
    (5000, 100.0),
    (4500, 85.0),
    (4000, 70.0),
    (3500, 55.0),
    (3000, 40.0),
    (2500, 25.0),
)


def compute_battery(device: DeviceRecord) -> ComponentScore:
    """
    Compute battery score from capacity in mAh.

    - >= 5000: 100, >= 4500: 85, >= 4000: 70, >= 3500: 55,
      >= 3000: 40, >= 2500: 25, lower: 10, unknown: 0
    """
    if not _present(device.battery_capacity):
        return ComponentScore(
            name="battery",
            raw_value=0.0,
            score=0.0,
            reason="Battery 0/100: capacity unknown",
        )

    capacity = float(device.battery_capacity)
    score = clamp_score(_bucket(capacity, BATTERY_TIERS, 10.0))
    return ComponentScore(
        name="battery",
        raw_value=capacity,
        score=score,
        reason=f"Battery {score:.0f}/100: {capacity:g}mAh",
    )


# =============================================================================
# CAMERA COMPONENT
# =============================================================================

MAIN_CAMERA_TIERS = (
    (200, 70.0),
    (108, 60.0),
    (64, 50.0),
    (48, 40.0),
    (24, 30.0),
)

FRONT_CAMERA_TIERS = (
    (50, 30.0),
    (32, 25.0),
    (24, 20.0),
    (16, 15.0),
    (8, 10.0),
)


def compute_camera(device: DeviceRecord) -> ComponentScore:
    """
    Compute camera score from main (max 70) and front (max 30) megapixels.

    Main: >= 200: 70, >= 108: 60, >= 64: 50, >= 48: 40, >= 24: 30, lower: 20
    Front: >= 50: 30, >= 32: 25, >= 24: 20, >= 16: 15, >= 8: 10, lower: 5
    Unknown cameras earn nothing.
    """
    parts = []

    main_score = 0.0
    if _present(device.main_camera_mp):
        main_score = _bucket(float(device.main_camera_mp), MAIN_CAMERA_TIERS, 20.0)
        parts.append(f"{device.main_camera_mp:g}MP main (+{main_score:.0f})")
    else:
        parts.append("main camera unknown (+0)")

    front_score = 0.0
    if _present(device.front_camera_mp):
        front_score = _bucket(float(device.front_camera_mp), FRONT_CAMERA_TIERS, 5.0)
        parts.append(f"{device.front_camera_mp:g}MP front (+{front_score:.0f})")
    else:
        parts.append("front camera unknown (+0)")

    score = clamp_score(main_score + front_score)
    return ComponentScore(
        name="camera",
        raw_value=float(device.main_camera_mp) if _present(device.main_camera_mp) else 0.0,
        score=score,
        reason=f"Camera {score:.0f}/100: {', '.join(parts)}",
    )


# =============================================================================
# DISPLAY COMPONENT
# =============================================================================

DISPLAY_TIERS = (
    (6.7, 95.0),
    (6.5, 90.0),
    (6.3, 85.0),
    (6.1, 80.0),
    (5.8, 75.0),
    (5.5, 70.0),
    (5.0, 65.0),
)


def compute_display(device: DeviceRecord) -> ComponentScore:
    """
    Compute display score from diagonal size in inches.

    Unknown size gets the neutral score (50) so missing data neither
    rewards nor penalizes the device.
    """
    if not _present(device.display_size):
        return ComponentScore(
            name="display",
            raw_value=0.0,
            score=NEUTRAL_DISPLAY_SCORE,
            reason=f"Display {NEUTRAL_DISPLAY_SCORE:.0f}/100: size unknown (neutral)",
        )

    size = float(device.display_size)
    score = clamp_score(_bucket(size, DISPLAY_TIERS, 50.0))
    return ComponentScore(
        name="display",
        raw_value=size,
        score=score,
        reason=f"Display {score:.0f}/100: {size:g}\" screen",
    )


# =============================================================================
# BUILD COMPONENT
# =============================================================================

BUILD_BASE_SCORE = 50.0

WEIGHT_BONUSES = (
    (150, 15.0),
    (180, 10.0),
    (200, 5.0),
)


def compute_build(device: DeviceRecord) -> ComponentScore:
    """
    Compute build quality from features.

    Base 50, plus:
    - Water resistance: IP68 +20, IP67 +15, other IP rating +10
    - Weight (if known): <= 150g +15, <= 180g +10, <= 200g +5
    - Fingerprint +5, face unlock +5, wireless charging +5
    """
    score = BUILD_BASE_SCORE
    parts = ["base 50"]

    rating = device.water_resistance or ""
    if "IP68" in rating:
        score += 20
        parts.append("IP68 +20")
    elif "IP67" in rating:
        score += 15
        parts.append("IP67 +15")
    elif "IP" in rating:
        score += 10
        parts.append(f"{rating} +10")

    if _present(device.weight):
        bonus = _bucket_at_most(float(device.weight), WEIGHT_BONUSES, 0.0)
        if bonus:
            score += bonus
            parts.append(f"{device.weight:g}g +{bonus:.0f}")

    features = [f.lower() for f in device.security_features if f]
    if any("fingerprint" in f for f in features):
        score += 5
        parts.append("fingerprint +5")
    if any("face" in f for f in features):
        score += 5
        parts.append("face unlock +5")
    if _present(device.wireless_charging):
        score += 5
        parts.append("wireless charging +5")

    score = clamp_score(score)
    return ComponentScore(
        name="build",
        raw_value=float(device.weight) if _present(device.weight) else 0.0,
        score=score,
        reason=f"Build {score:.0f}/100: {', '.join(parts)}",
    )


# =============================================================================
# PRICE COMPONENT
# =============================================================================

PRICE_TIERS = (
    (200, 100.0),
    (400, 85.0),
    (600, 70.0),
    (800, 55.0),
    (1000, 40.0),
    (1200, 25.0),
)


def to_common_price(price: float, currency: Optional[str], config: EngineConfig) -> float:
    """Convert a price to the common unit. Only NPR is converted."""
    if currency == NPR_CURRENCY:
        return price / config.npr_rate
    return price


def compute_price(device: DeviceRecord, config: EngineConfig) -> ComponentScore:
    """
    Compute price score (cheaper scores higher).

    Uses current price, falling back to launch price. Unknown price: 0.
    - <= 200: 100, <= 400: 85, <= 600: 70, <= 800: 55,
      <= 1000: 40, <= 1200: 25, more: 10
    """
    price = None
    for candidate in (device.current_price, device.launch_price):
        if _present(candidate):
            price = float(candidate)
            break

    if price is None:
        return ComponentScore(
            name="price",
            raw_value=0.0,
            score=0.0,
            reason="Price 0/100: price unknown",
        )

    common = to_common_price(price, device.currency, config)
    score = clamp_score(_bucket_at_most(common, PRICE_TIERS, 10.0))

    if device.currency == NPR_CURRENCY:
        shown = f"NPR {price:,.0f} (~{common:,.0f})"
    else:
        shown = f"{common:,.0f}"

    return ComponentScore(
        name="price",
        raw_value=common,
        score=score,
        reason=f"Price {score:.0f}/100: {shown}",
    )


# =============================================================================
# REVIEWS COMPONENT
# =============================================================================

MAX_REVIEW_COUNT_BONUS = 15.0
REVIEW_COUNT_BONUS_PER_REVIEW = 0.5


def compute_reviews(device: DeviceRecord) -> ComponentScore:
    """
    Compute reviews score from ratings and review count.

    - No reviews: 50 (neutral)
    - Otherwise: (average - 1) * 25 maps 1-5 stars to 0-100,
      plus min(count * 0.5, 15) for confidence
    """
    count = device.effective_review_count
    ratings = [r for r in device.review_ratings if r is not None and math.isfinite(r)]

    if count == 0:
        return ComponentScore(
            name="reviews",
            raw_value=0.0,
            score=NEUTRAL_REVIEWS_SCORE,
            reason=f"Reviews {NEUTRAL_REVIEWS_SCORE:.0f}/100: no reviews (neutral)",
        )

    # Count known but no individual ratings to average
    if not ratings:
        return ComponentScore(
            name="reviews",
            raw_value=0.0,
            score=NEUTRAL_REVIEWS_SCORE,
            reason=f"Reviews {NEUTRAL_REVIEWS_SCORE:.0f}/100: {count} reviews without ratings (neutral)",
        )

    average = sum(ratings) / len(ratings)
    rating_score = (average - 1) * 25
    count_bonus = min(count * REVIEW_COUNT_BONUS_PER_REVIEW, MAX_REVIEW_COUNT_BONUS)

    score = clamp_score(rating_score + count_bonus)
    return ComponentScore(
        name="reviews",
        raw_value=average,
        score=score,
        reason=(
            f"Reviews {score:.0f}/100: {average:.1f} stars avg "
            f"from {count} reviews (+{count_bonus:g} confidence)"
        ),
    )


# =============================================================================
# RECENCY COMPONENT
# =============================================================================

RECENCY_TIERS = (
    (3, 100.0),
    (6, 90.0),
    (12, 80.0),
    (18, 70.0),
    (24, 60.0),
    (36, 45.0),
    (48, 30.0),
)


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def months_since(release_date: date, reference_date: date) -> float:
    """Elapsed months, counting a month as 30 days. Timestamps count by calendar day."""
    return (_as_date(reference_date) - _as_date(release_date)).days / DAYS_PER_MONTH


def compute_recency(device: DeviceRecord, reference_date: Optional[date] = None) -> ComponentScore:
    """
    Compute recency from months since release.

    - <= 3: 100, <= 6: 90, <= 12: 80, <= 18: 70, <= 24: 60,
      <= 36: 45, <= 48: 30, older: 15
    - Unknown release date: 25 (neutral)
    """
    if device.release_date is None:
        return ComponentScore(
            name="recency",
            raw_value=0.0,
            score=NEUTRAL_RECENCY_SCORE,
            reason=f"Recency {NEUTRAL_RECENCY_SCORE:.0f}/100: release date unknown (neutral)",
        )

    if reference_date is None:
        reference_date = date.today()

    months = months_since(device.release_date, reference_date)
    score = clamp_score(_bucket_at_most(months, RECENCY_TIERS, 15.0))
    return ComponentScore(
        name="recency",
        raw_value=months,
        score=score,
        reason=f"Recency {score:.0f}/100: released {_as_date(device.release_date).isoformat()} ({months:.1f} months ago)",
    )
