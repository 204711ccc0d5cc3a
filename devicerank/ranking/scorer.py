"""
Device Scorer for the DeviceRank Engine.

Deterministic device ranking with full explainability.

Core principle:
    Every total is a weighted sum of eight independent sub-scores,
    and every sub-score carries a human-readable reason.

Score composition:
    total = sum(sub_score[c] * weight[c] for each category c)
    rounded to 2 decimals, always in [0, 100]

Ranking:
    Sorted by total descending. Ties keep input order. Ranks are
    dense and distinct: position + 1.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..config import EngineConfig
from ..domain import (
    CATEGORIES,
    MAX_SCORE,
    MIN_SCORE,
    DeviceRecord,
    RankedResult,
    ScoreBreakdown,
    ScoringInvariantError,
    WeightVector,
)
from .components import (
    ComponentScore,
    compute_battery,
    compute_build,
    compute_camera,
    compute_display,
    compute_performance,
    compute_price,
    compute_recency,
    compute_reviews,
)

logger = logging.getLogger(__name__)


# =============================================================================
# SCORING ENGINE
# =============================================================================

class ScoringEngine:
    """
    Computes the eight sub-scores for a device.

    Holds only immutable configuration and a fixed reference date, so one
    engine can be shared across threads.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        reference_date: Optional[date] = None,
    ):
        self.config = config if config is not None else EngineConfig()
        self.reference_date = reference_date if reference_date is not None else date.today()

    def components(self, device: DeviceRecord) -> list[ComponentScore]:
        """All eight component scores, in category order."""
        return [
            compute_performance(device, self.config),
            compute_battery(device),
            compute_camera(device),
            compute_display(device),
            compute_build(device),
            compute_price(device, self.config),
            compute_reviews(device),
            compute_recency(device, self.reference_date),
        ]

    def score(self, device: DeviceRecord) -> ScoreBreakdown:
        """Compute the ScoreBreakdown for one device."""
        return ScoreBreakdown(**{c.name: c.score for c in self.components(device)})


# =============================================================================
# AGGREGATOR
# =============================================================================

def aggregate(breakdown: ScoreBreakdown, weights: WeightVector) -> float:
    """
    Fold a breakdown into a total score.

    Raises:
        ScoringInvariantError: If the total is not finite or leaves [0, 100]
    """
    total = math.fsum(
        getattr(breakdown, name) * getattr(weights, name)
        for name in CATEGORIES
    )
    total = round(total, 2)

    if not math.isfinite(total) or not (MIN_SCORE <= total <= MAX_SCORE):
        raise ScoringInvariantError(
            f"total score {total!r} outside [{MIN_SCORE}, {MAX_SCORE}] for breakdown {breakdown}"
        )
    return total


# =============================================================================
# RANKER
# =============================================================================

@dataclass(frozen=True)
class _ScoredDevice:
    """A scored device carrying its original input position."""
    index: int
    device: DeviceRecord
    breakdown: ScoreBreakdown
    total_score: float


class Ranker:
    """
    Scores and orders a device list.

    With max_workers > 1, per-device scoring runs on a thread pool.
    Each device's input index is captured before dispatch, so the final
    order never depends on completion order.
    """

    def __init__(
        self,
        engine: Optional[ScoringEngine] = None,
        max_workers: Optional[int] = None,
    ):
        self.engine = engine if engine is not None else ScoringEngine()
        self.max_workers = max_workers

    def _score_one(self, item: tuple[int, DeviceRecord], weights: WeightVector) -> _ScoredDevice:
        index, device = item
        breakdown = self.engine.score(device)
        return _ScoredDevice(
            index=index,
            device=device,
            breakdown=breakdown,
            total_score=aggregate(breakdown, weights),
        )

    def rank(self, devices: Sequence[DeviceRecord], weights: WeightVector) -> list[RankedResult]:
        """
        Score and rank all devices.

        Returns results sorted by total score (highest first), ties in
        input order, with rank = position + 1.
        """
        indexed = list(enumerate(devices))

        if self.max_workers and self.max_workers > 1 and len(indexed) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                scored = list(executor.map(lambda item: self._score_one(item, weights), indexed))
        else:
            scored = [self._score_one(item, weights) for item in indexed]

        ordered = sorted(scored, key=lambda s: (-s.total_score, s.index))

        logger.debug(
            "Ranked %d devices (workers=%s, reference_date=%s)",
            len(ordered), self.max_workers or 1, self.engine.reference_date,
        )

        return [
            RankedResult(
                device=s.device,
                total_score=s.total_score,
                breakdown=s.breakdown,
                rank=position + 1,
            )
            for position, s in enumerate(ordered)
        ]


def rank_devices(
    devices: Sequence[DeviceRecord],
    weights: WeightVector,
    config: Optional[EngineConfig] = None,
    reference_date: Optional[date] = None,
    max_workers: Optional[int] = None,
) -> list[RankedResult]:
    """
    Rank devices with a one-off engine.

    This is the main entry point for embedding applications.
    """
    engine = ScoringEngine(config=config, reference_date=reference_date)
    return Ranker(engine, max_workers=max_workers).rank(devices, weights)


def paginate(
    results: Sequence[RankedResult],
    offset: int = 0,
    limit: Optional[int] = None,
) -> list[RankedResult]:
    """
    Slice ranked results for display. Ranks are not renumbered.

    A negative offset is treated as 0; a non-positive limit yields nothing.
    """
    offset = max(0, offset)
    if limit is None:
        return list(results[offset:])
    if limit <= 0:
        return []
    return list(results[offset:offset + limit])


# =============================================================================
# EXPLANATION GENERATION
# =============================================================================

def generate_explanation(
    result: RankedResult,
    weights: WeightVector,
    engine: ScoringEngine,
) -> str:
    """
    Generate a plain-English explanation of a ranking.

    This answers: "Why is this device ranked this way?"
    Reasons come from the same engine that produced the breakdown.
    """
    device = result.device
    contributions = result.breakdown.weighted(weights)

    lines = [
        f"**{device.name}** is ranked #{result.rank} with a score of {result.total_score:.2f}/100.",
        "",
        "**Score Breakdown:**",
    ]

    components = engine.components(device)
    for component in components:
        weight = getattr(weights, component.name)
        lines.append(
            f"- {component.reason} "
            f"(weight {weight:.1%}, contributes {contributions[component.name]:.2f})"
        )

    neutral = [c.name for c in components if "(neutral)" in c.reason]
    if neutral:
        lines.append("")
        lines.append("**Missing data (neutral scores used):** " + ", ".join(neutral))

    return "\n".join(lines)


def generate_short_explanation(result: RankedResult, weights: WeightVector) -> str:
    """
    Generate a one-line explanation for quick scanning.
    """
    contributions = result.breakdown.weighted(weights)
    strongest = max(CATEGORIES, key=lambda name: contributions[name])

    if contributions[strongest] <= 0:
        return f"#{result.rank} ({result.total_score:.2f} pts) — No category scored"

    return (
        f"#{result.rank} ({result.total_score:.2f} pts) — "
        f"strongest: {strongest} ({contributions[strongest]:.2f} pts)"
    )
