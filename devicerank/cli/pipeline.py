"""
Ranking Pipeline for the DeviceRank Engine.

Ties the stages together into a single execution flow:

    1. Weight resolution (preset or custom overrides)
    2. Per-device scoring
    3. Aggregation and ranking

The pipeline is read-only and deterministic for a given reference date.
No persistence. No filtering.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence

from ..config import EngineConfig
from ..domain import DeviceRecord, RankedResult
from ..ranking.scorer import Ranker, ScoringEngine, paginate
from ..weighting.presets import PresetRegistry
from ..weighting.resolver import WeightRequest, WeightResolution, WeightResolver


# =============================================================================
# PIPELINE RESULT
# =============================================================================

@dataclass
class RankingRun:
    """
    Complete result of one ranking request.

    Exposes:
    - All ranked results, in rank order
    - How the weights were resolved (including warnings)
    - The engine used, so explanations match the scores exactly
    """
    results: list[RankedResult]
    resolution: WeightResolution
    engine: ScoringEngine
    reference_date: date = field(default_factory=date.today)

    @property
    def weights(self):
        return self.resolution.weights

    def get_result_by_id(self, device_id: str) -> Optional[RankedResult]:
        """Find a ranked device by its id."""
        for result in self.results:
            if result.device_id == device_id:
                return result
        return None

    def page(self, offset: int = 0, limit: Optional[int] = None) -> list[RankedResult]:
        return paginate(self.results, offset, limit)


# =============================================================================
# PIPELINE EXECUTION
# =============================================================================

def run_ranking(
    devices: Sequence[DeviceRecord],
    request: Optional[WeightRequest] = None,
    config: Optional[EngineConfig] = None,
    registry: Optional[PresetRegistry] = None,
    reference_date: Optional[date] = None,
    max_workers: Optional[int] = None,
) -> RankingRun:
    """
    Execute a full ranking request.

    Args:
        devices: Catalog devices, already filtered by the caller
        request: Preset name and/or custom weight overrides
        config: Engine configuration (defaults to EngineConfig.from_env())
        registry: Preset registry (defaults to the shipped presets)
        reference_date: "Today" for recency scoring (defaults to today)
        max_workers: Thread count for scoring; None or 1 scores serially

    Returns:
        RankingRun with ranked results and the weight audit trail
    """
    if config is None:
        config = EngineConfig.from_env()
    if reference_date is None:
        reference_date = date.today()

    resolution = WeightResolver(registry).resolve_with_report(request)
    engine = ScoringEngine(config=config, reference_date=reference_date)
    results = Ranker(engine, max_workers=max_workers).rank(devices, resolution.weights)

    return RankingRun(
        results=results,
        resolution=resolution,
        engine=engine,
        reference_date=reference_date,
    )
