"""
Weight Resolver for the DeviceRank Engine.

Turns a weight request (preset name and/or custom coefficient overrides)
into a validated WeightVector.

Contract: resolution never fails.
    - Valid custom overrides win over a preset name
    - Overrides are laid over the default coefficients, then renormalized
    - Unknown presets and unusable overrides fall back to the default preset

Every fallback is recorded as a warning on the WeightResolution and
logged, so the caller can surface typos without breaking the contract.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from ..domain import CATEGORIES, WeightVector
from .presets import PresetRegistry, default_registry

logger = logging.getLogger(__name__)


# Query-style parameter prefix for custom weights, e.g. w_performance=0.4
WEIGHT_PARAM_PREFIX = "w_"
PRESET_PARAM = "preset"


# =============================================================================
# REQUEST / RESULT
# =============================================================================

@dataclass(frozen=True)
class WeightRequest:
    """
    A caller's weight request.

    overrides may be partial. A value of None, NaN, infinity or a negative
    number counts as "not supplied".
    """
    preset: Optional[str] = None
    overrides: Mapping[str, Optional[float]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "overrides", MappingProxyType(dict(self.overrides)))


class WeightSource:
    """Where a resolved vector came from."""
    PRESET = "preset"
    CUSTOM = "custom"
    DEFAULT = "default"


@dataclass(frozen=True)
class WeightResolution:
    """A resolved WeightVector plus the audit trail of how it was chosen."""
    weights: WeightVector
    source: str
    preset_name: Optional[str] = None
    warnings: tuple[str, ...] = ()


# =============================================================================
# RESOLVER
# =============================================================================

class WeightResolver:
    """
    Resolves weight requests against an injected PresetRegistry.
    """

    def __init__(self, registry: Optional[PresetRegistry] = None):
        self.registry = registry if registry is not None else default_registry()

    def resolve(self, request: Optional[WeightRequest] = None) -> WeightVector:
        """Resolve a request to a WeightVector. Never raises."""
        return self.resolve_with_report(request).weights

    def resolve_with_report(self, request: Optional[WeightRequest] = None) -> WeightResolution:
        """
        Resolve a request and report how the vector was chosen.

        Resolution order:
        1. Any valid custom override → overlay on defaults, renormalize
        2. Known preset name → that preset, verbatim
        3. Otherwise → the default preset
        """
        if request is None:
            request = WeightRequest()

        warnings: list[str] = []
        overrides = self._valid_overrides(request.overrides, warnings)

        if overrides:
            resolution = self._resolve_custom(overrides, warnings)
        else:
            resolution = self._resolve_preset(request.preset, warnings)

        for message in resolution.warnings:
            logger.warning("Weight resolution: %s", message)

        return resolution

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _valid_overrides(
        self,
        overrides: Mapping[str, Any],
        warnings: list[str],
    ) -> dict[str, float]:
        valid: dict[str, float] = {}
        for name, value in overrides.items():
            if name not in CATEGORIES:
                warnings.append(f"unknown weight '{name}' ignored")
                continue
            if value is None:
                continue
            if not _is_usable_weight(value):
                warnings.append(f"invalid value {value!r} for weight '{name}' ignored")
                continue
            valid[name] = float(value)
        return valid

    def _resolve_custom(
        self,
        overrides: Mapping[str, float],
        warnings: list[str],
    ) -> WeightResolution:
        merged = dict(self.registry.default_coefficients)
        merged.update(overrides)

        # Scale by the largest coefficient so the sum cannot overflow
        peak = max(merged.values())
        if peak == 0:
            warnings.append("custom weights sum to 0, using default preset")
            return WeightResolution(
                weights=self.registry.default,
                source=WeightSource.DEFAULT,
                preset_name=self.registry.default_name,
                warnings=tuple(warnings),
            )

        scaled = {name: merged[name] / peak for name in CATEGORIES}
        total = math.fsum(scaled.values())
        weights = WeightVector.from_mapping(
            {name: scaled[name] / total for name in CATEGORIES}
        )
        return WeightResolution(
            weights=weights,
            source=WeightSource.CUSTOM,
            warnings=tuple(warnings),
        )

    def _resolve_preset(
        self,
        preset: Optional[str],
        warnings: list[str],
    ) -> WeightResolution:
        if preset is None or preset == "":
            return WeightResolution(
                weights=self.registry.default,
                source=WeightSource.DEFAULT,
                preset_name=self.registry.default_name,
                warnings=tuple(warnings),
            )

        if preset in self.registry:
            return WeightResolution(
                weights=self.registry[preset],
                source=WeightSource.PRESET,
                preset_name=preset,
                warnings=tuple(warnings),
            )

        warnings.append(
            f"unknown preset '{preset}', using '{self.registry.default_name}'"
        )
        return WeightResolution(
            weights=self.registry.default,
            source=WeightSource.DEFAULT,
            preset_name=self.registry.default_name,
            warnings=tuple(warnings),
        )


def _is_usable_weight(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value >= 0


# =============================================================================
# QUERY PARAMETER PARSING
# =============================================================================

def parse_weight_params(params: Mapping[str, Any]) -> WeightRequest:
    """
    Build a WeightRequest from query-style parameters.

    Recognized keys:
        preset          — preset name
        w_<category>    — custom coefficient, e.g. w_camera=0.5

    Values that do not parse as numbers are treated as "not supplied".
    """
    preset = params.get(PRESET_PARAM)
    if preset is not None:
        preset = str(preset).strip() or None

    overrides: dict[str, Optional[float]] = {}
    for name in CATEGORIES:
        raw = params.get(f"{WEIGHT_PARAM_PREFIX}{name}")
        if raw is None:
            continue
        overrides[name] = parse_weight_value(raw)

    return WeightRequest(preset=preset, overrides=overrides)


def parse_weight_value(raw: Any) -> Optional[float]:
    """Parse one override value; anything unreadable is None ("not supplied")."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    try:
        return float(str(raw).strip())
    except ValueError:
        return None


_default_resolver: Optional[WeightResolver] = None


def resolve_weights(request: Optional[WeightRequest] = None) -> WeightVector:
    """Resolve a request against the shipped presets."""
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = WeightResolver()
    return _default_resolver.resolve(request)
