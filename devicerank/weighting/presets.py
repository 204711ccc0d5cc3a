"""
Preset Registry for the DeviceRank Engine.

An immutable table of named WeightVectors, each reflecting a usage
profile. The registry is injected into the WeightResolver, so tests and
embedding applications can substitute their own presets.

Each preset is stored twice:
    - raw coefficients, exactly as tuned
    - a WeightVector, the raw coefficients normalized once at construction

The raw coefficients of the default preset are the starting point that
custom overrides are laid over.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from ..domain import CATEGORIES, WeightValidationError, WeightVector


# =============================================================================
# PRESET DATA
# =============================================================================

DEFAULT_PRESET_NAME = "balanced"

# Default coefficients, also the base for custom overrides
DEFAULT_WEIGHTS: Mapping[str, float] = MappingProxyType({
    "performance": 0.25,
    "battery": 0.15,
    "camera": 0.20,
    "display": 0.15,
    "build": 0.10,
    "price": 0.10,
    "reviews": 0.15,
    "recency": 0.05,
})

RANKING_PRESETS: Mapping[str, Mapping[str, float]] = MappingProxyType({
    "balanced": DEFAULT_WEIGHTS,
    # Over-weights performance and battery
    "gaming": MappingProxyType({
        "performance": 0.40,
        "battery": 0.20,
        "camera": 0.10,
        "display": 0.15,
        "build": 0.05,
        "price": 0.05,
        "reviews": 0.10,
        "recency": 0.05,
    }),
    # Over-weights camera
    "photography": MappingProxyType({
        "performance": 0.15,
        "battery": 0.10,
        "camera": 0.45,
        "display": 0.15,
        "build": 0.05,
        "price": 0.05,
        "reviews": 0.15,
        "recency": 0.05,
    }),
    # Over-weights price
    "budget": MappingProxyType({
        "performance": 0.20,
        "battery": 0.15,
        "camera": 0.15,
        "display": 0.10,
        "build": 0.10,
        "price": 0.40,
        "reviews": 0.15,
        "recency": 0.05,
    }),
    # Over-weights performance, battery and build
    "enterprise": MappingProxyType({
        "performance": 0.25,
        "battery": 0.25,
        "camera": 0.05,
        "display": 0.10,
        "build": 0.20,
        "price": 0.10,
        "reviews": 0.10,
        "recency": 0.05,
    }),
})


# =============================================================================
# REGISTRY
# =============================================================================

class PresetRegistry(Mapping[str, WeightVector]):
    """
    Read-only mapping from preset name to WeightVector.

    Names keep their declaration order so the HTTP layer can list them
    in a stable order.

    Raises:
        WeightValidationError: If a preset is incomplete, not normalizable,
            or the default preset name is missing
    """

    def __init__(
        self,
        presets: Mapping[str, Mapping[str, float]],
        default_name: str = DEFAULT_PRESET_NAME,
    ):
        if default_name not in presets:
            raise WeightValidationError(
                f"default preset '{default_name}' is not in the registry"
            )

        raw: dict[str, Mapping[str, float]] = {}
        vectors: dict[str, WeightVector] = {}
        for name, coefficients in presets.items():
            missing = [c for c in CATEGORIES if c not in coefficients]
            if missing:
                raise WeightValidationError(
                    f"preset '{name}' is missing weights: {', '.join(missing)}"
                )
            frozen = {c: float(coefficients[c]) for c in CATEGORIES}
            raw[name] = MappingProxyType(frozen)
            vectors[name] = WeightVector.normalized(frozen)

        self._raw = MappingProxyType(raw)
        self._vectors = MappingProxyType(vectors)
        self._default_name = default_name

    def __getitem__(self, name: str) -> WeightVector:
        return self._vectors[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._vectors)

    def __len__(self) -> int:
        return len(self._vectors)

    def __repr__(self) -> str:
        return f"PresetRegistry({list(self._vectors)!r}, default={self._default_name!r})"

    @property
    def default_name(self) -> str:
        return self._default_name

    @property
    def default(self) -> WeightVector:
        """The default preset vector."""
        return self._vectors[self._default_name]

    @property
    def default_coefficients(self) -> Mapping[str, float]:
        """Raw default coefficients, the base for custom overrides."""
        return self._raw[self._default_name]

    def names(self) -> tuple[str, ...]:
        """All preset names in declaration order."""
        return tuple(self._vectors)


_default_registry: Optional[PresetRegistry] = None


def default_registry() -> PresetRegistry:
    """The shipped presets. Built once and shared, since it is immutable."""
    global _default_registry
    if _default_registry is None:
        _default_registry = PresetRegistry(RANKING_PRESETS)
    return _default_registry
