"""
Engine configuration for the DeviceRank Engine.

Everything the scorers treat as tunable data lives here and is injected
at construction time:

    npr_rate                 — NPR per common price unit (fixed FX constant)
    chipset_rules            — ordered (keyword, points) chipset tiers
    fallback_chipset_points  — points for a non-empty, unmatched chipset

The FX constant can be overridden by the embedding application without
code changes via the DEVICERANK_NPR_RATE environment variable.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from typing import Optional

from .domain import ConfigError

logger = logging.getLogger(__name__)


# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_NPR_RATE = 130.0
NPR_RATE_ENV_VAR = "DEVICERANK_NPR_RATE"


@dataclass(frozen=True)
class ChipsetRule:
    """A single chipset tier rule: substring keyword and the points it earns."""
    keyword: str
    points: float


# Ordered by priority. First keyword found in the chipset label wins.
DEFAULT_CHIPSET_RULES: tuple[ChipsetRule, ...] = (
    ChipsetRule("snapdragon 8", 50),
    ChipsetRule("a17", 50),
    ChipsetRule("a16", 50),
    ChipsetRule("snapdragon 7", 40),
    ChipsetRule("a15", 40),
    ChipsetRule("a14", 40),
    ChipsetRule("snapdragon 6", 30),
    ChipsetRule("dimensity 9", 30),
    ChipsetRule("dimensity 8", 25),
    ChipsetRule("exynos", 25),
)

DEFAULT_FALLBACK_CHIPSET_POINTS = 15.0


# =============================================================================
# ENGINE CONFIG
# =============================================================================

@dataclass(frozen=True)
class EngineConfig:
    """
    Immutable scoring configuration.

    Raises:
        ConfigError: If the FX rate is not a positive finite number,
            or a chipset rule has an empty keyword or invalid points
    """
    npr_rate: float = DEFAULT_NPR_RATE
    chipset_rules: tuple[ChipsetRule, ...] = DEFAULT_CHIPSET_RULES
    fallback_chipset_points: float = DEFAULT_FALLBACK_CHIPSET_POINTS

    def __post_init__(self):
        if not _is_positive_number(self.npr_rate):
            raise ConfigError(f"npr_rate must be a positive finite number, got {self.npr_rate!r}")

        # Accept any iterable of rules, store as a tuple
        object.__setattr__(self, "chipset_rules", tuple(self.chipset_rules))
        for rule in self.chipset_rules:
            if not rule.keyword or not rule.keyword.strip():
                raise ConfigError("chipset rule keyword must be non-empty")
            if not math.isfinite(rule.points) or rule.points < 0:
                raise ConfigError(
                    f"chipset rule '{rule.keyword}' has invalid points {rule.points!r}"
                )

        if not math.isfinite(self.fallback_chipset_points) or self.fallback_chipset_points < 0:
            raise ConfigError(
                f"fallback_chipset_points must be >= 0, got {self.fallback_chipset_points!r}"
            )

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> EngineConfig:
        """
        Build a config, reading the FX rate override from the environment.

        An unparseable or non-positive override is logged and ignored;
        the documented default is kept.
        """
        env = os.environ if environ is None else environ
        raw = env.get(NPR_RATE_ENV_VAR)
        if raw is None or not raw.strip():
            return cls()

        try:
            rate = float(raw)
        except ValueError:
            rate = None

        if rate is None or not _is_positive_number(rate):
            logger.warning(
                "Ignoring %s=%r, using default NPR rate %s",
                NPR_RATE_ENV_VAR, raw, DEFAULT_NPR_RATE,
            )
            return cls()

        logger.debug("Using NPR rate %s from %s", rate, NPR_RATE_ENV_VAR)
        return cls(npr_rate=rate)


def _is_positive_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0
