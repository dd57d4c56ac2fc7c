"""Win probability for a head-to-head pair.

One tiered heuristic, parameterized by ``ProbabilityModel``.

Tiers, first match wins:

1. both sides pre-game -> ``None``
2. both sides at or below zero -> ``None``
3. combined points positive but below ``low_signal_total`` -> ``low_signal_value``
4. both sides scored -> piecewise-linear advantage curve on the differential
5. projections for both -> gentle linear scaling of the projection gap
6. otherwise -> ``None``

Defined results are clamped strictly inside ``(floor, ceiling)``.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class ProbabilityModel:
    low_signal_total: float = 10.0
    low_signal_value: float | None = 0.5
    tie_band: float = 0.1
    small_margin: float = 5.0
    large_margin: float = 15.0
    small_rate: float = 0.08
    mid_rate: float = 0.03
    large_rate: float = 0.01
    max_extra_shift: float = 0.2
    projection_scale: float = 80.0
    projection_weight: float = 0.2
    floor: float = 0.10
    ceiling: float = 0.90
    edge: float = 0.001

    def __post_init__(self) -> None:
        if not 0.0 <= self.floor < 0.5 < self.ceiling <= 1.0:
            raise ValueError("probability bounds must satisfy 0 <= floor < 0.5 < ceiling <= 1")
        if not 0.0 < self.edge < (self.ceiling - self.floor) / 2:
            raise ValueError("edge must be positive and smaller than half the clamp width")

    @classmethod
    def from_overrides(cls, overrides: Mapping[str, Any] | None) -> "ProbabilityModel":
        base = cls()
        if not overrides:
            return base
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown probability settings: {sorted(unknown)}")
        return replace(base, **dict(overrides))

    def advantage_shift(self, margin: float) -> float:
        """Probability shift for an absolute point margin."""
        if margin < self.small_margin:
            return margin * self.small_rate
        small_width = self.small_margin * self.small_rate
        if margin < self.large_margin:
            return small_width + (margin - self.small_margin) * self.mid_rate
        mid_width = small_width + (self.large_margin - self.small_margin) * self.mid_rate
        return mid_width + min((margin - self.large_margin) * self.large_rate, self.max_extra_shift)

    def clamp(self, p: float) -> float:
        return max(self.floor + self.edge, min(self.ceiling - self.edge, p))


DEFAULT_MODEL = ProbabilityModel()


def win_probability(
    points_a: float | None,
    points_b: float | None,
    projection_a: float = 0.0,
    projection_b: float = 0.0,
    model: ProbabilityModel = DEFAULT_MODEL,
) -> float | None:
    """Probability that side A wins; side B is ``1 - p``."""
    if points_a is None and points_b is None:
        return None
    a = points_a or 0.0
    b = points_b or 0.0
    if a <= 0 and b <= 0:
        return None
    if 0 < a + b < model.low_signal_total:
        p = model.low_signal_value
    elif points_a is not None and points_b is not None:
        diff = points_a - points_b
        if abs(diff) < model.tie_band:
            p = 0.5
        else:
            shift = model.advantage_shift(abs(diff))
            p = 0.5 + shift if diff > 0 else 0.5 - shift
    elif projection_a > 0 and projection_b > 0:
        p = 0.5 + (projection_a - projection_b) / model.projection_scale * model.projection_weight
    else:
        p = None
    return model.clamp(p) if p is not None else None
