# support_hull/config.py
from __future__ import annotations

from dataclasses import dataclass, field

from support_hull.models.plane import FixedHorizontal, PlaneEstimation


@dataclass(frozen=True)
class HullConfig:
    """Parameters of the hull -> halfplane conversion."""
    ch_boundary: float = 1e-2   # |c| at or below this clamps the bound to 0
    margin: float = 1e-2        # subtracted from every non-clamped bound
    normalize_rows: bool = False
    plane: PlaneEstimation = field(default_factory=FixedHorizontal)
    m_target: int = 8

    def __post_init__(self):
        if self.ch_boundary < 0.0:
            raise ValueError("ch_boundary must be >= 0")
        if self.margin < 0.0:
            raise ValueError("margin must be >= 0")
        if self.m_target < 3:
            raise ValueError(f"m_target must be >= 3, got {self.m_target}")
