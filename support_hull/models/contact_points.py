# support_hull/models/contact_points.py
from __future__ import annotations

from typing import Dict, Protocol, Sequence

import numpy as np

from support_hull.errors import CollaboratorLookupFailed

DEFAULT_CONTACT_FRAMES = (
    "l_foot_lower_left_link",
    "l_foot_lower_right_link",
    "l_foot_upper_left_link",
    "l_foot_upper_right_link",
    "r_foot_lower_left_link",
    "r_foot_lower_right_link",
    "r_foot_upper_left_link",
    "r_foot_upper_right_link",
)


class PoseProvider(Protocol):
    def link_position(self, name: str) -> np.ndarray:
        """Position (3,) of a link frame in the common world frame."""
        ...

    def com_position(self) -> np.ndarray:
        """Centre of mass (3,) in the same world frame."""
        ...


class StaticPoseProvider:
    """In-memory pose provider: fixed link positions and CoM."""

    def __init__(self, positions: Dict[str, np.ndarray], com: np.ndarray | None = None):
        self.positions = {k: np.asarray(v, dtype=float).reshape(3,) for k, v in positions.items()}
        self.com = np.zeros(3) if com is None else np.asarray(com, dtype=float).reshape(3,)

    def link_position(self, name: str) -> np.ndarray:
        # KeyError is a LookupError
        return self.positions[name].copy()

    def com_position(self) -> np.ndarray:
        return self.com.copy()


def support_polygon_points(robot: PoseProvider,
                           frames: Sequence[str] = DEFAULT_CONTACT_FRAMES) -> np.ndarray:
    """
    Position of each contact frame relative to the CoM, shape (len(frames), 3).
    The CoM frame is taken axis-aligned with the world frame.
    """
    com = np.asarray(robot.com_position(), dtype=float).reshape(3,)
    points = np.zeros((len(frames), 3), dtype=float)
    for i, name in enumerate(frames):
        try:
            p = robot.link_position(name)
        except LookupError as exc:
            raise CollaboratorLookupFailed(name, str(exc)) from exc
        points[i, :] = np.asarray(p, dtype=float).reshape(3,) - com
    return points


def rect_corners(center: np.ndarray, half_sizes: np.ndarray):
    """Corners of an axis-aligned rectangle: lower-left, lower-right, upper-left, upper-right."""
    cx, cy = float(center[0]), float(center[1])
    hx, hy = float(half_sizes[0]), float(half_sizes[1])
    return np.array([
        [cx - hx, cy - hy],
        [cx + hx, cy - hy],
        [cx - hx, cy + hy],
        [cx + hx, cy + hy],
    ], dtype=float)


def foot_corner_frames(center_L: np.ndarray,
                       center_R: np.ndarray,
                       half_sizes: np.ndarray,
                       z: float = 0.0) -> Dict[str, np.ndarray]:
    """
    Positions of the eight default foot-corner frames for two
    axis-aligned rectangular feet lying at height z.
    """
    frames = {}
    for side, center in (("l", center_L), ("r", center_R)):
        corners = rect_corners(center, half_sizes)
        for tag, (x, y) in zip(("lower_left", "lower_right", "upper_left", "upper_right"), corners):
            frames[f"{side}_foot_{tag}_link"] = np.array([x, y, z], dtype=float)
    return frames
