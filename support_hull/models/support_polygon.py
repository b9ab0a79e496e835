# support_hull/models/support_polygon.py
from __future__ import annotations

import logging

import numpy as np
from scipy.spatial import ConvexHull, QhullError

from support_hull.config import HullConfig
from support_hull.errors import HullDegenerate, MultiplePolygonsFound
from support_hull.models.contact_points import DEFAULT_CONTACT_FRAMES, support_polygon_points
from support_hull.models.plane import project_to_plane

logger = logging.getLogger(__name__)

_COLLINEAR_RTOL = 1e-6


def _degenerate(msg: str) -> HullDegenerate:
    logger.error("Error: degenerate support polygon: %s", msg)
    return HullDegenerate(msg)


def _chain_edges(simplices: np.ndarray):
    """
    Walk hull edges (pairs of vertex indices) into closed rings.
    Returns a list of index arrays, one per ring, in boundary order.
    """
    nbrs = {}
    for i, j in np.asarray(simplices, dtype=int).reshape(-1, 2):
        nbrs.setdefault(int(i), []).append(int(j))
        nbrs.setdefault(int(j), []).append(int(i))

    for v, adj in nbrs.items():
        if len(adj) != 2:
            raise _degenerate(f"hull vertex {v} has {len(adj)} boundary edges, expected 2")

    rings = []
    visited = set()
    for start in sorted(nbrs):
        if start in visited:
            continue
        ring = [start]
        visited.add(start)
        prev, cur = start, nbrs[start][0]
        while cur != start:
            ring.append(cur)
            visited.add(cur)
            a, b = nbrs[cur]
            prev, cur = cur, (b if a == prev else a)
        rings.append(np.array(ring, dtype=int))
    return rings


def hull_rings(points: np.ndarray):
    """
    Convex hull of a 2D point set as a list of ordered boundary rings,
    each an (N, 2) array. Raises HullDegenerate for < 3 distinct points
    or a collinear set.
    """
    P = np.asarray(points, dtype=float).reshape(-1, 2)
    if P.shape[0] > 0:
        P = np.unique(P, axis=0)
    if P.shape[0] < 3:
        raise _degenerate(f"need at least 3 distinct points, got {P.shape[0]}")

    # thin along its minor axis relative to its spread => collinear
    s = np.linalg.svd(P - P.mean(axis=0), compute_uv=False)
    if s[1] <= _COLLINEAR_RTOL * s[0]:
        raise _degenerate(f"points are collinear (singular values {s[0]:.3g}, {s[1]:.3g})")

    try:
        hull = ConvexHull(P)
    except QhullError as exc:
        raise _degenerate(f"qhull failed: {exc}") from exc

    return [P[idx] for idx in _chain_edges(hull.simplices)]


def convex_hull_ring(points: np.ndarray) -> np.ndarray:
    """Single ordered hull ring (N, 2); more than one ring is an error."""
    rings = hull_rings(points)
    if len(rings) != 1:
        logger.error("Error: %d polygons found, expected one", len(rings))
        raise MultiplePolygonsFound(len(rings))

    ring = rings[0]
    if logger.isEnabledFor(logging.DEBUG):
        for i, v in enumerate(ring):
            logger.debug("hull vertex %d (%f, %f)", i, v[0], v[1])
    return ring


def line_coefficients(p0: np.ndarray, p1: np.ndarray):
    """(a, b, c) with a*x + b*y + c == 0 on the line through p0 and p1."""
    x1, y1 = float(p0[0]), float(p0[1])
    x2, y2 = float(p1[0]), float(p1[1])
    a = y1 - y2
    b = x2 - x1
    c = -b * y1 - a * x1
    return a, b, c


def halfspaces_from_ring(ring: np.ndarray, config: HullConfig | None = None):
    """
    One halfspace per ring edge (j, (j+1) mod N), including the closing edge.
    Returns H (N x 2), h (N,) with H p <= h.

    Rows are signed so that h >= 0 before erosion, i.e. the origin of the
    reference frame lies on the feasible side. Edges whose line passes within
    ch_boundary of the origin get h == 0 exactly; all others are moved inward
    by config.margin. Without normalize_rows the margin is not a metric
    distance: the actual offset is margin / |(a, b)|.
    """
    config = HullConfig() if config is None else config
    ring = np.asarray(ring, dtype=float).reshape(-1, 2)
    n_edges = ring.shape[0]

    H = np.zeros((n_edges, 2), dtype=float)
    h = np.zeros((n_edges,), dtype=float)

    for j in range(n_edges):
        k = (j + 1) % n_edges
        a, b, c = line_coefficients(ring[j], ring[k])
        if config.normalize_rows:
            s = np.hypot(a, b)
            a, b, c = a / s, b / s, c / s

        if c <= 0.0:
            H[j, :] = (a, b)
            h[j] = -c
        else:
            H[j, :] = (-a, -b)
            h[j] = c

        if abs(c) <= config.ch_boundary:
            h[j] = 0.0
        else:
            h[j] -= config.margin

    return H, h


def origin_inside(ring: np.ndarray) -> bool:
    """True if (0, 0) lies inside or on the ring (either winding)."""
    ring = np.asarray(ring, dtype=float).reshape(-1, 2)
    nxt = np.roll(ring, -1, axis=0)
    # z of (p1 - p0) x (0 - p0) per edge
    cr = (nxt[:, 0] - ring[:, 0]) * (-ring[:, 1]) - (nxt[:, 1] - ring[:, 1]) * (-ring[:, 0])
    return bool(np.all(cr >= 0.0) or np.all(cr <= 0.0))


def pad_halfspaces(H: np.ndarray, h: np.ndarray, m_target: int = 8):
    """
    Pad halfspace constraints to fixed size:
      Hpad p <= hpad
    Padded rows are 0 <= +inf (never active).
    """
    m = H.shape[0]
    if m > m_target:
        raise ValueError(f"Too many hull halfspaces: {m} > {m_target}")

    Hpad = np.zeros((m_target, 2), dtype=float)
    hpad = np.full((m_target,), np.inf, dtype=float)

    Hpad[:m, :] = H
    hpad[:m] = h
    return Hpad, hpad


def margin_halfspaces(H: np.ndarray, h: np.ndarray, p: np.ndarray) -> float:
    """
    min_i (h_i - H_i p)
    Negative => violation.
    Works even with +inf padded h rows.
    """
    m = h - H @ np.asarray(p, dtype=float).reshape(2,)
    return float(np.min(m))


class ConvexHullConstraints:
    """
    Support polygon as linear constraints A x <= b on the horizontal plane.

    Contact points are projected onto the configured plane, their convex
    hull is computed and every hull edge becomes one row. Nothing is cached
    between calls.
    """

    def __init__(self, config: HullConfig | None = None):
        self.config = HullConfig() if config is None else config

    def get_constraints(self, points):
        """
        points: (n, 3) contact positions in the reference frame.
        Returns A (N x 2), b (N,) with N the number of hull edges.
        """
        P2 = project_to_plane(points, self.config.plane)
        ring = convex_hull_ring(P2)
        if not origin_inside(ring):
            logger.warning("Reference origin lies outside the support polygon; "
                           "constraint signs are not meaningful")
        return halfspaces_from_ring(ring, self.config)

    def get_padded_constraints(self, points):
        """Same as get_constraints, padded to config.m_target rows."""
        A, b = self.get_constraints(points)
        return pad_halfspaces(A, b, m_target=self.config.m_target)

    def get_support_polygon_points(self, robot, frames=DEFAULT_CONTACT_FRAMES) -> np.ndarray:
        return support_polygon_points(robot, frames)

    def from_robot(self, robot, frames=DEFAULT_CONTACT_FRAMES):
        """Constraints for the contact frames of a pose provider, relative to its CoM."""
        return self.get_constraints(self.get_support_polygon_points(robot, frames))
