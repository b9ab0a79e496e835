# support_hull/models/plane.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

logger = logging.getLogger(__name__)

_HORIZONTAL = np.array([0.0, 0.0, 1.0, 0.0], dtype=float)


@dataclass(frozen=True)
class FixedHorizontal:
    """Plane with normal (0, 0, 1) through the origin of the reference frame."""

    def coefficients(self, points: np.ndarray) -> np.ndarray:
        return _HORIZONTAL.copy()


@dataclass(frozen=True)
class RansacFit:
    """
    RANSAC plane fit through the contact points, refined by least squares
    on the inliers. Falls back to the horizontal plane when no plane can
    be fit (fewer than 3 points, or every sample collinear).
    """
    tolerance: float = 0.001
    iterations: int = 200
    seed: Optional[int] = 0

    def coefficients(self, points: np.ndarray) -> np.ndarray:
        P = np.asarray(points, dtype=float).reshape(-1, 3)
        n_pts = P.shape[0]
        if n_pts < 3:
            logger.warning("RANSAC needs 3 points, got %d; using horizontal plane", n_pts)
            return _HORIZONTAL.copy()

        rng = np.random.default_rng(self.seed)
        best_inliers = None
        best_count = 0
        for _ in range(self.iterations):
            i0, i1, i2 = rng.choice(n_pts, size=3, replace=False)
            n = np.cross(P[i1] - P[i0], P[i2] - P[i0])
            nn = np.linalg.norm(n)
            if nn < 1e-12:
                continue
            n = n / nn
            d = -float(n @ P[i0])
            inliers = np.abs(P @ n + d) <= self.tolerance
            count = int(np.count_nonzero(inliers))
            if count > best_count:
                best_count = count
                best_inliers = inliers

        if best_inliers is None:
            logger.warning("RANSAC found no non-degenerate sample; using horizontal plane")
            return _HORIZONTAL.copy()

        # least-squares refinement: normal = smallest singular vector of the centred inliers
        Q = P[best_inliers]
        c = Q.mean(axis=0)
        _, _, Vt = np.linalg.svd(Q - c)
        n = Vt[-1]
        if n[2] < 0.0:
            n = -n
        d = -float(n @ c)
        logger.debug("RANSAC plane n=%s d=%.4f (%d/%d inliers)", n, d, best_count, n_pts)
        return np.array([n[0], n[1], n[2], d], dtype=float)


PlaneEstimation = Union[FixedHorizontal, RansacFit]


def plane_basis(normal: np.ndarray):
    """
    Orthonormal in-plane axes (u, v) for a unit normal.
    For the horizontal normal this is the world x/y pair.
    """
    n = np.asarray(normal, dtype=float).reshape(3)
    n = n / np.linalg.norm(n)
    ex = np.array([1.0, 0.0, 0.0])
    u = ex - (ex @ n) * n
    if np.linalg.norm(u) < 1e-9:
        ey = np.array([0.0, 1.0, 0.0])
        u = ey - (ey @ n) * n
    u = u / np.linalg.norm(u)
    v = np.cross(n, u)
    return u, v


def project_to_plane(points, plane: PlaneEstimation | None = None) -> np.ndarray:
    """
    Orthogonally project 3D points onto the plane given by `plane` and
    return their 2D in-plane coordinates, shape (n, 2).

    With the default FixedHorizontal plane this simply drops z.
    Empty input gives a (0, 2) array.
    """
    P = np.asarray(points, dtype=float).reshape(-1, 3)
    if P.shape[0] == 0:
        return np.zeros((0, 2), dtype=float)

    plane = FixedHorizontal() if plane is None else plane
    coeffs = plane.coefficients(P)
    n, d = coeffs[0:3], float(coeffs[3])

    # p - (n.p + d) n
    projected = P - np.outer(P @ n + d, n)

    u, v = plane_basis(n)
    return np.column_stack((projected @ u, projected @ v))
