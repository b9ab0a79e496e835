# scripts/test_plane.py
from __future__ import annotations

import logging
import sys
from pathlib import Path

import numpy as np
import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from support_hull.models.plane import FixedHorizontal, RansacFit, plane_basis, project_to_plane


def test_fixed_plane_drops_z():
    P = np.array([[0.1, 0.2, 0.3], [-1.0, 2.0, -5.0], [0.1, 0.2, 0.3]])
    P2 = project_to_plane(P)
    assert P2.shape == (3, 2)
    assert np.array_equal(P2, P[:, 0:2])


def test_empty_input():
    P2 = project_to_plane(np.zeros((0, 3)))
    assert P2.shape == (0, 2)
    assert project_to_plane([], FixedHorizontal()).shape == (0, 2)


def test_input_not_modified():
    P = np.array([[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]])
    before = P.copy()
    project_to_plane(P)
    project_to_plane(P, RansacFit())
    assert np.array_equal(P, before)


def test_horizontal_basis_is_world_xy():
    u, v = plane_basis(np.array([0.0, 0.0, 1.0]))
    assert np.array_equal(u, [1.0, 0.0, 0.0])
    assert np.array_equal(v, [0.0, 1.0, 0.0])


def test_ransac_on_level_points_matches_fixed_plane():
    P = np.array([
        [ 0.1,  0.1, 0.3],
        [ 0.1, -0.1, 0.3],
        [-0.1, -0.1, 0.3],
        [-0.1,  0.1, 0.3],
        [ 0.0,  0.05, 0.3],
    ])
    coeffs = RansacFit().coefficients(P)
    assert np.allclose(coeffs, [0.0, 0.0, 1.0, -0.3], atol=1e-9)
    assert np.allclose(project_to_plane(P, RansacFit()), P[:, 0:2], atol=1e-9)


def test_ransac_rejects_outlier():
    xy = np.array([[x, y] for x in (-0.2, 0.0, 0.2) for y in (-0.1, 0.1)])
    z = 0.2 * xy[:, 0]
    P = np.column_stack((xy, z))
    P = np.vstack((P, [0.0, 0.0, 5.0]))

    coeffs = RansacFit(tolerance=0.001).coefficients(P)
    n_expected = np.array([-0.2, 0.0, 1.0]) / np.linalg.norm([-0.2, 0.0, 1.0])
    assert np.allclose(coeffs[0:3], n_expected, atol=1e-6)
    assert abs(coeffs[3]) < 1e-6


def test_ransac_falls_back_on_too_few_points():
    P = np.array([[0.0, 0.0, 1.0], [1.0, 0.0, 2.0]])
    assert np.array_equal(RansacFit().coefficients(P), [0.0, 0.0, 1.0, 0.0])
    assert np.array_equal(project_to_plane(P, RansacFit()), P[:, 0:2])


@pytest.mark.parametrize("points", [
    np.array([[0.2, -0.1, 0.7]] * 5),
    np.array([[t, 2.0 * t, 0.5 * t] for t in range(5)], dtype=float),
])
def test_ransac_falls_back_without_a_plane_sample(points, caplog):
    with caplog.at_level(logging.WARNING, logger="support_hull.models.plane"):
        coeffs = RansacFit(iterations=20).coefficients(points)
    assert np.array_equal(coeffs, [0.0, 0.0, 1.0, 0.0])
    assert any("no non-degenerate sample" in r.getMessage() for r in caplog.records)
    assert np.array_equal(project_to_plane(points, RansacFit(iterations=20)), points[:, 0:2])


def main():
    P = np.random.default_rng(0).normal(size=(6, 3))
    print("fixed :", project_to_plane(P))
    print("ransac:", RansacFit().coefficients(P))


if __name__ == "__main__":
    main()
