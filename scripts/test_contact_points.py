# scripts/test_contact_points.py
from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from support_hull.errors import CollaboratorLookupFailed
from support_hull.models.contact_points import (
    DEFAULT_CONTACT_FRAMES,
    StaticPoseProvider,
    foot_corner_frames,
    rect_corners,
    support_polygon_points,
)
from support_hull.models.support_polygon import ConvexHullConstraints

half = np.array([0.09, 0.045])
L = np.array([0.0, 0.10])
R = np.array([0.0, -0.10])


def test_rect_corners():
    c = rect_corners(L, half)
    assert c.shape == (4, 2)
    assert np.allclose(c.mean(axis=0), L)


def test_foot_frames_cover_default_names():
    frames = foot_corner_frames(L, R, half, z=0.02)
    assert set(frames) == set(DEFAULT_CONTACT_FRAMES)
    assert np.allclose(frames["l_foot_upper_right_link"], [0.09, 0.145, 0.02])
    assert np.allclose(frames["r_foot_lower_left_link"], [-0.09, -0.145, 0.02])


def test_points_relative_to_com():
    com = np.array([0.01, -0.02, 0.8])
    robot = StaticPoseProvider(foot_corner_frames(L, R, half), com=com)
    pts = support_polygon_points(robot)
    assert pts.shape == (8, 3)
    assert np.allclose(pts[:, 2], -0.8)
    assert np.allclose(pts[0], robot.link_position(DEFAULT_CONTACT_FRAMES[0]) - com)


def test_missing_frame():
    frames = foot_corner_frames(L, R, half)
    del frames["r_foot_upper_left_link"]
    robot = StaticPoseProvider(frames)
    with pytest.raises(CollaboratorLookupFailed) as exc:
        support_polygon_points(robot)
    assert exc.value.frame == "r_foot_upper_left_link"
    assert isinstance(exc.value.__cause__, KeyError)


def test_constraints_from_robot():
    robot = StaticPoseProvider(foot_corner_frames(L, R, half), com=[0.0, 0.0, 0.8])
    A, b = ConvexHullConstraints().from_robot(robot)
    assert A.shape == (4, 2)
    # CoM over the middle of both feet
    assert np.all(b > 0.0)

    # shifting the CoM moves the polygon in the opposite direction
    robot.com = np.array([0.05, 0.0, 0.8])
    A2, b2 = ConvexHullConstraints().from_robot(robot)
    assert A2.shape == (4, 2)
    assert not np.allclose(b, b2)


def main():
    robot = StaticPoseProvider(foot_corner_frames(L, R, half), com=[0.0, 0.0, 0.8])
    print(support_polygon_points(robot))


if __name__ == "__main__":
    main()
