import logging
import os
import sys
from pathlib import Path

import numpy as np

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from support_hull.config import HullConfig
from support_hull.control.qp_support import SupportQpController
from support_hull.models.contact_points import StaticPoseProvider, foot_corner_frames, support_polygon_points
from support_hull.models.plane import project_to_plane
from support_hull.models.support_polygon import ConvexHullConstraints, margin_halfspaces
from support_hull.viz.plot_support import plot_support_polygon

def main():
    logging.basicConfig(level=logging.INFO)

    # ---------- params ----------
    foot_half_sizes = np.array([0.09, 0.045])  # ~18cm x 9cm
    L = np.array([-0.05,  0.10])
    R = np.array([ 0.05, -0.10])
    com = np.array([0.0, 0.0, 0.85])

    cfg = HullConfig(ch_boundary=1e-2, margin=1e-2)

    robot = StaticPoseProvider(foot_corner_frames(L, R, foot_half_sizes), com=com)
    engine = ConvexHullConstraints(cfg)

    points = support_polygon_points(robot)
    A, b = engine.get_constraints(points)

    print("A =\n", A)
    print("b =", b)
    print("margin at COM:", margin_halfspaces(A, b, np.zeros(2)))

    # pull the COM towards a target outside the polygon
    qp = SupportQpController(
        W=np.eye(2), Wdu=np.eye(2) * 0.1,
        dmin=np.array([-0.3, -0.3]), dmax=np.array([0.3, 0.3]),
        m_target=cfg.m_target,
    )
    d, ok, status = qp.solve(np.array([0.2, 0.05]), np.zeros(2), A, b)
    print("QP:", ok, status, "d =", d, "margin:", margin_halfspaces(A, b, d))

    os.makedirs("results/plots", exist_ok=True)
    plot_support_polygon(project_to_plane(points), A, b, "results/plots/support_polygon.png", com=d)

if __name__ == "__main__":
    main()
