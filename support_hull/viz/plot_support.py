import os
import numpy as np
import matplotlib.pyplot as plt

from support_hull.models.support_polygon import convex_hull_ring


def eroded_vertices(A, b):
    """
    Corners of the constraint polygon, assuming rows are in boundary order
    (as returned by halfspaces_from_ring): corner j = row j-1 meets row j.
    """
    n = A.shape[0]
    verts = np.zeros((n, 2))
    for j in range(n):
        M = np.vstack((A[j - 1], A[j]))
        verts[j] = np.linalg.solve(M, np.array([b[j - 1], b[j]]))
    return verts


def plot_support_polygon(points2, A, b, outpath, com=None):
    os.makedirs(os.path.dirname(outpath) or ".", exist_ok=True)

    points2 = np.asarray(points2, dtype=float).reshape(-1, 2)
    ring = convex_hull_ring(points2)
    inner = eroded_vertices(A, b)

    fig, ax = plt.subplots(figsize=(6, 6))
    ax.set_aspect("equal", adjustable="box")
    ax.set_title("Support polygon")

    ax.plot(points2[:, 0], points2[:, 1], marker="o", linestyle="None", label="contacts")

    closed = np.vstack((ring, ring[:1]))
    ax.plot(closed[:, 0], closed[:, 1], linewidth=2, label="hull")

    closed = np.vstack((inner, inner[:1]))
    ax.plot(closed[:, 0], closed[:, 1], linestyle="--", label="A x <= b")

    com = np.zeros(2) if com is None else np.asarray(com, dtype=float).reshape(2,)
    ax.plot([com[0]], [com[1]], marker="x", markersize=8, linestyle="None", label="COM")

    ax.legend(loc="lower right")
    fig.tight_layout()
    fig.savefig(outpath, dpi=160)
    plt.close(fig)
    return inner
