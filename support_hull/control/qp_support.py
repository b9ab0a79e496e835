# support_hull/control/qp_support.py
import numpy as np
import scipy.sparse as sp
import osqp

from support_hull.models.support_polygon import pad_halfspaces


class SupportQpController:
    def __init__(self,
                 W: np.ndarray,
                 Wdu: np.ndarray,
                 dmin: np.ndarray,
                 dmax: np.ndarray,
                 m_target: int = 8):
        self.W = W
        self.Wdu = Wdu
        self.dmin = dmin
        self.dmax = dmax

        # fixed sparsity (m_target polygon constraints + 2 bounds on the displacement)
        self.m_target = m_target
        self.m = m_target + 2
        self.n = 2

        # OSQP requires that matrix updates keep the same sparsity pattern.
        # Stored zeros keep nnz constant across updates.
        self._P_pattern = sp.csc_matrix(np.triu(np.ones((self.n, self.n), dtype=float)))
        self._A_pattern = sp.csc_matrix(np.ones((self.m, self.n), dtype=float))

        P0 = self._P_pattern.copy()
        P0.data[:] = np.array([1.0, 0.0, 1.0], dtype=float)

        A0 = self._A_pattern.copy()
        A0.data[:] = 0.0
        q0 = np.zeros(2)
        l0 = -np.inf * np.ones(self.m)
        u0 = np.inf * np.ones(self.m)

        self.prob = osqp.OSQP()
        self.prob.setup(P=P0, q=q0, A=A0, l=l0, u=u0, warm_start=True, verbose=False)

    def solve(self,
              d_des: np.ndarray,
              d_prev: np.ndarray,
              A_hull: np.ndarray,
              b_hull: np.ndarray):
        """
        Solve QP over the horizontal CoM displacement d in R^2.
        A_hull, b_hull are support constraints expressed relative to the
        current CoM, so A_hull d <= b_hull keeps the moved CoM inside.

        Objective:
            min 1/2 (d - d_des).T @ W @ (d - d_des)
                + 1/2 (d - d_prev).T @ Wdu @ (d - d_prev)

        Constraints:
            A_hull @ d <= b_hull
            dmin <= d <= dmax
        """
        d_des = np.asarray(d_des, dtype=float).reshape(2,)
        d_prev = np.asarray(d_prev, dtype=float).reshape(2,)

        H, h = pad_halfspaces(A_hull, b_hull, m_target=self.m_target)

        P = self.W + self.Wdu
        P = 0.5 * (P + P.T)  # ensure symmetry
        q = - self.W @ d_des - self.Wdu @ d_prev

        A = np.vstack((H, np.eye(2)))
        l = np.hstack((-np.inf * np.ones(self.m_target), self.dmin))
        u = np.hstack((h, self.dmax))

        # P (upper triangular) data order for 2x2 CSC of triu(ones):
        #   [(0,0), (0,1), (1,1)]
        Px = np.array([P[0, 0], P[0, 1], P[1, 1]], dtype=float)

        # A data order for CSC of ones(m,n) is column-major
        Ax = np.hstack((A[:, 0], A[:, 1])).astype(float, copy=False)

        self.prob.update(Px=Px, q=q, Ax=Ax, l=l, u=u)
        res = self.prob.solve()

        ok = (res.info.status_val in (1, 2))  # solved or solved inaccurate
        if not ok:
            return np.zeros(2), False, res.info.status
        return np.array(res.x), True, res.info.status
