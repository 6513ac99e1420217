#!/usr/bin/env python3
# =============================================================================
#     File: _qr.py
#  Created: 2025-02-11 15:18
#   Author: Bernie Roesler
#
"""
Sparse QR decomposition with Householder reflections, as presented in Davis,
Chapter 5 (`cs_qr`).

The factorization is left-looking and numeric only: the elimination tree,
the leftmost column of each row, the row permutation, and the patterns of
the factors come from a symbolic analysis done beforehand, and are trusted
to be consistent with the input. Every access into them is bounds-checked,
so inconsistent input raises a `PreconditionViolation` instead of silently
producing garbage.
"""
# =============================================================================

import logging

import numpy as np

from scipy import linalg as la

from ._pattern import _check_dim
from ._transpose import transpose
from .errors import InvalidArgumentError, PreconditionViolation

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
#         Householder Reflections
# -----------------------------------------------------------------------------
def house(x, method='LAPACK'):
    r"""Compute the Householder reflection vector for a given vector x.

    The Householder reflection is defined as:

    .. math:: H = I - \beta v v^T

    where :math:`\beta = \frac{2}{v^T v}` and
    :math:`v = [1, v_2, \ldots, v_n]^T`, such that

    .. math:: Hx = s e_1

    where :math:`e_1` is the first unit vector and :math:`|s| = \|x\|_2`.

    Parameters
    ----------
    x : (N,) array_like
        The vector to be reflected.
    method : str in {'LAPACK', 'Davis'}, optional
        The 'LAPACK' method is LAPACK's DLARFG subroutine, which chooses the
        sign of `s` opposite to `x[0]` and gives :math:`1 \le \beta \le 2`
        (or :math:`\beta = 0` for multiples of :math:`e_1`). The 'Davis'
        method is `cs_house` from Davis, which always gives :math:`s \ge 0`.

    Returns
    -------
    v : (N,) ndarray
        The Householder reflection vector, with `v[0] == 1`.
    beta : float
        The scaling factor.
    s : float
        The first entry of :math:`Hx`.

    References
    ----------
    .. [Tref] Trefethen, Lloyd and David Bau (1997).
        "Numerical Linear Algebra". Eq (10.5), and Algorithm 10.1.
    .. [Davis] Davis, Timothy A. (2006).
        "Direct Methods for Sparse Linear Systems", p 69 (`cs_house`).
    """
    x = np.asarray(x, dtype=float)

    if x.ndim != 1 or x.size == 0:
        raise InvalidArgumentError(
            f"x must be a non-empty vector, got shape {x.shape}."
        )

    if method == 'LAPACK':
        return _house_lapack(x)
    elif method == 'Davis':
        return _house_davis(x)
    else:
        raise InvalidArgumentError(f"Unknown method '{method}'")


def _house_lapack(x):
    """Compute the Householder reflection vector using the LAPACK method."""
    (Qraw, tau), _ = la.qr(x[:, np.newaxis], mode='raw')
    v = np.r_[1.0, Qraw[1:, 0]]  # extract the reflector
    # NOTE If tau == 0, H is the identity matrix, so Hx == x, and Qraw holds
    # x[0] itself.
    return v, float(tau[0]), float(Qraw[0, 0])


def _house_davis(x):
    """Compute the Householder reflection vector using the Davis method."""
    v = np.copy(x)
    σ = np.sum(v[1:]**2)

    if σ == 0:
        s = np.abs(v[0])           # ||x|| consistent with always-positive Hx
        β = 2 if v[0] <= 0 else 0  # make direction positive if x[0] < 0
        v[0] = 1                   # make the reflector a unit vector
    else:
        s = np.sqrt(v[0]**2 + σ)   # ||x||_2

        # These options compute equivalent values, but the v[0] > 0 case
        # is a more numerically stable option.
        v[0] = (v[0] - s) if v[0] <= 0 else (-σ / (v[0] + s))
        β = -1 / (s * v[0])

        # Normalize β and v s.t. v[0] = 1
        β *= v[0] * v[0]
        v /= v[0]

    return v, float(β), float(s)


# -----------------------------------------------------------------------------
#         Work arrays
# -----------------------------------------------------------------------------
class QRWorkspace:
    """Work arrays for `sparse_qr`, reusable across calls.

    The workspace holds one integer mark and one dense value per row of the
    extended (row-permuted) matrix. Its capacity must be at least the number
    of rows `M2 = V_T.ncol` of the Householder vectors, and `M2 >= N`, the
    number of columns of the matrix.

    Each call to `sparse_qr` resets the first `M2` entries before use, and
    tags each mark with the current column, so no mark from a previous
    column or call is misread.

    Parameters
    ----------
    capacity : int
        The number of rows of the largest extended matrix to factor.

    Attributes
    ----------
    marks : (capacity,) ndarray of int
        `marks[i] == k` if row (or tree node) `i` has been visited for
        column `k`.
    x : (capacity,) ndarray of float
        The dense column being factored, in permuted row order.
    """

    def __init__(self, capacity):
        capacity = _check_dim('capacity', capacity)
        self.marks = np.full(capacity, -1, dtype=np.intp)
        self.x = np.zeros(capacity)

    @property
    def capacity(self):
        return self.marks.size

    def require(self, M2, N):
        """Check that the workspace can factor an `(M2, N)` extended matrix.

        Raises
        ------
        PreconditionViolation
            If `M2 < N`, or the capacity is smaller than `M2`.
        """
        if M2 < N:
            raise PreconditionViolation(
                f"The extended matrix must have at least as many rows as "
                f"columns, got ({M2}, {N})."
            )

        if self.capacity < M2:
            raise PreconditionViolation(
                f"Workspace capacity {self.capacity} is smaller than the "
                f"number of extended rows {M2}."
            )

    def reset(self, M2):
        """Clear the marks and values of the first `M2` rows."""
        self.marks[:M2] = -1
        self.x[:M2] = 0.0


class PathStack:
    """A fixed-capacity stack of elimination tree nodes.

    Each path from a leaf towards the root is pushed as a block, so the
    stack, read from the top, lists every path in the order in which it was
    traversed, with later paths on top.

    Parameters
    ----------
    capacity : int
        The maximum number of nodes on the stack.
    """

    def __init__(self, capacity):
        self._s = np.empty(_check_dim('capacity', capacity), dtype=np.intp)
        self._top = self._s.size

    def __len__(self):
        return self._s.size - self._top

    def __iter__(self):
        """Iterate over the nodes from the top of the stack down."""
        return iter(self._s[self._top:].tolist())

    def clear(self):
        self._top = self._s.size

    def push_path(self, path):
        """Push the nodes of `path` as one block onto the stack.

        Raises
        ------
        PreconditionViolation
            If the path does not fit on the stack.
        """
        n = len(path)
        if n > self._top:
            raise PreconditionViolation(
                f"Elimination path of length {n} overflows the stack "
                f"({len(self)} of {self._s.size} nodes in use)."
            )
        self._s[self._top - n:self._top] = path
        self._top -= n


# -----------------------------------------------------------------------------
#         Sparse QR
# -----------------------------------------------------------------------------
def sparse_qr(A, values, parent, leftmost, pinv, V_T, R_T,
              workspace=None, out=None, method='LAPACK', house_func=None):
    r"""Compute the numeric sparse QR decomposition of a matrix.

    Computes :math:`PA = QR`, where :math:`Q = H_1 \dots H_N` is given by the
    Householder vectors `V` and coefficients `beta`, and :math:`P` is the
    row permutation `pinv`. Extended rows `M <= i < M2` are zero rows of the
    permuted matrix.

    The columns are factored in order, and each column is updated by the
    reflectors of the columns below it in the elimination tree
    (left-looking).

    Parameters
    ----------
    A : (M, N) SparsityPattern
        The pattern of the matrix to factor.
    values : (A.nnz,) array_like of float
        The nonzeros of the matrix, in the storage order of `A`.
    parent : (N,) array_like of int
        The column elimination tree of `A`, *i.e.* the elimination tree of
        :math:`A^T A`. `parent[k] > k`. A root `k` has `parent[k] == -1`
        or `parent[k] >= N`.
    leftmost : (M,) array_like of int
        `leftmost[i]` is the smallest column index of row `i` of `A`.
    pinv : (M,) array_like of int
        `pinv[i]` is the row of the extended matrix that row `i` of `A` is
        moved to.
    V_T : (N, M2) SparsityPattern
        The pattern of the transposed Householder vectors: row `k` lists the
        rows of :math:`V_{*k}`, starting with `k` itself.
    R_T : (N, N) SparsityPattern
        The pattern of the transposed upper triangular factor: row `k` lists
        the rows of :math:`R_{*k}`.
    workspace : QRWorkspace, optional
        The work arrays. If not given, they are allocated for this call.
    out : tuple of ndarray, optional
        Arrays `(v, beta, r)` of length `V_T.nnz`, `N` and `R_T.nnz` to
        hold the result.
    method : str in {'LAPACK', 'Davis'}, optional
        The Householder method passed to `house`.
    house_func : callable, optional
        A replacement for `house`, with signature
        `v, beta, s = house_func(x)`.

    Returns
    -------
    v : (V_T.nnz,) ndarray
        The values of the Householder vectors, in the storage order of `V_T`.
    beta : (N,) ndarray
        The Householder coefficients.
    r : (R_T.nnz,) ndarray
        The values of the upper triangular factor, in the storage order of
        `R_T`.

    Raises
    ------
    InvalidArgumentError
        If `values` does not match `A`.
    PreconditionViolation
        If the elimination tree, row permutation, factor patterns,
        workspace, or output arrays are inconsistent with `A`.

    See Also
    --------
    csparsity.qr_factors : Convert the result to `scipy.sparse` arrays.
    csparsity.apply_qtleft : Apply the Householder vectors.
    """
    M, N = A.shape
    M2 = V_T.ncol

    values = np.asarray(values, dtype=float)
    if values.shape != (A.nnz,):
        raise InvalidArgumentError(
            f"values must have shape ({A.nnz},), got {values.shape}."
        )

    parent, leftmost, pinv = _check_symbolic(A, parent, leftmost, pinv,
                                             V_T, R_T)

    if workspace is None:
        workspace = QRWorkspace(M2)

    workspace.require(M2, N)
    workspace.reset(M2)

    v, beta, r = _check_out(out, V_T, R_T)

    if house_func is None:
        def house_func(x):
            return house(x, method=method)

    logger.debug("sparse_qr: A is (%d, %d) with %d nonzeros, "
                 "nnz(V) = %d, nnz(R) = %d",
                 M, N, A.nnz, V_T.nnz, R_T.nnz)

    # Column access to A
    AT, amap = transpose(A)
    Ap, Ai = AT.indptr.tolist(), AT.indices.tolist()
    Ax = values[amap].tolist()

    Vp, Vi = V_T.indptr.tolist(), V_T.indices
    Rp, Ri = R_T.indptr.tolist(), R_T.indices.tolist()

    marks, x = workspace.marks, workspace.x
    s = PathStack(N)

    for k in range(N):
        # V(:, k) starts with V(k, k)
        if Vp[k] == Vp[k+1] or Vi[Vp[k]] != k:
            raise PreconditionViolation(
                f"The Householder vector of column {k} must start at row {k}."
            )

        marks[k] = k
        v_rows = [k]
        s.clear()

        for p in range(Ap[k], Ap[k+1]):
            row = Ai[p]
            # Traverse up the tree from i = min(find(A(row, :))) to k
            i = leftmost[row]
            path = []
            while True:
                if i < 0 or i > k:
                    raise PreconditionViolation(
                        f"The elimination path of row {row} does not reach "
                        f"column {k} (stopped at node {i})."
                    )
                if marks[i] == k:
                    break
                path.append(i)
                marks[i] = k
                i = parent[i]
            s.push_path(path)

            i = pinv[row]    # permuted row of A(:, k)
            x[i] = Ax[p]

            if i > k:
                if marks[i] < k:
                    v_rows.append(i)  # add i to pattern of V(:, k)
                    marks[i] = k
            elif marks[i] != k:
                raise PreconditionViolation(
                    f"Row {row} of column {k} is permuted to row {i}, which "
                    f"is not in the pattern of R(:, {k})."
                )

        # Positions of the rows of R(:, k)
        r_pos = {i: p for p, i in zip(range(Rp[k], Rp[k+1]),
                                      Ri[Rp[k]:Rp[k+1]])}

        if len(r_pos) != len(s) + 1:
            raise PreconditionViolation(
                f"R(:, {k}) has {len(s) + 1} nonzeros, but its pattern has "
                f"{Rp[k+1] - Rp[k]}."
            )

        # For each i in the pattern of R(:, k), apply (V(:, i), beta[i]) to x
        for i in s:
            if i not in r_pos:
                raise PreconditionViolation(
                    f"R({i}, {k}) is not in the pattern of R."
                )

            vi = Vi[Vp[i]:Vp[i+1]]
            vx = v[Vp[i]:Vp[i+1]]
            x[vi] -= vx * (beta[i] * (vx @ x[vi]))

            r[r_pos[i]] = x[i]  # R(i, k) = x(i)
            x[i] = 0.0

            if parent[i] == k:
                # V(:, k) inherits the fill of V(:, i)
                for j in vi[marks[vi] < k].tolist():
                    v_rows.append(j)
                    marks[j] = k

        # Gather V(:, k) = x
        lo, hi = Vp[k], Vp[k+1]
        vk = Vi[lo:hi]

        if (len(v_rows) != vk.size
                or not np.array_equal(np.sort(v_rows), np.sort(vk))):
            raise PreconditionViolation(
                f"The pattern of V(:, {k}) is {sorted(v_rows)}, but V_T "
                f"declares {sorted(vk.tolist())}."
            )

        if k not in r_pos:
            raise PreconditionViolation(
                f"R({k}, {k}) is not in the pattern of R."
            )

        v[lo:hi] = x[vk]
        x[vk] = 0.0

        # R(k, k) = ±norm(x)
        v[lo:hi], beta[k], r[r_pos[k]] = house_func(v[lo:hi])

    if np.any(x[:M2] != 0):
        raise PreconditionViolation(
            "The factor patterns do not cover the nonzeros of the permuted "
            f"matrix, rows {np.flatnonzero(x[:M2]).tolist()} were not "
            "eliminated."
        )

    return v, beta, r


def _check_symbolic(A, parent, leftmost, pinv, V_T, R_T):
    """Check the lengths and ranges of the symbolic analysis."""
    M, N = A.shape
    M2 = V_T.ncol

    parent = np.asarray(parent, dtype=np.intp)
    leftmost = np.asarray(leftmost, dtype=np.intp)
    pinv = np.asarray(pinv, dtype=np.intp)

    if V_T.nrow != N:
        raise PreconditionViolation(
            f"V_T must have {N} rows, got {V_T.nrow}."
        )

    if R_T.shape != (N, N):
        raise PreconditionViolation(
            f"R_T must have shape ({N}, {N}), got {R_T.shape}."
        )

    if parent.shape != (N,):
        raise PreconditionViolation(
            f"parent must have length {N}, got {parent.size}."
        )

    if leftmost.ndim != 1 or leftmost.size < M:
        raise PreconditionViolation(
            f"leftmost must have length >= {M}, got {leftmost.size}."
        )

    if pinv.ndim != 1 or pinv.size < M:
        raise PreconditionViolation(
            f"pinv must have length >= {M}, got {pinv.size}."
        )

    # Roots are -1 or any parent >= N, e.g. parent[N-1] == N for a chain
    parent = np.where(parent >= N, -1, parent)

    # The elimination tree is ordered: every parent follows its children
    bad = np.flatnonzero((parent != -1) & (parent <= np.arange(N)))
    if bad.size > 0:
        k = bad[0]
        raise PreconditionViolation(
            f"parent[{k}] = {parent[k]} must be -1, >= {N}, or in "
            f"({k}, {N})."
        )

    bad = np.flatnonzero((leftmost[:M] < -1) | (leftmost[:M] >= N))
    if bad.size > 0:
        i = bad[0]
        raise PreconditionViolation(
            f"leftmost[{i}] = {leftmost[i]} must be in [-1, {N})."
        )

    bad = np.flatnonzero((pinv[:M] < 0) | (pinv[:M] >= M2))
    if bad.size > 0:
        i = bad[0]
        raise PreconditionViolation(
            f"pinv[{i}] = {pinv[i]} must be in [0, {M2})."
        )

    return parent.tolist(), leftmost.tolist(), pinv.tolist()


def _check_out(out, V_T, R_T):
    """Allocate or check the output arrays."""
    N = V_T.nrow

    if out is None:
        return np.zeros(V_T.nnz), np.zeros(N), np.zeros(R_T.nnz)

    try:
        v, beta, r = out
    except (TypeError, ValueError):
        raise PreconditionViolation("out must be a tuple (v, beta, r).")

    for name, a, n in [('v', v, V_T.nnz), ('beta', beta, N), ('r', r, R_T.nnz)]:
        if not isinstance(a, np.ndarray) or a.shape != (n,):
            raise PreconditionViolation(
                f"out array {name} must be an ndarray of shape ({n},)."
            )

    beta[:] = 0.0

    return v, beta, r


# =============================================================================
# =============================================================================
