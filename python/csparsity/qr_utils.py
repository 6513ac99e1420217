#!/usr/bin/env python3
# =============================================================================
#     File: qr_utils.py
#  Created: 2025-02-14 09:26
#   Author: Bernie Roesler
#
"""
Additional functions to support QR decomposition.
"""
# =============================================================================

import numpy as np
from scipy import sparse

from .errors import InvalidArgumentError
from .utils import to_scipy_sparse


def inv_permute(p):
    """Invert a permutation vector.

    Parameters
    ----------
    p : (N,) array_like of int
        A permutation of `[0, N)`.

    Returns
    -------
    p_inv : (N,) ndarray of int
        The inverse permutation, such that `p_inv[p[k]] == k`.
    """
    p = np.asarray(p, dtype=np.intp)
    if not np.array_equal(np.sort(p), np.arange(p.size)):
        raise InvalidArgumentError("p is not a valid permutation.")
    p_inv = np.empty_like(p)
    p_inv[p] = np.arange(p.size)
    return p_inv


def qr_factors(V_T, v, R_T, r, format='csc'):
    """Assemble the factors computed by `sparse_qr` as sparse arrays.

    Parameters
    ----------
    V_T : (N, M2) SparsityPattern
        The pattern of the transposed Householder vectors.
    v : (V_T.nnz,) ndarray
        The values of the Householder vectors.
    R_T : (N, N) SparsityPattern
        The pattern of the transposed upper triangular factor.
    r : (R_T.nnz,) ndarray
        The values of the upper triangular factor.
    format : str, optional
        The scipy.sparse format of the output.

    Returns
    -------
    V : (M2, N) sparse array
        The Householder vectors, one per column.
    R : (N, N) sparse array
        The upper triangular factor.
    """
    # The compressed rows of V^T are the compressed columns of V
    V = to_scipy_sparse(V_T, v, format='csr').T.asformat(format)
    R = to_scipy_sparse(R_T, r, format='csr').T.asformat(format)
    return V, R


def apply_qright(V, beta, p=None, Y=None):
    r"""Apply Householder vectors on the right.

    Computes :math:`X = Y P^T H_1 \dots H_N = Y Q`, where :math:`Q` is
    represented by the Householder vectors stored in `V`, coefficients `beta`,
    and permutation `p`. To obtain :math:`Q` itself, pass `Y = sparse.eye(M)`.

    Parameters
    ----------
    V : (M, N) ndarray or sparse array
        The matrix of Householder vectors.
    beta : (N,) ndarray
        The Householder coefficients.
    p : (M,) ndarray, optional
        The column permutation vector to apply to `Y`.
    Y : (K, M) ndarray or sparse array, optional
        The matrix to which the Householder transformations are applied. If not
        given, the identity matrix is used, resulting in the full `Q` matrix.

    Returns
    -------
    result : (K, M) ndarray or sparse array
        The result of applying the Householder transformations to `Y`.

    See also
    --------
    apply_qtleft : Apply Householder vectors on the left as :math:`Q^T Y`.
    """
    if Y is None:
        Y = sparse.eye_array(V.shape[0]).tocsc()

    N = V.shape[1]
    X = Y.copy()
    if p is not None:
        X = X[:, p]
    for j in range(N):
        X -= X @ (beta[j] * V[:, [j]]) @ V[:, [j]].T
    return X


def apply_qtleft(V, beta, p=None, Y=None):
    r"""Apply Householder vectors on the left.

    Computes :math:`X = H_N \dots H_1 P Y = Q^T P Y`, where :math:`Q` is
    represented by the Householder vectors stored in `V`, coefficients `beta`,
    and permutation `p`. To obtain :math:`Q^T` itself, pass `Y = sparse.eye(M)`.

    If `V` has more rows than `Y`, as happens when `sparse_qr` adds
    fictitious rows to a structurally rank-deficient matrix, `Y` is padded
    with rows of zeros.

    Parameters
    ----------
    V : (M2, N) ndarray or sparse array
        The matrix of Householder vectors.
    beta : (N,) ndarray
        The Householder coefficients.
    p : (M2,) ndarray, optional
        The row permutation vector to apply to `Y`, so that row `k` of
        :math:`PY` is row `p[k]` of `Y`. For the `pinv` of `sparse_qr`,
        `p = inv_permute(pinv)`.
    Y : (M, K) ndarray or sparse array, optional
        The matrix to which the Householder transformations are applied. If not
        given, the identity matrix is used, resulting in the full `Q^T`
        matrix.

    Returns
    -------
    result : (M2, K) ndarray or sparse array
        The result of applying the Householder transformations to `Y`.

    See also
    --------
    apply_qright : Apply Householder vectors on the right as :math:`Y Q`.
    """
    if Y is None:
        Y = sparse.eye_array(V.shape[0]).tocsc()

    M2, N = V.shape
    M, NY = Y.shape
    X = Y.copy()

    if (M2 > M):
        # Add empty rows to the bottom of X
        if sparse.issparse(X):
            X = sparse.vstack([X, sparse.csc_array((M2 - M, NY))]).tocsc()
        else:
            X = np.vstack([X, np.zeros((M2 - M, NY))])

    if p is not None:
        X = X[p, :]

    for j in range(N):
        X -= V[:, [j]] @ (beta[j] * V[:, [j]].T @ X)

    return X

# =============================================================================
# =============================================================================
