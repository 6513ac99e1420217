#!/usr/bin/env python3
# =============================================================================
#     File: helpers.py
#  Created: 2025-05-28 15:44
#   Author: Bernie Roesler
#
"""Helper functions for the csparsity python tests."""
# =============================================================================

import pytest

import numpy as np

from numpy.testing import assert_array_equal
from scipy import sparse

import csparsity


# -----------------------------------------------------------------------------
#         Matrix Generators
# -----------------------------------------------------------------------------
def random_sparse(M, N, density, rng):
    """Create a random (M, N) CSR array with normally distributed values."""
    mask = rng.random((M, N)) < density
    return sparse.csr_array(np.where(mask, rng.normal(size=(M, N)), 0.0))


def generate_random_matrices(
    seed=565656,
    N_trials=100,
    N_max=10,
    square_only=True,
    d_scale=1
):
    """Generate a list of random sparse matrices of maximum size N x N."""
    rng = np.random.default_rng(seed)
    for trial in range(N_trials):
        # Generate a random sparse matrix
        if square_only:
            M = N = rng.integers(1, N_max, endpoint=True)
        else:
            M, N = rng.integers(1, N_max, size=2, endpoint=True)

        d = d_scale * rng.random()  # density

        A = random_sparse(M, N, d, rng)

        yield pytest.param(
            A,
            id=f"random_{trial:02d}::{A.shape}::{A.nnz}",
            marks=pytest.mark.random
        )


def generate_random_triplets(seed=565656, N_trials=100, N_max=10):
    """Generate random, unordered (row, column) lists with duplicates."""
    rng = np.random.default_rng(seed)
    for trial in range(N_trials):
        M, N = rng.integers(1, N_max, size=2, endpoint=True)
        K = rng.integers(0, 2 * M * N, endpoint=True)
        rows = rng.integers(0, M, size=K)
        cols = rng.integers(0, N, size=K)
        yield pytest.param(
            M, N, rows, cols,
            id=f"random_{trial:02d}::{(M, N)}::{K}",
            marks=pytest.mark.random
        )


def generate_reshape_params(seed=565656, N_trials=50, N_max=10):
    """Generate random patterns with a compatible new shape."""
    rng = np.random.default_rng(seed)
    for trial in range(N_trials):
        M, N = rng.integers(1, N_max, size=2, endpoint=True)
        A = random_sparse(M, N, rng.random(), rng)
        divisors = [k for k in range(1, M * N + 1) if (M * N) % k == 0]
        M2 = rng.choice(divisors)
        N2 = (M * N) // M2
        yield pytest.param(
            A, M2, N2,
            id=f"random_{trial:02d}::{A.shape}->{(M2, N2)}",
            marks=pytest.mark.random
        )


# -----------------------------------------------------------------------------
#         Pattern checks
# -----------------------------------------------------------------------------
def assert_valid_pattern(A):
    """Assert the compressed-row invariants of a pattern."""
    assert A.indptr.size == A.nrow + 1
    assert A.indptr[0] == 0
    assert np.all(np.diff(A.indptr) >= 0)
    assert A.indptr[-1] == A.indices.size == A.nnz
    assert np.all((A.indices >= 0) & (A.indices < A.ncol))


def assert_same_structure(A, S):
    """Assert that pattern `A` has the nonzero set of scipy array `S`."""
    S = sparse.csr_array(S)
    S.sum_duplicates()
    S.eliminate_zeros()
    assert A.shape == S.shape
    assert_array_equal(A.toarray(), S.toarray() != 0)


def is_valid_permutation(p):
    """Check if a vector is a valid permutation."""
    return np.array_equal(np.sort(p), np.arange(len(p)))


# -----------------------------------------------------------------------------
#         Symbolic QR analysis
# -----------------------------------------------------------------------------
def column_etree(A):
    """Compute the elimination tree of A^T A without forming A^T A.

    See: Davis, §4.1, `cs_etree`.
    """
    M, N = A.shape
    AT = A.transpose()
    parent = np.full(N, -1)
    ancestor = np.full(N, -1)
    prev = np.full(M, -1)  # last column seen in each row

    for k in range(N):
        for row in AT.indices[AT.indptr[k]:AT.indptr[k+1]]:
            i = prev[row]
            while i != -1 and i < k:  # traverse from i to k
                inext = ancestor[i]
                ancestor[i] = k       # path compression
                if inext == -1:
                    parent[i] = k     # no ancestor, parent is k
                i = inext
            prev[row] = k

    return parent


def row_permutation(A, parent):
    """Compute the leftmost column of each row and the row permutation.

    See: Davis, §5.3, `cs_vcount`. Rows are assigned to the column of their
    leftmost nonzero and then moved up the elimination tree. Columns that
    receive no row get a fictitious (empty) row appended to the matrix.

    Returns
    -------
    leftmost : (M,) ndarray of int
        The leftmost column of each row, or -1 for empty rows.
    pinv : (M2,) ndarray of int
        The row permutation of the extended matrix, a permutation of
        `[0, M2)`.
    """
    M, N = A.shape

    leftmost = np.full(M, -1)
    for i in range(M):
        row = A.indices[A.indptr[i]:A.indptr[i+1]]
        if row.size > 0:
            leftmost[i] = row.min()

    # queue[k] holds the rows waiting to be assigned in column k
    queue = [[] for _ in range(N)]
    for i in range(M):
        if leftmost[i] >= 0:
            queue[leftmost[i]].append(i)

    pinv = np.full(M + N, -1)
    M2 = M
    for k in range(N):
        if queue[k]:
            i = queue[k].pop(0)
        else:
            i = M2  # add a fictitious row
            M2 += 1
        pinv[i] = k
        # move the remaining rows to the parent of k
        if queue[k] and parent[k] != -1:
            queue[parent[k]].extend(queue[k])
        queue[k] = []

    k = N
    for i in range(M):
        if pinv[i] < 0:
            pinv[i] = k
            k += 1

    return leftmost, pinv[:M2]


def symbolic_qr(A):
    """Compute the symbolic QR analysis of a pattern.

    Parameters
    ----------
    A : (M, N) SparsityPattern
        The pattern to analyze.

    Returns
    -------
    parent : (N,) ndarray of int
        The column elimination tree.
    leftmost : (M,) ndarray of int
        The leftmost column of each row.
    pinv : (M2,) ndarray of int
        The row permutation of the extended matrix.
    V_T : (N, M2) SparsityPattern
        The pattern of the transposed Householder vectors.
    R_T : (N, N) SparsityPattern
        The pattern of the transposed upper triangular factor.
    """
    M, N = A.shape
    parent = column_etree(A)
    leftmost, pinv = row_permutation(A, parent)
    M2 = pinv.size
    AT = A.transpose()

    marks = np.full(M2, -1)
    V_cols, R_cols = [], []

    for k in range(N):
        marks[k] = k
        vk, stack = [k], []
        for row in AT.indices[AT.indptr[k]:AT.indptr[k+1]]:
            i = leftmost[row]
            path = []
            while marks[i] != k:
                path.append(i)
                marks[i] = k
                i = parent[i]
            stack = path + stack  # later paths on top
            i = pinv[row]
            if i > k and marks[i] < k:
                vk.append(i)
                marks[i] = k
        for i in stack:
            if parent[i] == k:
                for j in V_cols[i]:
                    if marks[j] < k:
                        vk.append(j)
                        marks[j] = k
        V_cols.append(vk)
        R_cols.append(stack + [k])

    V_T = _pattern_from_lists(V_cols, M2)
    R_T = _pattern_from_lists(R_cols, N)

    return parent, leftmost, pinv, V_T, R_T


def dense_symbolic_qr(M, N):
    """Compute the symbolic QR analysis of a dense (M, N) matrix, M >= N."""
    assert M >= N
    parent = np.r_[np.arange(1, N), -1]
    leftmost = np.zeros(M, dtype=int)
    pinv = np.arange(M)
    V_T = _pattern_from_lists([list(range(k, M)) for k in range(N)], M)
    R_T = csparsity.tril(N)
    return parent, leftmost, pinv, V_T, R_T


def _pattern_from_lists(lists, N):
    """Create a sequential pattern with row `k` holding `lists[k]`."""
    rows = np.repeat(np.arange(len(lists)), [len(x) for x in lists])
    cols = np.array([j for x in lists for j in x], dtype=int)
    return csparsity.triplet(len(lists), N, rows, cols)


# =============================================================================
# =============================================================================
