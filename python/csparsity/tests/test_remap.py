#!/usr/bin/env python3
# =============================================================================
#     File: test_remap.py
#  Created: 2026-10-14 10:05
#   Author: Bernie Roesler
#
"""Unit tests for reshape and lower triangle extraction of patterns."""
# =============================================================================

import warnings

import numpy as np
import pytest
from numpy.testing import assert_array_equal
from scipy import sparse

import csparsity

from .helpers import (assert_same_structure, assert_valid_pattern,
                      generate_random_matrices, generate_reshape_params)


# -----------------------------------------------------------------------------
#         Reshape
# -----------------------------------------------------------------------------
def test_reshape_small():
    """Test the row-major reshape of a small pattern."""
    # [[x . . x]
    #  [. x . .]]
    A = csparsity.SparsityPattern((2, 4), [0, 2, 3], [0, 3, 1])
    B = csparsity.reshape(A, 4, 2)

    assert B.shape == (4, 2)
    assert_array_equal(B.indptr, [0, 1, 2, 3, 3])
    assert_array_equal(B.indices, [0, 1, 1])
    assert_array_equal(B.flat_indices(), A.flat_indices())


@pytest.mark.parametrize("S, M, N", generate_reshape_params())
def test_reshape_random(S, M, N):
    """Test the reshape against scipy."""
    A, values = csparsity.from_scipy_sparse(S)
    B = csparsity.reshape(A, M, N)

    assert_valid_pattern(B)
    assert B.shape == (M, N)
    assert B.nnz == A.nnz
    assert B.is_sequential()
    assert_same_structure(B, S.reshape((M, N), order='C'))

    # The kth nonzero stays the kth nonzero
    assert_array_equal(csparsity.to_ndarray(B, values),
                       S.toarray().reshape((M, N)))

    # ... and reshaping back restores the pattern
    assert csparsity.reshape(B, *A.shape) == A


def test_reshape_empty():
    """Test the reshape of patterns without nonzeros."""
    B = csparsity.reshape(csparsity.empty(3, 4), 6, 2)
    assert B.shape == (6, 2)
    assert B.nnz == 0

    B = csparsity.reshape(csparsity.empty(0, 4), 2, 0)
    assert B.shape == (2, 0)


def test_reshape_unsorted():
    """Test the reshape of a pattern with unsorted columns."""
    # [[. x . x]], stored as columns 3, 1
    A = csparsity.SparsityPattern((1, 4), [0, 2], [3, 1])

    with warnings.catch_warnings():
        warnings.simplefilter('error')
        B = csparsity.reshape(A, 2, 2)
        C = csparsity.reshape(A, 1, 4)

    assert_valid_pattern(B)
    assert_array_equal(B.indptr, [0, 1, 2])
    assert_array_equal(B.indices, [1, 1])
    assert_array_equal(B.toarray(), A.toarray().reshape(2, 2))

    assert C.is_sequential()
    assert_array_equal(C.indices, [1, 3])


def test_reshape_invalid():
    """Test that the number of elements must not change."""
    A = csparsity.dense(3, 4)

    with pytest.raises(csparsity.InvalidArgumentError,
                       match="number of elements"):
        csparsity.reshape(A, 5, 2)

    with pytest.raises(ValueError):
        csparsity.reshape(A, 2, 5)


def test_vec():
    """Test the vectorization of a pattern."""
    A = csparsity.SparsityPattern((2, 3), [0, 2, 3], [0, 2, 1])
    v = csparsity.vec(A)

    assert v.shape == (6, 1)
    assert_array_equal(v.indptr, [0, 1, 1, 2, 2, 3, 3])
    assert_array_equal(v.indices, [0, 0, 0])
    assert_array_equal(v.toarray().ravel(), A.toarray().ravel())


# -----------------------------------------------------------------------------
#         Lower triangle
# -----------------------------------------------------------------------------
def test_lower_small():
    """Test the lower triangle of a small pattern."""
    A = csparsity.dense(3, 3)
    L = csparsity.lower_pattern(A)

    assert L == csparsity.tril(3)
    assert_array_equal(csparsity.lower_indices(A), [0, 3, 4, 6, 7, 8])


@pytest.mark.parametrize("S", generate_random_matrices(square_only=False))
def test_lower_random(S):
    """Test the lower triangle against scipy."""
    A, values = csparsity.from_scipy_sparse(S)
    L = csparsity.lower_pattern(A)
    idx = csparsity.lower_indices(A)

    assert_valid_pattern(L)
    assert L.shape == A.shape
    assert L.is_sequential()
    assert_same_structure(L, sparse.tril(S))

    # The storage indices select the same nonzeros, in the same order
    assert idx.size == L.nnz
    assert_array_equal(np.diff(idx) > 0, True)
    assert_array_equal(csparsity.to_ndarray(L, values[idx]),
                       np.tril(S.toarray()))


def test_lower_unsorted():
    """Test the lower triangle of a pattern with unsorted columns."""
    A = csparsity.SparsityPattern((2, 2), [0, 0, 2], [1, 0])

    with warnings.catch_warnings():
        warnings.simplefilter('error')
        L = csparsity.lower_pattern(A)

    assert L.is_sequential()
    assert_array_equal(L.indptr, [0, 0, 2])
    assert_array_equal(L.indices, [0, 1])


def test_lower_upper_only():
    """Test the lower triangle of a strictly upper triangular pattern."""
    A = csparsity.band(4, 1)
    L = csparsity.lower_pattern(A)

    assert L.nnz == 0
    assert L.shape == (4, 4)
    assert csparsity.lower_indices(A).size == 0

# =============================================================================
# =============================================================================
