#!/usr/bin/env python3
# =============================================================================
#     File: _transpose.py
#  Created: 2026-10-12 14:27
#   Author: Bernie Roesler
#
"""
Transpose of a sparsity pattern, as in Davis, §2.5 (`cs_transpose`).
"""
# =============================================================================

import numpy as np

from ._pattern import SparsityPattern, _counts_to_indptr


def transpose(A):
    """Compute the transpose of a sparsity pattern.

    The nonzeros of `A` are visited in row-major order and scattered into
    one bucket per column, so that the rows of the result are sorted within
    each of its rows.

    Parameters
    ----------
    A : (M, N) SparsityPattern
        The pattern to transpose.

    Returns
    -------
    AT : (N, M) SparsityPattern
        The transposed pattern.
    mapping : (nnz,) ndarray of int
        `mapping[k]` is the storage index in `A` of the `k`th nonzero of `AT`.
        For values `x` of `A`, the values of `AT` are `x[mapping]`.

    Notes
    -----
    If the columns of `A` are sorted within each row, transposing twice
    restores `A` exactly, duplicates included, and composing the two mappings
    gives the identity::

        AT, m1 = transpose(A)
        B, m2 = transpose(AT)
        assert B == A and np.all(m1[m2] == np.arange(A.nnz))

    Otherwise `B` is `A` with its columns stably sorted within each row, and
    `m1[m2]` is the sorting permutation.
    """
    M, N = A.shape

    # Column counts are the row counts of the transpose
    indptr = _counts_to_indptr(np.bincount(A.indices, minlength=N))

    # A stable sort by column is the counting-sort scatter: entries of each
    # column bucket keep their row-major order
    mapping = np.argsort(A.indices, kind='stable')
    indices = A.row_indices()[mapping]

    return SparsityPattern((N, M), indptr, indices, check=False), mapping


# =============================================================================
# =============================================================================
