#!/usr/bin/env python3
# =============================================================================
#     File: _triplet.py
#  Created: 2026-10-12 15:10
#   Author: Bernie Roesler
#
"""
Assembly of sparsity patterns from triplet (COO) form.

The triplets may be in any order and may contain duplicates. The returned
mapping relates each nonzero of the pattern to one of the input triplets, so
that callers can place values with `x_out = x_in[mapping]`.

.. note:: Duplicate entries are *coalesced*, not summed: only the first of
    the duplicate triplets (in input order) survives in the mapping. Callers
    that need additive assembly must accumulate the values of the duplicates
    themselves, *e.g.* with `np.add.at`, before indexing.
"""
# =============================================================================

import logging
import warnings

import numpy as np

from ._pattern import (SparsityPattern, _as_index_array, _check_dim,
                       _counts_to_indptr)
from .errors import InvalidArgumentError, check_index_range

logger = logging.getLogger(__name__)


def triplet(M, N, rows, cols, columns_are_sorted=False, return_mapping=False):
    """Create a sparsity pattern from a list of (row, column) pairs.

    Parameters
    ----------
    M, N : int
        The dimensions of the matrix.
    rows, cols : (K,) array_like of int
        The row and column index of each entry.
    columns_are_sorted : bool, optional
        Assert that the entries are in row-major order with sorted columns
        and no duplicates. If True, the sort and duplicate removal passes are
        skipped.
    return_mapping : bool, optional
        If True, also return the mapping from the nonzeros of the result to
        the input entries.

    Returns
    -------
    A : (M, N) SparsityPattern
        The assembled pattern. It is sequential unless `columns_are_sorted`
        was given for unsorted input.
    mapping : (A.nnz,) ndarray of int, optional
        `mapping[k]` is the index of the input entry that produced the `k`th
        nonzero of `A`. Only returned if `return_mapping` is True.

    Raises
    ------
    InvalidArgumentError
        If `rows` and `cols` have different lengths, or `M` or `N` is
        negative.
    OutOfRangeError
        If an entry of `rows` or `cols` exceeds the declared dimensions.

    Examples
    --------
    >>> A, mapping = triplet(2, 2, [1, 0, 1], [0, 1, 0], return_mapping=True)
    >>> A.indptr, A.indices, mapping
    (array([0, 1, 2]), array([1, 0]), array([1, 0]))
    """
    M, N = _check_dim('M', M), _check_dim('N', N)
    rows = _as_index_array('rows', rows)
    cols = _as_index_array('cols', cols)

    if rows.size != cols.size:
        raise InvalidArgumentError(
            "rows and cols must be of the same length. "
            f"rows has length {rows.size} and cols has length {cols.size}."
        )

    check_index_range('rows', rows, M)
    check_index_range('cols', cols, N)

    # Counting sort by row: each entry goes to the next free slot of its row,
    # so a stable sort of the rows gives the slot -> entry mapping.
    indptr = _counts_to_indptr(np.bincount(rows, minlength=M))
    mapping = np.argsort(rows, kind='stable')
    A = SparsityPattern((M, N), indptr, cols[mapping], check=False)

    if columns_are_sorted:
        if not A.is_sequential(strictly=True):
            warnings.warn(
                "Entries are not sorted by row and column, or contain "
                "duplicates; the pattern is not sequential.",
                UserWarning,
                stacklevel=2
            )
    else:
        if not A.is_sequential(strictly=False):
            A, mapping = _sort_columns(A, mapping)

        if not A.is_sequential(strictly=True):
            nnz = A.nnz
            A, mapping = remove_duplicates(A, mapping)
            logger.debug("triplet: coalesced %d duplicate entries",
                         nnz - A.nnz)

    return (A, mapping) if return_mapping else A


def _sort_columns(A, mapping):
    """Sort the column indices within each row of `A`.

    Two stable bucket sorts, by column and then by row, which is the same as
    transposing twice. The input mapping is carried through both passes.
    """
    rows = A.row_indices()
    by_col = np.argsort(A.indices, kind='stable')
    by_row = by_col[np.argsort(rows[by_col], kind='stable')]
    B = SparsityPattern(A.shape, A.indptr, A.indices[by_row], check=False)
    return B, mapping[by_row]


def remove_duplicates(A, mapping=None):
    """Remove duplicate entries from a pattern with sorted columns.

    Only the first of each run of equal column indices in a row is kept.

    Parameters
    ----------
    A : (M, N) SparsityPattern
        A pattern whose column indices are non-decreasing within each row.
    mapping : (A.nnz,) array_like of int, optional
        A mapping from the nonzeros of `A` to some other index space. If not
        given, the identity is used.

    Returns
    -------
    B : (M, N) SparsityPattern
        The sequential pattern.
    mapping : (B.nnz,) ndarray of int
        The entries of the input mapping at the nonzeros that were kept.

    Raises
    ------
    InvalidArgumentError
        If `A` is not sorted within each row, or `mapping` has the wrong
        length.
    """
    if mapping is None:
        mapping = np.arange(A.nnz, dtype=np.intp)
    else:
        mapping = np.asarray(mapping, dtype=np.intp)

    if mapping.size != A.nnz:
        raise InvalidArgumentError(
            f"mapping must have length {A.nnz}, got {mapping.size}."
        )

    if not A.is_sequential(strictly=False):
        raise InvalidArgumentError(
            "Column indices must be sorted within each row "
            "to remove duplicates."
        )

    rows = A.row_indices()
    keep = np.ones(A.nnz, dtype=bool)
    keep[1:] = (rows[1:] != rows[:-1]) | (A.indices[1:] != A.indices[:-1])

    indptr = _counts_to_indptr(np.bincount(rows[keep], minlength=A.nrow))
    B = SparsityPattern(A.shape, indptr, A.indices[keep], check=False)

    return B, mapping[keep]


# =============================================================================
# =============================================================================
