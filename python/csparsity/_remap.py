#!/usr/bin/env python3
# =============================================================================
#     File: _remap.py
#  Created: 2026-10-13 08:52
#   Author: Bernie Roesler
#
"""
Reshape, vectorization and lower-triangular extraction of sparsity patterns.

All of these operations work on the row-major linear index of each nonzero,
so the order of the nonzeros is preserved. A sequential input gives a
sequential result, which is assembled with the sorted hint. Any other input
is sorted and its duplicates are coalesced, as in `triplet`.
"""
# =============================================================================

from ._pattern import _check_dim
from ._triplet import triplet
from .errors import InvalidArgumentError


def flat_indices(A):
    """Compute the row-major linear index `col + row * N` of each nonzero.

    See Also
    --------
    SparsityPattern.flat_indices : The method form of this function.
    """
    return A.flat_indices()


def reshape(A, M, N):
    """Reshape a pattern to `(M, N)`, in row-major (C) order.

    Parameters
    ----------
    A : SparsityPattern
        The pattern to reshape.
    M, N : int
        The new dimensions. `M * N` must equal `A.numel`.

    Returns
    -------
    result : (M, N) SparsityPattern
        The reshaped pattern. If `A` is sequential, the `k`th nonzero of the
        result is the `k`th nonzero of `A`. Otherwise the result is sorted,
        with duplicates coalesced.

    Raises
    ------
    InvalidArgumentError
        If the number of elements would change.

    Notes
    -----
    This function matches `scipy.sparse` `reshape` with `order='C'`, and
    differs from MATLAB's column-major `reshape`.
    """
    M, N = _check_dim('M', M), _check_dim('N', N)

    if M * N != A.numel:
        raise InvalidArgumentError(
            "reshape: number of elements must remain the same. "
            f"Input argument has shape {A.shape} = {A.numel}, "
            f"while you request a reshape to ({M}, {N}) = {M * N}."
        )

    # N == 0 only with no nonzeros, which must not reach z // N
    if A.nnz == 0:
        return triplet(M, N, [], [], columns_are_sorted=True)

    # A row-major scan of a sequential A gives increasing linear indices,
    # hence the new pattern is already sorted
    z = A.flat_indices()

    return triplet(M, N, z // N, z % N,
                   columns_are_sorted=A.is_sequential())


def vec(A):
    """Stack the rows of a pattern into a single column.

    Returns
    -------
    result : (A.numel, 1) SparsityPattern
        The vectorized pattern, `reshape(A, A.numel, 1)`.
    """
    return reshape(A, A.numel, 1)


def lower_pattern(A):
    """Extract the lower triangular part of a pattern, diagonal included.

    Parameters
    ----------
    A : (M, N) SparsityPattern
        The input pattern.

    Returns
    -------
    result : (M, N) SparsityPattern
        The pattern of the nonzeros of `A` with `row >= col`, sorted within
        each row.

    See Also
    --------
    lower_indices : The storage indices of the same nonzeros in `A`.
    """
    rows = A.row_indices()
    lower = rows >= A.indices
    return triplet(A.nrow, A.ncol, rows[lower], A.indices[lower],
                   columns_are_sorted=A.is_sequential())


def lower_indices(A):
    """Get the storage indices of the lower triangular nonzeros of a pattern.

    Parameters
    ----------
    A : (M, N) SparsityPattern
        The input pattern.

    Returns
    -------
    result : (K,) ndarray of int
        The indices into `A.indices` of the nonzeros with `row >= col`, in
        storage order. `K == lower_pattern(A).nnz`, and for values `x` of
        `A`, `x[result]` are the values of `lower_pattern(A)`.
    """
    return (A.row_indices() >= A.indices).nonzero()[0]


# =============================================================================
# =============================================================================
