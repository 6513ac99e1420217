#!/usr/bin/env python3
# =============================================================================
#     File: _pattern.py
#  Created: 2026-10-12 10:02
#   Author: Bernie Roesler
#
"""
Compressed-row sparsity patterns and their basic constructors.

A `SparsityPattern` stores only the structure of an (M, N) matrix, in the
usual compressed-row form:

.. code-block:: python
    indptr  : (M + 1,) row pointers, indptr[0] == 0, non-decreasing
    indices : (nnz,) column index of each nonzero, row by row

The arrays are read-only once the pattern has been constructed. Operations
that change the structure (transpose, reshape, ...) return a new pattern.
"""
# =============================================================================

import numpy as np

from .errors import (InvalidArgumentError, OutOfRangeError, UnsupportedError,
                     check_index_range)


class SparsityPattern:
    """The nonzero structure of a sparse matrix in compressed-row form.

    Parameters
    ----------
    shape : tuple of int
        The dimensions `(M, N)` of the matrix.
    indptr : (M + 1,) array_like of int
        The row pointers. The column indices of row `i` are stored in
        `indices[indptr[i]:indptr[i+1]]`.
    indices : (nnz,) array_like of int
        The column index of each nonzero.
    check : bool, optional
        If True (default), validate the compressed structure.

    Raises
    ------
    InvalidArgumentError
        If a dimension is negative, or the array lengths are inconsistent.
    OutOfRangeError
        If a column index is not in `[0, N)`.
    """

    def __init__(self, shape, indptr, indices, check=True):
        M, N = _check_shape(shape)
        indptr = np.array(indptr, dtype=np.intp)
        indices = np.array(indices, dtype=np.intp)

        if check:
            _check_compressed(M, N, indptr, indices)

        indptr.flags.writeable = False
        indices.flags.writeable = False

        self._shape = (M, N)
        self._indptr = indptr
        self._indices = indices

    # -------------------------------------------------------------------------
    #         Attributes
    # -------------------------------------------------------------------------
    @property
    def shape(self):
        """The dimensions `(M, N)` of the matrix."""
        return self._shape

    @property
    def nrow(self):
        return self._shape[0]

    @property
    def ncol(self):
        return self._shape[1]

    @property
    def indptr(self):
        """The (read-only) row pointer array."""
        return self._indptr

    @property
    def indices(self):
        """The (read-only) column index array."""
        return self._indices

    @property
    def nnz(self):
        """The number of structural nonzeros."""
        return int(self._indptr[-1])

    @property
    def numel(self):
        """The number of elements, `M * N`, of the matrix."""
        return self._shape[0] * self._shape[1]

    # -------------------------------------------------------------------------
    #         Views
    # -------------------------------------------------------------------------
    def row_indices(self):
        """Expand the row pointers into the row index of each nonzero.

        Returns
        -------
        rows : (nnz,) ndarray of int
            The row index of each nonzero, in storage order.
        """
        return np.repeat(np.arange(self.nrow, dtype=np.intp),
                         np.diff(self._indptr))

    def is_sequential(self, strictly=True):
        """Check if the column indices are sorted within each row.

        Parameters
        ----------
        strictly : bool, optional
            If True (default), the column indices must be strictly
            increasing, *i.e.* sorted with no duplicate entries. Otherwise,
            they need only be non-decreasing.

        Returns
        -------
        result : bool
            True if the pattern is sequential.
        """
        nnz = self.nnz
        if nnz < 2:
            return True

        # Ignore the steps between the last entry of a row and the first
        # entry of the next one
        same_row = np.ones(nnz - 1, dtype=bool)
        starts = self._indptr[1:-1]
        same_row[starts[(starts > 0) & (starts < nnz)] - 1] = False

        d = np.diff(self._indices)[same_row]

        return bool(np.all(d > 0) if strictly else np.all(d >= 0))

    def flat_indices(self):
        """Compute the row-major linear index of each nonzero.

        Returns
        -------
        result : (nnz,) ndarray of int
            The linear index `col + row * N` of each nonzero.
        """
        return self._indices + self.row_indices() * self.ncol

    def transpose(self, return_mapping=False):
        """Compute the transpose of the pattern.

        See Also
        --------
        csparsity.transpose : The functional form of this method.
        """
        from ._transpose import transpose
        AT, mapping = transpose(self)
        return (AT, mapping) if return_mapping else AT

    @property
    def T(self):
        return self.transpose()

    def toarray(self):
        """Convert the pattern to a dense boolean mask.

        Returns
        -------
        result : (M, N) ndarray of bool
            True at each structural nonzero.
        """
        mask = np.zeros(self._shape, dtype=bool)
        mask[self.row_indices(), self._indices] = True
        return mask

    # -------------------------------------------------------------------------
    #         Comparisons
    # -------------------------------------------------------------------------
    def __eq__(self, other):
        if not isinstance(other, SparsityPattern):
            return NotImplemented
        return (
            self._shape == other._shape
            and np.array_equal(self._indptr, other._indptr)
            and np.array_equal(self._indices, other._indices)
        )

    __hash__ = None

    def __repr__(self):
        M, N = self._shape
        return (f"<SparsityPattern of shape ({M}, {N}) "
                f"with {self.nnz} stored elements>")


# -----------------------------------------------------------------------------
#         Validation helpers
# -----------------------------------------------------------------------------
def _check_dim(name, n):
    """Check that a dimension is a non-negative integer."""
    if int(n) != n or n < 0:
        raise InvalidArgumentError(
            f"{name} must be a non-negative integer, got {n}."
        )
    return int(n)


def _check_shape(shape):
    """Check that `shape` is a pair of non-negative integers."""
    try:
        M, N = shape
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"shape must be a pair (M, N), got {shape}.")
    return _check_dim('M', M), _check_dim('N', N)


def _check_compressed(M, N, indptr, indices):
    """Check the compressed-row invariants."""
    if indptr.ndim != 1 or indptr.size != M + 1:
        raise InvalidArgumentError(
            f"indptr must have length M + 1 = {M + 1}, got {indptr.size}."
        )

    if indptr[0] != 0:
        raise InvalidArgumentError(f"indptr[0] must be 0, got {indptr[0]}.")

    if np.any(np.diff(indptr) < 0):
        raise InvalidArgumentError("indptr must be non-decreasing.")

    if indices.ndim != 1 or indices.size != indptr[-1]:
        raise InvalidArgumentError(
            f"indices must have length indptr[M] = {indptr[-1]}, "
            f"got {indices.size}."
        )

    check_index_range('indices', indices, N)


def _as_index_array(name, x):
    """Convert `x` to a 1D integer array."""
    x = np.asarray(x)
    if x.size == 0:
        return np.zeros(0, dtype=np.intp)
    if x.ndim != 1 or not np.issubdtype(x.dtype, np.integer):
        raise InvalidArgumentError(
            f"{name} must be a 1D array of integers, got {x.dtype} "
            f"with shape {x.shape}."
        )
    return x.astype(np.intp, copy=False)


def _counts_to_indptr(counts):
    """Compute the row pointers from the number of entries in each row.

    Parameters
    ----------
    counts : (M,) array_like of int
        The number of entries in each row.

    Returns
    -------
    indptr : (M + 1,) ndarray of int
        The cumulative sum of `counts`, starting at 0.
    """
    indptr = np.zeros(len(counts) + 1, dtype=np.intp)
    np.cumsum(counts, out=indptr[1:])
    return indptr


# -----------------------------------------------------------------------------
#         Constructors
# -----------------------------------------------------------------------------
def dense(M, N):
    """Create the pattern of a dense `(M, N)` matrix."""
    M, N = _check_dim('M', M), _check_dim('N', N)
    indptr = _counts_to_indptr(np.full(M, N, dtype=np.intp))
    indices = np.tile(np.arange(N, dtype=np.intp), M)
    return SparsityPattern((M, N), indptr, indices, check=False)


def empty(M, N):
    """Create the pattern of an `(M, N)` matrix with no nonzeros."""
    M, N = _check_dim('M', M), _check_dim('N', N)
    indptr = _counts_to_indptr(np.zeros(M, dtype=np.intp))
    return SparsityPattern((M, N), indptr, [], check=False)


def diag(N):
    """Create the pattern of an `(N, N)` diagonal matrix.

    Examples
    --------
    >>> A = diag(3)
    >>> A.indptr, A.indices
    (array([0, 1, 2, 3]), array([0, 1, 2]))
    """
    N = _check_dim('N', N)
    indptr = _counts_to_indptr(np.ones(N, dtype=np.intp))
    return SparsityPattern((N, N), indptr, np.arange(N), check=False)


def band(N, k):
    """Create the pattern of a single band of an `(N, N)` matrix.

    Parameters
    ----------
    N : int
        The size of the matrix.
    k : int
        The offset of the band from the main diagonal. `k > 0` is above the
        diagonal, `k < 0` below it.

    Returns
    -------
    result : (N, N) SparsityPattern
        The pattern with nonzeros at `(i, i + k)`.

    Raises
    ------
    InvalidArgumentError
        If `N` is negative or `|k| >= N`.
    """
    N = _check_dim('N', N)
    if abs(k) >= N:
        raise InvalidArgumentError(
            f"The band offset |k| = {abs(k)} must be smaller than N = {N}."
        )

    # Rows with an entry are max(0, -k) <= i < min(N, N - k)
    counts = np.zeros(N, dtype=np.intp)
    counts[max(0, -k):min(N, N - k)] = 1

    indices = np.arange(N - abs(k), dtype=np.intp) + max(k, 0)

    return SparsityPattern((N, N), _counts_to_indptr(counts), indices,
                           check=False)


def banded(N, k):
    """Create the pattern of an `(N, N)` matrix with `k` bands on each side
    of the diagonal.

    .. note:: Not implemented. Build the bands with `band` and assemble them
        with `csparsity.triplet` instead.

    Raises
    ------
    UnsupportedError
        Always.
    """
    raise UnsupportedError("banded: Not implemented yet.")


def tril(N):
    """Create the pattern of a dense `(N, N)` lower triangular matrix.

    Examples
    --------
    >>> A = tril(3)
    >>> A.indptr, A.indices
    (array([0, 1, 3, 6]), array([0, 0, 1, 0, 1, 2]))
    """
    N = _check_dim('N', N)
    counts = np.arange(1, N + 1, dtype=np.intp)
    indptr = _counts_to_indptr(counts)
    # column j of row i runs from 0 to i
    indices = (np.arange(indptr[-1], dtype=np.intp)
               - np.repeat(indptr[:-1], counts))
    return SparsityPattern((N, N), indptr, indices, check=False)


def rowcol(rows, cols, M, N):
    """Create the pattern of the block `A[rows][:, cols]` of an `(M, N)`
    matrix.

    Every row in `rows` gets a nonzero in every column in `cols`.

    Parameters
    ----------
    rows : (K,) array_like of int
        The rows of the block. Must be strictly increasing and `< M`.
    cols : (L,) array_like of int
        The columns of the block, each `< N`. The order is kept as given.
    M, N : int
        The dimensions of the matrix.

    Returns
    -------
    result : (M, N) SparsityPattern
        The pattern with `K * L` nonzeros.

    Raises
    ------
    OutOfRangeError
        If `rows` is not strictly increasing, or an index exceeds the
        declared dimensions.
    """
    M, N = _check_dim('M', M), _check_dim('N', N)
    rows = _as_index_array('rows', rows)
    cols = _as_index_array('cols', cols)

    check_index_range('rows', rows, M)
    check_index_range('cols', cols, N)

    bad = np.flatnonzero(np.diff(rows) <= 0)
    if bad.size > 0:
        k = bad[0] + 1
        raise OutOfRangeError(
            f"rows must be strictly increasing: the {k}th entry of rows "
            f"({rows[k]}) is not greater than the previous one "
            f"({rows[k-1]})."
        )

    counts = np.zeros(M, dtype=np.intp)
    counts[rows] = cols.size
    indices = np.tile(cols, rows.size)

    return SparsityPattern((M, N), _counts_to_indptr(counts), indices,
                           check=False)


def from_nonzeros(rows, cols, M, N, monotone=True):
    """Create a pattern from a list of nonzeros in row-major order.

    The column indices are kept in the order given, so the result is
    sequential only if `cols` is sorted within each row. Use
    `csparsity.triplet` for unordered input.

    Parameters
    ----------
    rows, cols : (K,) array_like of int
        The row and column index of each nonzero. `rows` must be
        non-decreasing.
    M, N : int
        The dimensions of the matrix.
    monotone : bool, optional
        Assert that `rows` is non-decreasing. Only True is supported.

    Returns
    -------
    result : (M, N) SparsityPattern
        The pattern with `K` nonzeros.

    Raises
    ------
    InvalidArgumentError
        If `rows` and `cols` have different lengths.
    OutOfRangeError
        If `rows` decreases, or an index exceeds the declared dimensions.
    UnsupportedError
        If `monotone` is False.
    """
    if not monotone:
        raise UnsupportedError(
            "from_nonzeros: Not implemented for monotone=False. "
            "Use csparsity.triplet for unordered nonzeros."
        )

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

    bad = np.flatnonzero(np.diff(rows) < 0)
    if bad.size > 0:
        k = bad[0] + 1
        raise OutOfRangeError(
            f"rows must be non-decreasing: the {k}th entry of rows "
            f"({rows[k]}) is smaller than the previous one ({rows[k-1]})."
        )

    counts = np.bincount(rows, minlength=M)

    return SparsityPattern((M, N), _counts_to_indptr(counts), cols,
                           check=False)


# =============================================================================
# =============================================================================
