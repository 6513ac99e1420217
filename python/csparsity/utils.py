#!/usr/bin/env python3
# =============================================================================
#     File: utils.py
#  Created: 2025-02-17 14:13
#   Author: Bernie Roesler
#
"""
Utility functions for the csparsity module.
"""
# =============================================================================

import numpy as np

from scipy import sparse

from ._pattern import SparsityPattern
from .errors import InvalidArgumentError


def davis_example_small(format='pattern'):
    r"""Create a 4x4 example matrix from Davis [0].

    .. code-block:: python
        array([[4.5,   0, 3.2,   0],
               [3.1, 2.9,   0, 0.9],
               [  0, 1.7,   3,   0],
               [3.5, 0.4,   0,   1]])

    Parameters
    ----------
    format : str, optional
        The output format, see `_format_matrix`.

    Returns
    -------
    A : (4, 4) matrix in the specified format
        The example matrix from Davis.

    References
    ----------
    .. [0] Davis, Timothy A. "Direct Methods for Sparse Linear Systems",
        Eqn (2.1), p. 7-8.
    """
    rows = np.r_[2,    1,    3,    0,    1,    3,    3,    1,    0,    2]
    cols = np.r_[2,    0,    3,    2,    1,    0,    1,    3,    0,    1]
    vals = np.r_[3.0,  3.1,  1.0,  3.2,  2.9,  3.5,  0.4,  0.9,  4.5,  1.7]
    A = sparse.coo_array((vals, (rows, cols)), shape=(4, 4))
    return _format_matrix(A, format)


def davis_example_qr(format='pattern'):
    r"""Create an 8x8 example matrix from Davis Figure 5.1 [0].

    .. code-block:: python
        array([[1., 0., 0., 1., 0., 0., 1., 0.,]
               [0., 2., 1., 0., 0., 0., 1., 0.,]
               [0., 0., 3., 1., 0., 0., 0., 0.,]
               [1., 0., 0., 4., 0., 0., 1., 0.,]
               [0., 0., 0., 0., 5., 1., 0., 0.,]
               [0., 0., 0., 0., 1., 6., 0., 1.,]
               [0., 1., 1., 0., 0., 0., 7., 1.,]
               [0., 0., 0., 0., 1., 1., 1., 8.,]])

    Parameters
    ----------
    format : str, optional
        The output format, see `_format_matrix`.

    Returns
    -------
    A : (8, 8) matrix in the specified format
        The example matrix from Davis.

    References
    ----------
    .. [0] Davis, Timothy A. "Direct Methods for Sparse Linear Systems",
        Figure 5.1, p. 74.
    """
    # off-diagonal entries, all ones
    rows = np.r_[0, 0, 1, 1, 2, 3, 3, 4, 5, 5, 6, 6, 6, 7, 7, 7]
    cols = np.r_[3, 6, 2, 6, 3, 0, 6, 5, 4, 7, 1, 2, 7, 4, 5, 6]
    vals = np.ones(rows.size)
    A = (sparse.coo_array((vals, (rows, cols)), shape=(8, 8))
         + sparse.diags_array(np.arange(1.0, 9.0)))
    return _format_matrix(A, format)


def _format_matrix(A, format):
    """Convert a scipy sparse array to the specified format.

    Parameters
    ----------
    A : sparse array
        The matrix to convert.
    format : str
        One of 'pattern', which returns a `(SparsityPattern, values)` tuple,
        'ndarray', or any scipy sparse format name.
    """
    match format:
        case 'pattern':
            return from_scipy_sparse(A)
        case 'bsr' | 'coo' | 'csc' | 'csr' | 'dia' | 'dok' | 'lil':
            return A.asformat(format)
        case 'ndarray':
            return A.toarray()
        case _:
            raise InvalidArgumentError(f"Invalid format '{format}'")


def to_ndarray(A, values=None, order='C'):
    r"""Convert a sparsity pattern and its values to a numpy ndarray.

    Parameters
    ----------
    A : (M, N) SparsityPattern
        The pattern to convert.
    values : (A.nnz,) array_like, optional
        The values of the nonzeros. If not given, the result is the boolean
        mask of the pattern.
    order : str, optional in {'C', 'F'}
        The order of the output array.

    Returns
    -------
    result : (M, N) ndarray
        The matrix as a numpy array. Duplicate entries are summed.
    """
    if values is None:
        return np.asarray(A.toarray(), order=order)

    values = _check_values(A, values)
    X = np.zeros(A.shape, dtype=values.dtype, order=order)
    np.add.at(X, (A.row_indices(), A.indices), values)
    return X


def to_scipy_sparse(A, values=None, format='csr'):
    r"""Convert a sparsity pattern to a scipy.sparse array.

    Parameters
    ----------
    A : (M, N) SparsityPattern
        The pattern to convert.
    values : (A.nnz,) array_like, optional
        The values of the nonzeros. If not given, every nonzero is 1.0.
    format : str, optional in {'bsr', 'coo', 'csc', 'csr', 'dia', 'dok', 'lil'}
        The format of the output matrix.

    Returns
    -------
    result : (M, N) sparse array
        The matrix in the specified format.
    """
    if values is None:
        values = np.ones(A.nnz)

    values = _check_values(A, values)

    A_sparse = sparse.csr_array(
        (values, A.indices.copy(), A.indptr.copy()),
        shape=A.shape
    )

    format_method_name = f"to{format}"
    try:
        format_method = getattr(A_sparse, format_method_name)
    except AttributeError:
        raise InvalidArgumentError(f"Invalid format '{format}'")
    return format_method()


def from_scipy_sparse(A):
    r"""Convert a scipy.sparse matrix to a sparsity pattern and values.

    Duplicate entries of `A` are summed, and the column indices are sorted.

    Parameters
    ----------
    A : (M, N) sparse array or matrix
        The matrix to convert.

    Returns
    -------
    pattern : (M, N) SparsityPattern
        The (sequential) pattern of `A`.
    values : (pattern.nnz,) ndarray
        The values of the nonzeros of `A`.
    """
    if not sparse.issparse(A):
        raise InvalidArgumentError(
            f"Expected a scipy sparse array, got {type(A)}."
        )
    A = sparse.csr_array(A, copy=True)
    A.sum_duplicates()  # also sorts the indices
    return SparsityPattern(A.shape, A.indptr, A.indices), A.data


def _check_values(A, values):
    """Check that `values` holds one entry per nonzero of `A`."""
    values = np.asarray(values)
    if values.shape != (A.nnz,):
        raise InvalidArgumentError(
            f"values must have shape ({A.nnz},), got {values.shape}."
        )
    return values


# =============================================================================
# =============================================================================
