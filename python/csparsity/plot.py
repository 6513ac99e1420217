#!/usr/bin/env python3
# =============================================================================
#     File: plot.py
#  Created: 2025-05-07 19:44
#   Author: Bernie Roesler
#
"""
Functions for plotting sparsity patterns.
"""
# =============================================================================

import matplotlib.pyplot as plt
import numpy as np

from matplotlib.ticker import MaxNLocator
from scipy.sparse import issparse

from ._pattern import SparsityPattern
from .utils import to_ndarray


def cspy(A, values=None, cmap='viridis_r', colorbar=True, ax=None, **kwargs):
    """Visualize a sparsity pattern or matrix with colored markers.

    This function is similar to `matplotlib.pyplot.spy`, but it colors the
    markers based on the value of the non-zero elements in the matrix.

    Parameters
    ----------
    A : SparsityPattern or array_like
        The 2D matrix to visualize. Can be a `SparsityPattern` (with its
        `values`), a NumPy array, or a SciPy sparse array.
    values : (A.nnz,) array_like, optional
        The values of the nonzeros, if `A` is a `SparsityPattern`. If not
        given, every structural nonzero is drawn with the value 1.
    cmap : str or matplotlib.colors.Colormap, optional
        The colormap to use for coloring the markers, by default 'viridis_r'.
    colorbar : bool, optional
        Whether to display a colorbar, by default True.
    ax : matplotlib.axes.Axes, optional
        An existing Axes object to plot on. If None (default), the current axes
        are used.
    **kwargs
        Additional keyword arguments passed directly to
        `matplotlib.pyplot.imshow`.

    Returns
    -------
    ax : matplotlib.axes.Axes
        The Axes object used for plotting.
    cb : matplotlib.colorbar.Colorbar
        The colorbar object, or None.

    See Also
    --------
    matplotlib.pyplot.spy : Plot the sparsity pattern of a 2D array.
    """
    if ax is None:
        ax = plt.gca()  # get current Axes if not provided

    fig = ax.figure

    if isinstance(A, SparsityPattern):
        if values is None:
            values = np.ones(A.nnz)
        dense_matrix = to_ndarray(A, values).astype(np.float64)
        nnz = A.nnz
    elif issparse(A):
        dense_matrix = A.toarray().astype(np.float64)
        nnz = np.count_nonzero(dense_matrix)
    else:
        dense_matrix = np.array(A, dtype=np.float64)
        nnz = np.count_nonzero(dense_matrix)

    if dense_matrix.ndim != 2:
        raise ValueError("Input matrix must be 2-dimensional.")

    M, N = dense_matrix.shape

    # Set zeros to NaN
    dense_matrix[dense_matrix == 0] = np.nan

    # Set plot limits and aspect ratio
    # Ensure limits are appropriate even for single row/column matrices
    ax.set_xlim(-0.75, N - 0.25 if N > 0 else 0.75)
    ax.set_ylim(M - 0.25 if M > 0 else 0.75, -0.75)  # inverted y-axis like spy

    ax.xaxis.tick_top()  # match spy's x-axis orientation
    ax.spines['right'].set_visible(True)
    ax.spines['top'].set_visible(True)

    # Use MaxNLocator to ensure integer ticks on both axes
    ax.xaxis.set_major_locator(MaxNLocator(integer=True))
    ax.yaxis.set_major_locator(MaxNLocator(integer=True))

    if nnz == 0:
        ax.set_xlabel(f"{(M, N)}, nnz = 0, density = 0")
        return ax, None

    ax.set_xlabel((f"{(M, N)}, nnz = {nnz}, "
                   f"density = {nnz / (M * N):.2%}"))

    im = ax.imshow(dense_matrix, cmap=cmap, origin='upper', aspect='equal',
                   **kwargs)

    # Add a colorbar
    if colorbar:
        cb = fig.colorbar(im, ax=ax, shrink=0.8)
    else:
        cb = None

    return ax, cb


def qrspy(V_T, R_T, ax=None, **kwargs):
    """Plot the patterns of the QR factors in a single matrix.

    The Householder vectors are drawn in the lower trapezoid, and the upper
    triangular factor above them, as in the "V + R" plots of Davis, Fig 5.1.

    Parameters
    ----------
    V_T : (N, M2) SparsityPattern
        The pattern of the transposed Householder vectors.
    R_T : (N, N) SparsityPattern
        The pattern of the transposed upper triangular factor.
    ax : matplotlib.axes.Axes, optional
        An existing Axes object to plot on. If None (default), the current axes
        are used.
    **kwargs
        Additional keyword arguments passed to `matplotlib.axes.Axes.spy`.

    Returns
    -------
    ax : matplotlib.axes.Axes
        The Axes object used for plotting.
    """
    if ax is None:
        ax = plt.gca()

    N, M2 = V_T.shape
    S = np.zeros((M2, N), dtype=bool)
    S |= V_T.toarray().T
    S[:N] |= R_T.toarray().T

    opts = dict(markersize=2)
    opts.update(kwargs)
    ax.spy(S, **opts)
    ax.set_title(f"V + R: nnz(V) = {V_T.nnz}, nnz(R) = {R_T.nnz}")

    return ax


# =============================================================================
# =============================================================================
