#!/usr/bin/env python3
# =============================================================================
#     File: __init__.py
#  Created: 2025-02-14 08:59
#   Author: Bernie Roesler
#
"""
csparsity: compressed-row sparsity patterns and sparse QR.

This module provides the structural operations on sparsity patterns
(construction, triplet assembly, transpose, reshape) together with a
left-looking sparse QR factorization with Householder reflections.

Example usage:
    import csparsity
    rows = [0, 1, 2, 0, 1, 2, 0, 2, 2]
    cols = [0, 0, 0, 1, 1, 1, 2, 2, 2]
    A, mapping = csparsity.triplet(3, 3, rows, cols, return_mapping=True)
    print(A.indptr, A.indices)

Author: Bernie Roesler
Date: 2026-10-12
Version: 0.1
"""
# =============================================================================

import logging

from .errors import *
from ._pattern import (SparsityPattern, dense, empty, diag, band, banded,
                       tril, rowcol, from_nonzeros)
from ._triplet import triplet, remove_duplicates
from ._transpose import transpose
from ._remap import flat_indices, reshape, vec, lower_pattern, lower_indices
from ._qr import house, sparse_qr, QRWorkspace, PathStack
from .qr_utils import inv_permute, qr_factors, apply_qright, apply_qtleft
from .utils import (davis_example_small, davis_example_qr, to_ndarray,
                    to_scipy_sparse, from_scipy_sparse)

__version__ = '0.1.0'

# The library never configures logging handlers itself
logging.getLogger(__name__).addHandler(logging.NullHandler())

# =============================================================================
# =============================================================================
