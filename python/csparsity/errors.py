#!/usr/bin/env python3
# =============================================================================
#     File: errors.py
#  Created: 2026-10-12 09:41
#   Author: Bernie Roesler
#
"""
Exceptions raised by the csparsity module.

Each exception also derives from the builtin exception that describes the
same class of problem, so that callers catching `ValueError`, `IndexError` or
`NotImplementedError` keep working.
"""
# =============================================================================

import numpy as np


class SparsityError(Exception):
    """Base exception for csparsity errors."""
    pass


class InvalidArgumentError(SparsityError, ValueError):
    """Raised for mismatched lengths, invalid dimensions or options."""
    pass


class OutOfRangeError(SparsityError, IndexError):
    """Raised when an index exceeds a declared dimension."""
    pass


class UnsupportedError(SparsityError, NotImplementedError):
    """Raised when a requested construction variant is not implemented."""
    pass


class PreconditionViolation(SparsityError, RuntimeError):
    """Raised when the inputs of a numeric factorization are inconsistent."""
    pass


def check_index_range(name, idx, bound):
    """Raise an `OutOfRangeError` if any entry of `idx` is outside
    `[0, bound)`.

    Parameters
    ----------
    name : str
        The name of the argument, used in the error message.
    idx : (N,) ndarray of int
        The indices to check.
    bound : int
        The exclusive upper bound.
    """
    bad = np.flatnonzero((idx < 0) | (idx >= bound))
    if bad.size > 0:
        k = bad[0]
        raise OutOfRangeError(
            f"The {k}th entry of {name} ({idx[k]}) is out of range "
            f"[0, {bound})."
        )


__all__ = [
    'SparsityError',
    'InvalidArgumentError',
    'OutOfRangeError',
    'UnsupportedError',
    'PreconditionViolation',
]

# =============================================================================
# =============================================================================
