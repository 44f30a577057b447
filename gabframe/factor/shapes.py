"""Conversions between user window arrays and the (L, R) working shape."""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from ..errors import BadArgumentError, as_int, require_positive


def window_count(g: np.ndarray, L: int, R: Optional[int]) -> int:
    """
    Number of windows held by ``g``.

    Raises:
        NotPositiveArgError: If ``R`` is given and not positive.
        BadArgumentError: If ``R`` is omitted and cannot be inferred.
    """
    if R is not None:
        return require_positive(R, "R")

    g = np.asarray(g)
    L = as_int(L, "L")
    if g.ndim == 2:
        return g.shape[1]
    if L > 0 and g.size % L == 0 and g.size > 0:
        return g.size // L
    raise BadArgumentError(f"Cannot infer the number of windows of length {L} from {g.shape}.")


def as_windows(g: np.ndarray, L: int, R: int) -> np.ndarray:
    """
    View ``g`` as an (L, R) array, column ``w`` holding window ``w``.

    A 1D input is read as the flat column-major buffer ``g[l + L*w]``.
    """
    g = np.asarray(g)
    if g.ndim == 2 and g.shape == (L, R):
        return g
    if g.ndim == 1 and g.size == L * R:
        return g.reshape(R, L).T
    raise BadArgumentError(
        f"Window array of shape {g.shape} does not hold {R} window(s) of length {L}."
    )


def result_shape(L: int, R: int) -> Tuple[int, ...]:
    """Shape of a freshly allocated window result: (L,) for one window."""
    return (L,) if R == 1 else (L, R)
