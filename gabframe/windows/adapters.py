"""FIR/long window length adapters and normalization.

A FIR window of length ``gl`` is stored zero-centred: the first
``ceil(gl/2)`` samples are the non-negative times and the last
``floor(gl/2)`` samples the negative ones. Lifting to length ``L``
inserts zeros in the middle; restricting removes them.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..errors import BadArgumentError, require, require_positive


def fir2long(g: np.ndarray, L: int) -> np.ndarray:
    """
    Extend a FIR window to length ``L`` by zero-padding in the middle.

    Args:
        g: Window of length gl along axis 0 (further axes are kept).
        L: Target length, ``L >= gl``.

    Returns:
        Array of length ``L`` along axis 0, same dtype as ``g``.

    Raises:
        NullArgError: If g is None.
        NotPositiveArgError: If L or gl is not positive.
        BadArgumentError: If L < gl.
    """
    require(g, "g")
    g = np.asarray(g)
    gl = require_positive(g.shape[0] if g.ndim else 0, "gl")
    L = require_positive(L, "L")
    if L < gl:
        raise BadArgumentError(f"L (passed {L}) must be >= the window length {gl}.")

    head = gl - gl // 2
    tail = gl // 2
    out = np.zeros((L,) + g.shape[1:], dtype=g.dtype)
    out[:head] = g[:head]
    if tail:
        out[L - tail :] = g[head:]
    return out


def long2fir(g: np.ndarray, gl: int) -> np.ndarray:
    """
    Cut a long window down to a centred FIR window of length ``gl``.

    Raises:
        NullArgError: If g is None.
        NotPositiveArgError: If gl or the input length is not positive.
        BadArgumentError: If gl exceeds the input length.
    """
    require(g, "g")
    g = np.asarray(g)
    L = require_positive(g.shape[0] if g.ndim else 0, "L")
    gl = require_positive(gl, "gl")
    if gl > L:
        raise BadArgumentError(f"gl (passed {gl}) must be <= the window length {L}.")

    head = gl - gl // 2
    tail = gl // 2
    out = np.zeros((gl,) + g.shape[1:], dtype=g.dtype)
    out[:head] = g[:head]
    if tail:
        out[head:] = g[L - tail :]
    return out


_NORMS = {
    "peak": np.inf,
    "inf": np.inf,
    "energy": 2,
    "2": 2,
    "area": 1,
    "1": 1,
}


def normalize(g: np.ndarray, norm: Optional[str] = None) -> np.ndarray:
    """
    Normalize each column of ``g`` (along axis 0).

    Args:
        g: Window array.
        norm: None (unchanged), "peak"/"inf", "energy"/"2" or "area"/"1".

    Returns:
        Normalized copy of ``g``. All-zero columns are left as they are.
    """
    if norm is None:
        return g
    key = str(norm).lower()
    if key not in _NORMS:
        raise BadArgumentError(f"Unknown normalization: {norm!r}")

    g = np.array(g, dtype=np.result_type(g, np.float64))
    order = _NORMS[key]
    if order == 1:
        scale = np.sum(np.abs(g), axis=0)
    else:
        scale = np.linalg.norm(g, ord=order, axis=0)
    scale = np.where(scale > 0, scale, 1.0)
    return g / scale
