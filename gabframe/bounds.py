"""Frame bounds of Gabor systems.

The frame operator of a Gabor system is block diagonal in the factor
domain, so its spectrum is the union of the spectra of the Gram slabs
``G G^H``. Several windows are treated as one multi-window frame.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from .errors import provenance, require
from .factor.solve import gram_eigenvalues
from .factor.wfac import wfac
from .windows.adapters import fir2long


def _long_windows(g: np.ndarray, L: Optional[int]) -> Tuple[np.ndarray, int]:
    g = np.asarray(require(g, "g"))
    if L is None:
        L = g.shape[0]
    elif g.shape[0] < L:
        g = fir2long(g, L)
    return g, L


def gabframebounds(
    g: np.ndarray, a: int, M: int, L: Optional[int] = None
) -> Tuple[float, float]:
    """
    Optimal lower and upper frame bounds of the Gabor system (g, a, M).

    Args:
        g: Window of shape (gl,) or windows of shape (gl, R).
        a: Time shift.
        M: Number of channels.
        L: Transform length (default: window length). Shorter windows
            are zero-extended with :func:`fir2long`.

    Returns:
        ``(A, B)``; ``A == 0`` when the system is not a frame.
    """
    g, L = _long_windows(g, L)
    R = 1 if g.ndim == 1 else g.shape[1]

    with provenance("wfac failed"):
        gf = wfac(g, L, R, a, M)
    evals = gram_eigenvalues(gf, L, R, a, M, multiwin=True)

    A = max(float(np.min(evals)), 0.0)
    B = float(np.max(evals))
    return A, B


def gabframe_condition(
    g: np.ndarray, a: int, M: int, L: Optional[int] = None
) -> float:
    """Ratio ``B / A`` of the frame bounds (``inf`` when A is zero)."""
    A, B = gabframebounds(g, a, M, L)
    if A <= 0.0:
        return float("inf")
    return B / A
