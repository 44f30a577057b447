"""Sampled, periodized Gaussian windows."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from ..errors import BadArgumentError, require_positive

# exp(-pi x^2) is numerically zero for |x| > _SAFE
_SAFE = 4.0


def pgauss(
    L: int,
    tfr: float = 1.0,
    width: Optional[float] = None,
    centering: str = "wp",
    delay: float = 0.0,
    cf: float = 0.0,
) -> np.ndarray:
    """
    Periodization of ``exp(-pi x^2 / tfr)`` sampled on ``L`` points.

    The result has unit 2-norm. With the default whole-point centering it
    is even (``g[n] == g[-n]``), so its DFT is real, and its DFT is
    ``pgauss(L, 1/tfr)`` up to scaling. ``pgauss(L, a*M/L)`` is the
    Gaussian with the smallest frame bound ratio for the lattice (a, M).

    Args:
        L: Length of the window.
        tfr: Ratio between time and frequency support.
        width: If given, the effective support in samples; overrides
            ``tfr`` with ``width**2 / L``.
        centering: "wp" (whole point) or "hp" (half point).
        delay: Delay in samples.
        cf: Centre frequency in DFT bins.

    Returns:
        Real array when ``cf == 0``, complex otherwise.
    """
    L = require_positive(L, "L")
    if width is not None:
        if width <= 0:
            raise BadArgumentError(f"width must be positive, got {width}")
        tfr = width**2 / L
    if tfr <= 0:
        raise BadArgumentError(f"tfr must be positive, got {tfr}")
    if centering not in ("wp", "hp"):
        raise BadArgumentError(f"centering must be 'wp' or 'hp', got {centering!r}")

    c_t = (0.0 if centering == "wp" else 0.5) - delay
    sqrtl = math.sqrt(L)
    nk = math.ceil(_SAFE / math.sqrt(L / math.sqrt(tfr)))

    lr = np.arange(L) + c_t
    g = np.zeros(L, dtype=complex)
    for k in range(-nk, nk + 1):
        g += np.exp(
            -np.pi * (lr / sqrtl - k * sqrtl) ** 2 / tfr
            + 2j * np.pi * cf * (lr / L - k)
        )

    if cf == 0:
        g = g.real
    return g / np.linalg.norm(g)
