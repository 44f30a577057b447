"""Canonical dual and tight Gabor windows.

The drivers factorize the window(s), solve the block-diagonal frame
operator slab by slab in the factor domain and transform the result back:

    wfac -> gabdual_fac (or gabdualreal_fac) -> iwfac

FIR windows are lifted to the transform length with :func:`fir2long`,
dualized as long windows and cut back with :func:`long2fir`.
"""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np

from .config import get_config
from .errors import (
    BadArgumentError,
    InternalFailureError,
    allocate,
    as_int,
    provenance,
    require,
    require_positive,
)
from .factor.fft import PlanFlag
from .factor.iwfac import iwfac
from .factor.lattice import lattice
from .factor.layout import FactorLayout
from .factor.regime import Regime, regime_for
from .factor.solve import gabtight_fac
from .factor.wfac import wfac
from .logging import get_logger
from .windows.adapters import fir2long, long2fir

logger = get_logger(__name__)

# Largest tolerated deviation of G gd^H from the identity in debug mode
_BIORTHOGONALITY_TOL = 1e-8


def _dual_solve(regime: Regime, gf, L, R, a, M, out, multiwin):
    return regime.diagonal_solve(gf, L, R, a, M, out=out, multiwin=multiwin)


def _tight_solve(regime: Regime, gf, L, R, a, M, out, multiwin):
    return gabtight_fac(gf, L, R, a, M, out=out, multiwin=multiwin)


def check_biorthogonal(
    gf: np.ndarray,
    gdf: np.ndarray,
    layout: FactorLayout,
    multiwin: bool = False,
    tol: float = _BIORTHOGONALITY_TOL,
) -> float:
    """
    Verify ``G gd^H = I`` on every slab of the factor domain.

    Returns:
        The largest absolute deviation from the identity.

    Raises:
        InternalFailureError: If the deviation exceeds ``tol``.
    """
    G = layout.matrices(gf, multiwin=multiwin)
    Gd = layout.matrices(gdf, multiwin=multiwin)
    prod = G @ np.conj(np.swapaxes(Gd, -1, -2))
    eye = np.eye(prod.shape[-1])
    err = float(np.max(np.abs(prod - eye)))
    if err > tol:
        raise InternalFailureError(
            f"Dual window is not biorthogonal to the window (deviation {err:.3g})."
        )
    return err


def _check_out(
    g: np.ndarray, out: Optional[np.ndarray], shape: Optional[tuple] = None
) -> None:
    if out is None:
        return
    shape = g.shape if shape is None else shape
    if np.shape(out) != shape:
        raise BadArgumentError(f"out must have shape {shape}, got {np.shape(out)}.")
    dtype = np.asarray(out).dtype
    if not np.issubdtype(dtype, np.inexact):
        raise BadArgumentError(f"out must hold floating point samples, got dtype {dtype}.")
    if np.iscomplexobj(g) and not np.iscomplexobj(out):
        raise BadArgumentError("out must be complex for a complex window.")


def _long_driver(
    solver: Callable,
    solve_name: str,
    g: np.ndarray,
    L: int,
    R: int,
    a: int,
    M: int,
    out: Optional[np.ndarray],
    multiwin: bool,
    flags: PlanFlag | str | None,
) -> np.ndarray:
    require(g, "g")
    R = require_positive(R, "R")
    lat = lattice(L, a, M)

    g = np.asarray(g)
    _check_out(g, out)
    regime = regime_for(g)

    layout = FactorLayout(lat, R)
    gf = allocate(layout.shape)
    gdf = allocate(layout.shape)

    logger.debug("%s: %s, R=%d, %s regime", solve_name, lat, R, regime.name)

    with provenance("wfac failed"):
        wfac(g, L, R, a, M, out=gf, flags=flags)
    with provenance(f"{solve_name} failed"):
        solver(regime, gf, L, R, a, M, gdf, multiwin)

    if get_config().debug and solver is _dual_solve:
        err = check_biorthogonal(gf, gdf, layout, multiwin)
        logger.debug("Biorthogonality deviation %.3g", err)

    if out is None:
        out = np.zeros(g.shape, dtype=regime.dtype)
    with provenance("iwfac failed"):
        iwfac(gdf, L, R, a, M, out=out, flags=flags)
    return out


def gabdual_long(
    g: np.ndarray,
    L: int,
    R: int,
    a: int,
    M: int,
    out: Optional[np.ndarray] = None,
    multiwin: bool = False,
    flags: PlanFlag | str | None = None,
) -> np.ndarray:
    """
    Canonical dual of ``R`` windows of length ``L`` for the lattice (a, M).

    Args:
        g: Windows, shape (L,), (L, R) or a flat column-major L*R buffer.
            Real input gives a real dual.
        L: Transform length, a multiple of lcm(a, M).
        R: Number of windows.
        a: Time shift.
        M: Number of channels, ``M >= a``.
        out: Optional destination with the shape of ``g``. May be ``g``
            itself.
        multiwin: Dualize the windows jointly as one multi-window frame
            (default: each window separately).
        flags: FFT planner flag (default: configured).

    Returns:
        The dual windows, same shape as ``g``.

    Raises:
        NullArgError: If g is None.
        NotPositiveArgError: If R, a or M is not positive.
        BadArgumentError: If L is not a positive multiple of lcm(a, M),
            or ``out`` does not fit.
        NotAFrameError: If M < a or a Gram slab is singular.
        AllocationFailedError: If the factor buffers cannot be allocated.

    Example
    -------
    >>> g = fir2long(firwin("hann", 16), 64)
    >>> gd = gabdual_long(g, 64, 1, 4, 16)
    """
    return _long_driver(_dual_solve, "gabdual_fac", g, L, R, a, M, out, multiwin, flags)


def gabtight_long(
    g: np.ndarray,
    L: int,
    R: int,
    a: int,
    M: int,
    out: Optional[np.ndarray] = None,
    multiwin: bool = False,
    flags: PlanFlag | str | None = None,
) -> np.ndarray:
    """Canonical tight window(s); arguments as in :func:`gabdual_long`."""
    return _long_driver(_tight_solve, "gabtight_fac", g, L, R, a, M, out, multiwin, flags)


def _fir_driver(long_fn, long_name, g, gl, L, a, M, outl, out, flags):
    require(g, "g")
    g = np.asarray(g)
    gl = as_int(gl, "gl")
    if g.ndim != 1 or g.shape[0] != gl:
        raise BadArgumentError(f"g must be a 1D window of length gl={gl}, got shape {g.shape}.")
    gl = require_positive(gl, "gl")
    L = require_positive(L, "L")
    outl = require_positive(outl, "output length")
    if L < gl:
        raise BadArgumentError(f"L (passed {L}) must be >= gl (passed {gl}).")
    if L < outl:
        raise BadArgumentError(f"L (passed {L}) must be >= the output length {outl}.")
    _check_out(g, out, (outl,))

    g = regime_for(g).coerce(g)
    with provenance("fir2long failed"):
        tmp = fir2long(g, L)
    with provenance(f"{long_name} failed"):
        long_fn(tmp, L, 1, a, M, out=tmp, flags=flags)
    with provenance("long2fir failed"):
        result = long2fir(tmp, outl)

    if out is None:
        return result
    out[:] = result
    return out


def gabdual_fir(
    g: np.ndarray,
    gl: int,
    L: int,
    a: int,
    M: int,
    gdl: int,
    out: Optional[np.ndarray] = None,
    flags: PlanFlag | str | None = None,
) -> np.ndarray:
    """
    Canonical dual of a FIR window, computed at transform length ``L`` and
    truncated to ``gdl`` samples.

    The truncation is exact when ``gdl == L`` or when the long dual is
    supported on ``gdl`` samples (e.g. painless case gl <= M).

    Raises:
        NullArgError: If g is None.
        BadArgumentError: If len(g) != gl, L < gl or L < gdl.
        NotPositiveArgError: If gl, L or gdl is not positive.
    """
    return _fir_driver(gabdual_long, "gabdual_long", g, gl, L, a, M, gdl, out, flags)


def gabtight_fir(
    g: np.ndarray,
    gl: int,
    L: int,
    a: int,
    M: int,
    gtl: int,
    out: Optional[np.ndarray] = None,
    flags: PlanFlag | str | None = None,
) -> np.ndarray:
    """Canonical tight FIR window; arguments as in :func:`gabdual_fir`."""
    return _fir_driver(gabtight_long, "gabtight_long", g, gl, L, a, M, gtl, out, flags)
