"""Block-diagonal solves in the factor domain.

In the factor domain the frame operator of a Gabor system is the block
diagonal matrix of the ``p x p`` Gram slabs ``G G^H``, one per (s, r)
(and per window unless the windows form one multi-window frame). The
canonical dual and the canonical tight window are obtained slab by slab:

    dual:   gd = (G G^H)^{-1} G
    tight:  gt = (G G^H)^{-1/2} G
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..config import get_config
from ..errors import NotAFrameError
from ..logging import get_logger
from .lattice import lattice
from .layout import FactorLayout

logger = get_logger(__name__)


def _gram(G: np.ndarray) -> np.ndarray:
    return G @ np.conj(np.swapaxes(G, -1, -2))


def check_gram(gram: np.ndarray, max_condition: Optional[float] = None) -> np.ndarray:
    """
    Verify that every Gram slab is numerically invertible.

    Args:
        gram: Array of Hermitian slabs, shape (..., p, p).
        max_condition: Condition limit (default: configured limit).

    Returns:
        The singular values of every slab, shape (..., p), descending.

    Raises:
        NotAFrameError: If any slab has condition number above the limit.
    """
    if max_condition is None:
        max_condition = get_config().max_condition

    sv = np.linalg.svd(gram, compute_uv=False)
    smax = sv[..., 0]
    smin = sv[..., -1]

    singular = smin <= smax / max_condition
    if np.any(singular):
        raise NotAFrameError(
            f"Not a frame: {int(np.count_nonzero(singular))} of {singular.size} "
            f"Gram blocks are singular (condition limit {max_condition:g})."
        )

    worst = float(np.max(smax / smin))
    if worst > np.sqrt(max_condition):
        logger.warning("Ill-conditioned Gabor frame: condition number %.3g", worst)
    return sv


def _solve(gf, L, R, a, M, multiwin, max_condition, half):
    layout = FactorLayout(lattice(L, a, M), R)
    G = layout.matrices(gf, multiwin=multiwin)
    d = layout.lattice.d

    # Factors of real windows satisfy G[d - s] = conj(G[s]).
    nsolve = d // 2 + 1 if half else d

    Gh = G[:nsolve]
    gram = _gram(Gh)
    check_gram(gram, max_condition)
    Gd = np.linalg.solve(gram, Gh)

    if half and nsolve < d:
        mirror = np.conj(Gd[1 : d - nsolve + 1][::-1])
        Gd = np.concatenate([Gd, mirror], axis=0)
    return layout, Gd


def _store(layout, Gd, out, multiwin):
    gdf = layout.from_matrices(Gd, multiwin=multiwin)
    if out is None:
        return gdf
    out = layout.view(out, "gdf")
    out[...] = gdf
    return out


def gabdual_fac(
    gf: np.ndarray,
    L: int,
    R: int,
    a: int,
    M: int,
    out: Optional[np.ndarray] = None,
    multiwin: bool = False,
    max_condition: Optional[float] = None,
) -> np.ndarray:
    """
    Canonical dual in the factor domain.

    Args:
        gf: Factor tensor of ``R`` windows (layout shape or flat L*R).
        L, R, a, M: Lattice parameters and number of windows.
        out: Optional destination with the same layout.
        multiwin: Treat the windows as one multi-window frame instead of
            dualizing each window on its own.
        max_condition: Override of the configured condition limit.

    Returns:
        Factor tensor of the dual windows, shape ``(d, c, R, q, p)``.

    Raises:
        NotAFrameError: If a Gram slab is numerically singular.
    """
    layout, Gd = _solve(gf, L, R, a, M, multiwin, max_condition, half=False)
    return _store(layout, Gd, out, multiwin)


def gabdualreal_fac(
    gf: np.ndarray,
    L: int,
    R: int,
    a: int,
    M: int,
    out: Optional[np.ndarray] = None,
    multiwin: bool = False,
    max_condition: Optional[float] = None,
) -> np.ndarray:
    """
    Canonical dual in the factor domain for factors of real windows.

    Only the slabs ``s <= d // 2`` are solved; the remaining ones follow
    from the Hermitian symmetry ``gdf[d - s] = conj(gdf[s])``. Arguments
    and result are those of :func:`gabdual_fac`.
    """
    layout, Gd = _solve(gf, L, R, a, M, multiwin, max_condition, half=True)
    return _store(layout, Gd, out, multiwin)


def gabtight_fac(
    gf: np.ndarray,
    L: int,
    R: int,
    a: int,
    M: int,
    out: Optional[np.ndarray] = None,
    multiwin: bool = False,
    max_condition: Optional[float] = None,
) -> np.ndarray:
    """
    Canonical tight window in the factor domain, ``(G G^H)^{-1/2} G``.

    Arguments and result are those of :func:`gabdual_fac`.
    """
    layout = FactorLayout(lattice(L, a, M), R)
    G = layout.matrices(gf, multiwin=multiwin)
    gram = _gram(G)
    check_gram(gram, max_condition)

    evals, evecs = np.linalg.eigh(gram)
    inv_sqrt = (evecs / np.sqrt(evals)[..., np.newaxis, :]) @ np.conj(
        np.swapaxes(evecs, -1, -2)
    )
    return _store(layout, inv_sqrt @ G, out, multiwin)


def gram_eigenvalues(
    gf: np.ndarray, L: int, R: int, a: int, M: int, multiwin: bool = False
) -> np.ndarray:
    """Eigenvalues of every Gram slab ``G G^H``, shape (..., p), ascending."""
    layout = FactorLayout(lattice(L, a, M), R)
    G = layout.matrices(gf, multiwin=multiwin)
    return np.linalg.eigvalsh(_gram(G))
