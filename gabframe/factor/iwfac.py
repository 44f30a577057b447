"""Inverse factorization: factor domain back to time-domain windows.

For each slot (r, w, l, k) the ``d`` factor samples are scaled by
``1 / (sqrt(M) d)``, transformed with an unnormalized backward DFT and
scattered to ``g[r + ((k M - l a) mod L + s p M) mod L, w]``. The slots
of one window visit ``L / c`` distinct residues for each ``r``, so every
output sample is written exactly once.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..errors import BadArgumentError, provenance, require, require_positive
from .fft import Direction, FFTBackend, PlanFlag
from .plan import FactorizationPlan, inverse_scaling
from .regime import regime_for, regime_named
from .shapes import as_windows, result_shape


class IwfacPlan(FactorizationPlan):
    """Reusable inverse factorization for one lattice."""

    direction = Direction.BACKWARD
    kind = "iwfac"

    _scaling = staticmethod(inverse_scaling)

    def execute(
        self,
        gf: np.ndarray,
        R: int,
        out: Optional[np.ndarray] = None,
        real: Optional[bool] = None,
    ) -> np.ndarray:
        """
        Rebuild ``R`` windows from their factors.

        Args:
            gf: Factor tensor (layout shape or flat L*R complex samples).
            R: Number of windows.
            out: Optional destination of shape (L,), (L, R) or flat L*R.
                A real-valued ``out`` selects the real regime.
                Integer arrays are rejected.
            real: Regime when ``out`` is None (default: complex).

        Returns:
            The windows, written into ``out`` when given, otherwise a new
            array of shape (L,) for one window or (L, R).

        Raises:
            NullArgError: If the plan is destroyed or ``gf`` is None.
            NotPositiveArgError: If ``R`` is not positive.
            BadArgumentError: If ``out`` is not floating point or
                contradicts ``real``.
            InternalFailureError: If the real regime discards a
                non-negligible imaginary part.
        """
        self._check_ready()
        require(gf, "gf")
        R = require_positive(R, "R")
        L = self.lattice.L

        gf = self.layout_for(R).view(gf, "gf")

        if out is None:
            regime = regime_named(bool(real))
            result = np.zeros(result_shape(L, R), dtype=regime.dtype)
        else:
            if not np.issubdtype(out.dtype, np.inexact):
                raise BadArgumentError(f"out must hold floating point samples, got dtype {out.dtype}.")
            regime = regime_for(out)
            if real is not None and bool(real) != regime.is_real:
                raise BadArgumentError(
                    f"out has dtype {out.dtype} but real={real} was requested."
                )
            result = out

        regime.inverse_factor(self, gf, as_windows(result, L, R))
        return result


def iwfac_init(
    L: int,
    a: int,
    M: int,
    flags: PlanFlag | str | None = None,
    backend: FFTBackend | str | None = None,
) -> IwfacPlan:
    """
    Create an :class:`IwfacPlan` (validates the lattice, allocates the
    scratch buffer and plans the backward DFT).
    """
    return IwfacPlan(L, a, M, flags, backend)


def iwfac_execute(
    plan: IwfacPlan,
    gf: np.ndarray,
    R: int,
    out: Optional[np.ndarray] = None,
    real: Optional[bool] = None,
) -> np.ndarray:
    require(plan, "plan")
    return plan.execute(gf, R, out, real)


def iwfac_done(plan: IwfacPlan) -> None:
    """Release ``plan``. A second call raises :class:`NullArgError`."""
    require(plan, "plan")
    plan.done()


def iwfac(
    gf: np.ndarray,
    L: int,
    R: int,
    a: int,
    M: int,
    out: Optional[np.ndarray] = None,
    real: Optional[bool] = None,
    flags: PlanFlag | str | None = None,
) -> np.ndarray:
    """
    Rebuild ``R`` windows of length ``L`` from their factors.

    One-shot form of :class:`IwfacPlan`. ``gf`` and ``R`` are checked
    before the lattice.
    """
    require(gf, "gf")
    R = require_positive(R, "R")

    with provenance("Init failed"):
        plan = iwfac_init(L, a, M, flags)
    with plan, provenance("Execute failed"):
        return plan.execute(gf, R, out, real)
