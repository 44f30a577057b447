"""Forward factorization of Gabor windows.

    gf[s, r, w, l, k] = sqrt(M) * sum_{j<d} g[r + (k M - l a + j p M) mod L, w]
                                  * exp(-2 pi i s j / d)
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..errors import provenance, require
from .fft import Direction, FFTBackend, PlanFlag
from .plan import FactorizationPlan, forward_scaling
from .regime import regime_for
from .shapes import as_windows, window_count


class WfacPlan(FactorizationPlan):
    """Reusable forward factorization for one lattice."""

    direction = Direction.FORWARD
    kind = "wfac"

    _scaling = staticmethod(forward_scaling)

    def execute(
        self,
        g: np.ndarray,
        R: Optional[int] = None,
        out: Optional[np.ndarray] = None,
    ) -> np.ndarray:
        """
        Factorize ``R`` windows.

        Args:
            g: Windows of shape (L,), (L, R), or a flat column-major
                buffer of L*R samples. Real input uses the real regime.
            R: Number of windows (default: inferred from ``g``).
            out: Optional complex destination with the factor layout.

        Returns:
            Factor tensor of shape ``(d, c, R, q, p)``.
        """
        self._check_ready()
        require(g, "g")
        R = window_count(g, self.lattice.L, R)
        regime = regime_for(g)
        g2 = as_windows(regime.coerce(g), self.lattice.L, R)

        layout = self.layout_for(R)
        if out is None:
            gf = np.zeros(layout.shape, dtype=np.complex128)
        else:
            gf = layout.view(out, "out")

        regime.forward_factor(self, g2, gf)
        return gf


def wfac_init(
    L: int,
    a: int,
    M: int,
    flags: PlanFlag | str | None = None,
    backend: FFTBackend | str | None = None,
) -> WfacPlan:
    """Create a :class:`WfacPlan`."""
    return WfacPlan(L, a, M, flags, backend)


def wfac_execute(
    plan: WfacPlan, g: np.ndarray, R: Optional[int] = None, out: Optional[np.ndarray] = None
) -> np.ndarray:
    require(plan, "plan")
    return plan.execute(g, R, out)


def wfac_done(plan: WfacPlan) -> None:
    require(plan, "plan")
    plan.done()


def wfac(
    g: np.ndarray,
    L: int,
    R: int,
    a: int,
    M: int,
    out: Optional[np.ndarray] = None,
    flags: PlanFlag | str | None = None,
) -> np.ndarray:
    """
    Factorize ``R`` windows of length ``L`` for the lattice (a, M).

    One-shot form of :class:`WfacPlan`: init, execute, done.
    """
    require(g, "g")
    R = window_count(g, L, R)

    with provenance("Init failed"):
        plan = wfac_init(L, a, M, flags)
    with plan, provenance("Execute failed"):
        return plan.execute(g, R, out)
