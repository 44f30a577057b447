"""Real and complex sample regimes.

Both regimes share the factorization skeleton and differ in three
capabilities:

* ``forward_factor``: the real regime transforms two real slots with one
  complex DFT and separates them by conjugate symmetry;
* ``inverse_factor``: the real regime keeps only the real part of each
  transformed slot (optionally checking the discarded imaginary part);
* ``diagonal_solve``: the real regime solves only half of the DFT axis.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

import numpy as np

from ..config import get_config
from ..errors import InternalFailureError
from .solve import gabdual_fac, gabdualreal_fac

if TYPE_CHECKING:
    from .iwfac import IwfacPlan
    from .wfac import WfacPlan


class Regime(ABC):
    """Capability set of one sample type."""

    name: str = "abstract"
    dtype: type = np.complex128
    is_real: bool = False

    def coerce(self, g: np.ndarray) -> np.ndarray:
        """Return ``g`` with this regime's sample dtype."""
        return np.asarray(g, dtype=self.dtype)

    @abstractmethod
    def forward_factor(self, plan: "WfacPlan", g: np.ndarray, gf: np.ndarray) -> None:
        """Fill ``gf`` (layout shape) with the factors of ``g`` (shape (L, R))."""

    @abstractmethod
    def inverse_factor(self, plan: "IwfacPlan", gf: np.ndarray, g: np.ndarray) -> None:
        """Fill ``g`` (shape (L, R)) from the factors ``gf`` (layout shape)."""

    @abstractmethod
    def diagonal_solve(
        self,
        gf: np.ndarray,
        L: int,
        R: int,
        a: int,
        M: int,
        out: Optional[np.ndarray] = None,
        multiwin: bool = False,
    ) -> np.ndarray:
        """Canonical dual of the factor tensor."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ComplexRegime(Regime):
    name = "complex"
    dtype = np.complex128

    def forward_factor(self, plan, g, gf):
        buf = plan.buffer
        rem = plan.indices
        R = g.shape[1]

        for r, w, l, k in plan.layout_for(R).slots():
            buf[:] = g[r + rem[l, k], w]
            buf *= plan.scaling
            plan.fft.execute()
            gf[:, r, w, l, k] = buf

    def inverse_factor(self, plan, gf, g):
        buf = plan.buffer
        rem = plan.indices
        R = g.shape[1]

        for r, w, l, k in plan.layout_for(R).slots():
            buf[:] = gf[:, r, w, l, k]
            buf *= plan.scaling
            plan.fft.execute()
            g[r + rem[l, k], w] = buf

    def diagonal_solve(self, gf, L, R, a, M, out=None, multiwin=False):
        return gabdual_fac(gf, L, R, a, M, out=out, multiwin=multiwin)


class RealRegime(Regime):
    name = "real"
    dtype = np.float64
    is_real = True

    def forward_factor(self, plan, g, gf):
        buf = plan.buffer
        rem = plan.indices
        R = g.shape[1]
        d = plan.lattice.d

        slots = list(plan.layout_for(R).slots())
        # index of X[-s mod d]
        mirror = np.mod(-np.arange(d), d)

        for first, second in zip(slots[0::2], slots[1::2]):
            r0, w0, l0, k0 = first
            r1, w1, l1, k1 = second
            buf.real = g[r0 + rem[l0, k0], w0]
            buf.imag = g[r1 + rem[l1, k1], w1]
            buf *= plan.scaling
            plan.fft.execute()

            conj_mirror = np.conj(buf[mirror])
            gf[:, r0, w0, l0, k0] = 0.5 * (buf + conj_mirror)
            gf[:, r1, w1, l1, k1] = -0.5j * (buf - conj_mirror)

        if len(slots) % 2:
            r, w, l, k = slots[-1]
            buf[:] = g[r + rem[l, k], w]
            buf *= plan.scaling
            plan.fft.execute()
            gf[:, r, w, l, k] = buf

    def inverse_factor(self, plan, gf, g):
        buf = plan.buffer
        rem = plan.indices
        R = g.shape[1]
        cfg = get_config()

        max_imag = 0.0
        max_real = 0.0
        for r, w, l, k in plan.layout_for(R).slots():
            buf[:] = gf[:, r, w, l, k]
            buf *= plan.scaling
            plan.fft.execute()
            g[r + rem[l, k], w] = buf.real
            if cfg.check_real_residual:
                max_imag = max(max_imag, float(np.max(np.abs(buf.imag))))
                max_real = max(max_real, float(np.max(np.abs(buf.real))))

        if cfg.check_real_residual and max_imag > cfg.residual_tol * max(1.0, max_real):
            raise InternalFailureError(
                f"Discarded imaginary part {max_imag:.3g} exceeds tolerance "
                f"{cfg.residual_tol:g}; the factor data is not that of a real window."
            )

    def diagonal_solve(self, gf, L, R, a, M, out=None, multiwin=False):
        return gabdualreal_fac(gf, L, R, a, M, out=out, multiwin=multiwin)


REAL = RealRegime()
COMPLEX = ComplexRegime()


def regime_for(g: np.ndarray) -> Regime:
    """Regime matching the sample type of ``g``."""
    return COMPLEX if np.iscomplexobj(g) else REAL


def regime_named(real: bool) -> Regime:
    return REAL if real else COMPLEX
