"""Discrete Gabor transform on the lattice (a, M).

    c[m, n] = sum_l f[l] conj(g[(l - n a) mod L]) exp(-2 pi i m l / M)
    f[l]    = sum_{n, m} c[m, n] g[(l - n a) mod L] exp(2 pi i m l / M)

``idgt`` is the adjoint of ``dgt``; synthesizing with the canonical dual
window inverts analysis with the window.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from .errors import BadArgumentError, require
from .factor.lattice import Lattice, lattice
from .windows.adapters import fir2long


class DGT:
    """Discrete Gabor transform processor.

    Holds a window and a lattice and provides analysis and synthesis.
    The transform length is fixed by the first signal unless given.
    """

    def __init__(self, g: np.ndarray, a: int, M: int, L: Optional[int] = None):
        """Initialize DGT processor.

        Args:
            g: Window (1D). Shorter windows are zero-extended to ``L``.
            a: Time shift.
            M: Number of channels.
            L: Transform length (default: taken from the first signal).
        """
        g = np.asarray(require(g, "g"))
        if g.ndim != 1:
            raise BadArgumentError(f"Window must be 1D, got {g.ndim}D")
        self.g = g
        self.a = a
        self.M = M
        self.L = L
        if L is not None:
            lattice(L, a, M)

    def _lattice(self, L: int) -> Lattice:
        if self.L is not None and L != self.L:
            raise BadArgumentError(f"Signal length {L} does not match L={self.L}")
        return lattice(L, self.a, self.M)

    def _shifted_windows(self, lat: Lattice) -> np.ndarray:
        # (N, L): row n holds g[(l - n a) mod L]
        g = fir2long(self.g, lat.L) if len(self.g) < lat.L else self.g
        if len(g) != lat.L:
            raise BadArgumentError(
                f"Window length {len(self.g)} exceeds the transform length {lat.L}"
            )
        l = np.arange(lat.L)
        n = np.arange(lat.N)[:, np.newaxis]
        return g[np.mod(l - n * lat.a, lat.L)]

    def transform(self, f: np.ndarray) -> np.ndarray:
        """Compute Gabor coefficients.

        Args:
            f: Signal of shape (L,) or (L, W).

        Returns:
            Coefficients of shape (M, N) or (M, N, W) with N = L / a.
        """
        f = np.asarray(require(f, "f"))
        if f.ndim not in (1, 2):
            raise BadArgumentError(f"Signal must be 1D or 2D, got {f.ndim}D")
        lat = self._lattice(f.shape[0])
        gs = np.conj(self._shifted_windows(lat))

        f2 = f.reshape(lat.L, -1)
        # (N, L, W) products folded modulo M, then one length-M DFT
        prod = gs[:, :, np.newaxis] * f2[np.newaxis, :, :]
        folded = prod.reshape(lat.N, lat.L // lat.M, lat.M, -1).sum(axis=1)
        c = np.fft.fft(folded, axis=1)
        c = np.transpose(c, (1, 0, 2))

        return c[:, :, 0] if f.ndim == 1 else c

    def inverse(self, c: np.ndarray) -> np.ndarray:
        """Synthesize a signal from Gabor coefficients.

        Args:
            c: Coefficients of shape (M, N) or (M, N, W).

        Returns:
            Complex signal of shape (L,) or (L, W), L = N a.
        """
        c = np.asarray(require(c, "c"))
        if c.ndim not in (2, 3) or c.shape[0] != self.M:
            raise BadArgumentError(
                f"Coefficients must have shape (M={self.M}, N[, W]), got {c.shape}"
            )
        lat = self._lattice(c.shape[1] * self.a)
        gs = self._shifted_windows(lat)

        c3 = c.reshape(lat.M, lat.N, -1)
        # M * ifft gives sum_m c[m, n] exp(2 pi i m j / M), periodic in M
        h = lat.M * np.fft.ifft(c3, axis=0)
        h = np.tile(h, (lat.L // lat.M, 1, 1))
        f = np.einsum("nl,lnw->lw", gs, h)

        return f[:, 0] if c.ndim == 2 else f


def dgt(f: np.ndarray, g: np.ndarray, a: int, M: int) -> np.ndarray:
    """Compute the discrete Gabor transform of ``f`` with window ``g``.

    Convenience function for :class:`DGT`.
    """
    return DGT(g, a, M).transform(f)


def idgt(c: np.ndarray, g: np.ndarray, a: int) -> np.ndarray:
    """Inverse discrete Gabor transform (synthesis with window ``g``)."""
    c = np.asarray(require(c, "c"))
    return DGT(g, a, c.shape[0]).inverse(c)
