"""Factor tensor layout.

The factor tensor of ``R`` windows on a lattice is stored as a C-ordered
``complex128`` array of shape ``(d, c, R, q, p)`` indexed
``gf[s, r, w, l, k]``. Its flat memory puts element (s, k, l, r, w) at

    s * ld3 + ((r * R + w) * q + l) * p + k,    ld3 = c * p * q * R

so each (r, w, l, k) slot is a stride-``ld3`` column of length ``d`` and
consecutive slots are one element apart. For a fixed (s, r, w) the
``q x p`` block transposed is the ``p x q`` matrix the dual solve works on.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Tuple

import numpy as np

from ..errors import BadArgumentError, NotPositiveArgError, as_int, require
from .lattice import Lattice


@lru_cache(maxsize=64)
def time_indices(lat: Lattice) -> np.ndarray:
    """
    Time positions read (wfac) and written (iwfac) by each slot.

    Returns:
        Read-only integer array ``rem`` of shape ``(q, p, d)`` with
        ``rem[l, k, s] = ((k M - l a) mod L + s p M) mod L``. The sample of
        window ``w`` touched by slot (r, w, l, k) at ``s`` is
        ``g[r + rem[l, k, s], w]``. Every entry is a multiple of ``c``.
    """
    l = np.arange(lat.q).reshape(lat.q, 1, 1)
    k = np.arange(lat.p).reshape(1, lat.p, 1)
    s = np.arange(lat.d).reshape(1, 1, lat.d)
    negrem = np.mod(k * lat.M - l * lat.a, lat.L)
    rem = np.mod(negrem + s * lat.p * lat.M, lat.L)
    rem.setflags(write=False)
    return rem


@dataclass(frozen=True)
class FactorLayout:
    """Shape and stride descriptor of the factor tensor for ``R`` windows."""

    lattice: Lattice
    R: int

    def __post_init__(self) -> None:
        R = as_int(self.R, "R")
        if R <= 0:
            raise NotPositiveArgError(f"R (passed {R}) must be positive.")

    @property
    def shape(self) -> Tuple[int, int, int, int, int]:
        lat = self.lattice
        return (lat.d, lat.c, self.R, lat.q, lat.p)

    @property
    def size(self) -> int:
        return self.lattice.L * self.R

    @property
    def ld3(self) -> int:
        """Element stride along the DFT axis ``s``."""
        lat = self.lattice
        return lat.c * lat.p * lat.q * self.R

    @property
    def strides(self) -> Tuple[int, int, int, int, int]:
        """Element strides of the (s, r, w, l, k) axes."""
        lat = self.lattice
        return (self.ld3, self.R * lat.q * lat.p, lat.q * lat.p, lat.p, 1)

    def slot_offset(self, r: int, w: int, l: int, k: int) -> int:
        """Flat offset of slot (r, w, l, k) at ``s = 0``."""
        lat = self.lattice
        return ((r * self.R + w) * lat.q + l) * lat.p + k

    def slots(self) -> Iterator[Tuple[int, int, int, int]]:
        """All (r, w, l, k) slots in storage order."""
        lat = self.lattice
        return itertools.product(range(lat.c), range(self.R), range(lat.q), range(lat.p))

    def view(self, gf: np.ndarray, name: str = "gf") -> np.ndarray:
        """
        Return ``gf`` as a ``(d, c, R, q, p)`` array without copying.

        Accepts the layout shape itself or a flat buffer of ``L * R``
        elements.
        """
        require(gf, name)
        gf = np.asarray(gf)
        if gf.shape == self.shape:
            return gf
        if gf.size != self.size:
            raise BadArgumentError(
                f"{name} has {gf.size} elements, expected L*R={self.size} "
                f"(layout {self.shape})."
            )
        return gf.reshape(self.shape)

    def matrices(self, gf: np.ndarray, multiwin: bool = False) -> np.ndarray:
        """
        Per-block matrices of the factor tensor.

        Returns:
            Array of shape ``(d, c, R, p, q)`` holding ``G[k, l]`` for each
            (s, r, w), or with ``multiwin=True`` shape ``(d, c, p, R*q)``
            holding the windows side by side (column ``w*q + l``).
        """
        gf = self.view(gf)
        G = np.swapaxes(gf, -1, -2)
        if not multiwin:
            return G
        lat = self.lattice
        return np.moveaxis(G, 3, 2).reshape(lat.d, lat.c, lat.p, self.R * lat.q)

    def from_matrices(self, G: np.ndarray, multiwin: bool = False) -> np.ndarray:
        """Inverse of :meth:`matrices`; returns a new C-ordered factor array."""
        lat = self.lattice
        if multiwin:
            G = np.moveaxis(G.reshape(lat.d, lat.c, lat.p, self.R, lat.q), 2, 3)
        return np.ascontiguousarray(np.swapaxes(G, -1, -2))
