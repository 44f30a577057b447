"""Shared lifecycle of the factorization plans.

A plan owns a scratch buffer of exactly ``d`` complex samples and an
in-place DFT plan over that buffer. It is Ready after construction and
Destroyed after :meth:`FactorizationPlan.done`; executing or releasing a
destroyed plan raises :class:`NullArgError`.
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from ..errors import NullArgError, allocate
from ..logging import get_logger
from .fft import Direction, FFTBackend, FFTPlan, PlanFlag, plan_dft_1d
from .lattice import Lattice, lattice
from .layout import FactorLayout, time_indices

logger = get_logger(__name__)


class FactorizationPlan:
    """Base class of :class:`WfacPlan` and :class:`IwfacPlan`."""

    direction: Direction = Direction.FORWARD
    kind: str = "factorization"

    def __init__(
        self,
        L: int,
        a: int,
        M: int,
        flag: PlanFlag | str | None = None,
        backend: FFTBackend | str | None = None,
    ) -> None:
        self.lattice: Lattice = lattice(L, a, M)
        self.scaling: float = self._scaling(self.lattice)
        self.indices: np.ndarray = time_indices(self.lattice)

        self._buffer: Optional[np.ndarray] = allocate(self.lattice.d, np.complex128)
        self._fft: Optional[FFTPlan] = None
        try:
            self._fft = plan_dft_1d(self._buffer, self.direction, flag, backend)
        except BaseException:
            self._release()
            raise

        logger.debug("%s plan ready: %s", self.kind, self.lattice)

    @staticmethod
    def _scaling(lat: Lattice) -> float:
        raise NotImplementedError

    @property
    def destroyed(self) -> bool:
        return self._fft is None

    @property
    def buffer(self) -> np.ndarray:
        self._check_ready()
        return self._buffer

    @property
    def fft(self) -> FFTPlan:
        self._check_ready()
        return self._fft

    def layout_for(self, R: int) -> FactorLayout:
        """Factor layout of ``R`` windows on this plan's lattice."""
        return FactorLayout(self.lattice, R)

    def _check_ready(self) -> None:
        if self._fft is None:
            raise NullArgError(f"{self.kind} plan has been destroyed.")

    def _release(self) -> None:
        if self._fft is not None:
            self._fft.destroy()
        self._fft = None
        self._buffer = None

    def done(self) -> None:
        """Release the DFT plan and the scratch buffer."""
        self._check_ready()
        self._release()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info: object) -> None:
        if not self.destroyed:
            self._release()

    def __repr__(self) -> str:
        state = "destroyed" if self.destroyed else "ready"
        return f"{type(self).__name__}({self.lattice}, {state})"


def forward_scaling(lat: Lattice) -> float:
    return math.sqrt(lat.M)


def inverse_scaling(lat: Lattice) -> float:
    return 1.0 / math.sqrt(lat.M) / lat.d
