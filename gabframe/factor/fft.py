"""In-place, unnormalized length-d DFT plans.

A plan binds one contiguous ``complex128`` buffer, a direction and a
kernel. ``execute()`` overwrites the buffer with its DFT:

    FORWARD:   X[s] = sum_j x[j] exp(-2 pi i s j / d)
    BACKWARD:  x[j] = sum_s X[s] exp(+2 pi i s j / d)

Neither direction is normalized. Kernels come from a named backend
(``numpy`` or ``torch``; more can be registered). With
``PlanFlag.MEASURE`` the planner also times a precomputed DFT-matrix
kernel and keeps whichever is faster on the plan's own buffer.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Dict, Optional

import numpy as np

from ..config import get_config
from ..errors import NullArgError, PlanCreationError
from ..logging import get_logger

logger = get_logger(__name__)

Kernel = Callable[[np.ndarray], np.ndarray]


class Direction(Enum):
    """Sign of the DFT exponent."""

    FORWARD = -1
    BACKWARD = 1


class PlanFlag(Enum):
    """Planner effort: fast init (ESTIMATE) or fast execute (MEASURE)."""

    ESTIMATE = "estimate"
    MEASURE = "measure"

    @classmethod
    def coerce(cls, flag: "PlanFlag | str | None") -> "PlanFlag":
        """Resolve a flag, a flag name, or None (configured default)."""
        if flag is None:
            flag = get_config().plan_flag
        if isinstance(flag, cls):
            return flag
        try:
            return cls(str(flag).lower())
        except ValueError:
            raise PlanCreationError(f"Unknown plan flag: {flag!r}.") from None


class FFTBackend(ABC):
    """Source of DFT kernels."""

    name: str = "abstract"

    @abstractmethod
    def kernel(self, d: int, direction: Direction) -> Kernel:
        """Return a function mapping a length-d buffer to its unnormalized DFT."""


class NumpyBackend(FFTBackend):
    """Kernels built on ``numpy.fft``."""

    name = "numpy"

    def kernel(self, d: int, direction: Direction) -> Kernel:
        # norm="forward" leaves the backward transform unscaled
        if direction is Direction.FORWARD:
            return lambda x: np.fft.fft(x, norm="backward")
        return lambda x: np.fft.ifft(x, norm="forward")


class TorchBackend(FFTBackend):
    """Kernels built on ``torch.fft``, run on CPU tensors sharing the buffer memory."""

    name = "torch"

    def __init__(self) -> None:
        import torch

        self._torch = torch

    def kernel(self, d: int, direction: Direction) -> Kernel:
        torch = self._torch

        if direction is Direction.FORWARD:
            def run(x: np.ndarray) -> np.ndarray:
                return torch.fft.fft(torch.from_numpy(x), norm="backward").numpy()
        else:
            def run(x: np.ndarray) -> np.ndarray:
                return torch.fft.ifft(torch.from_numpy(x), norm="forward").numpy()

        return run


_BACKENDS: Dict[str, Callable[[], FFTBackend]] = {
    "numpy": NumpyBackend,
    "torch": TorchBackend,
}


def register_backend(name: str, factory: Callable[[], FFTBackend]) -> None:
    """Make ``factory`` available as FFT backend ``name``."""
    _BACKENDS[name.lower()] = factory


def available_backends() -> list[str]:
    """Names of the registered FFT backends."""
    return sorted(_BACKENDS)


def get_backend(name: Optional[str] = None) -> FFTBackend:
    """
    Instantiate an FFT backend by name (default: configured backend).

    Raises:
        PlanCreationError: If the backend is unknown or cannot be created.
    """
    if name is None:
        name = get_config().fft_backend
    factory = _BACKENDS.get(name.lower())
    if factory is None:
        raise PlanCreationError(
            f"Unknown FFT backend {name!r}. Available backends: {available_backends()}"
        )
    try:
        return factory()
    except ImportError as exc:
        raise PlanCreationError(f"FFT backend {name!r} is not usable: {exc}") from exc


def dft_matrix(d: int, direction: Direction) -> np.ndarray:
    """Dense unnormalized DFT matrix of size d x d."""
    j = np.arange(d)
    return np.exp(direction.value * 2j * np.pi * np.outer(j, j) / d)


def _time_kernel(kernel: Kernel, buffer: np.ndarray, repeats: int) -> float:
    best = float("inf")
    probe = buffer.copy()
    for _ in range(repeats):
        start = time.perf_counter()
        kernel(probe)
        best = min(best, time.perf_counter() - start)
    return best


class FFTPlan:
    """
    In-place DFT over one exclusively-owned buffer.

    Plans are created by :func:`plan_dft_1d` and released with
    :meth:`destroy` (or by leaving a ``with`` block).
    """

    def __init__(
        self,
        buffer: np.ndarray,
        direction: Direction,
        kernel: Kernel,
        kernel_name: str,
    ) -> None:
        self._buffer: Optional[np.ndarray] = buffer
        self._kernel: Optional[Kernel] = kernel
        self.direction = direction
        self.kernel_name = kernel_name
        self.d = buffer.shape[0]

    @property
    def destroyed(self) -> bool:
        return self._kernel is None

    @property
    def buffer(self) -> np.ndarray:
        if self._buffer is None:
            raise NullArgError("FFT plan has been destroyed.")
        return self._buffer

    def execute(self) -> None:
        """Replace the buffer contents with their DFT."""
        if self._kernel is None:
            raise NullArgError("FFT plan has been destroyed.")
        self._buffer[:] = self._kernel(self._buffer)

    def destroy(self) -> None:
        self._kernel = None
        self._buffer = None

    def __enter__(self) -> "FFTPlan":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.destroy()

    def __repr__(self) -> str:
        state = "destroyed" if self.destroyed else "ready"
        return (
            f"FFTPlan(d={self.d}, direction={self.direction.name}, "
            f"kernel={self.kernel_name!r}, {state})"
        )


def plan_dft_1d(
    buffer: np.ndarray,
    direction: Direction,
    flag: PlanFlag | str | None = None,
    backend: FFTBackend | str | None = None,
) -> FFTPlan:
    """
    Create an in-place DFT plan over ``buffer``.

    Args:
        buffer: 1D contiguous complex128 array the plan will transform.
        direction: FORWARD or BACKWARD.
        flag: Planner flag (default: configured flag).
        backend: Backend instance or name (default: configured backend).

    Returns:
        A ready :class:`FFTPlan`.

    Raises:
        PlanCreationError: If the buffer is unsuitable, the backend is
            unknown, or kernel construction fails.
    """
    if buffer is None:
        raise NullArgError("FFT buffer must not be None.")
    if (
        not isinstance(buffer, np.ndarray)
        or buffer.ndim != 1
        or buffer.dtype != np.complex128
        or not buffer.flags.c_contiguous
        or buffer.shape[0] < 1
    ):
        raise PlanCreationError(
            "FFT buffer must be a non-empty 1D contiguous complex128 array."
        )

    flag = PlanFlag.coerce(flag)
    if not isinstance(backend, FFTBackend):
        backend = get_backend(backend)

    d = buffer.shape[0]
    try:
        kernel = backend.kernel(d, direction)
        kernel_name = backend.name

        if flag is PlanFlag.MEASURE:
            matrix = dft_matrix(d, direction)
            candidates = {kernel_name: kernel, "matrix": lambda x: matrix @ x}
            repeats = get_config().measure_repeats
            timings = {
                name: _time_kernel(candidate, buffer, repeats)
                for name, candidate in candidates.items()
            }
            kernel_name = min(timings, key=timings.get)
            kernel = candidates[kernel_name]
    except PlanCreationError:
        raise
    except Exception as exc:
        raise PlanCreationError(f"FFT plan creation failed: {exc}") from exc

    logger.debug(
        "FFT plan d=%d direction=%s flag=%s kernel=%s",
        d,
        direction.name,
        flag.value,
        kernel_name,
    )
    return FFTPlan(buffer, direction, kernel, kernel_name)
