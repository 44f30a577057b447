"""Status codes and the exception hierarchy shared by all gabframe routines.

Every failure raised by the library is a :class:`GabframeError` carrying
a :class:`Status`. Each concrete class also derives from the builtin
exception that describes its category (``ValueError`` for argument
errors, ``RuntimeError`` for plan and internal failures, ``MemoryError``
for allocation failures), so generic handlers keep working.

Driver routines wrap their sub-steps in :func:`provenance`, which
re-raises the same error class with a human-readable origin prepended.
"""

from __future__ import annotations

import operator
from contextlib import contextmanager
from enum import Enum
from typing import Any, Callable, Iterator, Sequence, Tuple

import numpy as np


class Status(Enum):
    """Outcome of a library call."""

    SUCCESS = "success"
    NOT_POSITIVE_ARG = "not_positive_arg"
    BAD_ARGUMENT = "bad_argument"
    NOT_A_FRAME = "not_a_frame"
    NULL_ARG = "null_arg"
    ALLOCATION_FAILED = "allocation_failed"
    PLAN_CREATION = "plan_creation"
    INTERNAL_FAILURE = "internal_failure"


class GabframeError(Exception):
    """
    Base class of all library errors.

    Attributes:
        status: Status code describing the failure category.
        message: Message of the innermost failure.
        origins: Provenance chain, outermost first.
    """

    status: Status = Status.INTERNAL_FAILURE

    def __init__(self, message: str = "", origins: Sequence[str] = ()) -> None:
        self.message = message
        self.origins = tuple(origins)
        super().__init__(self._render())

    def _render(self) -> str:
        if not self.origins:
            return self.message
        return ": ".join(self.origins + (self.message,))

    def __str__(self) -> str:
        return self._render()

    def with_origin(self, origin: str) -> "GabframeError":
        """Return a copy of this error with ``origin`` prepended."""
        return type(self)(self.message, (origin,) + self.origins)


class BadArgumentError(GabframeError, ValueError):
    status = Status.BAD_ARGUMENT


class NotPositiveArgError(BadArgumentError):
    status = Status.NOT_POSITIVE_ARG


class NotAFrameError(GabframeError, ValueError):
    status = Status.NOT_A_FRAME


class NullArgError(GabframeError, TypeError):
    status = Status.NULL_ARG


class AllocationFailedError(GabframeError, MemoryError):
    status = Status.ALLOCATION_FAILED


class PlanCreationError(GabframeError, RuntimeError):
    status = Status.PLAN_CREATION


class InternalFailureError(GabframeError, RuntimeError):
    status = Status.INTERNAL_FAILURE


@contextmanager
def provenance(origin: str) -> Iterator[None]:
    """
    Re-raise library errors from the enclosed block with ``origin`` attached.

    The re-raised error has the same class (and therefore the same status)
    and is chained to the original with ``from``.

    Example
    -------
    >>> with provenance("wfac failed"):
    ...     gf = wfac(g, L, R, a, M)
    """
    try:
        yield
    except GabframeError as exc:
        raise exc.with_origin(origin) from exc


def status_of(exc: BaseException | None) -> Status:
    """Map an exception (or ``None`` for success) to a :class:`Status`."""
    if exc is None:
        return Status.SUCCESS
    if isinstance(exc, GabframeError):
        return exc.status
    if isinstance(exc, MemoryError):
        return Status.ALLOCATION_FAILED
    return Status.INTERNAL_FAILURE


def call_with_status(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Tuple[Status, Any]:
    """
    Call ``fn`` and report its outcome as ``(status, result)``.

    Library errors are turned into their status with ``result=None``;
    any other exception propagates.
    """
    try:
        result = fn(*args, **kwargs)
    except (GabframeError, MemoryError) as exc:
        return status_of(exc), None
    return Status.SUCCESS, result


def require(value: Any, name: str) -> Any:
    """Raise :class:`NullArgError` when ``value`` is None; return it otherwise."""
    if value is None:
        raise NullArgError(f"{name} must not be None.")
    return value


def require_positive(value: int, name: str) -> int:
    """Raise :class:`NotPositiveArgError` unless ``value`` is a positive integer."""
    value = as_int(value, name)
    if value <= 0:
        raise NotPositiveArgError(f"{name} (passed {value}) must be positive.")
    return value


def as_int(value: Any, name: str) -> int:
    """Coerce an integral value (Python or numpy) to ``int``."""
    if isinstance(value, (bool, np.bool_)):
        raise BadArgumentError(f"{name} must be an integer, got {value!r}.")
    try:
        return operator.index(value)
    except TypeError:
        raise BadArgumentError(f"{name} must be an integer, got {value!r}.") from None


def allocate(shape: int | Tuple[int, ...], dtype: Any = np.complex128) -> np.ndarray:
    """Allocate a zeroed array, reporting exhaustion as :class:`AllocationFailedError`."""
    try:
        return np.zeros(shape, dtype=dtype)
    except MemoryError as exc:
        raise AllocationFailedError(f"Could not allocate array of shape {shape}.") from exc
