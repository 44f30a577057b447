"""Runtime configuration for gabframe.

The active :class:`Config` is read once from ``GABFRAME_*`` environment
variables at import time and can be changed globally with
:func:`set_config` or temporarily with :func:`config_context`.
"""

from __future__ import annotations

import dataclasses
import math
import os
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator

from .logging import get_logger

logger = get_logger(__name__)

_ENV_PREFIX = "GABFRAME_"
_TRUE_VALUES = ("1", "true", "yes", "on")

_PLAN_FLAGS = ("estimate", "measure")


@dataclass(frozen=True)
class Config:
    """
    Library-wide defaults.

    Attributes:
        fft_backend: Name of the FFT backend used by new plans.
        plan_flag: Planner flag used when a caller passes none
            ("estimate" or "measure").
        max_condition: Gram slabs whose condition number exceeds this
            value make the lattice "not a frame".
        check_real_residual: Whether real-valued inverse factorizations
            verify that the discarded imaginary part is negligible.
        residual_tol: Relative tolerance of that check.
        measure_repeats: Timing repetitions per candidate kernel when a
            plan is created with the "measure" flag.
        debug: Enables extra verification in the drivers.
    """

    fft_backend: str = "numpy"
    plan_flag: str = "measure"
    max_condition: float = 1e12
    check_real_residual: bool = True
    residual_tol: float = 1e-8
    measure_repeats: int = 3
    debug: bool = False

    def __post_init__(self) -> None:
        """Validate Config invariants."""
        if not self.fft_backend:
            raise ValueError("fft_backend must be a non-empty string.")

        if self.plan_flag not in _PLAN_FLAGS:
            raise ValueError(
                f"plan_flag must be one of {_PLAN_FLAGS}, got {self.plan_flag!r}."
            )

        if not (self.max_condition > 1.0 and math.isfinite(self.max_condition)):
            raise ValueError(
                f"max_condition must be a finite number > 1, got {self.max_condition}."
            )

        if not self.residual_tol > 0:
            raise ValueError(f"residual_tol must be positive, got {self.residual_tol}.")

        if self.measure_repeats < 1:
            raise ValueError(
                f"measure_repeats must be >= 1, got {self.measure_repeats}."
            )


def _env(name: str) -> str | None:
    return os.getenv(_ENV_PREFIX + name)


def _env_flag(name: str, default: bool) -> bool:
    value = _env(name)
    if value is None:
        return default
    return value.lower() in _TRUE_VALUES


def _env_value(
    name: str, field: str, parse: Callable[[str], Any], defaults: Config, changes: dict
) -> None:
    raw = _env(name)
    if not raw:
        return
    try:
        value = parse(raw)
        dataclasses.replace(defaults, **{field: value})
    except ValueError as exc:
        logger.warning(
            "Ignoring %s%s=%r (%s); using %s=%r.",
            _ENV_PREFIX, name, raw, exc, field, getattr(defaults, field),
        )
        return
    changes[field] = value


def config_from_env() -> Config:
    """
    Build a :class:`Config` from ``GABFRAME_*`` environment variables.

    A variable that cannot be parsed, or whose value the :class:`Config`
    invariants reject, is reported with a warning and the default is kept.
    """
    defaults = Config()
    changes: dict[str, Any] = {}

    _env_value("FFT_BACKEND", "fft_backend", str.lower, defaults, changes)
    _env_value("PLAN_FLAG", "plan_flag", str.lower, defaults, changes)
    _env_value("MAX_CONDITION", "max_condition", float, defaults, changes)
    _env_value("RESIDUAL_TOL", "residual_tol", float, defaults, changes)

    changes["check_real_residual"] = _env_flag("CHECK_RESIDUAL", defaults.check_real_residual)
    changes["debug"] = _env_flag("DEBUG", defaults.debug)

    return dataclasses.replace(defaults, **changes)


_config: Config = config_from_env()


def get_config() -> Config:
    """Return the active configuration."""
    return _config


def set_config(**changes: Any) -> Config:
    """
    Replace fields of the active configuration.

    Returns
    -------
    Config
        The new active configuration.

    Raises
    ------
    ValueError
        If a field value is invalid.
    TypeError
        If a field name is unknown.
    """
    global _config
    _config = dataclasses.replace(_config, **changes)
    return _config


@contextmanager
def config_context(**changes: Any) -> Iterator[Config]:
    """
    Context manager to temporarily change configuration fields.

    Example
    -------
    >>> with config_context(fft_backend="torch", plan_flag="estimate"):
    ...     gd = gabdual_long(g, L, 1, a, M)
    """
    global _config
    prev = _config
    _config = dataclasses.replace(_config, **changes)
    try:
        yield _config
    finally:
        _config = prev


def is_debug_enabled() -> bool:
    """Return whether debug mode is enabled."""
    return _config.debug


def set_debug_enabled(enabled: bool) -> None:
    """Globally enable or disable debug mode."""
    set_config(debug=bool(enabled))


@contextmanager
def debug_context(enabled: bool = True) -> Iterator[None]:
    """Context manager to temporarily enable or disable debug mode."""
    with config_context(debug=bool(enabled)):
        yield
