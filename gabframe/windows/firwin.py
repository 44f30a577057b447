"""FIR window catalogue.

Windows are sampled on the zero-centred, whole-point even grid

    x = [0, 1, ..., ceil(gl/2) - 1, -floor(gl/2), ..., -1] / gl

so that ``g[0]`` is the peak and ``g[n] == g[-n]``. With
``centering="hp"`` the grid is shifted by half a sample. Every window is
forced to zero where ``|x| >= 1/2``.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Sequence

import numpy as np

from ..errors import BadArgumentError, require_positive
from .adapters import normalize


class Window(Enum):
    """Recognized window shapes. Aliases map onto these members."""

    HANN = "hann"
    SQRTHANN = "sqrthann"
    COSINE = "cosine"
    HAMMING = "hamming"
    SQUARE = "square"
    TRIA = "tria"
    SQRTTRIA = "sqrttria"
    BLACKMAN = "blackman"
    BLACKMAN2 = "blackman2"
    NUTTALL = "nuttall"
    NUTTALL01 = "nuttall01"
    NUTTALL02 = "nuttall02"
    NUTTALL03 = "nuttall03"
    NUTTALL10 = "nuttall10"
    NUTTALL11 = "nuttall11"
    NUTTALL12 = "nuttall12"
    NUTTALL20 = "nuttall20"
    NUTTALL21 = "nuttall21"
    NUTTALL30 = "nuttall30"
    OGG = "ogg"
    ITERSINE = "itersine"


_ALIASES: Dict[str, Window] = {
    "hanning": Window.HANN,
    "sine": Window.COSINE,
    "rect": Window.SQUARE,
    "triangular": Window.TRIA,
    "bartlett": Window.TRIA,
    "vorbis": Window.OGG,
}

# Cosine-sum coefficients: g = sum_k coef[k] cos(2 pi k x).
# NUTTALLxy: x = continuity order of the window, y = of its derivative.
_COSINE_SUMS: Dict[Window, Sequence[float]] = {
    Window.HANN: (0.5, 0.5),
    Window.NUTTALL10: (0.5, 0.5),
    Window.HAMMING: (0.54, 0.46),
    Window.NUTTALL01: (0.53836, 0.46164),
    Window.BLACKMAN: (0.42, 0.5, 0.08),
    Window.BLACKMAN2: (7938 / 18608, 9240 / 18608, 1430 / 18608),
    Window.NUTTALL20: (3 / 8, 4 / 8, 1 / 8),
    Window.NUTTALL11: (0.40897, 0.5, 0.09103),
    Window.NUTTALL02: (0.4243801, 0.4973406, 0.0782793),
    Window.NUTTALL30: (10 / 32, 15 / 32, 6 / 32, 1 / 32),
    Window.NUTTALL21: (0.338946, 0.481973, 0.161054, 0.018027),
    Window.NUTTALL: (0.355768, 0.487396, 0.144232, 0.012604),
    Window.NUTTALL12: (0.355768, 0.487396, 0.144232, 0.012604),
    Window.NUTTALL03: (0.3635819, 0.4891775, 0.1365995, 0.0106411),
}


def window_kind(kind: Window | str) -> Window:
    """
    Resolve a window name or alias (case-insensitive).

    Raises:
        BadArgumentError: If the name is not in the catalogue.
    """
    if isinstance(kind, Window):
        return kind
    name = str(kind).strip().lower()
    if name in _ALIASES:
        return _ALIASES[name]
    try:
        return Window(name)
    except ValueError:
        raise BadArgumentError(f"Unknown window: {kind!r}") from None


def window_names() -> list[str]:
    """All accepted window names, aliases included."""
    return sorted({w.value for w in Window} | set(_ALIASES))


def sample_grid(gl: int, centering: str = "wp") -> np.ndarray:
    """Zero-centred sampling positions of a length-``gl`` window, in units of gl."""
    gl = require_positive(gl, "gl")
    n = np.arange(gl)
    if centering == "wp":
        n = np.where(n < (gl + 1) // 2, n, n - gl)
        return n / gl
    if centering == "hp":
        n = np.where(2 * n + 1 < gl, n, n - gl)
        return (n + 0.5) / gl
    raise BadArgumentError(f"centering must be 'wp' or 'hp', got {centering!r}")


def _shape(kind: Window, x: np.ndarray) -> np.ndarray:
    if kind in _COSINE_SUMS:
        g = np.zeros_like(x)
        for k, coef in enumerate(_COSINE_SUMS[kind]):
            g += coef * np.cos(2.0 * np.pi * k * x)
        return g
    if kind is Window.SQRTHANN:
        return np.sqrt(0.5 + 0.5 * np.cos(2.0 * np.pi * x))
    if kind is Window.COSINE:
        return np.cos(np.pi * x)
    if kind is Window.SQUARE:
        return np.ones_like(x)
    if kind is Window.TRIA:
        return 1.0 - 2.0 * np.abs(x)
    if kind is Window.SQRTTRIA:
        return np.sqrt(1.0 - 2.0 * np.abs(x))
    if kind in (Window.OGG, Window.ITERSINE):
        return np.sin(np.pi / 2.0 * np.cos(np.pi * x) ** 2)
    raise BadArgumentError(f"Unknown window: {kind!r}")


def firwin(
    kind: Window | str,
    gl: int,
    out: Optional[np.ndarray] = None,
    centering: str = "wp",
    norm: Optional[str] = None,
) -> np.ndarray:
    """
    Sample a FIR window.

    Args:
        kind: Window name or :class:`Window` member (aliases accepted:
            hanning, sine, rect, triangular, bartlett, vorbis).
        gl: Window length (must be positive).
        out: Optional float array of length ``gl`` to fill.
        centering: "wp" (whole-point even, default) or "hp" (half-point).
        norm: None, "peak"/"inf", "energy"/"2" or "area"/"1".

    Returns:
        Window array of length ``gl``, dtype float64.

    Raises:
        NotPositiveArgError: If gl <= 0.
        BadArgumentError: If ``kind``, ``centering`` or ``norm`` is unknown,
            or ``out`` has the wrong length.
    """
    kind = window_kind(kind)
    x = sample_grid(gl, centering)

    g = _shape(kind, x)
    # Force the window to zero outside (-1/2, 1/2)
    g = np.where(np.abs(x) < 0.5, g, 0.0)
    g = normalize(g, norm)

    if out is None:
        return g
    if np.shape(out) != (len(g),):
        raise BadArgumentError(f"out must have shape ({len(g)},), got {np.shape(out)}")
    out[:] = g
    return out
