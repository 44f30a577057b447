"""Gabor window catalogue and length adapters.

This package provides:
- FIR windows sampled on the zero-centred grid (Hann, Hamming, Blackman,
  Nuttall family, ...)
- Periodized Gaussians
- FIR/long adapters and normalization
"""

from .adapters import fir2long, long2fir, normalize
from .firwin import Window, firwin, sample_grid, window_kind, window_names
from .pgauss import pgauss

__all__ = [
    "Window",
    "firwin",
    "window_kind",
    "window_names",
    "sample_grid",
    "pgauss",
    "fir2long",
    "long2fir",
    "normalize",
]
