"""Factorization core.

This package provides the Zak-style factorization of Gabor windows and
the block-diagonal solves performed on it:
- Lattice descriptor and integer helpers
- In-place DFT plans with pluggable backends
- Forward (wfac) and inverse (iwfac) factorization plans
- Canonical dual and tight solves in the factor domain
"""

from .fft import (
    Direction,
    FFTBackend,
    FFTPlan,
    NumpyBackend,
    PlanFlag,
    TorchBackend,
    available_backends,
    get_backend,
    plan_dft_1d,
    register_backend,
)
from .iwfac import IwfacPlan, iwfac, iwfac_done, iwfac_execute, iwfac_init
from .lattice import Lattice, gcd, lattice, lcm, minimal_length, next_valid_length
from .layout import FactorLayout, time_indices
from .regime import COMPLEX, REAL, Regime, regime_for
from .solve import check_gram, gabdual_fac, gabdualreal_fac, gabtight_fac, gram_eigenvalues
from .wfac import WfacPlan, wfac, wfac_done, wfac_execute, wfac_init

__all__ = [
    # Lattice
    "Lattice",
    "lattice",
    "gcd",
    "lcm",
    "minimal_length",
    "next_valid_length",
    # FFT plans
    "Direction",
    "PlanFlag",
    "FFTBackend",
    "NumpyBackend",
    "TorchBackend",
    "FFTPlan",
    "plan_dft_1d",
    "register_backend",
    "available_backends",
    "get_backend",
    # Layout
    "FactorLayout",
    "time_indices",
    # Regimes
    "Regime",
    "REAL",
    "COMPLEX",
    "regime_for",
    # Factorization
    "WfacPlan",
    "wfac",
    "wfac_init",
    "wfac_execute",
    "wfac_done",
    "IwfacPlan",
    "iwfac",
    "iwfac_init",
    "iwfac_execute",
    "iwfac_done",
    # Solves
    "gabdual_fac",
    "gabdualreal_fac",
    "gabtight_fac",
    "gram_eigenvalues",
    "check_gram",
]
