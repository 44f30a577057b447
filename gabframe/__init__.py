"""gabframe - canonical dual and tight Gabor windows by factorization."""

__version__ = "0.1.0"

# Bounds
from .bounds import gabframe_condition, gabframebounds

# Configuration
from .config import (
    Config,
    config_context,
    debug_context,
    get_config,
    is_debug_enabled,
    set_config,
    set_debug_enabled,
)

# Transform
from .dgt import DGT, dgt, idgt

# Errors
from .errors import (
    AllocationFailedError,
    BadArgumentError,
    GabframeError,
    InternalFailureError,
    NotAFrameError,
    NotPositiveArgError,
    NullArgError,
    PlanCreationError,
    Status,
    call_with_status,
    status_of,
)

# Factorization core
from .factor import (
    FFTPlan,
    IwfacPlan,
    Lattice,
    PlanFlag,
    WfacPlan,
    gabdual_fac,
    gabdualreal_fac,
    gabtight_fac,
    iwfac,
    iwfac_done,
    iwfac_execute,
    iwfac_init,
    lattice,
    plan_dft_1d,
    wfac,
    wfac_done,
    wfac_execute,
    wfac_init,
)

# Drivers
from .gabdual import gabdual_fir, gabdual_long, gabtight_fir, gabtight_long

# Logging
from .logging import configure_logging, get_logger, set_log_level

# Windows
from .windows import Window, fir2long, firwin, long2fir, normalize, pgauss

__all__ = [
    "__version__",
    # Drivers
    "gabdual_long",
    "gabdual_fir",
    "gabtight_long",
    "gabtight_fir",
    # Factorization core
    "Lattice",
    "lattice",
    "PlanFlag",
    "FFTPlan",
    "plan_dft_1d",
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
    "gabdual_fac",
    "gabdualreal_fac",
    "gabtight_fac",
    # Windows
    "Window",
    "firwin",
    "pgauss",
    "fir2long",
    "long2fir",
    "normalize",
    # Bounds
    "gabframebounds",
    "gabframe_condition",
    # Transform
    "DGT",
    "dgt",
    "idgt",
    # Errors
    "Status",
    "GabframeError",
    "BadArgumentError",
    "NotPositiveArgError",
    "NotAFrameError",
    "NullArgError",
    "AllocationFailedError",
    "PlanCreationError",
    "InternalFailureError",
    "status_of",
    "call_with_status",
    # Configuration
    "Config",
    "get_config",
    "set_config",
    "config_context",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    # Logging
    "get_logger",
    "set_log_level",
    "configure_logging",
]
