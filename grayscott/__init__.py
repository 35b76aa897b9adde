"""Gray-Scott reaction-diffusion on a toroidal grid."""
from .backends import get_kernel
from .errors import (
    BackendUnavailableError,
    DegenerateThresholdError,
    GrayScottError,
    GridAllocationError,
    InvalidGridSizeError,
    InvalidParameterError,
    UnknownBackendError,
)
from .grid import GridState
from .intensity import map_to_intensity, to_display
from .params import ParameterSet, resolve_rates
from .simulation import Simulation

__version__ = "0.1.0"
