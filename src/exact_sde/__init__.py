from exact_sde.errors import (
    DimensionMismatch,
    InvalidOptions,
    InvalidParameter,
    NegativeDiffusion,
    PrecisionInconsistencyWarning,
    RandContractKind,
    RandGeneratorContractViolation,
    SDEError,
    TooManyOutputsRequested,
)
from exact_sde.events import EventRecord
from exact_sde.loader import load_config, load_options
from exact_sde.processes.bm import sde_bm
from exact_sde.processes.ou import sde_ou
from exact_sde.results import PathResult
from exact_sde.schemas import SDEOptions, SimulationConfig

__all__ = [
    "DimensionMismatch",
    "EventRecord",
    "InvalidOptions",
    "InvalidParameter",
    "NegativeDiffusion",
    "PathResult",
    "PrecisionInconsistencyWarning",
    "RandContractKind",
    "RandGeneratorContractViolation",
    "SDEError",
    "SDEOptions",
    "SimulationConfig",
    "TooManyOutputsRequested",
    "load_config",
    "load_options",
    "sde_bm",
    "sde_ou",
]
