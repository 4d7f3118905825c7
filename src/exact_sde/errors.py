# src/exact_sde/errors.py
from __future__ import annotations

from enum import Enum


class SDEError(Exception):
    """Base class for every error raised by exact_sde."""

    pass


class InvalidParameter(SDEError, ValueError):
    """Raised for empty, non-numeric, non-vector or non-finite inputs."""

    pass


class DimensionMismatch(SDEError, ValueError):
    """Raised when a coefficient is neither a scalar nor a length-N vector."""

    pass


class NegativeDiffusion(SDEError, ValueError):
    """Raised when any diffusion coefficient is below zero."""

    pass


class InvalidOptions(SDEError, ValueError):
    """Raised for an options object of the wrong type or unsupported value."""

    pass


class TooManyOutputsRequested(SDEError, ValueError):
    """Raised when event outputs are requested but no events_fn is set."""

    pass


class RandContractKind(str, Enum):
    TOO_FEW_INPUTS = "too_few_inputs"
    TOO_MANY_INPUTS = "too_many_inputs"
    NO_OUTPUT = "no_output"
    TYPE_MISMATCH = "type_mismatch"
    SHAPE_MISMATCH = "shape_mismatch"
    GENERATOR_ERROR = "generator_error"


class RandGeneratorContractViolation(SDEError, RuntimeError):
    """
    Raised when a user supplied rand_fn breaks its output contract.

    kind : which part of the contract failed (see RandContractKind)
    """

    def __init__(self, kind: RandContractKind, message: str):
        super().__init__(message)
        self.kind = RandContractKind(kind)


class PrecisionInconsistencyWarning(UserWarning):
    """Mixture of single and double precision inputs."""

    pass
