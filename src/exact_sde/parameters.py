# src/exact_sde/parameters.py
from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Any, Dict

import numpy as np

from exact_sde.errors import (
    DimensionMismatch,
    InvalidParameter,
    NegativeDiffusion,
    PrecisionInconsistencyWarning,
)


def as_float_vector(value: Any, name: str) -> np.ndarray:
    """
    Validate one coefficient / grid / initial-condition input.

    Accepts Python scalars, sequences and numpy arrays of real numbers that
    form a vector (at most one non-singleton axis). Integers are promoted to
    float64; float32 input is kept as float32.
    """
    if value is None:
        raise InvalidParameter(f"{name} must be a non-empty floating-point vector.")

    arr = np.asarray(value)
    if arr.dtype.kind not in "fiu":
        raise InvalidParameter(
            f"{name} must be a non-empty floating-point vector "
            f"(got dtype {arr.dtype})."
        )
    if arr.size == 0:
        raise InvalidParameter(f"{name} must be a non-empty floating-point vector.")
    if sum(d > 1 for d in arr.shape) > 1:
        raise InvalidParameter(f"{name} must be a vector (got shape {arr.shape}).")

    if arr.dtype != np.float32:
        arr = arr.astype(np.float64)
    arr = arr.reshape(-1)

    if not np.all(np.isfinite(arr)):
        raise InvalidParameter(f"{name} must contain only finite values.")
    return arr


def superior_float(**inputs: np.ndarray) -> np.dtype:
    """
    Widest float dtype among the inputs.

    A mixture of float32 and float64 is allowed but reported with a
    PrecisionInconsistencyWarning; everything is then computed in float64.
    """
    dtypes = {k: v.dtype for k, v in inputs.items()}
    dtype = np.dtype(np.float32)
    if any(d == np.float64 for d in dtypes.values()):
        dtype = np.dtype(np.float64)

    if len(set(dtypes.values())) > 1:
        names = ", ".join(dtypes)
        warnings.warn(
            f"Mixture of single and double data for inputs {names}.",
            PrecisionInconsistencyWarning,
            stacklevel=3,
        )
    return dtype


@dataclass(frozen=True)
class Coefficient:
    """
    A coefficient that is either one value shared by every dimension or one
    value per dimension.

    values keeps length 1 for the shared case so arithmetic broadcasts a
    single scalar instead of a full row.
    """

    name: str
    values: np.ndarray

    @property
    def is_scalar(self) -> bool:
        return self.values.size == 1

    def broadcast(self, n: int) -> np.ndarray:
        return np.broadcast_to(self.values, (n,)).copy()

    def take(self, mask: np.ndarray) -> "Coefficient":
        if self.is_scalar:
            return self
        return Coefficient(self.name, self.values[mask])

    def mask(self, n: int) -> np.ndarray:
        """Dimensions where the coefficient is structurally nonzero."""
        return np.broadcast_to(self.values != 0, (n,)).copy()


def check_length(values: np.ndarray, n: int, name: str) -> None:
    if values.size not in (1, n):
        raise DimensionMismatch(
            f"{name} must be a scalar or a vector the same length as y0 "
            f"(got length {values.size}, expected 1 or {n})."
        )


def check_nonnegative(sigma: Coefficient) -> None:
    if np.any(sigma.values < 0):
        raise NegativeDiffusion(
            f"The diffusion parameter, {sigma.name}, must be greater than or "
            "equal to zero."
        )


def normalize_coefficients(
    n: int, dtype: np.dtype, **coefficients: np.ndarray
) -> Dict[str, Coefficient]:
    """Length-check every coefficient against n and cast to the run dtype."""
    out: Dict[str, Coefficient] = {}
    for name, values in coefficients.items():
        check_length(values, n, name)
        out[name] = Coefficient(name, values.astype(dtype, copy=False))
    return out


def mask_state(mask: np.ndarray) -> str:
    """Classify an activity mask as 'all', 'none' or 'mixed'."""
    if mask.all():
        return "all"
    if not mask.any():
        return "none"
    return "mixed"
