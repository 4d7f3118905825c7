# src/exact_sde/integrators.py
from __future__ import annotations

import inspect
import logging
from typing import Callable, Union

import numpy as np

from exact_sde.errors import RandContractKind, RandGeneratorContractViolation
from exact_sde.parameters import Coefficient, mask_state

LOGGER = logging.getLogger(__name__)

RandFn = Callable[[int, int], np.ndarray]
Step = Union[float, np.ndarray]


def rng_with_seed(seed: int | None) -> np.random.Generator:
    """Create a numpy Generator deterministically from seed if provided."""
    return np.random.default_rng(seed)


def default_rand_fn(rng: np.random.Generator) -> RandFn:
    """Standard normal variates from rng, shape (count, width)."""

    def rand_fn(count: int, width: int) -> np.ndarray:
        return rng.standard_normal((count, width))

    return rand_fn


def _check_arity(rand_fn: RandFn) -> None:
    try:
        sig = inspect.signature(rand_fn)
    except (TypeError, ValueError):
        # builtins without introspectable signatures are checked by calling
        return

    try:
        sig.bind(0, 0)
    except TypeError:
        params = list(sig.parameters.values())
        positional = [
            p
            for p in params
            if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        ]
        var_positional = any(p.kind == p.VAR_POSITIONAL for p in params)
        if len(positional) < 2 and not var_positional:
            raise RandGeneratorContractViolation(
                RandContractKind.TOO_FEW_INPUTS,
                "rand_fn must accept at least two inputs (count, width).",
            ) from None
        raise RandGeneratorContractViolation(
            RandContractKind.TOO_MANY_INPUTS,
            "rand_fn must not require more than two inputs (count, width).",
        ) from None


def _check_output(r: object, count: int, width: int) -> np.ndarray:
    if r is None:
        raise RandGeneratorContractViolation(
            RandContractKind.NO_OUTPUT,
            "The output of rand_fn was not specified. rand_fn must return a "
            "non-empty matrix.",
        )
    if (
        not isinstance(r, np.ndarray)
        or r.dtype.kind != "f"
        or r.ndim != 2
        or r.size == 0
    ):
        raise RandGeneratorContractViolation(
            RandContractKind.TYPE_MISMATCH,
            "rand_fn must return a non-empty 2-D numpy array of floating "
            "point values.",
        )
    if r.shape != (count, width):
        raise RandGeneratorContractViolation(
            RandContractKind.SHAPE_MISMATCH,
            f"rand_fn did not output a {count} by {width} matrix as requested "
            f"(got {r.shape[0]} by {r.shape[1]}).",
        )
    if not np.all(np.isfinite(r)):
        raise RandGeneratorContractViolation(
            RandContractKind.TYPE_MISMATCH,
            "rand_fn must return finite values.",
        )
    return r


def draw_increments(
    rand_fn: RandFn, count: int, width: int, dtype: np.dtype, custom: bool
) -> np.ndarray:
    """
    Draw every variate of a run in one call, shape (count, width).

    Custom generators are checked against the (count, width) -> float array
    contract and any failure is reported as RandGeneratorContractViolation.
    """
    LOGGER.debug("Drawing %d x %d variates (custom=%s)", count, width, custom)
    if not custom:
        return np.asarray(rand_fn(count, width), dtype=dtype)

    _check_arity(rand_fn)
    try:
        r = rand_fn(count, width)
    except RandGeneratorContractViolation:
        raise
    except Exception as e:
        raise RandGeneratorContractViolation(
            RandContractKind.GENERATOR_ERROR, f"rand_fn raised an error: {e}"
        ) from e

    return _check_output(r, count, width).astype(dtype, copy=False)


def brownian_scale(h: Step, tdir: int) -> Step:
    """
    tdir * sqrt(h) per step.

    Scalar for a constant step, otherwise a (M-1, 1) column.
    """
    if np.ndim(h) == 0:
        return tdir * np.sqrt(h)
    return (tdir * np.sqrt(h))[:, None]


def ou_time_scale(tspan: np.ndarray, rates: np.ndarray, tdir: int) -> np.ndarray:
    """
    Increment scale on the Doob clock exp(2*r*t) - 1, shape (M-1, len(rates)).

        tdir * sqrt(|expm1(2*r*t[i+1]) - expm1(2*r*t[i])|)

    t is measured from tspan[0]. expm1 keeps small r*t products accurate
    where exp(a) - exp(b) cancels.
    """
    clock = np.expm1(2 * (tspan - tspan[0])[:, None] * rates)
    return tdir * np.sqrt(np.abs(np.diff(clock, axis=0)))


def ou_increment_scale(
    tspan: np.ndarray, h: Step, tdir: int, theta: Coefficient
) -> Step:
    """
    Per-column increment scale for OU dimensions.

    Columns with a nonzero rate use the time-transformed scale, columns with
    a zero rate plain Brownian scaling. Broadcasts against (M-1, len(columns)).
    """
    mask = theta.values != 0
    state = mask_state(mask)
    if state == "all":
        return ou_time_scale(tspan, theta.values, tdir)
    if state == "none":
        return brownian_scale(h, tdir)

    scale = np.empty((tspan.size - 1, mask.size), dtype=tspan.dtype)
    scale[:, mask] = ou_time_scale(tspan, theta.values[mask], tdir)
    scale[:, ~mask] = brownian_scale(h, tdir)
    return scale


def integrate(increments: np.ndarray) -> np.ndarray:
    """Cumulative sum along time with an all-zero first row."""
    count, width = increments.shape
    w = np.zeros((count + 1, width), dtype=increments.dtype)
    np.cumsum(increments, axis=0, out=w[1:])
    return w
