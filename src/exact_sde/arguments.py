# src/exact_sde/arguments.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

import numpy as np
from pydantic import ValidationError

from exact_sde.errors import InvalidOptions, InvalidParameter, TooManyOutputsRequested
from exact_sde.events import initial_value
from exact_sde.integrators import RandFn, Step, default_rand_fn, rng_with_seed
from exact_sde.schemas import SDEOptions

LOGGER = logging.getLogger(__name__)


@dataclass
class SDEArguments:
    """
    Pre-validated run arguments shared by the exact solvers.

    h is a scalar when the grid has a constant step, otherwise the
    length M-1 vector of absolute step lengths.
    """

    n: int
    tspan: np.ndarray
    tdir: int
    lt: int
    y0: np.ndarray
    h: Step
    const_step: bool
    stratonovich: bool
    rand_fn: RandFn
    custom_rand_fn: bool
    events_fn: Optional[Callable[..., Any]]
    events_value: Optional[np.ndarray]
    args: Tuple[Any, ...]


def resolve_options(name: str, options: Any) -> SDEOptions:
    if options is None:
        return SDEOptions()
    if isinstance(options, SDEOptions):
        return options
    if isinstance(options, dict):
        try:
            return SDEOptions.model_validate(options)
        except ValidationError as e:
            raise InvalidOptions(f"{name}: invalid options: {e}") from e
    raise InvalidOptions(
        f"{name}: options must be an SDEOptions instance, a dict or None "
        f"(got {type(options).__name__})."
    )


def _time_steps(
    name: str, tspan: np.ndarray, opts: SDEOptions
) -> Tuple[int, Step, bool]:
    if tspan.size < 2:
        raise InvalidParameter(f"{name}: tspan must have at least two time points.")

    dt = np.diff(tspan)
    if np.all(dt > 0):
        tdir = 1
    elif np.all(dt < 0):
        tdir = -1
    else:
        raise InvalidParameter(
            f"{name}: tspan must be strictly increasing or strictly decreasing."
        )

    h = np.abs(dt)
    uniform = bool(np.allclose(h, h[0], rtol=opts.const_step_rtol, atol=0.0))
    if opts.const_step is None:
        const_step = uniform
    elif opts.const_step and not uniform:
        raise InvalidOptions(
            f"{name}: const_step=True but tspan does not have a constant step."
        )
    else:
        const_step = opts.const_step

    if const_step:
        return tdir, h[0], True
    return tdir, h, False


def prepare_arguments(
    name: str,
    tspan: np.ndarray,
    y0: np.ndarray,
    dtype: np.dtype,
    options: Any,
    args: Tuple[Any, ...] = (),
    return_events: bool = False,
) -> SDEArguments:
    """
    Validate options and the time grid and resolve the random generator.

    No random variates are drawn here. The events function, if any, is
    evaluated once at (tspan[0], y0) to seed the zero-crossing detector.
    """
    opts = resolve_options(name, options)
    if not opts.diagonal_noise:
        raise InvalidOptions(
            f"{name}: only diagonal noise is supported; use a numerical "
            "solver for correlated noise."
        )

    events_fn = opts.events_fn
    if return_events and events_fn is None:
        raise TooManyOutputsRequested(
            f"{name}: event outputs were requested but no events_fn has been "
            "specified."
        )

    tspan = tspan.astype(dtype, copy=False)
    y0 = y0.astype(dtype, copy=False)
    tdir, h, const_step = _time_steps(name, tspan, opts)

    if opts.rand_fn is not None:
        rand_fn, custom = opts.rand_fn, True
    else:
        rand_fn, custom = default_rand_fn(rng_with_seed(opts.rand_seed)), False

    events_value = None
    if events_fn is not None:
        events_value = initial_value(events_fn, tspan[0], y0, args)

    LOGGER.debug(
        "%s: N=%d, M=%d, tdir=%d, const_step=%s, custom_rand_fn=%s",
        name,
        y0.size,
        tspan.size,
        tdir,
        const_step,
        custom,
    )
    return SDEArguments(
        n=y0.size,
        tspan=tspan,
        tdir=tdir,
        lt=tspan.size,
        y0=y0,
        h=h,
        const_step=const_step,
        stratonovich=opts.stratonovich,
        rand_fn=rand_fn,
        custom_rand_fn=custom,
        events_fn=events_fn,
        events_value=events_value,
        args=tuple(args),
    )
