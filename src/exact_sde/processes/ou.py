# src/exact_sde/processes/ou.py
from __future__ import annotations

import logging
from typing import Any

import numpy as np

from exact_sde.arguments import prepare_arguments
from exact_sde.evaluators import evaluate_ou
from exact_sde.integrators import draw_increments, integrate, ou_increment_scale
from exact_sde.parameters import (
    as_float_vector,
    check_nonnegative,
    normalize_coefficients,
    superior_float,
)
from exact_sde.results import PathResult, assemble_result

LOGGER = logging.getLogger(__name__)


def sde_ou(
    theta: Any,
    mu: Any,
    sigma: Any,
    tspan: Any,
    y0: Any,
    options: Any = None,
    *args: Any,
    return_noise: bool = False,
    return_events: bool = False,
) -> PathResult:
    """
    Exact Ornstein-Uhlenbeck paths with diagonal noise:

        dY = theta (mu - Y) dt + sigma dW

    theta, mu and sigma are scalars or length-N vectors (N = len(y0)).
    tspan is a strictly monotonic grid of M >= 2 times, increasing or
    decreasing, with any step sizes. Each row of the M x N trajectory
    corresponds to one time in tspan.

    For nonzero theta the conditional solution is

        Y = exp(-theta t) (y0 - mu) + mu
            + (sigma / sqrt(2 theta)) exp(-theta t) W(exp(2 theta t) - 1)

    with t measured from tspan[0] and W a time-transformed Wiener process
    (Doob, 1942). For theta == 0 the driftless solution Y = y0 + sigma W(t)
    is used.

    options: SDEOptions (or dict) with rand_seed / rand_fn / events_fn.
    args: forwarded to events_fn after (t, y).
    return_noise: also return the integrated Wiener increments used.
    return_events: also return the zero-crossings found by events_fn.
    """
    theta = as_float_vector(theta, "theta")
    mu = as_float_vector(mu, "mu")
    sigma = as_float_vector(sigma, "sigma")
    tspan = as_float_vector(tspan, "tspan")
    y0 = as_float_vector(y0, "y0")

    dtype = superior_float(theta=theta, mu=mu, sigma=sigma, tspan=tspan, y0=y0)
    n = y0.size
    coef = normalize_coefficients(n, dtype, theta=theta, mu=mu, sigma=sigma)
    check_nonnegative(coef["sigma"])

    arguments = prepare_arguments(
        "sde_ou", tspan, y0, dtype, options, args, return_events=return_events
    )
    lt = arguments.lt

    w = None
    sigma_mask = coef["sigma"].mask(n)
    if sigma_mask.any():
        d = int(np.count_nonzero(sigma_mask))
        draws = draw_increments(
            arguments.rand_fn, lt - 1, d, dtype, arguments.custom_rand_fn
        )
        scale = ou_increment_scale(
            arguments.tspan,
            arguments.h,
            arguments.tdir,
            coef["theta"].take(sigma_mask),
        )
        dw = np.zeros((lt - 1, n), dtype=dtype)
        dw[:, sigma_mask] = scale * draws
        w = integrate(dw)
    else:
        LOGGER.debug("sde_ou: sigma is zero everywhere, no variates drawn")

    y = evaluate_ou(
        arguments.tspan, arguments.y0, coef["theta"], coef["mu"], coef["sigma"], w
    )
    return assemble_result(arguments, y, w, return_noise, return_events)
