# src/exact_sde/processes/bm.py
from __future__ import annotations

import logging
from typing import Any

import numpy as np

from exact_sde.arguments import prepare_arguments
from exact_sde.evaluators import bm_deterministic, bm_recurrence, driftless_solution
from exact_sde.integrators import brownian_scale, draw_increments, integrate
from exact_sde.parameters import (
    as_float_vector,
    check_nonnegative,
    normalize_coefficients,
    superior_float,
)
from exact_sde.results import PathResult, assemble_result

LOGGER = logging.getLogger(__name__)


def sde_bm(
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
    Exact Brownian motion with drift, dY = mu dt + sigma dW, diagonal noise.

    Solved by the exact recurrence Y[i+1] = Y[i] + mu dt[i] + sigma dW[i].
    Zero drift uses Y = y0 + sigma W(t) and zero diffusion Y = y0 + mu (t - t0),
    so no variates are drawn when sigma is zero everywhere.

    Arguments as for sde_ou.
    """
    mu = as_float_vector(mu, "mu")
    sigma = as_float_vector(sigma, "sigma")
    tspan = as_float_vector(tspan, "tspan")
    y0 = as_float_vector(y0, "y0")

    dtype = superior_float(mu=mu, sigma=sigma, tspan=tspan, y0=y0)
    n = y0.size
    coef = normalize_coefficients(n, dtype, mu=mu, sigma=sigma)
    check_nonnegative(coef["sigma"])

    arguments = prepare_arguments(
        "sde_bm", tspan, y0, dtype, options, args, return_events=return_events
    )
    lt = arguments.lt
    mu_c, sigma_c = coef["mu"], coef["sigma"]

    sigma_mask = sigma_c.mask(n)
    if not sigma_mask.any():
        LOGGER.debug("sde_bm: sigma is zero everywhere, no variates drawn")
        y = bm_deterministic(arguments.tspan, arguments.y0, mu_c)
        return assemble_result(arguments, y, None, return_noise, return_events)

    d = int(np.count_nonzero(sigma_mask))
    draws = draw_increments(
        arguments.rand_fn, lt - 1, d, dtype, arguments.custom_rand_fn
    )
    dw = np.zeros((lt - 1, n), dtype=dtype)
    dw[:, sigma_mask] = brownian_scale(arguments.h, arguments.tdir) * draws

    w = None
    if not np.any(mu_c.values):
        w = integrate(dw)
        y = driftless_solution(lt, arguments.y0, sigma_c, w)
    else:
        y = bm_recurrence(arguments.y0, mu_c, sigma_c, arguments.h, arguments.tdir, dw)
        if return_noise:
            w = integrate(dw)

    return assemble_result(arguments, y, w, return_noise, return_events)
