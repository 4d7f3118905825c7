# src/exact_sde/evaluators.py
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

import numpy as np

from exact_sde.integrators import Step
from exact_sde.parameters import Coefficient, mask_state

LOGGER = logging.getLogger(__name__)


# ============================================================
# Ornstein-Uhlenbeck
# ============================================================


def ou_solution(
    tspan: np.ndarray,
    y0: np.ndarray,
    theta: Coefficient,
    mu: Coefficient,
    sigma: Coefficient,
    w: Optional[np.ndarray],
) -> np.ndarray:
    """
    Exact OU solution for nonzero rates r:

        Y(t) = exp(-r t) (y0 - m) + m + exp(-r t) (s / sqrt(2|r|)) W(t)

    where t is measured from tspan[0] and W is the Wiener path integrated on
    the clock |exp(2 r t) - 1|. Row 0 is set to y0 exactly.
    With w=None only the deterministic part is evaluated.

    Shared (length-1) coefficients broadcast as one column so exp(-r t) is
    evaluated once per time point.
    """
    r = theta.values
    ett = np.exp(-(tspan - tspan[0])[:, None] * r)
    y = ett * (y0 - mu.values) + mu.values
    if w is not None:
        y = y + ett * (sigma.values / np.sqrt(2 * np.abs(r))) * w
    y[0] = y0
    return y


def driftless_solution(
    lt: int, y0: np.ndarray, sigma: Coefficient, w: Optional[np.ndarray]
) -> np.ndarray:
    """Y(t) = y0 + s W(t); exactly y0 on every row when w is None."""
    if w is None:
        return np.repeat(y0[None, :], lt, axis=0)
    return y0 + sigma.values * w


def _ou_all(tspan, y0, theta, mu, sigma, w, mask):
    return ou_solution(tspan, y0, theta, mu, sigma, w)


def _ou_none(tspan, y0, theta, mu, sigma, w, mask):
    return driftless_solution(tspan.size, y0, sigma, w)


def _ou_mixed(tspan, y0, theta, mu, sigma, w, mask):
    # split columns so no division by a zero rate is ever evaluated
    y = np.empty((tspan.size, y0.size), dtype=y0.dtype)
    for cols, branch in ((mask, _ou_all), (~mask, _ou_none)):
        y[:, cols] = branch(
            tspan,
            y0[cols],
            theta.take(cols),
            mu.take(cols),
            sigma.take(cols),
            None if w is None else w[:, cols],
            mask[cols],
        )
    return y


_OU_BRANCHES: Dict[str, Callable[..., np.ndarray]] = {
    "all": _ou_all,
    "none": _ou_none,
    "mixed": _ou_mixed,
}


def evaluate_ou(
    tspan: np.ndarray,
    y0: np.ndarray,
    theta: Coefficient,
    mu: Coefficient,
    sigma: Coefficient,
    w: Optional[np.ndarray],
) -> np.ndarray:
    """Dispatch on which dimensions have a nonzero mean-reversion rate."""
    mask = theta.mask(y0.size)
    state = mask_state(mask)
    LOGGER.debug(
        "OU branch: rates=%s, scalar theta/mu/sigma=%s/%s/%s, noise=%s",
        state,
        theta.is_scalar,
        mu.is_scalar,
        sigma.is_scalar,
        w is not None,
    )
    return _OU_BRANCHES[state](tspan, y0, theta, mu, sigma, w, mask)


# ============================================================
# Brownian motion with drift
# ============================================================


def bm_deterministic(tspan: np.ndarray, y0: np.ndarray, mu: Coefficient) -> np.ndarray:
    """Y(t) = y0 + mu (t - t0); exactly y0 on every row when mu is all zero."""
    if not np.any(mu.values):
        return np.repeat(y0[None, :], tspan.size, axis=0)
    return y0 + (tspan - tspan[0])[:, None] * mu.values


def bm_recurrence(
    y0: np.ndarray,
    mu: Coefficient,
    sigma: Coefficient,
    h: Step,
    tdir: int,
    dw: np.ndarray,
) -> np.ndarray:
    """
    Y[i+1] = Y[i] + mu dt[i] + s dW[i], summed along time.

    dt carries the grid direction; h is a scalar for a constant step.
    """
    dt = tdir * h if np.ndim(h) == 0 else (tdir * h)[:, None]
    y = np.empty((dw.shape[0] + 1, y0.size), dtype=y0.dtype)
    y[0] = y0
    y[1:] = mu.values * dt + sigma.values * dw
    return np.cumsum(y, axis=0)
