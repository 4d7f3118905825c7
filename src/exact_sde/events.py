# src/exact_sde/events.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Tuple

import numpy as np

from exact_sde.errors import InvalidParameter

LOGGER = logging.getLogger(__name__)

EventsFn = Callable[..., Any]


@dataclass(frozen=True)
class EventRecord:
    """
    One detected zero-crossing.

    time  : sample time at which the sign change was observed
    state : copy of the state row at that time
    index : which component of the events function crossed zero
    step  : row of the trajectory the event was found at
    """

    time: float
    state: np.ndarray
    index: int
    step: int


@dataclass(frozen=True)
class Crossing:
    records: Tuple[EventRecord, ...]
    value: np.ndarray
    terminal: bool


def _as_flags(x: Any, size: int, what: str) -> np.ndarray:
    arr = np.asarray(x if x is not None else [], dtype=float).reshape(-1)
    if arr.size == 0:
        return np.zeros(size)
    if arr.size == 1:
        return np.full(size, arr[0])
    if arr.size != size:
        raise InvalidParameter(
            f"events_fn {what} must be a scalar or have the same length as value "
            f"(got {arr.size}, expected {size})."
        )
    return arr


def evaluate_events(
    events_fn: EventsFn, t: float, y: np.ndarray, args: Tuple[Any, ...] = ()
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Call events_fn and normalize (value, is_terminal, direction)."""
    out = events_fn(t, y, *args)
    if not isinstance(out, (tuple, list)) or len(out) != 3:
        raise InvalidParameter(
            "events_fn must return three outputs: (value, is_terminal, direction)."
        )
    value, is_terminal, direction = out

    value = np.asarray(value, dtype=float).reshape(-1)
    if value.size == 0:
        raise InvalidParameter("events_fn value must be a non-empty vector.")
    is_terminal = _as_flags(is_terminal, value.size, "is_terminal") != 0
    direction = np.sign(_as_flags(direction, value.size, "direction"))
    return value, is_terminal, direction


def initial_value(
    events_fn: EventsFn, t0: float, y0: np.ndarray, args: Tuple[Any, ...] = ()
) -> np.ndarray:
    value, _, _ = evaluate_events(events_fn, t0, y0, args)
    return value


def zero_crossings(
    events_fn: EventsFn,
    t: float,
    y: np.ndarray,
    previous: np.ndarray,
    args: Tuple[Any, ...] = (),
    step: int = 0,
) -> Crossing:
    """
    Detect components of events_fn whose sign changed since previous.

    A rising crossing goes from < 0 to >= 0, a falling one from > 0 to <= 0.
    direction 1 keeps rising crossings only, -1 falling only, 0 both.
    """
    value, is_terminal, direction = evaluate_events(events_fn, t, y, args)
    if value.shape != previous.shape:
        raise InvalidParameter(
            "events_fn must return a value vector of constant length "
            f"(got {value.size}, expected {previous.size})."
        )

    rising = (previous < 0) & (value >= 0) & (direction >= 0)
    falling = (previous > 0) & (value <= 0) & (direction <= 0)
    found = np.flatnonzero(rising | falling)

    records = tuple(
        EventRecord(
            time=float(t), state=np.array(y, copy=True), index=int(i), step=step
        )
        for i in found
    )
    terminal = bool(np.any(is_terminal[found]))
    return Crossing(records=records, value=value, terminal=terminal)


def scan_events(
    tspan: np.ndarray,
    y: np.ndarray,
    events_fn: EventsFn,
    value: np.ndarray,
    args: Tuple[Any, ...] = (),
) -> Tuple[int, Tuple[EventRecord, ...]]:
    """
    Scan a computed trajectory for zero-crossings.

    Returns the number of rows to keep (everything up to and including the
    first terminal event) and the events found up to there, in order.
    """
    records: List[EventRecord] = []
    for i in range(1, tspan.size):
        crossing = zero_crossings(events_fn, tspan[i], y[i], value, args, step=i)
        value = crossing.value
        records.extend(crossing.records)
        if crossing.terminal:
            LOGGER.info(
                "Terminal event at t=%s (step %d of %d), truncating path.",
                tspan[i],
                i,
                tspan.size - 1,
            )
            return i + 1, tuple(records)
    return tspan.size, tuple(records)