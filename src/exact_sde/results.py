# src/exact_sde/results.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from exact_sde.arguments import SDEArguments
from exact_sde.events import EventRecord, scan_events


@dataclass(frozen=True)
class PathResult:
    """
    Output of an exact solver run.

    t : times of the returned rows (shorter than tspan after a terminal event)
    y : trajectory, one row per time, y[0] is exactly y0
    w : integrated Wiener increments used by the solver, if requested
    events : zero-crossings found, in order, if requested
    """

    t: np.ndarray
    y: np.ndarray
    w: Optional[np.ndarray] = None
    events: Optional[Tuple[EventRecord, ...]] = None

    @property
    def te(self) -> np.ndarray:
        return np.array([e.time for e in self.events or ()], dtype=self.y.dtype)

    @property
    def ye(self) -> np.ndarray:
        states = [e.state for e in self.events or ()]
        if not states:
            return np.empty((0, self.y.shape[1]), dtype=self.y.dtype)
        return np.vstack(states)

    @property
    def ie(self) -> np.ndarray:
        return np.array([e.index for e in self.events or ()], dtype=int)

    def to_frame(self) -> pd.DataFrame:
        """Trajectory (and noise path, when present) indexed by time."""
        n = self.y.shape[1]
        df = pd.DataFrame(
            self.y,
            index=pd.Index(self.t, name="t"),
            columns=[f"y{i}" for i in range(n)],
        )
        if self.w is not None:
            for i in range(n):
                df[f"w{i}"] = self.w[:, i]
        return df


def assemble_result(
    arguments: SDEArguments,
    y: np.ndarray,
    w: Optional[np.ndarray],
    return_noise: bool,
    return_events: bool,
) -> PathResult:
    """
    Run the event scan (if an events_fn is set) and slice the outputs.

    w=None with return_noise means no variates were drawn; the noise path is
    then all zeros.
    """
    if return_noise and w is None:
        w = np.zeros((arguments.lt, arguments.n), dtype=y.dtype)

    stop, records = arguments.lt, ()
    if arguments.events_fn is not None:
        stop, records = scan_events(
            arguments.tspan,
            y,
            arguments.events_fn,
            arguments.events_value,
            arguments.args,
        )

    return PathResult(
        t=arguments.tspan[:stop],
        y=y[:stop],
        w=w[:stop] if return_noise else None,
        events=records if return_events else None,
    )
