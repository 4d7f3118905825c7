# src/exact_sde/schemas.py
from __future__ import annotations

from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field


class SDEOptions(BaseModel):
    """
    Options shared by the exact SDE solvers.

    rand_seed: seed for a fresh numpy Generator (ignored when rand_fn is set)
    rand_fn: custom generator, rand_fn(count, width) -> (count, width) float array
    events_fn: events_fn(t, y, *args) -> (value, is_terminal, direction)
    diagonal_noise: only diagonal (uncorrelated) noise is supported
    stratonovich: carried through, both processes use additive noise
    const_step: force or disable the constant step-size path (None = detect)
    """

    model_config = ConfigDict(extra="forbid")

    rand_seed: Optional[int] = Field(default=None, ge=0)
    rand_fn: Optional[Callable[..., Any]] = None
    events_fn: Optional[Callable[..., Any]] = None
    diagonal_noise: bool = True
    stratonovich: bool = False
    const_step: Optional[bool] = None
    const_step_rtol: float = Field(default=1e-12, ge=0.0)


class SimulationConfig(BaseModel):
    """
    File-loadable subset of SDEOptions (callables cannot live in YAML/JSON).
    """

    model_config = ConfigDict(extra="forbid")

    name: str = "default_run"
    rand_seed: Optional[int] = Field(default=None, ge=0)
    diagonal_noise: bool = True
    stratonovich: bool = False
    const_step: Optional[bool] = None

    def to_options(self, **callables: Any) -> SDEOptions:
        data = self.model_dump(exclude={"name"})
        data.update(callables)
        return SDEOptions.model_validate(data)
