"""Tick-driven simulation around a single LiftCar car."""

from .scenario import build_simulation, run_simulation
from .simulation import MetricsSnapshot, MetricsTracker, ScheduledCall, Simulation

__all__ = [
    "MetricsSnapshot",
    "MetricsTracker",
    "ScheduledCall",
    "Simulation",
    "build_simulation",
    "run_simulation",
]
