"""Build and run simulations from JSON scenario configurations."""
from __future__ import annotations

from dataclasses import asdict
from typing import Dict, List

from car import Car, CarConfig

from .simulation import ScheduledCall, Simulation


def build_simulation(config: Dict) -> Simulation:
    floors_cfg = config.get("floors", {})
    car_config = CarConfig(**floors_cfg)
    car = Car(config.get("start_floor", car_config.min_floor), car_config)

    calls = [
        ScheduledCall(time=c.get("time", 0), floor=c["floor"])
        for c in config.get("calls", [])
    ]

    return Simulation(
        car=car,
        scheduled_calls=calls,
        door_dwell_ticks=config.get("door_dwell_ticks", 1),
        metrics_hook_interval=config.get("metrics_hook_interval", 10),
    )


def run_simulation(simulation: Simulation, config: Dict) -> List[Dict]:
    duration = config.get("duration", 60)
    snapshots: List[Dict] = []

    for _ in range(duration):
        simulation.step()
        if simulation.current_time % simulation.metrics_hook_interval == 0:
            metrics = asdict(simulation.metrics.snapshot(simulation.current_time))
            snapshots.append(metrics)
    return snapshots
