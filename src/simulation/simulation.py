from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List

from car import Car, CarError, Mode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduledCall:
    """A floor request injected when the simulation clock reaches ``time``."""

    time: int
    floor: int


@dataclass
class MetricsSnapshot:
    time_step: int
    calls_served: int
    average_wait: float
    wait_p95: float
    floors_travelled: int
    rejected_calls: int


class MetricsTracker:
    def __init__(self) -> None:
        self.wait_times: List[int] = []
        self.floors_travelled: int = 0
        self.rejected_calls: int = 0

    def record_wait_time(self, wait: int) -> None:
        self.wait_times.append(wait)

    def record_travel(self, floors: int) -> None:
        self.floors_travelled += floors

    def record_rejection(self) -> None:
        self.rejected_calls += 1

    def _average(self, values: List[int]) -> float:
        if not values:
            return 0.0
        return sum(values) / len(values)

    def _percentile(self, values: List[int], percentile: float) -> float:
        if not values:
            return 0.0
        sorted_vals = sorted(values)
        k = (len(sorted_vals) - 1) * percentile
        f = math.floor(k)
        c = math.ceil(k)
        if f == c:
            return float(sorted_vals[int(k)])
        d0 = sorted_vals[int(f)] * (c - k)
        d1 = sorted_vals[int(c)] * (k - f)
        return float(d0 + d1)

    def snapshot(self, time_step: int) -> MetricsSnapshot:
        return MetricsSnapshot(
            time_step=time_step,
            calls_served=len(self.wait_times),
            average_wait=self._average(self.wait_times),
            wait_p95=self._percentile(self.wait_times, 0.95),
            floors_travelled=self.floors_travelled,
            rejected_calls=self.rejected_calls,
        )


class Simulation:
    """Discrete-tick driver around a single :class:`Car`.

    Each tick injects the calls scheduled for it, then either lets the doors
    dwell, closes them once the dwell runs out, or moves the car one floor.
    """

    def __init__(
        self,
        car: Car,
        scheduled_calls: Iterable[ScheduledCall] = (),
        door_dwell_ticks: int = 1,
        metrics_hook_interval: int = 1,
    ) -> None:
        self.car = car
        self.scheduled_calls = sorted(scheduled_calls, key=lambda call: call.time)
        self.door_dwell_ticks = max(0, door_dwell_ticks)
        self.current_time: int = 0
        self.metrics = MetricsTracker()
        self.event_hooks: Dict[str, List[Callable[[object], None]]] = {}
        self.metrics_hook_interval = max(1, metrics_hook_interval)
        self._requested_at: Dict[int, int] = {}
        self._door_timer: int = 0
        self._next_call = 0

    def run(self, duration: int) -> None:
        for _ in range(duration):
            self.step()

    def step(self) -> None:
        self._inject_scheduled_calls()
        self._advance_car()

        if self.current_time % self.metrics_hook_interval == 0:
            self._emit_metrics()

        self.current_time += 1

    def request_floor(self, floor: int) -> bool:
        """Forward a call to the car, returning False when it was rejected."""
        pending_before = self.car.pending_calls
        try:
            self.car.request_floor(floor)
        except CarError as exc:
            logger.warning("Rejected call for floor %s at t=%s: %s", floor, self.current_time, exc)
            self.metrics.record_rejection()
            self._emit("rejected", {"floor": floor, "time": self.current_time, "error": exc.code})
            return False
        if self.car.pending_calls != pending_before:
            self._requested_at[floor] = self.current_time
        return True

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def _inject_scheduled_calls(self) -> None:
        while (
            self._next_call < len(self.scheduled_calls)
            and self.scheduled_calls[self._next_call].time <= self.current_time
        ):
            self.request_floor(self.scheduled_calls[self._next_call].floor)
            self._next_call += 1

    def _advance_car(self) -> None:
        if self.car.mode is Mode.DOORS_OPEN:
            if self._door_timer > 0:
                self._door_timer -= 1
                return
            self.car.close_doors()
            return

        if not self.car.pending_calls:
            return

        target = self.car.pending_calls[0]
        before = self.car.position
        self.car.step()
        self.metrics.record_travel(abs(self.car.position - before))

        if self.car.mode is Mode.DOORS_OPEN:
            self._door_timer = self.door_dwell_ticks
            wait = self.current_time - self._requested_at.pop(target, self.current_time)
            self.metrics.record_wait_time(wait)
            self._emit("arrival", {"floor": target, "time": self.current_time, "wait": wait})

    def _emit_metrics(self) -> None:
        snapshot = self.metrics.snapshot(self.current_time)
        self._emit("metrics", {"metrics": snapshot, "car": self.car.status().as_dict()})

    def _emit(self, event: str, payload: object) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)
