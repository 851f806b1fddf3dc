import json
from pathlib import Path

import pytest

from car import Car, CarConfig, Mode
from simulation import ScheduledCall, Simulation, build_simulation, run_simulation

SCENARIO_DIR = Path(__file__).resolve().parent.parent / "scenarios"


@pytest.fixture
def simulation():
    calls = [ScheduledCall(time=0, floor=3), ScheduledCall(time=0, floor=1)]
    return Simulation(car=Car(0), scheduled_calls=calls, door_dwell_ticks=1)


def test_serves_calls_in_order_with_dwell(simulation):
    arrivals = []
    simulation.on_event("arrival", arrivals.append)

    simulation.run(9)

    assert [(a["floor"], a["time"], a["wait"]) for a in arrivals] == [(3, 2, 2), (1, 6, 6)]
    status = simulation.car.status()
    assert status.position == 1
    assert status.mode is Mode.IDLE
    assert simulation.current_time == 9


def test_doors_stay_open_for_dwell_ticks(simulation):
    simulation.run(3)
    assert simulation.car.mode is Mode.DOORS_OPEN
    simulation.step()
    assert simulation.car.mode is Mode.DOORS_OPEN
    simulation.step()
    assert simulation.car.mode is Mode.MOVING_DOWN


def test_metrics(simulation):
    simulation.run(9)
    snapshot = simulation.metrics.snapshot(simulation.current_time)
    assert snapshot.calls_served == 2
    assert snapshot.average_wait == pytest.approx(4.0)
    assert snapshot.wait_p95 == pytest.approx(5.8)
    assert snapshot.floors_travelled == 5
    assert snapshot.rejected_calls == 0


def test_invalid_call_is_rejected_not_fatal():
    rejected = []
    sim = Simulation(car=Car(0), scheduled_calls=[ScheduledCall(time=1, floor=9)])
    sim.on_event("rejected", rejected.append)

    sim.run(3)

    assert rejected == [{"floor": 9, "time": 1, "error": "invalid_floor"}]
    assert sim.metrics.rejected_calls == 1
    assert sim.car.mode is Mode.IDLE


def test_duplicate_request_keeps_first_wait_start():
    sim = Simulation(car=Car(0), door_dwell_ticks=0)
    assert sim.request_floor(2)
    sim.step()
    assert sim.request_floor(2)
    sim.step()
    assert sim.metrics.wait_times == [1]


def test_request_floor_reports_rejection():
    sim = Simulation(car=Car(0))
    assert sim.request_floor(-1) is False


def test_fractional_scheduled_call_is_rejected():
    sim = build_simulation({"calls": [{"time": 0, "floor": 2.5}], "door_dwell_ticks": 0})
    sim.run(10)
    assert sim.metrics.rejected_calls == 1
    assert sim.car.status().pending_calls == ()
    assert sim.car.mode is Mode.IDLE


def test_idle_car_without_calls_stays_put():
    sim = Simulation(car=Car(4))
    sim.run(5)
    assert sim.car.status().position == 4
    assert sim.car.mode is Mode.IDLE
    assert sim.metrics.floors_travelled == 0


def test_metrics_hook_interval():
    emitted = []
    sim = Simulation(car=Car(0), metrics_hook_interval=2)
    sim.on_event("metrics", emitted.append)
    sim.run(5)
    assert [payload["metrics"].time_step for payload in emitted] == [0, 2, 4]
    assert emitted[0]["car"] == {"position": 0, "mode": "idle", "pending_calls": []}


def test_build_simulation_from_config():
    config = {
        "floors": {"min_floor": -1, "max_floor": 8},
        "start_floor": 8,
        "door_dwell_ticks": 2,
        "metrics_hook_interval": 5,
        "calls": [{"time": 3, "floor": -1}],
    }
    sim = build_simulation(config)
    assert sim.car.config == CarConfig(min_floor=-1, max_floor=8)
    assert sim.car.position == 8
    assert sim.door_dwell_ticks == 2
    assert sim.scheduled_calls == [ScheduledCall(time=3, floor=-1)]


def test_build_simulation_defaults_start_to_lowest_floor():
    sim = build_simulation({"floors": {"min_floor": 2, "max_floor": 4}})
    assert sim.car.position == 2


def test_build_simulation_rejects_unknown_floor_keys():
    with pytest.raises(TypeError):
        build_simulation({"floors": {"top": 9}})


def test_run_simulation_collects_snapshots():
    config = {"duration": 10, "metrics_hook_interval": 5, "calls": [{"time": 0, "floor": 2}]}
    sim = build_simulation(config)
    snapshots = run_simulation(sim, config)
    assert [s["time_step"] for s in snapshots] == [5, 10]
    assert snapshots[-1]["calls_served"] == 1


def test_bundled_scenario_runs():
    config = json.loads((SCENARIO_DIR / "fifo_tour.json").read_text())
    sim = build_simulation(config)
    arrivals = []
    sim.on_event("arrival", arrivals.append)
    run_simulation(sim, config)
    assert [a["floor"] for a in arrivals] == [3, 1, 4]
    assert sim.metrics.rejected_calls == 1
