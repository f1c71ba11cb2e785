"""
Delayed (SimPy) execution: parity with immediate mode, suspension between
announcement and commit, door timeouts, re-entry.
"""

import time

import pytest
import simpy

from simulator.core.door import Door
from simulator.errors import (
    AlreadyRunningError,
    InvalidStateError,
    OperationTimeoutError,
    ValidationError,
)
from simulator.events import TRAVELING
from simulator.infrastructure.message_broker import MessageBroker
from simulator.infrastructure.realtime_env import RealtimeEnvironment


def run_in(env, controller):
    process = controller.launch(env)
    env.run(until=process)
    return controller.get_results()


@pytest.mark.parametrize("variant", ["standard", "express"])
@pytest.mark.parametrize("start, destinations", [(10, [9, 11, 13]), (0, [0, 3, -3]), (5, [1])])
def test_delayed_matches_immediate(make_controller, variant, start, destinations):
    delayed = run_in(simpy.Environment(), make_controller(start, destinations, variant))
    immediate = make_controller(start, destinations, variant).compute_immediate()

    assert delayed.route == immediate.route
    assert delayed.total_time == immediate.total_time
    assert delayed.history == immediate.history


def test_simulation_clock_matches_elapsed_time(make_controller):
    controller = make_controller()
    clock_at_event = []
    env = simpy.Environment()
    controller.subscribe(lambda event: clock_at_event.append((env.now, event.timestamp)))

    result = run_in(env, controller)

    assert env.now == result.total_time == 76
    assert all(now == timestamp for now, timestamp in clock_at_event)


def test_start_with_realtime_environment_no_delay(make_controller):
    controller = make_controller()
    received = []

    result = controller.start(speed_factor=0, on_update=received.append)

    assert result.total_time == 76
    assert result.route == [10, 9, 11, 13]
    assert received == result.history
    assert controller.status == "complete"


def test_start_paces_against_wall_clock(make_controller):
    controller = make_controller(0, [1])  # 2 + 10 + 8 = 20 time-units

    started = time.monotonic()
    result = controller.start(speed_factor=400.0)
    elapsed = time.monotonic() - started

    assert result.total_time == 20
    assert elapsed >= 20 / 400.0 * 0.9


def test_announcements_follow_the_wall_clock(make_controller):
    speed = 100.0
    controller = make_controller(10, [9])
    announced = []

    started = time.monotonic()
    controller.start(
        speed_factor=speed,
        on_update=lambda event: announced.append((event, time.monotonic() - started)),
    )

    # No event may be seen before its simulation time has passed in real time
    for event, wall in announced:
        assert wall >= event.timestamp / speed - 1e-3

    walls = {event.type: wall for event, wall in announced if event.type != "doors_closing"}
    travel_gap = walls["doors_opening"] - walls["traveling"]
    assert travel_gap >= 10 / speed * 0.5


def test_realtime_environment_does_not_run_ahead():
    env = RealtimeEnvironment(speed_factor=200.0)
    seen = []

    def ticker():
        for _ in range(3):
            yield env.timeout(4)
            seen.append(time.monotonic() - env.real_start_time)

    env.run(until=env.process(ticker()))

    assert seen[0] >= 4 / 200.0 - 1e-3
    assert seen[-1] >= 12 / 200.0 - 1e-3


def test_pending_door_deadlines_outlive_the_run(make_controller):
    controller = make_controller()
    env = simpy.Environment()
    process = controller.launch(env)

    env.run(until=process)
    assert env.now == 76

    # Deadline of the last door close (started at 74) is still queued
    env.run()
    assert env.now == 74 + 15
    assert controller.get_results().total_time == 76


def test_announcement_precedes_commit(make_controller):
    controller = make_controller(10, [9])
    env = simpy.Environment()
    process = controller.launch(env)

    # Travel 10 -> 9 is announced at t=2 and commits at t=12
    env.run(until=5)
    assert controller.history[-1].type == TRAVELING
    assert controller.is_moving is True
    assert controller.status == "traveling"
    assert controller.current_floor == 10
    assert controller.route == [10]
    assert controller.total_time == 2

    env.run(until=process)
    assert controller.route == [10, 9]
    assert controller.total_time == 20


def test_broker_streams_steps_and_commits(make_controller):
    env = simpy.Environment()
    broker = MessageBroker(env)
    controller = make_controller(10, [9], broker=broker)
    steps, commits = [], []

    def consume(topic, sink):
        while True:
            message = yield broker.get(topic)
            sink.append((env.now, message))

    env.process(consume(controller.steps_topic, steps))
    env.process(consume(controller.status_topic, commits))
    run_in(env, controller)

    assert [now for now, _ in steps] == [0, 2, 12, 14, 18, 20]
    assert [event.type for _, event in steps][-1] == "complete"
    assert [now for now, _ in commits] == [2, 12, 14, 18, 20]
    assert all(now == message["timestamp"] for now, message in commits)
    assert commits[1][1]["floor"] == 9


def test_jammed_door_times_out(make_controller):
    door = Door("Jammed_Door", verbose=False)
    door.jam(20)  # close takes 22 > 15
    controller = make_controller(door=door)

    with pytest.raises(OperationTimeoutError, match="Door closing operation timed out"):
        controller.start(speed_factor=0)

    assert controller.status == "error"
    assert controller.is_running is False
    assert controller.total_time == 0
    assert controller.doors_open is True
    assert len(controller.history) == 1
    assert door.get_state() == "JAMMED"


def test_timeout_fires_at_operation_timeout(make_controller):
    door = Door(verbose=False)
    controller = make_controller(10, [9], door=door)
    env = simpy.Environment()
    process = controller.launch(env)

    # Jam after the initial close; the door opening at floor 9 starts at t=12
    env.run(until=5)
    door.jam(100)

    with pytest.raises(OperationTimeoutError, match="Door opening operation timed out"):
        env.run(until=process)
    assert env.now == 12 + 15
    assert controller.route == [10, 9]
    assert controller.status == "error"


def test_restart_after_failure(make_controller):
    door = Door(verbose=False)
    door.jam(30)
    controller = make_controller(door=door)
    with pytest.raises(OperationTimeoutError):
        controller.start(speed_factor=0)

    door.release()
    result = controller.start(speed_factor=0)

    assert result.total_time == 76
    assert result.route == [10, 9, 11, 13]
    assert controller.status == "complete"


def test_immediate_ignores_door_fault(make_controller):
    door = Door(verbose=False)
    door.jam(30)
    result = make_controller(door=door).compute_immediate()
    assert result.total_time == 76


def test_slow_travel_is_not_timed_out(make_controller):
    # 3 floors at 10 per floor is longer than the 15 unit door timeout
    result = run_in(simpy.Environment(), make_controller(0, [3]))
    assert result.total_time == 2 + 30 + 8


def test_launch_rejects_reentry(make_controller):
    controller = make_controller()
    env = simpy.Environment()
    process = controller.launch(env)

    with pytest.raises(AlreadyRunningError, match="Elevator is already running"):
        controller.launch(env)
    with pytest.raises(AlreadyRunningError):
        controller.start(env=env)

    env.run(until=process)
    assert controller.get_results().total_time == 76


def test_start_after_immediate_and_back(make_controller):
    controller = make_controller()
    immediate = controller.compute_immediate()
    delayed = controller.start(env=simpy.Environment())
    again = controller.compute_immediate()

    assert immediate == delayed == again


# --- Phase preconditions ---

@pytest.fixture
def bound_controller(make_controller):
    controller = make_controller()
    env = simpy.Environment()
    controller.bind(env)
    return controller, env


def test_travel_with_doors_open_fails(bound_controller):
    controller, env = bound_controller
    controller.doors_open = True

    with pytest.raises(InvalidStateError, match="Cannot move with doors open"):
        env.run(until=env.process(controller.travel(12)))
    assert controller.history == []
    assert controller.current_floor == 10


def test_travel_to_non_integer_floor_fails(bound_controller):
    controller, env = bound_controller

    with pytest.raises(ValidationError, match="Target floor must be an integer"):
        env.run(until=env.process(controller.travel(1.5)))


def test_close_closed_doors_fails(bound_controller):
    controller, env = bound_controller

    with pytest.raises(InvalidStateError, match="Doors are already closed"):
        env.run(until=env.process(controller.close_doors()))


def test_open_doors_while_moving_fails(bound_controller):
    controller, env = bound_controller
    controller.is_moving = True

    with pytest.raises(InvalidStateError, match="Cannot open doors while moving"):
        env.run(until=env.process(controller.open_doors()))


def test_load_passengers_with_closed_doors_fails(bound_controller):
    controller, env = bound_controller

    with pytest.raises(InvalidStateError, match="Doors must be open"):
        env.run(until=env.process(controller.load_passengers()))


def test_single_phases_advance_time(bound_controller):
    controller, env = bound_controller

    env.run(until=env.process(controller.travel(12)))
    env.run(until=env.process(controller.open_doors()))
    env.run(until=env.process(controller.load_passengers()))

    assert controller.current_floor == 12
    assert controller.doors_open is True
    assert controller.total_time == 20 + 2 + 4


# --- Environment ---

def test_realtime_environment_speed():
    env = RealtimeEnvironment(speed_factor=2.0)
    assert env.get_speed() == 2.0
    env.set_speed(0)
    assert env.get_speed() == 0

    with pytest.raises(ValueError):
        RealtimeEnvironment(speed_factor=-1)
    with pytest.raises(ValueError):
        env.set_speed(-0.5)


def test_door_jam_requires_positive_delay():
    door = Door(verbose=False)
    with pytest.raises(ValueError):
        door.jam(0)
    door.jam(1.5)
    assert door.is_jammed
    door.release()
    assert not door.is_jammed
