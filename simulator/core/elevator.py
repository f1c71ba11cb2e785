import simpy
from numbers import Integral
from typing import Callable, Iterable, List, Optional, Union

from config.variants import VariantConfig, STANDARD_VARIANT, get_variant
from .entity import Entity
from .door import Door
from ..errors import (
    AlreadyRunningError,
    InvalidStateError,
    OperationTimeoutError,
    ValidationError,
)
from ..events import (
    COMPLETE,
    DOORS_CLOSING,
    DOORS_OPENING,
    PASSENGER_TRANSFER,
    TRAVELING,
    STATUS_COMPLETE,
    STATUS_DOORS_CLOSING,
    STATUS_DOORS_OPENING,
    STATUS_ERROR,
    STATUS_IDLE,
    STATUS_PASSENGER_TRANSFER,
    STATUS_RUNNING,
    SimulationResult,
    StepEvent,
)
from ..infrastructure.message_broker import MessageBroker
from ..infrastructure.realtime_env import RealtimeEnvironment

UpdateCallback = Callable[[StepEvent], None]


def _is_floor(value) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


class ElevatorController(Entity):
    """
    Single elevator car visiting a fixed list of destination floors.

    A run closes the doors at the start floor, then for every destination
    travels, opens the doors, transfers passengers and closes the doors
    again. Each phase is split into a begin step (precondition check, status
    change, step event) and a finish step (state commit, time accounting):

    - start() / launch() run the phases as SimPy processes, waiting out each
      duration in the environment. Door phases race the operation timeout.
    - compute_immediate() applies begin and finish back to back with no
      waiting, producing the same events, route and total time.

    Timing comes from the injected VariantConfig; the controller never
    branches on the variant.
    """

    def __init__(self, start_floor: int, destination_floors: Iterable[int],
                 variant: Union[VariantConfig, str] = STANDARD_VARIANT,
                 name: str = "Elevator_1", broker: Optional[MessageBroker] = None,
                 door: Optional[Door] = None, verbose: bool = True):
        if not _is_floor(start_floor):
            raise ValidationError("Start floor must be an integer")

        if isinstance(destination_floors, (str, bytes)) or not isinstance(destination_floors, Iterable):
            raise ValidationError("Destination floors must be a non-empty array")
        destinations = list(destination_floors)
        if not destinations:
            raise ValidationError("Destination floors must be a non-empty array")
        if not all(_is_floor(floor) for floor in destinations):
            raise ValidationError("All destination floors must be integers")

        if isinstance(variant, str):
            try:
                variant = get_variant(variant)
            except ValueError as error:
                raise ValidationError(str(error)) from None

        super().__init__(name, verbose)

        self.variant = variant
        self.broker = broker
        self.door = door if door is not None else Door(f"{self.name}_Door", verbose=verbose)

        self.start_floor = int(start_floor)
        self.destination_queue = tuple(int(floor) for floor in destinations)

        self.steps_topic = f"elevator/{self.name}/steps"
        self.status_topic = f"elevator/{self.name}/status"

        self.is_running = False
        self._listener: Optional[UpdateCallback] = None

        self._restore_initial_state()
        self.set_state(STATUS_IDLE)

    # --- State helpers ---

    def bind(self, env: simpy.Environment):
        super().bind(env)
        self.door.bind(env)

    @property
    def clock(self) -> float:
        return self.total_time

    @property
    def status(self) -> str:
        return self.state

    def _restore_initial_state(self):
        self.current_floor = self.start_floor
        self.route: List[int] = [self.start_floor]
        self.total_time = 0
        self.history: List[StepEvent] = []
        self.doors_open = False
        self.is_moving = False

    def reset(self):
        """
        Restore the original start floor and clear everything a run derives.

        Route, elapsed time, history, door and motion flags are reset and the
        status returns to idle. The destination queue and subscriber are kept.

        Raises:
            AlreadyRunningError: If a run is in progress
        """
        if self.is_running:
            raise AlreadyRunningError("Cannot reset while the elevator is running")
        self._restore_initial_state()
        self.door.reset()
        self.set_state(STATUS_IDLE)

    def subscribe(self, callback: Optional[UpdateCallback]):
        """Register the step event callback (replaces any previous one; None removes it)"""
        self._listener = callback

    def _emit(self, step_type: str, **data) -> StepEvent:
        event = StepEvent(type=step_type, floor=self.current_floor, timestamp=self.total_time, **data)
        self.history.append(event)
        if self.broker is not None:
            self.broker.put(self.steps_topic, event)
        if self._listener is not None:
            self._listener(event)
        return event

    def _report_status(self):
        if self.broker is None:
            return
        self.broker.put(self.status_topic, {
            "timestamp": self.total_time,
            "elevator_name": self.name,
            "floor": self.current_floor,
            "status": self.state,
            "doors_open": self.doors_open,
            "is_moving": self.is_moving,
        })

    def _advance(self, duration: float):
        self.total_time += duration
        self._report_status()

    # --- Phase begin/finish steps ---

    def _begin_close_doors(self) -> float:
        if not self.doors_open:
            raise InvalidStateError("Doors are already closed")
        duration = self.variant.door_close_time
        self.set_state(STATUS_DOORS_CLOSING)
        self._emit(DOORS_CLOSING, duration=duration)
        self.log(f"Doors closing at floor {self.current_floor} ({duration} sec)")
        return duration

    def _finish_close_doors(self, duration: float):
        self.doors_open = False
        self._advance(duration)

    def _begin_open_doors(self) -> float:
        if self.is_moving:
            raise InvalidStateError("Cannot open doors while moving")
        duration = self.variant.door_open_time
        self.set_state(STATUS_DOORS_OPENING)
        self._emit(DOORS_OPENING, duration=duration)
        self.log(f"Doors opening at floor {self.current_floor} ({duration} sec)")
        return duration

    def _finish_open_doors(self, duration: float):
        self.doors_open = True
        self._advance(duration)

    def _begin_travel(self, target_floor: int) -> float:
        if self.doors_open:
            raise InvalidStateError("Cannot move with doors open")
        if not _is_floor(target_floor):
            raise ValidationError("Target floor must be an integer")
        duration = self.variant.travel_time(self.current_floor, target_floor)
        self.is_moving = True
        self.set_state(self.variant.traveling_label)
        self._emit(TRAVELING, from_floor=self.current_floor, to_floor=target_floor, duration=duration)
        self.log(f"Heading from floor {self.current_floor} to floor {target_floor} ({duration} sec)")
        return duration

    def _finish_travel(self, target_floor: int, duration: float):
        self.current_floor = target_floor
        self.route.append(target_floor)
        self.is_moving = False
        self._advance(duration)

    def _begin_load_passengers(self) -> float:
        if not self.doors_open:
            raise InvalidStateError("Doors must be open for passenger transfer")
        duration = self.variant.passenger_transfer_time
        self.set_state(STATUS_PASSENGER_TRANSFER)
        self._emit(PASSENGER_TRANSFER, duration=duration)
        self.log(f"Passenger transfer at floor {self.current_floor} ({duration} sec)")
        return duration

    def _finish_load_passengers(self, duration: float):
        self._advance(duration)

    # --- SimPy phase processes ---

    def _wait_for_door(self, opening: bool, duration: float):
        """Wait for the door mechanism, failing if the operation timeout fires first"""
        actuation = self.door.start_actuation(opening, duration)
        deadline = self.env.timeout(self.variant.operation_timeout)
        outcome = yield actuation | deadline
        if actuation not in outcome:
            self.door.abort_actuation("operation timeout")
            action = "opening" if opening else "closing"
            raise OperationTimeoutError(f"Door {action} operation timed out - elevator malfunction!")

    def close_doors(self):
        """SimPy process: close the doors"""
        duration = self._begin_close_doors()
        yield from self._wait_for_door(False, duration)
        self._finish_close_doors(duration)

    def open_doors(self):
        """SimPy process: open the doors"""
        duration = self._begin_open_doors()
        yield from self._wait_for_door(True, duration)
        self._finish_open_doors(duration)

    def travel(self, target_floor: int):
        """SimPy process: move the car to target_floor at constant rate"""
        duration = self._begin_travel(target_floor)
        yield self.env.timeout(duration)
        self._finish_travel(target_floor, duration)

    def load_passengers(self):
        """SimPy process: let passengers leave and board"""
        duration = self._begin_load_passengers()
        yield self.env.timeout(duration)
        self._finish_load_passengers(duration)

    # --- Run protocol ---

    def _begin_run(self):
        if self.is_running:
            raise AlreadyRunningError("Elevator is already running")
        self.reset()
        self.is_running = True
        self.set_state(STATUS_RUNNING)
        self.log(f"Run started at floor {self.start_floor}, destinations {list(self.destination_queue)} "
                 f"({self.variant.name})")

    def _complete_run(self):
        self.set_state(STATUS_COMPLETE)
        self.is_running = False
        self._emit(COMPLETE, total_time=self.total_time, route=list(self.route))
        self.log(f"Run complete: total time {self.total_time} sec, route {self.route}")

    def _fail_run(self, error: Exception):
        self.is_running = False
        self.set_state(STATUS_ERROR)
        self.log(f"Run failed: {error}")

    def run(self):
        """SimPy process: the full run protocol (use launch() to start it)"""
        try:
            # The car starts with its doors open at the start floor
            self.doors_open = True
            yield from self.close_doors()

            for target_floor in self.destination_queue:
                yield from self.travel(target_floor)
                yield from self.open_doors()
                yield from self.load_passengers()
                yield from self.close_doors()
        except Exception as error:
            self._fail_run(error)
            raise

        self._complete_run()

    def launch(self, env: simpy.Environment) -> simpy.Process:
        """
        Reset the controller and start its run as a process in env.

        The running check and reset happen immediately, so a second launch
        before the first run ends raises AlreadyRunningError.

        Run the environment with until=process. Every door phase schedules an
        operation timeout that stays in the queue when the door wins the race,
        so a bare env.run() keeps stepping (and, in a RealtimeEnvironment,
        sleeping) up to operation_timeout past the end of the run.

        Returns:
            simpy.Process that ends when the run completes or fails
        """
        self._begin_run()
        self.bind(env)
        return env.process(self.run())

    def start(self, speed_factor: float = 1.0, on_update: Optional[UpdateCallback] = None,
              env: Optional[simpy.Environment] = None) -> SimulationResult:
        """
        Run in real time and return the result.

        Args:
            speed_factor: Time-units per real second for the RealtimeEnvironment
                created when env is not given (0.0 = no delay)
            on_update: Step event callback, registered through subscribe()
            env: Environment to run in instead of a new RealtimeEnvironment

        Raises:
            AlreadyRunningError: If a run is in progress
            InvalidStateError, OperationTimeoutError: If a phase fails
        """
        if self.is_running:
            raise AlreadyRunningError("Elevator is already running")
        if on_update is not None:
            self.subscribe(on_update)
        if env is None:
            env = RealtimeEnvironment(speed_factor=speed_factor)

        process = self.launch(env)
        env.run(until=process)
        return self.get_results()

    def compute_immediate(self) -> SimulationResult:
        """
        Compute the whole run synchronously, without waiting.

        Produces the same step events, route and total time as a real-time
        run. Safe to call again on a controller that already ran in either
        mode: the controller is reset to its original start floor first.
        Door faults and the operation timeout do not apply here.
        """
        self._begin_run()
        try:
            self.doors_open = True
            self._finish_close_doors(self._begin_close_doors())

            for target_floor in self.destination_queue:
                self._finish_travel(target_floor, self._begin_travel(target_floor))
                self._finish_open_doors(self._begin_open_doors())
                self._finish_load_passengers(self._begin_load_passengers())
                self._finish_close_doors(self._begin_close_doors())
        except Exception as error:
            self._fail_run(error)
            raise

        self._complete_run()
        return self.get_results()

    def get_results(self) -> SimulationResult:
        """Snapshot of the current totals, route and history"""
        return SimulationResult(
            total_time=self.total_time,
            route=list(self.route),
            history=list(self.history)
        )
