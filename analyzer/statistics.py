import json
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from simulator.events import (
    COMPLETE,
    DOORS_CLOSING,
    DOORS_OPENING,
    PASSENGER_TRANSFER,
    TRAVELING,
    SimulationResult,
    StepEvent,
)


@dataclass
class TimeBreakdown:
    """Aggregate phase durations of one run"""
    travel_time: float = 0
    door_open_time: float = 0
    door_close_time: float = 0
    passenger_time: float = 0
    floors_count: int = 0

    @property
    def total_door_time(self) -> float:
        return self.door_open_time + self.door_close_time

    @property
    def total_time(self) -> float:
        return self.travel_time + self.total_door_time + self.passenger_time


def compute_breakdown(history: Iterable[StepEvent]) -> TimeBreakdown:
    """
    Sum phase durations by type.

    floors_count is the number of trips in the final route (start floor
    excluded) and stays 0 until the complete event has been seen.
    """
    breakdown = TimeBreakdown()
    for event in history:
        if event.type == TRAVELING:
            breakdown.travel_time += event.duration
        elif event.type == DOORS_OPENING:
            breakdown.door_open_time += event.duration
        elif event.type == DOORS_CLOSING:
            breakdown.door_close_time += event.duration
        elif event.type == PASSENGER_TRANSFER:
            breakdown.passenger_time += event.duration
        elif event.type == COMPLETE:
            breakdown.floors_count = len(event.route or []) - 1
    return breakdown


def _sec(value: float) -> str:
    return f"{value:g} sec"


def format_step(event: StepEvent) -> str:
    """One line of step-by-step text for an event"""
    if event.type == TRAVELING:
        return f"The elevator is heading from floor {event.from_floor} to floor {event.to_floor} ({_sec(event.duration)})"
    if event.type == DOORS_OPENING:
        return f"Floor {event.floor} doors are opening ({_sec(event.duration)})"
    if event.type == PASSENGER_TRANSFER:
        return f"Floor {event.floor} passenger transfer ({_sec(event.duration)})"
    if event.type == DOORS_CLOSING:
        return f"Floor {event.floor} doors are closing ({_sec(event.duration)})"
    return "Simulation Complete!"


def route_profile(history: Iterable[StepEvent]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Floor position over time as plottable points.

    The car moves linearly between floors during travel and holds its floor
    during door and transfer phases.
    """
    times: List[float] = []
    floors: List[float] = []
    for event in history:
        if event.type == COMPLETE:
            times.append(event.timestamp)
            floors.append(event.floor)
        elif event.type == TRAVELING:
            times.extend([event.timestamp, event.timestamp + event.duration])
            floors.extend([event.from_floor, event.to_floor])
        else:
            times.extend([event.timestamp, event.timestamp + event.duration])
            floors.extend([event.floor, event.floor])
    return np.array(times, dtype=float), np.array(floors, dtype=float)


class RunStatistics:
    """
    Recorder for one simulation run.

    Collects step events (live, by subscribing record_event to the
    controller, or afterwards from a SimulationResult), keeps them in JSON
    Lines form for offline playback and prints the final summary.
    """
    def __init__(self, name: str = "Elevator_1"):
        self.name = name
        self.events: List[StepEvent] = []
        self.result: Optional[SimulationResult] = None
        self.status: Optional[str] = None
        self.current_floor: Optional[int] = None

        # JSON Lines event log for offline playback
        self.event_log = []
        self.simulation_metadata = {}

    def set_simulation_metadata(self, metadata):
        """
        Set simulation metadata (called before simulation starts).

        Args:
            metadata (dict): Run configuration (start floor, variant, mode, etc.)
        """
        self.simulation_metadata = {
            "format_version": "1.0",
            "timestamp": datetime.now().isoformat(),
            "config": metadata
        }

    def record_event(self, event: StepEvent):
        """Record one step event; usable directly as a controller subscriber"""
        self.events.append(event)
        self.current_floor = event.floor
        self.event_log.append({
            "time": event.timestamp,
            "type": event.type,
            "data": event.to_dict()
        })

    def record_result(self, result: SimulationResult, status: str = "complete", current_floor: int = None):
        """
        Record the final result of the run.

        Events already recorded live are kept; otherwise the result history
        is recorded.
        """
        self.result = result
        self.status = status
        if not self.events:
            for event in result.history:
                self.record_event(event)
        if current_floor is not None:
            self.current_floor = current_floor
        elif result.route:
            self.current_floor = result.route[-1]

    def get_breakdown(self) -> TimeBreakdown:
        return compute_breakdown(self.events)

    def print_steps(self):
        print("\nStep-by-Step:")
        for event in self.events:
            if event.type != COMPLETE:
                print(f"  {format_step(event)}")

    def print_summary(self):
        """Print status, totals and the time breakdown table"""
        print("\n" + "=" * 60)
        print("   RESULTS")
        print("=" * 60)
        print(f"Current Status:    {self.status}")
        print(f"Current Floor:     {self.current_floor}")

        if self.result is None:
            print("=" * 60)
            return

        print(f"Total Travel Time: {_sec(self.result.total_time)}")
        print(f"Floors Visited:    {','.join(str(f) for f in self.result.route)}")

        breakdown = self.get_breakdown()
        print("\nTime Breakdown Summary:")
        print(f"  Floors Traveled:        {breakdown.floors_count:>6} floors")
        print(f"  Travel Between Floors:  {breakdown.travel_time:>6g} sec")
        print(f"  Doors Opening:          {breakdown.door_open_time:>6g} sec")
        print(f"  Doors Closing:          {breakdown.door_close_time:>6g} sec")
        print(f"  Passenger Transfer:     {breakdown.passenger_time:>6g} sec")
        print(f"  Total Time:             {self.result.total_time:>6g} sec")
        print("=" * 60)

    def save_event_log(self, filename='simulation_log.jsonl'):
        """
        Save the event log to a JSON Lines file.

        Args:
            filename (str): Name of the output file (default: 'simulation_log.jsonl')
        """
        print(f"\nSaving event log to {filename}...")

        with open(filename, 'w', encoding='utf-8') as f:
            # Write metadata as first line
            if self.simulation_metadata:
                f.write(json.dumps({
                    "type": "metadata",
                    "data": self.simulation_metadata
                }) + '\n')

            for event in self.event_log:
                f.write(json.dumps(event, ensure_ascii=False) + '\n')

        print(f"Event log saved: {len(self.event_log)} events written to {filename}")
        return filename

    @staticmethod
    def load_event_log(filename) -> Tuple[dict, List[StepEvent]]:
        """Read a file written by save_event_log(); returns (metadata, events)"""
        metadata = {}
        events = []
        with open(filename, 'r', encoding='utf-8') as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                record = json.loads(line)
                if record.get("type") == "metadata":
                    metadata = record.get("data", {})
                else:
                    events.append(StepEvent.from_dict(record["data"]))
        return metadata, events

    def plot_route_diagram(self, output_filename='elevator_route_diagram.png', show=False):
        """Draw the floor-vs-time diagram of the run and save it"""
        print("\n--- Plotting: Elevator Route Diagram ---")
        times, floors = route_profile(self.events)
        if times.size == 0:
            print("No events recorded, nothing to plot")
            return None

        fig, ax = plt.subplots(figsize=(12, 6))
        ax.plot(times, floors, color='#1f77b4', linewidth=2.5, label=self.name)

        # Shade door-open intervals (open start to close end)
        door_open_start = None
        for event in self.events:
            if event.type == DOORS_OPENING:
                door_open_start = event.timestamp
            elif event.type == DOORS_CLOSING and door_open_start is not None:
                ax.axvspan(door_open_start, event.timestamp + event.duration, color='#2ca02c', alpha=0.15)
                door_open_start = None

        stops = [e for e in self.events if e.type == PASSENGER_TRANSFER]
        if stops:
            ax.scatter([e.timestamp for e in stops], [e.floor for e in stops],
                       color='#d62728', zorder=3, label='Passenger transfer')

        ax.set_title("Elevator Route Diagram")
        ax.set_xlabel("Time (s)")
        ax.set_ylabel("Floor")
        ax.grid(True, which='both', linestyle='--', alpha=0.7)
        ax.set_yticks(range(int(floors.min()), int(floors.max()) + 1))
        ax.legend(loc='upper right', fontsize=10)

        fig.savefig(output_filename, dpi=150, bbox_inches='tight')
        print(f"Route diagram saved to: {output_filename}")

        if show:
            plt.show()
        plt.close(fig)
        return output_filename
