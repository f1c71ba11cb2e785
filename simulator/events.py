"""
Step events and run results

A step event is announced at the start of each phase. Its timestamp is the
elapsed simulation time when the phase begins; the phase ends at
timestamp + duration.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Step types
DOORS_OPENING = "doors_opening"
DOORS_CLOSING = "doors_closing"
PASSENGER_TRANSFER = "passenger_transfer"
TRAVELING = "traveling"
COMPLETE = "complete"

STEP_TYPES = (DOORS_OPENING, DOORS_CLOSING, PASSENGER_TRANSFER, TRAVELING, COMPLETE)

# Controller statuses (observational only)
STATUS_IDLE = "idle"
STATUS_RUNNING = "running"
STATUS_DOORS_OPENING = "doors-opening"
STATUS_DOORS_CLOSING = "doors-closing"
STATUS_PASSENGER_TRANSFER = "passenger-transfer"
STATUS_COMPLETE = "complete"
STATUS_ERROR = "error"


@dataclass
class StepEvent:
    """One announced phase of a run"""
    type: str
    floor: int
    timestamp: float
    duration: Optional[float] = None
    from_floor: Optional[int] = None
    to_floor: Optional[int] = None
    total_time: Optional[float] = None
    route: Optional[List[int]] = None

    def __post_init__(self):
        if self.type not in STEP_TYPES:
            raise ValueError(f"Unknown step type: {self.type}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, leaving out fields that do not apply"""
        data = {
            "type": self.type,
            "floor": self.floor,
            "timestamp": self.timestamp,
        }
        if self.type == COMPLETE:
            data["total_time"] = self.total_time
            data["route"] = list(self.route or [])
            return data

        data["duration"] = self.duration
        if self.type == TRAVELING:
            data["from"] = self.from_floor
            data["to"] = self.to_floor
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'StepEvent':
        """Create StepEvent from dictionary produced by to_dict()"""
        route = data.get("route")
        return cls(
            type=data["type"],
            floor=data["floor"],
            timestamp=data["timestamp"],
            duration=data.get("duration"),
            from_floor=data.get("from"),
            to_floor=data.get("to"),
            total_time=data.get("total_time"),
            route=list(route) if route is not None else None,
        )


@dataclass
class SimulationResult:
    """
    Final summary of a run.

    This is a snapshot: the lists are copies and do not change if the
    controller is reset or run again.
    """
    total_time: float
    route: List[int] = field(default_factory=list)
    history: List[StepEvent] = field(default_factory=list)

    @property
    def floors_visited(self) -> int:
        """Number of completed trips (the start floor is not counted)"""
        return len(self.route) - 1

    def to_dict(self) -> dict:
        return {
            "total_time": self.total_time,
            "route": list(self.route),
            "history": [event.to_dict() for event in self.history],
        }
