"""
Elevator Simulator - Core simulation engine

This package provides the single-car elevator controller, its step events,
the floor-list parser and the SimPy infrastructure used for real-time
playback.
"""

__version__ = "0.1.0"

from .errors import (
    SimulationError,
    ValidationError,
    InvalidInputError,
    InvalidStateError,
    OperationTimeoutError,
    AlreadyRunningError,
)
from .events import StepEvent, SimulationResult
from .input_parser import parse_floors, parse_start_floor

from .core.entity import Entity
from .core.door import Door
from .core.elevator import ElevatorController

from .infrastructure.message_broker import MessageBroker
from .infrastructure.realtime_env import RealtimeEnvironment

__all__ = [
    'SimulationError',
    'ValidationError',
    'InvalidInputError',
    'InvalidStateError',
    'OperationTimeoutError',
    'AlreadyRunningError',
    'StepEvent',
    'SimulationResult',
    'parse_floors',
    'parse_start_floor',
    'Entity',
    'Door',
    'ElevatorController',
    'MessageBroker',
    'RealtimeEnvironment',
]
