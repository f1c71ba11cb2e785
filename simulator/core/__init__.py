"""Core simulation entities"""

from .entity import Entity
from .door import Door
from .elevator import ElevatorController

__all__ = [
    'Entity',
    'Door',
    'ElevatorController',
]
