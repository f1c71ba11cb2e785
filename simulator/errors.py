"""
Error taxonomy for the elevator simulator

All errors abort the current run. None of them are retried.
"""


class SimulationError(Exception):
    """Base class for every error raised by the simulator"""


class ValidationError(SimulationError, ValueError):
    """Caller input is invalid (start floor, destination list, variant name)"""


class InvalidInputError(ValidationError):
    """Raw floor-list text could not be parsed"""


class InvalidStateError(SimulationError, RuntimeError):
    """A phase precondition was violated (e.g. travel with doors open)"""


class OperationTimeoutError(SimulationError, TimeoutError):
    """A phase did not finish within the operation timeout"""


class AlreadyRunningError(SimulationError, RuntimeError):
    """start() was called on a controller that is still running"""
