import itertools
from typing import Optional

import simpy


class Entity:
    """
    Base class for named objects in the simulation.

    Provides a unique ID, a name, a state string with logged transitions and
    an optional binding to the SimPy environment the entity runs in. The
    environment is bound per run, so one entity can be replayed in several
    environments (or in none, for immediate computation).
    """
    # Entity ID counter shared across all class instances
    _entity_id_counter = itertools.count()

    def __init__(self, name: str = None, verbose: bool = True):
        """
        Initialize the entity.

        Args:
            name: Entity name. If not specified, auto-generated from class name and ID.
            verbose: Print trace lines (state transitions and actions)
        """
        self.env: Optional[simpy.Environment] = None
        self.entity_id: int = next(self._entity_id_counter)
        self.name: str = name if name is not None else f"{self.__class__.__name__}_{self.entity_id}"
        self.verbose = verbose
        self.state: str = "initial_state"

    def bind(self, env: simpy.Environment):
        """Attach the entity to the environment it will run in"""
        self.env = env

    @property
    def clock(self) -> float:
        """Simulation time used in trace output"""
        return self.env.now if self.env is not None else 0.0

    # --- Common utility methods ---

    def set_state(self, new_state: str):
        """
        Transition the entity's state.

        Args:
            new_state: String representing the target state for transition.
        """
        if self.state != new_state:
            old_state = self.state
            self.state = new_state
            self._log_state_change(old_state, new_state)

    def get_state(self) -> str:
        return self.state

    def log(self, message: str):
        if self.verbose:
            print(f"{self.clock:.2f} [{self.name}] {message}")

    def _log_state_change(self, old_state: str, new_state: str):
        self.log(f"State: {old_state} -> {new_state}")
