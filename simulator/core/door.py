import simpy
from .entity import Entity

class Door(Entity):
    """
    Door mechanism of an elevator car.

    The controller starts an actuation for every door phase and races it
    against its operation timeout. A jammed door takes extra time to finish,
    which is how a stuck-door fault is simulated.
    """
    def __init__(self, name: str = None, verbose: bool = True):
        super().__init__(name, verbose)
        self.jam_delay = 0.0  # Extra time added to every actuation while jammed
        self.actuation_process = None  # Handle to current actuation (for interruption)
        self.set_state('CLOSED')  # Door state: OPENING, OPEN, CLOSING, CLOSED, JAMMED

    @property
    def is_jammed(self) -> bool:
        return self.jam_delay > 0

    def jam(self, extra_delay: float):
        """Inject a fault: every actuation takes extra_delay longer"""
        if extra_delay <= 0:
            raise ValueError("extra_delay must be positive")
        self.jam_delay = extra_delay
        self.log(f"Fault injected: actuation delayed by {extra_delay:.2f}")

    def release(self):
        """Clear an injected fault"""
        self.jam_delay = 0.0
        self.log("Fault cleared")

    def reset(self):
        """Put the mechanism back to closed without clearing faults"""
        self.actuation_process = None
        self.set_state('CLOSED')

    def start_actuation(self, opening: bool, duration: float) -> simpy.Process:
        """
        Start an opening or closing movement in the bound environment.

        Returns:
            simpy.Process that succeeds once the movement has finished
        """
        self.actuation_process = self.env.process(self._actuate(opening, duration))
        return self.actuation_process

    def abort_actuation(self, cause: str = "timeout"):
        """Interrupt the movement in progress (if any)"""
        if self.actuation_process is not None and self.actuation_process.is_alive:
            self.actuation_process.interrupt(cause)
        self.actuation_process = None

    def _actuate(self, opening: bool, duration: float):
        self.set_state('OPENING' if opening else 'CLOSING')
        try:
            yield self.env.timeout(duration + self.jam_delay)
        except simpy.Interrupt as interrupt:
            self.log(f"Actuation aborted ({interrupt.cause})")
            self.set_state('JAMMED')
            return
        self.set_state('OPEN' if opening else 'CLOSED')
