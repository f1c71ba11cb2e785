"""
realtime_env.py

A SimPy environment that paces simulation time against the wall clock.
Used by the controller's real-time playback so that each announced phase is
followed by its modeled duration of actual waiting.
"""

import math
import time

import simpy


class RealtimeEnvironment(simpy.Environment):
    """
    SimPy environment with real-time synchronization.

    Before processing an event the environment sleeps until the wall clock
    reaches the event's time divided by speed_factor.

    Args:
        speed_factor (float): Simulation time-units per real second
            - 1.0 = real-time (1 time-unit = 1 real second)
            - 0.5 = half speed (1 time-unit = 2 real seconds)
            - 2.0 = double speed
            - 0.0 = no delay (plain SimPy behavior)

    Example:
        >>> env = RealtimeEnvironment(speed_factor=4.0)
        >>> # a 10 time-unit travel phase now takes 2.5 real seconds
    """

    def __init__(self, speed_factor=1.0, initial_time=0):
        if speed_factor < 0:
            raise ValueError("speed_factor cannot be negative")
        super().__init__(initial_time=initial_time)
        self.speed_factor = speed_factor
        self._sync()

    def _sync(self):
        # Reference point pairing the current sim clock with the wall clock
        self.real_start_time = time.monotonic()
        self.sim_start_time = self.now

    def step(self):
        """
        Wait until the next event is due in real time, then process it.

        Events are never processed ahead of the wall clock, so everything
        scheduled for time t is observed no earlier than t / speed_factor
        real seconds after the reference point.
        """
        if self.speed_factor > 0:
            next_time = self.peek()
            if next_time != math.inf:
                sim_elapsed = next_time - self.sim_start_time
                target_real_time = self.real_start_time + (sim_elapsed / self.speed_factor)
                sleep_time = target_real_time - time.monotonic()
                if sleep_time > 0:
                    time.sleep(sleep_time)

        return super().step()

    def set_speed(self, speed_factor):
        """
        Change the speed factor during a run.

        Timing references are reset so the new speed applies from now on.
        """
        if speed_factor < 0:
            raise ValueError("speed_factor cannot be negative")
        self.speed_factor = speed_factor
        self._sync()

    def get_speed(self):
        return self.speed_factor
