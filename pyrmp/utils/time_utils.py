"""Clocks used to measure elapsed profile time."""

from time import perf_counter, time
from abc import ABC, abstractmethod

from ..core.exceptions import InvalidConfiguration


class ClockBase(ABC):
    """Base class for any Clock implementation used to time motion profiles."""

    @abstractmethod
    def get_time(self) -> float:
        """Get the latest time from this clock.

        Raises:
            NotImplementedError: Raised if this method is not implemented by the child class.

        Returns:
            float: the current time in seconds.
        """
        raise NotImplementedError("This method has to be implemented in the child class")


class PythonEpochClock(ClockBase):
    """ClockBase implementation to query system time using `time.time()`."""

    def get_time(self) -> float:
        return time()


class PythonPerfClock(ClockBase):
    """ClockBase implementation to query counter using `time.perf_counter()`. Only
    meaningful when comparing values from other `time.perf_counter()` calls."""

    def get_time(self) -> float:
        return perf_counter()


class ManualClock(ClockBase):
    """ClockBase implementation whose time only changes when explicitly advanced.

    Useful for simulated control loops (advance by one control period per tick) and for
    deterministic tests.
    """

    def __init__(self, start_time: float = 0.0):
        self._time = float(start_time)

    def get_time(self) -> float:
        return self._time

    def advance(self, dt: float) -> float:
        """Move the clock forward.

        Args:
            dt (float): Time (s) to move forward by. Should be non-negative.

        Raises:
            InvalidConfiguration: if `dt` is negative.

        Returns:
            float: The new time of the clock.
        """
        if dt < 0:
            raise InvalidConfiguration(f"Cannot move {self.__class__.__name__} backwards ({dt}).")
        self._time += dt
        return self._time

    def set_time(self, t: float):
        """Jump the clock to an arbitrary time."""
        self._time = float(t)
