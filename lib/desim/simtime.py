"""
The simulation clock value.

A SimTime is a point on the simulation's logical timeline.  Internally it is an integer
count of "ticks", where each user time unit (the floating-point times that users deal
in) is worth TICKS_PER_UNIT ticks.  The tick count behaves like an unsigned 64-bit
counter, which sets the largest representable time, MAX_USER_TIME.

Times outside the valid range are handled asymmetrically :
    * a negative time is replaced by zero, with a warning
    * a time beyond MAX_USER_TIME is a fatal error
"""

from __future__ import annotations
from decimal import Decimal
from functools import total_ordering
import math

from desim.messages import WARN, fatal_error_and_die, std_msg

__all__ = ["MAX_TICKS", "MAX_USER_TIME", "SimTime", "TICKS_PER_UNIT", "TimeTypes"]

type TimeTypes = SimTime | int | float

TICKS_PER_UNIT: float = 100.0
MAX_TICKS: int = 2**64 - 1
# N.B. limits are compared in floating point, like the arithmetic that produces them.
MAX_REAL_TICKS: float = float(MAX_TICKS)
MAX_USER_TIME: float = MAX_REAL_TICKS / TICKS_PER_UNIT


def _real_ticks_to_ticks(real_ticks: float) -> int:
    """Round a real-valued tick count half-up, to an integer tick count."""
    if not real_ticks >= 0.0:
        return 0
    if real_ticks + 0.5 > MAX_REAL_TICKS:
        return MAX_TICKS
    return min(int(math.floor(real_ticks + 0.5)), MAX_TICKS)


@total_ordering
class SimTime:
    """A simulation time value.

    Construct from a user time (int or float), which is range checked, or from another
    SimTime, which is simply copied.

    SimTimes compare with each other, and with plain numbers, and print like a plain
    number (in user time units).
    """

    def __init__(self, time: TimeTypes = 0.0):
        self._ticks: int = 0
        self.set_time(time)

    def set_time(self, time: TimeTypes):
        match time:
            case SimTime():
                self._ticks = time._ticks
            case bool():
                raise TypeError(f"Argument 'time', {time!r} has unsupported type.")
            case int() | float():
                self._set_user_time(float(time))
            case _:
                raise TypeError(f"Argument 'time', {time!r} has unsupported type.")

    def _set_user_time(self, time: float):
        if 0.0 <= time <= MAX_USER_TIME:
            self._ticks = _real_ticks_to_ticks(time * TICKS_PER_UNIT)
        elif time < 0.0:
            self._ticks = 0
            msg = (
                "Simulation cannot process negative times.  Using 0.0\n"
                f"instead of the specified value of {time}"
            )
            std_msg(WARN, msg)
        else:
            # N.B. includes NaN, which fails both tests above.
            msg = (
                f"{time} exceeds permissible range.\n"
                f"Maximum Value for Time Units is: {MAX_USER_TIME}"
            )
            fatal_error_and_die(msg)

    def add_time(self, delta: TimeTypes):
        """Advance this time, by either another SimTime or a user time delta.

        A negative user time delta moves the time back, but not below zero : a result
        which would be negative is replaced by zero, with a warning.
        """
        match delta:
            case SimTime():
                real_add = float(delta._ticks)
                add_time = delta.user_time
            case int() | float() if not isinstance(delta, bool):
                real_add = float(delta) * TICKS_PER_UNIT
                add_time = delta
            case _:
                raise TypeError(f"Argument 'delta', {delta!r} has unsupported type.")
        real_total = float(self._ticks) + real_add
        if not real_total <= MAX_REAL_TICKS:
            # N.B. includes NaN.
            msg = (
                f"Adding {add_time} to {self.user_time} would exceed\n"
                "permissible range."
            )
            fatal_error_and_die(msg)
        if real_total < 0.0:
            msg = (
                "Simulation cannot process negative times.  Using 0.0\n"
                f"instead of the result of adding {add_time} to {self.user_time}"
            )
            std_msg(WARN, msg)
            self._ticks = 0
            return
        if isinstance(delta, SimTime):
            add_ticks = delta._ticks
        else:
            add_ticks = int(math.floor(real_add + 0.5))
        self._ticks = max(0, min(self._ticks + add_ticks, MAX_TICKS))

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def user_time(self) -> float:
        return self._ticks / TICKS_PER_UNIT

    @staticmethod
    def max_user_time() -> float:
        return MAX_USER_TIME

    @staticmethod
    def max_user_time_long_string() -> str:
        """The maximum user time, exactly, for diagnostic display."""
        exact = Decimal(MAX_TICKS) / Decimal(TICKS_PER_UNIT)
        return str(exact)

    # Named comparisons.  These are the primary ones, the operators follow them.
    def earlier_than(self, other: TimeTypes) -> bool:
        return self._ticks < _ticks_of(other)

    def as_early_as(self, other: TimeTypes) -> bool:
        return self._ticks <= _ticks_of(other)

    def same_as(self, other: TimeTypes) -> bool:
        return self._ticks == _ticks_of(other)

    def __eq__(self, other):
        if not isinstance(other, SimTime | int | float):
            return NotImplemented
        return self.same_as(other)

    def __lt__(self, other):
        if not isinstance(other, SimTime | int | float):
            return NotImplemented
        return self.earlier_than(other)

    __hash__ = None  # mutable, via set_time + add_time

    def __add__(self, other):
        if not isinstance(other, SimTime | int | float):
            return NotImplemented
        result = SimTime(self)
        result.add_time(other)
        return result

    def __radd__(self, other):
        return self.__add__(other)

    def __repr__(self):
        return f"SimTime({self.user_time})"

    def __str__(self):
        return str(self.user_time)


def _ticks_of(time: TimeTypes) -> int:
    # Plain numbers are converted without range checks : comparing is not constructing.
    if isinstance(time, SimTime):
        return time.ticks
    return _real_ticks_to_ticks(float(time) * TICKS_PER_UNIT)
