"""
Fundamental simulation event classes.

An event is a one-shot unit of work, scheduled for a given SimTime.  Once handed to an
executive (see desim.executive), it belongs to it : the executive calls its "dispatch"
exactly once, when simulation time reaches the event time, and then discards it.

Any object with a 'time' and a 'dispatch(executive)' method (see Dispatchable) can be
scheduled.  SimEvent is a convenient base class, which provides the time comparisons.
CallEvent wraps an arbitrary callback function as an event.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Protocol, runtime_checkable

from desim.simtime import SimTime, TimeTypes

if TYPE_CHECKING:
    from desim.executive import SimExec

__all__ = ["CallEvent", "Dispatchable", "EventCall", "SimEvent"]


@runtime_checkable
class Dispatchable(Protocol):
    """What the executive needs of an event."""

    @property
    def time(self) -> SimTime: ...

    def dispatch(self, executive: SimExec) -> None: ...


class SimEvent(ABC):
    """Base class for events.

    Subclasses must define 'dispatch', and may add any payload they need.
    The event time is read-only : the executive relies on it not changing while the
    event is queued.
    """

    def __init__(self, time: TimeTypes):
        self._time = SimTime(time)

    @property
    def time(self) -> SimTime:
        return self._time

    @abstractmethod
    def dispatch(self, executive: SimExec) -> None:
        """Perform the event action.  Called by the executive, exactly once."""

    # Comparisons accept either another event or a time.
    def earlier_than(self, other: Dispatchable | TimeTypes) -> bool:
        return self._time.earlier_than(_time_of(other))

    def as_early_as(self, other: Dispatchable | TimeTypes) -> bool:
        return self._time.as_early_as(_time_of(other))

    def same_time_as(self, other: Dispatchable | TimeTypes) -> bool:
        return self._time.same_as(_time_of(other))

    def describe(self) -> str:
        """A one-line description, as used in queue dumps."""
        return f"{self.__class__.__name__} Time {self._time}"

    def __repr__(self):
        return f"{self.__class__.__name__}(time={self._time})"


def _time_of(other: Dispatchable | TimeTypes) -> TimeTypes:
    match other:
        case SimTime() | int() | float():
            return other
        case _:
            return other.time


EventCall = Callable[..., None]


class CallEvent(SimEvent):
    """An event which calls a given function.

    The call is made as call(executive, time), or call(executive, time, context) when a
    context is given.
    """

    def __init__(self, time: TimeTypes, call: EventCall, context: Any = None):
        super().__init__(time)
        self.call = call
        self.context = context

    def dispatch(self, executive: SimExec) -> None:
        # Only pass the context when there is one, so simple callbacks can omit it.
        args: tuple = (executive, self.time)
        if self.context is not None:
            args += (self.context,)
        self.call(*args)

    def __repr__(self):
        return f"CallEvent(time={self.time}, call={self.call!r})"
