"""
The simulation executive.

A SimExec holds a queue of events in time order, and runs them : repeatedly taking the
earliest, advancing the current time to it, and dispatching it.  Dispatched events can
schedule further events, including stimulus-loading timers (see desim.stimulus), which
keep the queue topped up as the simulation proceeds.

A run ends when the queue is empty, or when the next event lies beyond the "run until"
time.

Lifecycle : init(...) --> run() --> teardown().  After teardown, the executive can be
initialized again for a new run.
"""

from __future__ import annotations
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from loguru import logger

from desim.event import Dispatchable
from desim.messages import ERROR, NOTE, fatal_error_and_die, std_msg
from desim.simtime import MAX_USER_TIME, SimTime, TimeTypes

if TYPE_CHECKING:
    from desim.stimulus import StimulusSource

__all__ = ["EventInsert", "ExecState", "SimExec"]


class EventInsert(Enum):
    """Hint for where to start searching for an event's place in the queue.

    FROM_NOW searches forward from the earliest queued event, FAR_FUTURE searches
    backward from the latest one.  Either way, the resulting order is the same.
    """

    FROM_NOW = auto()
    FAR_FUTURE = auto()


class ExecState(Enum):
    UNINITIALIZED = auto()
    PRIMED = auto()
    RUNNING = auto()
    HALTED = auto()


class SimExec:
    def __init__(self):
        self._queue: list[Dispatchable] = []
        self._curr_time = SimTime(0.0)
        self._run_until = SimTime(0.0)
        self.state = ExecState.UNINITIALIZED
        self.stimulus: StimulusSource | None = None
        self.log_manager: Any = None
        self.config: Any = None

    @property
    def curr_time(self) -> SimTime:
        """The time of the event most recently dispatched."""
        return SimTime(self._curr_time)

    @property
    def run_until(self) -> SimTime:
        return SimTime(self._run_until)

    @property
    def pending(self) -> int:
        """The number of events waiting in the queue."""
        return len(self._queue)

    def init(
        self,
        run_until: TimeTypes,
        stimulus: StimulusSource | None,
        log_manager: Any = None,
        config: Any = None,
    ):
        """Bind the run parameters + collaborators, and load the first stimulus.

        The executive takes ownership of the stimulus source, log manager and config :
        all are closed at teardown.  The log manager and config are optional, and are
        not used by the executive itself, only made available to events.
        """
        if self.state != ExecState.UNINITIALIZED:
            fatal_error_and_die(
                "The simulation executive is already initialized.\n"
                "Call teardown() before initializing it again."
            )
        run_until = SimTime(run_until)
        if run_until.ticks == 0:
            msg = (
                f"Run until time must be > 0.0 and <= {MAX_USER_TIME}.\n"
                f"Got {run_until}."
            )
            fatal_error_and_die(msg)
        self._run_until = run_until
        self.config = config
        self.log_manager = log_manager
        if stimulus is None:
            fatal_error_and_die(
                "Encountered unexpected issue with stimulus.\n"
                "Stimulus must be provided to run the simulation."
            )
        self.stimulus = stimulus
        self.stimulus.start_loading_or_die(self)
        self.state = ExecState.PRIMED

    def schedule_event(
        self, event: Dispatchable, insert_from: EventInsert = EventInsert.FROM_NOW
    ):
        """Add an event to the queue.

        The event goes after all queued events with the same or earlier times.
        Events earlier than the current time cannot be run : they are discarded, with an
        error message.
        """
        if event.time.earlier_than(self._curr_time):
            msg = (
                "Attempted to schedule event in the past.\n"
                f"Event Time: {event.time}  Current Simulation Time: {self._curr_time}"
            )
            std_msg(ERROR, msg)
            return
        if insert_from == EventInsert.FAR_FUTURE:
            self._enqueue_from_latest(event)
        else:
            self._enqueue_from_earliest(event)

    def _enqueue_from_earliest(self, event: Dispatchable):
        index = 0
        n_events = len(self._queue)
        while index < n_events and self._queue[index].time.as_early_as(event.time):
            index += 1
        self._queue.insert(index, event)

    def _enqueue_from_latest(self, event: Dispatchable):
        index = len(self._queue)
        while index > 0 and event.time.earlier_than(self._queue[index - 1].time):
            index -= 1
        self._queue.insert(index, event)

    def run(self) -> SimTime:
        """Dispatch events until the queue empties or the run-until time is passed.

        Returns the time the simulation ended : the last event time, or the run-until
        time if that came first.
        """
        if self.state != ExecState.PRIMED:
            fatal_error_and_die(
                f"Cannot run the simulation executive in state {self.state.name}.\n"
                "It must be initialized, and not yet run."
            )
        self.state = ExecState.RUNNING
        queue = self._queue
        if queue:
            self._curr_time = SimTime(queue[0].time)
        # The outer loop advances the time, the inner one runs all events at that time.
        # Events scheduled during dispatch are never before the current time, so they
        # are picked up in order, even when they are *at* the current time.
        while queue and self._curr_time.as_early_as(self._run_until):
            while queue and queue[0].time.same_as(self._curr_time):
                event = queue.pop(0)
                event.dispatch(self)
            if queue:
                self._curr_time = SimTime(queue[0].time)

        # If we stopped on the time limit, the current time has already moved past it,
        # to the first event which was *not* dispatched.
        if self._curr_time.as_early_as(self._run_until):
            end_time = SimTime(self._curr_time)
        else:
            end_time = SimTime(self._run_until)
        self.state = ExecState.HALTED
        std_msg(NOTE, f"Simulation finished at time {end_time}")
        return end_time

    def teardown(self):
        """Release all collaborators, and discard any remaining events.

        Leaves the executive uninitialized.
        """
        for name in ("stimulus", "config", "log_manager"):
            collaborator = getattr(self, name)
            setattr(self, name, None)
            close = getattr(collaborator, "close", None)
            if callable(close):
                close()
        if self._queue:
            logger.debug(f"Discarding {len(self._queue)} undispatched events.")
        self._queue = []
        self._curr_time = SimTime(0.0)
        self._run_until = SimTime(0.0)
        self.state = ExecState.UNINITIALIZED

    def dump_queue(self) -> list[str]:
        """Describe the queued events, in order.  For debugging."""
        lines = []
        for event in self._queue:
            describe = getattr(event, "describe", None)
            lines.append(describe() if callable(describe) else repr(event))
        text = "\n".join(f"   {line}" for line in lines)
        logger.debug("*** Contents of the Event Queue:\n" + text)
        return lines
