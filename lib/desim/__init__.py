"""
Discrete Event Simulation.

A simulation is a queue of events, each with a SimTime, which the executive (SimExec)
dispatches in time order.  Simulation time only ever jumps from one event time to the
next : it has no connection with wall-clock time.

The main components are :
  * SimTime : a fixed-point time value, an integer count of ticks.  Negative times are
    replaced by zero (with a warning), but times too large to represent are fatal.
  * SimEvent : base class for events, which have a time and a 'dispatch' action.
    Dispatching can schedule further events.
  * SimExec : the executive, which owns the event queue and runs the dispatch loop,
    until either the queue empties or a given "run until" time is reached.
  * StimLoader : feeds events from an external record stream into the executive, one
    time window at a time, by scheduling its own timer events.

Usage, in outline :
    executive = SimExec()
    loader = StimLoader(MyReader(...))
    executive.init(run_until=1000.0, stimulus=loader, log_manager=my_log)
    end_time = executive.run()
    executive.teardown()

Fatal errors are reported via desim.messages, and end the process by raising
SimulationAbort (a SystemExit).
"""

from .simtime import MAX_USER_TIME, TICKS_PER_UNIT, SimTime
from .event import CallEvent, Dispatchable, SimEvent
from .executive import EventInsert, ExecState, SimExec
from .messages import SimulationAbort
from .stimulus import (
    DEFAULT_WINDOW,
    LoadStimTimerEvent,
    StimLoader,
    StimulusReader,
    StimulusRecord,
)
from .version import VERSION

__version__ = VERSION

__all__ = [
    "CallEvent",
    "DEFAULT_WINDOW",
    "Dispatchable",
    "EventInsert",
    "ExecState",
    "LoadStimTimerEvent",
    "MAX_USER_TIME",
    "SimEvent",
    "SimExec",
    "SimTime",
    "SimulationAbort",
    "StimLoader",
    "StimulusReader",
    "StimulusRecord",
    "TICKS_PER_UNIT",
    "VERSION",
]
