"""
Stimulus loading.

A simulation is driven by an external stream of stimulus records, each of which becomes
an event.  Rather than loading the whole stream up front, a StimLoader reads it in
time "windows" : each load pass queues the records before the end of the current window,
and schedules a LoadStimTimerEvent which runs the next pass when simulation time catches
up.  The queue so stays populated just ahead of the simulation time.

The first record beyond a window is not lost : it is held as a "look-ahead" record, and
queued at the start of the next pass.

The loader is generic.  The specifics of any particular stimulus format are provided by
a StimulusReader, which reads records and converts them into events.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
import math
from typing import TYPE_CHECKING, Any, Protocol

from loguru import logger

from desim.event import SimEvent
from desim.messages import ERROR, NOTE, fatal_error_and_die, std_msg
from desim.simtime import TimeTypes

if TYPE_CHECKING:
    from desim.executive import SimExec

__all__ = [
    "DEFAULT_WINDOW",
    "LoadStimTimerEvent",
    "StimLoader",
    "StimulusReader",
    "StimulusRecord",
    "StimulusSource",
]

# The default span of one load pass, in user time units.
DEFAULT_WINDOW: float = 1.0e3


@dataclass(frozen=True)
class StimulusRecord:
    time: float
    payload: Any = None


class StimulusReader(ABC):
    """Reads one particular stimulus format, and makes events from its records."""

    @abstractmethod
    def read_record(self) -> StimulusRecord | None:
        """Return the next record, or None at the end of the stream or on a bad record.

        After a failed read, stream_ok() is False until skip_line() is called.
        """

    @abstractmethod
    def skip_line(self) -> None:
        """Discard a header-like line, and clear any read error."""

    @abstractmethod
    def stream_ok(self) -> bool:
        """Whether more records may be read."""

    @abstractmethod
    def make_event(self, record: StimulusRecord) -> SimEvent:
        """Convert a record into an event."""

    def close(self) -> None:
        pass


class StimulusSource(Protocol):
    """What the executive needs of a stimulus loader."""

    def start_loading_or_die(self, executive: SimExec) -> None: ...

    def load_queue(self) -> bool: ...

    def stream_ok(self) -> bool: ...

    def close(self) -> None: ...


class StimLoader:
    """Paces the loading of stimulus records into an executive.

    Opening validates the stream, by reading its first record (skipping one header
    line, if needed).  Failure is fatal.
    """

    def __init__(self, reader: StimulusReader, window: float = DEFAULT_WINDOW):
        if not window > 0.0:
            fatal_error_and_die(f"Stimulus read window must be > 0.0, got {window}.")
        self.reader = reader
        self.window = float(window)
        self.ready = False
        # End of the current load window, in user time units.
        self.read_until: float = 0.0
        # Time of the most recently read record.
        self.record_time: float = 0.0
        self.has_buffered_record = False
        self.buffered_record: StimulusRecord | None = None
        self.executive: SimExec | None = None
        if not self.open():
            fatal_error_and_die(
                "Unable to establish stimulus.\n"
                "Simulation cannot proceed without stimulus."
            )

    def open(self) -> bool:
        self.ready = False
        record = self.reader.read_record()
        if record is None:
            # Perhaps a header line : skip it and try once more.
            self.reader.skip_line()
            record = self.reader.read_record()
            if record is None:
                msg = "Could not read stimulus.\nEither bad source, or bad data."
                std_msg(ERROR, msg)
                return False
            std_msg(NOTE, "Stimulus header line skipped.")
        if not math.isfinite(record.time):
            msg = f"Stimulus base time is not a finite number : {record.time}."
            std_msg(ERROR, msg)
            return False
        logger.info(f"Base Time is:  {record.time}")
        # The first record is held over, to be queued by the first load pass.
        self._buffer(record)
        # Windows are aligned to multiples of the window size.
        baseline = math.floor(record.time / self.window) * self.window
        self.read_until = baseline + self.window
        self.ready = True
        return True

    def _buffer(self, record: StimulusRecord):
        self.record_time = record.time
        self.buffered_record = record
        self.has_buffered_record = True

    def start_loading_or_die(self, executive: SimExec):
        """Attach to an executive, and load the first window of stimulus."""
        self.executive = executive
        if not self.load_queue():
            fatal_error_and_die("Could not read stimulus data.")

    def stream_ok(self) -> bool:
        return self.reader.stream_ok()

    def _post(self, record: StimulusRecord):
        self.executive.schedule_event(self.reader.make_event(record))

    def load_queue(self) -> bool:
        """Queue the stimulus for one window, and schedule the timer for the next.

        Returns whether any records were queued.
        """
        if not self.ready or self.executive is None:
            fatal_error_and_die(
                "The stimulus must be opened, and attached to an executive,\n"
                "before loading the queue."
            )
        n_posted = 0
        last_posted_time = self.read_until
        if self.has_buffered_record:
            record = self.buffered_record
            self.has_buffered_record = False
            self.buffered_record = None
            self._post(record)
            n_posted += 1
            last_posted_time = record.time

        while self.reader.stream_ok():
            record = self.reader.read_record()
            if record is None:
                break
            self.record_time = record.time
            if record.time < self.read_until:
                self._post(record)
                n_posted += 1
                last_posted_time = record.time
            else:
                # Beyond this window : hold it for the next pass.
                self._buffer(record)
                break

        success = n_posted > 0
        if success:
            self.read_until = last_posted_time + self.window
        else:
            self.read_until += self.window
        if success or self.reader.stream_ok():
            self.executive.schedule_event(LoadStimTimerEvent(self.record_time, self))
        return success

    def close(self):
        self.ready = False
        self.reader.close()


class LoadStimTimerEvent(SimEvent):
    """Runs the next stimulus load pass."""

    def __init__(self, time: TimeTypes, loader: StimLoader):
        super().__init__(time)
        self.loader = loader

    def dispatch(self, executive: SimExec) -> None:
        logger.debug(f"Executing LoadStimTimerEvent dispatch at:  {self.time}")
        self.loader.load_queue()
