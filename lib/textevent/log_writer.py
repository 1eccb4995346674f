"""
Log output for simulation events.

A LogMgr owns an output text stream.  TextEventLog writes CSV records of text events,
one per dispatched event : the values for a record are first "staged", one field at a
time, and then written together.  Any write failure is fatal.
"""

from __future__ import annotations
import csv
import io
from typing import TextIO

from desim import SimTime
from desim.messages import NOTE, fatal_error_and_die, std_msg

__all__ = ["LogMgr", "TextEventLog"]


class LogMgr:
    """Base log manager : opens (or adopts) an output stream, and closes it.

    A stream opened from a path is owned, and closed by close().  A stream passed in
    ready-opened belongs to the caller, and is left open.
    """

    def __init__(self, log_path_or_stream: str | TextIO):
        self.data_ready = False
        match log_path_or_stream:
            case str():
                log_path = log_path_or_stream
                try:
                    self.log_stream = open(log_path, "w", encoding="utf-8", newline="")
                except OSError as err:
                    fatal_error_and_die(
                        f'Could not open log output file:  "{log_path}". (LogMgr)\n'
                        f"{err}"
                    )
                self._owns_stream = True
                std_msg(NOTE, f'Opened log output file:  "{log_path}" successfully.')
            case _:
                self.log_stream = log_path_or_stream
                self._owns_stream = False
                if self.log_stream.closed or not self.log_stream.writable():
                    fatal_error_and_die(
                        "Unable to use the specified stream.\n"
                        "The stream is either not open, or not writable. (LogMgr)"
                    )

    def _write_or_die(self, text: str, what: str):
        if self.log_stream.closed:
            fatal_error_and_die(
                f"Unable to write {what}.\n"
                f"Output stream is not open. ({self.__class__.__name__})"
            )
        try:
            self.log_stream.write(text)
        except (OSError, ValueError) as err:
            fatal_error_and_die(
                f"Failed to write {what}.\n"
                f"Output stream returned bad status. ({self.__class__.__name__})\n"
                f"{err}"
            )

    def close(self):
        self.data_ready = False
        if self._owns_stream and not self.log_stream.closed:
            self.log_stream.close()


class TextEventLog(LogMgr):
    """Writes "time,text" CSV records for text events."""

    # The fields which must all be staged, before a record can be written.
    FIELDS = ("event_time", "event_text")

    def __init__(self, log_path_or_stream: str | TextIO):
        super().__init__(log_path_or_stream)
        self.reset()

    def write_header_or_die(self):
        self._write_or_die("time,text\n", "log header")

    def write_record_or_die(self):
        if not self.verify_staged_ready():
            fatal_error_and_die(
                "Unable to write log record.\nStaged data not ready. (TextEventLog)"
            )
        line = _csv_line(self.event_time, self.event_text)
        self._write_or_die(line, "log record")
        self.reset()

    def reset(self):
        """Clear the staged data, ready for the next record."""
        self._staged = {name: False for name in self.FIELDS}
        self.data_ready = False
        self.event_time = SimTime(0.0)
        self.event_text = ""

    def stage_event_time(self, event_time: SimTime):
        self.event_time = SimTime(event_time)
        self._staged["event_time"] = True

    def stage_event_text(self, event_text: str):
        self.event_text = event_text
        self._staged["event_text"] = True

    def verify_staged_ready(self) -> bool:
        self.data_ready = all(self._staged.values())
        return self.data_ready


def _csv_line(*fields) -> str:
    # Quotes any field containing a comma, quote or newline.
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(fields)
    return buffer.getvalue()
