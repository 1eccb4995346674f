"""
Text event stimulus files.

The stimulus format is one "time,text" record per line, in time order.  Blank lines are
ignored.  A first line which is not a valid record (typically a column header) is
skipped when the stimulus is opened, but any later bad line ends the stimulus.
"""

from __future__ import annotations
import csv
import math

from loguru import logger

from desim import DEFAULT_WINDOW, StimLoader, StimulusReader, StimulusRecord
from desim.messages import NOTE, fatal_error_and_die, std_msg
from textevent.event import TextEvent

__all__ = ["TextRecordReader", "open_text_event_loader", "parse_record"]


def parse_record(line: str) -> StimulusRecord | None:
    """Parse one "time,text" CSV line.  Returns None if it is not a valid record.

    The text may be quoted, as written by TextEventLog.  Any unquoted commas are part
    of the text.
    """
    try:
        fields = next(csv.reader([line.rstrip("\r\n")]), [])
        if len(fields) < 2:
            return None
        time = float(fields[0])
    except (csv.Error, ValueError):
        return None
    if not math.isfinite(time):
        return None
    return StimulusRecord(time=time, payload=",".join(fields[1:]).strip())


class TextRecordReader(StimulusReader):
    def __init__(self, stimulus_path: str):
        self.stimulus_path = stimulus_path
        try:
            self._file = open(stimulus_path, "r", encoding="utf-8")
        except OSError as err:
            fatal_error_and_die(
                f'Unable to open stimulus file "{stimulus_path}."\n'
                "Simulation cannot proceed without stimulus.\n"
                f"{err}"
            )
        std_msg(NOTE, f"Reading stimulus from file:  {stimulus_path}")
        self.line_number = 0
        self._at_end = False
        self._failed = False

    def read_record(self) -> StimulusRecord | None:
        if not self.stream_ok():
            return None
        for line in self._file:
            self.line_number += 1
            if not line.strip():
                continue
            record = parse_record(line)
            if record is None:
                self._failed = True
                logger.debug(
                    f"{self.stimulus_path}:{self.line_number} : "
                    f"not a stimulus record : {line.rstrip()!r}"
                )
            return record
        self._at_end = True
        return None

    def skip_line(self) -> None:
        # A bad line is consumed by the failed read, so this only clears the error.
        self._failed = False

    def stream_ok(self) -> bool:
        return not (self._file.closed or self._at_end or self._failed)

    def make_event(self, record: StimulusRecord) -> TextEvent:
        return TextEvent(record.time, record.payload)

    def close(self) -> None:
        self._file.close()


def open_text_event_loader(
    stimulus_path: str, window: float = DEFAULT_WINDOW
) -> StimLoader:
    """Make a stimulus loader for a text event file."""
    return StimLoader(TextRecordReader(stimulus_path), window=window)
