"""
Text event simulation.

A simple application of the desim engine : each record of a stimulus file is a
"time,text" pair, which becomes a TextEvent.  Dispatching a TextEvent writes its time
and text to a CSV log file.

Run with "textevent run", see textevent.cli.
"""

from .event import TextEvent
from .log_writer import LogMgr, TextEventLog
from .reader import TextRecordReader, open_text_event_loader
from .config import RunConfig

__all__ = [
    "LogMgr",
    "RunConfig",
    "TextEvent",
    "TextEventLog",
    "TextRecordReader",
    "open_text_event_loader",
]
