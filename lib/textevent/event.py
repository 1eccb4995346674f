"""An event carrying a line of text, which is logged when dispatched."""

from __future__ import annotations
from typing import TYPE_CHECKING

from loguru import logger

from desim import SimEvent
from desim.messages import fatal_error_and_die
from desim.simtime import TimeTypes
from textevent.log_writer import TextEventLog

if TYPE_CHECKING:
    from desim import SimExec

__all__ = ["TextEvent"]


class TextEvent(SimEvent):
    def __init__(self, time: TimeTypes, text: str):
        super().__init__(time)
        self.text = text

    def dispatch(self, executive: SimExec) -> None:
        logger.debug(f"Dispatched - {self.text} at: {self.time}")
        log = executive.log_manager
        if not isinstance(log, TextEventLog):
            fatal_error_and_die(
                "TextEvent requires a TextEventLog as the executive's log manager.\n"
                f"Got {log!r}."
            )
        log.stage_event_time(self.time)
        log.stage_event_text(self.text)
        log.write_record_or_die()

    def describe(self) -> str:
        return f"TextEvent Time {self.time}; Text:  {self.text}"

    def __repr__(self):
        return f"TextEvent(time={self.time}, text={self.text!r})"
