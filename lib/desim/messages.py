"""
Labeled diagnostic messages.

All simulation diagnostics pass through here, so that they share a consistent format :
a label (e.g. "WARNING: ") followed by the message text, where any further lines of a
multi-line message are indented to line up under the first.

Output goes to the loguru logger.  Fatal errors are emitted at CRITICAL level and then
terminate, by raising a SimulationAbort.
"""

from __future__ import annotations
import sys

from loguru import logger

__all__ = [
    "FATAL",
    "ERROR",
    "WARN",
    "NOTE",
    "SimulationAbort",
    "configure_logging",
    "fatal_error_and_die",
    "status_message",
    "std_msg",
]

FATAL = "!!!FATAL ERROR: "
ERROR = "ERROR: "
WARN = "WARNING: "
NOTE = "NOTE: "

EXIT_FAILURE = 1

# Which logger level each of the standard labels is emitted at.
_LABEL_LEVELS = {
    FATAL: "CRITICAL",
    ERROR: "ERROR",
    WARN: "WARNING",
    NOTE: "INFO",
}


class SimulationAbort(SystemExit):
    """Raised to terminate the simulation after a fatal error.

    Being a SystemExit, this ends the process with a failure status unless something
    deliberately catches it (which, apart from tests, nothing should).
    """

    def __init__(self, message: str):
        super().__init__(EXIT_FAILURE)
        self.message = message

    def __str__(self):
        return self.message


def format_message(label: str, message: str) -> str:
    """Return the message text with the label, as a hanging indent."""
    lines = message.splitlines() or [""]
    indent = " " * len(label)
    result = [label + lines[0]]
    result += [indent + line for line in lines[1:]]
    return "\n".join(result)


def status_message(label: str, message: str, level: str = "INFO") -> str:
    """Emit a message with a caller-specified label, at a given logger level.

    Returns the formatted text.
    """
    return _emit(label, message, level)


def std_msg(label: str, message: str) -> str:
    """Emit one of the standard message types : error, warning or note.

    Any label other than WARN or NOTE is treated as an ERROR.
    For fatal errors, use fatal_error_and_die instead.
    """
    if label not in (WARN, NOTE):
        label = ERROR
    return _emit(label, message, _LABEL_LEVELS[label])


def _emit(label: str, message: str, level: str) -> str:
    text = format_message(label, message)
    # Depth=2 so records report the caller of the public function.
    logger.opt(depth=2).log(level, text)
    return text


def fatal_error_and_die(message: str):
    """Emit a fatal error message, and terminate with a failure status."""
    text = format_message(FATAL, message)
    text += "\n" + " " * len(FATAL) + "Exiting."
    logger.opt(depth=1).critical(text)
    raise SimulationAbort(message)


def configure_logging(level: str = "INFO", log_file: str | None = None):
    """Replace all logger sinks with a plain message sink on stderr.

    Optionally, also copy all messages to a file.
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format="{message}")
    if log_file:
        logger.add(
            log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
        )
