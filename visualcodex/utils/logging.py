"""Colour-coded console logging for visualcodex."""

import datetime
import sys
from typing import Dict, NamedTuple, Optional, TextIO

from ..constants import (
    CLR_RESET, CLR_CYAN, CLR_BOLD_CYAN, CLR_GREEN, CLR_BOLD_GREEN,
    CLR_MAGENTA, CLR_BOLD_MAGENTA, CLR_BLUE, CLR_BOLD_BLUE,
    CLR_YELLOW, CLR_BOLD_YELLOW, CLR_WHITE, CLR_BOLD_WHITE,
    CLR_RED, CLR_BOLD_RED
)


class LevelStyle(NamedTuple):
    header: str
    body: str
    to_stderr: bool = False


LEVEL_STYLES: Dict[str, LevelStyle] = {
    "System": LevelStyle(CLR_CYAN, CLR_BOLD_CYAN),
    "LLM": LevelStyle(CLR_WHITE, CLR_BOLD_WHITE),
    "Policy": LevelStyle(CLR_BLUE, CLR_BOLD_BLUE),
    "File": LevelStyle(CLR_GREEN, CLR_BOLD_GREEN),
    "Command": LevelStyle(CLR_YELLOW, CLR_BOLD_YELLOW),
    "Warning": LevelStyle(CLR_YELLOW, CLR_BOLD_YELLOW, to_stderr=True),
    "Error": LevelStyle(CLR_RED, CLR_BOLD_RED, to_stderr=True),
    "Debug": LevelStyle(CLR_MAGENTA, CLR_BOLD_MAGENTA),
}

_UNKNOWN_LEVEL_STYLE = LevelStyle(CLR_WHITE, CLR_BOLD_WHITE)


def get_current_timestamp() -> str:
    """Returns the current timestamp in YYYY-MM-DD HH:MM:SS format."""
    return datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')


class Logger:
    """Writes one coloured, timestamped record per message.

    A record starts with ``[timestamp] [Level]:`` and continuation lines of a
    multi-line message are indented to the message column. Warnings and
    errors are written to stderr, everything else to stdout. Debug records
    are dropped unless debug output is enabled.
    """

    def __init__(self, debug_enabled: bool = False,
                 out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self.debug_enabled = debug_enabled
        self._out = out
        self._err = err

    def set_debug(self, enabled: bool) -> None:
        self.debug_enabled = enabled

    def _stream_for(self, style: LevelStyle) -> TextIO:
        # Resolved per record so a replaced sys.stdout/sys.stderr is honoured
        if style.to_stderr:
            return self._err or sys.stderr
        return self._out or sys.stdout

    def format_record(self, level: str, message: str, timestamp: Optional[str] = None) -> str:
        style = LEVEL_STYLES.get(level, _UNKNOWN_LEVEL_STYLE)
        prefix = f"[{timestamp or get_current_timestamp()}] [{level}]: "
        first, *rest = message.splitlines() or [""]

        rendered = [f"{style.header}{prefix}{CLR_RESET}{style.body}{first}{CLR_RESET}"]
        padding = " " * len(prefix)
        rendered.extend(f"{padding}{style.body}{line}{CLR_RESET}" for line in rest)
        return "\n".join(rendered)

    def log_message(self, level: str, message: str) -> None:
        if level == "Debug" and not self.debug_enabled:
            return
        stream = self._stream_for(LEVEL_STYLES.get(level, _UNKNOWN_LEVEL_STYLE))
        print(self.format_record(level, message), file=stream)
        stream.flush()

    def system(self, message: str) -> None:
        """Session and configuration notices."""
        self.log_message("System", message)

    def llm(self, message: str) -> None:
        self.log_message("LLM", message)

    def policy(self, message: str) -> None:
        self.log_message("Policy", message)

    def file(self, message: str) -> None:
        self.log_message("File", message)

    def command(self, message: str) -> None:
        self.log_message("Command", message)

    def warning(self, message: str) -> None:
        self.log_message("Warning", message)

    def error(self, message: str) -> None:
        self.log_message("Error", message)

    def debug(self, message: str) -> None:
        self.log_message("Debug", message)


# Shared instance; the application switches debug output on
logger = Logger()
