# kubeSh/core/picker/terminal.py
"""
Terminal I/O capability used by the interactive picker.

The picker only talks to the TerminalIO interface, so it can run against a real
terminal (AnsiTerminal) or an in-memory double in tests.
"""

import codecs
import os
import select
import shutil
import sys
import termios
import tty
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Optional, TextIO, Tuple

import readchar

from kubeSh.constants import ESCAPE_SEQUENCE_TIMEOUT

class Key:
    """Normalized key names returned by TerminalIO.read_key"""
    ENTER = "enter"
    ESCAPE = "escape"
    UP = "up"
    DOWN = "down"
    BACKSPACE = "backspace"

class TerminalIO(ABC):
    """
    Minimal terminal capability needed to render and drive a picker session.
    """

    @abstractmethod
    def read_key(self) -> str:
        """
        Block until one key is pressed.

        Returns:
            One of the Key names for navigation keys, otherwise the raw character(s)
        """
        pass

    @abstractmethod
    def move_cursor_up(self, lines: int) -> None:
        """Move the cursor to column 0, `lines` rows up."""
        pass

    @abstractmethod
    def write_line(self, text: str) -> None:
        """Replace the current row with `text` and advance to the next row."""
        pass

    @abstractmethod
    def get_window_size(self) -> Tuple[int, int]:
        """Return the terminal size as (columns, rows)."""
        pass

    @abstractmethod
    def set_cursor_visible(self, visible: bool) -> None:
        pass

class AnsiTerminal(TerminalIO):
    """
    TerminalIO for a POSIX terminal: keys are read byte by byte in cbreak mode,
    output is drawn with ANSI escapes.

    An ESC byte with nothing after it within ESCAPE_SEQUENCE_TIMEOUT is a lone
    Escape press; otherwise the CSI or SS3 sequence that follows is read whole.
    """

    _KEY_MAP = {
        readchar.key.UP: Key.UP,
        "\x1bOA": Key.UP,
        readchar.key.DOWN: Key.DOWN,
        "\x1bOB": Key.DOWN,
        readchar.key.ENTER: Key.ENTER,
        readchar.key.CR: Key.ENTER,
        readchar.key.LF: Key.ENTER,
        readchar.key.BACKSPACE: Key.BACKSPACE,
        "\x08": Key.BACKSPACE,
        readchar.key.ESC: Key.ESCAPE,
    }

    def __init__(self, stream: TextIO = None, input_fd: Optional[int] = None):
        self.stream = stream or sys.stdout
        self.input_fd = input_fd

    # --- input ---
    def _fd(self) -> int:
        return self.input_fd if self.input_fd is not None else sys.stdin.fileno()

    @contextmanager
    def _cbreak(self, fd: int):
        if not os.isatty(fd):
            yield
            return
        saved = termios.tcgetattr(fd)
        try:
            tty.setcbreak(fd, termios.TCSANOW)
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)

    def _pending(self, fd: int) -> bool:
        ready, _, _ = select.select([fd], [], [], ESCAPE_SEQUENCE_TIMEOUT)
        return bool(ready)

    def _read_char(self, fd: int) -> str:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            data = os.read(fd, 1)
            if not data:
                raise EOFError("Terminal input closed")
            text = decoder.decode(data)
            if text:
                return text

    def _read_sequence(self, fd: int) -> str:
        first = self._read_char(fd)
        if first != readchar.key.ESC or not self._pending(fd):
            return first

        sequence = first + self._read_char(fd)
        if sequence[1] == "O":
            if self._pending(fd):
                sequence += self._read_char(fd)
        elif sequence[1] == "[":
            # CSI parameters run until a final byte in @..~
            while self._pending(fd):
                sequence += self._read_char(fd)
                if "@" <= sequence[-1] <= "~":
                    break
        return sequence

    def read_key(self) -> str:
        fd = self._fd()
        with self._cbreak(fd):
            raw = self._read_sequence(fd)
        return self._KEY_MAP.get(raw, raw)

    # --- output ---
    def move_cursor_up(self, lines: int) -> None:
        if lines > 0:
            self.stream.write(f"\x1b[{lines}F")
        else:
            self.stream.write("\r")
        self.stream.flush()

    def write_line(self, text: str) -> None:
        self.stream.write(f"\x1b[2K{text}\n")
        self.stream.flush()

    def get_window_size(self) -> Tuple[int, int]:
        size = shutil.get_terminal_size()
        return size.columns, size.lines

    def set_cursor_visible(self, visible: bool) -> None:
        self.stream.write("\x1b[?25h" if visible else "\x1b[?25l")
        self.stream.flush()
