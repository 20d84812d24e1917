"""Raw-mode terminal: key source and frame sink for the session loop.

POSIX only (``termios``).  Keys come out as identifiers understood by
:meth:`optheat.session.Event.from_key`: ``"up"``, ``"down"``, ``"left"``,
``"right"``, ``"enter"``, ``"backspace"``, ``"esc"``, ``"ctrl+c"``,
``"resize"`` or a single character.
"""

from __future__ import annotations

import codecs
import logging
import os
import select
import signal
import sys
from typing import Iterator, Optional, TextIO

__all__ = ["TerminalError", "Terminal", "KeyDecoder", "decode_keys"]

logger = logging.getLogger(__name__)

ENTER_ALT_SCREEN = "\x1b[?1049h\x1b[?25l"
LEAVE_ALT_SCREEN = "\x1b[?25h\x1b[?1049l"
CLEAR = "\x1b[H\x1b[2J"

_ARROWS = {"A": "up", "B": "down", "C": "right", "D": "left"}
_CONTROL = {
    "\r": "enter",
    "\n": "enter",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\x03": "ctrl+c",
    "\t": "tab",
}


class TerminalError(RuntimeError):
    """The terminal could not be put into interactive mode."""


class KeyDecoder:
    """Incremental key decoder for bytes read from the tty.

    A sequence cut off at the end of a read (``ESC``, ``ESC [``,
    ``ESC [ 1 5``) is held back until the next :meth:`feed`.  Arrow keys
    arrive as ``ESC [ X`` or ``ESC O X``; other CSI sequences (function
    keys, mouse reports) are consumed and dropped.
    """

    def __init__(self):
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="ignore")
        self._pending = ""

    @property
    def pending(self) -> bool:
        return bool(self._pending)

    def feed(self, data: bytes) -> list[str]:
        text = self._pending + self._utf8.decode(data)
        self._pending = ""
        keys = []
        i = 0
        while i < len(text):
            ch = text[i]
            if ch == "\x1b":
                if i + 1 >= len(text):
                    self._pending = text[i:]
                    break
                if text[i + 1] not in "[O":
                    keys.append("esc")
                    i += 1
                    continue
                # Parameter bytes run until a final byte in @..~
                j = i + 2
                while j < len(text) and not ("@" <= text[j] <= "~"):
                    j += 1
                if j >= len(text):
                    self._pending = text[i:]
                    break
                if text[j] in _ARROWS:
                    keys.append(_ARROWS[text[j]])
                i = j + 1
            elif ch in _CONTROL:
                keys.append(_CONTROL[ch])
                i += 1
            else:
                if ch.isprintable():
                    keys.append(ch)
                i += 1
        return keys

    def flush(self) -> list[str]:
        """Give up waiting on a held-back sequence; a bare ``ESC`` is the Esc key."""
        pending, self._pending = self._pending, ""
        return ["esc"] if pending == "\x1b" else []


def decode_keys(data: bytes) -> list[str]:
    """Split one complete chunk read from the tty into key identifiers."""
    decoder = KeyDecoder()
    return decoder.feed(data) + decoder.flush()


class Terminal:
    """Context manager owning the tty for the length of a session."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self._fd: Optional[int] = None
        self._saved = None
        self._old_winch = None
        self._resized = False

    def __enter__(self) -> "Terminal":
        try:
            import termios
            import tty
        except ImportError as exc:
            raise TerminalError("interactive mode needs a POSIX terminal") from exc

        if not self.stdin.isatty() or not self.stdout.isatty():
            raise TerminalError("stdin and stdout must be a terminal")
        fd = self.stdin.fileno()
        try:
            self._saved = termios.tcgetattr(fd)
            tty.setraw(fd)
        except termios.error as exc:
            raise TerminalError(f"could not enter raw mode: {exc}") from exc
        self._fd = fd

        if hasattr(signal, "SIGWINCH"):
            self._old_winch = signal.signal(signal.SIGWINCH, self._on_winch)
        self.stdout.write(ENTER_ALT_SCREEN)
        self.stdout.flush()
        logger.debug("terminal in raw mode (fd=%d)", fd)
        return self

    def __exit__(self, *exc_info) -> None:
        import termios

        self.stdout.write(LEAVE_ALT_SCREEN)
        self.stdout.flush()
        if self._old_winch is not None:
            signal.signal(signal.SIGWINCH, self._old_winch)
            self._old_winch = None
        if self._fd is not None and self._saved is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)
        self._fd = None
        logger.debug("terminal restored")

    def _on_winch(self, signum, frame) -> None:
        self._resized = True

    def keys(self, poll_interval: float = 0.1) -> Iterator[str]:
        """Yield key identifiers until the input is closed."""
        if self._fd is None:
            raise TerminalError("terminal is not active")
        decoder = KeyDecoder()
        while True:
            if self._resized:
                self._resized = False
                yield "resize"
            ready, _, _ = select.select([self._fd], [], [], poll_interval)
            if not ready:
                # Nothing followed a held-back ESC within one poll
                yield from decoder.flush()
                continue
            data = os.read(self._fd, 1024)
            if not data:
                yield from decoder.flush()
                return
            yield from decoder.feed(data)

    def draw(self, frame: str) -> None:
        # Raw mode turns off output post-processing, so lines need \r\n.
        self.stdout.write(CLEAR + frame.replace("\n", "\r\n"))
        self.stdout.flush()
