"""Interactive session: parameters, focus, edit buffer and surfaces.

The session is either *navigating* the eight rows of the form or
*editing* one of the six parameter fields.  Each key event drives
exactly one transition through :meth:`Session.handle`.

Rows, in focus order::

    0-5  S, K, T, r, q, v
    6    Compute heatmaps
    7    Quit
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, replace
from typing import Optional, Union

from . import grid
from .core import DEFAULT_PARAMS, FIELD_NAMES, Params, format_value
from .grid import Surfaces

__all__ = [
    "COMPUTE_ROW",
    "QUIT_ROW",
    "EDIT_CHARS",
    "VOL_STEP",
    "EventKind",
    "Event",
    "Navigating",
    "Editing",
    "Session",
]

logger = logging.getLogger(__name__)

COMPUTE_ROW = len(FIELD_NAMES)      # 6
QUIT_ROW = COMPUTE_ROW + 1          # 7
EDIT_CHARS = frozenset("0123456789.-")
VOL_STEP = 0.01


class EventKind(enum.Enum):
    MOVE_UP = "up"
    MOVE_DOWN = "down"
    CONFIRM = "enter"
    BACKSPACE = "backspace"
    CHAR = "char"
    VOL_DOWN = "vol_down"
    VOL_UP = "vol_up"
    QUIT = "quit"
    RESIZE = "resize"
    INTERRUPT = "ctrl+c"


_KEYMAP = {
    "up": EventKind.MOVE_UP,
    "down": EventKind.MOVE_DOWN,
    "enter": EventKind.CONFIRM,
    "backspace": EventKind.BACKSPACE,
    "left": EventKind.VOL_DOWN,
    "a": EventKind.VOL_DOWN,
    "right": EventKind.VOL_UP,
    "d": EventKind.VOL_UP,
    "q": EventKind.QUIT,
    "resize": EventKind.RESIZE,
    "ctrl+c": EventKind.INTERRUPT,
}


@dataclass(frozen=True)
class Event:
    kind: EventKind
    char: Optional[str] = None

    @classmethod
    def from_key(cls, key: str) -> Optional["Event"]:
        """Translate a key identifier (``"up"``, ``"enter"``, ``"7"`` ...).

        Returns ``None`` for keys the session has no use for.
        """
        kind = _KEYMAP.get(key)
        if kind is not None:
            return cls(kind, key if len(key) == 1 else None)
        if len(key) == 1 and key.isprintable():
            return cls(EventKind.CHAR, key)
        return None


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Navigating:
    focus: int = 0

    def __post_init__(self):
        if not 0 <= self.focus <= QUIT_ROW:
            raise ValueError(f"focus must be in [0, {QUIT_ROW}], got {self.focus}")


@dataclass(frozen=True)
class Editing:
    focus: int
    buffer: str = ""

    def __post_init__(self):
        if not 0 <= self.focus < COMPUTE_ROW:
            raise ValueError(f"only parameter rows are editable, got focus {self.focus}")

    @property
    def field(self) -> str:
        return FIELD_NAMES[self.focus]


Mode = Union[Navigating, Editing]


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------
class Session:
    """All mutable state of one run, owned by the event loop."""

    def __init__(self, params: Optional[Params] = None):
        self.params = replace(params if params is not None else DEFAULT_PARAMS)
        self.mode: Mode = Navigating(0)
        self.surfaces: Optional[Surfaces] = None
        self.message: Optional[str] = None

    @property
    def focus(self) -> int:
        return self.mode.focus

    @property
    def editing(self) -> bool:
        return isinstance(self.mode, Editing)

    def value(self, index: int) -> float:
        return getattr(self.params, FIELD_NAMES[index])

    # -- transitions --------------------------------------------------------

    def handle(self, event: Event) -> bool:
        """Apply one event.  Returns ``True`` when the session should end."""
        logger.debug("%s on %s", event, self.mode)
        self.message = None
        if event.kind is EventKind.INTERRUPT:
            return True
        if isinstance(self.mode, Editing):
            self._handle_editing(self.mode, event)
            return False
        return self._handle_navigating(self.mode, event)

    def _handle_navigating(self, mode: Navigating, event: Event) -> bool:
        kind = event.kind
        if kind is EventKind.MOVE_UP:
            self.mode = Navigating(max(0, mode.focus - 1))
        elif kind is EventKind.MOVE_DOWN:
            self.mode = Navigating(min(QUIT_ROW, mode.focus + 1))
        elif kind is EventKind.CONFIRM:
            if mode.focus < COMPUTE_ROW:
                self.begin_edit()
            elif mode.focus == COMPUTE_ROW:
                self.recompute()
            else:
                return True
        elif kind is EventKind.VOL_DOWN:
            if self.params.v > VOL_STEP:
                self.params.v -= VOL_STEP
            self.recompute()
        elif kind is EventKind.VOL_UP:
            self.params.v += VOL_STEP
            self.recompute()
        elif kind is EventKind.QUIT:
            return True
        return False

    def _handle_editing(self, mode: Editing, event: Event) -> None:
        kind = event.kind
        if kind is EventKind.CONFIRM:
            self.commit_edit()
        elif kind is EventKind.BACKSPACE:
            self.mode = replace(mode, buffer=mode.buffer[:-1])
        elif kind is EventKind.CHAR and event.char in EDIT_CHARS:
            self.mode = replace(mode, buffer=mode.buffer + event.char)

    # -- operations ---------------------------------------------------------

    def begin_edit(self) -> None:
        focus = self.mode.focus
        self.mode = Editing(focus, format_value(self.value(focus)))

    def commit_edit(self) -> bool:
        """Parse the edit buffer into the field being edited.

        Either way the session goes back to navigating on the same row.
        On a parse failure the field keeps its value and ``False`` is
        returned.
        """
        mode = self.mode
        if not isinstance(mode, Editing):
            raise RuntimeError("commit_edit called while not editing")
        self.mode = Navigating(mode.focus)
        try:
            value = float(mode.buffer)
        except ValueError:
            logger.info("discarded edit of %s: %r is not a number", mode.field, mode.buffer)
            self.message = f"invalid number: {mode.buffer!r}"
            return False
        setattr(self.params, mode.field, value)
        logger.debug("set %s = %g", mode.field, value)
        return True

    def recompute(self) -> Surfaces:
        self.surfaces = grid.compute_surfaces(self.params)
        return self.surfaces
