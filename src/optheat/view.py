"""Text frame for the current session state."""

from __future__ import annotations

from .black_scholes import price
from .core import CALL, FIELD_LABELS, FIELD_NAMES, PUT, format_value
from .heatmap import CELL_WIDTH, render_heatmap, visible_width
from .grid import GRID_SIZE
from .session import COMPUTE_ROW, QUIT_ROW, Session

__all__ = ["HEATMAP_WIDTH", "render"]

HEATMAP_WIDTH = GRID_SIZE * CELL_WIDTH
GUTTER = "  "

TITLE = "Option Pricer TUI (Black-Scholes)"
HELP = "Use Up/Down to select field, Enter to edit, Left/Right to adjust volatility."
LEGEND = "X axis: v (volatility)   Y axis: S (spot price)"


def _marker(focused: bool) -> str:
    return "->" if focused else "  "


def _pad(line: str, width: int) -> str:
    return line + " " * max(0, width - visible_width(line))


def render(session: Session) -> str:
    """Compose one frame.  Lines end in ``\\n``; the terminal layer adapts them."""
    out = [TITLE, HELP, ""]

    for i, name in enumerate(FIELD_NAMES):
        editing_here = session.editing and session.focus == i
        line = f"{FIELD_LABELS[name]}: {format_value(session.value(i))}"
        if editing_here:
            line += f" (editing: {session.mode.buffer})"
        out.append(f"{_marker(session.focus == i and not session.editing)} {line}")

    out.append(f"{_marker(session.focus == COMPUTE_ROW)} Compute heatmaps (Enter)")
    out.append(LEGEND)
    out.append("")

    p = session.params.as_tuple()
    call_px = price(*p, CALL)
    put_px = price(*p, PUT)
    out.append(f"Current prices: Call = ${call_px:.2f}, Put = ${put_px:.2f}")
    if session.message:
        out.append(session.message)
    out.append("")

    if session.surfaces is not None:
        call_lines = render_heatmap(session.surfaces.call)
        put_lines = render_heatmap(session.surfaces.put)
        out.append(_pad("Call Heatmap", HEATMAP_WIDTH) + GUTTER + "Put Heatmap")
        for i in range(max(len(call_lines), len(put_lines))):
            cl = call_lines[i] if i < len(call_lines) else ""
            pl = put_lines[i] if i < len(put_lines) else ""
            out.append(_pad(cl, HEATMAP_WIDTH) + GUTTER + pl)

    out.append(f"{_marker(session.focus == QUIT_ROW)} Quit")
    return "\n".join(out) + "\n"
