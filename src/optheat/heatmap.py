"""ANSI truecolor heatmap rendering.

A matrix is min-max normalised over all of its cells and each cell drawn
as a two-column block on a green (low) to red (high) background.
"""

from __future__ import annotations

import re

import numpy as np

__all__ = ["CELL_WIDTH", "normalize", "gradient", "colorize_block",
           "render_heatmap", "visible_width"]

CELL_WIDTH = 2
RESET = "\x1b[0m"

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def normalize(data) -> np.ndarray:
    """Map every cell to ``t`` in [0, 1] using the matrix-wide min and max.

    Only finite cells set the range.  A flat (or entirely non-finite)
    matrix maps to all zeros; ``nan`` cells map to 0.
    """
    data = np.asarray(data, dtype=float)
    finite = data[np.isfinite(data)]
    if finite.size == 0:
        return np.zeros(data.shape)
    lo, hi = finite.min(), finite.max()
    if hi <= lo:
        return np.zeros(data.shape)
    with np.errstate(invalid="ignore"):
        t = np.clip((data - lo) / (hi - lo), 0.0, 1.0)
    return np.where(np.isnan(t), 0.0, t)


def gradient(t: float) -> tuple[int, int, int]:
    """RGB for ``t``: pure green at 0, pure red at 1, blue always 0."""
    red = int(np.floor(255.0 * t + 0.5))
    return red, 255 - red, 0


def colorize_block(t: float) -> str:
    r, g, b = gradient(t)
    return f"\x1b[48;2;{r};{g};{b}m{' ' * CELL_WIDTH}{RESET}"


def render_heatmap(data) -> list[str]:
    """One line of coloured blocks per matrix row; ``[]`` for an empty matrix."""
    data = np.asarray(data, dtype=float)
    if data.size == 0:
        return []
    t = normalize(data)
    return ["".join(colorize_block(x) for x in row) for row in t]


def visible_width(text: str) -> int:
    """Display width of ``text`` once colour escapes are stripped."""
    return len(_ANSI_RE.sub("", text))
