# optheat — Black-Scholes sensitivity heatmaps in the terminal
# Public API

# Data model
from .core import Params, CALL, PUT, DEFAULT_PARAMS, format_value

# Pricing
from .black_scholes import price, bs_price_vec

# Grid engine
from .grid import Surfaces, compute_surfaces, scenario_grid, spot_axis, vol_axis

# Rendering
from .heatmap import render_heatmap
from .view import render

# Interactive session
from .session import Event, EventKind, Navigating, Editing, Session

__all__ = [
    # Data model
    "Params", "CALL", "PUT", "DEFAULT_PARAMS", "format_value",
    # Pricing
    "price", "bs_price_vec",
    # Grid engine
    "Surfaces", "compute_surfaces", "scenario_grid", "spot_axis", "vol_axis",
    # Rendering
    "render_heatmap", "render",
    # Session
    "Event", "EventKind", "Navigating", "Editing", "Session",
]

__version__ = "0.1.0"
