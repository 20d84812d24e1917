"""Spot × volatility sweep behind the two heatmaps.

Rows sweep the spot price, columns sweep volatility.  Both surfaces come
out of one :func:`compute_surfaces` call and are handed around together
as a :class:`Surfaces`, so a call matrix is never paired with a put
matrix from different parameters.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import numpy as np

from .black_scholes import bs_price_vec
from .core import CALL, PUT, Params

__all__ = [
    "GRID_SIZE",
    "VOL_FLOOR",
    "Surfaces",
    "spot_axis",
    "vol_axis",
    "scenario_grid",
    "compute_surfaces",
]

logger = logging.getLogger(__name__)

GRID_SIZE = 20
VOL_FLOOR = 0.01


@dataclass(frozen=True)
class Surfaces:
    """Call and put price matrices over the same (spot, vol) grid."""
    spots: np.ndarray
    vols: np.ndarray
    call: np.ndarray
    put: np.ndarray

    @property
    def shape(self) -> tuple[int, int]:
        return self.call.shape


# ---------------------------------------------------------------------------
# Axes
# ---------------------------------------------------------------------------

def spot_axis(S: float, n: int = GRID_SIZE) -> np.ndarray:
    """``n`` spots from 80% to 120% of ``S``, both ends included."""
    return np.linspace(0.8 * S, 1.2 * S, n)


def vol_axis(v: float, n: int = GRID_SIZE) -> np.ndarray:
    """``n`` vols from ``max(0.8 v, VOL_FLOOR)`` to ``1.4 v``, both ends included.

    Only the low end is floored.  For ``v <= 0`` the sweep runs backwards
    (or collapses) and is returned as such.
    """
    return np.linspace(max(0.8 * v, VOL_FLOOR), 1.4 * v, n)


# ---------------------------------------------------------------------------
# Scenario grid
# ---------------------------------------------------------------------------

def scenario_grid(
    pricer_func: Callable[..., np.ndarray],
    K: float,
    T: float,
    r: float,
    q: float,
    kind: str,
    spot_range: np.ndarray,
    vol_range: np.ndarray,
) -> np.ndarray:
    """Evaluate a broadcasting pricer across a 2-D (spot × vol) grid.

    Parameters
    ----------
    pricer_func : callable
        ``pricer_func(S, K, T, r, q, sigma, kind)``; must broadcast over
        array-valued ``S`` and ``sigma``.
    spot_range : array, shape (n_spot,)
        Spot values, one per row.
    vol_range : array, shape (n_vol,)
        Volatility values, one per column.

    Returns
    -------
    np.ndarray
        Prices, shape n_spot×n_vol.
    """
    spot_range = np.asarray(spot_range, dtype=float)
    vol_range = np.asarray(vol_range, dtype=float)
    shape = (len(spot_range), len(vol_range))

    prices = pricer_func(spot_range[:, None], K, T, r, q, vol_range[None, :], kind)
    return np.array(np.broadcast_to(prices, shape), dtype=float)


def compute_surfaces(params: Params, n: int = GRID_SIZE) -> Surfaces:
    """Price the full call and put surfaces for ``params``."""
    S, K, T, r, q, v = params.as_tuple()
    spots = spot_axis(S, n)
    vols = vol_axis(v, n)

    call = scenario_grid(bs_price_vec, K, T, r, q, CALL, spots, vols)
    put = scenario_grid(bs_price_vec, K, T, r, q, PUT, spots, vols)

    logger.debug(
        "recomputed %dx%d surfaces: S=%g K=%g T=%g r=%g q=%g v=%g",
        n, n, S, K, T, r, q, v,
    )
    return Surfaces(spots=spots, vols=vols, call=call, put=put)
