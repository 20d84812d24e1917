"""Black-Scholes pricing with continuous dividend yield.

Inputs are not validated. A zero volatility or maturity divides by zero
and the resulting ``nan`` / ``inf`` is returned rather than raised, so a
half-typed parameter never takes the session down.
"""

from __future__ import annotations

import numpy as np
from scipy.stats import norm

from .core import CALL, PUT

__all__ = ["bs_price_vec", "price"]

_N = norm.cdf   # vectorised standard-normal CDF


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------
def _d1_d2(S, K, T, r, q, v):
    """Compute d1, d2 arrays.  All inputs broadcast."""
    sqrt_T = np.sqrt(T)
    v_sqrt_T = v * sqrt_T
    d1 = (np.log(S / K) + (r - q + 0.5 * v * v) * T) / v_sqrt_T
    d2 = d1 - v_sqrt_T
    return d1, d2


# ---------------------------------------------------------------------------
# Vectorised price
# ---------------------------------------------------------------------------
def bs_price_vec(S, K, T, r, q, v, kind) -> np.ndarray:
    """Vectorised Black-Scholes price.

    Parameters accept scalars or arrays; NumPy broadcasting rules apply.
    ``kind`` is a single ``"call"`` or ``"put"`` for the whole batch.

    Returns
    -------
    np.ndarray
        Option prices (same shape as broadcasted inputs).
    """
    if kind not in (CALL, PUT):
        raise ValueError(f"kind must be 'call' or 'put', got {kind!r}")
    S, K, T, r, q, v = (np.asarray(x, dtype=float) for x in (S, K, T, r, q, v))

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        d1, d2 = _d1_d2(S, K, T, r, q, v)
        disc_r = np.exp(-r * T)
        disc_q = np.exp(-q * T)
        if kind == CALL:
            return disc_q * S * _N(d1) - disc_r * K * _N(d2)
        return disc_r * K * _N(-d2) - disc_q * S * _N(-d1)


def price(S: float, K: float, T: float, r: float, q: float, v: float,
          kind: str = CALL) -> float:
    """Scalar Black-Scholes price; may be ``nan`` or ``inf`` on degenerate input."""
    return float(bs_price_vec(S, K, T, r, q, v, kind))
