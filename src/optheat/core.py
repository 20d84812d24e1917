from __future__ import annotations
from dataclasses import dataclass, fields


CALL = "call"
PUT  = "put"


# ---------------------------------------------------------------------------
# Session parameters
# ---------------------------------------------------------------------------
@dataclass
class Params:
    """The six inputs of the pricer, as edited in the session.

    Nothing here is validated: the user
    may type zero or negative values and the pricer propagates whatever
    falls out (``nan`` / ``inf``).

    Parameters
    ----------
    S : float
        Spot price.
    K : float
        Strike price.
    T : float
        Time to maturity in years.
    r : float
        Continuously-compounded risk-free rate.
    q : float
        Continuous dividend yield.
    v : float
        Volatility.
    """
    S: float = 100.0
    K: float = 100.0
    T: float = 1.0
    r: float = 0.05
    q: float = 0.02
    v: float = 0.2

    def as_tuple(self) -> tuple[float, float, float, float, float, float]:
        return (self.S, self.K, self.T, self.r, self.q, self.v)


# Field order is the focus order of the interface.
FIELD_NAMES = tuple(f.name for f in fields(Params))

FIELD_LABELS = {
    "S": "S (spot)",
    "K": "K (strike)",
    "T": "T (maturity)",
    "r": "r (risk-free rate)",
    "q": "q (dividend yield)",
    "v": "v (volatility)",
}

DEFAULT_PARAMS = Params()


def format_value(x: float) -> str:
    """Shortest text that parses back to exactly ``x``; ``100.0`` shows as ``100``."""
    s = repr(float(x))
    return s[:-2] if s.endswith(".0") else s
