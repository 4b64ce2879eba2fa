from __future__ import annotations
import math
from typing import Tuple

from ..config import EPHEMERAL_PORTS
from ..models import DrawState

MAX_FADE = 0.9

def is_ephemeral(port: int) -> bool:
    lo, hi = EPHEMERAL_PORTS
    return lo <= port < hi

def fade_of(observed: float, now: float, history: float) -> float:
    if history <= 0:
        return math.inf
    return (now - observed) / history

def apply_decay(state: DrawState, observed: float, now: float, history: float,
                srcport: int, dstport: int) -> Tuple[bool, float]:
    """Return (visible, alpha) for a classified row.

    Closed and failed rows fade over `history` seconds down to 0.1. Once
    fully faded, rows touching an ephemeral port are dropped.
    """
    if state == DrawState.NONE:
        return False, 0.0
    if state == DrawState.ACTIVE:
        return True, 1.0
    fade = fade_of(observed, now, history)
    if fade > 1.0 and (is_ephemeral(srcport) or is_ephemeral(dstport)):
        return False, 0.0
    return True, 1.0 - min(max(fade, 0.0), MAX_FADE)
