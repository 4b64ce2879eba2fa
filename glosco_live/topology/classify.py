from __future__ import annotations
import logging
from typing import Tuple

from ..models import CloseReason, DrawState

log = logging.getLogger(__name__)

CLOSE_STATE = {
    CloseReason.CONNECTIONLESS: DrawState.CONNECTIONLESS,
    CloseReason.RESET: DrawState.RESET,
    CloseReason.NORMAL: DrawState.ENDED,
    CloseReason.TIMEOUT: DrawState.ENDED,
}

def classify(record) -> Tuple[DrawState, float]:
    """Map a store row to (state, observed time).

    pkind wins over close. Active rows report an observed time of 0 since
    they never fade. Anything that does not parse is drawn as active.
    """
    try:
        if record.pkind:
            return DrawState.FAILED, float(record.instime)
        if record.close is not None:
            state = CLOSE_STATE.get(int(record.close))
            if state is None:
                log.debug("unknown close reason %r, drawing as active", record.close)
                return DrawState.ACTIVE, 0.0
            return state, float(record.instime)
    except (AttributeError, TypeError, ValueError) as e:
        log.debug("malformed row %r: %s", record, e)
    return DrawState.ACTIVE, 0.0
