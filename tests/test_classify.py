from types import SimpleNamespace

import pytest

from glosco_live.models import CloseReason, ConnectionRecord, DrawState
from glosco_live.topology.classify import classify

def rec(**kw):
    base = dict(srchost="a", dsthost="b", srcport=1234, dstport=80, instime=100.0)
    base.update(kw)
    return ConnectionRecord(**base)

@pytest.mark.parametrize("close", [None, 1, 2, 3, 4, 99])
def test_pkind_wins_over_close(close):
    assert classify(rec(pkind=3, close=close)) == (DrawState.FAILED, 100.0)

@pytest.mark.parametrize("close, state", [
    (CloseReason.NORMAL, DrawState.ENDED),
    (CloseReason.TIMEOUT, DrawState.ENDED),
    (CloseReason.RESET, DrawState.RESET),
    (CloseReason.CONNECTIONLESS, DrawState.CONNECTIONLESS),
])
def test_close_reasons(close, state):
    assert classify(rec(close=int(close))) == (state, 100.0)

def test_zero_pkind_is_not_failure():
    assert classify(rec(pkind=0, close=2)) == (DrawState.RESET, 100.0)

def test_open_connection_is_active_without_time():
    assert classify(rec()) == (DrawState.ACTIVE, 0.0)

def test_unknown_close_reason_is_active():
    assert classify(rec(close=42)) == (DrawState.ACTIVE, 0.0)

def test_malformed_rows_fail_closed():
    assert classify(SimpleNamespace()) == (DrawState.ACTIVE, 0.0)
    assert classify(rec(pkind=1, instime=None)) == (DrawState.ACTIVE, 0.0)
    assert classify(SimpleNamespace(pkind=None, close="junk", instime=5)) == (DrawState.ACTIVE, 0.0)

def test_never_none():
    for close in (None, 1, 2, 3, 4):
        for pkind in (None, 0, 1):
            state, _ = classify(rec(close=close, pkind=pkind))
            assert state != DrawState.NONE

def test_from_row_tolerates_missing_columns():
    r = ConnectionRecord.from_row({"srchost": "h1", "dstport": "443"})
    assert r.srchost == "h1"
    assert r.dsthost == "?"
    assert r.dstport == 443
    assert r.close is None and r.pkind is None and r.instime is None
    assert classify(r) == (DrawState.ACTIVE, 0.0)
