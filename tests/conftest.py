from __future__ import annotations
import sqlite3
from pathlib import Path

import pytest

# same layout the glosco server creates
SCHEMA = """
CREATE TABLE IF NOT EXISTS state
(instime, conntime, ident, peer, srchost, srcport, dsthost, dstport, proto, close, pkind, pcode);
CREATE INDEX IF NOT EXISTS state_ident ON state (ident);
CREATE VIEW IF NOT EXISTS latest_ins AS
SELECT max(instime), * FROM state
GROUP BY ident, srchost, srcport, dsthost, dstport, proto;
"""

class FakeStore:
    def __init__(self, path: Path):
        self.path = path
        with sqlite3.connect(str(path)) as db:
            db.executescript(SCHEMA)

    def insert(self, srchost="10.0.0.1", dsthost="10.0.0.2", srcport=40000, dstport=80,
               ident="web", instime=1000.0, close=None, pkind=None, pcode=None, proto=1):
        with sqlite3.connect(str(self.path)) as db:
            db.execute(
                "INSERT INTO state (instime, conntime, ident, peer, srchost, srcport, dsthost, dstport,"
                " proto, close, pkind, pcode) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (instime, instime, ident, "peer", srchost, srcport, dsthost, dstport,
                 proto, close, pkind, pcode))

@pytest.fixture
def store(tmp_path) -> FakeStore:
    return FakeStore(tmp_path / "glosco.db")
