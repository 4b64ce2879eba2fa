from __future__ import annotations
import logging
import sqlite3
from pathlib import Path
from typing import Iterable, List, Optional, Set

from ..models import ConnectionRecord

log = logging.getLogger(__name__)

class StoreError(Exception):
    pass

class StoreOpenError(StoreError):
    pass

class QueryError(StoreError):
    pass

# latest_ins is maintained by the glosco server: one row per
# (ident, srchost, srcport, dsthost, dstport, proto), the newest by instime.
LATEST_SQL = """
SELECT srchost, dsthost, srcport, dstport, pkind, pcode, close, instime, ident, proto
FROM latest_ins
WHERE NOT EXISTS (SELECT 1 FROM temp.interest)
   OR ident IN (SELECT ident FROM temp.interest)
ORDER BY ident, srchost, srcport, dsthost, dstport
"""

IDENTS_SQL = "SELECT DISTINCT ident FROM state WHERE ident IS NOT NULL ORDER BY ident"

class QuerySource:
    """Read side of a glosco store.

    A missing store file is not an error: the source stays closed and every
    query answers with nothing until open()/reopen() finds the file.
    """

    def __init__(self):
        self.path: Optional[Path] = None
        self.conn: Optional[sqlite3.Connection] = None
        self.interest: Set[str] = set()

    @property
    def is_open(self) -> bool:
        return self.conn is not None

    def open(self, path: str | Path) -> bool:
        path = Path(path)
        if self.conn is not None and path == self.path:
            return True
        self.close()
        self.path = path
        return self._connect()

    def reopen(self) -> bool:
        self.close()
        if self.path is None:
            return False
        return self._connect()

    def _connect(self) -> bool:
        if not self.path.exists():
            log.info("store %s does not exist (yet)", self.path)
            return False
        conn = None
        try:
            # opened from the tick thread, never shared
            conn = sqlite3.connect(str(self.path), check_same_thread=False)
            conn.row_factory = sqlite3.Row
            mode = conn.execute("PRAGMA journal_mode=WAL").fetchone()[0]
            if str(mode).lower() != "wal":
                log.warning("store %s: journal_mode is %s, not wal", self.path, mode)
            conn.execute("CREATE TEMP TABLE IF NOT EXISTS interest (ident TEXT PRIMARY KEY)")
            self.conn = conn
            self._write_interest()
        except sqlite3.Error as e:
            if conn is not None:
                conn.close()
            self.conn = None
            raise StoreOpenError(f"cannot open store {self.path}: {e}") from e
        log.info("store %s opened", self.path)
        return True

    def close(self) -> None:
        if self.conn is not None:
            try:
                self.conn.close()
            except sqlite3.Error as e:
                log.debug("closing store %s: %s", self.path, e)
            self.conn = None

    def set_interest(self, idents: Iterable[str]) -> None:
        self.interest = {str(i) for i in idents}
        if self.conn is not None:
            try:
                self._write_interest()
            except sqlite3.Error as e:
                raise QueryError(f"cannot write interest filter: {e}") from e

    def _write_interest(self) -> None:
        with self.conn:
            self.conn.execute("DELETE FROM temp.interest")
            self.conn.executemany(
                "INSERT OR IGNORE INTO temp.interest (ident) VALUES (?)",
                [(i,) for i in sorted(self.interest)])

    def query_latest(self) -> List[ConnectionRecord]:
        if self.conn is None:
            return []
        try:
            rows = self.conn.execute(LATEST_SQL).fetchall()
        except sqlite3.Error as e:
            raise QueryError(f"latest query failed: {e}") from e
        return [ConnectionRecord.from_row(r) for r in rows]

    def list_idents(self) -> List[str]:
        if self.conn is None:
            return []
        try:
            return [str(r[0]) for r in self.conn.execute(IDENTS_SQL).fetchall()]
        except sqlite3.Error as e:
            raise QueryError(f"ident listing failed: {e}") from e
