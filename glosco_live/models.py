from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Mapping, Optional, Tuple

class CloseReason(IntEnum):
    # numbers as written by the glosco server
    NORMAL = 1
    RESET = 2
    CONNECTIONLESS = 3
    TIMEOUT = 4

class DrawState(IntEnum):
    # later members win when the same connection could be drawn twice
    NONE = 0
    CONNECTIONLESS = 1
    ENDED = 2
    RESET = 3
    FAILED = 4
    ACTIVE = 5

def _opt_int(v: Any) -> Optional[int]:
    if v is None:
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None

@dataclass(frozen=True)
class ConnectionRecord:
    srchost: str
    dsthost: str
    srcport: int
    dstport: int
    pkind: Optional[int] = None
    close: Optional[int] = None
    instime: Optional[float] = None
    ident: str = ""
    pcode: Optional[int] = None
    proto: Optional[int] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ConnectionRecord":
        """Build a record from a store row (sqlite3.Row or dict).

        Missing columns become None; the classifier treats such rows as active.
        """
        keys = set(row.keys())
        def get(name: str) -> Any:
            return row[name] if name in keys else None
        instime = get("instime")
        try:
            instime = float(instime) if instime is not None else None
        except (TypeError, ValueError):
            instime = None
        return cls(
            srchost=str(get("srchost") or "?"),
            dsthost=str(get("dsthost") or "?"),
            srcport=_opt_int(get("srcport")) or 0,
            dstport=_opt_int(get("dstport")) or 0,
            pkind=_opt_int(get("pkind")),
            close=_opt_int(get("close")),
            instime=instime,
            ident=str(get("ident") or ""),
            pcode=_opt_int(get("pcode")),
            proto=_opt_int(get("proto")),
        )

@dataclass
class HostEntity:
    ident: str
    label: str
    x: float
    y: float

    @property
    def pos(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_dict(self) -> dict:
        return {'id': self.ident, 'label': self.label, 'x': self.x, 'y': self.y}

@dataclass
class PollState:
    history: float = 5.0
    update_period: int = 250
    last_poll: Optional[float] = None
    next_poll: float = 0.0
    rows: Tuple[ConnectionRecord, ...] = ()
    last_error: Optional[str] = None
    failures: int = 0

    def to_dict(self) -> dict:
        return {
            'history': self.history,
            'update_period': self.update_period,
            'last_poll': self.last_poll,
            'next_poll': self.next_poll,
            'rows': len(self.rows),
            'last_error': self.last_error,
            'failures': self.failures,
        }

@dataclass(frozen=True)
class DrawLine:
    src: Tuple[float, float]
    dst: Tuple[float, float]
    color: str
    alpha: float
    state: DrawState
    title: str = ""

    def to_dict(self) -> dict:
        return {
            'from': list(self.src), 'to': list(self.dst),
            'color': self.color, 'alpha': self.alpha,
            'state': self.state.name, 'title': self.title,
        }

@dataclass(frozen=True)
class DrawLabel:
    pos: Tuple[float, float]
    text: str
    align: str
    font_size: int
    color: str
    alpha: float = 1.0

    def to_dict(self) -> dict:
        return {
            'pos': list(self.pos), 'text': self.text, 'align': self.align,
            'font_size': self.font_size, 'color': self.color, 'alpha': self.alpha,
        }

@dataclass(frozen=True)
class Frame:
    lines: Tuple[DrawLine, ...] = ()
    labels: Tuple[DrawLabel, ...] = ()
    hosts: Tuple[HostEntity, ...] = ()
    generated_at: float = 0.0

    def to_dict(self) -> dict:
        return {
            'lines': [l.to_dict() for l in self.lines],
            'labels': [l.to_dict() for l in self.labels],
            'hosts': [h.to_dict() for h in self.hosts],
            'generated_at': self.generated_at,
        }
