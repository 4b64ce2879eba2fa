from __future__ import annotations
from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Tuple

from ..config import LABEL_COLOR, STATE_COLOR
from ..models import ConnectionRecord, DrawLabel, DrawLine, DrawState, Frame
from .classify import classify
from .decay import apply_decay
from .hosts import HostRegistry

PROTO_NAME = {1: "TCP", 2: "UDP"}

def _title(rec: ConnectionRecord, state: DrawState) -> str:
    proto = PROTO_NAME.get(rec.proto, "?")
    t = f"{rec.srchost}:{rec.srcport} → {rec.dsthost}:{rec.dstport} | {proto} {state.name}"
    if state == DrawState.FAILED:
        t += f" (kind {rec.pkind}, code {rec.pcode})"
    if rec.ident:
        t += f" | seen by {rec.ident}"
    return t

class EdgeLayout:
    def __init__(self, palette: Mapping[DrawState, str] = STATE_COLOR, font_size: int = 12,
                 stack_step: float = 14.0, label_color: str = LABEL_COLOR):
        self.palette = dict(palette)
        self.font_size = font_size
        self.stack_step = stack_step
        self.label_color = label_color

    def emit(self, rows: Iterable[ConnectionRecord], registry: HostRegistry,
             now: float, history: float) -> Frame:
        """Turn cached rows into one frame of draw commands.

        Each use of a host as an endpoint pushes that host's next draw point
        down by stack_step, so parallel edges and their port labels do not
        pile up. Offsets live only for this pass.
        """
        classified: List[Tuple[DrawState, float, ConnectionRecord]] = []
        for rec in rows:
            state, observed = classify(rec)
            if state == DrawState.NONE:
                continue
            visible, alpha = apply_decay(state, observed, now, history, rec.srcport, rec.dstport)
            if not visible:
                continue
            classified.append((state, alpha, rec))
        # stable: preferred states are drawn last, on top
        classified.sort(key=lambda t: t[0])

        used: Dict[str, int] = defaultdict(int)
        def point(ident: str) -> Tuple[float, float]:
            host = registry.resolve(ident)
            p = (host.x, host.y + used[ident] * self.stack_step)
            used[ident] += 1
            return p

        lines: List[DrawLine] = []
        labels: List[DrawLabel] = []
        for state, alpha, rec in classified:
            color = self.palette.get(state)
            if color is None:
                continue
            src = point(rec.srchost)
            dst = point(rec.dsthost)
            lines.append(DrawLine(src=src, dst=dst, color=color, alpha=alpha,
                                  state=state, title=_title(rec, state)))
            labels.append(DrawLabel(pos=src, text=str(rec.srcport), align="right",
                                    font_size=self.font_size, color=self.label_color, alpha=alpha))
            labels.append(DrawLabel(pos=dst, text=str(rec.dstport), align="left",
                                    font_size=self.font_size, color=self.label_color, alpha=alpha))
        return Frame(lines=tuple(lines), labels=tuple(labels),
                     hosts=registry.entities(), generated_at=now)
