from __future__ import annotations
import logging
import math
import queue
import threading
import time
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional

from ..models import Frame, PollState
from ..store.source import QuerySource, QueryError, StoreError, StoreOpenError
from ..topology.hosts import HostRegistry
from ..topology.layout import EdgeLayout
from ..topology.snapshot import Snapshot

log = logging.getLogger(__name__)

class SchedulerState(Enum):
    IDLE = "idle"
    POLLING = "polling"

def check_update_period(ms) -> int:
    if isinstance(ms, float) and not math.isfinite(ms):
        raise ValueError(f"update period must be finite, got {ms}")
    ms = int(ms)
    if ms <= 0:
        raise ValueError(f"update period must be positive, got {ms} ms")
    return ms

def check_history(seconds) -> float:
    # <= 0 is accepted and means "closed connections are faded at once"
    seconds = float(seconds)
    if not math.isfinite(seconds):
        raise ValueError(f"history must be a finite number of seconds, got {seconds}")
    return seconds

class RenderScheduler:
    """Poll-then-redraw cycle, driven by tick() from a single thread.

    Other threads must go through the request_* methods; those are queued and
    applied at the start of the next tick.
    """

    def __init__(self, source: QuerySource, registry: HostRegistry, layout: EdgeLayout,
                 snap: Optional[Snapshot] = None, history: float = 5.0,
                 update_period: int = 250, clock: Callable[[], float] = time.time):
        self.source = source
        self.registry = registry
        self.layout = layout
        self.snap = snap or Snapshot()
        if self.registry.on_create is None:
            self.registry.on_create = self.snap.register_host
        self.clock = clock
        self.poll = PollState(history=check_history(history),
                              update_period=check_update_period(update_period))
        self.state = SchedulerState.IDLE
        self.frame = Frame()
        self.idents: list[str] = []
        self.requests: "queue.Queue[tuple]" = queue.Queue()

    # -- direct API (tick thread) ------------------------------------------

    def open_store(self, path: str | Path, force: bool = False) -> bool:
        switched = self.source.path != Path(path)
        try:
            if force and not switched:
                ok = self.source.reopen()
            else:
                ok = self.source.open(path)
        except StoreOpenError as e:
            log.error("%s", e)
            ok = False
        self.poll.next_poll = 0.0
        self._refresh_idents()
        if switched and not ok:
            # rows of the old store would otherwise stay drawn with nothing polling
            self.poll.rows = ()
            self.idents = []
            self.redraw()
        else:
            self.publish()
        return ok

    def set_interest(self, idents: Iterable[str]) -> None:
        self.source.set_interest(idents)
        self.poll.next_poll = 0.0
        log.info("interest: %s", sorted(self.source.interest) or "all idents")
        self.redraw()

    def set_history(self, seconds: float) -> None:
        self.poll.history = check_history(seconds)
        self.redraw()

    def set_update_period(self, ms: int) -> None:
        self.poll.update_period = check_update_period(ms)
        # a forced poll (next_poll == 0) stays forced
        if self.poll.last_poll is not None and self.poll.next_poll > 0:
            self.poll.next_poll = self.poll.last_poll + self.poll.update_period / 1000.0
        self.publish()

    def move_host(self, ident: str, x: float, y: float) -> bool:
        if not self.registry.move(ident, x, y):
            return False
        self.redraw()
        return True

    # -- cross-thread requests ---------------------------------------------

    def request_interest(self, idents: Iterable[str]) -> None:
        self.requests.put((self.set_interest, (list(idents),)))

    def request_config(self, history: Optional[float] = None,
                       update_period: Optional[int] = None) -> None:
        if history is not None:
            history = check_history(history)
        if update_period is not None:
            update_period = check_update_period(update_period)
        if history is not None:
            self.requests.put((self.set_history, (history,)))
        if update_period is not None:
            self.requests.put((self.set_update_period, (update_period,)))

    def request_open(self, path: str | Path) -> None:
        self.requests.put((self.open_store, (path, True)))

    def request_move(self, ident: str, x: float, y: float) -> None:
        self.requests.put((self.move_host, (ident, float(x), float(y))))

    def _drain(self) -> None:
        while True:
            try:
                fn, args = self.requests.get_nowait()
            except queue.Empty:
                return
            try:
                fn(*args)
            except (StoreError, ValueError) as e:
                log.warning("request %s%r failed: %s", fn.__name__, args, e)

    # -- cycle ---------------------------------------------------------------

    def tick(self, now: Optional[float] = None) -> bool:
        """One frame of the host loop. Returns True if a poll succeeded."""
        self._drain()
        if self.state is SchedulerState.POLLING:
            return False
        now = self.clock() if now is None else now
        if not self.source.is_open or now < self.poll.next_poll:
            return False

        self.state = SchedulerState.POLLING
        try:
            rows = self.source.query_latest()
        except QueryError as e:
            # keep the old rows, try again on the next tick
            self.poll.failures += 1
            self.poll.last_error = str(e)
            if self.poll.failures == 1:
                log.warning("%s (retrying every tick)", e)
            else:
                log.debug("%s (failure #%d)", e, self.poll.failures)
            self.publish()
            return False
        finally:
            self.state = SchedulerState.IDLE

        if self.poll.failures:
            log.info("store query recovered after %d failures", self.poll.failures)
        self.poll.rows = tuple(rows)
        self.poll.last_poll = now
        self.poll.next_poll = now + self.poll.update_period / 1000.0
        self.poll.failures = 0
        self.poll.last_error = None
        self._refresh_idents()
        self.redraw(now)
        return True

    def redraw(self, now: Optional[float] = None) -> Frame:
        now = self.clock() if now is None else now
        self.frame = self.layout.emit(self.poll.rows, self.registry, now, self.poll.history)
        self.publish()
        return self.frame

    def _refresh_idents(self) -> None:
        try:
            self.idents = self.source.list_idents()
        except QueryError as e:
            log.debug("%s", e)

    def publish(self) -> None:
        with self.snap.lock:
            self.snap.frame = self.frame
            self.snap.poll = self.poll.to_dict()
            self.snap.idents = list(self.idents)
            self.snap.interest = sorted(self.source.interest)
            self.snap.store_path = str(self.source.path) if self.source.path else None
            self.snap.store_open = self.source.is_open

def run_tick_loop(scheduler: RenderScheduler, fps: float = 30.0,
                  stop: Optional[threading.Event] = None) -> None:
    stop = stop or threading.Event()
    delay = 1.0 / fps if fps > 0 else 1.0 / 30
    while not stop.is_set():
        try:
            scheduler.tick()
        except Exception:
            log.exception("tick failed")
        stop.wait(delay)
