from __future__ import annotations
import threading
from typing import Optional

from ..models import Frame, HostEntity, PollState

class Snapshot:
    """What the web side may read. Written by the tick thread only."""
    def __init__(self):
        self.lock = threading.Lock()
        self.frame: Frame = Frame()
        self.poll: dict = PollState().to_dict()
        self.idents: list[str] = []
        self.interest: list[str] = []
        self.store_path: Optional[str] = None
        self.store_open: bool = False
        self.hosts: dict[str, str] = {}

    def register_host(self, host: HostEntity) -> None:
        # registry callback; hosts are never removed during a session
        with self.lock:
            self.hosts[host.ident] = host.label
