from __future__ import annotations
import logging
import random
from dataclasses import replace
from typing import Callable, Dict, Iterator, Optional, Tuple

from ..models import HostEntity

log = logging.getLogger(__name__)

class HostRegistry:
    """Host identifier -> HostEntity, grown lazily and never shrunk.

    A host gets a random position once, when first seen. After that only
    move() (a user drag) changes it.
    """

    def __init__(self, width: int, height: int, rng: Optional[random.Random] = None,
                 on_create: Optional[Callable[[HostEntity], None]] = None):
        self.width = width
        self.height = height
        self.rng = rng or random.Random()
        self.on_create = on_create
        self._hosts: Dict[str, HostEntity] = {}

    def resolve(self, ident: str) -> HostEntity:
        host = self._hosts.get(ident)
        if host is not None:
            return host
        host = HostEntity(ident=ident, label=ident,
                          x=self.rng.uniform(0, self.width),
                          y=self.rng.uniform(0, self.height))
        self._hosts[ident] = host
        log.debug("new host %s at (%.0f, %.0f)", ident, host.x, host.y)
        if self.on_create:
            self.on_create(host)
        return host

    def get(self, ident: str) -> Optional[HostEntity]:
        return self._hosts.get(ident)

    def move(self, ident: str, x: float, y: float) -> bool:
        host = self._hosts.get(ident)
        if host is None:
            return False
        host.x, host.y = float(x), float(y)
        return True

    def entities(self) -> Tuple[HostEntity, ...]:
        return tuple(replace(h) for h in self._hosts.values())

    def __contains__(self, ident: str) -> bool:
        return ident in self._hosts

    def __len__(self) -> int:
        return len(self._hosts)

    def __iter__(self) -> Iterator[HostEntity]:
        return iter(self._hosts.values())
