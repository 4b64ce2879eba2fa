from .snapshot import Snapshot
from .hosts import HostRegistry
from .layout import EdgeLayout
