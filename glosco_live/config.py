from __future__ import annotations
import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from .models import DrawState
from .utils.path import to_abs_path

log = logging.getLogger(__name__)

@dataclass
class CFG:
    db_path: Optional[Path] = None
    idents: List[str] = field(default_factory=list)
    history: float = 5.0          # seconds until a closed connection is fully faded
    update_period: int = 250      # ms between store polls
    fps: float = 30.0
    width: int = 1280
    height: int = 720
    font_size: int = 12
    stack_step: float = 14.0

DEFAULT_DB = "glosco.db"

# [low, high)
EPHEMERAL_PORTS = (32768, 61000)

STATE_COLOR: Dict[DrawState, str] = {
    DrawState.CONNECTIONLESS: "#00c2ff",
    DrawState.ENDED:          "#7f7f7f",
    DrawState.RESET:          "#b68900",
    DrawState.FAILED:         "#e84a5f",
    DrawState.ACTIVE:         "#29a36a",
}
LABEL_COLOR = "#e8eaed"

# keys accepted from a --config file, mapped onto CFG fields
FILE_KEYS = {
    "db": "db_path", "db_path": "db_path",
    "idents": "idents",
    "history": "history",
    "update_period": "update_period",
    "fps": "fps", "width": "width", "height": "height",
    "font_size": "font_size", "stack_step": "stack_step",
}

def load_config_file(path: Optional[str]) -> dict:
    if not path:
        return {}
    p = to_abs_path(path)
    if not p or not p.exists():
        log.warning("config not found: %s", p)
        return {}
    try:
        txt = p.read_text(encoding="utf-8")
        data = yaml.safe_load(txt) if p.suffix in (".yaml", ".yml") else json.loads(txt)
    except (OSError, ValueError, yaml.YAMLError) as e:
        log.warning("config %s unreadable: %s", p, e)
        return {}
    if not isinstance(data, dict):
        log.warning("config %s: expected a mapping, got %s", p, type(data).__name__)
        return {}
    out = {}
    for k, v in data.items():
        if k not in FILE_KEYS:
            log.warning("config %s: unknown key %r ignored", p, k)
            continue
        out[FILE_KEYS[k]] = v
    return out

def init_cfg_from_args(args) -> CFG:
    """Config file values first, explicit command line flags on top."""
    cfg = CFG()
    for k, v in load_config_file(getattr(args, "config", None)).items():
        setattr(cfg, k, v)

    db = getattr(args, "db", None) or (str(cfg.db_path) if cfg.db_path else DEFAULT_DB)
    cfg.db_path = to_abs_path(db)
    if getattr(args, "ident", None):
        cfg.idents = list(args.ident)
    cfg.idents = [str(i) for i in (cfg.idents or [])]
    for name in ("history", "update_period", "fps", "width", "height"):
        v = getattr(args, name, None)
        if v is not None:
            setattr(cfg, name, v)
    cfg.history = float(cfg.history)
    if not math.isfinite(cfg.history):
        log.warning("history %s not finite, using 5.0", cfg.history)
        cfg.history = 5.0
    if isinstance(cfg.update_period, float) and not math.isfinite(cfg.update_period):
        log.warning("update period %s not finite, using 250", cfg.update_period)
        cfg.update_period = 250
    cfg.update_period = int(cfg.update_period)
    cfg.width = int(cfg.width)
    cfg.height = int(cfg.height)
    if cfg.update_period <= 0:
        log.warning("update period %s ms not positive, using 250", cfg.update_period)
        cfg.update_period = 250
    return cfg
