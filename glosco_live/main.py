from __future__ import annotations
import argparse, logging, threading
from .config import CFG, STATE_COLOR, init_cfg_from_args
from .scheduler import RenderScheduler, run_tick_loop
from .store import QuerySource
from .topology import EdgeLayout, HostRegistry, Snapshot
from .web import create_app

def parse_args(argv=None):
    ap = argparse.ArgumentParser(description='Live map of connection states from a glosco store')
    ap.add_argument('--db', type=str, default=None, help='glosco sqlite store (default glosco.db)')
    ap.add_argument('--port', type=int, default=8765)
    ap.add_argument('--history', type=float, default=None, help='seconds until closed connections are fully faded (default 5.0)')
    ap.add_argument('--update-period', type=int, default=None, help='ms between store polls (default 250)')
    ap.add_argument('--ident', action='append', default=None, help='only show connections seen by this ident; repeatable')
    ap.add_argument('--config', type=str, default=None, help='YAML or JSON file with the same settings')
    ap.add_argument('--fps', type=float, default=None, help='tick rate of the poll/redraw loop')
    ap.add_argument('--width', type=int, default=None)
    ap.add_argument('--height', type=int, default=None)
    ap.add_argument('--log-level', type=str, default='INFO')
    return ap.parse_args(argv)

def build(cfg: CFG) -> RenderScheduler:
    snap = Snapshot()
    registry = HostRegistry(cfg.width, cfg.height)
    layout = EdgeLayout(STATE_COLOR, font_size=cfg.font_size, stack_step=cfg.stack_step)
    sched = RenderScheduler(QuerySource(), registry, layout, snap,
                            history=cfg.history, update_period=cfg.update_period)
    sched.set_interest(cfg.idents)
    sched.open_store(cfg.db_path)
    return sched

def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    cfg = init_cfg_from_args(args)

    sched = build(cfg)
    if not sched.source.is_open:
        logging.getLogger(__name__).warning("store %s not available; use re-open once it exists", cfg.db_path)

    t = threading.Thread(target=run_tick_loop, args=(sched, cfg.fps), daemon=True)
    t.start()

    app = create_app(cfg, sched)
    print(f"[*] Serving on http://localhost:{args.port}")
    app.run(host='0.0.0.0', port=args.port, debug=False, use_reloader=False)

if __name__ == '__main__':
    main()
