from __future__ import annotations
import math

import orjson
from flask import Flask, Response, current_app, jsonify, request

from ..config import CFG
from ..scheduler import RenderScheduler
from .ui import render_html

def dumps(obj) -> str:
    return orjson.dumps(obj).decode()

def _bad(msg: str, code: int = 400):
    current_app.logger.warning("bad request on %s: %s", request.path, msg)
    return jsonify({"ok": False, "error": msg}), code

def _body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}

def create_app(cfg: CFG, scheduler: RenderScheduler) -> Flask:
    app = Flask(__name__)
    snap = scheduler.snap

    @app.get("/")
    def index():
        return Response(render_html(cfg.width, cfg.height, cfg.update_period), mimetype="text/html")

    @app.get("/api/frame")
    def api_frame():
        with snap.lock:
            frame = snap.frame
        return Response(dumps(frame.to_dict()), mimetype="application/json")

    @app.get("/api/idents")
    def api_idents():
        with snap.lock:
            data = {"idents": list(snap.idents), "interest": list(snap.interest)}
        return Response(dumps(data), mimetype="application/json")

    @app.get("/api/status")
    def api_status():
        with snap.lock:
            data = {
                "store": {"path": snap.store_path, "open": snap.store_open},
                "poll": dict(snap.poll),
                "interest": list(snap.interest),
                "hosts": len(snap.hosts),
            }
        return Response(dumps(data), mimetype="application/json")

    @app.post("/api/interest")
    def api_interest():
        idents = _body().get("idents")
        if idents is None:
            idents = []
        if not isinstance(idents, list) or not all(isinstance(i, str) for i in idents):
            return _bad("idents must be a list of strings")
        scheduler.request_interest(idents)
        return jsonify({"ok": True, "interest": sorted(set(idents))})

    @app.post("/api/config")
    def api_config():
        body = _body()
        try:
            scheduler.request_config(history=body.get("history"),
                                     update_period=body.get("update_period"))
        except (TypeError, ValueError) as e:
            return _bad(str(e))
        return jsonify({"ok": True})

    @app.post("/api/store")
    def api_store():
        body = _body()
        path = body.get("path") if "path" in body else request.args.get("path")
        if path is not None and not isinstance(path, str):
            return _bad("path must be a string")
        if not path:
            with snap.lock:
                path = snap.store_path
        if not path:
            return _bad("no store path given")
        scheduler.request_open(path)
        current_app.logger.info("store re-open requested: %s", path)
        return jsonify({"ok": True, "path": path})

    @app.post("/api/hosts/<path:ident>/position")
    def api_move(ident):
        body = _body()
        try:
            x, y = float(body["x"]), float(body["y"])
        except (KeyError, TypeError, ValueError):
            return _bad("x and y must be numbers")
        if not (math.isfinite(x) and math.isfinite(y)):
            return _bad("x and y must be finite")
        with snap.lock:
            known = ident in snap.hosts
        if not known:
            return _bad(f"unknown host {ident}", 404)
        scheduler.request_move(ident, x, y)
        return jsonify({"ok": True})

    return app
