import random

import pytest

from glosco_live.config import CFG, STATE_COLOR
from glosco_live.scheduler import RenderScheduler
from glosco_live.store import QuerySource
from glosco_live.topology import EdgeLayout, HostRegistry
from glosco_live.web import create_app

@pytest.fixture
def sched(store):
    store.insert(srchost="a", dsthost="b", ident="web")
    store.insert(srchost="c", dsthost="d", ident="dns", srcport=41000, dstport=53)
    s = RenderScheduler(QuerySource(), HostRegistry(640, 480, rng=random.Random(3)),
                        EdgeLayout(STATE_COLOR))
    s.open_store(store.path)
    s.tick(now=1.0)
    return s

@pytest.fixture
def client(sched):
    app = create_app(CFG(width=640, height=480), sched)
    app.testing = True
    return app.test_client()

def test_index_page(client):
    r = client.get("/")
    assert r.status_code == 200
    assert b'width="640"' in r.data and b'height="480"' in r.data

def test_frame(client):
    data = client.get("/api/frame").get_json()
    assert len(data["lines"]) == 2
    assert len(data["labels"]) == 4
    assert {h["id"] for h in data["hosts"]} == {"a", "b", "c", "d"}
    assert data["lines"][0]["state"] == "ACTIVE"
    assert data["lines"][0]["alpha"] == 1.0

def test_idents_and_status(client):
    assert client.get("/api/idents").get_json() == {"idents": ["dns", "web"], "interest": []}
    status = client.get("/api/status").get_json()
    assert status["store"]["open"] is True
    assert status["poll"]["rows"] == 2
    assert status["poll"]["update_period"] == 250
    assert status["hosts"] == 4

def test_interest_is_queued_for_tick(client, sched):
    r = client.post("/api/interest", json={"idents": ["dns"]})
    assert r.get_json() == {"ok": True, "interest": ["dns"]}
    sched.tick(now=1.01)
    assert [r.ident for r in sched.poll.rows] == ["dns"]
    assert client.get("/api/idents").get_json()["interest"] == ["dns"]

def test_interest_rejects_bad_payload(client):
    r = client.post("/api/interest", json={"idents": "dns"})
    assert r.status_code == 400
    assert r.get_json()["ok"] is False

def test_config(client, sched):
    assert client.post("/api/config", json={"history": 2.0, "update_period": 500}).status_code == 200
    sched.tick(now=1.01)
    assert sched.poll.history == 2.0
    assert sched.poll.update_period == 500

@pytest.mark.parametrize("body", [{"update_period": 0}, {"history": "soon"}, {"update_period": [1]}])
def test_config_rejects_bad_values(client, sched, body):
    assert client.post("/api/config", json=body).status_code == 400
    assert sched.requests.empty()

def test_move_host(client, sched):
    r = client.post("/api/hosts/a/position", json={"x": 5, "y": 6})
    assert r.status_code == 200
    sched.tick(now=1.01)
    assert sched.registry.get("a").pos == (5.0, 6.0)

def test_move_unknown_or_bad(client):
    assert client.post("/api/hosts/zz/position", json={"x": 1, "y": 1}).status_code == 404
    assert client.post("/api/hosts/a/position", json={"x": "left"}).status_code == 400

def test_store_reopen_defaults_to_current_path(client, sched, store):
    r = client.post("/api/store", json={})
    assert r.get_json() == {"ok": True, "path": str(store.path)}
    conn = sched.source.conn
    sched.tick(now=1.01)
    assert sched.source.is_open
    assert sched.source.conn is not conn

@pytest.mark.parametrize("raw", ['{"update_period": 1e999}', '{"history": NaN}', '{"history": -Infinity}'])
def test_config_rejects_non_finite_numbers(client, sched, raw):
    r = client.post("/api/config", data=raw, content_type="application/json")
    assert r.status_code == 400
    assert sched.requests.empty()

@pytest.mark.parametrize("path", [5, ["x.db"], {"p": 1}])
def test_store_rejects_non_string_path(client, sched, path):
    r = client.post("/api/store", json={"path": path})
    assert r.status_code == 400
    assert sched.requests.empty()

def test_move_rejects_non_finite_position(client, sched):
    r = client.post("/api/hosts/a/position", data='{"x": NaN, "y": 1}', content_type="application/json")
    assert r.status_code == 400
    assert sched.requests.empty()

def test_frame_lines_carry_tooltip_and_page_shows_it(client):
    titles = [l["title"] for l in client.get("/api/frame").get_json()["lines"]]
    assert any(t.startswith("a:") and "TCP ACTIVE" in t and "seen by web" in t for t in titles)
    assert b"canvas.title" in client.get("/").data

def test_status_hosts_follow_registry(client, sched, store):
    assert client.get("/api/status").get_json()["hosts"] == 4
    store.insert(srchost="e", dsthost="a", ident="web", srcport=40001)
    sched.tick(now=2.0)
    assert client.get("/api/status").get_json()["hosts"] == 5
    assert client.post("/api/hosts/e/position", json={"x": 1, "y": 2}).status_code == 200
