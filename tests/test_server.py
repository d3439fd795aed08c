import time

import pytest

from dalfox.models import Options, PoC, Scan
from dalfox.server import contains, create_app, server_address


def _never_called(url, options, sid):
    raise AssertionError("scanner should not run")


def _wait_for(store, key, timeout=5.0):
    deadline = time.monotonic() + timeout
    while key not in store and time.monotonic() < deadline:
        time.sleep(0.01)
    return store.get(key)


@pytest.mark.parametrize(
    "items, item, expected",
    [(["a", "b", "c"], "b", True), (["a", "b", "c"], "d", False)],
)
def test_contains(items, item, expected):
    assert contains(items, item) is expected


def test_server_address():
    options = Options(server_host="localhost", server_port=6664)
    assert server_address(options) == "localhost:6664"


def test_scan_handler_unknown_id():
    options = Options(
        scan={"test-scan": Scan(url="http://example.com", results=[PoC(type="finish")])}
    )
    client = create_app(options, ["test-scan"], _never_called).test_client()
    resp = client.get("/scan/other-scan")
    assert resp.status_code == 404
    assert "Not found" in resp.get_json()["msg"]


def test_scan_handler_finished():
    options = Options(
        scan={"test-scan": Scan(url="http://example.com", results=[PoC(type="finish")])}
    )
    client = create_app(options, ["test-scan"], _never_called).test_client()
    resp = client.get("/scan/test-scan")
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["msg"] == "finish"
    assert body["data"][0]["type"] == "finish"


def test_scan_handler_still_scanning():
    client = create_app(Options(), ["running"], _never_called).test_client()
    resp = client.get("/scan/running")
    assert resp.status_code == 200
    assert resp.get_json() == {"code": 200, "msg": "scanning", "data": None}


def test_scans_handler():
    client = create_app(Options(), ["test-scan"], _never_called).test_client()
    resp = client.get("/scans")
    assert resp.status_code == 404
    assert resp.get_json() == {"code": 200, "scans": ["test-scan"]}


def test_health_handler():
    client = create_app(Options(), [], _never_called).test_client()
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json()["msg"] == "ok"


def test_swagger_doc():
    client = create_app(Options(), [], _never_called).test_client()
    resp = client.get("/swagger/doc.json")
    assert resp.status_code == 200
    assert resp.get_json()["swagger"] == "2.0"


def test_post_scan_handler_runs_scan():
    options = Options(scan={})
    scans = []
    calls = []

    def scanner(url, opts, sid):
        calls.append((url, sid))
        return [PoC(type="finish")]

    client = create_app(options, scans, scanner).test_client()
    resp = client.post("/scan", json={"url": "http://example.com", "options": {"method": "GET"}})
    body = resp.get_json()
    assert resp.status_code == 200
    assert set(body) == {"code", "msg", "data"}
    sid = body["msg"]
    assert scans == [sid]

    stored = _wait_for(options.scan, sid)
    assert stored == Scan(url="http://example.com", results=[PoC(type="finish")])
    assert calls == [("http://example.com", sid)]

    status = client.get(f"/scan/{sid}").get_json()
    assert status["msg"] == "finish"


def test_post_scan_bind_error():
    scans = []
    client = create_app(Options(), scans, _never_called).test_client()
    resp = client.post("/scan", data="{not json", content_type="application/json")
    assert resp.status_code == 500
    assert resp.get_json()["msg"] == "Parameter Bind error"
    assert scans == []


def test_post_scan_wrong_type_is_bind_error():
    client = create_app(Options(), [], _never_called).test_client()
    resp = client.post("/scan", json={"url": 5})
    assert resp.status_code == 500
    assert resp.get_json()["code"] == 500