import json

import pytest

from dalfox.models import Options, PoC, Scan, ScanList, ScanRequest, ScanResponse


def test_options_from_dict_maps_json_keys():
    options = Options.from_dict(
        {
            "method": "POST",
            "cookie": "session=token",
            "proxy": "http://localhost:8080",
            "worker": 50,
            "follow-redirects": True,
            "header": ["X-A: 1", "X-B: 2"],
        }
    )
    assert options.method == "POST"
    assert options.cookie == "session=token"
    assert options.proxy_address == "http://localhost:8080"
    assert options.concurrence == 50
    assert options.follow_redirect is True
    assert options.header == ["X-A: 1", "X-B: 2"]


def test_options_from_dict_ignores_unknown_keys_and_nulls():
    options = Options.from_dict({"unknown": 1, "method": None})
    assert options == Options()


def test_options_from_none_is_default():
    assert Options.from_dict(None) == Options()


@pytest.mark.parametrize(
    "data",
    [
        {"worker": "many"},
        {"worker": True},
        {"method": 3},
        {"header": "X-A: 1"},
        {"follow-redirects": "yes"},
    ],
)
def test_options_from_dict_rejects_wrong_types(data):
    with pytest.raises(ValueError):
        Options.from_dict(data)


def test_options_scan_store_is_not_shared_between_instances():
    first, second = Options(), Options()
    first.scan["sid"] = Scan(url="http://example.com")
    assert second.scan == {}


def test_scan_request_from_dict():
    request = ScanRequest.from_dict({"url": "http://example.com", "options": {"method": "GET"}})
    assert request.url == "http://example.com"
    assert request.options.method == "GET"


def test_scan_request_rejects_non_object():
    with pytest.raises(ValueError):
        ScanRequest.from_dict(["http://example.com"])


def test_scan_request_rejects_non_string_url():
    with pytest.raises(ValueError):
        ScanRequest.from_dict({"url": 42})


def test_scan_response_has_code_msg_and_data():
    response = ScanResponse(code=200, msg="ok")
    encoded = json.loads(json.dumps(response.to_dict()))
    assert set(encoded) == {"code", "msg", "data"}
    assert encoded["data"] is None
    assert encoded["code"] == 200


def test_scan_response_serialises_findings():
    poc = PoC(type="finish", param="q", payload="<svg>", message_id=7)
    response = ScanResponse(code=200, msg="finish", data=[poc])
    assert response.to_dict()["data"] == [poc.to_dict()]
    assert response.to_dict()["data"][0]["param"] == "q"


def test_poc_raw_fields_only_when_present():
    plain = PoC(type="V").to_dict()
    assert "raw_request" not in plain
    full = PoC(type="V", raw_http_request="GET / HTTP/1.1").to_dict()
    assert full["raw_request"] == "GET / HTTP/1.1"


def test_scan_list_to_dict_copies_scans():
    scans = ["a", "b"]
    listing = ScanList(code=200, scans=scans).to_dict()
    assert listing == {"code": 200, "scans": ["a", "b"]}
    listing["scans"].append("c")
    assert scans == ["a", "b"]