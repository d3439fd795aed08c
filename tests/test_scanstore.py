import pytest

from dalfox.models import Options, PoC, Scan
from dalfox.scanstore import clean_url, get_scan, get_scans, new_scan_id, scan_from_api


def test_get_scan_existing():
    options = Options(scan={"test-scan": Scan(url="http://example.com")})
    assert get_scan("test-scan", options) == Scan(url="http://example.com")


def test_get_scan_missing():
    options = Options(scan={})
    assert get_scan("non-existing-scan", options) == Scan()


def test_get_scan_with_results():
    options = Options(
        scan={"test-scan": Scan(url="http://example.com", results=[PoC(type="finish")])}
    )
    scan = get_scan("test-scan", options)
    assert scan.url == "http://example.com"
    assert scan.results[0].type == "finish"


@pytest.mark.parametrize(
    "store, expected",
    [
        ({}, []),
        ({"scan1": Scan(), "scan2": Scan()}, ["scan1", "scan2"]),
    ],
)
def test_get_scans(store, expected):
    assert sorted(get_scans(Options(scan=store))) == expected


def test_get_scans_contains_all():
    options = Options(
        scan={
            "test-scan1": Scan(url="http://example1.com"),
            "test-scan2": Scan(url="http://example2.com"),
        }
    )
    scans = get_scans(options)
    assert "test-scan1" in scans
    assert "test-scan2" in scans


@pytest.mark.parametrize(
    "url",
    [
        "http://example.com\n",
        "http://example.com\r",
        "http://example.com\r\n",
        "http://example.com",
    ],
)
def test_clean_url(url):
    assert clean_url(url) == "http://example.com"


def test_new_scan_id_is_unique_hex():
    first = new_scan_id("http://example.com")
    second = new_scan_id("http://example.com")
    assert first != second
    assert len(first) == 64
    assert all(c in "0123456789abcdef" for c in first)


def test_scan_from_api_stores_results():
    options = Options(scan={})
    seen = []

    def scanner(url, opts, sid):
        seen.append((url, opts.method, sid, opts.scan is options.scan))
        return [PoC(type="finish")]

    scan_from_api("http://example.com", Options(), options, "sid-1", scanner)
    assert seen == [("http://example.com", "GET", "sid-1", True)]
    assert options.scan["sid-1"] == Scan(url="http://example.com", results=[PoC(type="finish")])


def test_scan_from_api_keeps_request_options():
    options = Options(scan={})
    captured = {}

    def scanner(url, opts, sid):
        captured["cookie"] = opts.cookie
        captured["delay"] = opts.delay
        return []

    scan_from_api("http://example.com", Options(cookie="a=b", delay=5), options, "s", scanner)
    assert captured == {"cookie": "a=b", "delay": 5}
    assert options.scan["s"].results == []


def test_scan_from_api_failure_is_not_stored():
    options = Options(debug=True, scan={})

    def scanner(url, opts, sid):
        raise ConnectionError("unreachable")

    scan_from_api("http://invalid-url", Options(method="GET"), options, "test-scan-id", scanner)
    assert "test-scan-id" not in options.scan