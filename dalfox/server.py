"""REST API server for starting scans and reading their results."""

from __future__ import annotations

import argparse
import json
import logging
import threading
import time
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timezone

import requests
from flask import Flask, Response, g, jsonify, request

from dalfox.docs import read_doc
from dalfox.models import Options, PoC, ScanList, ScanRequest, ScanResponse
from dalfox.scanstore import Scanner, get_scan, new_scan_id, scan_from_api
from dalfox.transport import get_transport
from dalfox.waf import check_waf

__all__ = ["contains", "server_address", "create_app", "run_api_server", "main"]

logger = logging.getLogger(__name__)
access_logger = logging.getLogger(__name__ + ".access")

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 6664
HSTS_MAX_AGE = 3600


def contains(items: Sequence[str], item: str) -> bool:
    """Return whether ``item`` is one of ``items``."""
    return item in set(items)


def server_address(options: Options) -> str:
    """Return the ``host:port`` address the server listens on."""
    return f"{options.server_host}:{options.server_port}"


def _register_middleware(app: Flask) -> None:
    @app.before_request
    def _start_timer() -> None:
        g.started = time.perf_counter()

    @app.after_request
    def _secure_and_log(response: Response) -> Response:
        if request.is_secure:
            response.headers["Strict-Transport-Security"] = f"max-age={HSTS_MAX_AGE}"
        latency = time.perf_counter() - g.get("started", time.perf_counter())
        entry = {
            "time": datetime.now(timezone.utc).isoformat(),
            "remote_ip": request.remote_addr or "",
            "host": request.host,
            "method": request.method,
            "uri": request.full_path.rstrip("?"),
            "status": response.status_code,
            "latency": int(latency * 1e9),
            "latency_human": f"{latency * 1000:.3f}ms",
            "bytes_in": request.content_length or 0,
            "bytes_out": response.calculate_content_length() or 0,
        }
        access_logger.info(json.dumps(entry))
        return response


def create_app(options: Options, scans: list[str], scanner: Scanner) -> Flask:
    """Build the API application; started scan ids are appended to ``scans``."""
    options = replace(options, is_api=True)
    app = Flask(__name__)
    _register_middleware(app)

    @app.get("/health")
    def health():
        return jsonify(ScanResponse(code=200, msg="ok").to_dict()), 200

    @app.get("/swagger/doc.json")
    def swagger_doc():
        return Response(read_doc(), mimetype="application/json")

    @app.get("/scans")
    def list_scans():
        return jsonify(ScanList(code=200, scans=list(scans)).to_dict()), 404

    @app.get("/scan/<sid>")
    def scan_status(sid: str):
        if not contains(scans, sid):
            return jsonify(ScanResponse(code=404, msg="Not found scanid").to_dict()), 404
        scan = get_scan(sid, options)
        if not scan.url:
            result = ScanResponse(code=200, msg="scanning")
        else:
            result = ScanResponse(code=200, msg="finish", data=list(scan.results))
        return jsonify(result.to_dict()), 200

    @app.post("/scan")
    def start_scan():
        raw = request.get_data()
        try:
            rq = ScanRequest.from_dict(json.loads(raw)) if raw.strip() else ScanRequest()
        except ValueError:
            error = ScanResponse(code=500, msg="Parameter Bind error")
            return jsonify(error.to_dict()), 500
        sid = new_scan_id(rq.url)
        scans.append(sid)
        threading.Thread(
            target=scan_from_api,
            args=(rq.url, rq.options, options, sid, scanner),
            daemon=True,
        ).start()
        return jsonify(ScanResponse(code=200, msg=sid).to_dict()), 200

    return app


def run_api_server(options: Options, scanner: Scanner) -> None:
    """Serve the API on the configured host and port until interrupted."""
    scans: list[str] = []
    app = create_app(options, scans, scanner)
    logger.info("Listen %s", server_address(options))
    app.run(host=options.server_host, port=options.server_port, threaded=True)


def _probe_target(url: str, options: Options, sid: str) -> list[PoC]:
    """Request the target once and report any firewall in front of it."""
    with requests.Session() as session:
        transport = get_transport(options)
        session.mount("http://", transport)
        session.mount("https://", transport)
        headers = {}
        for line in options.header:
            name, _, value = line.partition(":")
            headers[name.strip()] = value.strip()
        if options.cookie:
            headers["Cookie"] = options.cookie
        response = session.request(
            options.method or "GET",
            url,
            headers=headers,
            data=options.data or None,
            allow_redirects=options.follow_redirect,
            timeout=options.timeout or None,
        )
    found, name = check_waf(response.headers, response.text)
    if found:
        logger.warning("[%s] Found WAF: %s", sid, name)
    return []


def main(argv: Sequence[str] | None = None) -> None:
    """Start the API server from the command line."""
    parser = argparse.ArgumentParser(prog="dalfox-server", description="Dalfox API server")
    parser.add_argument("--host", default=DEFAULT_HOST, help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    parser.add_argument("--timeout", type=int, default=10, help="request timeout in seconds")
    parser.add_argument("--proxy", default="", help="proxy for outgoing requests")
    parser.add_argument("--debug", action="store_true", help="log debug messages")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)
    options = Options(
        server_host=args.host,
        server_port=args.port,
        timeout=args.timeout,
        proxy_address=args.proxy,
        debug=args.debug,
    )
    run_api_server(options, _probe_target)