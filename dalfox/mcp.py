"""A Model Context Protocol tool server exposing scans over stdin/stdout."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from typing import IO, Any

from dalfox.models import Options, Scan
from dalfox.scanstore import Scanner, get_scan, new_scan_id, scan_from_api

__all__ = [
    "McpServer",
    "McpError",
    "SERVER_NAME",
    "SERVER_VERSION",
    "PROTOCOL_VERSION",
    "parse_scan_arguments",
    "format_results",
]

logger = logging.getLogger(__name__)

SERVER_NAME = "Dalfox XSS Scanner"
SERVER_VERSION = "2.0.0"
PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

SCAN_TOOL = "scan_with_dalfox"
RESULTS_TOOL = "get_results_dalfox"

_STRING_OPTIONS = {"method": "method", "cookie": "cookie", "data": "data", "proxy": "proxy_address"}
_NUMBER_OPTIONS = {"worker": "concurrence", "delay": "delay"}
_BOOL_OPTIONS = {
    "follow-redirects": "follow_redirect",
    "deep-domxss": "use_deep_dxss",
    "skip-discovery": "skip_discovery",
    "output-request": "output_request",
    "output-response": "output_response",
}


class McpError(Exception):
    """A JSON-RPC error to be reported to the client."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


def _prop(kind: str, description: str, default: Any = None) -> dict[str, Any]:
    prop: dict[str, Any] = {"type": kind, "description": description}
    if default is not None:
        prop["default"] = default
    return prop


_TOOLS: list[dict[str, Any]] = [
    {
        "name": SCAN_TOOL,
        "description": "Scan for XSS vulnerabilities in a web application",
        "inputSchema": {
            "type": "object",
            "properties": {
                "url": _prop("string", "The URL to scan for XSS vulnerabilities"),
                "method": _prop("string", "HTTP method to use (GET, POST, etc.)", "GET"),
                "headers": _prop("string", "Custom HTTP headers as a JSON string"),
                "cookie": _prop("string", "Cookies to include in the request"),
                "data": _prop("string", "HTTP request body for POST requests"),
                "follow-redirects": _prop("boolean", "Whether to follow HTTP redirects", False),
                "proxy": _prop("string", "Proxy URL to route requests through"),
                "worker": _prop("number", "Number of concurrent worker threads", 100),
                "delay": _prop("number", "Delay between requests in milliseconds", 0),
                "deep-domxss": _prop("boolean", "Enable deep DOM XSS testing", False),
                "skip-discovery": _prop(
                    "boolean",
                    "Skip the entire discovery phase, proceeding directly to XSS scanning",
                    False,
                ),
                "skip-mining-all": _prop("boolean", "Skip all parameter mining", False),
                "skip-mining-dict": _prop(
                    "boolean", "Skip dictionary-based parameter mining", False
                ),
                "skip-mining-dom": _prop("boolean", "Skip DOM-based parameter mining", False),
                "output-request": _prop("boolean", "Include http request in the output", False),
                "output-response": _prop(
                    "boolean", "Include http response in the output", False
                ),
            },
            "required": ["url"],
        },
    },
    {
        "name": RESULTS_TOOL,
        "description": "Get results of a previously started scan",
        "inputSchema": {
            "type": "object",
            "properties": {
                "scan_id": _prop("string", "The scan ID returned from the scan tool"),
            },
            "required": ["scan_id"],
        },
    },
]


def _required_string(arguments: Mapping[str, Any], key: str, message: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value:
        raise ValueError(message)
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_scan_arguments(arguments: Mapping[str, Any]) -> tuple[str, Options]:
    """Return the target URL and scan options given by the scan tool's arguments."""
    url = _required_string(arguments, "url", "URL is required")
    values: dict[str, Any] = {}

    for key, attr in _STRING_OPTIONS.items():
        value = arguments.get(key)
        if isinstance(value, str) and value:
            values[attr] = value

    headers = arguments.get("headers")
    if isinstance(headers, str) and headers:
        values["header"] = headers.split("|")

    for key, attr in _NUMBER_OPTIONS.items():
        value = arguments.get(key)
        if _is_number(value):
            values[attr] = int(value)

    for key, attr in _BOOL_OPTIONS.items():
        value = arguments.get(key)
        if isinstance(value, bool):
            values[attr] = value

    if arguments.get("skip-mining-all") is True:
        values["mining"] = False
        values["finding_dom"] = False
    if arguments.get("skip-mining-dict") is True:
        values["mining"] = False
    if arguments.get("skip-mining-dom") is True:
        values["finding_dom"] = False

    options = Options(**values)
    if not options.method:
        options.method = "GET"
    return url, options


_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _escape_html(text: str) -> str:
    return "".join(_HTML_ESCAPES.get(char, char) for char in text)


def format_results(scan: Scan) -> str:
    """Return the text report of a finished scan."""
    lines = f"Scan results for {scan.url}\n\n"
    if not scan.results:
        return lines + "No vulnerabilities found."
    vulnerabilities = [
        {
            "id": index,
            "type": poc.type,
            "inject_type": poc.inject_type,
            "poc_type": poc.poc_type,
            "method": poc.method,
            "data": poc.data,
            "param": poc.param,
            "payload": poc.payload,
            "evidence": poc.evidence,
            "cwe": poc.cwe,
            "severity": poc.severity,
            "message_id": int(poc.message_id),
            "message_str": poc.message_str,
            "raw_http_request": poc.raw_http_request,
            "raw_http_response": poc.raw_http_response,
        }
        for index, poc in enumerate(scan.results, start=1)
    ]
    encoded = _escape_html(json.dumps(vulnerabilities, indent=2, ensure_ascii=False))
    return lines + "Vulnerabilities found:\n" + encoded


class McpServer:
    """Serves the scan and results tools over newline-delimited JSON-RPC."""

    def __init__(
        self,
        options: Options,
        scanner: Scanner,
        *,
        background: bool = True,
        version: str = SERVER_VERSION,
    ) -> None:
        self.options = options
        self.scanner = scanner
        self.background = background
        self.version = version
        self._methods: dict[str, Callable[[Mapping[str, Any]], Any]] = {
            "initialize": self._initialize,
            "ping": lambda params: {},
            "tools/list": lambda params: {"tools": _TOOLS},
            "tools/call": self._call_tool,
            "resources/list": lambda params: {"resources": []},
            "resources/templates/list": lambda params: {"resourceTemplates": []},
            "logging/setLevel": lambda params: {},
        }

    def handle_scan(self, arguments: Mapping[str, Any]) -> str:
        """Start a scan and return the message announcing its id."""
        url, rq_options = parse_scan_arguments(arguments)
        sid = new_scan_id(url)
        logger.info("[%s] Starting scan for URL: %s", sid, url)
        args = (url, rq_options, self.options, sid, self.scanner)
        if self.background:
            threading.Thread(target=scan_from_api, args=args, daemon=True).start()
        else:
            scan_from_api(*args)
        return f"Scan started with ID: {sid}. The scan is running in the background."

    def handle_results(self, arguments: Mapping[str, Any]) -> str:
        """Return the report of a scan, or a note that it is still running."""
        scan_id = _required_string(arguments, "scan_id", "scan_id is required")
        scan = get_scan(scan_id, self.options)
        if not scan.url:
            return "Scan is still in progress. Please check again later."
        return format_results(scan)

    def _initialize(self, params: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {
                "tools": {},
                "resources": {"subscribe": True, "listChanged": True},
                "logging": {},
            },
            "serverInfo": {"name": SERVER_NAME, "version": self.version},
        }

    def _call_tool(self, params: Mapping[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        arguments = params.get("arguments") or {}
        if not isinstance(arguments, Mapping):
            raise McpError(INVALID_PARAMS, "arguments must be an object")
        handlers = {SCAN_TOOL: self.handle_scan, RESULTS_TOOL: self.handle_results}
        handler = handlers.get(name)
        if handler is None:
            raise McpError(INVALID_PARAMS, f"tool '{name}' not found")
        try:
            text = handler(arguments)
        except ValueError as err:
            raise McpError(INTERNAL_ERROR, str(err)) from err
        return {"content": [{"type": "text", "text": text}]}

    def handle_message(self, message: Any) -> dict[str, Any] | None:
        """Answer one JSON-RPC message; notifications get no answer."""
        if not isinstance(message, Mapping) or not isinstance(message.get("method"), str):
            request_id = message.get("id") if isinstance(message, Mapping) else None
            return _error(request_id, INVALID_REQUEST, "invalid request")
        is_notification = "id" not in message
        request_id = message.get("id")
        method = message["method"]
        params = message.get("params") or {}

        if is_notification:
            return None
        handler = self._methods.get(method)
        if handler is None:
            return _error(request_id, METHOD_NOT_FOUND, f"method '{method}' not found")
        if not isinstance(params, Mapping):
            return _error(request_id, INVALID_PARAMS, "params must be an object")
        try:
            result = handler(params)
        except McpError as err:
            return _error(request_id, err.code, err.message)
        except Exception as err:  # keep serving whatever a handler does
            logger.exception("handler for %s failed", method)
            return _error(request_id, INTERNAL_ERROR, f"panic recovered: {err}")
        return {"jsonrpc": "2.0", "id": request_id, "result": result}

    def serve(self, stdin: Iterable[str] | IO[str], stdout: IO[str]) -> None:
        """Read requests line by line from ``stdin`` and write answers to ``stdout``."""
        logger.info("Starting MCP Server")
        for line in stdin:
            if not line.strip():
                continue
            try:
                message = json.loads(line)
            except ValueError:
                response: dict[str, Any] | None = _error(None, PARSE_ERROR, "parse error")
            else:
                response = self.handle_message(message)
            if response is not None:
                stdout.write(json.dumps(response) + "\n")
                stdout.flush()


def _error(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}