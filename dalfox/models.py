"""Data types shared by the scanner, the REST API and the tool server."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

__all__ = ["Options", "PoC", "Scan", "ScanRequest", "ScanResponse", "ScanList"]


# JSON key -> (attribute name, expected type)
_OPTION_FIELDS: dict[str, tuple[str, type]] = {
    "header": ("header", list),
    "cookie": ("cookie", str),
    "data": ("data", str),
    "proxy": ("proxy_address", str),
    "timeout": ("timeout", int),
    "worker": ("concurrence", int),
    "delay": ("delay", int),
    "follow-redirects": ("follow_redirect", bool),
    "mining-dict": ("mining", bool),
    "mining-dom": ("finding_dom", bool),
    "deep-domxss": ("use_deep_dxss", bool),
    "skip-discovery": ("skip_discovery", bool),
    "output-request": ("output_request", bool),
    "output-response": ("output_response", bool),
    "method": ("method", str),
    "debug": ("debug", bool),
}


def _check_type(key: str, value: Any, expected: type) -> Any:
    if expected is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"option {key!r} must be an integer")
    elif expected is list:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ValueError(f"option {key!r} must be a list of strings")
        return list(value)
    elif not isinstance(value, expected):
        raise ValueError(f"option {key!r} must be of type {expected.__name__}")
    return value


@dataclass
class PoC:
    """One finding produced by a scan."""

    type: str = ""
    inject_type: str = ""
    poc_type: str = ""
    method: str = ""
    data: str = ""
    param: str = ""
    payload: str = ""
    evidence: str = ""
    cwe: str = ""
    severity: str = ""
    message_id: int = 0
    message_str: str = ""
    raw_http_request: str = ""
    raw_http_response: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the finding."""
        result: dict[str, Any] = {
            "type": self.type,
            "inject_type": self.inject_type,
            "poc_type": self.poc_type,
            "method": self.method,
            "data": self.data,
            "param": self.param,
            "payload": self.payload,
            "evidence": self.evidence,
            "cwe": self.cwe,
            "severity": self.severity,
            "message_id": self.message_id,
            "message_str": self.message_str,
        }
        if self.raw_http_request:
            result["raw_request"] = self.raw_http_request
        if self.raw_http_response:
            result["raw_response"] = self.raw_http_response
        return result


@dataclass
class Scan:
    """The state of one scan: empty URL while running, filled in when done."""

    url: str = ""
    results: list[PoC] = field(default_factory=list)


@dataclass
class Options:
    """Scan and server settings."""

    method: str = ""
    cookie: str = ""
    data: str = ""
    header: list[str] = field(default_factory=list)
    proxy_address: str = ""
    timeout: int = 0
    concurrence: int = 0
    delay: int = 0
    follow_redirect: bool = False
    mining: bool = False
    finding_dom: bool = False
    use_deep_dxss: bool = False
    skip_discovery: bool = False
    output_request: bool = False
    output_response: bool = False
    debug: bool = False
    server_host: str = ""
    server_port: int = 0
    is_api: bool = False
    custom_transport: Any = None
    scan: dict[str, Scan] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Options:
        """Build options from their JSON form; unknown keys and nulls are ignored."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ValueError("options must be a JSON object")
        values: dict[str, Any] = {}
        for key, value in data.items():
            spec = _OPTION_FIELDS.get(key)
            if spec is None or value is None:
                continue
            attr, expected = spec
            values[attr] = _check_type(key, value, expected)
        return cls(**values)


@dataclass
class ScanRequest:
    """Body of a request that starts a scan."""

    url: str = ""
    options: Options = field(default_factory=Options)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ScanRequest:
        """Build a request from its JSON form, raising ValueError on bad types."""
        if not isinstance(data, Mapping):
            raise ValueError("request must be a JSON object")
        url = data.get("url")
        if url is None:
            url = ""
        if not isinstance(url, str):
            raise ValueError("url must be a string")
        return cls(url=url, options=Options.from_dict(data.get("options")))


@dataclass
class ScanResponse:
    """Generic API response carrying a code, a message and optional findings."""

    code: int
    msg: str = ""
    data: list[PoC] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the response."""
        return {
            "code": self.code,
            "msg": self.msg,
            "data": None if self.data is None else [poc.to_dict() for poc in self.data],
        }


@dataclass
class ScanList:
    """API response listing scan identifiers."""

    code: int
    scans: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the listing."""
        return {"code": self.code, "scans": list(self.scans)}