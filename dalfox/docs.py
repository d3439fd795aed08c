"""The Swagger description of the REST API."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

__all__ = ["SwaggerInfo", "SWAGGER_INFO", "read_doc"]

_MIME_JSON = "application/json"


@dataclass
class SwaggerInfo:
    """The parts of the API description that callers may change."""

    version: str = "1.0"
    host: str = "localhost:6664"
    base_path: str = "/"
    schemes: list[str] = field(default_factory=list)
    title: str = "Dalfox API"
    description: str = "This is a dalfox api swagger"


SWAGGER_INFO = SwaggerInfo()


def _ref(name: str) -> dict[str, str]:
    return {"$ref": f"#/definitions/server.{name}"}


def _operation(
    description: str,
    response_schema: dict[str, Any],
    parameter: dict[str, Any] | None = None,
) -> dict[str, Any]:
    operation: dict[str, Any] = {
        "description": description,
        "consumes": [_MIME_JSON],
        "produces": [_MIME_JSON],
        "summary": "scan",
    }
    if parameter is not None:
        operation["parameters"] = [parameter]
    operation["responses"] = {"200": {"description": "OK", "schema": response_schema}}
    return operation


def _object(properties: dict[str, dict[str, Any]]) -> dict[str, Any]:
    return {"type": "object", "properties": properties}


def _paths() -> dict[str, Any]:
    body_param = {
        "description": "json data",
        "name": "data",
        "in": "body",
        "required": True,
        "schema": _ref("Req"),
    }
    path_param = {
        "type": "string",
        "description": "scan id",
        "name": "scanid",
        "in": "path",
        "required": True,
    }
    return {
        "/scan": {"post": _operation("add dalfox scan", _ref("Res"), body_param)},
        "/scan/{scanid}": {"get": _operation("get scan info", _ref("Res"), path_param)},
        "/scans": {
            "get": _operation(
                "show scan list", {"type": "array", "items": {"type": "string"}}
            )
        },
    }


def _definitions() -> dict[str, Any]:
    return {
        "server.Req": _object(
            {
                "options": {"type": "object", "additionalProperties": True},
                "url": {"type": "string"},
            }
        ),
        "server.Res": _object(
            {name: {"type": kind} for name, kind in
             (("code", "integer"), ("data", "string"), ("msg", "string"))}
        ),
    }


def read_doc(info: SwaggerInfo | None = None) -> str:
    """Return the Swagger 2.0 document as JSON text, filled in from ``info``."""
    info = info or SWAGGER_INFO
    document = {
        "schemes": list(info.schemes),
        "swagger": "2.0",
        "info": {
            "description": info.description,
            "title": info.title,
            "termsOfService": "http://swagger.io/terms/",
            "contact": {},
            "license": {
                "name": "MIT",
                "url": "http://www.apache.org/licenses/LICENSE-2.0.html",
            },
            "version": info.version,
        },
        "host": info.host,
        "basePath": info.base_path,
        "paths": _paths(),
        "definitions": _definitions(),
    }
    return json.dumps(document, indent=4)