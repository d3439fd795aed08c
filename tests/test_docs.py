import json

from dalfox.docs import SwaggerInfo, read_doc


def test_default_document_fields():
    doc = json.loads(read_doc())
    assert doc["swagger"] == "2.0"
    assert doc["info"]["title"] == "Dalfox API"
    assert doc["info"]["version"] == "1.0"
    assert doc["host"] == "localhost:6664"
    assert doc["basePath"] == "/"
    assert doc["schemes"] == []


def test_paths_and_definitions():
    doc = json.loads(read_doc())
    assert set(doc["paths"]) == {"/scan", "/scan/{scanid}", "/scans"}
    assert "post" in doc["paths"]["/scan"]
    assert "get" in doc["paths"]["/scans"]
    assert set(doc["definitions"]) == {"server.Req", "server.Res"}


def test_custom_info_round_trips():
    info = SwaggerInfo(
        version="2.5",
        host="example.com:8080",
        base_path="/api",
        schemes=["https"],
        title="Custom",
        description="line one\nline two \"quoted\"",
    )
    doc = json.loads(read_doc(info))
    assert doc["info"]["version"] == info.version
    assert doc["host"] == info.host
    assert doc["basePath"] == info.base_path
    assert doc["schemes"] == info.schemes
    assert doc["info"]["title"] == info.title
    assert doc["info"]["description"] == info.description


def test_read_doc_does_not_change_info():
    info = SwaggerInfo(description="a\nb")
    read_doc(info)
    assert info.description == "a\nb"