from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from routegen.config import DocumentSettings
from routegen.document import build_document, default_output_name, folder_type, render_document, write_document
from routegen.models import Dialect, Operation, ParameterDescriptor

SETTINGS = DocumentSettings(
    title="API Documentation",
    description="Auto-generated API documentation",
    version="1.0.0",
    server_url="http://localhost:3000/api",
)


def test_build_document_envelope() -> None:
    paths = {
        "/users/{id}": {
            "get": Operation(
                summary="GET operation",
                parameters=[ParameterDescriptor(name="id", location="path", required=True)],
                responses={"200": "Success"},
            ),
            "post": Operation(summary="POST /users/{id}", description="Action: Create"),
        }
    }

    document = build_document(paths, SETTINGS)

    assert document["openapi"] == "3.0.0"
    assert document["info"]["title"] == "API Documentation"
    assert document["servers"] == [{"url": "http://localhost:3000/api"}]
    assert document["components"] == {"schemas": {}}
    get = document["paths"]["/users/{id}"]["get"]
    assert get == {
        "summary": "GET operation",
        "parameters": [{"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}],
        "responses": {"200": {"description": "Success"}},
    }
    assert document["paths"]["/users/{id}"]["post"]["description"] == "Action: Create"


def test_render_document_is_indented_json() -> None:
    rendered = render_document(build_document({}, SETTINGS))
    assert rendered.startswith('{\n  "openapi": "3.0.0"')
    assert json.loads(rendered)["paths"] == {}


def test_write_document_creates_parent_directories(tmp_path: Path) -> None:
    target = tmp_path / "out" / "nested" / "spec.json"
    written = write_document(build_document({}, SETTINGS), target)

    assert written == target
    assert json.loads(target.read_text(encoding="utf-8"))["info"]["version"] == "1.0.0"


@pytest.mark.parametrize(
    ("dialect", "expected"),
    [
        (Dialect.EXPRESS_BACKEND_MODULES, "backend"),
        (Dialect.NEXTJS_APP, "frontend"),
        (Dialect.NEXTJS_PAGES, "frontend"),
        (Dialect.EXPRESS, "api"),
        (Dialect.DJANGO, "api"),
        (Dialect.DOTNET_WEB_API, "dotnet"),
        (Dialect.STRAPI, "unknown"),
    ],
)
def test_folder_type(dialect: Dialect, expected: str) -> None:
    assert folder_type(dialect) == expected


def test_default_output_name(tmp_path: Path) -> None:
    root = tmp_path / "shop"
    root.mkdir()
    name = default_output_name(root, Dialect.NEXTJS_APP, today=date(2024, 3, 9))
    assert name == "swagger-output-shop-frontend-2024-03-09.json"
