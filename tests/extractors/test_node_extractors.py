"""Tests for the Next.js, Express and Strapi extractors."""

from __future__ import annotations

import textwrap

from routegen.extractors.node import (
    AppCallExtractor,
    FileHandlerExtractor,
    RouterCallExtractor,
    StrapiRouteExtractor,
)
from routegen.models import Anchor


def _params(record):
    return [(p.name, p.location, p.required, p.schema_type) for p in record.parameters]


NEXT_ROUTE = textwrap.dedent(
    """
    import { NextResponse } from 'next/server';

    export async function GET(request) {
      const { searchParams } = new URL(request.url);
      const page = searchParams.get('page');
      const q = searchParams.get("q");
      if (!q) {
        return NextResponse.json({ error: 'missing' }, { status: 400 });
      }
      return NextResponse.json([]);
    }

    export async function POST(request) {
      const body = await request.json();
      return NextResponse.json(body, { status: 201 });
    }
    """
)


def test_file_handler_yields_one_record_per_exported_verb() -> None:
    records = FileHandlerExtractor().extract(NEXT_ROUTE, "app/api/users/route.ts")

    assert [record.method for record in records] == ["get", "post"]
    assert all(record.anchor is Anchor.FILE for record in records)
    assert all(record.raw_path == "" for record in records)
    assert records[0].summary == "GET operation"
    assert _params(records[0]) == [
        ("page", "query", False, "string"),
        ("q", "query", True, "string"),
        ("body", "body", True, "object"),
    ]
    assert [code for code, _ in records[0].responses] == ["200", "400", "500"]


def test_file_handler_ignores_files_without_exports() -> None:
    assert FileHandlerExtractor().extract("export function helper() {}", "x.ts") == []


def test_file_handler_requires_whole_verb_name() -> None:
    text = "export async function GETTER() {}\nexport async function delete() {}"
    records = FileHandlerExtractor().extract(text, "route.ts")
    assert [record.method for record in records] == ["delete"]


EXPRESS_ROUTER = textwrap.dedent(
    """
    const router = express.Router();

    router.get('/', async (req, res) => {
      const { limit } = req.query;
      res.json(await Users.list(req.query.page, req.query.sort));
    });
    router.get("/:id", show);
    router.post('/', (req, res) => create(req.body));
    router.delete('/:id/avatar/:avatarId', destroy);
    """
)


def test_router_calls_keep_every_occurrence() -> None:
    records = RouterCallExtractor().extract(EXPRESS_ROUTER, "routes/users.js")

    assert [(record.method, record.raw_path) for record in records] == [
        ("get", "/"),
        ("get", "/:id"),
        ("post", "/"),
        ("delete", "/:id/avatar/:avatarId"),
    ]
    assert all(record.anchor is Anchor.ROUTER for record in records)
    assert records[1].summary == "GET /:id"


def test_router_call_parameters() -> None:
    records = RouterCallExtractor().extract(EXPRESS_ROUTER, "routes/users.js")
    by_key = {(record.method, record.raw_path): record for record in records}

    assert _params(by_key[("get", "/:id")]) == [
        ("id", "path", True, "string"),
        ("page", "query", False, "string"),
        ("sort", "query", False, "string"),
    ]
    assert _params(by_key[("post", "/")])[-1] == ("body", "body", True, "object")
    assert ("body", "body", True, "object") not in _params(by_key[("delete", "/:id/avatar/:avatarId")])
    assert [name for name, location, *_ in _params(by_key[("delete", "/:id/avatar/:avatarId")]) if location == "path"] == [
        "id",
        "avatarId",
    ]


def test_query_parameter_does_not_duplicate_path_parameter() -> None:
    text = "router.get('/:id', (req, res) => res.send(req.query.id));"
    record = RouterCallExtractor().extract(text, "routes/items.js")[0]
    assert _params(record) == [("id", "path", True, "string")]


def test_app_calls_are_absolute() -> None:
    text = "app.get('/health', ok);\napp.post('/login', login);\nrouter.get('/me', me);\n"
    records = AppCallExtractor().extract(text, "server.js")

    assert [(record.method, record.raw_path) for record in records] == [
        ("get", "/health"),
        ("post", "/login"),
    ]
    assert all(record.anchor is Anchor.ABSOLUTE for record in records)


def test_router_pass_also_sees_app_calls() -> None:
    text = "app.get('/health', ok);"
    records = RouterCallExtractor().extract(text, "server.js")
    assert [(record.method, record.raw_path) for record in records] == [("get", "/health")]


def test_router_pass_skips_non_path_lookups() -> None:
    records = RouterCallExtractor().extract(NEXT_ROUTE, "app/api/users/route.ts")
    assert records == []


def test_malformed_input_yields_nothing() -> None:
    text = "router.get(path, handler); router.post(`/template/${x}`, h); app.get('/unterminated"
    assert RouterCallExtractor().extract(text, "routes/x.js") == []
    assert AppCallExtractor().extract(text, "routes/x.js") == []


STRAPI_ROUTES = textwrap.dedent(
    """
    module.exports = [
      {
        method: 'GET',
        path: '/connect/(.*)',
        handler: 'auth.connect',
        config: { policies: [] },
      },
      { method: 'POST', path: '/auth/:provider/callback', handler: 'auth.callback' },
      { method: 'FETCH', path: '/weird', handler: 'x.y' },
    ];
    """
)


def test_strapi_route_objects() -> None:
    records = StrapiRouteExtractor().extract(STRAPI_ROUTES, "packages/core/users/server/routes/content-api.js")

    assert [(record.method, record.raw_path) for record in records] == [
        ("get", "/connect/(.*)"),
        ("post", "/auth/:provider/callback"),
    ]
    assert records[0].description == "Handler: auth.connect"
    assert _params(records[0]) == [("path", "path", True, "string")]
    assert _params(records[1]) == [("provider", "path", True, "string")]
    assert [code for code, _ in records[1].responses] == ["200", "400", "401", "403", "404", "500"]
