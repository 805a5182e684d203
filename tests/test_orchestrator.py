"""Tests for routegen.orchestrator."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from routegen.config import resolve_settings
from routegen.document import build_document, render_document
from routegen.models import CandidateFile, Dialect, serialize_paths
from routegen.orchestrator import RouteGenerator, extract_file

NEXT_USERS = """
import { NextResponse } from 'next/server';

export async function GET() {
  return NextResponse.json([]);
}

export async function POST(request) {
  const body = await request.json();
  return NextResponse.json(body, { status: 201 });
}
"""


@pytest.fixture(autouse=True)
def _clear_api_environment(monkeypatch) -> None:
    for key in ("API_TITLE", "API_DESCRIPTION", "API_VERSION", "API_HOST"):
        monkeypatch.delenv(key, raising=False)


def _params(operation):
    return [(p.name, p.location, p.required) for p in operation.parameters]


def test_nextjs_route_file_yields_get_and_post(repo_builder) -> None:
    repo_builder.write({"app/api/users/route.ts": NEXT_USERS})

    result = RouteGenerator().generate(repo_builder.path())

    assert result.dialect is Dialect.NEXTJS_APP
    assert list(result.paths) == ["/users"]
    assert sorted(result.paths["/users"]) == ["get", "post"]
    assert result.paths["/users"]["get"].summary == "GET operation"
    assert _params(result.paths["/users"]["post"]) == [("body", "body", True)]
    assert result.files == ["app/api/users/route.ts"]


def test_nextjs_dynamic_segment_gets_path_parameter(repo_builder) -> None:
    repo_builder.write({"app/api/users/[id]/route.ts": "export async function DELETE() {}"})

    result = RouteGenerator().generate(repo_builder.path())

    assert _params(result.paths["/users/{id}"]["delete"]) == [("id", "path", True)]


def test_self_named_module_router_collapses(repo_builder) -> None:
    repo_builder.write(
        {
            "src/modules/auth/auth.router.ts": """
                const router = Router();
                router.get('/me', (req, res) => res.json(req.user));
                router.post('/login', (req, res) => login(req.body));
                export default router;
            """,
        }
    )

    result = RouteGenerator().generate(repo_builder.path())

    assert result.dialect is Dialect.EXPRESS_MODULES
    assert set(result.paths) == {"/auth/me", "/auth/login"}
    assert result.paths["/auth/me"]["get"].summary == "GET /me"


def test_django_pattern_registers_five_verbs(repo_builder) -> None:
    repo_builder.write(
        {
            "manage.py": "",
            "api/urls.py": """
                urlpatterns = [
                    path('user/<int:pk>/', views.user_detail, name='user_detail'),
                ]
            """,
        }
    )

    result = RouteGenerator().generate(repo_builder.path())

    assert result.dialect is Dialect.DJANGO
    operations = result.paths["/user/{pk}"]
    assert sorted(operations) == ["delete", "get", "patch", "post", "put"]
    for operation in operations.values():
        assert _params(operation) == [("pk", "path", True)]
        assert operation.description == "View: views.user_detail"


def test_later_file_wins_on_collision(repo_builder) -> None:
    repo_builder.write(
        {
            "routes/a.js": "app.get('/health', (req, res) => res.send(req.query.verbose));",
            "routes/b.js": "app.get('/health', (req, res) => res.send(req.query.format));",
        }
    )

    result = RouteGenerator().generate(repo_builder.path())

    assert result.files == ["routes/a.js", "routes/b.js"]
    assert _params(result.paths["/health"]["get"]) == [("format", "query", False)]
    assert _params(result.paths["/a/health"]["get"]) == [("verbose", "query", False)]
    assert result.collisions == 1


def test_app_pass_overrides_router_pass_within_file(repo_builder) -> None:
    repo_builder.write(
        {
            "routes/index.js": """
                router.get('/x', (req, res) => res.json(req.query.page));
                app.get('/index/x', (req, res) => res.json([]));
            """,
        }
    )

    result = RouteGenerator().generate(repo_builder.path())

    assert result.paths["/index/x"]["get"].summary == "GET /index/x"
    assert result.paths["/index/index/x"]["get"].summary == "GET /index/x"
    assert result.collisions == 1


def test_generation_is_deterministic(repo_builder) -> None:
    repo_builder.write(
        {
            "routes/users.js": "router.get('/:id', show);\nrouter.put('/:id', update);",
            "routes/admin/audit.ts": "router.get('/', list);",
            "routes/orders.js": "router.post('/', (req, res) => create(req.body));",
        }
    )
    settings = resolve_settings(repo_builder.path(), RouteGenerator().load_config(repo_builder.path()), environ={})

    first = RouteGenerator().generate(repo_builder.path())
    second = RouteGenerator().generate(repo_builder.path())

    assert render_document(build_document(first.paths, settings)) == render_document(
        build_document(second.paths, settings)
    )


def test_worker_pool_preserves_discovery_order(repo_builder) -> None:
    repo_builder.write({f"routes/r{index:02d}.js": "router.get('/', list);" for index in range(12)})
    repo_builder.write({"routes/shared.js": "app.get('/status', a);", "routes/zz.js": "app.get('/status', b);"})

    sequential = RouteGenerator(workers=1).generate(repo_builder.path())
    threaded = RouteGenerator(workers=4).generate(repo_builder.path())

    assert serialize_paths(threaded.paths) == serialize_paths(sequential.paths)
    assert list(threaded.paths) == list(sequential.paths)
    assert threaded.collisions == sequential.collisions


def test_unsupported_project_has_no_map(repo_builder) -> None:
    repo_builder.write({"Gemfile": "", "routes/users.js": "router.get('/', list);"})

    result = RouteGenerator().generate(repo_builder.path())

    assert result.dialect is Dialect.UNSUPPORTED
    assert result.paths is None
    assert result.endpoint_count == 0


def test_empty_project_is_unknown(repo_builder) -> None:
    repo_builder.mkdir("docs")
    result = RouteGenerator().generate(repo_builder.path())
    assert result.dialect is Dialect.UNKNOWN
    assert result.paths is None


def test_missing_root_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        RouteGenerator().generate(tmp_path / "missing")


def test_unreadable_file_becomes_warning(tmp_path: Path) -> None:
    candidate = CandidateFile(path=tmp_path / "routes" / "gone.js", relative="routes/gone.js")

    outcome = extract_file(Dialect.EXPRESS, candidate)

    assert outcome.pairs == []
    assert len(outcome.warnings) == 1
    assert "routes/gone.js" in outcome.warnings[0]


class FailingExtractor:
    """Extractor double that always raises."""

    def __init__(self, name: str) -> None:
        self.name = name

    def extract(self, text: str, path: str):
        raise ValueError(f"{self.name} broke")


def test_every_failing_extractor_is_reported(repo_builder, monkeypatch) -> None:
    repo_builder.write({"routes/users.js": "router.get('/', list);"})
    monkeypatch.setattr(
        "routegen.orchestrator.extractors_for",
        lambda dialect, path: (FailingExtractor("first"), FailingExtractor("second")),
    )

    result = RouteGenerator().generate(repo_builder.path())

    assert len(result.warnings) == 2
    assert "(first): first broke" in result.warnings[0]
    assert "(second): second broke" in result.warnings[1]
    assert result.paths == {}


def test_invalid_config_falls_back_to_defaults(repo_builder, caplog) -> None:
    repo_builder.write({".routegen.yml": "- not\n- a mapping\n", "routes/users.js": "router.get('/', list);"})

    with caplog.at_level(logging.WARNING, logger="routegen"):
        result = RouteGenerator().generate(repo_builder.path())

    assert "Ignoring invalid configuration" in caplog.text
    assert list(result.paths) == ["/users"]


def test_config_exclude_paths_are_honoured(repo_builder) -> None:
    repo_builder.write(
        {
            ".routegen.yml": "exclude_paths:\n  - routes/legacy/**\n",
            "routes/users.js": "router.get('/', list);",
            "routes/legacy/old.js": "router.get('/', list);",
        }
    )

    result = RouteGenerator().generate(repo_builder.path())

    assert result.files == ["routes/users.js"]


def test_dotnet_web_api(repo_builder) -> None:
    repo_builder.write(
        {
            "Api.csproj": "<Project />",
            "Program.cs": "app.MapControllers();\napp.Run();",
            "Controllers/UsersController.cs": """
                [Route("api/[controller]")]
                public class UsersController : ControllerBase
                {
                    [HttpGet("{id:int}")]
                    public IActionResult Get(int id) => Ok();
                }
            """,
        }
    )

    result = RouteGenerator().generate(repo_builder.path(), dotnet=True)

    assert result.dialect is Dialect.DOTNET_WEB_API
    assert _params(result.paths["/api/users/{id}"]["get"]) == [("id", "path", True)]


def test_run_writes_document(repo_builder, tmp_path: Path) -> None:
    repo_builder.write(
        {
            "package.json": json.dumps({"name": "shop", "version": "2.0.0"}),
            "routes/users.js": "router.get('/:id', show);",
        }
    )
    output = tmp_path / "out" / "openapi.json"

    result, written = RouteGenerator().run(repo_builder.path(), output, host="api.shop.test")

    assert written == output
    document = json.loads(output.read_text(encoding="utf-8"))
    assert document["info"]["title"] == "shop"
    assert document["info"]["version"] == "2.0.0"
    assert document["servers"] == [{"url": "http://api.shop.test/api"}]
    assert list(document["paths"]) == ["/users/{id}"]
    assert result.endpoint_count == 1


def test_run_is_byte_identical_across_runs(repo_builder, tmp_path: Path) -> None:
    repo_builder.write({"routes/users.js": "router.get('/', list);\nrouter.post('/', create);"})

    RouteGenerator().run(repo_builder.path(), tmp_path / "first.json", host="h")
    RouteGenerator().run(repo_builder.path(), tmp_path / "second.json", host="h")

    assert (tmp_path / "first.json").read_bytes() == (tmp_path / "second.json").read_bytes()


def test_run_writes_nothing_for_unsupported(repo_builder, tmp_path: Path) -> None:
    repo_builder.write({"go.mod": "module x"})

    result, written = RouteGenerator().run(repo_builder.path(), tmp_path / "never.json")

    assert written is None
    assert result.dialect is Dialect.UNSUPPORTED
    assert not (tmp_path / "never.json").exists()
