"""CLI entrypoints for routegen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .logging import configure_logging
from .orchestrator import RouteGenerator


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    """Accept the logging flags both before and after the sub-command."""
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Show debug output on the console.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write debug output to this file.",
    )


def _add_generate_arguments(parser: argparse.ArgumentParser) -> None:
    _add_logging_options(parser, suppress_default=True)
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    parser.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Output file (defaults to swagger-output-<project>-<type>-<date>.json).",
    )
    parser.add_argument("--host", default=None, help="Server host for the servers block.")
    parser.add_argument("--scheme", default=None, help="Server scheme for the servers block.")
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Extract files with this many worker threads.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routegen",
        description="Generate OpenAPI documents from web framework route declarations.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    web_parser = subparsers.add_parser(
        "web",
        help="Analyze Next.js, Express, Strapi, Django or Play Framework projects.",
    )
    _add_generate_arguments(web_parser)

    dotnet_parser = subparsers.add_parser(
        "dotnet",
        help="Analyze ASP.NET Core controllers and minimal APIs.",
    )
    _add_generate_arguments(dotnet_parser)
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for routegen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    workers = args.workers
    if workers is not None and workers < 1:
        parser.exit(2, "--workers must be a positive integer\n")

    generator = RouteGenerator(workers=workers)
    try:
        result, written = generator.run(
            args.path,
            args.output,
            dotnet=args.command == "dotnet",
            host=args.host,
            scheme=args.scheme,
        )
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except Exception as exc:  # pragma: no cover - unexpected failure
        parser.exit(1, f"routegen {args.command} failed: {exc}\nRun with --verbose for more details.\n")

    if written is None:
        parser.exit(1, f"No OpenAPI document written (detected: {result.dialect.value})\n")
    print(f"OpenAPI spec written to {_relativize(written)} ({result.endpoint_count} operations)")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
