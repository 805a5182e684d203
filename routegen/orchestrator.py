"""Pipeline orchestration: classify, discover, extract, normalize, aggregate."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from .aggregator import RouteAggregator
from .classifier import classify, classify_dotnet
from .config import ConfigError, DocumentSettings, RouteGenConfig, load_config, resolve_settings
from .discovery import discover
from .document import build_document, default_output_name, write_document
from .extractors import extractors_for
from .logging import get_logger
from .models import AggregatedMap, CandidateFile, Dialect, RouteRecord
from .normalizer import FileContext, normalize
from .scanner import resolve_root
from .signature import ProjectSignature

Pairs = List[Tuple[str, RouteRecord]]


@dataclass
class FileOutcome:
    """Extraction result for one candidate file."""

    file: CandidateFile
    pairs: Pairs = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class GenerationResult:
    """Outcome of one pipeline run over a project root."""

    root: Path
    dialect: Dialect
    signature: ProjectSignature
    paths: Optional[AggregatedMap] = None
    files: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    collisions: int = 0

    @property
    def endpoint_count(self) -> int:
        if not self.paths:
            return 0
        return sum(len(methods) for methods in self.paths.values())


def extract_file(dialect: Dialect, candidate: CandidateFile) -> FileOutcome:
    """Read one file and return its normalized ``(template, record)`` pairs."""
    try:
        text = candidate.read()
    except OSError as exc:
        return FileOutcome(file=candidate, warnings=[f"Could not read {candidate.relative}: {exc}"])

    context = FileContext(relative=candidate.relative)
    outcome = FileOutcome(file=candidate)
    for extractor in extractors_for(dialect, candidate.relative):
        try:
            records = extractor.extract(text, candidate.relative)
        except Exception as exc:
            outcome.warnings.append(f"Could not parse {candidate.relative} ({extractor.name}): {exc}")
            continue
        outcome.pairs.extend((normalize(record, context), record) for record in records)
    return outcome


class RouteGenerator:
    """Runs the route-extraction pipeline for a project root."""

    def __init__(
        self,
        *,
        workers: Optional[int] = None,
        config_loader: Callable[[Path], RouteGenConfig] = load_config,
    ) -> None:
        self._workers = workers
        self._config_loader = config_loader
        self.logger = get_logger("orchestrator")

    def load_config(self, root: Path) -> RouteGenConfig:
        try:
            return self._config_loader(root)
        except ConfigError as exc:
            self.logger.warning("Ignoring invalid configuration: %s", exc)
            return RouteGenConfig(root=root)

    def generate(
        self,
        path: str | Path,
        *,
        dotnet: bool = False,
        config: Optional[RouteGenConfig] = None,
    ) -> GenerationResult:
        """Return the aggregated map for the project at ``path``."""
        root = resolve_root(path)
        self.logger.info("Analyzing project: %s", root)
        config = config or self.load_config(root)

        signature = ProjectSignature.scan(root)
        dialect = classify_dotnet(signature) if dotnet else classify(signature)
        self.logger.info("Detected: %s", dialect.value)
        result = GenerationResult(root=root, dialect=dialect, signature=signature)
        if not dialect.is_supported:
            return result

        candidates = discover(dialect, root, signature, exclude=config.exclude_paths)
        self.logger.info("Found %d route files", len(candidates))
        result.files = [candidate.relative for candidate in candidates]

        aggregator = RouteAggregator()
        for outcome in self._extract_all(dialect, candidates, config):
            for warning in outcome.warnings:
                self.logger.warning("%s", warning)
            result.warnings.extend(outcome.warnings)
            aggregator.add(outcome.file.relative, outcome.pairs)

        result.paths = aggregator.paths
        result.collisions = aggregator.collisions
        self.logger.debug("Merged %d endpoints with %d overrides", aggregator.endpoint_count(), aggregator.collisions)
        return result

    def _extract_all(
        self, dialect: Dialect, candidates: Sequence[CandidateFile], config: RouteGenConfig
    ) -> List[FileOutcome]:
        workers = self._workers or config.workers
        if workers <= 1 or len(candidates) <= 1:
            return [extract_file(dialect, candidate) for candidate in candidates]
        # map() yields in submission order, so merging stays in discovery order.
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(lambda candidate: extract_file(dialect, candidate), candidates))

    def run(
        self,
        path: str | Path,
        output: Optional[str | Path] = None,
        *,
        dotnet: bool = False,
        host: Optional[str] = None,
        scheme: Optional[str] = None,
    ) -> Tuple[GenerationResult, Optional[Path]]:
        """Generate and write the OpenAPI document; the path is None when nothing was written."""
        root = resolve_root(path)
        config = self.load_config(root)
        result = self.generate(root, dotnet=dotnet, config=config)
        if result.paths is None:
            if result.dialect is Dialect.UNSUPPORTED:
                self.logger.error("Unsupported project type: %s", result.signature.unsupported_reason)
            else:
                self.logger.error("No supported API routes found in %s", root)
            return result, None

        settings: DocumentSettings = resolve_settings(
            root, config, dotnet=dotnet, host=host, scheme=scheme
        )
        document = build_document(result.paths, settings)
        target = Path(output) if output else Path(default_output_name(root, result.dialect))
        written = write_document(document, target)
        self.logger.info("OpenAPI spec generated: %s", written)
        self.logger.info("Found %d endpoints", len(result.paths))
        return result, written


__all__ = ["FileOutcome", "GenerationResult", "RouteGenerator", "extract_file"]
