"""Merge per-file route contributions into one path → method → operation map."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Tuple

from .logging import get_logger
from .models import AggregatedMap, Operation, ParameterDescriptor, RouteRecord
from .normalizer import template_names

logger = get_logger("aggregator")


def build_operation(record: RouteRecord, template: str) -> Operation:
    """Create the operation for ``record`` placed at ``template``."""
    parameters = list(record.parameters)
    described = {param.name for param in parameters if param.location == "path"}
    missing = [
        ParameterDescriptor(name=name, location="path", required=True)
        for name in dict.fromkeys(template_names(template))
        if name not in described
    ]
    return Operation(
        summary=record.summary or f"{record.method.upper()} {template}",
        description=record.description,
        parameters=missing + parameters,
        responses=dict(record.responses),
    )


def build_contribution(pairs: Iterable[Tuple[str, RouteRecord]]) -> Tuple[AggregatedMap, int]:
    """Fold ``(template, record)`` pairs from one file; later pairs win.

    Returns the contribution and the number of pairs that replaced an earlier
    pair of the same file.
    """
    contribution: AggregatedMap = {}
    overrides = 0
    for template, record in pairs:
        methods = contribution.setdefault(template, {})
        if record.method in methods:
            overrides += 1
            logger.debug("Overriding %s %s within %s", record.method.upper(), template, record.source_file)
        methods[record.method] = build_operation(record, template)
    return contribution, overrides


def merge(
    into: AggregatedMap,
    contribution: Mapping[str, Mapping[str, Operation]],
    *,
    source: Optional[str] = None,
) -> int:
    """Merge ``contribution`` into ``into`` method by method (last write wins).

    Returns the number of (path, method) pairs that replaced an existing entry.
    """
    collisions = 0
    for template, methods in contribution.items():
        target = into.setdefault(template, {})
        for method, operation in methods.items():
            if method in target:
                collisions += 1
                logger.debug(
                    "Overriding %s %s%s",
                    method.upper(),
                    template,
                    f" from {source}" if source else "",
                )
            target[method] = operation
    return collisions


class RouteAggregator:
    """Accumulates contributions in discovery order."""

    def __init__(self) -> None:
        self.paths: AggregatedMap = {}
        self.collisions = 0
        self.sources: List[str] = []

    def add(self, source: str, pairs: Iterable[Tuple[str, RouteRecord]]) -> AggregatedMap:
        """Build and merge the contribution of one file."""
        contribution, overrides = build_contribution(pairs)
        self.collisions += overrides + merge(self.paths, contribution, source=source)
        self.sources.append(source)
        return contribution

    def endpoint_count(self) -> int:
        return sum(len(methods) for methods in self.paths.values())


__all__ = ["RouteAggregator", "build_contribution", "build_operation", "merge"]
