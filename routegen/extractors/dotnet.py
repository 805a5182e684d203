"""Extractors for ASP.NET Core minimal APIs and MVC controllers."""

from __future__ import annotations

import posixpath
import re
from typing import List, Set

from ..models import BODY_PARAMETER, Anchor, ParameterDescriptor, RouteRecord
from .core import (
    BRACE_PARAM,
    MINIMAL_API_RESPONSES,
    ROUTER_RESPONSES,
    leading_slash,
    path_parameters,
    query_parameter,
)

_MAP_CALL = re.compile(r"\bapp\.Map(Get|Post|Put|Delete|Patch)\s*\(\s*[\"']([^\"']*)[\"']\s*,")

_ROUTE_PREFIX = re.compile(r"\[Route\s*\(\s*[\"']([^\"']*)[\"']\s*\)\]")
_ATTRIBUTED_ACTION = re.compile(
    r"\[Http(Get|Post|Put|Delete|Patch)(?:\s*\(\s*[\"']([^\"']*)[\"']\s*\))?\]"
    # Skip whole lines up to the next ``public`` member.
    r"(?:[^\n]*\n)*?[ \t]*public\s+[^\n(]*?\s(\w+)\s*\("
)
_CONVENTION_ACTION = re.compile(
    r"public\s+(?:async\s+Task<)?(?:I?ActionResult|ViewResult|JsonResult|string)>?\s+(\w+)\s*\([^)]*\)"
)
_FROM_QUERY = re.compile(r"\[FromQuery[^\]]*\]\s*[\w<>\[\],?.]+\s+(\w+)")
_FROM_BODY = re.compile(r"\[FromBody[^\]]*\]")


class MinimalApiExtractor:
    """``app.MapGet("/route", ...)`` registrations from ``Program.cs``."""

    name = "minimal-api"

    def extract(self, text: str, path: str) -> List[RouteRecord]:
        records: List[RouteRecord] = []
        for match in _MAP_CALL.finditer(text):
            route = leading_slash(match.group(2))
            records.append(
                RouteRecord(
                    method=match.group(1).lower(),
                    raw_path=route,
                    source_file=path,
                    parameters=tuple(path_parameters(BRACE_PARAM.findall(route))),
                    anchor=Anchor.ABSOLUTE,
                    responses=MINIMAL_API_RESPONSES,
                )
            )
        return records


def combine_routes(controller_route: str, action_route: str) -> str:
    """Join a controller prefix with an action template."""
    if not controller_route and not action_route:
        return "/"
    if not controller_route:
        return action_route
    if not action_route:
        return controller_route
    return f"/{controller_route.strip('/')}/{action_route.strip('/')}"


def _signature_text(text: str, start: int) -> str:
    """Return the parameter list beginning at the ``(`` at ``start``."""
    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return text[start:]


class ControllerExtractor:
    """Attribute-routed actions plus the MVC convention-routing fallback."""

    name = "controller"

    def extract(self, text: str, path: str) -> List[RouteRecord]:
        controller = posixpath.basename(path.replace("\\", "/"))
        if controller.endswith(".cs"):
            controller = controller[:-3]
        controller = controller.replace("Controller", "", 1).lower()

        prefix_match = _ROUTE_PREFIX.search(text)
        prefix = prefix_match.group(1) if prefix_match else ""

        records: List[RouteRecord] = []
        attributed: Set[str] = set()
        for match in _ATTRIBUTED_ACTION.finditer(text):
            action = match.group(3)
            attributed.add(action)
            signature = _signature_text(text, match.end() - 1)
            records.append(
                self._record(
                    path,
                    controller,
                    prefix,
                    match.group(2) or "",
                    action,
                    match.group(1).lower(),
                    signature,
                )
            )

        for match in _CONVENTION_ACTION.finditer(text):
            action = match.group(1)
            if action in attributed or action.startswith("_") or action == "Dispose":
                continue
            attributed.add(action)
            records.append(
                self._record(path, controller, prefix, action.lower(), action, "get", match.group(0))
            )
        return records

    def _record(
        self,
        path: str,
        controller: str,
        prefix: str,
        action_route: str,
        action: str,
        method: str,
        signature: str,
    ) -> RouteRecord:
        route = combine_routes(prefix, action_route)
        route = route.replace("[controller]", controller).replace("[action]", action.lower())
        if not route or route == "/":
            route = f"/{controller}/{action_route or action.lower()}"
        route = leading_slash(route)

        parameters: List[ParameterDescriptor] = path_parameters(BRACE_PARAM.findall(route))
        for name in _FROM_QUERY.findall(signature):
            parameters.append(query_parameter(name))
        if method in ("post", "put", "patch") and _FROM_BODY.search(signature):
            parameters.append(BODY_PARAMETER)
        return RouteRecord(
            method=method,
            raw_path=route,
            source_file=path,
            parameters=tuple(parameters),
            anchor=Anchor.ABSOLUTE,
            description=f"Action: {action}",
            responses=ROUTER_RESPONSES,
        )


__all__ = ["ControllerExtractor", "MinimalApiExtractor", "combine_routes"]
