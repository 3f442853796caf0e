"""
Resource identity resolution.

A resource identifier is ``path`` or ``path?query``. The query keeps its
leading ``?`` so that ``resolved_path + resource_query`` rebuilds the
canonical identifier used as cache key.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ResourceIdentity:
    """Raw and resolved forms of one resource identifier."""

    resource: str
    resource_path: str
    resource_query: str
    resolved_path: str

    @property
    def key(self) -> str:
        """Cache key: resolved absolute path with the query re-appended."""
        return self.resolved_path + self.resource_query


def parse_resource(resource: str) -> tuple[str, str]:
    """Split a resource string at the first ``?``."""
    index = resource.find("?")
    if index == -1:
        return resource, ""
    return resource[:index], resource[index:]


def resolve_resource(resource: str, root: str | Path) -> ResourceIdentity:
    """
    Resolve a resource identifier against a root directory.

    Only the path part is resolved; the query is appended afterwards.
    Absolute paths are normalised but keep their own location.
    """
    resource_path, resource_query = parse_resource(resource)
    resolved_path = os.path.abspath(os.path.join(os.fspath(root), resource_path))
    return ResourceIdentity(
        resource=resource,
        resource_path=resource_path,
        resource_query=resource_query,
        resolved_path=resolved_path,
    )
