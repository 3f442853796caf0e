"""
Execution context for loaders.

Every loader receives the context of the resource it is transforming.
Contexts are immutable: a dependency request builds a fresh context for
the requested resource instead of overwriting shared fields, so the
requesting loader keeps seeing its own resource after the request
returns.

Code that is not handed a context (helpers deep in a call stack) can use
``current_context()``. It is backed by a ``ContextVar`` that the engine
sets on entry to a request and resets on exit, which also isolates
concurrent requests running in separate tasks.
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import BuildConfig
    from .helpers import LoaderHelpers
    from .resource import ResourceIdentity

DependencyRequester = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class LoadContext:
    """
    The resource a loader is transforming, plus shared build state.

    Attributes:
        resource: Identifier as requested (unresolved, with query)
        resource_path: Path part of the identifier
        resource_query: Query part including the leading "?" (may be empty)
        resolved_path: Absolute path used for rule matching and reads
        config: Global build configuration
        helpers: Utility helpers bound to the configuration
        parent: Context of the requesting resource, None at the top level
    """

    resource: str
    resource_path: str
    resource_query: str
    resolved_path: str
    config: BuildConfig
    helpers: LoaderHelpers
    parent: LoadContext | None = None
    _requester: DependencyRequester | None = field(default=None, repr=False, compare=False)

    @classmethod
    def for_identity(
        cls,
        identity: ResourceIdentity,
        *,
        config: BuildConfig,
        helpers: LoaderHelpers,
        requester: DependencyRequester,
        parent: LoadContext | None = None,
    ) -> LoadContext:
        return cls(
            resource=identity.resource,
            resource_path=identity.resource_path,
            resource_query=identity.resource_query,
            resolved_path=identity.resolved_path,
            config=config,
            helpers=helpers,
            parent=parent,
            _requester=requester,
        )

    @property
    def key(self) -> str:
        return self.resolved_path + self.resource_query

    @property
    def depth(self) -> int:
        """Number of requesting resources above this one."""
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    def chain(self) -> list[str]:
        """Resource identifiers from the top-level resource down to this one."""
        resources = []
        node: LoadContext | None = self
        while node is not None:
            resources.append(node.resource)
            node = node.parent
        return list(reversed(resources))

    async def add_dependency(self, resource: str, content: Any = None) -> Any:
        """
        Process another resource and return its result.

        The nested request sees its own context; this context is not
        touched.
        """
        if self._requester is None:
            raise RuntimeError(f"Context for '{self.resource}' is not bound to an engine")
        return await self._requester(resource, content, parent=self)


_CURRENT_CONTEXT: ContextVar[LoadContext | None] = ContextVar(
    "loadpipe_current_context", default=None
)


def current_context() -> LoadContext | None:
    """Context of the resource currently being processed, if any."""
    return _CURRENT_CONTEXT.get()


def activate_context(ctx: LoadContext) -> Token[LoadContext | None]:
    return _CURRENT_CONTEXT.set(ctx)


def restore_context(token: Token[LoadContext | None]) -> None:
    _CURRENT_CONTEXT.reset(token)
