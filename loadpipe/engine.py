"""
Load engine: dependency cache and context tracking.

The engine is the single entry point for processing a resource, whether
it is the page handed in by the host or a dependency requested by a
loader. Results are memoized in a cache shared by every engine of one
build, keyed by the resource's resolved identifier.

Example:
    engine = LoadEngine(options, config=BuildConfig(input_dir="src"))
    html = await engine.process_page(content, "src/index.html")

    # Inside a loader
    async def inline_css(content, options, ctx):
        css = await ctx.add_dependency("styles/main.css")
        return content.replace("<!-- css -->", f"<style>{css}</style>")
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from .cache import ResultCache
from .chain import LoaderChain
from .config import BuildConfig, LoadOptions
from .context import LoadContext, activate_context, current_context, restore_context
from .helpers import LoaderHelpers
from .observability import LoadMetrics, get_metrics
from .resource import resolve_resource
from .rules import RuleSet

logger = logging.getLogger(__name__)


class LoadEngine:
    """
    Resolves, caches and processes resources.

    Every request:
    1. Resolves the identifier against ``config.input_dir``
    2. Activates a context for the resource (the caller's is kept aside)
    3. Returns the cached result, or runs the loader chain and caches it
    4. Restores the caller's context, even if a loader raised
    """

    def __init__(
        self,
        options: LoadOptions,
        *,
        config: BuildConfig | None = None,
        cache: ResultCache | None = None,
        helpers: LoaderHelpers | None = None,
        metrics: LoadMetrics | None = None,
    ):
        self.options = options
        self.config = config or BuildConfig()
        self.cache = cache if cache is not None else ResultCache()
        self.helpers = helpers or LoaderHelpers(self.config)
        self.metrics = metrics or get_metrics()
        self.chain = LoaderChain(
            RuleSet(options.rules),
            self.metrics,
            encoding=self.config.encoding,
        )

    @property
    def current(self) -> LoadContext | None:
        """Context of the resource currently being processed."""
        return current_context()

    async def request_resource(
        self,
        resource: str,
        content: Any = None,
        *,
        parent: LoadContext | None = None,
    ) -> Any:
        """
        Process a resource, or return its cached result.

        Args:
            resource: Identifier, ``path`` or ``path?query``, relative to
                the build root or absolute
            content: Already known content; None reads from disk if a
                rule matches
            parent: Requesting context; defaults to the active one

        Returns:
            Processed content, or a passthrough value
        """
        identity = resolve_resource(resource, self.config.input_dir)
        caller = parent if parent is not None else current_context()

        ctx = LoadContext.for_identity(
            identity,
            config=self.config,
            helpers=self.helpers,
            requester=self.request_resource,
            parent=caller,
        )
        token = activate_context(ctx)
        try:
            if identity.key in self.cache:
                self.metrics.record_request(cache_hit=True)
                logger.debug(f"Cache hit: {identity.key}")
                result = self.cache.get(identity.key)
            else:
                self.metrics.record_request(cache_hit=False)
                logger.debug(
                    f"Processing '{resource}' (depth={ctx.depth}, key={identity.key})"
                )
                result = await self.chain.run(identity, content, ctx)
                result = self.cache.store(identity.key, result)
        finally:
            restore_context(token)

        return result

    async def process_page(self, content: Any, input_path: str | Path) -> Any:
        """
        Process the page the host is currently building.

        The page is requested like any dependency, with its path taken
        relative to the build root and its content already known.
        """
        resource = os.path.relpath(
            os.path.abspath(input_path), os.path.abspath(self.config.input_dir)
        )
        logger.debug(f"Processing page {resource}")
        return await self.request_resource(resource, content)

    def __repr__(self) -> str:
        return f"LoadEngine(root='{self.config.input_dir}', cache={len(self.cache)})"
