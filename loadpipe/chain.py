"""
Loader chain execution.

Applies the loaders of the matched rule to a resource's content, in
order, each loader consuming the previous loader's output.
"""
from __future__ import annotations

import inspect
import logging
import time
from typing import TYPE_CHECKING, Any

from .acquire import acquire_content
from .errors import ContentAcquisitionError

if TYPE_CHECKING:
    from .context import LoadContext
    from .observability import LoadMetrics
    from .resource import ResourceIdentity
    from .rules import LoaderBinding, RuleSet

logger = logging.getLogger(__name__)


class LoaderChain:
    """
    Runs the loader chain selected by a rule set.

    Execution Model:
    - No matching rule: supplied content, or the identifier itself
    - No supplied content: read from disk; unreadable -> identifier
    - Loaders run strictly in sequence; awaitable results are awaited
    - Loader exceptions propagate to the requester
    """

    def __init__(
        self,
        rule_set: RuleSet,
        metrics: LoadMetrics,
        *,
        encoding: str = "utf-8",
    ):
        self.rule_set = rule_set
        self.metrics = metrics
        self.encoding = encoding

    async def run(
        self,
        identity: ResourceIdentity,
        content: Any,
        ctx: LoadContext,
    ) -> Any:
        """
        Process one resource.

        Args:
            identity: Resolved identity of the resource
            content: Already known content, or None to read from disk
            ctx: Context describing this resource

        Returns:
            The output of the last loader, or a passthrough value
        """
        loaders = self.rule_set.match(identity.resolved_path)

        if loaders is None:
            self.metrics.record_passthrough()
            return content if content is not None else identity.resource

        if content is None:
            try:
                content = await acquire_content(
                    identity.resolved_path, loaders, encoding=self.encoding
                )
            except ContentAcquisitionError as e:
                self.metrics.record_acquisition(success=False)
                self.metrics.record_passthrough()
                logger.debug(f"Passing through '{identity.resource}': {e}")
                return identity.resource
            self.metrics.record_acquisition(success=True)

        for binding in loaders:
            content = await self._apply(binding, content, ctx)

        return content

    async def _apply(self, binding: LoaderBinding, content: Any, ctx: LoadContext) -> Any:
        start_time = time.perf_counter()

        result = binding.loader(content, binding.options, ctx)
        if inspect.isawaitable(result):
            result = await result

        duration_ms = (time.perf_counter() - start_time) * 1000
        self.metrics.record_loader(binding.name, duration_ms)
        logger.debug(
            f"Loader '{binding.name}' on '{ctx.resource}': time={duration_ms:.1f}ms"
        )
        return result

    def __repr__(self) -> str:
        return f"LoaderChain(rules={len(self.rule_set)})"
