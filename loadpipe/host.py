"""
Host build tool integration.

``install`` registers loadpipe with a host as a per-page transform and
hooks cache invalidation to the host's rebuild signal.

Usage:
    host = MemoryBuildHost(config=BuildConfig(input_dir="src"))
    install(host, {"rules": [{"test": r"\\.html$", "loaders": [minify]}]})
    html = await host.render(content, "src/index.html")
"""
from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from .cache import ResultCache
from .config import BuildConfig, parse_options
from .engine import LoadEngine
from .observability import LoadMetrics

logger = logging.getLogger(__name__)

TRANSFORM_NAME = "loadpipe"
BEFORE_WATCH = "before_watch"


@dataclass(frozen=True)
class PageContext:
    """The page a host is building, as handed to transforms."""

    input_path: str
    config: BuildConfig


Transform = Callable[[Any, PageContext], "Any | Awaitable[Any]"]


@runtime_checkable
class BuildHost(Protocol):
    """Registration surface a host build tool provides."""

    def add_transform(self, name: str, transform: Transform) -> None:
        """Run ``transform`` on every page the host builds."""
        ...

    def on(self, event: str, callback: Callable[[], Any]) -> None:
        """Call ``callback`` when the host emits ``event``."""
        ...


def install(
    host: BuildHost,
    options: Any,
    *,
    metrics: LoadMetrics | None = None,
) -> ResultCache | None:
    """
    Register loadpipe with a host.

    Args:
        host: Host build tool
        options: Raw loader options, a mapping with a ``rules`` list
        metrics: Metrics sink shared by every engine (global if omitted)

    Returns:
        The shared result cache, or None if the options were invalid and
        nothing was registered
    """
    load_options = parse_options(options)
    if load_options is None:
        return None

    cache = ResultCache()

    async def transform(content: Any, page: PageContext) -> Any:
        engine = LoadEngine(load_options, config=page.config, cache=cache, metrics=metrics)
        return await engine.process_page(content, page.input_path)

    def clear_cache() -> None:
        cache.clear()

    host.add_transform(TRANSFORM_NAME, transform)
    host.on(BEFORE_WATCH, clear_cache)
    logger.info(f"Installed '{TRANSFORM_NAME}' transform with {len(load_options.rules)} rule(s)")
    return cache


@dataclass
class MemoryBuildHost:
    """
    In-process host for embedding loadpipe without a build tool.

    Transforms run in registration order, each receiving the previous
    transform's output.
    """

    config: BuildConfig = field(default_factory=BuildConfig)
    transforms: dict[str, Transform] = field(default_factory=dict)
    listeners: dict[str, list[Callable[[], Any]]] = field(default_factory=dict)

    def add_transform(self, name: str, transform: Transform) -> None:
        self.transforms[name] = transform

    def on(self, event: str, callback: Callable[[], Any]) -> None:
        self.listeners.setdefault(event, []).append(callback)

    async def emit(self, event: str) -> None:
        for callback in self.listeners.get(event, []):
            result = callback()
            if inspect.isawaitable(result):
                await result

    async def render(self, content: Any, input_path: str | Path) -> Any:
        page = PageContext(input_path=str(input_path), config=self.config)
        for name, transform in self.transforms.items():
            result = transform(content, page)
            content = await result if inspect.isawaitable(result) else result
            logger.debug(f"Transform '{name}' applied to {page.input_path}")
        return content
