"""
Tests for host integration.
"""
import logging

import pytest

from loadpipe import BuildConfig, LoadMetrics
from loadpipe.host import (
    BEFORE_WATCH,
    TRANSFORM_NAME,
    BuildHost,
    MemoryBuildHost,
    install,
)


@pytest.fixture
def host(build_config):
    return MemoryBuildHost(config=build_config)


class TestInstall:
    def test_memory_host_satisfies_protocol(self, host):
        assert isinstance(host, BuildHost)

    def test_registers_transform_and_invalidation(self, host, counting_upper):
        cache = install(host, {"rules": [{"test": r"\.txt$", "loaders": [counting_upper]}]})

        assert cache is not None
        assert TRANSFORM_NAME in host.transforms
        assert len(host.listeners[BEFORE_WATCH]) == 1

    def test_invalid_options_register_nothing(self, host, caplog):
        with caplog.at_level(logging.WARNING):
            assert install(host, {"rules": "*.txt"}) is None

        assert host.transforms == {}
        assert host.listeners == {}
        assert "Try giving loadpipe some rules!" in caplog.text


class TestRender:
    @pytest.mark.asyncio
    async def test_page_transformed_and_cached(self, host, build_config, counting_upper):
        cache = install(
            host,
            {"rules": [{"test": r"\.txt$", "loaders": [counting_upper]}]},
            metrics=LoadMetrics(),
        )

        first = await host.render("page", build_config.input_dir / "a.txt")
        second = await host.render("page", build_config.input_dir / "a.txt")

        assert first == second == "PAGE"
        assert counting_upper.calls == 1
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_dependencies_share_cache_across_pages(self, host, build_config, counting_upper):
        async def include(content, options, ctx):
            return content + await ctx.add_dependency("b.txt")

        install(
            host,
            {"rules": [
                {"test": r"b\.txt$", "loaders": [counting_upper]},
                {"test": r"\.html$", "loaders": [include]},
            ]},
            metrics=LoadMetrics(),
        )

        assert await host.render("1:", build_config.input_dir / "one.html") == "1:WORLD"
        assert await host.render("2:", build_config.input_dir / "two.html") == "2:WORLD"
        assert counting_upper.calls == 1

    @pytest.mark.asyncio
    async def test_before_watch_clears_cache(self, host, build_config, counting_upper):
        cache = install(
            host,
            {"rules": [{"test": r"\.txt$", "loaders": [counting_upper]}]},
            metrics=LoadMetrics(),
        )

        await host.render("page", build_config.input_dir / "a.txt")
        await host.emit(BEFORE_WATCH)
        assert len(cache) == 0

        assert await host.render("edited", build_config.input_dir / "a.txt") == "EDITED"
        assert counting_upper.calls == 2

    @pytest.mark.asyncio
    async def test_transforms_run_in_registration_order(self, build_config):
        host = MemoryBuildHost(config=BuildConfig(input_dir=build_config.input_dir))
        host.add_transform("first", lambda content, page: content + "1")

        async def second(content, page):
            return content + "2"

        host.add_transform("second", second)

        assert await host.render("", "index.html") == "12"

    @pytest.mark.asyncio
    async def test_unmatched_page_passes_through(self, host, build_config):
        install(host, {"rules": [{"test": r"\.css$", "loaders": [lambda c, o, x: ""]}]}, metrics=LoadMetrics())

        assert await host.render("<p>hi</p>", build_config.input_dir / "index.html") == "<p>hi</p>"
