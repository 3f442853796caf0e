"""
Utility helpers exposed to loaders as ``ctx.helpers``.

The bundle is bound to the build configuration so helpers that need the
build root do not have to look it up themselves.
"""
from __future__ import annotations

import hashlib
import os
import re
from pathlib import Path, PurePath
from typing import TYPE_CHECKING
from urllib.parse import unquote_plus

if TYPE_CHECKING:
    from .config import BuildConfig

_HASH_TOKEN = re.compile(r"\[hash(?::(\d+))?\]")


class LoaderHelpers:
    """Capability bundle of helper operations available to loaders."""

    def __init__(self, config: BuildConfig):
        self._config = config

    @property
    def root(self) -> Path:
        return Path(os.path.abspath(self._config.input_dir))

    def parse_query(self, query: str) -> dict[str, str | bool]:
        """
        Parse a resource query into a dict.

        ``?a=1&flag&b=x`` becomes ``{"a": "1", "flag": True, "b": "x"}``.
        Keys without a value map to True.
        """
        query = query[1:] if query.startswith("?") else query
        result: dict[str, str | bool] = {}
        for part in query.split("&"):
            if not part:
                continue
            key, sep, value = part.partition("=")
            result[unquote_plus(key)] = unquote_plus(value) if sep else True
        return result

    def relative(self, path: str | Path) -> str:
        """Path relative to the build root, with forward slashes."""
        relative = os.path.relpath(os.path.abspath(path), self.root)
        return PurePath(relative).as_posix()

    def content_hash(
        self,
        content: str | bytes,
        algorithm: str = "md5",
        length: int | None = None,
    ) -> str:
        data = content.encode(self._config.encoding) if isinstance(content, str) else content
        digest = hashlib.new(algorithm, data).hexdigest()
        return digest[:length] if length is not None else digest

    def interpolate_name(
        self,
        template: str,
        resource_path: str | Path,
        content: str | bytes = b"",
    ) -> str:
        """
        Fill a file name template.

        Supported tokens: ``[name]``, ``[ext]`` (without dot), ``[path]``
        (directory relative to the build root, with trailing slash when
        not empty), ``[hash]`` and ``[hash:N]`` (md5 of content).
        """
        path = PurePath(resource_path)
        directory = self.relative(path.parent) if path.is_absolute() else path.parent.as_posix()
        directory = "" if directory == "." else directory + "/"

        name = template.replace("[name]", path.stem)
        name = name.replace("[ext]", path.suffix.lstrip("."))
        name = name.replace("[path]", directory)
        return _HASH_TOKEN.sub(
            lambda m: self.content_hash(content, length=int(m.group(1)) if m.group(1) else None),
            name,
        )
