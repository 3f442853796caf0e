"""
Content acquisition.

Reads a resource from disk when no content was supplied. Only the first
loader of the chain decides the mode: raw loaders get bytes, everything
else gets decoded text.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import ContentAcquisitionError

if TYPE_CHECKING:
    from .rules import LoaderBinding

logger = logging.getLogger(__name__)


def _read(path: Path, encoding: str | None) -> str | bytes:
    data = path.read_bytes()
    if encoding is None:
        return data
    return data.decode(encoding)


async def acquire_content(
    resource_path: str | Path,
    loaders: Sequence[LoaderBinding],
    *,
    encoding: str = "utf-8",
) -> str | bytes:
    """
    Read a resource's content for the given loader chain.

    Args:
        resource_path: Resolved path of the resource
        loaders: Matched loader chain (must not be empty)
        encoding: Text encoding used when the first loader is not raw

    Returns:
        bytes if the first loader is raw, decoded text otherwise

    Raises:
        ContentAcquisitionError: if the file cannot be read or decoded
    """
    path = Path(resource_path)
    raw = bool(loaders) and loaders[0].raw
    try:
        content = await asyncio.to_thread(_read, path, None if raw else encoding)
    except (OSError, ValueError, LookupError) as e:
        logger.debug(f"Acquisition failed for {path}: {e}")
        raise ContentAcquisitionError(str(path), e) from e

    logger.debug(f"Acquired {path} ({'bytes' if raw else 'text'}, {len(content)} units)")
    return content
