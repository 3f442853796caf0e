"""
Configuration models for loadpipe.

Loader options are validated once, before any resource is processed.
Invalid options disable the pipeline for the run with a warning; they
never raise in the middle of a build.
"""
from __future__ import annotations

import codecs
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError
from .rules import Rule

logger = logging.getLogger(__name__)

_NO_RULES_BANNER = "\n".join([
    "=================================",
    " Try giving loadpipe some rules! ",
    "=================================",
    "",
])


class BuildConfig(BaseModel):
    """
    Global build configuration shared by every loader.

    Extra keys supplied by the host are kept and exposed to loaders
    through ``ctx.config`` unchanged.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    input_dir: Path = Field(default=Path("."), description="Build root directory")
    output_dir: Path = Field(default=Path("_site"), description="Build output directory")
    encoding: str = Field(default="utf-8", description="Encoding used for text content")

    @field_validator("encoding")
    @classmethod
    def _check_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as e:
            raise ValueError(f"unknown encoding {value!r}") from e
        return value


class LoadOptions(BaseModel):
    """Validated loader options: the ordered rule list."""

    model_config = ConfigDict(frozen=True)

    rules: list[Rule]


def validate_options(raw: Any) -> LoadOptions:
    """
    Validate raw loader options.

    Raises:
        ConfigurationError: if ``rules`` is missing, not a list, or
            contains a malformed rule
    """
    if isinstance(raw, LoadOptions):
        return raw
    rules = raw.get("rules") if isinstance(raw, dict) else getattr(raw, "rules", None)
    if not isinstance(rules, (list, tuple)):
        raise ConfigurationError("Loader options must define 'rules' as a list")
    try:
        return LoadOptions.model_validate({"rules": list(rules)})
    except ValidationError as e:
        details = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        ]
        raise ConfigurationError("Invalid loader rules", details=details) from e


def parse_options(raw: Any) -> LoadOptions | None:
    """
    Validate raw loader options, warning instead of raising.

    Returns:
        LoadOptions, or None when the pipeline should stay disabled
    """
    try:
        options = validate_options(raw)
    except ConfigurationError as e:
        if e.details:
            logger.warning(f"{e}; loadpipe disabled: {'; '.join(e.details)}")
        else:
            logger.warning(_NO_RULES_BANNER)
        return None

    logger.info(f"Loaded {len(options.rules)} loader rule(s)")
    return options
