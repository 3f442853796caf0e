"""
Rules and loader bindings.

A rule pairs a path test with an ordered loader chain. Rules are
evaluated in configured order and the first match wins; chains from
several matching rules are never combined.

Example:
    rules = RuleSet([
        Rule(test=r"\\.txt$", loaders=[upper]),
        Rule(test=r"\\.png$", loaders=[{"loader": optimize, "options": {"level": 3}}]),
    ])
    loaders = rules.match("/site/a.txt")
"""
from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

LoaderFn = TypeVar("LoaderFn", bound=Callable[..., Any])


def raw_loader(loader: LoaderFn) -> LoaderFn:
    """Mark a loader as wanting uninterpreted bytes instead of text."""
    loader.raw = True  # type: ignore[attr-defined]
    return loader


class LoaderBinding(BaseModel):
    """
    A loader callable plus the options it is invoked with.

    Loaders are called as ``loader(content, options, ctx)`` and may return
    the new content or an awaitable resolving to it.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    loader: Callable[..., Any]
    options: Any = None

    @property
    def raw(self) -> bool:
        """Whether content should be acquired as bytes."""
        return bool(getattr(self.loader, "raw", False))

    @property
    def name(self) -> str:
        return getattr(self.loader, "__name__", type(self.loader).__name__)


class Rule(BaseModel):
    """
    Ordered loader chain for paths accepted by ``test``.

    ``test`` may be a compiled regex, a regex string or a callable taking
    the resolved path. Regexes match anywhere in the path.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    test: Any
    loaders: list[LoaderBinding] = Field(default_factory=list)

    @field_validator("test", mode="before")
    @classmethod
    def _compile_test(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return re.compile(value)
            except re.error as e:
                raise ValueError(f"invalid pattern {value!r}: {e}") from e
        if isinstance(value, re.Pattern) or callable(value):
            return value
        raise ValueError("test must be a regex pattern, a pattern string or a callable")

    @field_validator("loaders", mode="before")
    @classmethod
    def _coerce_loaders(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
            raise ValueError("loaders must be a list")
        coerced = []
        for item in value:
            if isinstance(item, (LoaderBinding, Mapping)):
                coerced.append(item)
            elif callable(item):
                coerced.append({"loader": item})
            else:
                coerced.append(item)
        return coerced

    @property
    def description(self) -> str:
        if isinstance(self.test, re.Pattern):
            return self.test.pattern
        return getattr(self.test, "__name__", repr(self.test))

    def matches(self, path: str) -> bool:
        if isinstance(self.test, re.Pattern):
            return self.test.search(path) is not None
        return bool(self.test(path))


class RuleSet:
    """First-match lookup over an ordered, static list of rules."""

    def __init__(self, rules: Sequence[Rule]):
        self._rules = tuple(rules)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def match(self, path: str) -> list[LoaderBinding] | None:
        """
        Return the loader chain of the first rule accepting ``path``.

        Returns None when no rule matches, or when the first matching rule
        has no loaders.
        """
        for rule in self._rules:
            if rule.matches(path):
                logger.debug(f"Rule '{rule.description}' matched {path}")
                return list(rule.loaders) or None
        logger.debug(f"No rule matched {path}")
        return None

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleSet(rules={[r.description for r in self._rules]})"
