"""
loadpipe - recursive, memoizing content loaders for static site builds.

loadpipe decides which ordered chain of loaders applies to a resource,
runs the resource's content through it and caches the result by the
resource's resolved identity. Loaders can request other resources while
they run; those requests go through the same machinery and caches.

- **Rules**: first-match list of path tests and loader chains
- **Loaders**: ``loader(content, options, ctx)``, sync or async
- **Context**: immutable description of the resource being transformed
- **Cache**: shared per build, cleared before each incremental rebuild

Quick Start:
    >>> from loadpipe import BuildConfig, LoadEngine, validate_options
    >>>
    >>> def upper(content, options, ctx):
    ...     return content.upper()
    >>>
    >>> options = validate_options({"rules": [{"test": r"\\.txt$", "loaders": [upper]}]})
    >>> engine = LoadEngine(options, config=BuildConfig(input_dir="src"))
    >>> await engine.request_resource("a.txt", "hi")
    'HI'
"""

__version__ = "0.1.0"
__license__ = "MIT"

from loadpipe.cache import ResultCache
from loadpipe.config import BuildConfig, LoadOptions, parse_options, validate_options
from loadpipe.context import LoadContext, current_context
from loadpipe.engine import LoadEngine
from loadpipe.errors import ConfigurationError, ContentAcquisitionError, LoadError
from loadpipe.helpers import LoaderHelpers
from loadpipe.host import BuildHost, MemoryBuildHost, PageContext, install
from loadpipe.observability import LoadMetrics, get_metrics, reset_metrics
from loadpipe.resource import ResourceIdentity, parse_resource, resolve_resource
from loadpipe.rules import LoaderBinding, Rule, RuleSet, raw_loader

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Engine
    "LoadEngine",
    "LoadContext",
    "current_context",
    "ResultCache",
    # Configuration
    "BuildConfig",
    "LoadOptions",
    "parse_options",
    "validate_options",
    "Rule",
    "RuleSet",
    "LoaderBinding",
    "raw_loader",
    # Resources
    "ResourceIdentity",
    "parse_resource",
    "resolve_resource",
    # Helpers
    "LoaderHelpers",
    # Host integration
    "BuildHost",
    "MemoryBuildHost",
    "PageContext",
    "install",
    # Errors
    "LoadError",
    "ConfigurationError",
    "ContentAcquisitionError",
    # Observability
    "LoadMetrics",
    "get_metrics",
    "reset_metrics",
]
