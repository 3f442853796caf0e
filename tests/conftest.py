"""
Pytest configuration and fixtures for loadpipe tests.
"""

import sys
from pathlib import Path

import pytest

# Add the repository root to path for imports
# This allows `from loadpipe import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from loadpipe import BuildConfig, LoadMetrics  # noqa: E402


@pytest.fixture
def site_dir(tmp_path):
    """Build root with a few source files."""
    (tmp_path / "a.txt").write_text("hello", encoding="utf-8")
    (tmp_path / "b.txt").write_text("world", encoding="utf-8")
    (tmp_path / "styles").mkdir()
    (tmp_path / "styles" / "main.css").write_text("body { color: red; }", encoding="utf-8")
    (tmp_path / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\xff\x00")
    return tmp_path


@pytest.fixture
def build_config(site_dir):
    return BuildConfig(input_dir=site_dir)


@pytest.fixture
def metrics():
    """Isolated metrics so tests do not share counters."""
    return LoadMetrics()


@pytest.fixture
def counting_upper():
    """Loader that uppercases text and counts its calls."""

    def upper(content, options, ctx):
        upper.calls += 1
        return content.upper()

    upper.calls = 0
    return upper
