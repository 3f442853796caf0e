"""
Tests for configuration validation.
"""
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from loadpipe.config import BuildConfig, LoadOptions, parse_options, validate_options
from loadpipe.errors import ConfigurationError


def noop(content, options, ctx):
    return content


class TestBuildConfig:
    def test_defaults(self):
        config = BuildConfig()

        assert config.input_dir == Path(".")
        assert config.output_dir == Path("_site")
        assert config.encoding == "utf-8"

    def test_extra_host_keys_kept(self):
        config = BuildConfig(input_dir="src", path_prefix="/blog/")

        assert config.input_dir == Path("src")
        assert config.path_prefix == "/blog/"

    def test_encoding_aliases_accepted(self):
        assert BuildConfig(encoding="latin-1").encoding == "latin-1"

    def test_unknown_encoding_rejected_at_setup(self):
        with pytest.raises(ValidationError, match="unknown encoding"):
            BuildConfig(encoding="no-such-codec")


class TestValidateOptions:
    def test_valid_rules(self):
        options = validate_options({"rules": [{"test": r"\.txt$", "loaders": [noop]}]})

        assert isinstance(options, LoadOptions)
        assert len(options.rules) == 1

    def test_tuple_rules_accepted(self):
        options = validate_options({"rules": ({"test": r"\.txt$"},)})
        assert len(options.rules) == 1

    def test_object_with_rules_attribute(self):
        class Options:
            rules = [{"test": r".*", "loaders": [noop]}]

        assert len(validate_options(Options()).rules) == 1

    def test_already_validated_options_returned(self):
        options = validate_options({"rules": []})
        assert validate_options(options) is options

    @pytest.mark.parametrize("raw", [None, {}, {"rules": None}, {"rules": "not-a-list"}])
    def test_missing_or_non_list_rules(self, raw):
        with pytest.raises(ConfigurationError):
            validate_options(raw)

    def test_malformed_rule_reports_details(self):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_options({"rules": [{"loaders": [noop]}]})

        assert exc_info.value.details
        assert "rules.0.test" in exc_info.value.details[0]


class TestParseOptions:
    def test_returns_options(self):
        assert parse_options({"rules": []}) is not None

    def test_missing_rules_warns_and_disables(self, caplog):
        with caplog.at_level(logging.WARNING, logger="loadpipe.config"):
            assert parse_options({}) is None

        assert "Try giving loadpipe some rules!" in caplog.text

    def test_malformed_rule_warns_and_disables(self, caplog):
        with caplog.at_level(logging.WARNING, logger="loadpipe.config"):
            assert parse_options({"rules": [{"test": 42}]}) is None

        assert "loadpipe disabled" in caplog.text
