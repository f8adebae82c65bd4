"""Tests for the JSON configuration file."""

import json
import logging

import pytest

from dirtree_logger.config import AppConfiguration, load_configuration
from dirtree_logger.exceptions import InvalidConfigurationError
from dirtree_logger.file_system_tree.traversal_mode import TraversalMode
from dirtree_logger.filters.configuration import FilterConfiguration


@pytest.fixture
def config_file(tmp_path):
    def write(data):
        path = tmp_path / "project.config.json"
        path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
        return path

    return write


def test_defaults():
    config = load_configuration()
    assert config == AppConfiguration()
    assert config.logging_mode is TraversalMode.CLEAN
    assert config.output_format == "text"
    assert config.max_depth == -1
    assert config.show_progress is True
    assert config.include_file_info is False
    assert config.filters == FilterConfiguration()


def test_missing_file_uses_defaults(tmp_path, caplog):
    with caplog.at_level(logging.INFO, logger="dirtree_logger"):
        config = load_configuration(tmp_path / "absent.json")
    assert config == AppConfiguration()
    assert "using default configuration" in caplog.text


def test_file_size_is_unlimited_unless_configured(config_file):
    assert AppConfiguration().filters.max_size_bytes is None
    assert load_configuration(config_file({"logging_mode": "CLEAN"})).filters.max_size_bytes is None
    assert load_configuration(config_file({"max_file_size": "100MB"})).filters.max_size_bytes == 100 * 1024**2


def test_full_file(config_file):
    path = config_file(
        {
            "logging_mode": "EVERYTHING",
            "include_file_info": True,
            "max_file_size": "100MB",
            "output_format": "JSON",
            "max_depth": 3,
            "show_progress": False,
            "filters": {"exclude_patterns": ["*.tmp"], "ignore_hidden": True},
            "render": {"include_statistics": True},
        }
    )

    config = load_configuration(path)

    assert config.logging_mode is TraversalMode.EVERYTHING
    assert config.output_format == "json"
    assert config.max_depth == 3
    assert config.show_progress is False
    assert config.filters.max_size_bytes == 100 * 1024**2
    assert config.filters.exclude_patterns == frozenset({"*.tmp"})
    assert config.filters.ignore_hidden
    assert config.render_options() == {"show_timestamps": True, "show_attributes": True, "include_statistics": True}


def test_explicit_render_options_win():
    config = AppConfiguration.from_mapping({"include_file_info": True, "render": {"show_attributes": False}})
    assert config.render_options() == {"show_timestamps": True, "show_attributes": False}


def test_max_size_bytes_in_filters_takes_precedence():
    config = AppConfiguration.from_mapping({"max_file_size": "1MB", "filters": {"max_size_bytes": 10}})
    assert config.filters.max_size_bytes == 10


def test_every_problem_is_reported():
    with pytest.raises(InvalidConfigurationError) as exc_info:
        AppConfiguration.from_mapping(
            {
                "logging_mode": "clean",
                "show_progress": "yes",
                "output_format": "yaml",
                "max_depth": -5,
                "max_file_size": "huge",
                "colour": True,
            }
        )
    assert len(exc_info.value.problems) == 6


def test_invalid_filter_options_are_prefixed():
    with pytest.raises(InvalidConfigurationError, match="filters: unknown option"):
        AppConfiguration.from_mapping({"filters": {"exclude": ["*.txt"]}})


def test_malformed_json(config_file):
    with pytest.raises(InvalidConfigurationError, match="project.config.json"):
        load_configuration(config_file("{not json"))


def test_top_level_must_be_object(config_file):
    with pytest.raises(InvalidConfigurationError, match="top level must be an object"):
        load_configuration(config_file([1, 2, 3]))
