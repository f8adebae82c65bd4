"""Unit tests for filter configuration and size parsing."""

import pytest

from dirtree_logger.exceptions import InvalidConfigurationError
from dirtree_logger.filters.configuration import FilterConfiguration, parse_file_size


class TestParseFileSize:
    """Test the parse_file_size utility function."""

    def test_parse_bytes_only(self):
        """Test parsing raw byte values."""
        assert parse_file_size("1024") == 1024
        assert parse_file_size("0") == 0
        assert parse_file_size(999999) == 999999

    def test_units_are_binary(self):
        """Test that ambiguous units are read as powers of 1024."""
        assert parse_file_size("1KB") == 1024
        assert parse_file_size("1MB") == 1024**2
        assert parse_file_size("2.5K") == 2560

    def test_parse_explicit_binary_units(self):
        assert parse_file_size("1KiB") == 1024
        assert parse_file_size("1 GiB") == 1024**3

    @pytest.mark.parametrize("value", ["invalid", "", "1XB", True])
    def test_parse_invalid_format(self, value):
        with pytest.raises(ValueError, match="Invalid size format"):
            parse_file_size(value)

    def test_negative_int_is_rejected(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            parse_file_size(-1)


class TestFilterConfiguration:
    """Test the FilterConfiguration dataclass."""

    def test_defaults_include_everything(self):
        config = FilterConfiguration()
        assert config.enabled
        assert config.exclude_patterns == frozenset()
        assert config.include_patterns == frozenset()
        assert config.max_size_bytes is None
        assert not config.ignore_hidden
        assert not config.ignore_system

    def test_patterns_are_normalized_to_frozensets(self):
        config = FilterConfiguration(exclude_patterns=["*.tmp", "*.tmp"], include_patterns="*.py")
        assert config.exclude_patterns == frozenset({"*.tmp"})
        assert config.include_patterns == frozenset({"*.py"})

    def test_is_immutable(self):
        config = FilterConfiguration()
        with pytest.raises(AttributeError):
            config.ignore_hidden = True

    def test_all_problems_are_reported_together(self):
        with pytest.raises(InvalidConfigurationError) as exc_info:
            FilterConfiguration(max_size_bytes=-5, ignore_hidden="yes", exclude_patterns=[1])
        assert len(exc_info.value.problems) == 3
        assert "Invalid filter configuration" in str(exc_info.value)

    def test_from_mapping_parses_sizes(self):
        config = FilterConfiguration.from_mapping({"max_size_bytes": "2KB", "ignore_system": True})
        assert config.max_size_bytes == 2048
        assert config.ignore_system

    def test_from_mapping_rejects_unknown_keys(self):
        with pytest.raises(InvalidConfigurationError, match="unknown option"):
            FilterConfiguration.from_mapping({"exclude": ["*.txt"]})

    def test_from_mapping_rejects_bad_size(self):
        with pytest.raises(InvalidConfigurationError, match="Invalid size format"):
            FilterConfiguration.from_mapping({"max_size_bytes": "lots"})

    def test_to_dict_is_sorted(self):
        config = FilterConfiguration(exclude_patterns=frozenset({"b*", "a*"}))
        data = config.to_dict()
        assert data["exclude_patterns"] == ["a*", "b*"]
        assert data["include_patterns"] == []
        assert data["max_size_bytes"] is None
