"""Tests for custom exceptions."""

import builtins

import pytest

from dirtree_logger.exceptions import (
    DirectoryTreeError,
    InvalidConfigurationError,
    NotADirectoryError,
    PathNotFoundError,
    PermissionDeniedError,
    UnsupportedPatternError,
)


class TestRootPathErrors:
    """Test errors raised for an unusable root path."""

    def test_path_not_found(self):
        error = PathNotFoundError("/missing")
        assert error.path == "/missing"
        assert str(error) == "Root path does not exist: /missing"
        assert isinstance(error, FileNotFoundError)

    def test_not_a_directory(self):
        error = NotADirectoryError("/etc/hostname")
        assert error.path == "/etc/hostname"
        assert isinstance(error, builtins.NotADirectoryError)

    def test_permission_denied(self):
        error = PermissionDeniedError("/root/secret", "Permission denied")
        assert error.path == "/root/secret"
        assert error.reason == "Permission denied"
        assert isinstance(error, PermissionError)


class TestConfigurationErrors:
    """Test errors raised for invalid configuration and patterns."""

    def test_problems_are_joined(self):
        error = InvalidConfigurationError(["a is wrong", "b is wrong"], "json renderer")
        assert error.problems == ["a is wrong", "b is wrong"]
        assert str(error) == "Invalid json renderer configuration: a is wrong; b is wrong"
        assert isinstance(error, ValueError)

    def test_unsupported_pattern(self):
        error = UnsupportedPatternError("[", "bad range")
        assert error.pattern == "["
        assert isinstance(error, ValueError)


@pytest.mark.parametrize(
    "error",
    [
        PathNotFoundError("/x"),
        NotADirectoryError("/x"),
        PermissionDeniedError("/x", "denied"),
        InvalidConfigurationError(["bad"]),
        UnsupportedPatternError("*", "bad"),
    ],
)
def test_all_errors_share_base_class(error):
    assert isinstance(error, DirectoryTreeError)
