#!/usr/bin/env python3
"""Unit tests for stagecopy.core.validators module."""

import pytest

from stagecopy.core.constants import ErrorCode, Limits
from stagecopy.core.validators import (
    InvalidPatternError,
    ValidationError,
    validate_artifact_name,
    validate_copy_options,
    validate_ownership,
    validate_path,
    validate_pattern,
    validate_patterns,
)
from stagecopy.transfer.artifacts import CopyOptions


class TestValidationError:
    """Tests for ValidationError exception."""

    def test_validation_error_message(self):
        error = ValidationError("Test error")
        assert str(error) == "Test error"
        assert error.error_code == ErrorCode.INVALID_INPUT

    def test_invalid_pattern_is_validation_error(self):
        error = InvalidPatternError("bad", pattern="")
        assert isinstance(error, ValidationError)
        assert error.pattern == ""


class TestValidatePath:
    """Tests for validate_path function."""

    def test_valid(self):
        assert validate_path("/build/dist") is True
        assert validate_path("/") is True

    def test_relative_allowed_when_requested(self):
        assert validate_path("build", absolute=False) is True

    def test_relative_rejected(self):
        with pytest.raises(ValidationError, match="absolute"):
            validate_path("build")

    def test_empty(self):
        with pytest.raises(ValidationError, match="empty"):
            validate_path("")

    def test_not_string(self):
        with pytest.raises(ValidationError, match="string"):
            validate_path(42)

    def test_traversal(self):
        with pytest.raises(ValidationError, match="traversal"):
            validate_path("/build/../etc")

    def test_dots_in_names_allowed(self):
        assert validate_path("/build/..hidden/x..y") is True

    def test_null_byte(self):
        with pytest.raises(ValidationError, match="null"):
            validate_path("/a\0b")

    def test_too_long(self):
        with pytest.raises(ValidationError, match="maximum length"):
            validate_path("/" + "a" * Limits.MAX_PATH_LENGTH)


class TestValidatePattern:
    """Tests for validate_pattern function."""

    @pytest.mark.parametrize("pattern", ["app", "app/config", "*.log", "**/cache", "lib/[ab]*", "."])
    def test_valid(self, pattern):
        assert validate_pattern(pattern) is True

    @pytest.mark.parametrize("pattern", ["", "   "])
    def test_empty(self, pattern):
        with pytest.raises(InvalidPatternError, match="empty"):
            validate_pattern(pattern)

    def test_not_string(self):
        with pytest.raises(InvalidPatternError, match="string"):
            validate_pattern(None)

    def test_control_characters(self):
        with pytest.raises(InvalidPatternError, match="control"):
            validate_pattern("app\nconfig")

    def test_escapes_base(self):
        with pytest.raises(InvalidPatternError, match="escapes"):
            validate_pattern("app/../../etc")

    def test_error_carries_pattern(self):
        with pytest.raises(InvalidPatternError) as excinfo:
            validate_pattern("a\0")
        assert excinfo.value.pattern == "a\0"


class TestValidatePatterns:
    """Tests for validate_patterns function."""

    def test_valid(self):
        assert validate_patterns(["a", "b/c"], "include") is True
        assert validate_patterns([], "exclude") is True

    def test_reports_index(self):
        with pytest.raises(InvalidPatternError, match="exclude path at index 1"):
            validate_patterns(["a", ""], "exclude")

    def test_string_rejected(self):
        with pytest.raises(InvalidPatternError, match="must be a list"):
            validate_patterns("app", "include")


class TestValidateArtifactName:
    """Tests for validate_artifact_name function."""

    @pytest.mark.parametrize("name", ["web", "web-assets", "v1.2_build", "0day"])
    def test_valid(self, name):
        assert validate_artifact_name(name) is True

    @pytest.mark.parametrize("name", ["", "a/b", "..", ".hidden", "with space"])
    def test_invalid(self, name):
        with pytest.raises(ValidationError):
            validate_artifact_name(name)

    def test_too_long(self):
        with pytest.raises(ValidationError, match="maximum length"):
            validate_artifact_name("a" * (Limits.MAX_ARTIFACT_NAME_LENGTH + 1))


class TestValidateOwnership:
    """Tests for validate_ownership function."""

    @pytest.mark.parametrize("value", [None, "www-data", 0, 1000])
    def test_valid(self, value):
        assert validate_ownership(value, "owner") is True

    @pytest.mark.parametrize("value", ["", "a:b", "a b", -1, True, 1.5])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            validate_ownership(value, "group")


class TestValidateCopyOptions:
    """Tests for validate_copy_options function."""

    def test_valid(self):
        options = CopyOptions(
            cwd="/build", to="/app", include_paths=["a"], exclude_paths=["a/b"], owner="app"
        )
        assert validate_copy_options(options) is True

    def test_invalid_cwd(self):
        with pytest.raises(ValidationError, match="cwd"):
            validate_copy_options(CopyOptions(cwd="build", to="/app"))

    def test_invalid_include(self):
        with pytest.raises(InvalidPatternError, match="include"):
            validate_copy_options(CopyOptions(cwd="/build", to="/app", include_paths=[""]))

    def test_invalid_group(self):
        with pytest.raises(ValidationError, match="group"):
            validate_copy_options(CopyOptions(cwd="/build", to="/app", group="a:b"))
