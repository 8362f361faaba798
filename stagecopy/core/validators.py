"""
stagecopy Core: Input Validators.

This module validates user input before it reaches the rule builder:
artifact names, container paths, include/exclude patterns and whole artifact
copy options. The rule builder itself trusts its input, so everything a caller
supplies must pass through here first.
"""
import re
from typing import Any, Iterable, Optional, Union

from stagecopy.core.constants import ErrorCode, Limits

_ARTIFACT_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class ValidationError(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.error_code = error_code


class InvalidPatternError(ValidationError):
    """An include or exclude pattern is empty or malformed."""

    def __init__(self, message: str, pattern: Any = None):
        super().__init__(message, ErrorCode.INVALID_INPUT)
        self.pattern = pattern


def _character_problem(value: str) -> Optional[str]:
    """Return a description of what is wrong with value's characters, if anything."""
    if len(value) > Limits.MAX_PATH_LENGTH:
        return f"exceeds maximum length ({Limits.MAX_PATH_LENGTH})"

    if "\0" in value:
        return "contains null bytes"

    if any(ord(c) < 32 for c in value):
        return "contains control characters"

    return None


def validate_path(path: str, absolute: bool = True) -> bool:
    """Validate a directory path inside a build unit.

    Args:
        path: Path to validate
        absolute: Require the path to start with "/"

    Returns:
        True if valid

    Raises:
        ValidationError: If path is invalid
    """
    if not isinstance(path, str):
        raise ValidationError(f"Path must be string, got {type(path)}")

    if not path:
        raise ValidationError("Path cannot be empty")

    problem = _character_problem(path)
    if problem:
        raise ValidationError(f"Path {problem}")

    if absolute and not path.startswith("/"):
        raise ValidationError(f"Path must be absolute: {path}")

    if ".." in path.split("/"):
        raise ValidationError("Path traversal not allowed")

    return True


def validate_pattern(pattern: str) -> bool:
    """Validate a relative include/exclude pattern.

    Patterns may contain rsync glob syntax (``*``, ``**``, ``?``, ``[...]``).

    Args:
        pattern: Pattern to validate

    Returns:
        True if valid

    Raises:
        InvalidPatternError: If pattern is invalid
    """
    if not isinstance(pattern, str):
        raise InvalidPatternError(f"Pattern must be string, got {type(pattern)}", pattern)

    if not pattern.strip():
        raise InvalidPatternError("Pattern cannot be empty", pattern)

    problem = _character_problem(pattern)
    if problem:
        raise InvalidPatternError(f"Invalid pattern: {problem}", pattern)

    if ".." in pattern.split("/"):
        raise InvalidPatternError(f"Invalid pattern: escapes base directory: {pattern}", pattern)

    return True


def validate_patterns(patterns: Iterable[str], kind: str) -> bool:
    """Validate every pattern of an include or exclude list.

    Args:
        patterns: Patterns to validate
        kind: Label used in error messages ("include" or "exclude")

    Returns:
        True if all patterns are valid

    Raises:
        InvalidPatternError: On the first invalid pattern
    """
    if isinstance(patterns, str):
        raise InvalidPatternError(f"{kind} paths must be a list, got a string", patterns)

    for i, pattern in enumerate(patterns):
        try:
            validate_pattern(pattern)
        except InvalidPatternError as e:
            raise InvalidPatternError(f"Invalid {kind} path at index {i}: {e}", pattern)

    return True


def validate_artifact_name(name: str) -> bool:
    """Validate an artifact name.

    The name becomes a directory component of the staging paths.

    Args:
        name: Artifact name

    Returns:
        True if valid

    Raises:
        ValidationError: If name is invalid
    """
    if not name:
        raise ValidationError("Artifact name cannot be empty")

    if not isinstance(name, str):
        raise ValidationError(f"Artifact name must be string, got {type(name)}")

    if len(name) > Limits.MAX_ARTIFACT_NAME_LENGTH:
        raise ValidationError(
            f"Artifact name exceeds maximum length ({Limits.MAX_ARTIFACT_NAME_LENGTH})"
        )

    if not _ARTIFACT_NAME_RE.match(name):
        raise ValidationError(
            f"Invalid artifact name: {name!r}: must start with a letter or digit and contain "
            "only letters, digits, dot, underscore, and hyphen"
        )

    return True


def validate_ownership(value: Optional[Union[str, int]], kind: str) -> bool:
    """Validate an owner or group identifier.

    Args:
        value: User/group name or numeric id, or None
        kind: "owner" or "group"

    Returns:
        True if valid

    Raises:
        ValidationError: If value is invalid
    """
    if value is None:
        return True

    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValidationError(f"{kind} must be a name or numeric id, got {type(value)}")

    if isinstance(value, int):
        if value < 0:
            raise ValidationError(f"{kind} id must be non-negative: {value}")
        return True

    if not value or ":" in value or any(c.isspace() for c in value):
        raise ValidationError(f"Invalid {kind}: {value!r}")

    return True


def validate_copy_options(options: Any) -> bool:
    """Validate artifact copy options before any rule is built.

    Args:
        options: CopyOptions instance

    Returns:
        True if valid

    Raises:
        ValidationError: If a path or ownership field is invalid
        InvalidPatternError: If an include/exclude pattern is invalid
    """
    try:
        validate_path(options.cwd)
    except ValidationError as e:
        raise ValidationError(f"Invalid cwd: {e}")

    try:
        validate_path(options.to)
    except ValidationError as e:
        raise ValidationError(f"Invalid destination: {e}")

    validate_patterns(options.include_paths, "include")
    validate_patterns(options.exclude_paths, "exclude")
    validate_ownership(options.owner, "owner")
    validate_ownership(options.group, "group")

    return True
