#!/usr/bin/env python3
"""Artifact descriptors.

An artifact is a set of files copied out of one build unit and into the
destination image. Descriptors usually come from the ``artifacts`` list of a
build file:

    artifacts:
      - name: web
        source: registry.local/web-builder:latest
        cwd: /build/dist
        include_paths: [static, index.html]
        exclude_paths: [static/maps]
        to: /srv/www
        owner: www-data
        group: www-data
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from stagecopy.core.constants import ConfigKey
from stagecopy.core.validators import (
    InvalidPatternError,
    ValidationError,
    validate_artifact_name,
    validate_copy_options,
)

Ownership = Optional[Union[str, int]]


@dataclass(frozen=True)
class CopyOptions:
    """Where to copy from and to, what to copy, and who owns the result."""

    cwd: str
    to: str
    include_paths: Tuple[str, ...] = field(default_factory=tuple)
    exclude_paths: Tuple[str, ...] = field(default_factory=tuple)
    owner: Ownership = None
    group: Ownership = None

    def __post_init__(self):
        # Stored as tuples so options stay immutable once handed over.
        for attr in ("include_paths", "exclude_paths"):
            value = getattr(self, attr)
            if isinstance(value, str):
                value = (value,)
            object.__setattr__(self, attr, tuple(value))


@dataclass(frozen=True)
class ArtifactDescriptor:
    """An artifact to transfer from a source build unit."""

    name: str
    source_build_unit: Any
    options: CopyOptions

    def validate(self) -> bool:
        """Validate name and options.

        Raises:
            ValidationError: If the name, a path or ownership is invalid
            InvalidPatternError: If an include/exclude pattern is invalid
        """
        validate_artifact_name(self.name)
        if self.source_build_unit is None:
            raise ValidationError(f"Artifact {self.name} has no source build unit")
        validate_copy_options(self.options)
        return True


def _path_list(entry: Dict[str, Any], key: str) -> Sequence[str]:
    value = entry.get(key)
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list):
        raise ValidationError(f"{key} must be a list, got {type(value).__name__}")
    return tuple(value)


def artifact_from_dict(entry: Dict[str, Any]) -> ArtifactDescriptor:
    """Build and validate a descriptor from one ``artifacts`` entry.

    Args:
        entry: Mapping with name, source, cwd, to and optional
            include_paths, exclude_paths, owner, group

    Returns:
        Validated artifact descriptor

    Raises:
        ValidationError: If the entry is incomplete or invalid
    """
    if not isinstance(entry, dict):
        raise ValidationError("Artifact must be a dictionary")

    required = (
        ConfigKey.ARTIFACT_NAME,
        ConfigKey.ARTIFACT_SOURCE,
        ConfigKey.ARTIFACT_CWD,
        ConfigKey.ARTIFACT_TO,
    )
    for key in required:
        if not entry.get(key):
            raise ValidationError(f"Artifact must have '{key}' field")

    options = CopyOptions(
        cwd=entry[ConfigKey.ARTIFACT_CWD],
        to=entry[ConfigKey.ARTIFACT_TO],
        include_paths=_path_list(entry, ConfigKey.ARTIFACT_INCLUDE),
        exclude_paths=_path_list(entry, ConfigKey.ARTIFACT_EXCLUDE),
        owner=entry.get(ConfigKey.ARTIFACT_OWNER),
        group=entry.get(ConfigKey.ARTIFACT_GROUP),
    )
    descriptor = ArtifactDescriptor(
        name=entry[ConfigKey.ARTIFACT_NAME],
        source_build_unit=entry[ConfigKey.ARTIFACT_SOURCE],
        options=options,
    )
    descriptor.validate()
    return descriptor


def load_artifacts(entries: Any) -> List[ArtifactDescriptor]:
    """Build descriptors from an ``artifacts`` list.

    Raises:
        ValidationError: If the list or any entry is invalid, or names repeat
    """
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ValidationError("Artifacts must be a list")

    descriptors = []
    seen = set()
    for i, entry in enumerate(entries):
        try:
            descriptor = artifact_from_dict(entry)
        except InvalidPatternError as e:
            raise InvalidPatternError(f"Invalid artifact at index {i}: {e}", e.pattern)
        except ValidationError as e:
            raise ValidationError(f"Invalid artifact at index {i}: {e}")

        if descriptor.name in seen:
            raise ValidationError(f"Duplicate artifact name: {descriptor.name}")
        seen.add(descriptor.name)
        descriptors.append(descriptor)

    return descriptors
