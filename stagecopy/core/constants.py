"""
stagecopy Core: Constants

This module provides system-wide constants, error codes, configuration keys
and defaults shared by the rule builder and the transfer orchestrator.
"""
from enum import IntEnum

# Version information
STAGECOPY_VERSION = "1.0.0"


# Error codes
class ErrorCode(IntEnum):
    """Standardized error codes for stagecopy operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad pattern, path or configuration
    NOT_FOUND = 2  # File or resource doesn't exist
    EXECUTION_FAILED = 3  # Copy tool or container runtime exited non-zero
    INTERNAL_ERROR = 6  # Contract violation inside stagecopy


class Limits:
    """Input limits and defaults."""

    MAX_PATH_LENGTH = 4096
    MAX_ARTIFACT_NAME_LENGTH = 128
    DEFAULT_MAX_WORKERS = 4


# Copy tool flags
ARCHIVE_FLAGS = ("--archive", "--links")
CATCH_ALL = "**"


class ConfigKey:
    """Configuration key constants."""

    ROOT = "stagecopy"
    COPY_TOOL = "copy_tool"
    HOST_TMP_DIR = "host_tmp_dir"
    CONTAINER_TMP_DIR = "container_tmp_dir"
    HOST_PATH_TEMPLATE = "host_path_template"
    STAGING_PATH_TEMPLATE = "staging_path_template"
    DRY_RUN = "dry_run"
    MAX_WORKERS = "max_workers"
    LOGGING = "logging"

    # Artifact entries
    ARTIFACTS = "artifacts"
    ARTIFACT_NAME = "name"
    ARTIFACT_SOURCE = "source"
    ARTIFACT_CWD = "cwd"
    ARTIFACT_INCLUDE = "include_paths"
    ARTIFACT_EXCLUDE = "exclude_paths"
    ARTIFACT_TO = "to"
    ARTIFACT_OWNER = "owner"
    ARTIFACT_GROUP = "group"


# Default configuration values
DEFAULT_CONFIG = {
    ConfigKey.COPY_TOOL: "rsync",
    ConfigKey.HOST_TMP_DIR: "/tmp/stagecopy",
    ConfigKey.CONTAINER_TMP_DIR: "/.stagecopy",
    ConfigKey.HOST_PATH_TEMPLATE: "{{ host_tmp_dir }}/artifact/{{ name }}",
    ConfigKey.STAGING_PATH_TEMPLATE: "{{ container_tmp_dir }}/artifact/{{ name }}",
    ConfigKey.DRY_RUN: False,
    ConfigKey.MAX_WORKERS: Limits.DEFAULT_MAX_WORKERS,
    ConfigKey.LOGGING: {
        "level": "INFO",
        "file": None,
    },
}
