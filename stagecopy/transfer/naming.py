#!/usr/bin/env python3
"""Staging path naming using Jinja2.

Each artifact gets one staging directory, seen under two names:

- host_tmp_path(name): where the directory lives on the build host
- staging_path(name): where it is mounted inside build containers

Both are rendered from Jinja2 templates so a build can relocate them:

Example:
    >>> paths = StagingPaths("/tmp/build-1", "/.stagecopy")
    >>> paths.host_tmp_path("web")
    '/tmp/build-1/artifact/web'
    >>> paths.staging_path("web")
    '/.stagecopy/artifact/web'
"""

from typing import Any, Dict, Optional

import jinja2

from stagecopy.core.constants import DEFAULT_CONFIG, ConfigKey
from stagecopy.core.validators import ValidationError, validate_artifact_name, validate_path
from stagecopy.infrastructure.config_manager import ConfigError


class StagingPaths:
    """Renders host and container staging paths for artifacts."""

    def __init__(
        self,
        host_tmp_dir: str,
        container_tmp_dir: str,
        host_template: Optional[str] = None,
        staging_template: Optional[str] = None,
    ):
        """Initialize staging path naming.

        Args:
            host_tmp_dir: Build-private temporary directory on the host
            container_tmp_dir: Mount root for temporary directories in containers
            host_template: Jinja2 template for host paths
            staging_template: Jinja2 template for container paths

        Raises:
            ConfigError: If a template does not compile
        """
        self.host_tmp_dir = host_tmp_dir
        self.container_tmp_dir = container_tmp_dir

        self._env = jinja2.Environment(undefined=jinja2.StrictUndefined, autoescape=False)
        self._host_template = self._compile(
            host_template or DEFAULT_CONFIG[ConfigKey.HOST_PATH_TEMPLATE]
        )
        self._staging_template = self._compile(
            staging_template or DEFAULT_CONFIG[ConfigKey.STAGING_PATH_TEMPLATE]
        )

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "StagingPaths":
        """Build from the merged ``stagecopy`` configuration section."""
        return cls(
            host_tmp_dir=settings.get(ConfigKey.HOST_TMP_DIR)
            or DEFAULT_CONFIG[ConfigKey.HOST_TMP_DIR],
            container_tmp_dir=settings.get(ConfigKey.CONTAINER_TMP_DIR)
            or DEFAULT_CONFIG[ConfigKey.CONTAINER_TMP_DIR],
            host_template=settings.get(ConfigKey.HOST_PATH_TEMPLATE),
            staging_template=settings.get(ConfigKey.STAGING_PATH_TEMPLATE),
        )

    def _compile(self, source: str) -> jinja2.Template:
        try:
            return self._env.from_string(source)
        except jinja2.TemplateSyntaxError as e:
            raise ConfigError(f"Invalid staging path template {source!r}: {e}")

    def _render(self, template: jinja2.Template, name: str) -> str:
        validate_artifact_name(name)

        try:
            path = template.render(
                host_tmp_dir=self.host_tmp_dir.rstrip("/"),
                container_tmp_dir=self.container_tmp_dir.rstrip("/"),
                name=name,
            )
        except jinja2.TemplateError as e:
            raise ConfigError(f"Cannot render staging path for {name}: {e}")

        try:
            validate_path(path)
        except ValidationError as e:
            raise ConfigError(f"Staging path for {name} is invalid: {e}")

        return path

    def host_tmp_path(self, name: str) -> str:
        """Host-side staging directory for an artifact."""
        return self._render(self._host_template, name)

    def staging_path(self, name: str) -> str:
        """Container-side staging directory for an artifact."""
        return self._render(self._staging_template, name)
