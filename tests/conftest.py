"""Shared pytest fixtures for stagecopy tests."""
from pathlib import Path
from typing import Any, Dict
from unittest.mock import MagicMock

import pytest
import yaml

from stagecopy.infrastructure.logger import Logger
from stagecopy.transfer.artifacts import ArtifactDescriptor, CopyOptions
from stagecopy.transfer.command import HostIdentity
from stagecopy.transfer.image import ImageInstructions
from stagecopy.transfer.naming import StagingPaths
from stagecopy.transfer.orchestrator import ArtifactTransferOrchestrator
from stagecopy.transfer.runner import BuildUnitRunner


@pytest.fixture
def quiet_logger() -> Logger:
    """Logger that discards everything below CRITICAL."""
    return Logger(name="stagecopy.tests", level="CRITICAL")


@pytest.fixture
def staging_paths() -> StagingPaths:
    """Staging naming rooted at fixed host/container directories."""
    return StagingPaths("/tmp/build-1", "/.stagecopy")


@pytest.fixture
def identity() -> HostIdentity:
    """Fixed host identity for the extract hop."""
    return HostIdentity(1000, 1000)


@pytest.fixture
def runner() -> MagicMock:
    """Build unit runner that records calls instead of starting containers."""
    return MagicMock(spec=BuildUnitRunner)


@pytest.fixture
def image() -> ImageInstructions:
    """Empty destination image."""
    return ImageInstructions("app")


@pytest.fixture
def orchestrator(runner, staging_paths, identity, quiet_logger) -> ArtifactTransferOrchestrator:
    """Orchestrator wired to the recording runner."""
    return ArtifactTransferOrchestrator(
        runner=runner,
        staging_paths=staging_paths,
        identity=identity,
        logger=quiet_logger,
    )


@pytest.fixture
def make_descriptor():
    """Factory for artifact descriptors with sensible defaults."""

    def _make(
        name: str = "web",
        source: str = "builder:latest",
        cwd: str = "/build/dist",
        to: str = "/app",
        include_paths=(),
        exclude_paths=(),
        owner=None,
        group=None,
    ) -> ArtifactDescriptor:
        return ArtifactDescriptor(
            name=name,
            source_build_unit=source,
            options=CopyOptions(
                cwd=cwd,
                to=to,
                include_paths=include_paths,
                exclude_paths=exclude_paths,
                owner=owner,
                group=group,
            ),
        )

    return _make


@pytest.fixture
def build_config() -> Dict[str, Any]:
    """A build file with settings and two artifacts."""
    return {
        "stagecopy": {
            "host_tmp_dir": "/tmp/build-7",
            "container_tmp_dir": "/.stagecopy",
            "logging": {"level": "CRITICAL"},
        },
        "artifacts": [
            {
                "name": "web",
                "source": "web-builder:latest",
                "cwd": "/build/dist",
                "include_paths": ["static", "index.html"],
                "exclude_paths": ["static/maps"],
                "to": "/srv/www",
                "owner": "www-data",
                "group": "www-data",
            },
            {
                "name": "tools",
                "source": "tools-builder:latest",
                "cwd": "/usr/local/bin",
                "to": "/usr/local/bin",
            },
        ],
    }


@pytest.fixture
def build_file(tmp_path: Path, build_config: Dict[str, Any]) -> Path:
    """build_config written as YAML."""
    path = tmp_path / "build.yaml"
    path.write_text(yaml.safe_dump(build_config))
    return path
