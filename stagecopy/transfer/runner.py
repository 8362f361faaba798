#!/usr/bin/env python3
"""Execution of transfer commands inside build units.

A build unit is whatever provides the files of an artifact: usually an image
that is started as a throwaway container. Runners never retry; a non-zero exit
becomes an ExecutionFailure and is left to the caller.
"""

import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Optional, Sequence

from stagecopy.core.constants import ErrorCode
from stagecopy.transfer.command import StagingMount, TransferCommand


class ExecutionFailure(Exception):
    """The copy tool or the container runtime exited non-zero."""

    def __init__(
        self,
        message: str,
        argv: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        self.message = message
        self.argv = list(argv or [])
        self.returncode = returncode
        self.stderr = stderr
        self.error_code = ErrorCode.EXECUTION_FAILED
        super().__init__(message)


class BuildUnitRunner(ABC):
    """Runs a transfer command inside a build unit."""

    @abstractmethod
    def run(
        self,
        build_unit: Any,
        command: TransferCommand,
        volumes: Sequence[StagingMount] = (),
    ) -> None:
        """Execute command inside build_unit with volumes attached.

        Raises:
            ExecutionFailure: If the command does not succeed
        """


class DockerRunner(BuildUnitRunner):
    """Runs transfer commands in a throwaway docker container.

    The build unit is an image reference; the container is removed on exit.
    """

    def __init__(self, docker_bin: str = "docker", extra_args: Optional[Sequence[str]] = None):
        """Initialize runner.

        Args:
            docker_bin: Docker CLI executable
            extra_args: Additional ``docker run`` arguments (e.g. ``--network=none``)
        """
        self.docker_bin = docker_bin
        self.extra_args = list(extra_args or [])

    def build_argv(
        self, build_unit: Any, command: TransferCommand, volumes: Sequence[StagingMount] = ()
    ) -> List[str]:
        """Docker command line that runs command inside build_unit."""
        argv = [self.docker_bin, "run", "--rm"]
        for volume in volumes:
            argv.extend(["--volume", volume.to_volume()])
        argv.extend(self.extra_args)
        argv.extend(["--entrypoint", "", str(build_unit)])
        argv.extend(command.to_argv())
        return argv

    def run(
        self,
        build_unit: Any,
        command: TransferCommand,
        volumes: Sequence[StagingMount] = (),
    ) -> None:
        for volume in volumes:
            if not volume.read_only:
                # Created here so docker does not create it owned by root.
                Path(volume.host_path).mkdir(parents=True, exist_ok=True)

        argv = self.build_argv(build_unit, command, volumes)

        try:
            result = subprocess.run(argv, capture_output=True, text=True, check=False)
        except OSError as e:
            raise ExecutionFailure(f"Cannot start {self.docker_bin}: {e}", argv)

        if result.returncode != 0:
            raise ExecutionFailure(
                f"Transfer in {build_unit} failed with exit code {result.returncode}: "
                f"{result.stderr.strip()}",
                argv,
                result.returncode,
                result.stderr,
            )
