#!/usr/bin/env python3
"""Destination image build instructions.

The destination image is assembled later by the build-stage executor; here we
only record what it must do: run commands and attach volumes.
"""

import threading
from abc import ABC, abstractmethod
from typing import List

from stagecopy.transfer.command import StagingMount, TransferCommand


class DestinationImage(ABC):
    """Collects build instructions for an image."""

    @abstractmethod
    def add_command(self, command: TransferCommand) -> None:
        """Append a command to run while the image is assembled."""

    @abstractmethod
    def add_volume(self, mount: StagingMount) -> None:
        """Attach a volume to the build step."""

    @abstractmethod
    def has_volume(self, container_path: str) -> bool:
        """Check whether a volume is mounted at container_path."""


class ImageInstructions(DestinationImage):
    """In-memory, ordered record of image build instructions.

    Attributes:
        name: Image name for logging
        commands: Shell commands in the order they were added
        volumes: Mounts in the order they were added
    """

    def __init__(self, name: str = "image"):
        self.name = name
        self.commands: List[str] = []
        self.volumes: List[StagingMount] = []
        self._lock = threading.Lock()

    def add_command(self, command: TransferCommand) -> None:
        with self._lock:
            self.commands.append(command.to_shell())

    def add_volume(self, mount: StagingMount) -> None:
        with self._lock:
            if mount not in self.volumes:
                self.volumes.append(mount)

    def has_volume(self, container_path: str) -> bool:
        target = container_path.rstrip("/")
        with self._lock:
            return any(v.container_path.rstrip("/") == target for v in self.volumes)

    def volume_args(self) -> List[str]:
        """Volumes rendered as docker ``--volume`` values."""
        with self._lock:
            return [v.to_volume() for v in self.volumes]

    def __len__(self) -> int:
        return len(self.commands)
