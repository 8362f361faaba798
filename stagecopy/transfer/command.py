#!/usr/bin/env python3
"""Value objects for one filtered copy.

- TransferCommand: one copy-tool invocation (rules, ownership, endpoints)
- StagingMount: the volume that bridges extraction and injection
- HostIdentity: the user/group that owns files extracted to staging

Rendering to the copy tool's command line lives here, apart from rule
selection in stagecopy.rules.filters.
"""

import os
import shlex
from dataclasses import dataclass
from typing import List, Optional, Union

from stagecopy.core.constants import ARCHIVE_FLAGS
from stagecopy.rules.filters import FilterRuleSet, render_rules

Ownership = Optional[Union[str, int]]


def _as_contents(path: str) -> str:
    # Trailing slash: copy the directory's contents, not the directory itself.
    return path.rstrip("/") + "/"


@dataclass(frozen=True)
class HostIdentity:
    """User and group used for the extraction hop."""

    user: Union[str, int]
    group: Union[str, int]

    @classmethod
    def current(cls) -> "HostIdentity":
        """Identity of the running process (real uid/gid)."""
        return cls(os.getuid(), os.getgid())


@dataclass(frozen=True)
class TransferCommand:
    """One invocation of the copy tool.

    Attributes:
        source: Directory whose contents are copied
        destination: Directory receiving the contents
        rules: Ordered filter rules, first match wins
        owner: Owner for copied files (None leaves ownership unchanged)
        group: Group for copied files
        copy_tool: Copy tool executable
    """

    source: str
    destination: str
    rules: FilterRuleSet = ()
    owner: Ownership = None
    group: Ownership = None
    copy_tool: str = "rsync"

    @property
    def chown(self) -> Optional[str]:
        """The ``--chown`` argument, or None when neither owner nor group is set."""
        if self.owner is None and self.group is None:
            return None
        owner = "" if self.owner is None else self.owner
        group = "" if self.group is None else self.group
        return f"--chown={owner}:{group}"

    def to_argv(self) -> List[str]:
        """Render as an argument vector."""
        argv = [self.copy_tool, *ARCHIVE_FLAGS]
        if self.chown:
            argv.append(self.chown)
        argv.extend(render_rules(self.rules))
        argv.append(_as_contents(self.source))
        argv.append(self.destination)
        return argv

    def to_shell(self) -> str:
        """Render as a single shell command line, each argument quoted."""
        return " ".join(shlex.quote(arg) for arg in self.to_argv())

    def __str__(self) -> str:
        return self.to_shell()


@dataclass(frozen=True)
class StagingMount:
    """A host directory mounted into a build container."""

    host_path: str
    container_path: str
    read_only: bool = True

    def to_volume(self) -> str:
        """Render as a docker ``--volume`` value, e.g. ``/tmp/a:/.a:ro``."""
        mode = "ro" if self.read_only else "rw"
        return f"{self.host_path}:{self.container_path}:{mode}"

    def writable(self) -> "StagingMount":
        """The same mount with write access."""
        return StagingMount(self.host_path, self.container_path, read_only=False)

    def __str__(self) -> str:
        return self.to_volume()
