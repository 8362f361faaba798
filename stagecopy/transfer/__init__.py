"""stagecopy Transfer - two-hop artifact copies between build units.

- ArtifactTransferOrchestrator: plans and applies extract/inject hops
- TransferCommand / StagingMount: the commands and volume of a transfer
- StagingPaths: host and container staging directory naming (Jinja2)
- DockerRunner / ImageInstructions: build unit execution and image instructions
"""

from .artifacts import ArtifactDescriptor, CopyOptions, artifact_from_dict, load_artifacts
from .command import HostIdentity, StagingMount, TransferCommand
from .image import DestinationImage, ImageInstructions
from .naming import StagingPaths
from .orchestrator import ArtifactTransferOrchestrator, MissingStagingMountError, TransferPlan
from .runner import BuildUnitRunner, DockerRunner, ExecutionFailure

__all__ = [
    # Artifacts
    "ArtifactDescriptor",
    "CopyOptions",
    "artifact_from_dict",
    "load_artifacts",
    # Commands
    "HostIdentity",
    "StagingMount",
    "TransferCommand",
    # Collaborators
    "BuildUnitRunner",
    "DockerRunner",
    "DestinationImage",
    "ImageInstructions",
    "StagingPaths",
    # Orchestration
    "ArtifactTransferOrchestrator",
    "TransferPlan",
    "MissingStagingMountError",
    "ExecutionFailure",
]
