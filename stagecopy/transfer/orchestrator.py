#!/usr/bin/env python3
"""Two-hop artifact transfer.

Files move from a source build unit into the destination image through a
staging directory:

1. extract: inside the source build unit, copy the filtered contents of
   ``cwd`` into the staging directory, owned by the host identity
2. inject: while the destination image is assembled, copy the filtered
   contents of the (read-only mounted) staging directory to ``to`` with the
   requested ownership

Both hops use the same include/exclude paths, rebased on their own source
directory. The plan is built completely before any side effect, so either both
hops are recorded or neither is.

Example:
    >>> orchestrator = ArtifactTransferOrchestrator(
    ...     runner=DockerRunner(),
    ...     staging_paths=StagingPaths("/tmp/build-1", "/.stagecopy"),
    ... )
    >>> image = ImageInstructions("app")
    >>> orchestrator.apply_transfer(descriptor, image)
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from stagecopy.core.constants import ConfigKey, ErrorCode, Limits
from stagecopy.infrastructure.config_manager import ConfigError, ConfigManager
from stagecopy.infrastructure.logger import Logger, get_logger
from stagecopy.rules.filters import build_rules
from stagecopy.transfer.artifacts import ArtifactDescriptor
from stagecopy.transfer.command import HostIdentity, StagingMount, TransferCommand
from stagecopy.transfer.image import DestinationImage
from stagecopy.transfer.naming import StagingPaths
from stagecopy.transfer.runner import BuildUnitRunner, ExecutionFailure


class MissingStagingMountError(Exception):
    """The inject hop reads a staging path that is not mounted."""

    def __init__(self, message: str, container_path: Optional[str] = None):
        self.message = message
        self.container_path = container_path
        self.error_code = ErrorCode.INTERNAL_ERROR
        super().__init__(message)


def _max_workers_setting(value: Any) -> int:
    """Validate the max_workers setting; None selects the default."""
    if value is None:
        return Limits.DEFAULT_MAX_WORKERS

    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(
            f"Invalid {ConfigKey.MAX_WORKERS}: expected a positive integer, got {value!r}"
        )

    return value


@dataclass(frozen=True)
class TransferPlan:
    """Both hops of one artifact transfer and the mount linking them."""

    artifact: str
    extract: TransferCommand
    inject: TransferCommand
    mount: StagingMount

    @property
    def extract_mount(self) -> StagingMount:
        """Staging mount as seen by the source build unit (writable)."""
        return self.mount.writable()


class ArtifactTransferOrchestrator:
    """Plans and applies two-hop artifact transfers."""

    def __init__(
        self,
        runner: BuildUnitRunner,
        staging_paths: StagingPaths,
        identity: Optional[HostIdentity] = None,
        copy_tool: str = "rsync",
        dry_run: bool = False,
        max_workers: int = Limits.DEFAULT_MAX_WORKERS,
        logger: Optional[Logger] = None,
    ):
        """Initialize orchestrator.

        Args:
            runner: Executes the extract hop inside source build units
            staging_paths: Host and container staging path naming
            identity: Owner of extracted files (default: current process)
            copy_tool: Copy tool executable used in both hops
            dry_run: Skip transfers entirely
            max_workers: Concurrent extractions in apply_transfers()
            logger: Logger instance
        """
        self.runner = runner
        self.staging_paths = staging_paths
        self.identity = identity or HostIdentity.current()
        self.copy_tool = copy_tool
        self.dry_run = dry_run
        self.max_workers = max(1, int(max_workers))
        self.logger = logger or get_logger()

    @classmethod
    def from_config(
        cls,
        config: ConfigManager,
        runner: BuildUnitRunner,
        identity: Optional[HostIdentity] = None,
        logger: Optional[Logger] = None,
    ) -> "ArtifactTransferOrchestrator":
        """Build an orchestrator from the ``stagecopy`` configuration section.

        Raises:
            ConfigError: If a setting has the wrong type
        """
        settings = config.settings()
        return cls(
            runner=runner,
            staging_paths=StagingPaths.from_settings(settings),
            identity=identity,
            copy_tool=settings.get(ConfigKey.COPY_TOOL) or "rsync",
            dry_run=bool(settings.get(ConfigKey.DRY_RUN, False)),
            max_workers=_max_workers_setting(settings.get(ConfigKey.MAX_WORKERS)),
            logger=logger,
        )

    def plan_transfer(self, descriptor: ArtifactDescriptor) -> TransferPlan:
        """Build both hops of a transfer without side effects.

        Args:
            descriptor: Artifact to transfer

        Returns:
            Transfer plan

        Raises:
            ValidationError: If the descriptor is invalid
            InvalidPatternError: If an include/exclude pattern is invalid
        """
        descriptor.validate()

        name = descriptor.name
        options = descriptor.options
        staging = self.staging_paths.staging_path(name)

        extract = TransferCommand(
            source=options.cwd,
            destination=staging,
            rules=build_rules(options.cwd, options.include_paths, options.exclude_paths),
            owner=self.identity.user,
            group=self.identity.group,
            copy_tool=self.copy_tool,
        )
        inject = TransferCommand(
            source=staging,
            destination=options.to,
            rules=build_rules(staging, options.include_paths, options.exclude_paths),
            owner=options.owner,
            group=options.group,
            copy_tool=self.copy_tool,
        )
        mount = StagingMount(
            host_path=self.staging_paths.host_tmp_path(name),
            container_path=staging,
            read_only=True,
        )

        self.logger.debug(
            "Planned transfer",
            artifact=name,
            extract_rules=len(extract.rules),
            inject_rules=len(inject.rules),
        )
        return TransferPlan(artifact=name, extract=extract, inject=inject, mount=mount)

    def apply_transfer(
        self, descriptor: ArtifactDescriptor, image: DestinationImage
    ) -> Optional[TransferPlan]:
        """Extract an artifact now and record its injection on image.

        Args:
            descriptor: Artifact to transfer
            image: Destination image build instructions

        Returns:
            The applied plan, or None in dry-run mode

        Raises:
            ExecutionFailure: If the extract hop fails
            MissingStagingMountError: If the staging mount is not registered
        """
        if self.dry_run:
            self.logger.info("Dry run, skipping artifact", artifact=descriptor.name)
            return None

        plan = self.plan_transfer(descriptor)
        self._extract(descriptor.source_build_unit, plan)
        self._inject(plan, image)
        return plan

    def apply_transfers(
        self, descriptors: Sequence[ArtifactDescriptor], image: DestinationImage
    ) -> List[TransferPlan]:
        """Transfer several artifacts into one image.

        Every descriptor is planned first. Extractions then run concurrently,
        bounded by max_workers; injections are recorded afterwards in
        descriptor order. If any extraction fails nothing is recorded on image
        and the first failure (in descriptor order) is raised.

        Returns:
            Applied plans in descriptor order (empty in dry-run mode)
        """
        if self.dry_run:
            self.logger.info("Dry run, skipping artifacts", count=len(descriptors))
            return []

        plans = [self.plan_transfer(d) for d in descriptors]

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [
                pool.submit(self._extract, d.source_build_unit, plan)
                for d, plan in zip(descriptors, plans)
            ]
            errors = [f.exception() for f in futures]

        for error in errors:
            if error is not None:
                raise error

        for plan in plans:
            self._inject(plan, image)
        return plans

    def _extract(self, build_unit: Any, plan: TransferPlan) -> None:
        with self.logger.add_context(artifact=plan.artifact, hop="extract"):
            self.logger.info("Extracting artifact", build_unit=build_unit)
            try:
                self.runner.run(build_unit, plan.extract, volumes=[plan.extract_mount])
            except ExecutionFailure as e:
                self.logger.error("Extraction failed", returncode=e.returncode)
                raise

    def _inject(self, plan: TransferPlan, image: DestinationImage) -> None:
        with self.logger.add_context(artifact=plan.artifact, hop="inject"):
            image.add_volume(plan.mount)

            if not image.has_volume(plan.inject.source):
                raise MissingStagingMountError(
                    f"Staging path {plan.inject.source} of artifact {plan.artifact} is not mounted",
                    plan.inject.source,
                )

            image.add_command(plan.inject)
            self.logger.info("Recorded injection", to=plan.inject.destination)
