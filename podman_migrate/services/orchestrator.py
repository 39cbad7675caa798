"""Run the resource migrators in dependency order."""

from collections.abc import Iterable

import structlog

from ..core.config_loader import MigrationConfig
from ..core.runtime import SourceRuntime, TargetRuntime
from ..core.subprocess_manager import SubprocessManager
from ..core.transfer import ImageArchiveTransfer, RsyncTransfer
from ..models.enums import ResourceKind
from ..models.results import MigrationReport
from .base import BaseMigrator
from .containers import ContainerMigrator
from .images import ImageMigrator
from .networks import NetworkMigrator
from .volumes import VolumeMigrator

logger = structlog.get_logger()


class MigrationOrchestrator:
    """Migrate the selected resource kinds from the source runtime to the target.

    Kinds always run as images, volumes, networks, containers so that
    containers find their images, volumes and networks already in place.
    """

    def __init__(
        self,
        config: MigrationConfig,
        subprocess_manager: SubprocessManager | None = None,
    ):
        self.logger = logger.bind(component="migration_orchestrator")
        self.config = config
        self.source = SourceRuntime(config.source_runtime, subprocess_manager)
        self.target = TargetRuntime(config.target_runtime, subprocess_manager)

        archive = ImageArchiveTransfer(self.source, self.target, config.archive_dir)
        rsync = RsyncTransfer(
            rsync_bin=config.rsync_bin,
            use_sudo=config.rsync_use_sudo,
            subprocess_manager=subprocess_manager,
        )
        self.migrators: dict[ResourceKind, BaseMigrator] = {
            ResourceKind.IMAGES: ImageMigrator(self.source, archive),
            ResourceKind.VOLUMES: VolumeMigrator(
                self.source, self.target, rsync, config.source_volumes_path
            ),
            ResourceKind.NETWORKS: NetworkMigrator(self.source, self.target),
            ResourceKind.CONTAINERS: ContainerMigrator(
                self.source, self.target, archive, config.image_namespace
            ),
        }

    async def run(self, kinds: Iterable[ResourceKind] | None = None) -> MigrationReport:
        """Migrate ``kinds`` (all kinds by default) and return their reports."""
        selected = set(kinds) if kinds is not None else set(ResourceKind)
        report = MigrationReport()

        self.logger.info(
            "Starting migration",
            source=self.config.source_runtime,
            target=self.config.target_runtime,
            kinds=[kind.value for kind in ResourceKind if kind in selected],
        )

        for kind in ResourceKind:
            if kind in selected:
                report.kinds.append(await self.migrators[kind].run())

        for kind_report in report.kinds:
            self.logger.info(
                "Migration summary",
                kind=kind_report.kind.value,
                enumerated=kind_report.completed,
                **kind_report.counts(),
            )
        return report
