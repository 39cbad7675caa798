"""Shared per-item processing loop for the resource migrators."""

from abc import ABC, abstractmethod

import structlog

from ..core.exceptions import EnumerationError, MigrationError
from ..models.enums import ResourceKind
from ..models.results import ItemResult, KindReport

logger = structlog.get_logger()


class BaseMigrator(ABC):
    """Migrate one resource kind, isolating failures to the item that caused them.

    Subclasses list their inventory in :meth:`enumerate` and handle a single
    item in :meth:`migrate_item`, raising a :class:`MigrationError` subclass on
    failure. Nothing is retried and nothing is rolled back.
    """

    kind: ResourceKind

    def __init__(self):
        self.logger = logger.bind(component=f"{self.kind.value}_migrator")

    @abstractmethod
    async def enumerate(self) -> list[str]:
        """List the names of the resources to migrate."""

    @abstractmethod
    async def migrate_item(self, name: str) -> ItemResult:
        """Migrate one resource."""

    async def run(self) -> KindReport:
        """Migrate every enumerated resource in order."""
        report = KindReport(kind=self.kind)
        self.logger.info(f"Migrating {self.kind.value}")

        try:
            names = await self.enumerate()
        except MigrationError as e:
            error = EnumerationError(f"Cannot list {self.kind.value}: {e}")
            self.logger.error("Enumeration failed", error=str(error))
            report.enumeration_error = str(error)
            return report

        for name in names:
            report.items.append(await self._process(name))

        self.logger.info(f"Finished migrating {self.kind.value}", **report.counts())
        return report

    async def _process(self, name: str) -> ItemResult:
        try:
            result = await self.migrate_item(name)
        except MigrationError as e:
            self.logger.error(f"Failed to migrate {self.kind.value[:-1]}", name=name, error=str(e))
            return self.failed(name, str(e))

        if result.status == "skipped":
            self.logger.info(f"Skipping {self.kind.value[:-1]}", name=name, reason=result.message)
        else:
            self.logger.info(f"Migrated {self.kind.value[:-1]}", name=name)
        return result

    def migrated(self, name: str, message: str = "") -> ItemResult:
        return ItemResult(kind=self.kind, name=name, status="migrated", message=message)

    def skipped(self, name: str, reason: str) -> ItemResult:
        return ItemResult(kind=self.kind, name=name, status="skipped", message=reason)

    def failed(self, name: str, reason: str) -> ItemResult:
        return ItemResult(kind=self.kind, name=name, status="failed", message=reason)
