"""Per-item outcomes and the report assembled from them."""

from collections import Counter

from pydantic import BaseModel, Field

from .enums import ItemStatus, ResourceKind


class ItemResult(BaseModel):
    """Outcome of migrating a single resource."""

    kind: ResourceKind
    name: str
    status: ItemStatus
    message: str = ""


class KindReport(BaseModel):
    """Outcome of one migrator pass over a resource kind."""

    kind: ResourceKind
    items: list[ItemResult] = Field(default_factory=list)
    enumeration_error: str | None = None

    @property
    def completed(self) -> bool:
        """True when the inventory could be enumerated."""
        return self.enumeration_error is None

    def counts(self) -> dict[str, int]:
        counter = Counter(item.status for item in self.items)
        return {status: counter.get(status, 0) for status in ("migrated", "skipped", "failed")}


class MigrationReport(BaseModel):
    """Reports for every resource kind processed in one run."""

    kinds: list[KindReport] = Field(default_factory=list)

    def failed_items(self) -> list[ItemResult]:
        return [item for report in self.kinds for item in report.items if item.status == "failed"]
