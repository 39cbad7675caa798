"""Container runtime CLI clients.

The source and target runtimes are only reached through their command-line
interfaces. Every call is one subprocess with a timeout; introspection output
is parsed into the typed records of :mod:`podman_migrate.models.inspect`.
"""

import json
import shutil
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from ..models.inspect import (
    ContainerInspect,
    ContainerListEntry,
    NetworkInspect,
    NetworkListEntry,
    TargetInfo,
    VolumeListEntry,
)
from .exceptions import InspectError
from .settings import ARCHIVE_TIMEOUT, COMMIT_TIMEOUT, DOCKER_CLI_TIMEOUT
from .subprocess_manager import SubprocessManager, SubprocessResult, get_subprocess_manager

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_json_records(output: str, model: type[ModelT]) -> list[ModelT]:
    """Parse runtime JSON output into records.

    Accepts a JSON array (``inspect``, podman ``ls``), a single JSON document
    (``info``) or one JSON object per line (docker ``ls --format json``).
    """
    text = output.strip()
    if not text:
        return []

    try:
        try:
            document: Any = json.loads(text)
            payloads = document if isinstance(document, list) else [document]
        except json.JSONDecodeError:
            payloads = [json.loads(line) for line in text.splitlines() if line.strip()]
        return [model.model_validate(payload) for payload in payloads]
    except (json.JSONDecodeError, ValidationError) as e:
        raise InspectError(f"Unexpected {model.__name__} output: {e}") from e


class RuntimeCLI:
    """Thin async wrapper around a docker-compatible CLI binary."""

    def __init__(self, binary: str, subprocess_manager: SubprocessManager | None = None):
        self.binary = shutil.which(binary) or binary
        self.name = binary
        self._subprocess = subprocess_manager or get_subprocess_manager()
        self.logger = logger.bind(component=f"{binary}_runtime")

    async def run(
        self, args: list[str], *, timeout: float = DOCKER_CLI_TIMEOUT, check: bool = True
    ) -> SubprocessResult:
        """Execute ``<binary> <args>``.

        Raises:
            RuntimeCommandError: If the command fails (when ``check``) or times out
        """
        return await self._subprocess.run_command(
            [self.binary, *args], timeout=timeout, check=check
        )

    async def _inspect_one(self, args: list[str], model: type[ModelT], subject: str) -> ModelT:
        result = await self.run(args)
        records = parse_json_records(result.stdout, model)
        if not records:
            raise InspectError(f"{self.name} returned no data for {subject}")
        return records[0]


class SourceRuntime(RuntimeCLI):
    """Read-side operations against the runtime being migrated from."""

    async def list_images(self) -> list[str]:
        """Return ``repository:tag`` references, untagged sentinel included."""
        result = await self.run(["images", "--format", "{{.Repository}}:{{.Tag}}"])
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    async def list_volumes(self) -> list[str]:
        result = await self.run(["volume", "ls", "--format", "json"])
        return [entry.name for entry in parse_json_records(result.stdout, VolumeListEntry)]

    async def list_networks(self) -> list[str]:
        result = await self.run(["network", "ls", "--format", "{{json .}}"])
        return [entry.name for entry in parse_json_records(result.stdout, NetworkListEntry)]

    async def inspect_network(self, name: str) -> NetworkInspect:
        return await self._inspect_one(
            ["network", "inspect", name], NetworkInspect, f"network {name}"
        )

    async def list_containers(self) -> list[str]:
        """Return names of all containers, stopped ones included."""
        result = await self.run(["container", "ls", "-a", "--format", "json"])
        return [entry.name for entry in parse_json_records(result.stdout, ContainerListEntry)]

    async def inspect_container(self, name: str) -> ContainerInspect:
        return await self._inspect_one(
            ["container", "inspect", name], ContainerInspect, f"container {name}"
        )

    async def commit(self, container: str, image_ref: str) -> None:
        await self.run(["commit", container, image_ref], timeout=COMMIT_TIMEOUT)

    async def save_image(self, image_ref: str, archive_path: str) -> None:
        await self.run(["save", "-o", archive_path, image_ref], timeout=ARCHIVE_TIMEOUT)


class TargetRuntime(RuntimeCLI):
    """Write-side operations against the runtime being migrated to."""

    async def load_image(self, archive_path: str) -> None:
        await self.run(["load", "-i", archive_path], timeout=ARCHIVE_TIMEOUT)

    async def volume_path(self) -> str:
        """Resolve the root directory of the target volume store."""
        info = await self._inspect_one(["info", "--format", "json"], TargetInfo, "info")
        return info.store.volume_path

    async def create_volume(self, name: str) -> None:
        """Create a volume; an existing volume of the same name is left untouched."""
        await self.run(["volume", "create", "--ignore", name])

    async def network_exists(self, name: str) -> bool:
        result = await self.run(["network", "exists", name], check=False)
        return result.success

    async def create_network(self, args: list[str]) -> None:
        await self.run(["network", "create", *args])

    async def container_exists(self, name: str) -> bool:
        result = await self.run(["container", "exists", name], check=False)
        return result.success

    async def run_container(self, args: list[str]) -> str:
        """Create and start a container, returning its id."""
        result = await self.run(["run", *args])
        return result.stdout.strip()

    async def stop_container(self, name: str) -> None:
        await self.run(["stop", name])
