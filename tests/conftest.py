"""Shared pytest fixtures for migration tests."""

import copy
from typing import Any
from unittest.mock import AsyncMock

import pytest

from podman_migrate.core.runtime import SourceRuntime, TargetRuntime
from podman_migrate.core.transfer import ImageArchiveTransfer
from podman_migrate.models.inspect import ContainerInspect

WEB1_INSPECT: dict[str, Any] = {
    "Id": "4f1c2d3e",
    "Name": "/Web1",
    "State": {"Status": "running", "Running": True},
    "HostConfig": {"RestartPolicy": {"Name": "always", "MaximumRetryCount": 0}},
    "Mounts": [
        {
            "Type": "volume",
            "Name": "data",
            "Source": "/var/lib/docker/volumes/data/_data",
            "Destination": "/var/lib/app",
            "Driver": "local",
            "Mode": "z",
            "RW": True,
            "Propagation": "",
        }
    ],
    "NetworkSettings": {
        "Ports": {"80/tcp": [{"HostIp": "0.0.0.0", "HostPort": "8080"}]},
        "Networks": {"app-net": {"IPAddress": "10.0.0.5", "Gateway": "10.0.0.1"}},
    },
}


@pytest.fixture
def web1_payload() -> dict[str, Any]:
    """Raw ``docker inspect`` element for the Web1 container."""
    return copy.deepcopy(WEB1_INSPECT)


@pytest.fixture
def web1_inspect(web1_payload) -> ContainerInspect:
    return ContainerInspect.model_validate(web1_payload)


@pytest.fixture
def source() -> AsyncMock:
    """Source runtime double; every CLI call succeeds unless a test says otherwise."""
    runtime = AsyncMock(spec=SourceRuntime)
    runtime.name = "docker"
    runtime.list_images.return_value = []
    runtime.list_volumes.return_value = []
    runtime.list_networks.return_value = []
    runtime.list_containers.return_value = []
    return runtime


@pytest.fixture
def target() -> AsyncMock:
    """Target runtime double with an empty inventory."""
    runtime = AsyncMock(spec=TargetRuntime)
    runtime.name = "podman"
    runtime.network_exists.return_value = False
    runtime.container_exists.return_value = False
    runtime.volume_path.return_value = "/home/user/.local/share/containers/storage/volumes"
    runtime.run_container.return_value = "9a8b7c6d"
    return runtime


@pytest.fixture
def archive(source, target, tmp_path) -> ImageArchiveTransfer:
    return ImageArchiveTransfer(source, target, tmp_path)
