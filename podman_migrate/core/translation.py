"""Translate source runtime introspection records into target-side models."""

import os
from collections.abc import Callable

import structlog

from ..constants import (
    ARCHIVE_PATH_SEPARATOR_REPLACEMENT,
    ARCHIVE_SUFFIX,
    DEFAULT_BRIDGE_NETWORK,
    DEFAULT_IMAGE_NAMESPACE,
    SNAPSHOT_IMAGE_SUFFIX,
    SNAPSHOT_IMAGE_TAG,
)
from ..models.enums import MountKind, NetworkDriver, RestartPolicy
from ..models.inspect import ContainerInspect, MountRecord, NetworkInspect, PortBindingRecord
from ..models.snapshot import (
    ContainerSnapshot,
    MountSpec,
    NetworkAttachment,
    NetworkDef,
    PortMapping,
)

logger = structlog.get_logger()


def snapshot_image_ref(container_name: str, namespace: str = DEFAULT_IMAGE_NAMESPACE) -> str:
    """Image reference a container is frozen into.

    Lower-cased and namespaced so it cannot collide with a user image.
    """
    return f"{namespace}/{container_name.lower()}{SNAPSHOT_IMAGE_SUFFIX}:{SNAPSHOT_IMAGE_TAG}"


def archive_filename(reference: str) -> str:
    """Flat archive file name for an image reference or container name."""
    return reference.replace("/", ARCHIVE_PATH_SEPARATOR_REPLACEMENT) + ARCHIVE_SUFFIX


def translate_mount(
    record: MountRecord, path_exists: Callable[[str], bool] = os.path.exists
) -> MountSpec | None:
    """Convert one inspect mount entry, or return None when it is not carried over.

    Volume mounts always get the ownership-fix flag. Bind mounts are dropped
    when their host path no longer exists. Other mount types (tmpfs, npipe)
    have no equivalent and are dropped.
    """
    mode = "rw" if record.rw else "ro"

    if record.type == MountKind.VOLUME.value:
        return MountSpec(
            kind=MountKind.VOLUME,
            source=record.name or record.source,
            destination=record.destination,
            mode=mode,
            ownership_fix=True,
        )

    if record.type == MountKind.BIND.value:
        if not path_exists(record.source):
            logger.info(
                "Bind mount source missing, dropping mount",
                source=record.source,
                destination=record.destination,
            )
            return None
        return MountSpec(
            kind=MountKind.BIND,
            source=record.source,
            destination=record.destination,
            mode=mode,
        )

    logger.debug("Unsupported mount type, dropping mount", mount_type=record.type)
    return None


def translate_mounts(
    inspect: ContainerInspect, path_exists: Callable[[str], bool] = os.path.exists
) -> list[MountSpec]:
    mounts = []
    for record in inspect.mounts:
        spec = translate_mount(record, path_exists)
        if spec is not None:
            mounts.append(spec)
    return mounts


def _port_bindings(inspect: ContainerInspect) -> dict[str, list[PortBindingRecord] | None]:
    """Live bindings of a running container, else the bindings it was created with.

    A stopped container reports no live bindings at all.
    """
    live = inspect.network_settings.ports
    if any(live.values()):
        return live
    return inspect.host_config.port_bindings


def translate_ports(inspect: ContainerInspect) -> list[PortMapping]:
    """Flatten published ports into one mapping per host binding.

    Docker lists a port bound on all interfaces once for ``0.0.0.0`` and once
    for ``::``; both render the same option, so repeats are dropped.
    """
    mappings: list[PortMapping] = []
    seen: set[tuple[str, ...]] = set()
    for port_key, bindings in _port_bindings(inspect).items():
        # Exposed but unpublished ports have no bindings
        if not bindings:
            continue
        container_port = port_key.split("/", 1)[0]
        protocol = "udp" if "udp" in port_key else "tcp"
        for binding in bindings:
            mapping = PortMapping(
                host_ip=binding.host_ip or None,
                host_port=binding.host_port,
                container_port=container_port,
                protocol=protocol,
            )
            rendered = tuple(mapping.to_args())
            if rendered in seen:
                continue
            seen.add(rendered)
            mappings.append(mapping)
    return mappings


def translate_networks(inspect: ContainerInspect) -> list[NetworkAttachment]:
    attachments = []
    for network_name, endpoint in inspect.network_settings.networks.items():
        if not network_name:
            continue
        ip_address = endpoint.static_address if endpoint else None
        if ip_address and network_name == DEFAULT_BRIDGE_NETWORK:
            logger.debug("Dropping dynamic address on default bridge", ip_address=ip_address)
            ip_address = None
        attachments.append(
            NetworkAttachment(network_name=network_name, ip_address=ip_address or None)
        )
    return attachments


def build_snapshot(
    name: str,
    inspect: ContainerInspect,
    namespace: str = DEFAULT_IMAGE_NAMESPACE,
    path_exists: Callable[[str], bool] = os.path.exists,
) -> ContainerSnapshot:
    """Assemble the full container snapshot from an inspect record."""
    restart = inspect.host_config.restart_policy
    return ContainerSnapshot(
        name=name,
        was_running=inspect.state.running,
        restart_policy=RestartPolicy.from_source(restart.name),
        restart_max_retries=restart.maximum_retry_count,
        mounts=translate_mounts(inspect, path_exists),
        ports=translate_ports(inspect),
        networks=translate_networks(inspect),
        image_ref=snapshot_image_ref(name, namespace),
    )


def build_network_def(inspect: NetworkInspect) -> NetworkDef:
    """Network definition from an inspect record; only the first IPAM block is used."""
    ipam = inspect.ipam.config[0] if inspect.ipam.config else None
    return NetworkDef(
        name=inspect.name,
        driver=NetworkDriver.from_source(inspect.driver),
        subnet=ipam.subnet if ipam else None,
        gateway=ipam.gateway if ipam else None,
        ip_range=ipam.ip_range if ipam else None,
    )
