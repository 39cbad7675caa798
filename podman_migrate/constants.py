"""Centralized constants for runtime migration."""

# Runtime binaries
DEFAULT_SOURCE_RUNTIME = "docker"
DEFAULT_TARGET_RUNTIME = "podman"

# Source volume store
DEFAULT_SOURCE_VOLUMES_PATH = "/var/lib/docker/volumes"
VOLUME_DATA_DIR = "_data"

# Images
UNTAGGED_IMAGE = "<none>:<none>"
ARCHIVE_SUFFIX = ".tar"
ARCHIVE_PATH_SEPARATOR_REPLACEMENT = "_"

# Frozen container images
DEFAULT_IMAGE_NAMESPACE = "podman.local"
SNAPSHOT_IMAGE_SUFFIX = "-to-podman"
SNAPSHOT_IMAGE_TAG = "latest"

# Networks
PSEUDO_NETWORKS = frozenset({"host", "none"})
# Docker default network; addresses on it are always dynamically assigned
DEFAULT_BRIDGE_NETWORK = "bridge"

# Mounts and ports
UNSPECIFIED_HOST_IPS = frozenset({"0.0.0.0", "::"})  # nosec B104
OWNERSHIP_FIX_FLAG = "U"
