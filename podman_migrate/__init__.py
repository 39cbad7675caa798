"""Migrate Docker images, volumes, networks and containers to Podman."""

__version__ = "0.1.0"
