"""Core exceptions for container runtime migration."""


class MigrationError(Exception):
    """Base exception for migration operations."""


class RuntimeCommandError(MigrationError):
    """Runtime CLI command failed or timed out."""


class InspectError(MigrationError):
    """Runtime introspection output could not be parsed."""


class EnumerationError(MigrationError):
    """A resource kind could not be listed on the source runtime."""


class CommitError(MigrationError):
    """Container could not be committed to an image."""


class ExportError(MigrationError):
    """Image could not be saved to an archive."""


class ImageImportError(MigrationError):
    """Archive could not be loaded into the target runtime."""


class CreationError(MigrationError):
    """Target object could not be created."""


class TransferError(MigrationError):
    """Volume data copy failed."""


class ConfigurationError(MigrationError):
    """Configuration validation or loading failed."""
