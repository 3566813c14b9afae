"""Exceptions raised by BackBrace."""


class BackBraceError(Exception):
    """Base exception for all BackBrace errors."""


class BackBraceConfigError(BackBraceError):
    """Configuration could not be used."""


class ConfigMissingError(BackBraceConfigError):
    """A configuration document or a required section is missing."""


class RemoteConfigInvalidError(BackBraceConfigError):
    """The remote storage configuration is incomplete or malformed."""


class StorageOperationError(BackBraceError):
    """A storage backend operation failed."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class DumpError(BackBraceError):
    """Base exception for the database dump pipeline."""


class DumpUnavailableError(DumpError):
    """The dump producer executable could not be located."""


class DumpFailedError(DumpError):
    """The dump producer exited abnormally."""

    def __init__(self, message: str, returncode: int = 1, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class CompressionFailedError(DumpError):
    """The dump could not be compressed."""
