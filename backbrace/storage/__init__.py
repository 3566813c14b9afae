"""Storage backends for BackBrace."""

from ..config import DiskRemoteSettings, RemoteSettings, S3Settings
from .base import StorageAdapter
from .dry_run import DryRunStorage
from .local import LocalStorage
from .s3 import S3Storage, create_s3_client


def create_remote_storages(
    settings: RemoteSettings,
) -> tuple[StorageAdapter, StorageAdapter]:
    """Create the remote storages for mirrored files and for database dumps.

    Both storages share one client when the remote is an S3 bucket.

    Args:
        settings: Parsed remote settings

    Returns:
        Tuple of (files storage, database dump storage)
    """
    if isinstance(settings, S3Settings):
        client = create_s3_client(settings)
        return (
            S3Storage(client, settings.bucket, settings.prefix),
            S3Storage(client, settings.bucket, settings.prefix_db),
        )
    if isinstance(settings, DiskRemoteSettings):
        return LocalStorage(settings.path), LocalStorage(settings.path_db)
    raise TypeError(f"Unsupported remote settings: {type(settings).__name__}")


__all__ = [
    "StorageAdapter",
    "LocalStorage",
    "S3Storage",
    "DryRunStorage",
    "create_s3_client",
    "create_remote_storages",
]
