"""BackBrace - back up a file tree and a database to object storage."""

from .config import Config
from .dump import DumpPipeline, MysqlDumpProducer
from .exceptions import (
    BackBraceConfigError,
    BackBraceError,
    CompressionFailedError,
    ConfigMissingError,
    DumpError,
    DumpFailedError,
    DumpUnavailableError,
    RemoteConfigInvalidError,
    StorageOperationError,
)
from .models import FileEntry
from .runner import BackupRunner
from .sync import SyncEngine, SyncStats

__all__ = [
    "BackupRunner",
    "Config",
    "DumpPipeline",
    "FileEntry",
    "MysqlDumpProducer",
    "SyncEngine",
    "SyncStats",
    "BackBraceError",
    "BackBraceConfigError",
    "CompressionFailedError",
    "ConfigMissingError",
    "DumpError",
    "DumpFailedError",
    "DumpUnavailableError",
    "RemoteConfigInvalidError",
    "StorageOperationError",
]
