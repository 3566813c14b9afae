"""Configuration loading for BackBrace.

Configuration lives in a directory holding three YAML documents:

- ``remote.yml``: where backups go (an ``s3`` or a ``local`` section)
- ``local.yml``: the tree to back up and its exclusion patterns
- ``db.yml``: database connection parameters for the dump

The directory is taken from ``--config-dir`` / ``BACKBRACE_CONFIG_DIR``,
else ``~/.backbrace`` if it exists, else ``./config``.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .exceptions import ConfigMissingError, RemoteConfigInvalidError

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "BACKBRACE_CONFIG_DIR"
HOME_CONFIG_DIR_NAME = ".backbrace"
DEFAULT_CONFIG_DIR = Path("config")
CONFIG_DOCUMENTS = ("remote", "local", "db")

DEFAULT_DB_PORT = 3306


@dataclass
class S3Settings:
    """Remote settings for an S3 bucket."""

    key: str
    secret: str
    region: str
    bucket: str
    prefix: str = ""
    """Key prefix for mirrored files"""

    prefix_db: str = ""
    """Key prefix for database dumps"""

    endpoint: Optional[str] = None
    """Endpoint URL for S3-compatible services"""


@dataclass
class DiskRemoteSettings:
    """Remote settings for mirroring onto another local disk."""

    path: Path
    path_db: Path


RemoteSettings = Union[S3Settings, DiskRemoteSettings]


@dataclass
class LocalSettings:
    """The local tree to back up."""

    path: Path
    exclude: list[str] = field(default_factory=list)


@dataclass
class DatabaseSettings:
    """Connection parameters for the database dump."""

    database: str
    user: str
    password: str = ""
    host: str = "localhost"
    port: int = DEFAULT_DB_PORT
    compress: bool = True


def resolve_config_dir(config_dir: Optional[Union[str, Path]] = None) -> Path:
    """Find the configuration directory.

    Args:
        config_dir: Explicit directory, takes precedence when given

    Returns:
        Path of the configuration directory
    """
    if config_dir:
        return Path(config_dir).expanduser()

    env_dir = os.environ.get(CONFIG_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser()

    home_dir = Path.home() / HOME_CONFIG_DIR_NAME
    if home_dir.exists():
        return home_dir

    return DEFAULT_CONFIG_DIR


def _read_document(config_dir: Path, name: str) -> dict[str, Any]:
    path = config_dir / f"{name}.yml"
    try:
        with open(path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as e:
        raise ConfigMissingError(
            f"Configuration file {name}.yml could not be found in {config_dir}"
        ) from e
    except UnicodeDecodeError as e:
        raise ConfigMissingError(
            f"Configuration file {name}.yml could not be read: {e.reason}"
        ) from e
    except yaml.YAMLError as e:
        raise ConfigMissingError(
            f"Configuration file {name}.yml could not be parsed: {e}"
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigMissingError(f"Configuration file {name}.yml must be a mapping")
    logger.debug("Loaded %s", path)
    return data


def _require(section: dict[str, Any], keys: tuple[str, ...], name: str) -> None:
    missing = [key for key in keys if not section.get(key)]
    if missing:
        raise RemoteConfigInvalidError(
            f"Remote {name} configuration is missing: {', '.join(missing)}"
        )


def parse_remote_settings(data: dict[str, Any]) -> RemoteSettings:
    """Build remote settings from the ``remote.yml`` document.

    Raises:
        RemoteConfigInvalidError: If neither an ``s3`` nor a ``local`` section
            is usable
    """
    s3 = data.get("s3")
    if isinstance(s3, dict):
        _require(s3, ("key", "secret", "region", "bucket"), "s3")
        return S3Settings(
            key=str(s3["key"]),
            secret=str(s3["secret"]),
            region=str(s3["region"]),
            bucket=str(s3["bucket"]),
            prefix=str(s3.get("prefix") or ""),
            prefix_db=str(s3.get("prefixDB") or ""),
            endpoint=s3.get("endpoint") or None,
        )

    local = data.get("local")
    if isinstance(local, dict):
        _require(local, ("path", "pathDB"), "local")
        return DiskRemoteSettings(
            path=Path(local["path"]).expanduser(),
            path_db=Path(local["pathDB"]).expanduser(),
        )

    raise RemoteConfigInvalidError(
        "Remote configuration is missing an 's3' or 'local' section"
    )


def parse_local_settings(data: dict[str, Any]) -> LocalSettings:
    """Build local tree settings from the ``local.yml`` document."""
    local = data.get("local")
    if not isinstance(local, dict) or not local.get("path"):
        raise ConfigMissingError("Local configuration is missing")

    exclude = local.get("exclude") or []
    if isinstance(exclude, str):
        exclude = [exclude]

    return LocalSettings(
        path=Path(local["path"]).expanduser(),
        exclude=[str(pattern) for pattern in exclude],
    )


def parse_database_settings(data: dict[str, Any]) -> DatabaseSettings:
    """Build database settings from the ``db.yml`` document."""
    local = data.get("local")
    if not isinstance(local, dict) or not local.get("database"):
        raise ConfigMissingError("Database configuration is missing")

    port = local.get("port") or DEFAULT_DB_PORT
    try:
        port = int(port)
    except (TypeError, ValueError) as e:
        raise ConfigMissingError(f"Database port must be a number, got {port!r}") from e

    compress = local.get("compress", True)
    if not isinstance(compress, bool):
        raise ConfigMissingError(
            f"Database option 'compress' must be true or false, got {compress!r}"
        )

    return DatabaseSettings(
        database=str(local["database"]),
        user=str(local.get("user") or ""),
        password=str(local.get("password") or ""),
        host=str(local.get("host") or "localhost"),
        port=port,
        compress=compress,
    )


class Config:
    """Parsed BackBrace configuration.

    All three documents are read when the configuration is loaded; remote and
    local settings are validated immediately, database settings on first use.

    Examples:
        >>> config = Config.load("/home/me/.backbrace")
        >>> config.local.path
        PosixPath('/var/www')
    """

    def __init__(self, config_dir: Path, documents: dict[str, dict[str, Any]]):
        self.config_dir = config_dir
        self.documents = documents
        self.remote = parse_remote_settings(documents.get("remote", {}))
        self.local = parse_local_settings(documents.get("local", {}))
        self._database: Optional[DatabaseSettings] = None

    @classmethod
    def load(cls, config_dir: Optional[Union[str, Path]] = None) -> "Config":
        """Read and validate the configuration documents.

        Args:
            config_dir: Directory to read from (see ``resolve_config_dir``)

        Raises:
            ConfigMissingError: If a document is missing or unreadable
            RemoteConfigInvalidError: If the remote document is unusable
        """
        directory = resolve_config_dir(config_dir)
        documents = {name: _read_document(directory, name) for name in CONFIG_DOCUMENTS}
        return cls(directory, documents)

    @property
    def database(self) -> DatabaseSettings:
        """Database settings, validated on first access."""
        if self._database is None:
            self._database = parse_database_settings(self.documents.get("db", {}))
        return self._database
