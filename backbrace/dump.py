"""Database dump pipeline.

Produces a dated database dump, optionally zips it and uploads it to the
dump storage unless an object for the same day already exists.
"""

import importlib.util
import logging
import os
import shutil
import subprocess
import tempfile
import zipfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Protocol

from .config import DatabaseSettings
from .exceptions import CompressionFailedError, DumpFailedError, DumpUnavailableError
from .output import OutputFormatter
from .storage.base import StorageAdapter
from .sync.stats import SyncStats
from .utils import ZIP_SUFFIX, dated_dump_name, format_size

logger = logging.getLogger(__name__)

MYSQLDUMP_BIN = "mysqldump"


class DumpProducer(Protocol):
    """Something that writes a database dump to a binary file."""

    def dump(self, target: BinaryIO) -> None:
        """Write the dump to ``target``.

        Raises:
            DumpUnavailableError: If the producer cannot be run at all
            DumpFailedError: If producing the dump failed
        """
        ...


class MysqlDumpProducer:
    """Runs ``mysqldump`` for a configured database."""

    def __init__(self, settings: DatabaseSettings, binary: str = MYSQLDUMP_BIN):
        """Initialize the producer.

        Args:
            settings: Database connection parameters
            binary: Name or path of the mysqldump executable
        """
        self.settings = settings
        self.binary = binary

    def locate(self) -> str:
        """Find the dump executable on PATH.

        Raises:
            DumpUnavailableError: If it cannot be found
        """
        path = shutil.which(self.binary)
        if path is None:
            raise DumpUnavailableError(f"Command {self.binary} not found")
        return path

    def build_command(self, executable: str) -> list[str]:
        """Build the argument list for the dump process.

        The password is not part of the command line; it is passed in the
        ``MYSQL_PWD`` environment variable.
        """
        settings = self.settings
        command = [executable, f"--host={settings.host}", f"--port={settings.port}"]
        if settings.user:
            command.append(f"--user={settings.user}")
        command.append(settings.database)
        return command

    def dump(self, target: BinaryIO) -> None:
        command = self.build_command(self.locate())
        env = dict(os.environ)
        if self.settings.password:
            env["MYSQL_PWD"] = self.settings.password

        logger.debug("Running %s", " ".join(command))
        try:
            result = subprocess.run(
                command,
                stdout=target,
                stderr=subprocess.PIPE,
                env=env,
                check=False,
            )
        except OSError as e:
            raise DumpFailedError(f"Could not run {command[0]}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise DumpFailedError(
                f"{self.binary} exited with status {result.returncode}: {stderr}",
                returncode=result.returncode,
                stderr=stderr,
            )


def compression_available() -> bool:
    """Check whether zip compression is supported by this interpreter."""
    return importlib.util.find_spec("zlib") is not None


@dataclass
class DumpArtifact:
    """A produced dump, ready to be written exactly once."""

    logical_path: str
    stream: BinaryIO
    compressed: bool


@dataclass
class DumpResult:
    """Outcome of a dump pipeline run."""

    remote_path: str
    skipped: bool = False
    compressed: bool = False
    size: int = 0
    stats: SyncStats = field(default_factory=SyncStats)


class DumpPipeline:
    """Dumps a database and uploads it idempotently.

    The remote name is stamped with the current date, so a second run on the
    same day finds the existing object and does nothing.
    """

    def __init__(
        self,
        storage: StorageAdapter,
        producer: DumpProducer,
        database: str,
        compress: bool = True,
        output: Optional[OutputFormatter] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        """Initialize the pipeline.

        Args:
            storage: Storage receiving the dumps
            producer: Dump producer to invoke
            database: Database name, used in the dump file name
            compress: Zip the dump when compression is available
            output: Output formatter for displaying progress/status
            today: Clock returning the current date
        """
        self.storage = storage
        self.producer = producer
        self.database = database
        self.compress = compress
        self.output = output or OutputFormatter()
        self.today = today or date.today

    def dump_name(self) -> str:
        """Name of today's uncompressed dump."""
        return dated_dump_name(self.database, self.today())

    def should_compress(self) -> bool:
        return self.compress and compression_available()

    def remote_path(self) -> str:
        """Fully resolved remote path of today's dump."""
        name = self.dump_name()
        return name + ZIP_SUFFIX if self.should_compress() else name

    def _compress(self, dump_path: Path) -> Path:
        zip_path = dump_path.with_name(dump_path.name + ZIP_SUFFIX)
        try:
            with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                zf.write(dump_path, arcname=dump_path.name)
        except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            raise CompressionFailedError(f"Could not compress {dump_path.name}: {e}") from e
        return zip_path

    @contextmanager
    def produce(self) -> Iterator[DumpArtifact]:
        """Produce today's dump as an artifact.

        The dump is written to a temporary directory which is removed when the
        context exits, whether or not the artifact was consumed.
        """
        name = self.dump_name()
        with tempfile.TemporaryDirectory(prefix="backbrace-") as tmp:
            dump_path = Path(tmp) / name
            with open(dump_path, "w+b") as fh:
                self.producer.dump(fh)

            compressed = self.should_compress()
            path = self._compress(dump_path) if compressed else dump_path
            logical_path = name + ZIP_SUFFIX if compressed else name

            with open(path, "rb") as stream:
                yield DumpArtifact(
                    logical_path=logical_path, stream=stream, compressed=compressed
                )

    def run(self) -> DumpResult:
        """Dump and upload the database unless today's dump already exists.

        Returns:
            DumpResult describing what happened

        Raises:
            DumpUnavailableError: If the producer cannot be found
            DumpFailedError: If the producer fails
            CompressionFailedError: If zipping the dump fails
        """
        self.output.header("Dumping database...")

        remote_path = self.remote_path()
        if self.storage.exists(remote_path):
            self.output.info(f"File {remote_path} already exists. Skipping DB backup")
            return DumpResult(remote_path=remote_path, skipped=True)

        with self.produce() as artifact:
            size = os.fstat(artifact.stream.fileno()).st_size
            self.output.info(f"Sending {artifact.logical_path} ({format_size(size)})")
            self.storage.write_stream(artifact.logical_path, artifact.stream)

        return DumpResult(
            remote_path=artifact.logical_path,
            compressed=artifact.compressed,
            size=size,
            stats=SyncStats(sent=1),
        )
