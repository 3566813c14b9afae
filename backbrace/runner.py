"""Run controller wiring configuration into the sync engine and dump pipeline."""

import logging
from typing import Callable, Optional

from rich.progress import Progress, SpinnerColumn, TextColumn

from .config import Config
from .dump import DumpPipeline, DumpProducer, MysqlDumpProducer
from .output import OutputFormatter
from .storage import DryRunStorage, LocalStorage, StorageAdapter, create_remote_storages
from .sync import ExclusionRules, RemoteIndexCache, SyncEngine, SyncStats

logger = logging.getLogger(__name__)


class BackupRunner:
    """Runs a backup of files and/or the database for one invocation."""

    def __init__(
        self,
        config: Config,
        output: Optional[OutputFormatter] = None,
        dry_run: bool = False,
        storages: Optional[tuple[StorageAdapter, StorageAdapter]] = None,
        producer_factory: Optional[Callable[[Config], DumpProducer]] = None,
    ):
        """Initialize the runner.

        Args:
            config: Loaded configuration
            output: Output formatter for displaying progress/status
            dry_run: Simulate all remote mutations
            storages: Remote (files, database) storages; built from the
                configuration if not given
            producer_factory: Builds the dump producer (mysqldump by default)
        """
        self.config = config
        self.output = output or OutputFormatter()
        self.dry_run = dry_run
        self._storages = storages
        self.producer_factory = producer_factory or (
            lambda cfg: MysqlDumpProducer(cfg.database)
        )
        self.index_cache = RemoteIndexCache()

    def _remote_storages(self) -> tuple[StorageAdapter, StorageAdapter]:
        if self._storages is None:
            self._storages = create_remote_storages(self.config.remote)
        remote, remote_db = self._storages
        if self.dry_run:
            return DryRunStorage(remote), DryRunStorage(remote_db)
        return remote, remote_db

    def run(self, files: bool = False, db: bool = False, limit: Optional[int] = None) -> SyncStats:
        """Run the requested parts of the backup.

        Args:
            files: Mirror the local tree
            db: Dump and upload the database
            limit: Only scan the first ``limit`` local entries

        Returns:
            Combined statistics of the run
        """
        stats = SyncStats()
        if not files and not db:
            self.output.info("Nothing to do: pass --files and/or --db")
            return stats

        if self.dry_run:
            self.output.info("*** DRY RUN ***")

        remote, remote_db = self._remote_storages()

        try:
            if files:
                stats = stats + self.backup_files(remote, limit)

            if db:
                stats = stats + self.backup_database(remote_db)
        finally:
            # Each run works on a fresh snapshot of the remote
            self.index_cache.clear()

        return stats

    def backup_files(self, remote: StorageAdapter, limit: Optional[int] = None) -> SyncStats:
        """Mirror the local tree to ``remote`` and print the summary."""
        local = LocalStorage(self.config.local.path)
        engine = SyncEngine(
            local=local,
            remote=remote,
            rules=ExclusionRules.from_patterns(self.config.local.exclude),
            output=self.output,
        )

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            disable=self.output.quiet,
        ) as progress:
            task = progress.add_task("Scanning remote files...", total=None)
            index = self.index_cache.get(remote)
            progress.update(task, description=f"Found {len(index)} remote file(s)")

        logger.debug("Mirroring %r to %r", local, remote)
        stats = engine.sync(index, limit=limit)
        engine.display_summary(stats)
        return stats

    def backup_database(self, remote_db: StorageAdapter) -> SyncStats:
        """Dump the database to ``remote_db``."""
        settings = self.config.database
        pipeline = DumpPipeline(
            storage=remote_db,
            producer=self.producer_factory(self.config),
            database=settings.database,
            compress=settings.compress,
            output=self.output,
        )
        result = pipeline.run()
        if not result.skipped:
            self.output.success(f"Database dump stored as {result.remote_path}")
        return result.stats
