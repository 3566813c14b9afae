"""CLI interface for BackBrace."""

import logging
from typing import Any, Optional

import click

from .config import CONFIG_DIR_ENV, Config
from .exceptions import BackBraceConfigError, BackBraceError
from .output import OutputFormatter
from .runner import BackupRunner

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Configure logging based on the verbose flag."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        # Enable debug logging for backbrace modules
        logging.getLogger("backbrace").setLevel(logging.DEBUG)
    else:
        # Set default logging level to WARNING to suppress debug/info messages
        logging.basicConfig(level=logging.WARNING)


@click.command()
@click.option(
    "--dry-run",
    "-n",
    is_flag=True,
    help="Show what would be transferred without changing the remote",
)
@click.option("--files", is_flag=True, help="Mirror the local tree to the remote")
@click.option("--db", is_flag=True, help="Dump the database and upload it")
@click.option(
    "--limit",
    type=click.IntRange(min=0),
    default=None,
    help="Only scan the first N local entries, 0 for all (useful with --dry-run)",
)
@click.option(
    "--config-dir",
    "-c",
    type=click.Path(file_okay=False),
    envvar=CONFIG_DIR_ENV,
    default=None,
    help="Directory holding remote.yml, local.yml and db.yml",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="backbrace")
@click.pass_context
def main(
    ctx: Any,
    dry_run: bool,
    files: bool,
    db: bool,
    limit: Optional[int],
    config_dir: Optional[str],
    quiet: bool,
    verbose: bool,
) -> None:
    """BackBrace - back up a file tree and a database to object storage.

    Examples:
        backbrace --files                 # Mirror the local tree
        backbrace --files -n --limit 50   # Preview the first 50 entries
        backbrace --files --db            # Mirror files, then dump the database
    """
    configure_logging(verbose)
    out = OutputFormatter(quiet=quiet)

    if not files and not db:
        out.info("Nothing to do: pass --files and/or --db")
        return

    try:
        config = Config.load(config_dir)
    except BackBraceConfigError as e:
        out.error(str(e))
        ctx.exit(1)

    runner = BackupRunner(config, output=out, dry_run=dry_run)

    try:
        runner.run(files=files, db=db, limit=limit)
    except BackBraceError as e:
        out.error(str(e))
        ctx.exit(1)


if __name__ == "__main__":
    main()
