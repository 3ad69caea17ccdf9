"""
CLI Orchestrator - Main Entry Point

Wires the root options (configuration, logging) and the commands together.
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from remoteadmin.domain.errors import AdminError
from remoteadmin.infrastructure.config import ConfigManager
from remoteadmin.infrastructure.logging_config import setup_logging
from remoteadmin.interface.cli.commands import confirm_identity, run_pipeline, set_dns
from remoteadmin.interface.cli.formatters import display_error
from remoteadmin.interface.cli.state import CliState, ExitCode

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="remoteadmin",
    help="🖥️ Windows remote administration utilities over WinRM",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("confirm-identity")(confirm_identity)
app.command("set-dns")(set_dns)
app.command("run-pipeline")(run_pipeline)


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_dir: Path = typer.Option(
        Path("config"),
        "--config-dir",
        help="Directory holding remoteadmin.json and credentials/"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log progress to stderr"
    ),
    log_file: Optional[str] = typer.Option(
        None,
        "--log-file",
        help="Write a DEBUG log to this file"
    )
):
    """
    🖥️ remoteadmin - Windows remote administration utilities

    🎯 **Available Commands:**
    - `remoteadmin confirm-identity` - Check a target is the intended system
    - `remoteadmin set-dns` - Change a host's static DNS server list
    - `remoteadmin run-pipeline` - Run a piped PowerShell command stage by stage

    📁 **Configuration:** optional `remoteadmin.json` and
    `credentials/<name>.json` files under `--config-dir`.
    """
    config_manager = ConfigManager(config_dir)
    try:
        settings = config_manager.load_settings()
    except ValueError as e:
        display_error(
            AdminError.validation(str(e), step="load_settings").to_record(),
            title="Invalid configuration",
        )
        raise typer.Exit(ExitCode.FAILURE) from e

    setup_logging(
        level=logging.INFO if verbose else logging.WARNING,
        log_file=log_file or settings.log_file,
    )
    logger.debug("Configuration directory: %s", config_dir)
    ctx.obj = CliState(config_manager=config_manager, settings=settings)
