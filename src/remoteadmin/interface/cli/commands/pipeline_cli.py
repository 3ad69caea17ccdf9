"""
Run Pipeline Command - Evaluate a piped PowerShell command stage by stage.
"""

from typing import Optional

import typer

from remoteadmin.application import PipelineStageRunner
from remoteadmin.domain.errors import AdminError
from remoteadmin.domain.models import PipelineStage
from remoteadmin.infrastructure.psremoting import PowerShellStageEvaluator, WinRMSystemClient
from remoteadmin.interface.cli.formatters import PipelineFormatter, console, display_error
from remoteadmin.interface.cli.state import ExitCode, get_state, resolve_credentials


def pause_between_stages(stage: PipelineStage) -> None:
    try:
        console.input(f"[dim]Stage {stage.index} done. Press Enter for the next stage...[/dim]")
    except EOFError:
        pass


def run_pipeline(
    ctx: typer.Context,
    command: str = typer.Argument(
        ...,
        help="Pipe-delimited PowerShell command, e.g. \"Get-Process | Sort-Object CPU | Select-Object -First 5\""
    ),
    interactive: bool = typer.Option(
        False,
        "--interactive/--batch",
        help="Show each stage as it completes and pause between stages, or print all stages at the end"
    ),
    computer: Optional[str] = typer.Option(
        None,
        "--computer",
        help="Evaluate the stages on this host over WinRM instead of locally"
    ),
    credential: Optional[str] = typer.Option(
        None,
        "--credential",
        "-c",
        help="Credential reference for --computer. Defaults to the current user"
    )
):
    """
    Run COMMAND one pipeline stage at a time.

    Each stage receives the previous stage's output as its input, so the
    intermediate result of every stage can be inspected.
    """
    state = get_state(ctx)
    formatter = PipelineFormatter()

    session = None
    try:
        if computer:
            credentials = resolve_credentials(state, credential)
            session = WinRMSystemClient(state.settings.winrm).connect(computer, credentials)
            evaluator = PowerShellStageEvaluator.remote(
                session, json_depth=state.settings.powershell.json_depth
            )
        else:
            evaluator = PowerShellStageEvaluator.local(state.settings.powershell)

        stages = PipelineStageRunner(evaluator).run(
            command,
            interactive=interactive,
            display=formatter.display_stage,
            acknowledge=pause_between_stages,
        )
    except AdminError as e:
        display_error(e.to_record(), title="Pipeline failed")
        raise typer.Exit(ExitCode.FAILURE) from e
    finally:
        if session is not None:
            session.close()

    if not interactive:
        formatter.display_stages(stages)
