"""
CLI result formatters for identity, DNS update and pipeline results.

This module keeps display logic out of the command functions.
"""

import logging
from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table
from rich.text import Text

from remoteadmin.domain.errors import ErrorRecord
from remoteadmin.domain.models import (
    ConfirmationResult,
    DnsUpdateResult,
    DnsUpdateStatus,
    HostIdentity,
    PipelineStage,
    SystemMatch,
)

logger = logging.getLogger(__name__)
console = Console()

_MATCH_STYLES = {
    SystemMatch.CONFIRMED: "[green]✅ True[/green]",
    SystemMatch.UNVERIFIED: "[yellow]⚠️ Unverified[/yellow]",
    SystemMatch.MISMATCHED: "[red]❌ False[/red]",
}

_STATUS_STYLES = {
    DnsUpdateStatus.COMPLETED: "[green]✅ Completed[/green]",
    DnsUpdateStatus.ABORTED: "[yellow]⏹️ Aborted by operator[/yellow]",
    DnsUpdateStatus.FAILED: "[red]❌ Failed - no change made[/red]",
    DnsUpdateStatus.APPLIED_WITH_ERRORS: "[bold red]⚠️ Applied with errors - host WAS changed[/bold red]",
}


def _servers(servers: Sequence[str]) -> str:
    return escape(", ".join(servers)) if servers else "[dim](none)[/dim]"


def display_error(error: ErrorRecord, title: str = "Error") -> None:
    """Show an error record with its classification and underlying text."""
    body = (
        f"[bold]Message:[/bold] {escape(error.message)}\n"
        f"[bold]Kind:[/bold] {error.kind.value}\n"
        f"[bold]Error:[/bold] {escape(error.error_text)}\n"
        f"[bold]Error Name:[/bold] {escape(error.error_name)}"
    )
    if error.step:
        body += f"\n[bold]Step:[/bold] {escape(error.step)}"
    console.print(Panel.fit(body, title=f"❌ {title}", border_style="red"))


def display_host(identity: HostIdentity, requested: Optional[Sequence[str]] = None) -> None:
    """Show what a target resolved to, optionally with the DNS list to apply."""
    body = (
        f"[bold]Requested:[/bold] {escape(identity.requested_id)}\n"
        f"[bold]Computer Name:[/bold] {escape(identity.resolved_name)}\n"
        f"[bold]IP Address:[/bold] {escape(identity.resolved_address)}\n"
        f"[bold]Logged On User:[/bold] {escape(identity.logged_on_user or '(none)')}"
    )
    if requested is not None:
        body += f"\n[bold]New DNS Servers:[/bold] {_servers(requested)}"
    console.print(Panel.fit(body, title="🎯 Target Host", border_style="cyan"))


class ConfirmationFormatter:
    """Formatter for identity confirmation results."""

    def display(self, result: ConfirmationResult, expected_user: Optional[str] = None) -> None:
        if result.error is not None:
            display_error(result.error, title="Identity confirmation failed")
            return

        table = Table(title="🔍 Identity Confirmation")
        table.add_column("Field", style="cyan", no_wrap=True)
        table.add_column("Value")

        identity = result.identity
        if identity is not None:
            table.add_row("Requested", Text(identity.requested_id))
            table.add_row("Computer Name", Text(identity.resolved_name))
            table.add_row("IP Address", Text(identity.resolved_address))
            table.add_row("Logged On User", Text(identity.logged_on_user or "(none)"))
        table.add_row("Is Intended System", _MATCH_STYLES[result.system_matches])
        if result.user_matches is None:
            table.add_row("Is Intended User", "[dim]n/a[/dim]")
        else:
            label = "[green]✅ True[/green]" if result.user_matches else "[red]❌ False[/red]"
            if expected_user:
                label += f" (expected {escape(expected_user)})"
            table.add_row("Is Intended User", label)

        console.print(table)
        if result.system_matches == SystemMatch.UNVERIFIED:
            console.print(
                "[yellow]💡 Only the IP address matched; use the host name to confirm identity[/yellow]"
            )


class DnsUpdateFormatter:
    """Formatter for DNS update results."""

    def display(self, result: DnsUpdateResult) -> None:
        table = Table(title="🌐 DNS Update")
        table.add_column("Field", style="cyan", no_wrap=True)
        table.add_column("Value")
        table.add_row("Status", _STATUS_STYLES[result.status])

        record = result.record
        if record is not None:
            table.add_row("Computer Name", Text(record.target.resolved_name))
            table.add_row("IP Address", Text(record.target.resolved_address))
            if record.interface is not None:
                table.add_row(
                    "Interface",
                    Text(f"{record.interface.index} {record.interface.description or ''}".strip()),
                )
            table.add_row("Original DNS", _servers(record.original_servers))
            table.add_row("Requested DNS", _servers(record.requested_servers))
            table.add_row("Confirmed DNS", _servers(record.confirmed_servers))

        console.print(table)
        if result.error is not None:
            title = "DNS update failed"
            if result.status == DnsUpdateStatus.APPLIED_WITH_ERRORS:
                title = "DNS list applied, follow-up step failed"
            display_error(result.error, title=title)


class PipelineFormatter:
    """Formatter for pipeline stage results."""

    def display_stage(self, stage: PipelineStage) -> None:
        console.print(
            Panel(
                Pretty(stage.result),
                title=Text(stage.label, style="bold blue"),
                border_style="blue",
            )
        )

    def display_stages(self, stages: List[PipelineStage]) -> None:
        table = Table(title="🔗 Pipeline Stages")
        table.add_column("#", style="cyan", no_wrap=True)
        table.add_column("Stage", style="magenta")
        table.add_column("Result")
        for stage in stages:
            table.add_row(str(stage.index), Text(stage.source_text), Pretty(stage.result))
        console.print(table)
