"""
Set DNS Command - Change a host's static DNS server list.
"""

from typing import List, Optional, Sequence

import typer
from rich.markup import escape

from remoteadmin.application import DnsUpdateWorkflow
from remoteadmin.domain.errors import AdminError
from remoteadmin.domain.models import DnsUpdateStatus, HostIdentity
from remoteadmin.infrastructure.psremoting import WinRMSystemClient
from remoteadmin.interface.cli.formatters import (
    DnsUpdateFormatter,
    console,
    display_error,
    display_host,
)
from remoteadmin.interface.cli.state import ExitCode, get_state, resolve_credentials

_EXIT_CODES = {
    DnsUpdateStatus.COMPLETED: ExitCode.SUCCESS,
    DnsUpdateStatus.ABORTED: ExitCode.ABORTED,
    DnsUpdateStatus.FAILED: ExitCode.FAILURE,
    DnsUpdateStatus.APPLIED_WITH_ERRORS: ExitCode.APPLIED_WITH_ERRORS,
}


def prompt_confirmation(identity: HostIdentity, requested: Sequence[str]) -> str:
    """Show the target and read the operator's raw answer from stdin."""
    display_host(identity, requested)
    try:
        return console.input("Apply the new DNS server list to this host? " + escape("[y/N]") + " ")
    except EOFError:
        return ""


def set_dns(
    ctx: typer.Context,
    target: str = typer.Argument(
        ...,
        help="Host name or IP address of the target"
    ),
    dns: List[str] = typer.Option(
        ...,
        "--dns",
        "-d",
        help="DNS server address, in order. Repeat for each server"
    ),
    credential: Optional[str] = typer.Option(
        None,
        "--credential",
        "-c",
        help="Credential reference in <config-dir>/credentials. Defaults to the current user"
    )
):
    """
    Replace the static DNS server list of TARGET's active network adapter.

    The target is shown first and the change is only applied after an
    explicit "y" answer; anything else aborts without touching the host.
    After the change the list is read back and DNS is re-registered.
    """
    state = get_state(ctx)
    credentials = resolve_credentials(state, credential)

    workflow = DnsUpdateWorkflow(
        WinRMSystemClient(state.settings.winrm),
        confirm=prompt_confirmation,
    )

    try:
        result = workflow.run(target, dns, credentials=credentials)
    except AdminError as e:
        display_error(e.to_record(), title="Invalid request")
        raise typer.Exit(ExitCode.FAILURE) from e

    DnsUpdateFormatter().display(result)
    raise typer.Exit(_EXIT_CODES[result.status])
