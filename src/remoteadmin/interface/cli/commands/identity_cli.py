"""
Confirm Identity Command - Is this target the intended system?
"""

from typing import Optional

import typer

from remoteadmin.application import IdentityConfirmer
from remoteadmin.domain.models import SystemMatch
from remoteadmin.infrastructure.psremoting import WinRMSystemClient
from remoteadmin.interface.cli.formatters import ConfirmationFormatter
from remoteadmin.interface.cli.state import ExitCode, get_state, resolve_credentials


def confirm_identity(
    ctx: typer.Context,
    target: str = typer.Argument(
        ...,
        help="Host name or IP address of the target"
    ),
    expected_user: Optional[str] = typer.Option(
        None,
        "--expected-user",
        "-u",
        help="User expected to be logged on (user or DOMAIN\\user)"
    ),
    credential: Optional[str] = typer.Option(
        None,
        "--credential",
        "-c",
        help="Credential reference in <config-dir>/credentials. Defaults to the current user"
    )
):
    """
    Confirm that TARGET is the intended system.

    Reads the host's computer name, active IP address and logged-on user:
    - True: TARGET matches the computer name
    - Unverified: TARGET only matches the IP address
    - False: neither matches

    Exits 0 only when the system is confirmed and the expected user (if
    given) is logged on.
    """
    state = get_state(ctx)
    credentials = resolve_credentials(state, credential)

    confirmer = IdentityConfirmer(WinRMSystemClient(state.settings.winrm))
    result = confirmer.confirm(target, expected_user=expected_user, credentials=credentials)

    ConfirmationFormatter().display(result, expected_user=expected_user)

    confirmed = (
        result.succeeded
        and result.system_matches == SystemMatch.CONFIRMED
        and result.user_matches is not False
    )
    raise typer.Exit(ExitCode.SUCCESS if confirmed else ExitCode.FAILURE)
