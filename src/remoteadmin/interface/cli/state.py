"""
Shared CLI state and exit codes.

The root callback loads configuration once and stores a CliState on the
typer context; commands read it back with get_state().
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

import typer

from remoteadmin.domain.config import RemoteAdminSettings, SessionCredentials
from remoteadmin.domain.errors import AdminError
from remoteadmin.infrastructure.config import ConfigManager
from remoteadmin.interface.cli.formatters import display_error


class ExitCode(IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    FAILURE = 1
    ABORTED = 2
    APPLIED_WITH_ERRORS = 3


@dataclass
class CliState:
    """Configuration shared by all commands of one invocation."""

    config_manager: ConfigManager
    settings: RemoteAdminSettings


def get_state(ctx: typer.Context) -> CliState:
    state = ctx.find_object(CliState)
    if state is None:
        config_manager = ConfigManager()
        state = CliState(config_manager=config_manager, settings=config_manager.load_settings())
        ctx.obj = state
    return state


def resolve_credentials(state: CliState, credential_ref: Optional[str]) -> SessionCredentials:
    """Turn a --credential reference into session credentials, exiting on bad config."""
    try:
        return state.config_manager.session_credentials(credential_ref)
    except ValueError as e:
        display_error(
            AdminError.validation(str(e), step="load_credential").to_record(),
            title="Credential not available",
        )
        raise typer.Exit(ExitCode.FAILURE) from e
