"""
remoteadmin - Windows Remote Administration Utilities.

Small WinRM-based helpers for Windows hosts:
- Confirm a target really is the intended system (and logged-on user)
- Change a host's static DNS server list with an operator confirmation gate
- Run a piped PowerShell command stage by stage

Usage:
    # CLI (recommended)
    remoteadmin set-dns WIN10 --dns 192.168.1.1 --dns 8.8.8.8

    # Programmatic
    from remoteadmin.application import IdentityConfirmer
    from remoteadmin.infrastructure.psremoting import WinRMSystemClient

    confirmer = IdentityConfirmer(WinRMSystemClient())
    result = confirmer.confirm("WIN10", expected_user="jdoe")
"""

__version__ = "0.1.0"
__author__ = "remoteadmin Team"

__all__ = ["__version__"]
