"""
PowerShell Remoting Infrastructure

pywinrm-backed sessions, the RemoteSystemClient implementation and the
PowerShell stage evaluator (local or remote).
"""

from .connection_client import WINRM_ERRORS, WinRMSession, open_session
from .local_runner import LocalPowerShellRunner
from .stage_evaluator import PowerShellStageEvaluator, build_stage_script, parse_stage_output
from .system_client import WinRMSystemClient

__all__ = [
    "WINRM_ERRORS",
    "LocalPowerShellRunner",
    "PowerShellStageEvaluator",
    "WinRMSession",
    "WinRMSystemClient",
    "build_stage_script",
    "open_session",
    "parse_stage_output",
]
