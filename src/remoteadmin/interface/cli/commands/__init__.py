"""
CLI command functions, one module per command.
"""

from .dns_cli import set_dns
from .identity_cli import confirm_identity
from .pipeline_cli import run_pipeline

__all__ = ["confirm_identity", "run_pipeline", "set_dns"]
