"""
CLI output formatters.
"""

from .result_formatters import (
    ConfirmationFormatter,
    DnsUpdateFormatter,
    PipelineFormatter,
    console,
    display_error,
    display_host,
)

__all__ = [
    "ConfirmationFormatter",
    "DnsUpdateFormatter",
    "PipelineFormatter",
    "console",
    "display_error",
    "display_host",
]
