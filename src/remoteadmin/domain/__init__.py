"""
Domain layer.

Pure models, error taxonomy and the interfaces implemented by the
infrastructure layer.
"""

from .errors import AdminError, ErrorKind, ErrorRecord
from .ports import NO_INPUT, RemoteSession, RemoteSystemClient, StageEvaluator

__all__ = [
    "AdminError",
    "ErrorKind",
    "ErrorRecord",
    "NO_INPUT",
    "RemoteSession",
    "RemoteSystemClient",
    "StageEvaluator",
]
