"""
Application layer: identity confirmation, DNS update and pipeline workflows.
"""

from .dns_update_workflow import DnsUpdateWorkflow, is_affirmative, validate_request
from .identity_confirmer import IdentityConfirmer, classify_system, user_matches
from .pipeline_runner import PipelineStageRunner, split_stages

__all__ = [
    "DnsUpdateWorkflow",
    "IdentityConfirmer",
    "PipelineStageRunner",
    "classify_system",
    "is_affirmative",
    "split_stages",
    "user_matches",
    "validate_request",
]
