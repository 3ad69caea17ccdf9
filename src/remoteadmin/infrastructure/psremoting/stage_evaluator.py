"""
PowerShell stage evaluator.

Evaluates one pipeline stage through PowerShell, locally or over a WinRM
session. Data is threaded between stages as JSON: the previous result is
rehydrated with ConvertFrom-Json and piped into the stage, and the stage's
output is captured with ConvertTo-Json.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from remoteadmin.domain.config import PowerShellSettings
from remoteadmin.domain.errors import AdminError
from remoteadmin.domain.models import CommandResult
from remoteadmin.domain.ports import NO_INPUT
from remoteadmin.infrastructure.psremoting.connection_client import WINRM_ERRORS, WinRMSession
from remoteadmin.infrastructure.psremoting.local_runner import LocalPowerShellRunner
from remoteadmin.infrastructure.psremoting.scripts import PREAMBLE, ps_quote

logger = logging.getLogger(__name__)

ScriptRunner = Callable[[str], CommandResult]


def build_stage_script(command: str, pipeline_input: Any = NO_INPUT, json_depth: int = 4) -> str:
    """
    Wrap a stage's text so its output comes back as JSON.

    Without input the stage runs on its own; otherwise the previous result
    is piped into it. A previous result of None pipes nothing.
    """
    lines = [PREAMBLE.rstrip("\n")]
    if pipeline_input is NO_INPUT:
        lines.append(f"$StageOutput = @({command})")
    else:
        if pipeline_input is None:
            lines.append("$PipelineInput = @()")
        else:
            payload = json.dumps(pipeline_input, default=str)
            lines.append(f"$PipelineInput = ConvertFrom-Json -InputObject {ps_quote(payload)}")
        lines.append(f"$StageOutput = @($PipelineInput | {command})")
    lines.append(f"ConvertTo-Json -Compress -Depth {int(json_depth)} -InputObject $StageOutput")
    return "\n".join(lines) + "\n"


def parse_stage_output(stdout: str) -> Any:
    """
    Parse a stage's JSON output.

    Follows PowerShell pipeline semantics: no output is None, a single
    object is returned unwrapped, several objects are a list.
    """
    text = stdout.strip()
    if not text:
        return None
    data = json.loads(text)
    if isinstance(data, list):
        if not data:
            return None
        if len(data) == 1:
            return data[0]
    return data


class PowerShellStageEvaluator:
    """
    StageEvaluator that runs stage text through PowerShell.

    Use `local()` for a child PowerShell process or `remote()` to evaluate
    on a host over an open WinRM session.
    """

    def __init__(self, run_script: ScriptRunner, json_depth: int = 4, location: str = "local") -> None:
        self._run_script = run_script
        self.json_depth = json_depth
        self.location = location

    @classmethod
    def local(cls, settings: PowerShellSettings | None = None) -> PowerShellStageEvaluator:
        settings = settings or PowerShellSettings()
        runner = LocalPowerShellRunner(settings)
        return cls(runner.run_ps, json_depth=settings.json_depth, location="local")

    @classmethod
    def remote(cls, session: WinRMSession, json_depth: int = 4) -> PowerShellStageEvaluator:
        return cls(session.run_ps, json_depth=json_depth, location=session.hostname)

    def evaluate(self, command: str, pipeline_input: Any = NO_INPUT) -> Any:
        script = build_stage_script(command, pipeline_input, self.json_depth)
        logger.debug("Evaluating stage on %s: %s", self.location, command)

        try:
            result = self._run_script(script)
        except WINRM_ERRORS as e:
            raise AdminError.query(
                f"Stage '{command}' could not be sent to {self.location}",
                cause=e,
                step="evaluate_stage",
            ) from e

        if not result.success:
            detail = result.stderr.strip() or f"exit code {result.exit_code}"
            raise AdminError.query(
                f"Stage '{command}' failed", step="evaluate_stage", detail=detail
            )

        try:
            return parse_stage_output(result.stdout)
        except json.JSONDecodeError as e:
            raise AdminError.query(
                f"Stage '{command}' produced output that is not JSON",
                cause=e,
                step="evaluate_stage",
            ) from e
