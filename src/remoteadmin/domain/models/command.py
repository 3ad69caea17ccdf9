# pylint: disable=missing-module-docstring,line-too-long
from pydantic import BaseModel, Field


class CommandResult(BaseModel):
    """
    Structured result of one PowerShell invocation, local or remote.
    """

    success: bool = Field(..., description="Whether the command succeeded")
    stdout: str = Field("", description="Standard output")
    stderr: str = Field("", description="Standard error")
    exit_code: int = Field(-1, description="Process exit code")
    duration_ms: int = Field(0, description="Execution duration in milliseconds")
