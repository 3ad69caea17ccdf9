# pylint: disable=missing-module-docstring
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PipelineStage(BaseModel):
    """
    One evaluated segment of a piped command string.
    """

    index: int = Field(..., ge=1, description="1-based stage position")
    source_text: str = Field(..., description="Trimmed stage text")
    result: Any = Field(None, description="Opaque evaluation result")

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def label(self) -> str:
        return f"Stage {self.index}: {self.source_text}"
