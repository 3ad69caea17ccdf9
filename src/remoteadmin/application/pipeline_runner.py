"""
Pipeline Stage Runner - Run a piped command one stage at a time.

Splits "A | B | C" into stages and evaluates each in order, feeding the
previous stage's result to the next. Evaluation itself is delegated to a
StageEvaluator; this module only splits, sequences and threads results.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from remoteadmin.domain.errors import AdminError
from remoteadmin.domain.models import PipelineStage
from remoteadmin.domain.ports import NO_INPUT, StageEvaluator

logger = logging.getLogger(__name__)

PIPE_DELIMITER = "|"

_OPENERS = {"{": "}", "(": ")", "[": "]"}
_QUOTES = ("'", '"')

StageCallback = Callable[[PipelineStage], None]
AcknowledgeCallback = Callable[[PipelineStage], Any]


def split_stages(command_line: str) -> List[str]:
    """
    Split a command string on pipe delimiters and trim each stage.

    Pipes inside quoted strings, script blocks, parentheses or brackets
    belong to their stage and are not delimiters.

    Raises:
        AdminError: VALIDATION kind for fewer than two stages or an empty stage
    """
    stages: List[str] = []
    current: List[str] = []
    closers: List[str] = []
    quote: Optional[str] = None

    for char in command_line or "":
        if quote:
            if char == quote:
                quote = None
        elif char in _QUOTES:
            quote = char
        elif char in _OPENERS:
            closers.append(_OPENERS[char])
        elif closers and char == closers[-1]:
            closers.pop()
        elif char == PIPE_DELIMITER and not closers:
            stages.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    stages.append("".join(current).strip())

    if len(stages) < 2:
        raise AdminError.validation(
            f"Expected at least two '{PIPE_DELIMITER}'-separated stages", step="split_stages"
        )
    empty = [i for i, stage in enumerate(stages, start=1) if not stage]
    if empty:
        raise AdminError.validation(
            f"Stage {empty[0]} of the pipeline is empty", step="split_stages"
        )
    return stages


class PipelineStageRunner:
    """
    Evaluates a piped command stage by stage.

    Interactive mode hands each stage to `display` as soon as it completes
    and calls `acknowledge` between stages; batch mode displays nothing.
    Both modes return the ordered stage records.
    """

    def __init__(self, evaluator: StageEvaluator) -> None:
        self.evaluator = evaluator

    def run(
        self,
        command_line: str,
        interactive: bool = False,
        display: Optional[StageCallback] = None,
        acknowledge: Optional[AcknowledgeCallback] = None,
    ) -> List[PipelineStage]:
        """
        Run every stage of `command_line`.

        Args:
            command_line: Pipe-delimited command string
            interactive: Stream stages to `display` and pause between them
            display: Called with each completed stage in interactive mode
            acknowledge: Called between stages in interactive mode

        Returns:
            Ordered list of PipelineStage records

        Raises:
            AdminError: VALIDATION for a malformed command string, or
                whatever the evaluator raises for a failing stage
        """
        texts = split_stages(command_line)
        logger.info("Running %d pipeline stages", len(texts))

        stages: List[PipelineStage] = []
        previous: Any = NO_INPUT
        for index, text in enumerate(texts, start=1):
            if previous is NO_INPUT:
                result = self.evaluator.evaluate(text)
            else:
                result = self.evaluator.evaluate(text, previous)

            stage = PipelineStage(index=index, source_text=text, result=result)
            stages.append(stage)
            logger.debug("%s -> %r", stage.label, result)
            previous = result

            if interactive:
                if display is not None:
                    display(stage)
                if acknowledge is not None and index < len(texts):
                    acknowledge(stage)

        return stages
