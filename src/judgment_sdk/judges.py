"""Handle for caller-supplied judge models.

Passing a ``JudgevalJudge`` as the run's model means every scorer runs
locally against that judge; the backend is never asked to score.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class JudgevalJudge(ABC):
    """Base class for judge models executed in-process."""

    def __init__(self, model_name: str) -> None:
        self.model_name = model_name

    @abstractmethod
    def generate(self, prompt: Any) -> str: ...

    @abstractmethod
    async def a_generate(self, prompt: Any) -> str: ...

    def get_model_name(self) -> str:
        return self.model_name
