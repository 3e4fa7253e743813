"""Scorer base classes.

Scorers come in two variants, distinguished by the ``is_remote`` marker
rather than by subclass identity:

- :class:`APIScorer`: configuration only; the backend computes the score.
- :class:`LocalScorer`: implements ``score_example`` and runs in-process.
"""

from __future__ import annotations

import asyncio
import inspect
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from judgment_sdk.constants import UNBOUNDED_SCORERS
from judgment_sdk.data.example import Example
from judgment_sdk.data.result import ScorerData
from judgment_sdk.errors import ValidationError


class BaseScorer:
    """State and threshold rules shared by every scorer.

    The threshold is validated on construction and on every change to
    ``threshold`` or ``strict_mode``. Strict mode pins it to 1.0.
    """

    is_remote: bool = False

    def __init__(
        self,
        score_type: str,
        threshold: float = 0.5,
        *,
        name: Optional[str] = None,
        strict_mode: bool = False,
        include_reason: bool = True,
        async_mode: bool = True,
        verbose_mode: bool = False,
        additional_metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.score_type = score_type
        self.name = name or score_type
        self.include_reason = include_reason
        self.async_mode = async_mode
        self.verbose_mode = verbose_mode
        self.additional_metadata: Dict[str, Any] = dict(additional_metadata or {})

        self._strict_mode = bool(strict_mode)
        self._threshold = 1.0 if self._strict_mode else self._validate_threshold(threshold)

        # Populated by scoring.
        self.score: Optional[float] = None
        self.success: Optional[bool] = None
        self.reason: Optional[str] = None
        self.error: Optional[str] = None
        self.evaluation_cost: Optional[float] = None
        self.verbose_logs: Optional[str] = None

    @property
    def threshold(self) -> float:
        return self._threshold

    @threshold.setter
    def threshold(self, value: float) -> None:
        validated = self._validate_threshold(value)
        self._threshold = 1.0 if self._strict_mode else validated

    @property
    def strict_mode(self) -> bool:
        return self._strict_mode

    @strict_mode.setter
    def strict_mode(self, value: bool) -> None:
        self._strict_mode = bool(value)
        if self._strict_mode:
            self._threshold = 1.0

    @property
    def is_unbounded(self) -> bool:
        return self.score_type in UNBOUNDED_SCORERS

    def _validate_threshold(self, threshold: Any) -> float:
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
            raise ValidationError(
                f"Threshold for {self.score_type} must be a number, got {threshold!r}"
            )
        if self.is_unbounded:
            if threshold < 0:
                raise ValidationError(
                    f"Threshold for {self.score_type} must be greater than or equal to 0, "
                    f"got: {threshold}"
                )
        elif not 0 <= threshold <= 1:
            raise ValidationError(
                f"Threshold for {self.score_type} must be between 0 and 1, got: {threshold}"
            )
        return float(threshold)

    def success_check(self, score: Optional[float] = None) -> bool:
        """Return whether ``score`` (or the last recorded score) passes.

        An error or a missing score is never a success.
        """
        value = self.score if score is None else score
        if self.error is not None and score is None:
            return False
        if value is None:
            return False
        return value >= self._threshold

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "score_type": self.score_type,
            "name": self.name,
            "threshold": self._threshold,
            "strict_mode": self._strict_mode,
        }
        if self.additional_metadata:
            data["additional_metadata"] = self.additional_metadata
        return data

    def __repr__(self) -> str:
        return f"{type(self).__name__}(score_type={self.score_type!r}, threshold={self._threshold})"


class APIScorer(BaseScorer):
    """A scorer evaluated by the Judgment backend.

    Subclasses add kind-specific keyword arguments through ``kwargs``;
    they are serialized alongside ``score_type`` and ``threshold``.
    """

    is_remote = True

    def __init__(self, score_type: str, threshold: float = 0.5, **options: Any) -> None:
        super().__init__(score_type, threshold, **options)
        self.kwargs: Dict[str, Any] = {}

    def score_example(self, example: Example) -> ScorerData:
        raise NotImplementedError("API scorers are evaluated on the server side")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({k: v for k, v in self.kwargs.items() if v is not None})
        return data


class LocalScorer(BaseScorer, ABC):
    """A scorer executed in-process.

    Implement ``score_example`` as a regular or ``async`` method returning
    :class:`ScorerData`. Use :meth:`_build_scorer_data` to package the
    current state once ``score`` (and optionally ``reason``) are set.
    """

    is_remote = False

    @abstractmethod
    def score_example(self, example: Example) -> Any: ...

    async def a_score_example(self, example: Example) -> ScorerData:
        """Await ``score_example``. Sync implementations run in a worker thread."""
        if inspect.iscoroutinefunction(self.score_example):
            return await self.score_example(example)
        outcome = await asyncio.to_thread(self.score_example, example)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        return outcome

    def _build_scorer_data(self, evaluation_model: Optional[str] = None) -> ScorerData:
        self.success = self.success_check()
        return ScorerData(
            name=self.name,
            threshold=self._threshold,
            success=self.success,
            score=self.score,
            reason=self.reason if self.include_reason else None,
            strict_mode=self._strict_mode,
            evaluation_model=evaluation_model,
            error=self.error,
            evaluation_cost=self.evaluation_cost,
            verbose_logs=self.verbose_logs if self.verbose_mode else None,
            additional_metadata=dict(self.additional_metadata),
        )
