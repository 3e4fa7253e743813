"""Scoring outputs: per-scorer data and per-example results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from judgment_sdk.data.example import Example


@dataclass
class ScorerData:
    """One scorer's output for one example.

    ``success`` is forced to False whenever ``error`` is set.
    """

    name: str
    threshold: float
    success: bool = False
    score: Optional[float] = None
    reason: Optional[str] = None
    strict_mode: Optional[bool] = None
    evaluation_model: Optional[str] = None
    error: Optional[str] = None
    evaluation_cost: Optional[float] = None
    verbose_logs: Optional[str] = None
    additional_metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.error:
            self.success = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "threshold": self.threshold,
            "success": self.success,
            "score": self.score,
            "reason": self.reason,
            "strict_mode": self.strict_mode,
            "evaluation_model": self.evaluation_model,
            "error": self.error,
            "evaluation_cost": self.evaluation_cost,
            "verbose_logs": self.verbose_logs,
            "additional_metadata": self.additional_metadata,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScorerData":
        return cls(
            name=data.get("name") or data.get("score_type") or "unknown",
            threshold=data.get("threshold", 0.5),
            success=bool(data.get("success", False)),
            score=data.get("score"),
            reason=data.get("reason"),
            strict_mode=data.get("strict_mode"),
            evaluation_model=data.get("evaluation_model"),
            error=data.get("error"),
            evaluation_cost=data.get("evaluation_cost"),
            verbose_logs=data.get("verbose_logs"),
            additional_metadata=data.get("additional_metadata") or data.get("metadata") or {},
        )


@dataclass
class ScoringResult:
    """The outcome of scoring one example.

    Attributes:
        data_object: The example that was scored.
        scorers_data: One entry per scorer that produced output.
        error: Top-level error for this example, if any.
    """

    data_object: Example
    scorers_data: List[ScorerData] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        if self.error or not self.scorers_data:
            return False
        return all(scorer_data.success for scorer_data in self.scorers_data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "scorers_data": [scorer_data.to_dict() for scorer_data in self.scorers_data],
            "data_object": self.data_object.to_dict(),
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoringResult":
        return cls(
            data_object=Example.from_dict(data.get("data_object") or {}),
            scorers_data=[ScorerData.from_dict(s) for s in data.get("scorers_data") or []],
            error=data.get("error"),
        )
