"""EvaluationRun: the validated bundle submitted for scoring."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from judgment_sdk.constants import ACCEPTABLE_MODELS
from judgment_sdk.data.example import Example
from judgment_sdk.errors import ValidationError
from judgment_sdk.judges import JudgevalJudge
from judgment_sdk.rules import Rule
from judgment_sdk.scorers.base import APIScorer, BaseScorer, LocalScorer

Model = Union[str, List[str], JudgevalJudge]


@dataclass
class EvaluationRun:
    """Examples, scorers, and run metadata for one evaluation.

    Construction either yields a fully valid run or raises
    :class:`ValidationError` naming the offending field. Checks run in this
    order and the first failure wins: ``log_results`` type, project and eval
    names, examples, scorers, model, aggregator, rule compatibility.
    """

    examples: List[Example]
    scorers: List[BaseScorer]
    model: Model
    aggregator: Optional[str] = None
    project_name: Optional[str] = None
    eval_name: Optional[str] = None
    log_results: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)
    judgment_api_key: Optional[str] = None
    organization_id: Optional[str] = None
    override: bool = False
    rules: Optional[List[Rule]] = None

    def __post_init__(self) -> None:
        self.examples = list(self.examples or [])
        self.scorers = list(self.scorers or [])
        self.metadata = dict(self.metadata or {})
        self._validate()

    def _validate(self) -> None:
        if not isinstance(self.log_results, bool):
            raise ValidationError(
                f"log_results must be a boolean. Received {self.log_results!r} "
                f"of type {type(self.log_results).__name__}"
            )

        if self.log_results and not self.project_name:
            raise ValidationError(
                "Project name is required when log_results is True. "
                "Please include the project_name argument."
            )
        if self.log_results and not self.eval_name:
            raise ValidationError(
                "Eval name is required when log_results is True. "
                "Please include the eval_name argument."
            )

        if not self.examples:
            raise ValidationError("Examples cannot be empty.")
        seen_ids = set()
        for example in self.examples:
            if not isinstance(example, Example):
                raise ValidationError(f"Invalid type for Example: {type(example).__name__}")
            if example.example_id in seen_ids:
                raise ValidationError(f"Duplicate example_id in run: {example.example_id}")
            seen_ids.add(example.example_id)

        if not self.scorers:
            raise ValidationError("Scorers cannot be empty.")
        for scorer in self.scorers:
            if not isinstance(scorer, (APIScorer, LocalScorer)):
                raise ValidationError(f"Invalid type for Scorer: {type(scorer).__name__}")

        self._validate_model()

        if isinstance(self.model, list) and not self.aggregator:
            raise ValidationError("Aggregator cannot be empty when using multiple models.")
        if self.aggregator and self.aggregator not in ACCEPTABLE_MODELS:
            raise ValidationError(f"Model name {self.aggregator} not recognized.")

        if self.rules and any(not scorer.is_remote for scorer in self.scorers):
            raise ValidationError(
                "Cannot use local scorers when using rules. "
                "Please either remove rules or use only API scorers."
            )

    def _validate_model(self) -> None:
        model = self.model
        if isinstance(model, JudgevalJudge):
            if any(scorer.is_remote for scorer in self.scorers):
                raise ValidationError(
                    "When using a JudgevalJudge model, all scorers must be local scorers."
                )
            return
        if isinstance(model, str):
            if not model:
                raise ValidationError("Model cannot be empty.")
            if model not in ACCEPTABLE_MODELS:
                raise ValidationError(
                    f"Model name {model} not recognized. Please select a valid model name."
                )
            return
        if isinstance(model, list):
            if not model:
                raise ValidationError("Model list cannot be empty.")
            if not all(isinstance(m, str) for m in model):
                raise ValidationError("When providing a list of models, all elements must be strings.")
            for name in model:
                if name not in ACCEPTABLE_MODELS:
                    raise ValidationError(
                        f"Model name {name} not recognized. Please select a valid model name."
                    )
            return
        raise ValidationError(
            "Model must be one of: string, list of strings, or JudgevalJudge instance. "
            f"Received type {type(model).__name__}."
        )

    def partition_scorers(self) -> Tuple[List[APIScorer], List[LocalScorer]]:
        """Split scorers into (API, local) by their ``is_remote`` marker."""
        api_scorers = [s for s in self.scorers if s.is_remote]
        local_scorers = [s for s in self.scorers if not s.is_remote]
        return api_scorers, local_scorers

    def to_payload(self, scorers: Optional[Sequence[BaseScorer]] = None) -> Dict[str, Any]:
        """Serialize for the backend, optionally restricted to ``scorers``."""
        model = self.model.get_model_name() if isinstance(self.model, JudgevalJudge) else self.model
        payload: Dict[str, Any] = {
            "log_results": self.log_results,
            "organization_id": self.organization_id,
            "project_name": self.project_name,
            "eval_name": self.eval_name,
            "examples": [example.to_dict() for example in self.examples],
            "scorers": [scorer.to_dict() for scorer in (self.scorers if scorers is None else scorers)],
            "model": model,
            "aggregator": self.aggregator,
            "metadata": self.metadata,
            "judgment_api_key": self.judgment_api_key,
            "override": self.override,
        }
        if self.rules:
            payload["rules"] = [rule.to_dict() for rule in self.rules]
        return payload
