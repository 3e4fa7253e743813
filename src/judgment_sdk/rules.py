"""Alerting rules evaluated over scorer outputs.

A :class:`Rule` bundles one or more :class:`Condition` objects, each tied
to a scorer whose threshold and success predicate decide whether the
condition passes. :class:`RulesEngine` evaluates rules against a mapping of
metric name to score and reports an :class:`AlertResult` per rule.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional

from judgment_sdk.constants import MAX_CONCURRENT_EVALUATIONS
from judgment_sdk.errors import ValidationError
from judgment_sdk.scorers.base import BaseScorer

logger = logging.getLogger(__name__)

CombineType = Literal["all", "any"]


class AlertStatus(str, Enum):
    TRIGGERED = "triggered"
    NOT_TRIGGERED = "not_triggered"


class Condition:
    """A threshold check on a single metric."""

    def __init__(self, metric: BaseScorer) -> None:
        if not isinstance(metric, BaseScorer):
            raise ValidationError(f"Condition metric must be a scorer, got {type(metric).__name__}")
        self.metric = metric

    @property
    def metric_name(self) -> str:
        return self.metric.score_type

    @property
    def threshold(self) -> float:
        return self.metric.threshold

    def evaluate(self, value: float) -> bool:
        return self.metric.success_check(value)

    def to_dict(self) -> Dict[str, Any]:
        return {"metric": self.metric.to_dict()}


@dataclass
class NotificationConfig:
    enabled: bool = True
    communication_methods: List[str] = field(default_factory=list)
    email_addresses: Optional[List[str]] = None
    send_at: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "communication_methods": self.communication_methods,
            "email_addresses": self.email_addresses,
            "send_at": self.send_at,
        }


class Rule:
    """A named alert over one or more conditions.

    ``combine_type="all"`` triggers when every condition passes,
    ``"any"`` when at least one does.
    """

    def __init__(
        self,
        name: str,
        conditions: List[Condition],
        combine_type: CombineType = "all",
        description: Optional[str] = None,
        notification: Optional[NotificationConfig] = None,
        rule_id: Optional[str] = None,
    ) -> None:
        if not conditions:
            raise ValidationError("Conditions list cannot be empty")
        if combine_type not in ("all", "any"):
            raise ValidationError(f'Combine type must be "all" or "any", got {combine_type!r}')

        self.rule_id = rule_id or str(uuid.uuid4())
        self.name = name
        self.conditions = list(conditions)
        self.combine_type = combine_type
        self.description = description
        self.notification = notification

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "rule_id": self.rule_id,
            "name": self.name,
            "description": self.description,
            "conditions": [condition.to_dict() for condition in self.conditions],
            "combine_type": self.combine_type,
        }
        if self.notification is not None:
            data["notification"] = self.notification.to_dict()
        return data


@dataclass
class ConditionResult:
    metric: str
    value: float
    threshold: float
    passed: bool


@dataclass
class AlertResult:
    """Outcome of evaluating one rule against one set of scores."""

    status: AlertStatus
    rule_name: str
    conditions_result: List[ConditionResult]
    metadata: Dict[str, Any] = field(default_factory=dict)
    rule_id: Optional[str] = None
    notification: Optional[NotificationConfig] = None

    @property
    def example_id(self) -> Optional[str]:
        return self.metadata.get("example_id")

    @property
    def timestamp(self) -> Optional[str]:
        return self.metadata.get("timestamp")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "status": self.status.value,
            "rule_name": self.rule_name,
            "conditions_result": [vars(c) for c in self.conditions_result],
            "metadata": self.metadata,
        }
        if self.rule_id:
            data["rule_id"] = self.rule_id
        if self.notification is not None:
            data["notification"] = self.notification.to_dict()
        return data


class RulesEngine:
    """Evaluates a set of rules keyed by rule id."""

    def __init__(self, rules: Mapping[str, Rule]) -> None:
        self.rules: Dict[str, Rule] = dict(rules)

    @classmethod
    def from_rules(cls, rules: List[Rule]) -> "RulesEngine":
        return cls({rule.rule_id: rule for rule in rules})

    def configure_notification(
        self,
        rule_id: str,
        enabled: bool = True,
        communication_methods: Optional[List[str]] = None,
        email_addresses: Optional[List[str]] = None,
        send_at: Optional[int] = None,
    ) -> None:
        if rule_id not in self.rules:
            raise KeyError(f"Rule with ID {rule_id} not found")
        self.rules[rule_id].notification = NotificationConfig(
            enabled=enabled,
            communication_methods=list(communication_methods or []),
            email_addresses=email_addresses,
            send_at=send_at,
        )

    def configure_all_notifications(self, **kwargs: Any) -> None:
        for rule_id in self.rules:
            self.configure_notification(rule_id, **kwargs)

    def evaluate_rules(
        self,
        scores: Mapping[str, float],
        example_metadata: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, AlertResult]:
        """Evaluate every rule against ``scores``.

        Metrics missing from ``scores`` are treated as 0.0. A ``timestamp``
        is added to the metadata when the caller did not supply one.
        """
        metadata = dict(example_metadata or {})
        metadata.setdefault("timestamp", datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S"))

        results: Dict[str, AlertResult] = {}
        for rule_id, rule in self.rules.items():
            condition_results = []
            for condition in rule.conditions:
                value = scores.get(condition.metric_name, 0.0)
                condition_results.append(
                    ConditionResult(
                        metric=condition.metric_name,
                        value=value,
                        threshold=condition.threshold,
                        passed=condition.evaluate(value),
                    )
                )

            outcomes = [c.passed for c in condition_results]
            triggered = all(outcomes) if rule.combine_type == "all" else any(outcomes)

            results[rule_id] = AlertResult(
                status=AlertStatus.TRIGGERED if triggered else AlertStatus.NOT_TRIGGERED,
                rule_name=rule.name,
                conditions_result=condition_results,
                metadata=metadata,
                rule_id=rule.rule_id,
                notification=rule.notification,
            )
        return results

    async def evaluate_rules_parallel(
        self,
        example_scores: Mapping[str, Mapping[str, float]],
        example_metadata: Optional[Mapping[str, Mapping[str, Any]]] = None,
        max_concurrent: int = MAX_CONCURRENT_EVALUATIONS,
    ) -> Dict[str, Dict[str, AlertResult]]:
        """Evaluate rules for many examples, ``max_concurrent`` at a time.

        Example ids are processed in fixed-size batches; each batch runs on
        worker threads and completes before the next one starts.
        """
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")

        example_metadata = example_metadata or {}
        example_ids = list(example_scores)
        results: Dict[str, Dict[str, AlertResult]] = {}

        for start in range(0, len(example_ids), max_concurrent):
            batch = example_ids[start : start + max_concurrent]
            batch_results = await asyncio.gather(
                *(
                    asyncio.to_thread(
                        self.evaluate_rules,
                        example_scores[example_id],
                        {"example_id": example_id, **example_metadata.get(example_id, {})},
                    )
                    for example_id in batch
                )
            )
            results.update(zip(batch, batch_results))
            logger.debug("Evaluated rules for %d/%d examples", len(results), len(example_ids))

        return results
