"""Score emission for Judgment evaluations.

Sends scorer outputs as OTEL spans using gen_ai.evaluation.* semantic
convention attributes, so evaluation results travel through the same
exporter pipeline as application traces.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from opentelemetry import trace

from judgment_sdk.data.result import ScoringResult

logger = logging.getLogger(__name__)

_TRACER_NAME = "judgment-sdk-scores"


def score(
    name: str,
    value: Optional[float] = None,
    *,
    trace_id: Optional[str] = None,
    example_id: Optional[str] = None,
    threshold: Optional[float] = None,
    success: Optional[bool] = None,
    explanation: Optional[str] = None,
    error: Optional[str] = None,
    source: str = "judgment",
    metadata: Optional[Dict[str, Any]] = None,
) -> None:
    """Submit a single evaluation score as an OTEL span.

    Args:
        name: Scorer name (e.g., "faithfulness").
        value: Numeric score value.
        trace_id: The trace being scored. Stored as an attribute
            (does NOT become the span's own trace ID).
        example_id: The example the score belongs to.
        threshold: The scorer threshold the value was compared against.
        success: Whether the score met the threshold.
        explanation: Scorer justification.
        error: Scorer error message, if scoring failed.
        source: Who created the score.
        metadata: Optional arbitrary metadata.

    Example:
        score("faithfulness", 0.92, example_id="ex-1", threshold=0.7, success=True)
    """
    tracer = trace.get_tracer(_TRACER_NAME)

    attrs: Dict[str, Any] = {
        "gen_ai.evaluation.name": name,
        "gen_ai.evaluation.source": source,
    }

    if value is not None:
        attrs["gen_ai.evaluation.score.value"] = value
    if threshold is not None:
        attrs["gen_ai.evaluation.threshold"] = threshold
    if success is not None:
        attrs["gen_ai.evaluation.score.label"] = "pass" if success else "fail"
    if trace_id:
        attrs["gen_ai.evaluation.trace_id"] = trace_id
    if example_id:
        attrs["judgment.example_id"] = example_id
    if explanation:
        attrs["gen_ai.evaluation.explanation"] = explanation[:500]
    if error:
        attrs["error.type"] = error[:500]
    if metadata:
        for k, v in metadata.items():
            attrs[f"gen_ai.evaluation.metadata.{k}"] = str(v)

    with tracer.start_as_current_span("gen_ai.evaluation.result", attributes=attrs):
        logger.debug("Score emitted: %s=%s (example=%s)", name, value, example_id)


def emit_result_scores(result: ScoringResult, eval_name: Optional[str] = None) -> None:
    """Emit one score span per scorer output in ``result``."""
    example = result.data_object
    for scorer_data in result.scorers_data:
        score(
            scorer_data.name,
            scorer_data.score,
            trace_id=example.trace_id,
            example_id=example.example_id,
            threshold=scorer_data.threshold,
            success=scorer_data.success,
            explanation=scorer_data.reason,
            error=scorer_data.error,
            metadata={"eval_name": eval_name, "example_index": example.example_index}
            if eval_name
            else None,
        )
