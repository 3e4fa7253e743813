"""Ready-made scorers evaluated by the Judgment backend."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from judgment_sdk.constants import APIScorerType
from judgment_sdk.scorers.base import APIScorer

# Example fields each scorer kind needs in order to produce a score.
REQUIRED_FIELDS: Dict[str, List[str]] = {
    APIScorerType.ANSWER_CORRECTNESS.value: ["expected_output"],
    APIScorerType.ANSWER_RELEVANCY.value: ["expected_output"],
    APIScorerType.CONTEXTUAL_PRECISION.value: ["context"],
    APIScorerType.CONTEXTUAL_RECALL.value: ["context"],
    APIScorerType.CONTEXTUAL_RELEVANCY.value: ["context"],
    APIScorerType.EXECUTION_ORDER.value: ["expected_tools"],
}


class FaithfulnessScorer(APIScorer):
    def __init__(self, threshold: float = 0.7, **options: Any) -> None:
        super().__init__(APIScorerType.FAITHFULNESS.value, threshold, **options)


class AnswerRelevancyScorer(APIScorer):
    def __init__(self, threshold: float = 0.7, **options: Any) -> None:
        super().__init__(APIScorerType.ANSWER_RELEVANCY.value, threshold, **options)


class AnswerCorrectnessScorer(APIScorer):
    def __init__(self, threshold: float = 0.7, **options: Any) -> None:
        super().__init__(APIScorerType.ANSWER_CORRECTNESS.value, threshold, **options)


class HallucinationScorer(APIScorer):
    def __init__(self, threshold: float = 0.7, **options: Any) -> None:
        super().__init__(APIScorerType.HALLUCINATION.value, threshold, **options)


class SummarizationScorer(APIScorer):
    def __init__(self, threshold: float = 0.7, **options: Any) -> None:
        super().__init__(APIScorerType.SUMMARIZATION.value, threshold, **options)


class ContextualRecallScorer(APIScorer):
    def __init__(self, threshold: float = 0.7, **options: Any) -> None:
        super().__init__(APIScorerType.CONTEXTUAL_RECALL.value, threshold, **options)


class ContextualRelevancyScorer(APIScorer):
    def __init__(self, threshold: float = 0.7, **options: Any) -> None:
        super().__init__(APIScorerType.CONTEXTUAL_RELEVANCY.value, threshold, **options)


class ContextualPrecisionScorer(APIScorer):
    def __init__(self, threshold: float = 0.7, **options: Any) -> None:
        super().__init__(APIScorerType.CONTEXTUAL_PRECISION.value, threshold, **options)


class InstructionAdherenceScorer(APIScorer):
    def __init__(self, threshold: float = 0.7, **options: Any) -> None:
        super().__init__(APIScorerType.INSTRUCTION_ADHERENCE.value, threshold, **options)


class GroundednessScorer(APIScorer):
    def __init__(self, threshold: float = 0.7, **options: Any) -> None:
        super().__init__(APIScorerType.GROUNDEDNESS.value, threshold, **options)


class Text2SQLScorer(APIScorer):
    def __init__(self, threshold: float = 0.7, **options: Any) -> None:
        super().__init__(APIScorerType.TEXT2SQL.value, threshold, **options)


class ExecutionOrderScorer(APIScorer):
    """Checks that tools were called in the expected order.

    Strict by default, which pins the threshold to 1.0.
    """

    def __init__(
        self,
        threshold: float = 1.0,
        *,
        expected_tools: Optional[List[str]] = None,
        strict_mode: bool = True,
        **options: Any,
    ) -> None:
        super().__init__(
            APIScorerType.EXECUTION_ORDER.value, threshold, strict_mode=strict_mode, **options
        )
        self.expected_tools = expected_tools
        self.kwargs["expected_tools"] = expected_tools


class JsonCorrectnessScorer(APIScorer):
    def __init__(
        self,
        threshold: float = 0.7,
        *,
        json_schema: Optional[Dict[str, Any]] = None,
        **options: Any,
    ) -> None:
        super().__init__(APIScorerType.JSON_CORRECTNESS.value, threshold, **options)
        self.json_schema = json_schema
        self.kwargs["json_schema"] = json_schema


class ComparisonScorer(APIScorer):
    """Compares outputs along named criteria. Scores are unbounded above."""

    def __init__(
        self,
        threshold: float = 0.5,
        *,
        criteria: Optional[List[str]] = None,
        description: str = "Compare the outputs based on the given criteria",
        **options: Any,
    ) -> None:
        super().__init__(APIScorerType.COMPARISON.value, threshold, **options)
        self.criteria = criteria or ["Accuracy", "Helpfulness", "Relevance"]
        self.description = description
        self.kwargs.update({"criteria": self.criteria, "description": self.description})


API_SCORER_CLASSES: Dict[str, type] = {
    APIScorerType.FAITHFULNESS.value: FaithfulnessScorer,
    APIScorerType.ANSWER_RELEVANCY.value: AnswerRelevancyScorer,
    APIScorerType.ANSWER_CORRECTNESS.value: AnswerCorrectnessScorer,
    APIScorerType.HALLUCINATION.value: HallucinationScorer,
    APIScorerType.SUMMARIZATION.value: SummarizationScorer,
    APIScorerType.CONTEXTUAL_RECALL.value: ContextualRecallScorer,
    APIScorerType.CONTEXTUAL_RELEVANCY.value: ContextualRelevancyScorer,
    APIScorerType.CONTEXTUAL_PRECISION.value: ContextualPrecisionScorer,
    APIScorerType.INSTRUCTION_ADHERENCE.value: InstructionAdherenceScorer,
    APIScorerType.GROUNDEDNESS.value: GroundednessScorer,
    APIScorerType.TEXT2SQL.value: Text2SQLScorer,
    APIScorerType.EXECUTION_ORDER.value: ExecutionOrderScorer,
    APIScorerType.JSON_CORRECTNESS.value: JsonCorrectnessScorer,
    APIScorerType.COMPARISON.value: ComparisonScorer,
}
