"""Scorers: API-evaluated metrics and in-process local scorers."""

from judgment_sdk.scorers.api_scorers import (
    REQUIRED_FIELDS,
    AnswerCorrectnessScorer,
    AnswerRelevancyScorer,
    ComparisonScorer,
    ContextualPrecisionScorer,
    ContextualRecallScorer,
    ContextualRelevancyScorer,
    ExecutionOrderScorer,
    FaithfulnessScorer,
    GroundednessScorer,
    HallucinationScorer,
    InstructionAdherenceScorer,
    JsonCorrectnessScorer,
    SummarizationScorer,
    Text2SQLScorer,
)
from judgment_sdk.scorers.base import APIScorer, BaseScorer, LocalScorer
from judgment_sdk.scorers.exact_match import ExactMatchScorer
from judgment_sdk.scorers.factory import load_implementation

__all__ = [
    "BaseScorer",
    "APIScorer",
    "LocalScorer",
    "ExactMatchScorer",
    "load_implementation",
    "REQUIRED_FIELDS",
    "AnswerCorrectnessScorer",
    "AnswerRelevancyScorer",
    "ComparisonScorer",
    "ContextualPrecisionScorer",
    "ContextualRecallScorer",
    "ContextualRelevancyScorer",
    "ExecutionOrderScorer",
    "FaithfulnessScorer",
    "GroundednessScorer",
    "HallucinationScorer",
    "InstructionAdherenceScorer",
    "JsonCorrectnessScorer",
    "SummarizationScorer",
    "Text2SQLScorer",
]
