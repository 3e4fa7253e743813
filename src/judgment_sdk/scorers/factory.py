"""Resolve scorer kind tags to concrete scorer instances."""

from __future__ import annotations

from typing import Any, Dict, Union

from judgment_sdk.constants import APIScorerType
from judgment_sdk.errors import ValidationError
from judgment_sdk.scorers.api_scorers import API_SCORER_CLASSES
from judgment_sdk.scorers.base import BaseScorer
from judgment_sdk.scorers.exact_match import ExactMatchScorer

LOCAL_SCORER_CLASSES: Dict[str, type] = {
    "exact_match": ExactMatchScorer,
}


def load_implementation(
    kind: Union[str, APIScorerType],
    use_remote: bool = True,
    **kwargs: Any,
) -> BaseScorer:
    """Build the scorer for ``kind``.

    Args:
        kind: A scorer kind, as an ``APIScorerType`` or its string value
            (case-insensitive).
        use_remote: Prefer the backend-evaluated implementation. Kinds that
            only exist locally (``exact_match``) ignore this flag.
        **kwargs: Passed to the scorer constructor (``threshold`` etc.).

    Raises:
        ValidationError: If no implementation exists for ``kind``.
    """
    tag = kind.value if isinstance(kind, APIScorerType) else str(kind).lower()

    if use_remote and tag in API_SCORER_CLASSES:
        return API_SCORER_CLASSES[tag](**kwargs)
    if tag in LOCAL_SCORER_CLASSES:
        return LOCAL_SCORER_CLASSES[tag](**kwargs)
    if tag in API_SCORER_CLASSES:
        raise ValidationError(
            f"No local implementation is available for scorer '{tag}'. "
            "Run it through the Judgment API instead."
        )
    raise ValidationError(f"Unknown scorer type: {kind}")
