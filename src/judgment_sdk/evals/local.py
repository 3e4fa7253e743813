"""In-process execution of local scorers."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from judgment_sdk.data.example import Example
from judgment_sdk.data.result import ScorerData, ScoringResult
from judgment_sdk.errors import ScorerExecutionError
from judgment_sdk.scorers.base import LocalScorer

logger = logging.getLogger(__name__)


async def execute_local_eval(
    examples: Sequence[Example],
    scorers: Sequence[LocalScorer],
    *,
    ignore_errors: bool = True,
    model: Optional[str] = None,
    log: Optional[logging.Logger] = None,
) -> List[ScoringResult]:
    """Run every local scorer against every example.

    Returns one :class:`ScoringResult` per example, in order. A scorer that
    raises contributes an error-marked :class:`ScorerData` and sets the
    result's ``error`` when ``ignore_errors`` is true.

    Raises:
        ScorerExecutionError: On the first scorer failure when
            ``ignore_errors`` is false. The original exception is chained.
    """
    log = log or logger
    results: List[ScoringResult] = []

    for example in examples:
        result = ScoringResult(data_object=example)
        for scorer in scorers:
            try:
                scorer_data = await scorer.a_score_example(example)
            except Exception as exc:
                if not ignore_errors:
                    raise ScorerExecutionError(scorer.name, example.example_index, str(exc)) from exc
                log.warning(
                    "Scorer %s failed on example %s: %s",
                    scorer.name,
                    example.example_index,
                    exc,
                    extra={"example_index": example.example_index, "score_type": scorer.score_type},
                )
                message = f"{scorer.name}: {exc}"
                result.scorers_data.append(
                    ScorerData(
                        name=scorer.name,
                        threshold=scorer.threshold,
                        success=False,
                        strict_mode=scorer.strict_mode,
                        evaluation_model=model,
                        error=str(exc),
                    )
                )
                result.error = message if result.error is None else f"{result.error}; {message}"
                continue
            result.scorers_data.append(scorer_data)
        results.append(result)

    return results
