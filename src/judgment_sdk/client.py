"""High-level entry point for running and managing Judgment evaluations."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx

from judgment_sdk.config import JudgmentConfig
from judgment_sdk.constants import DEFAULT_MODEL, APIScorerType
from judgment_sdk.data.example import Example
from judgment_sdk.data.result import ScoringResult
from judgment_sdk.errors import EvaluationTimeoutError
from judgment_sdk.evals.api import JudgmentApiClient, RunRef
from judgment_sdk.evals.evaluate import assert_test, run_eval
from judgment_sdk.evaluation_run import EvaluationRun, Model
from judgment_sdk.rules import Rule
from judgment_sdk.scorers.base import BaseScorer
from judgment_sdk.scorers.factory import load_implementation

logger = logging.getLogger(__name__)

ScorerLike = Union[BaseScorer, APIScorerType, str]


class JudgmentClient:
    """Runs evaluations against a Judgment organization.

    Args:
        config: Credentials. Resolved from ``JUDGMENT_API_KEY``,
            ``JUDGMENT_ORG_ID`` and ``JUDGMENT_API_URL`` when omitted.
        http_client: Optional shared ``httpx.AsyncClient``.

    Example:
        client = JudgmentClient()
        results = client.run_evaluation(
            examples=[Example(input="2+2?", actual_output="4", expected_output="4")],
            scorers=["exact_match"],
            use_judgment=False,
            log_results=False,
        )
    """

    def __init__(
        self,
        config: Optional[JudgmentConfig] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or JudgmentConfig.from_env()
        self.api = JudgmentApiClient(self.config, client=http_client)

    async def __aenter__(self) -> "JudgmentClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.api.aclose()

    def _build_run(
        self,
        examples: Sequence[Example],
        scorers: Sequence[ScorerLike],
        *,
        model: Model,
        aggregator: Optional[str],
        metadata: Optional[Dict[str, Any]],
        log_results: bool,
        project_name: str,
        eval_run_name: str,
        override: bool,
        use_judgment: bool,
        rules: Optional[List[Rule]],
    ) -> EvaluationRun:
        resolved = [
            s if isinstance(s, BaseScorer) else load_implementation(s, use_remote=use_judgment)
            for s in scorers
        ]
        return EvaluationRun(
            examples=list(examples),
            scorers=resolved,
            model=model,
            aggregator=aggregator,
            project_name=project_name,
            eval_name=eval_run_name,
            log_results=log_results,
            metadata=metadata or {},
            judgment_api_key=self.config.api_key,
            organization_id=self.config.organization_id,
            override=override,
            rules=rules,
        )

    async def evaluate(
        self,
        examples: Sequence[Example],
        scorers: Sequence[ScorerLike],
        model: Model = DEFAULT_MODEL,
        aggregator: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        log_results: bool = True,
        project_name: str = "default_project",
        eval_run_name: str = "default_eval_run",
        override: bool = False,
        use_judgment: bool = True,
        ignore_errors: bool = True,
        async_execution: bool = False,
        rules: Optional[List[Rule]] = None,
        emit_scores: bool = False,
        api: Optional[JudgmentApiClient] = None,
    ) -> List[ScoringResult]:
        """Build and execute an evaluation run. See :func:`run_eval`."""
        run = self._build_run(
            examples,
            scorers,
            model=model,
            aggregator=aggregator,
            metadata=metadata,
            log_results=log_results,
            project_name=project_name,
            eval_run_name=eval_run_name,
            override=override,
            use_judgment=use_judgment,
            rules=rules,
        )
        return await run_eval(
            run,
            api=api or self.api,
            override=override,
            ignore_errors=ignore_errors,
            async_execution=async_execution,
            emit_scores=emit_scores,
        )

    def run_evaluation(
        self, examples: Sequence[Example], scorers: Sequence[ScorerLike], **kwargs: Any
    ) -> List[ScoringResult]:
        """Synchronous wrapper around :meth:`evaluate`.

        Must not be called from a running event loop; use :meth:`evaluate` there.
        Each call uses its own HTTP connection pool bound to that loop.
        """
        async def _evaluate_once() -> List[ScoringResult]:
            async with JudgmentApiClient(self.config) as api:
                return await self.evaluate(examples, scorers, api=api, **kwargs)

        return asyncio.run(_evaluate_once())

    async def a_run_evaluation(
        self, examples: Sequence[Example], scorers: Sequence[ScorerLike], **kwargs: Any
    ) -> List[ScoringResult]:
        """Enqueue the evaluation on the backend and return ``[]`` immediately."""
        kwargs["async_execution"] = True
        return await self.evaluate(examples, scorers, **kwargs)

    async def assert_test(
        self, examples: Sequence[Example], scorers: Sequence[ScorerLike], **kwargs: Any
    ) -> List[ScoringResult]:
        """Run the evaluation with errors surfaced, then assert every scorer passed."""
        kwargs["ignore_errors"] = False
        kwargs["async_execution"] = False
        results = await self.evaluate(examples, scorers, **kwargs)
        assert_test(results)
        return results

    async def pull_eval(self, project_name: str, eval_run_name: str) -> List[ScoringResult]:
        return await self.api.fetch_eval_results(eval_run_name, project_name)

    async def wait_for_evaluation(
        self,
        project_name: str,
        eval_run_name: str,
        *,
        interval: float = 5.0,
        max_attempts: int = 120,
        raise_on_timeout: bool = False,
    ) -> List[ScoringResult]:
        """Poll an async evaluation until it completes.

        Returns ``[]`` on timeout unless ``raise_on_timeout`` is set.
        """
        results = await self.api.poll_until_complete(
            RunRef(eval_run_name, project_name),
            interval=interval,
            max_attempts=max_attempts,
        )
        if not results and raise_on_timeout:
            status = await self.api.check_status(RunRef(eval_run_name, project_name))
            if status.status != "complete":
                raise EvaluationTimeoutError(
                    f"Evaluation {eval_run_name} did not complete after {max_attempts} attempts"
                )
        return results

    async def delete_eval(self, project_name: str, eval_run_names: Sequence[str]) -> bool:
        return await self.api.delete_eval(project_name, eval_run_names)

    async def delete_project_evals(self, project_name: str) -> bool:
        return await self.api.delete_project_evals(project_name)

    async def create_project(self, project_name: str) -> bool:
        return await self.api.create_project(project_name)

    async def delete_project(self, project_name: str) -> bool:
        return await self.api.delete_project(project_name)
