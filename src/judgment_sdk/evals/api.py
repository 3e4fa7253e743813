"""Async HTTP client for the Judgment evaluation backend.

One ``httpx.AsyncClient`` is shared across calls. It holds no run-specific
state, so a single :class:`JudgmentApiClient` can serve concurrent runs.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Union

import httpx

from judgment_sdk.config import JudgmentConfig
from judgment_sdk.constants import (
    ADD_TO_RUN_EVAL_QUEUE_ROUTE,
    CHECK_EVAL_STATUS_ROUTE,
    DELETE_EVAL_RESULTS_ROUTE,
    DELETE_PROJECT_EVALS_ROUTE,
    EVAL_RUN_NAME_EXISTS_ROUTE,
    EVALUATE_ROUTE,
    FETCH_EVAL_RESULTS_ROUTE,
    LOG_EVAL_RESULTS_ROUTE,
    PROJECT_CREATE_ROUTE,
    PROJECT_DELETE_ROUTE,
)
from judgment_sdk.data.example import Example
from judgment_sdk.data.result import ScorerData, ScoringResult
from judgment_sdk.errors import JudgmentAPIError, NameCollisionError
from judgment_sdk.evaluation_run import EvaluationRun

logger = logging.getLogger(__name__)

KNOWN_STATUSES = frozenset({"queued", "processing", "complete", "failed", "unknown", "not_found"})


class RunRef(NamedTuple):
    """Identifies a logged evaluation run."""

    eval_name: str
    project_name: str


@dataclass
class EvalStatus:
    """Snapshot of an async evaluation's progress.

    Attributes:
        status: One of queued, processing, complete, failed, unknown, not_found.
        progress: Server-reported progress, if any.
        message: Human-readable status message.
        error: Server-reported error for failed runs.
    """

    status: str
    progress: Optional[float] = None
    message: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def unknown(cls, message: Optional[str] = None) -> "EvalStatus":
        return cls(status="unknown", message=message)


RunLike = Union[RunRef, EvaluationRun]


def _ref(run: RunLike) -> RunRef:
    if isinstance(run, RunRef):
        return run
    return RunRef(eval_name=run.eval_name or "", project_name=run.project_name or "")


class JudgmentApiClient:
    """Remote execution adapter for API scorers, queueing, polling and persistence.

    Args:
        config: Credentials and base URL.
        client: Optional pre-built ``httpx.AsyncClient``. When omitted one is
            created and owned by this instance (closed by :meth:`aclose`).

    Example:
        async with JudgmentApiClient(JudgmentConfig.from_env()) as api:
            results = await api.execute_api_eval(run)
    """

    def __init__(
        self,
        config: JudgmentConfig,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config
        self._owns_client = client is None
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """The shared HTTP client, created on first use when none was injected."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
        return self._client

    async def __aenter__(self) -> "JudgmentApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _send(self, method: str, route: str, payload: Dict[str, Any]) -> httpx.Response:
        url = self.config.url(route)
        logger.debug("%s %s", method, url)
        try:
            return await self.client.request(
                method,
                url,
                json=payload,
                headers=self.config.auth_headers(),
            )
        except httpx.HTTPError as exc:
            raise JudgmentAPIError(f"Request to {route} failed: {exc}") from exc

    async def _post(self, route: str, payload: Dict[str, Any], context: str) -> Any:
        response = await self._send("POST", route, payload)
        if response.is_error:
            raise JudgmentAPIError.from_response(response, context)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise JudgmentAPIError(
                f"{context}: invalid JSON in response",
                status_code=response.status_code,
            ) from exc

    def _run_body(self, ref: RunRef) -> Dict[str, Any]:
        return {
            "eval_name": ref.eval_name,
            "project_name": ref.project_name,
            "judgment_api_key": self.config.api_key,
        }

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    async def execute_api_eval(self, run: EvaluationRun) -> List[ScoringResult]:
        """Score ``run`` with its API scorers and wait for the results.

        Results are aligned with ``run.examples``: by the embedded example's
        ``example_id`` when the server echoes it, else by position.

        Raises:
            JudgmentAPIError: On transport, HTTP, or response-shape errors.
        """
        api_scorers, _ = run.partition_scorers()
        payload = run.to_payload(scorers=api_scorers)
        body = await self._post(EVALUATE_ROUTE, payload, "An error occurred while executing the Judgment API request")

        if isinstance(body, dict):
            body = body.get("results")
        if not isinstance(body, list):
            raise JudgmentAPIError("Unexpected response from the evaluation endpoint: expected a list of results")
        if len(body) != len(run.examples):
            raise JudgmentAPIError(
                f"The evaluation endpoint returned {len(body)} results for {len(run.examples)} examples"
            )

        return _align_results(run.examples, body)

    async def send_to_queue(self, run: EvaluationRun) -> Optional[Dict[str, Any]]:
        """Enqueue ``run`` for asynchronous execution.

        Never raises: a failed submission is logged and ``None`` is returned,
        so callers on the fire-and-forget path are not interrupted.
        """
        try:
            ack = await self._post(
                ADD_TO_RUN_EVAL_QUEUE_ROUTE,
                run.to_payload(),
                "Error adding evaluation to queue",
            )
        except JudgmentAPIError:
            logger.error(
                "Failed to enqueue evaluation run %s/%s",
                run.project_name,
                run.eval_name,
                exc_info=True,
            )
            return None
        logger.info("Enqueued evaluation run %s/%s", run.project_name, run.eval_name)
        return ack if isinstance(ack, dict) else {}

    async def check_status(self, run: RunLike) -> EvalStatus:
        """Return the run's status; transient failures yield ``unknown``."""
        ref = _ref(run)
        try:
            response = await self._send("POST", CHECK_EVAL_STATUS_ROUTE, self._run_body(ref))
        except JudgmentAPIError as exc:
            logger.debug("Status check for %s failed: %s", ref.eval_name, exc)
            return EvalStatus.unknown(str(exc))

        if response.status_code == 404:
            return EvalStatus(status="not_found", message="Evaluation run not found")
        if response.is_error:
            logger.debug("Status check for %s returned HTTP %s", ref.eval_name, response.status_code)
            return EvalStatus.unknown(f"HTTP {response.status_code}")
        try:
            body = response.json()
        except ValueError:
            return EvalStatus.unknown("invalid JSON in status response")
        if not isinstance(body, dict):
            return EvalStatus.unknown()

        status = str(body.get("status") or "unknown").lower()
        if status == "completed":
            status = "complete"
        if status not in KNOWN_STATUSES:
            status = "unknown"
        return EvalStatus(
            status=status,
            progress=body.get("progress"),
            message=body.get("message"),
            error=body.get("error"),
        )

    async def poll_until_complete(
        self,
        run: RunLike,
        interval: float = 5.0,
        max_attempts: int = 120,
    ) -> List[ScoringResult]:
        """Poll until the run finishes, then fetch its results.

        Args:
            run: The run (or its name/project reference) to poll.
            interval: Seconds to sleep between attempts.
            max_attempts: Number of status checks before giving up.

        Returns:
            The run's results, or an empty list if ``max_attempts`` ran out.

        Raises:
            JudgmentAPIError: If the run failed or does not exist.
        """
        ref = _ref(run)
        for attempt in range(1, max_attempts + 1):
            status = await self.check_status(ref)
            logger.debug(
                "Evaluation %s status=%s progress=%s (attempt %d/%d)",
                ref.eval_name,
                status.status,
                status.progress,
                attempt,
                max_attempts,
            )
            if status.status == "complete":
                return await self.fetch_eval_results(ref.eval_name, ref.project_name)
            if status.status in ("failed", "not_found"):
                raise JudgmentAPIError(
                    f"Evaluation {ref.eval_name} {status.status.replace('_', ' ')}: "
                    f"{status.error or status.message or 'no details'}",
                    detail=status.error,
                )
            if attempt < max_attempts:
                await asyncio.sleep(interval)

        logger.warning(
            "Evaluation %s did not complete after %d attempts",
            ref.eval_name,
            max_attempts,
        )
        return []

    async def fetch_eval_results(self, eval_name: str, project_name: str) -> List[ScoringResult]:
        body = await self._post(
            FETCH_EVAL_RESULTS_ROUTE,
            self._run_body(RunRef(eval_name, project_name)),
            "Error fetching eval results",
        )
        if isinstance(body, dict):
            body = body.get("results") or body.get("examples") or []
        results = []
        for entry in body or []:
            data = entry.get("result", entry) if isinstance(entry, dict) else None
            if not isinstance(data, dict):
                raise JudgmentAPIError(f"Unexpected result entry from the fetch endpoint: {entry!r}")
            if not isinstance(data.get("data_object") or {}, dict):
                raise JudgmentAPIError(
                    f"Unexpected data_object from the fetch endpoint: {data.get('data_object')!r}"
                )
            _check_scorers_data(data.get("scorers_data"))
            try:
                results.append(ScoringResult.from_dict(data))
            except (TypeError, ValueError) as exc:
                raise JudgmentAPIError(f"Unexpected result entry from the fetch endpoint: {exc}") from exc
        return results

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def check_eval_run_name_exists(self, eval_name: str, project_name: str) -> None:
        """Raise :class:`NameCollisionError` if the run name is already taken."""
        response = await self._send(
            "POST",
            EVAL_RUN_NAME_EXISTS_ROUTE,
            self._run_body(RunRef(eval_name, project_name)),
        )
        if response.status_code == 409:
            raise NameCollisionError(
                f"Eval run name '{eval_name}' already exists for project '{project_name}'. "
                "Please choose a different name or set override=True.",
                status_code=409,
            )
        if response.is_error:
            raise JudgmentAPIError.from_response(response, "Error checking eval run name")

    async def log_evaluation_results(
        self,
        results: Sequence[ScoringResult],
        run: EvaluationRun,
    ) -> Optional[str]:
        """Persist ``results`` and return the results-viewing URL, if provided."""
        body = await self._post(
            LOG_EVAL_RESULTS_ROUTE,
            {
                "results": [result.to_dict() for result in results],
                "project_name": run.project_name,
                "eval_name": run.eval_name,
            },
            "Error saving evaluation results to DB",
        )
        url = body.get("ui_results_url") if isinstance(body, dict) else None
        logger.info(
            "Logged %d results for %s/%s", len(results), run.project_name, run.eval_name
        )
        return url

    async def delete_eval(self, project_name: str, eval_names: Sequence[str]) -> bool:
        await self._post(
            DELETE_EVAL_RESULTS_ROUTE,
            {"project_name": project_name, "eval_names": list(eval_names)},
            "Error deleting eval results",
        )
        return True

    async def delete_project_evals(self, project_name: str) -> bool:
        await self._post(
            DELETE_PROJECT_EVALS_ROUTE,
            {"project_name": project_name},
            "Error deleting project evals",
        )
        return True

    async def create_project(self, project_name: str) -> bool:
        await self._post(PROJECT_CREATE_ROUTE, {"project_name": project_name}, "Error creating project")
        return True

    async def delete_project(self, project_name: str) -> bool:
        await self._post(PROJECT_DELETE_ROUTE, {"project_name": project_name}, "Error deleting project")
        return True


def _align_results(examples: Sequence[Example], entries: Sequence[Any]) -> List[ScoringResult]:
    by_id: Dict[str, Dict[str, Any]] = {}
    for entry in entries:
        if not isinstance(entry, dict):
            raise JudgmentAPIError(f"Unexpected result entry from the evaluation endpoint: {entry!r}")
        embedded = entry.get("example") or entry.get("data_object") or {}
        if isinstance(embedded, dict) and embedded.get("example_id"):
            by_id[embedded["example_id"]] = entry

    use_ids = len(by_id) == len(examples) and all(ex.example_id in by_id for ex in examples)

    results = []
    for index, example in enumerate(examples):
        entry = by_id[example.example_id] if use_ids else entries[index]
        raw_scorers_data = entry.get("scorers_data")
        _check_scorers_data(raw_scorers_data)
        results.append(
            ScoringResult(
                data_object=example,
                scorers_data=[ScorerData.from_dict(s) for s in raw_scorers_data or []],
                error=entry.get("error"),
            )
        )
    return results


def _check_scorers_data(raw: Any) -> None:
    if raw is None:
        return
    if not isinstance(raw, list) or not all(isinstance(item, dict) for item in raw):
        raise JudgmentAPIError(f"Unexpected scorers_data in evaluation results: {raw!r}")
