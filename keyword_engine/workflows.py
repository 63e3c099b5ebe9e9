"""Batch workflows that fan analyzer calls out over many keywords."""

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Sequence

from keyword_engine.models.base import SerializableMixin
from keyword_engine.models.clustering import ClusteringOptions
from keyword_engine.models.trend import TrendOptions
from keyword_engine.modules.keyword_research.clustering import cluster_keywords
from keyword_engine.modules.keyword_research.difficulty_analyzer import analyze_difficulty
from keyword_engine.modules.keyword_research.trend_analyzer import analyze_trend
from keyword_engine.modules.serp_analysis.serp_analyzer import analyze_serp_data

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchItemResult(SerializableMixin):
    """Outcome of one item in a batch: the analyzer result or the error text."""

    key: str
    status: str  # "success" | "error"
    result: Any = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "success"


@dataclass(frozen=True)
class _Job:
    key: str
    func: Callable[..., Any]
    args: tuple
    kwargs: dict


class BatchAnalyzer:
    """Run analyzers over many inputs concurrently.

    Each item runs in a worker thread, at most ``concurrency`` at a time.
    A failing item is recorded as an error result so that one bad input
    does not abort the whole batch. Results keep input order.

    Usage::

        batch = BatchAnalyzer(concurrency=4)
        results = await batch.analyze_difficulty_batch([
            {"keyword": "seo tools", "search_volume": 12000},
        ])
    """

    def __init__(
        self,
        concurrency: int = 4,
        clustering_options: Optional[ClusteringOptions] = None,
        trend_options: Optional[TrendOptions] = None,
    ) -> None:
        if isinstance(concurrency, bool) or not isinstance(concurrency, int) or concurrency < 1:
            raise ValueError("concurrency must be a positive integer, got " + repr(concurrency))
        self.concurrency = concurrency
        self.clustering_options = clustering_options or ClusteringOptions()
        self.trend_options = trend_options or TrendOptions()
        self._batch_status: dict[str, Any] = {}
        logger.info("BatchAnalyzer initialized (concurrency=%d).", concurrency)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def _record_status(self, batch: str, total: int, done: int, failed: int, status: str) -> None:
        self._batch_status[batch] = {
            "total": total,
            "completed": done,
            "failed": failed,
            "status": status,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

    def get_batch_status(self) -> dict[str, Any]:
        """Return status of every batch that has been run."""
        return dict(self._batch_status)

    # ------------------------------------------------------------------
    # Core runner
    # ------------------------------------------------------------------

    async def _run(self, batch: str, jobs: Sequence[_Job]) -> list[BatchItemResult]:
        semaphore = asyncio.Semaphore(self.concurrency)
        started = time.time()
        self._record_status(batch, len(jobs), 0, 0, "running")
        logger.info("[%s] Starting %d job(s)", batch, len(jobs))

        async def _bounded(job: _Job) -> Any:
            async with semaphore:
                return await asyncio.to_thread(job.func, *job.args, **job.kwargs)

        outcomes = await asyncio.gather(
            *(_bounded(job) for job in jobs), return_exceptions=True,
        )

        results: list[BatchItemResult] = []
        failed = 0
        for job, outcome in zip(jobs, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    # Cancellation and interpreter exits are not item failures
                    raise outcome
                failed += 1
                logger.error("[%s] %r failed: %s", batch, job.key, outcome)
                results.append(BatchItemResult(
                    key=job.key,
                    status="error",
                    error=str(outcome),
                    error_type=type(outcome).__name__,
                ))
            else:
                results.append(BatchItemResult(key=job.key, status="success", result=outcome))

        elapsed = time.time() - started
        self._record_status(
            batch, len(jobs), len(jobs) - failed, failed,
            "error" if failed == len(jobs) and jobs else "done",
        )
        logger.info(
            "[%s] Finished %d job(s) in %.2fs (%d failed)", batch, len(jobs), elapsed, failed,
        )
        return results

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------

    async def analyze_difficulty_batch(
        self, requests: Sequence[Mapping[str, Any]],
    ) -> list[BatchItemResult]:
        """Score difficulty for many keywords.

        Args:
            requests: Dicts with ``keyword`` and ``search_volume`` plus optional
                ``competitors``, ``serp_data`` and ``location``.
        """
        jobs = []
        for index, request in enumerate(requests):
            key = "#" + str(index)
            if isinstance(request, Mapping):
                key = str(request.get("keyword", key))
            jobs.append(_Job(key, _difficulty_from_request, (request,), {}))
        return await self._run("difficulty", jobs)

    async def analyze_trend_batch(
        self, series_by_keyword: Mapping[str, Sequence[Any]],
    ) -> list[BatchItemResult]:
        """Analyze the trend of each keyword's series with the batch's options."""
        jobs = [
            _Job(keyword, analyze_trend, (keyword, list(series), self.trend_options), {})
            for keyword, series in series_by_keyword.items()
        ]
        return await self._run("trend", jobs)

    async def analyze_serp_batch(self, snapshots: Sequence[Any]) -> list[BatchItemResult]:
        """Analyze many SERP snapshots (:class:`SerpAnalysisData` or dicts)."""
        jobs = []
        for index, snapshot in enumerate(snapshots):
            if isinstance(snapshot, Mapping):
                key = str(snapshot.get("keyword", "#" + str(index)))
            else:
                key = str(getattr(snapshot, "keyword", "#" + str(index)))
            jobs.append(_Job(key, analyze_serp_data, (snapshot,), {}))
        return await self._run("serp", jobs)

    async def cluster_keyword_sets(
        self, keyword_sets: Mapping[str, Sequence[Any]],
    ) -> list[BatchItemResult]:
        """Cluster several independent keyword lists, e.g. one per site section."""
        jobs = [
            _Job(name, cluster_keywords, (list(keywords), self.clustering_options), {})
            for name, keywords in keyword_sets.items()
        ]
        return await self._run("clustering", jobs)


def _difficulty_from_request(request: Mapping[str, Any]):
    if not isinstance(request, Mapping):
        raise TypeError("difficulty request must be a dict, got " + type(request).__name__)
    return analyze_difficulty(
        request["keyword"],
        request.get("search_volume", request.get("searchVolume", 0)),
        request.get("competitors") or [],
        serp_data=request.get("serp_data", request.get("serpData")),
        location=request.get("location", "US"),
    )
