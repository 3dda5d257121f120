"""
Parallel Embedding Search
여러 검색 작업을 동시에 실행하고 입력 순서대로 결과를 모으는 코디네이터

특징:
- asyncio.gather(return_exceptions=True)로 모든 작업을 동시에 실행
- 작업별 타임아웃 (asyncio.wait_for)
- 작업별 격리: 실패/타임아웃 작업은 []로 대체, 전체 호출은 실패하지 않음
- 흡수한 실패는 모두 구조화 로그로 기록
- search_multiple_detailed로 작업별 실패 원인 조회 가능
"""

import asyncio
import inspect
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ....lib.errors import ErrorCode, SearchError
from ....lib.logger import get_logger
from ....lib.types import ParallelSearchStatsDict
from .interfaces import SearchFn, SearchTask

logger = get_logger(__name__)


@dataclass
class SearchOutcome:
    """
    작업별 검색 결과

    Attributes:
        task: 원본 검색 작업
        results: 검색 결과 (실패 시 [])
        error: 실패 원인 (성공 시 None, 타임아웃은 SearchError(SEARCH-002))
        duration_ms: 작업 소요 시간
    """

    task: SearchTask
    results: list[Any]
    error: BaseException | None = None
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def timed_out(self) -> bool:
        return (
            isinstance(self.error, SearchError)
            and self.error.error_code == ErrorCode.SEARCH_002.value
        )


def _coerce_task(task: SearchTask | Mapping[str, Any]) -> SearchTask:
    """dict 형태의 작업도 허용 (tenant_id/agent_id, query, top_k)"""
    if isinstance(task, SearchTask):
        return task
    if isinstance(task, Mapping):
        tenant_id = task.get("tenant_id", task.get("agent_id"))
        if tenant_id is None or "query" not in task:
            raise SearchError(ErrorCode.SEARCH_003, reason=f"tenant_id/query 누락: {dict(task)}")
        return SearchTask(
            tenant_id=str(tenant_id),
            query=task["query"],
            top_k=int(task.get("top_k", 5)),
        )
    raise SearchError(ErrorCode.SEARCH_003, reason=f"지원하지 않는 작업 타입: {type(task).__name__}")


class ParallelEmbeddingSearch:
    """
    병렬 검색 코디네이터

    사용 예시:
        parallel = ParallelEmbeddingSearch(task_timeout_seconds=5.0)
        results = await parallel.search_multiple(
            [SearchTask("agent-1", "condo price", 3), SearchTask("agent-2", "amenities", 5)],
            backend_search,
        )
        # results[i]는 i번째 작업 결과 (실패 시 [])
    """

    def __init__(
        self,
        task_timeout_seconds: float | None = 10.0,
        max_concurrency: int | None = None,
    ):
        """
        Args:
            task_timeout_seconds: 작업별 타임아웃 (초, None이면 비활성화)
            max_concurrency: 동시 실행 작업 수 제한 (None이면 무제한)

        Raises:
            ValueError: 타임아웃이 0 이하이거나 max_concurrency가 양의 정수가 아닌 경우
        """
        if task_timeout_seconds is not None and task_timeout_seconds <= 0:
            raise ValueError(f"task_timeout_seconds must be positive, got {task_timeout_seconds!r}")
        if max_concurrency is not None and (
            isinstance(max_concurrency, bool)
            or not isinstance(max_concurrency, int)
            or max_concurrency <= 0
        ):
            raise ValueError(f"max_concurrency must be a positive integer, got {max_concurrency!r}")

        self.task_timeout_seconds = task_timeout_seconds
        self.max_concurrency = max_concurrency

        self._stats: dict[str, int] = {
            "total_batches": 0,
            "total_tasks": 0,
            "failed_tasks": 0,
            "timed_out_tasks": 0,
        }

    async def search_multiple(
        self,
        tasks: Sequence[SearchTask | Mapping[str, Any]],
        search_fn: SearchFn,
    ) -> list[list[Any]]:
        """
        여러 검색을 동시에 실행

        Args:
            tasks: 검색 작업 리스트
            search_fn: (tenant_id, query, top_k) -> 결과 리스트 (동기/비동기)

        Returns:
            입력과 같은 길이/순서의 결과 리스트 (실패 작업은 [])
        """
        outcomes = await self.search_multiple_detailed(tasks, search_fn)
        return [outcome.results for outcome in outcomes]

    async def search_multiple_detailed(
        self,
        tasks: Sequence[SearchTask | Mapping[str, Any]],
        search_fn: SearchFn,
    ) -> list[SearchOutcome]:
        """
        여러 검색을 동시에 실행하고 작업별 실패 원인까지 반환

        Args:
            tasks: 검색 작업 리스트
            search_fn: (tenant_id, query, top_k) -> 결과 리스트 (동기/비동기)

        Returns:
            입력과 같은 길이/순서의 SearchOutcome 리스트

        Raises:
            SearchError: 작업 형식이 잘못된 경우 (SEARCH-003, 실행 전 검증)
        """
        search_tasks = [_coerce_task(task) for task in tasks]
        if not search_tasks:
            return []

        self._stats["total_batches"] += 1
        self._stats["total_tasks"] += len(search_tasks)

        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

        logger.debug(
            f"⚡ 병렬 검색 시작: {len(search_tasks)}개 작업 "
            f"(timeout={self.task_timeout_seconds}, max_concurrency={self.max_concurrency})"
        )

        # 병렬 실행 (예외 발생해도 다른 작업은 계속 실행)
        results = await asyncio.gather(
            *[self._run_task(task, search_fn, semaphore) for task in search_tasks],
            return_exceptions=True,
        )

        outcomes: list[SearchOutcome] = []
        for index, (task, result) in enumerate(zip(search_tasks, results, strict=True)):
            if isinstance(result, SearchOutcome):
                outcome = result
            elif isinstance(result, Exception):
                outcome = SearchOutcome(task=task, results=[], error=result)
            else:
                # KeyboardInterrupt 등 Exception 이외의 예외는 흡수하지 않음
                raise result

            if not outcome.ok:
                self._record_failure(index, outcome)
            outcomes.append(outcome)

        failed = sum(1 for outcome in outcomes if not outcome.ok)
        logger.debug(f"✅ 병렬 검색 완료: {len(outcomes)}개 (실패: {failed})")
        return outcomes

    async def _run_task(
        self,
        task: SearchTask,
        search_fn: SearchFn,
        semaphore: asyncio.Semaphore | None,
    ) -> SearchOutcome:
        if semaphore is None:
            return await self._execute_single(task, search_fn)
        async with semaphore:
            return await self._execute_single(task, search_fn)

    async def _execute_single(self, task: SearchTask, search_fn: SearchFn) -> SearchOutcome:
        """단일 작업 실행 (타임아웃 적용, 예외는 SearchOutcome으로 변환)"""
        start_time = time.perf_counter()
        try:
            if self.task_timeout_seconds is None:
                results = await self._call(search_fn, task)
            else:
                results = await asyncio.wait_for(
                    self._call(search_fn, task), timeout=self.task_timeout_seconds
                )
        except TimeoutError:
            return SearchOutcome(
                task=task,
                results=[],
                error=SearchError(ErrorCode.SEARCH_002, timeout=self.task_timeout_seconds),
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )
        except Exception as e:
            return SearchOutcome(
                task=task,
                results=[],
                error=e,
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )

        return SearchOutcome(
            task=task,
            results=list(results) if results is not None else [],
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )

    @staticmethod
    async def _call(search_fn: SearchFn, task: SearchTask) -> Any:
        """동기 함수는 스레드에서 실행해 다른 작업을 막지 않음"""
        if inspect.iscoroutinefunction(search_fn):
            return await search_fn(task.tenant_id, task.query, task.top_k)

        result = await asyncio.to_thread(search_fn, task.tenant_id, task.query, task.top_k)
        if inspect.isawaitable(result):
            return await result
        return result

    def _record_failure(self, index: int, outcome: SearchOutcome) -> None:
        self._stats["failed_tasks"] += 1
        if outcome.timed_out:
            self._stats["timed_out_tasks"] += 1

        logger.warning(
            f"⚠️ 검색 작업 실패 → [] 대체: index={index}, tenant={outcome.task.tenant_id}, "
            f"error_type={type(outcome.error).__name__}, error={outcome.error}"
        )

    def get_stats(self) -> ParallelSearchStatsDict:
        """병렬 검색 통계 반환"""
        return {
            "total_batches": self._stats["total_batches"],
            "total_tasks": self._stats["total_tasks"],
            "failed_tasks": self._stats["failed_tasks"],
            "timed_out_tasks": self._stats["timed_out_tasks"],
        }
