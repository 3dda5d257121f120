"""
Search Orchestrator - 캐시 계층을 거치는 검색 워크플로우 Facade

## 처리 순서
```
query ─► SmartQueryFilter ──(필러)──────────────► 기본 응답 (filtered)
            │
            ▼
         ResultCache ──(히트)───────────────────► 캐시된 결과 (result-cache)
            │
            ▼
         EmbeddingCache ──(히트)──► 검색 ──────► 결과 (embedding-cache)
            │
            ▼
         BatchEmbeddingProcessor ─► 검색 ──────► 결과 (no-cache)
            │ (프로바이더 실패)
            ▼
         기본 응답 + 빈 결과 (degraded)
```

임베딩 프로바이더는 결과 캐시와 임베딩 캐시가 모두 미스일 때만 호출됩니다.
검색 실패 결과는 결과 캐시에 저장하지 않습니다.

## 구성
모든 협력 객체(캐시, 배치 처리기, 병렬 검색)는 생성 시 한 번 만들어 주입합니다.
모듈 수준 전역 캐시는 두지 않습니다.
"""

import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ....config.schemas import SearchCacheConfig
from ....lib.errors import EmbeddingError, ErrorCode, SearchError
from ....lib.logger import get_logger
from ....lib.query_utils import QueryNormalizer
from ....lib.types import OrchestratorStatsDict, Vector
from ..embedding.batch_processor import BatchEmbeddingProcessor
from ..embedding.interfaces import EmbedFn, IEmbeddingProvider
from ..routing.query_filter import SmartQueryFilter
from .cache.embedding_cache import EmbeddingCache
from .cache.factory import CacheFactory
from .cache.result_cache import ResultCache
from .interfaces import ISearchBackend, ResultItem, SearchTask
from .parallel_search import ParallelEmbeddingSearch, SearchOutcome

logger = get_logger(__name__)

BackendSearchFn = Callable[[str, Vector, int], Awaitable[list[ResultItem]]]


class SearchSource(str, Enum):
    """응답 출처"""

    FILTERED = "filtered"
    RESULT_CACHE = "result-cache"
    EMBEDDING_CACHE = "embedding-cache"
    NO_CACHE = "no-cache"
    DEGRADED = "degraded"


@dataclass
class SearchResponse:
    """
    검색 응답

    Attributes:
        results: 순위가 매겨진 결과 (필터링/장애 시 [])
        source: 응답 출처
        default_response: 필터링/장애 시 사용자에게 보낼 기본 응답
        error: 흡수된 내부 오류 (프로바이더/검색 실패 시)
    """

    results: list[Any] = field(default_factory=list)
    source: SearchSource = SearchSource.NO_CACHE
    default_response: str | None = None
    error: BaseException | None = None

    @property
    def skipped_search(self) -> bool:
        return self.source in (SearchSource.FILTERED, SearchSource.DEGRADED)


class SearchOrchestrator:
    """
    검색 워크플로우를 조율하는 Facade 클래스

    역할:
    1. 쿼리 필터, 결과 캐시, 임베딩 캐시, 배치 임베딩, 병렬 검색을 하나의 인터페이스로 통합
    2. 프로바이더 장애 시 기본 응답으로 강등 (예외를 사용자에게 노출하지 않음)
    3. 통계 수집
    """

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider | EmbedFn,
        search_backend: ISearchBackend | BackendSearchFn,
        query_filter: SmartQueryFilter | None = None,
        embedding_cache: EmbeddingCache | None = None,
        result_cache: ResultCache | None = None,
        batch_processor: BatchEmbeddingProcessor | None = None,
        parallel_search: ParallelEmbeddingSearch | None = None,
        default_top_k: int = 5,
    ):
        """
        Args:
            embedding_provider: 임베딩 프로바이더 (IEmbeddingProvider 또는 async 함수)
            search_backend: 검색 백엔드 (ISearchBackend 또는 async 함수)
            query_filter: 쿼리 필터 (None이면 기본 필터)
            embedding_cache: 임베딩 캐시 (None이면 기본 설정으로 생성)
            result_cache: 결과 캐시 (None이면 기본 설정으로 생성)
            batch_processor: 배치 임베딩 처리기
            parallel_search: 병렬 검색 코디네이터
            default_top_k: top_k 미지정 시 기본값
        """
        if embedding_provider is None:
            raise EmbeddingError(ErrorCode.EMBEDDING_001)

        self.embedding_provider = embedding_provider
        self.search_backend = search_backend
        self.query_filter = query_filter if query_filter is not None else SmartQueryFilter()
        self.embedding_cache = (
            embedding_cache if embedding_cache is not None else EmbeddingCache()
        )
        self.result_cache = result_cache if result_cache is not None else ResultCache()
        self.batch_processor = (
            batch_processor if batch_processor is not None else BatchEmbeddingProcessor()
        )
        self.parallel_search = (
            parallel_search if parallel_search is not None else ParallelEmbeddingSearch()
        )
        self.default_top_k = default_top_k

        self._stats: dict[str, int] = {
            "total_requests": 0,
            "filtered": 0,
            "result_cache_hits": 0,
            "embedding_cache_hits": 0,
            "provider_calls": 0,
            "degraded": 0,
            "search_failures": 0,
        }

        logger.info(
            f"🔍 SearchOrchestrator 초기화: "
            f"embedding_cache={self.embedding_cache.max_size}, "
            f"result_cache={self.result_cache.max_size}, "
            f"max_batch_size={self.batch_processor.max_batch_size}"
        )

    # ========================================
    # 내부 헬퍼
    # ========================================

    def _validate(self, tenant_id: str, query: str, top_k: int) -> None:
        if not isinstance(tenant_id, str) or not tenant_id:
            raise SearchError(ErrorCode.SEARCH_003, reason="tenant_id가 비어있습니다")
        if not isinstance(query, str):
            raise SearchError(ErrorCode.SEARCH_003, reason="query는 문자열이어야 합니다")
        if isinstance(top_k, bool) or not isinstance(top_k, int) or top_k <= 0:
            raise SearchError(ErrorCode.SEARCH_003, reason=f"top_k must be positive, got {top_k!r}")

    async def _backend_search(self, tenant_id: str, embedding: Vector, top_k: int) -> list[Any]:
        search = getattr(self.search_backend, "search", None)
        if callable(search):
            return await search(tenant_id, embedding, top_k)  # type: ignore[no-any-return]
        return await self.search_backend(tenant_id, embedding, top_k)  # type: ignore[operator]

    def _filtered_response(self, query: str) -> SearchResponse:
        self._stats["filtered"] += 1
        return SearchResponse(
            results=[],
            source=SearchSource.FILTERED,
            default_response=self.query_filter.get_default_response(query),
        )

    def _degraded_response(self, query: str, error: BaseException) -> SearchResponse:
        self._stats["degraded"] += 1
        return SearchResponse(
            results=[],
            source=SearchSource.DEGRADED,
            default_response=self.query_filter.get_default_response(query),
            error=error,
        )

    async def _lookup_result_cache(
        self, tenant_id: str, query: str, top_k: int
    ) -> SearchResponse | None:
        cached = await self.result_cache.get(tenant_id, query, top_k=top_k)
        if cached is None:
            return None
        self._stats["result_cache_hits"] += 1
        return SearchResponse(results=cached[:top_k], source=SearchSource.RESULT_CACHE)

    async def _embed_missing(self, queries: list[str]) -> dict[str, Vector]:
        """정규화 기준 중복을 제거한 쿼리를 한 번의 배치로 임베딩하고 캐시에 저장"""
        unique: dict[str, str] = {}
        for query in queries:
            unique.setdefault(QueryNormalizer.normalize(query), query)

        originals = list(unique.values())
        self._stats["provider_calls"] += self.batch_processor.expected_calls(
            len(originals), self.embedding_provider
        )
        vectors = await self.batch_processor.generate_batch(originals, self.embedding_provider)

        embedded: dict[str, Vector] = {}
        for key, vector in zip(unique.keys(), vectors, strict=True):
            await self.embedding_cache.set(key, vector)
            embedded[key] = vector
        return embedded

    async def _run_searches(
        self,
        tasks: list[SearchTask],
        vectors: dict[str, Vector],
    ) -> list[SearchOutcome]:
        """병렬 검색 실행 후 성공한 결과만 결과 캐시에 저장"""

        async def search_fn(tenant_id: str, query: str, top_k: int) -> list[Any]:
            embedding = vectors[QueryNormalizer.normalize(query)]
            return await self._backend_search(tenant_id, embedding, top_k)

        outcomes = await self.parallel_search.search_multiple_detailed(tasks, search_fn)
        for outcome in outcomes:
            if outcome.ok:
                await self.result_cache.set(
                    outcome.task.tenant_id,
                    outcome.task.query,
                    outcome.results,
                    top_k=outcome.task.top_k,
                )
            else:
                self._stats["search_failures"] += 1
        return outcomes

    # ========================================
    # 공개 API
    # ========================================

    async def search(
        self,
        tenant_id: str,
        query: str,
        top_k: int | None = None,
    ) -> SearchResponse:
        """
        단일 쿼리 검색

        Args:
            tenant_id: 테넌트(에이전트) 식별자
            query: 사용자 쿼리
            top_k: 반환할 최대 결과 수 (None이면 default_top_k)

        Returns:
            SearchResponse (프로바이더/검색 실패도 예외 없이 응답으로 반환)

        Raises:
            SearchError: 잘못된 요청 인자 (SEARCH-003)
        """
        top_k = self.default_top_k if top_k is None else top_k
        self._validate(tenant_id, query, top_k)
        self._stats["total_requests"] += 1
        start_time = time.perf_counter()

        # 1. 대화성 쿼리 필터
        if not self.query_filter.needs_embedding_search(query):
            return self._filtered_response(query)

        # 2. 결과 캐시
        cached = await self._lookup_result_cache(tenant_id, query, top_k)
        if cached is not None:
            return cached

        # 3. 임베딩 캐시
        key = QueryNormalizer.normalize(query)
        embedding = await self.embedding_cache.get(query)
        if embedding is not None:
            self._stats["embedding_cache_hits"] += 1
            source = SearchSource.EMBEDDING_CACHE
            vectors = {key: embedding}
        else:
            # 4. 프로바이더 호출 (이중 미스일 때만)
            source = SearchSource.NO_CACHE
            try:
                vectors = await self._embed_missing([query])
            except EmbeddingError as e:
                logger.warning(f"⚠️ 임베딩 실패 → 기본 응답으로 강등: tenant={tenant_id}, error={e}")
                return self._degraded_response(query, e)

        task = SearchTask(tenant_id=tenant_id, query=query, top_k=top_k)
        outcome = (await self._run_searches([task], vectors))[0]

        logger.debug(
            f"검색 완료: tenant={tenant_id}, source={source.value}, "
            f"results={len(outcome.results)}, "
            f"elapsed_ms={(time.perf_counter() - start_time) * 1000:.1f}"
        )
        return SearchResponse(results=outcome.results, source=source, error=outcome.error)

    async def search_many(
        self,
        tasks: Sequence[SearchTask],
    ) -> list[SearchResponse]:
        """
        여러 쿼리 일괄 검색

        캐시 미스 쿼리는 정규화 기준 중복을 제거해 한 번의 generate_batch로 임베딩하고,
        검색은 병렬로 실행합니다.

        Args:
            tasks: 검색 작업 리스트

        Returns:
            입력과 같은 길이/순서의 SearchResponse 리스트

        Raises:
            SearchError: 잘못된 요청 인자 (SEARCH-003)
        """
        for task in tasks:
            self._validate(task.tenant_id, task.query, task.top_k)

        responses: list[SearchResponse | None] = [None] * len(tasks)
        pending: list[int] = []

        for index, task in enumerate(tasks):
            self._stats["total_requests"] += 1
            if not self.query_filter.needs_embedding_search(task.query):
                responses[index] = self._filtered_response(task.query)
                continue
            cached = await self._lookup_result_cache(task.tenant_id, task.query, task.top_k)
            if cached is not None:
                responses[index] = cached
                continue
            pending.append(index)

        if not pending:
            return [response for response in responses if response is not None]

        vectors: dict[str, Vector] = {}
        sources: dict[int, SearchSource] = {}
        missing: list[int] = []
        for index in pending:
            key = QueryNormalizer.normalize(tasks[index].query)
            if key in vectors:
                sources[index] = SearchSource.EMBEDDING_CACHE
                self._stats["embedding_cache_hits"] += 1
                continue
            embedding = await self.embedding_cache.get(tasks[index].query)
            if embedding is not None:
                vectors[key] = embedding
                sources[index] = SearchSource.EMBEDDING_CACHE
                self._stats["embedding_cache_hits"] += 1
            else:
                missing.append(index)

        searchable = [index for index in pending if index not in missing]
        if missing:
            try:
                vectors.update(await self._embed_missing([tasks[i].query for i in missing]))
                for index in missing:
                    sources[index] = SearchSource.NO_CACHE
                searchable = pending
            except EmbeddingError as e:
                logger.warning(
                    f"⚠️ 배치 임베딩 실패 → {len(missing)}개 쿼리 기본 응답으로 강등: error={e}"
                )
                for index in missing:
                    responses[index] = self._degraded_response(tasks[index].query, e)

        if searchable:
            outcomes = await self._run_searches([tasks[i] for i in searchable], vectors)
            for index, outcome in zip(searchable, outcomes, strict=True):
                responses[index] = SearchResponse(
                    results=outcome.results, source=sources[index], error=outcome.error
                )

        return [response for response in responses if response is not None]

    async def invalidate_tenant(self, tenant_id: str) -> int:
        """
        테넌트 문서가 바뀌었을 때 결과 캐시 무효화

        Returns:
            삭제된 결과 캐시 엔트리 수
        """
        return await self.result_cache.invalidate_agent(tenant_id)

    def get_stats(self) -> OrchestratorStatsDict:
        """
        오케스트레이터 및 하위 컴포넌트 통계 반환
        """
        return {
            **self._stats,  # type: ignore[typeddict-item]
            "embedding_cache": self.embedding_cache.get_stats(),
            "result_cache": self.result_cache.get_stats(),
            "parallel_search": self.parallel_search.get_stats(),
            "config": {
                "default_top_k": self.default_top_k,
                "max_batch_size": self.batch_processor.max_batch_size,
                "query_filter_enabled": self.query_filter.enabled,
            },
        }


def create_search_orchestrator(
    config: SearchCacheConfig | None = None,
    embedding_provider: IEmbeddingProvider | EmbedFn | None = None,
    search_backend: ISearchBackend | BackendSearchFn | None = None,
    timer: Callable[[], float] = time.monotonic,
) -> SearchOrchestrator:
    """
    설정 기반 오케스트레이터 생성

    Args:
        config: 검증된 설정 (None이면 ConfigLoader로 로드)
        embedding_provider: 임베딩 프로바이더 (None이면 설정의 OpenAI 프로바이더)
        search_backend: 검색 백엔드 (None이면 InMemorySearchBackend)
        timer: 캐시 시각 함수 (테스트용)

    Returns:
        구성이 끝난 SearchOrchestrator
    """
    if config is None:
        from ....lib.config_loader import load_config

        config = load_config()

    if embedding_provider is None:
        from ..embedding.openai_provider import OpenAIEmbeddingProvider

        embedding_provider = OpenAIEmbeddingProvider.from_settings(
            config.embeddings, max_batch_size=config.batch.max_batch_size
        )

    if search_backend is None:
        from .backends.memory_backend import InMemorySearchBackend

        search_backend = InMemorySearchBackend()

    return SearchOrchestrator(
        embedding_provider=embedding_provider,
        search_backend=search_backend,
        query_filter=SmartQueryFilter(
            enabled=config.query_filter.enabled,
            extra_phrases=config.query_filter.extra_phrases,
        ),
        embedding_cache=CacheFactory.create_embedding_cache(config.embedding_cache, timer=timer),
        result_cache=CacheFactory.create_result_cache(config.result_cache, timer=timer),
        batch_processor=BatchEmbeddingProcessor(
            max_batch_size=config.batch.max_batch_size,
            max_concurrent_batches=config.batch.max_concurrent_batches,
        ),
        parallel_search=ParallelEmbeddingSearch(
            task_timeout_seconds=config.parallel_search.task_timeout_seconds,
            max_concurrency=config.parallel_search.max_concurrency,
        ),
        default_top_k=config.search.default_top_k,
    )
