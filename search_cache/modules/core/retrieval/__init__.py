"""
Retrieval Module - 캐시 및 병렬 검색 모듈

주요 구성:
- interfaces: ResultItem, SearchTask, ISearchBackend
- cache: TTLLRUCache, EmbeddingCache, ResultCache, CacheFactory
- parallel_search: 작업별 실패를 격리하는 병렬 검색
- backends: InMemorySearchBackend (numpy 코사인 유사도)
- orchestrator: Facade 패턴으로 전체 조율

사용 예시:
    from search_cache.modules.core.retrieval import create_search_orchestrator

    orchestrator = create_search_orchestrator(config, embedding_provider, search_backend)
    response = await orchestrator.search("agent-123", "condo price in manila", top_k=3)
    response.source  # SearchSource.NO_CACHE → 두 번째 호출부터 RESULT_CACHE
"""

from .backends import InMemorySearchBackend
from .cache import CacheEntry, CacheFactory, EmbeddingCache, ResultCache, TTLLRUCache
from .interfaces import ISearchBackend, ResultItem, SearchFn, SearchTask
from .orchestrator import (
    SearchOrchestrator,
    SearchResponse,
    SearchSource,
    create_search_orchestrator,
)
from .parallel_search import ParallelEmbeddingSearch, SearchOutcome

__all__ = [
    # 인터페이스
    "ISearchBackend",
    "SearchFn",
    # 데이터 모델
    "ResultItem",
    "SearchTask",
    "SearchOutcome",
    # 캐시
    "TTLLRUCache",
    "CacheEntry",
    "EmbeddingCache",
    "ResultCache",
    "CacheFactory",
    # 검색
    "ParallelEmbeddingSearch",
    "InMemorySearchBackend",
    # Orchestrator (Facade)
    "SearchOrchestrator",
    "SearchResponse",
    "SearchSource",
    "create_search_orchestrator",
]
