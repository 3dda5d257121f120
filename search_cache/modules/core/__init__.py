"""
Core modules - 검색 캐시 레이어 핵심 모듈

- routing: 대화성 쿼리 필터 (SmartQueryFilter)
- embedding: 배치 임베딩 처리기 및 프로바이더
- retrieval: 캐시, 병렬 검색, 오케스트레이터, 검색 백엔드
"""

from .embedding import BatchEmbeddingProcessor, IEmbeddingProvider, OpenAIEmbeddingProvider
from .retrieval import (
    CacheFactory,
    EmbeddingCache,
    InMemorySearchBackend,
    ISearchBackend,
    ParallelEmbeddingSearch,
    ResultCache,
    ResultItem,
    SearchOrchestrator,
    SearchOutcome,
    SearchResponse,
    SearchSource,
    SearchTask,
    TTLLRUCache,
    create_search_orchestrator,
)
from .routing import SmartQueryFilter

__all__ = [
    # Routing
    "SmartQueryFilter",
    # Embedding
    "IEmbeddingProvider",
    "BatchEmbeddingProcessor",
    "OpenAIEmbeddingProvider",
    # Cache
    "TTLLRUCache",
    "EmbeddingCache",
    "ResultCache",
    "CacheFactory",
    # Retrieval
    "ISearchBackend",
    "ResultItem",
    "SearchTask",
    "SearchOutcome",
    "ParallelEmbeddingSearch",
    "InMemorySearchBackend",
    # Orchestrator
    "SearchOrchestrator",
    "SearchResponse",
    "SearchSource",
    "create_search_orchestrator",
]
