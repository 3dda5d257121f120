"""
Modules package initialization

이 패키지는 검색 캐시 레이어의 핵심 모듈을 포함합니다:
- core: 쿼리 필터, 임베딩, 캐시, 병렬 검색, 오케스트레이터
"""

from .core import (
    BatchEmbeddingProcessor,
    EmbeddingCache,
    ParallelEmbeddingSearch,
    ResultCache,
    SearchOrchestrator,
    SmartQueryFilter,
)

__all__ = [
    "SmartQueryFilter",
    "EmbeddingCache",
    "ResultCache",
    "BatchEmbeddingProcessor",
    "ParallelEmbeddingSearch",
    "SearchOrchestrator",
]
