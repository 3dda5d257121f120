"""
타입 정의 파일
공통으로 사용되는 TypedDict 및 타입 정의
"""

from typing import Any, TypedDict

# 임베딩 벡터 (모델별 포맷은 다루지 않음, float 리스트로 통일)
Vector = list[float]


class CacheStatsDict(TypedDict):
    """캐시 통계 딕셔너리 타입"""

    hits: int
    misses: int
    hit_rate: float
    size: int
    max_size: int
    sets: int
    evictions: int
    expirations: int
    invalidations: int


class ParallelSearchStatsDict(TypedDict, total=False):
    """병렬 검색 통계 딕셔너리 타입"""

    total_batches: int
    total_tasks: int
    failed_tasks: int
    timed_out_tasks: int


class OrchestratorStatsDict(TypedDict, total=False):
    """오케스트레이터 통계 딕셔너리 타입"""

    total_requests: int
    filtered: int
    result_cache_hits: int
    embedding_cache_hits: int
    provider_calls: int
    degraded: int
    search_failures: int
    embedding_cache: CacheStatsDict
    result_cache: CacheStatsDict
    parallel_search: ParallelSearchStatsDict
    config: dict[str, Any]
