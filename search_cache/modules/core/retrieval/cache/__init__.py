"""
Cache Module - 임베딩/검색 결과 캐싱 모듈

구현체:
- TTLLRUCache: 제네릭 LRU+TTL 저장소
- EmbeddingCache: 쿼리 → 임베딩 벡터
- ResultCache: (테넌트, 쿼리) → 검색 결과

팩토리:
- CacheFactory: 설정 기반 캐시 생성 팩토리
"""

from .embedding_cache import EmbeddingCache
from .factory import SUPPORTED_CACHES, CacheFactory
from .result_cache import ResultCache
from .ttl_lru_cache import CacheEntry, TTLLRUCache

__all__ = [
    # 팩토리
    "CacheFactory",
    "SUPPORTED_CACHES",
    # 구현체
    "TTLLRUCache",
    "CacheEntry",
    "EmbeddingCache",
    "ResultCache",
]
