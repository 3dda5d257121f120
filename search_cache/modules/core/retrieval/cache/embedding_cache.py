"""
Embedding Cache
쿼리 텍스트 → 임베딩 벡터 LRU+TTL 캐시

같은 질문이 반복될 때 임베딩 프로바이더 호출을 생략하기 위한 캐시입니다.
키는 정규화된 쿼리이므로 대소문자/공백만 다른 질문은 같은 엔트리를 공유합니다.
"""

import time
from collections.abc import Callable, Iterable

from .....lib.logger import get_logger
from .....lib.query_utils import QueryNormalizer
from .....lib.types import CacheStatsDict, Vector
from .ttl_lru_cache import TTLLRUCache

logger = get_logger(__name__)


class EmbeddingCache:
    """
    임베딩 캐시

    특징:
    - 정규화된 쿼리 키
    - 저장/조회 시 벡터 복사본 사용 (호출 측 변경이 캐시에 전파되지 않음)
    - 히트/미스 통계
    """

    def __init__(
        self,
        max_size: int = 1000,
        ttl_ms: int | None = 3_600_000,
        timer: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            max_size: 최대 엔트리 수
            ttl_ms: 엔트리 유효 시간 (밀리초, 기본 1시간)
            timer: 시각 함수 (테스트용)

        Raises:
            ValueError: max_size가 양의 정수가 아닌 경우
        """
        self._cache: TTLLRUCache[str, Vector] = TTLLRUCache(
            max_size=max_size, ttl_ms=ttl_ms, timer=timer, name="embedding"
        )
        logger.info(f"EmbeddingCache 초기화: max_size={max_size}, ttl_ms={ttl_ms}")

    @property
    def max_size(self) -> int:
        return self._cache.max_size

    @staticmethod
    def make_key(query: str) -> str:
        """캐시 키 (정규화된 쿼리)"""
        return QueryNormalizer.normalize(query)

    async def get(self, query: str) -> Vector | None:
        """
        쿼리 임베딩 조회

        Args:
            query: 원본 쿼리

        Returns:
            임베딩 벡터 (없거나 만료되면 None)
        """
        vector = self._cache.get(self.make_key(query))
        if vector is None:
            return None
        logger.debug(f"임베딩 캐시 히트: {query[:30]}")
        return list(vector)

    async def set(self, query: str, embedding: Vector, ttl_ms: int | None = None) -> None:
        """
        쿼리 임베딩 저장 (기존 키는 값과 TTL 갱신)

        Args:
            query: 원본 쿼리
            embedding: 임베딩 벡터
            ttl_ms: 엔트리별 TTL (None이면 기본값)
        """
        self._cache.set(self.make_key(query), [float(x) for x in embedding], ttl_ms=ttl_ms)

    async def get_many(self, queries: Iterable[str]) -> dict[str, Vector]:
        """
        여러 쿼리 임베딩 일괄 조회

        Args:
            queries: 원본 쿼리들

        Returns:
            {원본 쿼리: 벡터} (히트한 쿼리만 포함)
        """
        found: dict[str, Vector] = {}
        for query in queries:
            if query in found:
                continue
            vector = await self.get(query)
            if vector is not None:
                found[query] = vector
        return found

    async def set_many(self, items: dict[str, Vector]) -> None:
        """여러 쿼리 임베딩 일괄 저장"""
        for query, embedding in items.items():
            await self.set(query, embedding)

    async def delete(self, query: str) -> bool:
        """특정 쿼리 엔트리 삭제"""
        return self._cache.delete(self.make_key(query))

    async def clear(self) -> None:
        """전체 클리어 (통계 포함)"""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    def get_stats(self) -> CacheStatsDict:
        """
        캐시 통계 반환

        Returns:
            hits, misses, hit_rate, size 등
        """
        return self._cache.get_stats()
