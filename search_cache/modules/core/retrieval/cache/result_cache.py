"""
Result Cache
(테넌트, 쿼리) → 검색 결과 LRU+TTL 캐시

키 형식: "result:{sha256(tenant_id)}:{sha256(정규화 쿼리)}"
테넌트 해시가 키 구조에 포함되므로 테넌트 단위 무효화가 다른 테넌트 엔트리를 건드리지 않습니다.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass

from .....lib.logger import get_logger
from .....lib.query_utils import QueryNormalizer
from .....lib.types import CacheStatsDict
from ..interfaces import ResultItem
from .ttl_lru_cache import TTLLRUCache

logger = get_logger(__name__)

KEY_PREFIX = "result"


@dataclass
class CachedResults:
    """
    결과 캐시 엔트리

    Attributes:
        results: 순위가 매겨진 결과 리스트
        top_k: 결과를 만든 검색의 top_k (None이면 알 수 없음)
    """

    results: list[ResultItem]
    top_k: int | None = None

    def covers(self, top_k: int | None) -> bool:
        """top_k개 요청을 이 엔트리로 응답할 수 있는지 여부"""
        if top_k is None or self.top_k is None or top_k <= self.top_k:
            return True
        # 백엔드가 top_k보다 적게 돌려줬다면 더 큰 요청에도 결과가 늘지 않음
        return len(self.results) < self.top_k


class ResultCache:
    """
    검색 결과 캐시

    특징:
    - 테넌트 범위 키 (결정적, 구분자 충돌 없음)
    - 테넌트 단위 무효화 (invalidate_agent)
    - 조회 결과는 리스트 복사본 (호출 측 정렬/변경이 캐시에 영향 없음)
    - 저장 당시 top_k보다 큰 요청은 미스 (결과가 잘린 엔트리로 응답하지 않음)
    """

    def __init__(
        self,
        max_size: int = 500,
        ttl_ms: int | None = 1_800_000,
        timer: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            max_size: 최대 엔트리 수
            ttl_ms: 엔트리 유효 시간 (밀리초, 기본 30분)
            timer: 시각 함수 (테스트용)

        Raises:
            ValueError: max_size가 양의 정수가 아닌 경우
        """
        self._cache: TTLLRUCache[str, CachedResults] = TTLLRUCache(
            max_size=max_size, ttl_ms=ttl_ms, timer=timer, name="result"
        )
        logger.info(f"ResultCache 초기화: max_size={max_size}, ttl_ms={ttl_ms}")

    @property
    def max_size(self) -> int:
        return self._cache.max_size

    @staticmethod
    def tenant_prefix(tenant_id: str) -> str:
        """테넌트 키 접두사"""
        return f"{KEY_PREFIX}:{QueryNormalizer.digest(tenant_id)}:"

    @staticmethod
    def generate_key(tenant_id: str, query: str) -> str:
        """
        캐시 키 생성

        Args:
            tenant_id: 테넌트 식별자 (정규화하지 않음)
            query: 검색 쿼리 (정규화 후 해시)

        Returns:
            "result:{tenant 해시}:{query 해시}"
        """
        query_digest = QueryNormalizer.digest(QueryNormalizer.normalize(query))
        return f"{ResultCache.tenant_prefix(tenant_id)}{query_digest}"

    async def get(
        self, tenant_id: str, query: str, top_k: int | None = None
    ) -> list[ResultItem] | None:
        """
        검색 결과 조회

        Args:
            tenant_id: 테넌트 식별자
            query: 검색 쿼리
            top_k: 필요한 결과 수 (저장 당시 top_k보다 크면 미스, None이면 검사하지 않음)

        Returns:
            캐시된 결과 (없거나 만료되었거나 top_k를 채울 수 없으면 None, 빈 결과는 []로 구분)
        """
        cached = self._cache.get(
            self.generate_key(tenant_id, query),
            accept=lambda entry: entry.covers(top_k),
        )
        if cached is None:
            return None
        logger.debug(f"결과 캐시 히트: tenant={tenant_id}, query={query[:30]}")
        return list(cached.results)

    async def set(
        self,
        tenant_id: str,
        query: str,
        results: list[ResultItem],
        ttl_ms: int | None = None,
        top_k: int | None = None,
    ) -> None:
        """
        검색 결과 저장

        Args:
            tenant_id: 테넌트 식별자
            query: 검색 쿼리
            results: 순위가 매겨진 결과 리스트
            ttl_ms: 엔트리별 TTL (None이면 기본값)
            top_k: 결과를 만든 검색의 top_k (None이면 모든 조회를 충족하는 것으로 간주)
        """
        self._cache.set(
            self.generate_key(tenant_id, query),
            CachedResults(results=list(results), top_k=top_k),
            ttl_ms=ttl_ms,
        )

    async def invalidate_agent(self, tenant_id: str) -> int:
        """
        테넌트의 모든 결과 엔트리 삭제

        Args:
            tenant_id: 무효화할 테넌트

        Returns:
            삭제된 엔트리 수
        """
        prefix = self.tenant_prefix(tenant_id)
        removed = self._cache.delete_where(lambda key: key.startswith(prefix))
        logger.info(f"결과 캐시 테넌트 무효화: tenant={tenant_id}, removed={removed}")
        return removed

    async def clear(self) -> None:
        """전체 클리어 (통계 포함)"""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    def get_stats(self) -> CacheStatsDict:
        """캐시 통계 반환"""
        return self._cache.get_stats()
