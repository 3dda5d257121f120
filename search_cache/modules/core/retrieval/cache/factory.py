"""
CacheFactory - 설정 기반 캐시 생성 팩토리

SearchCacheConfig의 embedding_cache / result_cache 섹션을 읽어 캐시 인스턴스를 생성합니다.

사용 예시:
    from search_cache.modules.core.retrieval.cache import CacheFactory

    embedding_cache = CacheFactory.create_embedding_cache(config.embedding_cache)
    result_cache = CacheFactory.create_result_cache(config.result_cache)

    # 지원 캐시 조회
    CacheFactory.get_supported_caches()
"""

import time
from collections.abc import Callable
from typing import Any

from .....config.schemas import CacheSettings
from .....lib.errors import CacheError, ErrorCode
from .....lib.logger import get_logger
from .embedding_cache import EmbeddingCache
from .result_cache import ResultCache

logger = get_logger(__name__)


# 지원 캐시 레지스트리
# 새 저장소 추가 시 여기에 등록
SUPPORTED_CACHES: dict[str, dict[str, Any]] = {
    # In-memory LRU+TTL 캐시 (단일 프로세스)
    "memory": {
        "type": "local",
        "description": "In-memory LRU+TTL 캐시 (단일 프로세스 환경)",
        "default_config": {
            "embedding": {"max_size": 1000, "ttl_ms": 3_600_000},
            "result": {"max_size": 500, "ttl_ms": 1_800_000},
        },
    },
}


class CacheFactory:
    """
    설정 기반 캐시 팩토리

    설정 예시 (default.yaml):
        embedding_cache:
          provider: "memory"
          max_size: 1000
          ttl_ms: 3600000
        result_cache:
          provider: "memory"
          max_size: 500
          ttl_ms: 1800000
    """

    @staticmethod
    def _check_provider(provider: str) -> None:
        if provider not in SUPPORTED_CACHES:
            raise CacheError(ErrorCode.CACHE_001, provider=provider)

    @staticmethod
    def _resolve(
        settings: CacheSettings | dict[str, Any] | None, kind: str
    ) -> tuple[int, int | None]:
        """설정 객체/딕셔너리에서 (max_size, ttl_ms) 추출"""
        if settings is None:
            settings = {}
        if isinstance(settings, dict):
            provider = settings.get("provider", "memory")
            CacheFactory._check_provider(provider)
            defaults = SUPPORTED_CACHES[provider]["default_config"][kind]
            return (
                settings.get("max_size", defaults["max_size"]),
                settings.get("ttl_ms", defaults["ttl_ms"]),
            )

        CacheFactory._check_provider(settings.provider)
        return settings.max_size, settings.ttl_ms

    @staticmethod
    def create_embedding_cache(
        settings: CacheSettings | dict[str, Any] | None = None,
        timer: Callable[[], float] = time.monotonic,
    ) -> EmbeddingCache:
        """
        임베딩 캐시 생성

        Args:
            settings: 캐시 설정 (None이면 기본값)
            timer: 시각 함수 (테스트용)

        Raises:
            CacheError: 지원하지 않는 프로바이더(CACHE-001) 또는 잘못된 크기/TTL(CACHE-002)
        """
        max_size, ttl_ms = CacheFactory._resolve(settings, "embedding")
        try:
            cache = EmbeddingCache(max_size=max_size, ttl_ms=ttl_ms, timer=timer)
        except ValueError as e:
            raise CacheError(ErrorCode.CACHE_002, reason=str(e)) from e

        logger.info(f"✅ EmbeddingCache 생성: max_size={max_size}, ttl_ms={ttl_ms}")
        return cache

    @staticmethod
    def create_result_cache(
        settings: CacheSettings | dict[str, Any] | None = None,
        timer: Callable[[], float] = time.monotonic,
    ) -> ResultCache:
        """
        결과 캐시 생성

        Args:
            settings: 캐시 설정 (None이면 기본값)
            timer: 시각 함수 (테스트용)

        Raises:
            CacheError: 지원하지 않는 프로바이더(CACHE-001) 또는 잘못된 크기/TTL(CACHE-002)
        """
        max_size, ttl_ms = CacheFactory._resolve(settings, "result")
        try:
            cache = ResultCache(max_size=max_size, ttl_ms=ttl_ms, timer=timer)
        except ValueError as e:
            raise CacheError(ErrorCode.CACHE_002, reason=str(e)) from e

        logger.info(f"✅ ResultCache 생성: max_size={max_size}, ttl_ms={ttl_ms}")
        return cache

    @staticmethod
    def get_supported_caches() -> list[str]:
        """지원하는 모든 캐시 이름 반환"""
        return list(SUPPORTED_CACHES.keys())

    @staticmethod
    def get_cache_info(name: str) -> dict[str, Any] | None:
        """
        특정 캐시의 상세 정보 반환

        Args:
            name: 캐시 이름

        Returns:
            캐시 정보 딕셔너리 또는 None
        """
        return SUPPORTED_CACHES.get(name)
