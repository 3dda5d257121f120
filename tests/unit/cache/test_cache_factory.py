"""
CacheFactory 단위 테스트
설정 기반 캐시 생성 검증
"""

import pytest

from search_cache.config.schemas import CacheSettings
from search_cache.lib.errors import CacheError
from search_cache.modules.core.retrieval.cache.embedding_cache import EmbeddingCache
from search_cache.modules.core.retrieval.cache.factory import SUPPORTED_CACHES, CacheFactory
from search_cache.modules.core.retrieval.cache.result_cache import ResultCache


class TestSupportedCachesRegistry:
    """SUPPORTED_CACHES 레지스트리 테스트"""

    def test_memory_provider_registered(self):
        assert "memory" in SUPPORTED_CACHES

    def test_each_cache_has_required_fields(self):
        required_fields = {"type", "description", "default_config"}

        for cache_name, cache_info in SUPPORTED_CACHES.items():
            for field in required_fields:
                assert field in cache_info, f"{cache_name}에 {field} 필드 없음"

    def test_get_cache_info(self):
        assert CacheFactory.get_cache_info("memory")["type"] == "local"
        assert CacheFactory.get_cache_info("redis") is None
        assert CacheFactory.get_supported_caches() == ["memory"]


class TestCacheFactoryCreate:
    """캐시 생성 테스트"""

    def test_create_from_settings(self, fake_clock):
        cache = CacheFactory.create_embedding_cache(
            CacheSettings(max_size=10, ttl_ms=1000), timer=fake_clock
        )

        assert isinstance(cache, EmbeddingCache)
        assert cache.get_stats()["max_size"] == 10

    def test_create_result_cache_with_defaults(self):
        cache = CacheFactory.create_result_cache()

        assert isinstance(cache, ResultCache)
        assert cache.get_stats()["max_size"] == 500

    def test_create_from_dict(self):
        cache = CacheFactory.create_embedding_cache({"provider": "memory", "max_size": 7})

        assert cache.get_stats()["max_size"] == 7

    def test_unsupported_provider(self):
        with pytest.raises(CacheError) as exc_info:
            CacheFactory.create_result_cache({"provider": "redis"})

        assert exc_info.value.error_code == "CACHE-001"

    def test_invalid_size_from_dict(self):
        with pytest.raises(CacheError) as exc_info:
            CacheFactory.create_embedding_cache({"max_size": 0})

        assert exc_info.value.error_code == "CACHE-002"
