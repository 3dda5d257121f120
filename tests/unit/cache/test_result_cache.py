"""
ResultCache 단위 테스트

(테넌트, 쿼리) → 검색 결과 캐시 검증.

테스트 케이스:
1. 결과 저장/조회
2. 테넌트 단위 무효화 (다른 테넌트는 유지)
3. 키 생성의 결정성 및 테넌트 구분
4. TTL 만료
5. 저장 당시 top_k보다 큰 요청은 미스
"""

import pytest

from search_cache.modules.core.retrieval.cache.result_cache import ResultCache
from search_cache.modules.core.retrieval.interfaces import ResultItem

THIRTY_MINUTES_MS = 1_800_000


@pytest.fixture
def cache(fake_clock) -> ResultCache:
    return ResultCache(max_size=50, ttl_ms=THIRTY_MINUTES_MS, timer=fake_clock)


class TestResultCache:
    """기본 동작 테스트"""

    @pytest.mark.asyncio
    async def test_cache_search_results(self, cache):
        results = [
            ResultItem(content="Result 1", similarity=0.9),
            ResultItem(content="Result 2", similarity=0.8),
        ]

        assert await cache.get("agent-123", "property search") is None

        await cache.set("agent-123", "property search", results)

        assert await cache.get("agent-123", "property search") == results

    @pytest.mark.asyncio
    async def test_empty_result_list_is_a_hit(self, cache):
        await cache.set("agent-1", "nothing matches", [])

        assert await cache.get("agent-1", "nothing matches") == []

    @pytest.mark.asyncio
    async def test_ttl_expiration(self, cache, fake_clock):
        await cache.set("agent-1", "q", ["r"])
        fake_clock.advance_ms(THIRTY_MINUTES_MS + 1)

        assert await cache.get("agent-1", "q") is None

    @pytest.mark.asyncio
    async def test_query_normalization(self, cache):
        await cache.set("agent-1", "What properties?", ["r"])

        assert await cache.get("agent-1", "what  properties? ") == ["r"]


class TestTopKCoverage:
    """저장 당시 top_k와 조회 top_k 비교 테스트"""

    @pytest.mark.asyncio
    async def test_smaller_or_equal_top_k_is_hit(self, cache):
        await cache.set("agent-1", "q", ["r1", "r2", "r3"], top_k=3)

        assert await cache.get("agent-1", "q", top_k=3) == ["r1", "r2", "r3"]
        assert await cache.get("agent-1", "q", top_k=2) == ["r1", "r2", "r3"]

    @pytest.mark.asyncio
    async def test_larger_top_k_on_truncated_results_is_miss(self, cache):
        """top_k=3으로 3개가 저장된 엔트리는 top_k=10 요청을 채울 수 없음"""
        await cache.set("agent-1", "q", ["r1", "r2", "r3"], top_k=3)

        assert await cache.get("agent-1", "q", top_k=10) is None
        assert await cache.get("agent-1", "q", top_k=3) == ["r1", "r2", "r3"]

        stats = cache.get_stats()
        assert stats["misses"] == 1
        assert stats["hits"] == 1

    @pytest.mark.asyncio
    async def test_larger_top_k_on_exhaustive_results_is_hit(self, cache):
        """top_k보다 적게 반환된 결과는 전체 결과이므로 더 큰 요청에도 히트"""
        await cache.set("agent-1", "q", ["r1", "r2"], top_k=5)

        assert await cache.get("agent-1", "q", top_k=10) == ["r1", "r2"]

    @pytest.mark.asyncio
    async def test_unknown_stored_top_k_always_hits(self, cache):
        await cache.set("agent-1", "q", ["r1"])

        assert await cache.get("agent-1", "q", top_k=50) == ["r1"]

    @pytest.mark.asyncio
    async def test_larger_search_overwrites_smaller_entry(self, cache):
        await cache.set("agent-1", "q", ["r1"], top_k=1)
        await cache.set("agent-1", "q", ["r1", "r2", "r3", "r4"], top_k=4)

        assert await cache.get("agent-1", "q", top_k=4) == ["r1", "r2", "r3", "r4"]
        assert len(cache) == 1


class TestInvalidateAgent:
    """테넌트 무효화 테스트"""

    @pytest.mark.asyncio
    async def test_invalidate_only_target_agent(self, cache):
        await cache.set("agent-123", "query1", ["result1"])
        await cache.set("agent-123", "query2", ["result2"])
        await cache.set("agent-456", "query1", ["result3"])

        removed = await cache.invalidate_agent("agent-123")

        assert removed == 2
        assert await cache.get("agent-123", "query1") is None
        assert await cache.get("agent-123", "query2") is None
        assert await cache.get("agent-456", "query1") == ["result3"]

    @pytest.mark.asyncio
    async def test_invalidate_prefix_like_tenant_ids(self, cache):
        """'agent-1'과 'agent-12'는 서로 영향을 주지 않음"""
        await cache.set("agent-1", "q", ["a"])
        await cache.set("agent-12", "q", ["b"])

        await cache.invalidate_agent("agent-1")

        assert await cache.get("agent-12", "q") == ["b"]

    @pytest.mark.asyncio
    async def test_invalidate_unknown_agent(self, cache):
        await cache.set("agent-1", "q", ["a"])

        assert await cache.invalidate_agent("agent-999") == 0
        assert await cache.get("agent-1", "q") == ["a"]


class TestGenerateKey:
    """키 생성 테스트"""

    def test_consistent_keys(self, cache):
        key1 = cache.generate_key("agent-123", "test query")
        key2 = cache.generate_key("agent-123", "test query")

        assert key1 == key2

    def test_different_tenants_different_keys(self):
        assert ResultCache.generate_key("agent-1", "q") != ResultCache.generate_key("agent-2", "q")

    def test_delimiter_collision_is_impossible(self):
        """tenant/query 경계가 달라도 같은 키가 만들어지지 않음"""
        assert ResultCache.generate_key("a:b", "c") != ResultCache.generate_key("a", "b:c")

    def test_key_format(self):
        key = ResultCache.generate_key("agent-1", "q")
        prefix, tenant_digest, query_digest = key.split(":")

        assert prefix == "result"
        assert len(tenant_digest) == 64
        assert len(query_digest) == 64
        assert key.startswith(ResultCache.tenant_prefix("agent-1"))
