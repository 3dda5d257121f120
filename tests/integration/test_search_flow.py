"""
검색 흐름 통합 테스트

설정 → create_search_orchestrator → InMemorySearchBackend 전체 경로를 검증합니다.
임베딩 프로바이더만 결정적인 가짜 구현으로 대체합니다.

시나리오:
1. 첫 요청 no-cache → 같은 테넌트 반복 result-cache → 다른 테넌트 embedding-cache
2. 결과 캐시 TTL 만료 후에도 임베딩 캐시는 유지
3. 필러 쿼리 / 배치 검색 / 테넌트 무효화
"""

import pytest
import pytest_asyncio

from search_cache.config.schemas import validate_config_dict
from search_cache.modules.core.retrieval import (
    InMemorySearchBackend,
    SearchSource,
    SearchTask,
    create_search_orchestrator,
)

VOCABULARY = ["condo", "manila", "townhouse", "cebu", "payment", "plans", "pool", "gym"]


class KeywordEmbeddingProvider:
    """어휘 기반 결정적 임베딩 (호출 횟수 기록)"""

    max_batch_size = 100

    def __init__(self):
        self.calls: list[list[str]] = []

    def vectorize(self, text: str) -> list[float]:
        words = text.lower().split()
        vector = [float(words.count(term)) for term in VOCABULARY]
        return vector if any(vector) else [0.01] * len(VOCABULARY)

    async def embed(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [self.vectorize(text) for text in texts]


DOCUMENTS = {
    "agent1": ["condo in manila", "townhouse in cebu", "payment plans for condo"],
    "agent2": ["pool and gym amenities", "condo near manila bay"],
}


@pytest_asyncio.fixture
async def setup(fake_clock):
    provider = KeywordEmbeddingProvider()
    backend = InMemorySearchBackend()
    for tenant_id, contents in DOCUMENTS.items():
        await backend.add_documents(
            tenant_id, contents, [provider.vectorize(content) for content in contents]
        )

    config = validate_config_dict(
        {
            "embedding_cache": {"max_size": 100, "ttl_ms": 3_600_000},
            "result_cache": {"max_size": 50, "ttl_ms": 1_800_000},
            "search": {"default_top_k": 2},
        }
    )
    orchestrator = create_search_orchestrator(
        config=config,
        embedding_provider=provider,
        search_backend=backend,
        timer=fake_clock,
    )
    return orchestrator, provider


@pytest.mark.integration
class TestSearchFlow:
    """전체 검색 흐름"""

    @pytest.mark.asyncio
    async def test_cache_layers_in_order(self, setup):
        orchestrator, provider = setup

        first = await orchestrator.search("agent1", "condo manila")
        second = await orchestrator.search("agent1", "Condo  Manila")
        third = await orchestrator.search("agent2", "condo manila")

        assert first.source == SearchSource.NO_CACHE
        assert first.results[0].content == "condo in manila"
        assert len(first.results) == 2
        assert second.source == SearchSource.RESULT_CACHE
        assert second.results == first.results
        assert third.source == SearchSource.EMBEDDING_CACHE
        assert third.results[0].content == "condo near manila bay"
        assert len(provider.calls) == 1

    @pytest.mark.asyncio
    async def test_result_ttl_expires_before_embedding_ttl(self, setup, fake_clock):
        orchestrator, provider = setup
        await orchestrator.search("agent1", "townhouse cebu")

        fake_clock.advance_ms(1_800_000)
        response = await orchestrator.search("agent1", "townhouse cebu")

        assert response.source == SearchSource.EMBEDDING_CACHE
        assert len(provider.calls) == 1

        fake_clock.advance_ms(1_800_000)
        response = await orchestrator.search("agent1", "townhouse cebu")

        assert response.source == SearchSource.NO_CACHE
        assert len(provider.calls) == 2

    @pytest.mark.asyncio
    async def test_configured_caches_are_used(self, setup):
        orchestrator, _ = setup

        await orchestrator.search("agent1", "condo manila")

        stats = orchestrator.get_stats()
        assert stats["embedding_cache"]["max_size"] == 100
        assert stats["result_cache"]["max_size"] == 50
        assert stats["embedding_cache"]["size"] == 1
        assert stats["result_cache"]["size"] == 1

    @pytest.mark.asyncio
    async def test_filler_query_never_reaches_provider(self, setup):
        orchestrator, provider = setup

        response = await orchestrator.search("agent1", "Thank you!")

        assert response.source == SearchSource.FILTERED
        assert response.default_response
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_search_many_single_provider_call(self, setup):
        orchestrator, provider = setup

        responses = await orchestrator.search_many(
            [
                SearchTask("agent1", "payment plans"),
                SearchTask("agent2", "pool gym"),
                SearchTask("agent2", "payment plans"),
                SearchTask("agent1", "ok"),
            ]
        )

        assert provider.calls == [["payment plans", "pool gym"]]
        assert responses[0].results[0].content == "payment plans for condo"
        assert responses[1].results[0].content == "pool and gym amenities"
        assert responses[2].source == SearchSource.NO_CACHE
        assert responses[3].source == SearchSource.FILTERED

        repeated = await orchestrator.search("agent1", "payment plans")
        assert repeated.source == SearchSource.RESULT_CACHE

    @pytest.mark.asyncio
    async def test_invalidate_tenant_after_document_update(self, setup):
        orchestrator, provider = setup
        await orchestrator.search("agent1", "condo manila")

        assert await orchestrator.invalidate_tenant("agent1") == 1

        response = await orchestrator.search("agent1", "condo manila")
        assert response.source == SearchSource.EMBEDDING_CACHE
        assert len(provider.calls) == 1

        stats = orchestrator.get_stats()
        assert stats["result_cache"]["invalidations"] == 1
        assert stats["embedding_cache_hits"] == 1
