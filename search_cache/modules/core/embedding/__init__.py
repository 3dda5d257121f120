"""
Embedding Module - 쿼리 임베딩 모듈

사용 예시:
    from search_cache.modules.core.embedding import (
        BatchEmbeddingProcessor,
        OpenAIEmbeddingProvider,
    )

    provider = OpenAIEmbeddingProvider(api_key="sk-...", model="text-embedding-3-small")
    processor = BatchEmbeddingProcessor(max_batch_size=100)

    # 150개 쿼리 → 프로바이더 2회 호출
    vectors = await processor.generate_batch(queries, provider)
"""

from .batch_processor import BatchEmbeddingProcessor
from .interfaces import EmbedFn, IEmbeddingProvider
from .openai_provider import OpenAIEmbeddingProvider

__all__ = [
    # 인터페이스
    "IEmbeddingProvider",
    "EmbedFn",
    # 구현체
    "BatchEmbeddingProcessor",
    "OpenAIEmbeddingProvider",
]
