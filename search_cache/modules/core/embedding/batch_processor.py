"""
Batch Embedding Processor
N개의 쿼리를 ceil(N / max_batch_size)번의 프로바이더 호출로 임베딩

특징:
- 입력 순서 보존 (출력 i번째 벡터 = 입력 i번째 쿼리)
- 프로바이더의 max_batch_size가 더 작으면 그 값으로 분할
- max_concurrent_batches > 1이면 세마포어 아래에서 청크를 동시에 호출
- 청크 하나라도 실패하면 EmbeddingError(EMBEDDING-002)로 호출자에게 전파
"""

import asyncio
import math
from typing import Any

from ....lib.errors import EmbeddingError, ErrorCode
from ....lib.logger import get_logger
from ....lib.types import Vector
from .interfaces import EmbedFn, IEmbeddingProvider

logger = get_logger(__name__)


class BatchEmbeddingProcessor:
    """배치 임베딩 처리기"""

    def __init__(self, max_batch_size: int = 100, max_concurrent_batches: int = 1):
        """
        Args:
            max_batch_size: 프로바이더 1회 호출당 최대 쿼리 수
            max_concurrent_batches: 동시에 진행할 청크 호출 수 (1이면 순차)

        Raises:
            ValueError: 인자가 양의 정수가 아닌 경우
        """
        for name, value in (
            ("max_batch_size", max_batch_size),
            ("max_concurrent_batches", max_concurrent_batches),
        ):
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

        self.max_batch_size = max_batch_size
        self.max_concurrent_batches = max_concurrent_batches

        self.stats = {
            "total_requests": 0,
            "total_queries": 0,
            "provider_calls": 0,
            "failures": 0,
        }

    def _effective_batch_size(self, provider: IEmbeddingProvider | EmbedFn) -> int:
        provider_limit = getattr(provider, "max_batch_size", None)
        if isinstance(provider_limit, bool) or not isinstance(provider_limit, int):
            return self.max_batch_size
        if provider_limit > 0:
            return min(self.max_batch_size, provider_limit)
        return self.max_batch_size

    @staticmethod
    def _embed_fn(provider: IEmbeddingProvider | EmbedFn) -> EmbedFn:
        embed = getattr(provider, "embed", None)
        if callable(embed):
            return embed  # type: ignore[no-any-return]
        if callable(provider):
            return provider
        raise EmbeddingError(ErrorCode.EMBEDDING_001)

    @staticmethod
    def split_batches(queries: list[str], batch_size: int) -> list[list[str]]:
        """입력 순서를 유지한 채 batch_size 단위로 분할"""
        return [queries[i : i + batch_size] for i in range(0, len(queries), batch_size)]

    async def generate_batch(
        self,
        queries: list[str],
        provider: IEmbeddingProvider | EmbedFn,
    ) -> list[Vector]:
        """
        쿼리 리스트 배치 임베딩

        Args:
            queries: 임베딩할 쿼리 리스트 (중복 허용, 중복도 각각 임베딩)
            provider: IEmbeddingProvider 구현체 또는 async 함수

        Returns:
            입력과 같은 길이/순서의 벡터 리스트

        Raises:
            EmbeddingError: 잘못된 입력(EMBEDDING-003), 청크 호출 실패(EMBEDDING-002),
                응답 벡터 수 불일치(EMBEDDING-004)
        """
        queries = list(queries)
        for index, query in enumerate(queries):
            if not isinstance(query, str):
                raise EmbeddingError(
                    ErrorCode.EMBEDDING_003,
                    reason=f"queries[{index}] is {type(query).__name__}, not str",
                )

        if not queries:
            return []

        embed = self._embed_fn(provider)
        batch_size = self._effective_batch_size(provider)
        batches = self.split_batches(queries, batch_size)
        batch_count = len(batches)
        semaphore = asyncio.Semaphore(self.max_concurrent_batches)

        self.stats["total_requests"] += 1
        self.stats["total_queries"] += len(queries)

        logger.debug(
            f"배치 임베딩 시작: queries={len(queries)}, batch_size={batch_size}, "
            f"batches={batch_count}"
        )

        async def run_batch(batch_index: int, batch: list[str]) -> list[Vector]:
            async with semaphore:
                self.stats["provider_calls"] += 1
                try:
                    vectors = await embed(batch)
                except Exception as e:
                    raise EmbeddingError(
                        ErrorCode.EMBEDDING_002,
                        batch_index=batch_index + 1,
                        batch_count=batch_count,
                        reason=f"{type(e).__name__}: {e}",
                    ) from e

            if vectors is None or len(vectors) != len(batch):
                raise EmbeddingError(
                    ErrorCode.EMBEDDING_004,
                    expected=len(batch),
                    actual=0 if vectors is None else len(vectors),
                )
            return [list(vector) for vector in vectors]

        if self.max_concurrent_batches == 1:
            chunk_results = []
            try:
                for batch_index, batch in enumerate(batches):
                    chunk_results.append(await run_batch(batch_index, batch))
            except EmbeddingError:
                self.stats["failures"] += 1
                logger.error(f"배치 임베딩 실패: batches={batch_count}", exc_info=True)
                raise
        else:
            tasks = [
                asyncio.create_task(run_batch(batch_index, batch))
                for batch_index, batch in enumerate(batches)
            ]
            try:
                chunk_results = await asyncio.gather(*tasks)
            except EmbeddingError:
                for task in tasks:
                    task.cancel()
                self.stats["failures"] += 1
                logger.error(f"배치 임베딩 실패: batches={batch_count}", exc_info=True)
                raise

        embeddings = [vector for chunk in chunk_results for vector in chunk]
        logger.debug(f"배치 임베딩 완료: {len(embeddings)}개 ({batch_count}회 호출)")
        return embeddings

    def expected_calls(self, query_count: int, provider: Any | None = None) -> int:
        """query_count개 임베딩에 필요한 프로바이더 호출 수"""
        batch_size = self.max_batch_size
        if provider is not None:
            batch_size = self._effective_batch_size(provider)
        return math.ceil(query_count / batch_size) if query_count > 0 else 0

    def get_stats(self) -> dict[str, int]:
        """처리 통계 반환"""
        return dict(self.stats)
