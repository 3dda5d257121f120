"""
In-Memory Search Backend
numpy 코사인 유사도 기반 테넌트별 로컬 검색 백엔드

로컬 실행 및 테스트용 ISearchBackend 구현체입니다.
운영 환경에서는 같은 인터페이스의 벡터 DB 어댑터를 주입합니다.
"""

import asyncio
from collections.abc import Sequence
from typing import Any

import numpy as np

from .....lib.errors import ErrorCode, SearchError
from .....lib.logger import get_logger
from .....lib.types import Vector
from ..interfaces import ResultItem

logger = get_logger(__name__)


class InMemorySearchBackend:
    """
    테넌트별 문서 벡터 저장소 + 코사인 유사도 검색

    사용 예시:
        backend = InMemorySearchBackend()
        await backend.add_documents("agent-1", ["condo in manila"], [[0.1, 0.9]])
        results = await backend.search("agent-1", [0.1, 0.8], top_k=3)
    """

    def __init__(self, min_similarity: float | None = None):
        """
        Args:
            min_similarity: 최소 유사도 (None이면 필터링 없음)
        """
        self.min_similarity = min_similarity
        self._documents: dict[str, list[tuple[str, dict[str, Any]]]] = {}
        self._matrices: dict[str, np.ndarray] = {}
        self._lock = asyncio.Lock()

        self.stats = {"searches": 0, "documents": 0}

    @staticmethod
    def _normalize_rows(matrix: np.ndarray) -> np.ndarray:
        norms = np.linalg.norm(matrix, axis=1, keepdims=True)
        norms[norms == 0] = 1.0
        return matrix / norms

    async def add_documents(
        self,
        tenant_id: str,
        contents: Sequence[str],
        embeddings: Sequence[Vector],
        metadatas: Sequence[dict[str, Any]] | None = None,
    ) -> int:
        """
        테넌트 문서 추가

        Args:
            tenant_id: 테넌트 식별자
            contents: 문서 본문 리스트
            embeddings: 문서 임베딩 리스트 (contents와 같은 길이)
            metadatas: 문서 메타데이터 리스트 (선택)

        Returns:
            테넌트의 전체 문서 수

        Raises:
            SearchError: 길이/차원이 맞지 않는 경우 (SEARCH-003)
        """
        if len(contents) != len(embeddings):
            raise SearchError(
                ErrorCode.SEARCH_003,
                reason=f"contents({len(contents)})와 embeddings({len(embeddings)}) 길이 불일치",
            )
        if metadatas is not None and len(metadatas) != len(contents):
            raise SearchError(ErrorCode.SEARCH_003, reason="metadatas 길이 불일치")
        if not contents:
            return len(self._documents.get(tenant_id, []))

        new_matrix = self._normalize_rows(np.asarray(embeddings, dtype=np.float64))

        async with self._lock:
            existing = self._matrices.get(tenant_id)
            if existing is not None and existing.shape[1] != new_matrix.shape[1]:
                raise SearchError(
                    ErrorCode.SEARCH_003,
                    reason=f"임베딩 차원 불일치: {existing.shape[1]} != {new_matrix.shape[1]}",
                )

            documents = self._documents.setdefault(tenant_id, [])
            for index, content in enumerate(contents):
                metadata = dict(metadatas[index]) if metadatas is not None else {}
                documents.append((content, metadata))

            self._matrices[tenant_id] = (
                new_matrix if existing is None else np.vstack([existing, new_matrix])
            )
            self.stats["documents"] += len(contents)

        logger.info(f"문서 추가: tenant={tenant_id}, added={len(contents)}, total={len(documents)}")
        return len(documents)

    async def remove_tenant(self, tenant_id: str) -> int:
        """
        테넌트 문서 전체 삭제

        Returns:
            삭제된 문서 수
        """
        async with self._lock:
            removed = len(self._documents.pop(tenant_id, []))
            self._matrices.pop(tenant_id, None)
            self.stats["documents"] -= removed
        return removed

    async def search(self, tenant_id: str, embedding: Vector, top_k: int) -> list[ResultItem]:
        """
        코사인 유사도 검색

        Args:
            tenant_id: 검색 범위 테넌트
            embedding: 쿼리 임베딩
            top_k: 반환할 최대 결과 수

        Returns:
            유사도 내림차순 ResultItem 리스트 (문서가 없으면 [])

        Raises:
            SearchError: top_k가 양수가 아니거나 차원이 맞지 않는 경우 (SEARCH-003)
        """
        if top_k <= 0:
            raise SearchError(ErrorCode.SEARCH_003, reason=f"top_k must be positive, got {top_k}")

        self.stats["searches"] += 1
        matrix = self._matrices.get(tenant_id)
        if matrix is None:
            return []

        query = np.asarray(embedding, dtype=np.float64)
        if query.shape != (matrix.shape[1],):
            raise SearchError(
                ErrorCode.SEARCH_003,
                reason=f"쿼리 임베딩 차원 불일치: {query.shape} != ({matrix.shape[1]},)",
            )

        norm = np.linalg.norm(query)
        if norm == 0:
            return []

        similarities = matrix @ (query / norm)
        order = np.argsort(-similarities, kind="stable")[:top_k]
        documents = self._documents[tenant_id]

        results: list[ResultItem] = []
        for index in order:
            score = float(similarities[index])
            if self.min_similarity is not None and score < self.min_similarity:
                break
            content, metadata = documents[int(index)]
            results.append(ResultItem(content=content, similarity=score, metadata=dict(metadata)))
        return results

    def count(self, tenant_id: str | None = None) -> int:
        """문서 수 (tenant_id가 None이면 전체)"""
        if tenant_id is None:
            return sum(len(docs) for docs in self._documents.values())
        return len(self._documents.get(tenant_id, []))
