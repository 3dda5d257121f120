"""
Retrieval Module Interfaces
검색 모듈 인터페이스 정의 (Protocol 기반)

이 파일은 검색 결과 모델, 검색 작업, 검색 백엔드의 표준 인터페이스를 정의합니다.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from ....lib.types import Vector


@dataclass
class ResultItem:
    """
    검색 결과 항목

    Attributes:
        content: 문서 본문
        similarity: 유사도 점수 (클수록 관련성 높음)
        metadata: 임의의 메타데이터
    """

    content: str
    similarity: float
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SearchTask:
    """
    병렬 검색 작업 단위

    Attributes:
        tenant_id: 테넌트(에이전트) 식별자
        query: 검색 쿼리
        top_k: 반환할 최대 결과 수
    """

    tenant_id: str
    query: str
    top_k: int = 5


@runtime_checkable
class ISearchBackend(Protocol):
    """
    유사도 검색 백엔드 인터페이스 (Protocol 기반)

    구현 예시:
    - InMemorySearchBackend: numpy 코사인 유사도 기반 로컬 백엔드
    - 외부 벡터 DB 어댑터 (호출 측에서 주입)
    """

    async def search(
        self,
        tenant_id: str,
        embedding: Vector,
        top_k: int,
    ) -> list[ResultItem]:
        """
        임베딩 벡터로 유사도 검색 수행

        Args:
            tenant_id: 검색 범위 테넌트
            embedding: 쿼리 임베딩 벡터
            top_k: 반환할 최대 결과 수

        Returns:
            유사도 내림차순 결과 리스트
        """
        ...


# 병렬 검색에 전달하는 검색 함수: (tenant_id, query, top_k) -> 결과 (동기/비동기 모두 허용)
SearchFn = Callable[[str, str, int], Awaitable[list[Any]] | list[Any]]
