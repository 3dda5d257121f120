"""
Embedding Module - 인터페이스 정의

임베딩 프로바이더의 추상 인터페이스를 정의합니다.
BatchEmbeddingProcessor는 이 인터페이스를 구현한 객체 또는 같은 시그니처의 async 함수를 받습니다.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

from ....lib.types import Vector


@runtime_checkable
class IEmbeddingProvider(Protocol):
    """
    임베딩 프로바이더 인터페이스 (Protocol 기반)

    구현 예시:
    - OpenAIEmbeddingProvider: OpenAI Embeddings API
    - 테스트용 AsyncMock / 결정적 가짜 프로바이더

    선택 속성:
        max_batch_size (int): 1회 호출당 프로바이더가 허용하는 최대 입력 수
    """

    async def embed(self, texts: list[str]) -> list[Vector]:
        """
        텍스트 리스트 임베딩 (입력 순서와 같은 순서로 반환)

        Args:
            texts: 임베딩할 텍스트 리스트

        Returns:
            텍스트별 임베딩 벡터 리스트

        Raises:
            Exception: 프로바이더 호출 실패 시
        """
        ...


# 프로바이더 대신 전달할 수 있는 async 함수
EmbedFn = Callable[[list[str]], Awaitable[list[Vector]]]
