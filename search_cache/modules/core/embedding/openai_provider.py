"""
OpenAI Embedding 프로바이더

OpenAI Embeddings API(AsyncOpenAI)로 쿼리 배치를 임베딩합니다.
배치 분할은 BatchEmbeddingProcessor가 담당하며, 이 클래스는 한 번의 API 호출만 수행합니다.
"""

import os
from typing import Any

from openai import AsyncOpenAI

from ....config.schemas import EmbeddingProviderSettings
from ....lib.errors import EmbeddingError, ErrorCode
from ....lib.logger import get_logger
from ....lib.types import Vector

logger = get_logger(__name__)

# OpenAI Embeddings API 입력 개수 상한
OPENAI_MAX_INPUTS = 2048


class OpenAIEmbeddingProvider:
    """
    OpenAI Embeddings API 어댑터

    IEmbeddingProvider 구현체. 응답 벡터는 data[i].index 순으로 정렬해 반환합니다.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "text-embedding-3-small",
        dimensions: int | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 2,
        max_batch_size: int = 100,
        client: Any | None = None,
    ):
        """
        Args:
            api_key: OpenAI API 키 (없으면 OPENAI_API_KEY 환경변수)
            model: 임베딩 모델 이름
            dimensions: 출력 차원 (text-embedding-3 계열만 지원, None이면 모델 기본값)
            base_url: 호환 API 엔드포인트 (OpenRouter 등)
            timeout: 요청 타임아웃 (초)
            max_retries: SDK 재시도 횟수
            max_batch_size: 1회 호출당 최대 입력 수
            client: 미리 생성한 AsyncOpenAI 호환 클라이언트 (테스트용)

        Raises:
            EmbeddingError: API 키가 없고 client도 주어지지 않은 경우 (EMBEDDING-001)
        """
        self.model = model
        self.dimensions = dimensions
        self.max_batch_size = min(max_batch_size, OPENAI_MAX_INPUTS)

        if client is not None:
            self.client = client
        else:
            resolved_api_key = api_key or os.getenv("OPENAI_API_KEY")
            if not resolved_api_key:
                raise EmbeddingError(ErrorCode.EMBEDDING_001)
            self.client = AsyncOpenAI(
                api_key=resolved_api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=max_retries,
            )

        logger.info(
            f"✅ OpenAIEmbeddingProvider 초기화: model={model}, "
            f"dimensions={dimensions}, max_batch_size={self.max_batch_size}"
        )

    @classmethod
    def from_settings(
        cls, settings: EmbeddingProviderSettings, max_batch_size: int = 100
    ) -> "OpenAIEmbeddingProvider":
        """설정 객체로부터 생성"""
        return cls(
            api_key=settings.api_key or None,
            model=settings.model,
            dimensions=settings.dimensions,
            base_url=settings.base_url,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            max_batch_size=max_batch_size,
        )

    async def embed(self, texts: list[str]) -> list[Vector]:
        """
        텍스트 배치 임베딩 (단일 API 호출)

        Args:
            texts: 임베딩할 텍스트 리스트

        Returns:
            입력 순서와 같은 순서의 임베딩 벡터 리스트
        """
        if not texts:
            return []

        params: dict[str, Any] = {"model": self.model, "input": texts}
        if self.dimensions is not None:
            params["dimensions"] = self.dimensions

        response = await self.client.embeddings.create(**params)

        ordered = sorted(response.data, key=lambda item: item.index)
        logger.debug(f"OpenAI 임베딩 완료: {len(ordered)}개")
        return [list(item.embedding) for item in ordered]

    def __repr__(self) -> str:
        return f"OpenAIEmbeddingProvider(model={self.model!r})"
