"""
Configuration Schemas - Pydantic 기반 설정 검증
YAML 설정을 타입 안전하게 검증하고 IDE 자동완성 지원
"""

import os
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BaseConfig(BaseModel):
    """
    모든 설정 스키마의 기본 클래스

    기능:
    - 환경 변수 자동 치환 (${ENV_VAR} 형식)
    - 추가 필드 허용 (하위 호환성)
    """

    model_config = ConfigDict(
        extra="allow",
        validate_assignment=True,
        populate_by_name=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def substitute_env_vars(cls, value: Any) -> Any:
        """
        환경 변수 치환 validator

        YAML에서 ${ENV_VAR} 또는 ${ENV_VAR:-default} 형식을 지원합니다.

        Examples:
            api_key: "${OPENAI_API_KEY}"
            max_size: "${EMBEDDING_CACHE_MAX_SIZE:-1000}"
        """
        if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
            env_expr = value[2:-1]

            if ":-" in env_expr:
                env_name, default_value = env_expr.split(":-", 1)
                return os.getenv(env_name, default_value)
            return os.getenv(env_expr, "")

        return value

    def to_dict(self) -> dict[str, Any]:
        """
        Pydantic 모델을 dict로 변환 (하위 호환성)

        Returns:
            설정 딕셔너리
        """
        return self.model_dump(by_alias=True, exclude_none=True)


# ========================================
# Cache Configuration
# ========================================


class CacheSettings(BaseConfig):
    """
    LRU+TTL 캐시 설정

    Attributes:
        provider: 캐시 구현체 (현재 in-memory 단일 프로세스만 지원)
        max_size: 최대 엔트리 수 (양의 정수)
        ttl_ms: 엔트리 유효 시간 (밀리초, None이면 만료 없음)
    """

    provider: Literal["memory"] = "memory"
    max_size: int = Field(default=1000, ge=1, description="최대 캐시 엔트리 수")
    ttl_ms: int | None = Field(default=3_600_000, ge=0, description="TTL (밀리초)")


def _default_embedding_cache() -> CacheSettings:
    return CacheSettings(max_size=1000, ttl_ms=3_600_000)  # 1시간


def _default_result_cache() -> CacheSettings:
    return CacheSettings(max_size=500, ttl_ms=1_800_000)  # 30분


# ========================================
# Embedding Configuration
# ========================================


class EmbeddingProviderSettings(BaseConfig):
    """임베딩 프로바이더 설정"""

    provider: Literal["openai"] = "openai"
    model: str = Field(default="text-embedding-3-small", min_length=1)
    api_key: str | None = None
    base_url: str | None = None
    dimensions: int | None = Field(default=None, ge=1)
    timeout: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=2, ge=0)


class BatchSettings(BaseConfig):
    """
    배치 임베딩 설정

    Attributes:
        max_batch_size: 프로바이더 1회 호출당 최대 쿼리 수
        max_concurrent_batches: 동시에 진행할 배치 호출 수 (1이면 순차)
    """

    max_batch_size: int = Field(default=100, ge=1, le=2048)
    max_concurrent_batches: int = Field(default=1, ge=1, le=32)


# ========================================
# Search Configuration
# ========================================


class ParallelSearchSettings(BaseConfig):
    """병렬 검색 설정"""

    task_timeout_seconds: float | None = Field(
        default=10.0,
        gt=0,
        description="작업별 타임아웃 (초, None이면 비활성화)",
    )
    max_concurrency: int | None = Field(
        default=None,
        ge=1,
        description="동시 실행 작업 수 제한 (None이면 무제한)",
    )


class QueryFilterSettings(BaseConfig):
    """스마트 쿼리 필터 설정"""

    enabled: bool = True
    extra_phrases: dict[str, list[str]] = Field(
        default_factory=dict,
        description="카테고리별 추가 필러 문구 (예: greeting: ['yo'])",
    )


class SearchSettings(BaseConfig):
    """검색 요청 기본값"""

    default_top_k: int = Field(default=5, ge=1, le=100)


# ========================================
# Root Configuration
# ========================================


class SearchCacheConfig(BaseConfig):
    """
    전체 설정 통합 스키마

    모든 섹션은 기본값을 가지므로 빈 dict로도 생성할 수 있습니다.
    """

    embedding_cache: CacheSettings = Field(default_factory=_default_embedding_cache)
    result_cache: CacheSettings = Field(default_factory=_default_result_cache)
    embeddings: EmbeddingProviderSettings = Field(default_factory=EmbeddingProviderSettings)
    batch: BatchSettings = Field(default_factory=BatchSettings)
    parallel_search: ParallelSearchSettings = Field(default_factory=ParallelSearchSettings)
    query_filter: QueryFilterSettings = Field(default_factory=QueryFilterSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)


def validate_config_dict(config: dict[str, Any]) -> SearchCacheConfig:
    """
    설정 dict 검증

    Args:
        config: YAML에서 로드한 설정 딕셔너리

    Returns:
        검증된 SearchCacheConfig

    Raises:
        pydantic.ValidationError: 검증 실패 시
    """
    return SearchCacheConfig.model_validate(config)
