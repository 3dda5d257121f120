"""
Configuration loader for Search Cache
YAML 기반 계층적 설정 로더 + Pydantic 검증

로드 순서 (뒤쪽이 우선):
1. search_cache/config/default.yaml
2. SEARCH_CACHE_CONFIG 환경변수가 가리키는 YAML (선택)
3. 개별 환경변수 오버라이드 (EMBEDDING_CACHE_MAX_SIZE 등)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from ..config.schemas import SearchCacheConfig, validate_config_dict
from .errors import ConfigError, ErrorCode
from .logger import get_logger

logger = get_logger(__name__)


class ConfigLoader:
    """설정 로더 클래스"""

    # 환경 변수 → 설정 경로 매핑
    ENV_MAPPINGS: dict[str, tuple[str, ...]] = {
        "OPENAI_API_KEY": ("embeddings", "api_key"),
        "EMBEDDING_MODEL": ("embeddings", "model"),
        "EMBEDDING_CACHE_MAX_SIZE": ("embedding_cache", "max_size"),
        "EMBEDDING_CACHE_TTL_MS": ("embedding_cache", "ttl_ms"),
        "RESULT_CACHE_MAX_SIZE": ("result_cache", "max_size"),
        "RESULT_CACHE_TTL_MS": ("result_cache", "ttl_ms"),
        "EMBEDDING_MAX_BATCH_SIZE": ("batch", "max_batch_size"),
        "SEARCH_TASK_TIMEOUT_SECONDS": ("parallel_search", "task_timeout_seconds"),
    }

    def __init__(self, base_path: Path | None = None, env_file: Path | None = None) -> None:
        """
        Args:
            base_path: 기본 설정 디렉토리 (None이면 패키지 내 config/)
            env_file: .env 파일 경로 (None이면 현재 작업 디렉토리의 .env)
        """
        env_path = env_file or Path.cwd() / ".env"
        if env_path.exists():
            load_dotenv(env_path)
        self.base_path = base_path or Path(__file__).parent.parent / "config"

    def load_config(self, override_path: str | Path | None = None) -> SearchCacheConfig:
        """
        설정 로드, 병합 및 검증

        Args:
            override_path: 오버라이드 YAML 경로 (None이면 SEARCH_CACHE_CONFIG 환경변수 사용)

        Returns:
            검증된 SearchCacheConfig

        Raises:
            ConfigError: 파일 없음(CONFIG-001), 파싱 실패(CONFIG-002), 검증 실패(CONFIG-003)
        """
        default_path = self.base_path / "default.yaml"
        if not default_path.exists():
            raise ConfigError(ErrorCode.CONFIG_001, config_file=str(default_path))

        config = self._load_yaml_file(default_path)

        override = override_path or os.getenv("SEARCH_CACHE_CONFIG")
        if override:
            override_file = Path(override)
            if not override_file.exists():
                raise ConfigError(ErrorCode.CONFIG_001, config_file=str(override_file))
            config = self._merge_configs(config, self._load_yaml_file(override_file))
            logger.info(f"설정 오버라이드 적용: {override_file}")

        config = self._apply_env_overrides(config)

        try:
            validated = validate_config_dict(config)
        except ValidationError as e:
            raise ConfigError(ErrorCode.CONFIG_003, validation_errors=str(e)) from e

        logger.info(
            "설정 로드 완료",
            extra={
                "embedding_cache_max_size": validated.embedding_cache.max_size,
                "result_cache_max_size": validated.result_cache.max_size,
                "max_batch_size": validated.batch.max_batch_size,
            },
        )
        return validated

    def _load_yaml_file(self, file_path: Path) -> dict[str, Any]:
        """YAML 파일 로드 (최상위는 반드시 매핑)"""
        try:
            with open(file_path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(ErrorCode.CONFIG_002, config_file=str(file_path)) from e

        if not isinstance(loaded, dict):
            raise ConfigError(ErrorCode.CONFIG_004, config_file=str(file_path))
        return loaded

    def _merge_configs(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """설정 깊은 병합"""
        merged = base.copy()
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._merge_configs(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _apply_env_overrides(self, config: dict[str, Any]) -> dict[str, Any]:
        """환경 변수 오버라이드 적용"""
        for env_var, config_path in self.ENV_MAPPINGS.items():
            value = os.getenv(env_var)
            if value is not None:
                self._set_nested_value(config, config_path, value)
        return config

    def _set_nested_value(self, config: dict[str, Any], path: tuple[str, ...], value: str) -> None:
        """중첩된 딕셔너리에 값 설정"""
        current = config
        for key in path[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]
        current[path[-1]] = value


def load_config(override_path: str | Path | None = None) -> SearchCacheConfig:
    """설정 로드 편의 함수"""
    return ConfigLoader().load_config(override_path)
