"""
Configuration package - 설정 스키마 및 기본 YAML
"""

from .schemas import (
    BatchSettings,
    CacheSettings,
    EmbeddingProviderSettings,
    ParallelSearchSettings,
    QueryFilterSettings,
    SearchCacheConfig,
    SearchSettings,
    validate_config_dict,
)

__all__ = [
    "SearchCacheConfig",
    "CacheSettings",
    "EmbeddingProviderSettings",
    "BatchSettings",
    "ParallelSearchSettings",
    "QueryFilterSettings",
    "SearchSettings",
    "validate_config_dict",
]
