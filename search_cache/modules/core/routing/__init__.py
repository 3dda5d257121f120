"""
Routing Module - 쿼리 분류 모듈

임베딩 검색이 필요 없는 대화성 쿼리를 걸러내는 모듈:
- 스마트 쿼리 필터 (SmartQueryFilter)

사용 예시:
    from search_cache.modules.core.routing import SmartQueryFilter

    query_filter = SmartQueryFilter()
    query_filter.needs_embedding_search("hi")  # False
    query_filter.get_default_response("thanks")  # "You're welcome! ..."
"""

from .query_filter import (
    DEFAULT_FILLER_PHRASES,
    FALLBACK_RESPONSE,
    FilterMatch,
    SmartQueryFilter,
)

__all__ = [
    "SmartQueryFilter",
    "FilterMatch",
    "DEFAULT_FILLER_PHRASES",
    "FALLBACK_RESPONSE",
]
