"""에러 처리 라이브러리.

검색 캐시 레이어의 에러 코드, 메시지, 예외 클래스를 제공합니다.

주요 컴포넌트:
- ErrorCode: 에러 코드 Enum
- 예외 클래스: SearchCacheException 및 도메인별 예외 클래스
- 포맷팅 함수: 에러 메시지 및 응답 생성 함수
- 양언어 지원: 한국어(기본) 및 영어 메시지

사용 예시:
    >>> from search_cache.lib.errors import ErrorCode, EmbeddingError
    >>>
    >>> raise EmbeddingError(
    ...     ErrorCode.EMBEDDING_002, batch_index=1, batch_count=2, reason="rate limited"
    ... )
"""

from search_cache.lib.errors.codes import ErrorCode
from search_cache.lib.errors.exceptions import (
    CacheError,
    ConfigError,
    EmbeddingError,
    GeneralError,
    SearchCacheException,
    SearchError,
    get_exception_class,
    wrap_exception,
)
from search_cache.lib.errors.formatter import (
    format_error_response,
    get_all_error_codes,
    get_default_language,
    get_error_codes_by_domain,
    get_error_message,
    get_error_solutions,
)

# 에러 분류 별칭 (프로바이더 배치 실패 = EmbeddingError)
ProviderBatchFailure = EmbeddingError

__all__ = [
    # 에러 코드
    "ErrorCode",
    # 예외 클래스
    "SearchCacheException",
    "CacheError",
    "EmbeddingError",
    "SearchError",
    "ConfigError",
    "GeneralError",
    "ProviderBatchFailure",
    # 유틸리티 함수
    "get_exception_class",
    "wrap_exception",
    # 포맷팅 함수
    "get_error_message",
    "get_error_solutions",
    "format_error_response",
    "get_default_language",
    "get_all_error_codes",
    "get_error_codes_by_domain",
]
