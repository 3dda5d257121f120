"""커스텀 예외 클래스 모듈.

각 예외는 에러 코드(`{DOMAIN}-{NNN}`)와 메시지 컨텍스트를 가지며,
to_dict()로 양언어 에러 응답을 만들 수 있습니다.
도메인 예외 클래스는 정의 시 `domain` 속성으로 자동 등록됩니다.
"""

from typing import Any, ClassVar

from search_cache.lib.errors.codes import ErrorCode
from search_cache.lib.errors.formatter import format_error_response, get_error_message

_DOMAIN_EXCEPTIONS: dict[str, type["SearchCacheException"]] = {}


def _code_str(error_code: str | ErrorCode) -> str:
    return error_code.value if isinstance(error_code, ErrorCode) else error_code


class SearchCacheException(Exception):
    """검색 캐시 레이어 기본 예외 클래스.

    Attributes:
        error_code: 에러 코드 문자열 (예: "EMBEDDING-002")
        context: 메시지 포맷팅에 사용한 컨텍스트
    """

    domain: ClassVar[str | None] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.domain is not None:
            _DOMAIN_EXCEPTIONS[cls.domain] = cls

    def __init__(self, error_code: str | ErrorCode, **context: Any) -> None:
        self.error_code = _code_str(error_code)
        self.context = context
        # 예외 메시지는 한국어 고정 (응답 언어는 to_dict에서 선택)
        super().__init__(get_error_message(self.error_code, "ko", **context))

    def to_dict(self, lang: str = "ko", include_solutions: bool = True) -> dict[str, Any]:
        """에러 응답 딕셔너리로 변환."""
        return format_error_response(
            self.error_code,
            lang=lang,
            include_solutions=include_solutions,
            **self.context,
        )


class CacheError(SearchCacheException):
    """캐시 구성/생성 관련 예외."""

    domain = "CACHE"


class EmbeddingError(SearchCacheException):
    """임베딩 프로바이더 관련 예외 (배치 실패 포함)."""

    domain = "EMBEDDING"


class SearchError(SearchCacheException):
    """유사도 검색 관련 예외."""

    domain = "SEARCH"


class ConfigError(SearchCacheException):
    """설정 관련 예외."""

    domain = "CONFIG"


class GeneralError(SearchCacheException):
    """일반 예외."""

    domain = "GENERAL"


def get_exception_class(error_code: str | ErrorCode) -> type[SearchCacheException]:
    """에러 코드 도메인에 해당하는 예외 클래스.

    Example:
        >>> get_exception_class("EMBEDDING-002").__name__
        'EmbeddingError'
    """
    domain = _code_str(error_code).split("-", 1)[0]
    return _DOMAIN_EXCEPTIONS.get(domain, SearchCacheException)


def wrap_exception(
    error: Exception,
    default_code: str | ErrorCode = ErrorCode.GENERAL_001,
    **context: Any,
) -> SearchCacheException:
    """외부 예외를 도메인 예외로 래핑 (이미 도메인 예외면 그대로 반환)."""
    if isinstance(error, SearchCacheException):
        return error

    code = _code_str(default_code)
    context["original_error_type"] = type(error).__name__
    context["original_error_message"] = str(error)
    return get_exception_class(code)(code, **context)
