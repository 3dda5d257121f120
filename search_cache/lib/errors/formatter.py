"""에러 메시지 포맷팅 유틸리티.

메시지 템플릿에 컨텍스트를 채워 예외 메시지와 에러 응답 dict를 만듭니다.
컨텍스트에 없는 자리표시자는 "{key}" 그대로 남깁니다.
"""

import os
from typing import Any

from search_cache.lib.errors.messages import (
    ERROR_MESSAGES,
    get_message_template,
    get_solutions_list,
)

SUPPORTED_LANGUAGES = ("ko", "en")


class _KeepMissing(dict[str, Any]):
    """format_map에서 누락된 키를 자리표시자로 유지"""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def get_default_language() -> str:
    """ERROR_LANGUAGE 환경변수 기준 기본 언어 (지원하지 않는 값이면 "ko")"""
    lang = os.getenv("ERROR_LANGUAGE", "ko")
    return lang if lang in SUPPORTED_LANGUAGES else "ko"


def _resolve(lang: str | None) -> str:
    return get_default_language() if lang is None else lang


def get_error_message(error_code: str, lang: str | None = None, **context: Any) -> str:
    """
    포맷팅된 에러 메시지

    Example:
        >>> get_error_message("SEARCH-002", lang="en", timeout=10)
        'Search task timed out (exceeded 10s)'
    """
    template = get_message_template(error_code, _resolve(lang))
    return template.format_map(_KeepMissing(context))


def get_error_solutions(error_code: str, lang: str | None = None) -> list[str]:
    """에러 해결 방법 목록"""
    return get_solutions_list(error_code, _resolve(lang))


def format_error_response(
    error_code: str,
    lang: str | None = None,
    include_solutions: bool = True,
    **context: Any,
) -> dict[str, Any]:
    """
    에러 응답 dict 생성

    Args:
        error_code: 에러 코드 (예: "CACHE-001")
        lang: "ko" 또는 "en" (None이면 기본 언어)
        include_solutions: 해결 방법 포함 여부
        **context: 메시지 자리표시자 값

    Returns:
        {"error_code", "message"[, "solutions"]}
    """
    lang = _resolve(lang)
    response: dict[str, Any] = {
        "error_code": error_code,
        "message": get_error_message(error_code, lang, **context),
    }
    if include_solutions:
        response["solutions"] = get_error_solutions(error_code, lang)
    return response


def get_all_error_codes() -> list[str]:
    """등록된 전체 에러 코드 (정렬)"""
    return sorted(ERROR_MESSAGES)


def get_error_codes_by_domain(domain: str) -> list[str]:
    """도메인 접두사(예: "CACHE")에 해당하는 에러 코드"""
    return sorted(code for code in ERROR_MESSAGES if code.split("-", 1)[0] == domain)
