"""에러 메시지 및 해결 방법 저장소.

에러 코드별 한국어/영어 메시지 템플릿과 해결 방법 목록입니다.
"""

from typing import Any


# 에러 메시지 저장소: {error_code: {"ko": "한국어 메시지", "en": "English message"}}
ERROR_MESSAGES: dict[str, dict[str, str]] = {
    # CACHE (캐시)
    "CACHE-001": {
        "ko": "지원하지 않는 캐시 프로바이더입니다: {provider}",
        "en": "Unsupported cache provider: {provider}",
    },
    "CACHE-002": {
        "ko": "캐시 생성 실패: {reason}",
        "en": "Failed to create cache: {reason}",
    },
    # EMBEDDING (임베딩)
    "EMBEDDING-001": {
        "ko": "임베딩 프로바이더가 설정되지 않았습니다",
        "en": "Embedding provider is not configured",
    },
    "EMBEDDING-002": {
        "ko": "임베딩 배치 요청 실패 (배치 {batch_index}/{batch_count}): {reason}",
        "en": "Embedding batch request failed (batch {batch_index}/{batch_count}): {reason}",
    },
    "EMBEDDING-003": {
        "ko": "임베딩 입력이 올바르지 않습니다: {reason}",
        "en": "Invalid embedding input: {reason}",
    },
    "EMBEDDING-004": {
        "ko": "임베딩 응답 벡터 수 불일치: 요청 {expected}개, 응답 {actual}개",
        "en": "Embedding response size mismatch: requested {expected}, received {actual}",
    },
    # SEARCH (검색)
    "SEARCH-001": {
        "ko": "유사도 검색 실패: {reason}",
        "en": "Similarity search failed: {reason}",
    },
    "SEARCH-002": {
        "ko": "검색 작업 타임아웃 ({timeout}초 초과)",
        "en": "Search task timed out (exceeded {timeout}s)",
    },
    "SEARCH-003": {
        "ko": "잘못된 검색 요청: {reason}",
        "en": "Invalid search request: {reason}",
    },
    # CONFIG (설정)
    "CONFIG-001": {
        "ko": "설정 파일을 찾을 수 없습니다: {config_file}",
        "en": "Configuration file not found: {config_file}",
    },
    "CONFIG-002": {
        "ko": "설정 파일 파싱 실패: {config_file}",
        "en": "Failed to parse configuration file: {config_file}",
    },
    "CONFIG-003": {
        "ko": "설정 검증 실패: {validation_errors}",
        "en": "Configuration validation failed: {validation_errors}",
    },
    "CONFIG-004": {
        "ko": "잘못된 설정 형식 (최상위는 매핑이어야 함): {config_file}",
        "en": "Invalid configuration format (top level must be a mapping): {config_file}",
    },
    # GENERAL (일반)
    "GENERAL-001": {
        "ko": "알 수 없는 오류가 발생했습니다",
        "en": "An unknown error occurred",
    },
    "GENERAL-002": {
        "ko": "입력 검증 오류: {reason}",
        "en": "Validation error: {reason}",
    },
}


# 에러 해결 방법 저장소: {error_code: {"ko": [...], "en": [...]}}
ERROR_SOLUTIONS: dict[str, dict[str, list[str]]] = {
    # CACHE (캐시)
    "CACHE-001": {
        "ko": [
            "cache.provider 설정값을 'memory'로 지정하세요",
            "다중 프로세스 환경은 같은 인터페이스의 외부 저장소 구현체를 주입하세요",
        ],
        "en": [
            "Set cache.provider to 'memory'",
            "Inject an external store with the same interface for multi-process deployments",
        ],
    },
    "CACHE-002": {
        "ko": [
            "max_size가 양의 정수인지 확인하세요",
            "ttl_ms가 0 이상인지 확인하세요",
        ],
        "en": [
            "Verify max_size is a positive integer",
            "Verify ttl_ms is zero or greater",
        ],
    },
    # EMBEDDING (임베딩)
    "EMBEDDING-001": {
        "ko": [
            "OPENAI_API_KEY 환경 변수를 설정하세요",
            "SearchOrchestrator 생성 시 embedding_provider를 주입하세요",
        ],
        "en": [
            "Set OPENAI_API_KEY environment variable",
            "Inject embedding_provider when creating SearchOrchestrator",
        ],
    },
    "EMBEDDING-002": {
        "ko": [
            "임베딩 프로바이더 상태와 API 할당량을 확인하세요",
            "batch.max_batch_size가 프로바이더 한도 이하인지 확인하세요",
            "잠시 후 다시 시도하세요",
        ],
        "en": [
            "Check embedding provider status and API quota",
            "Verify batch.max_batch_size does not exceed the provider limit",
            "Retry after a short delay",
        ],
    },
    "EMBEDDING-003": {
        "ko": [
            "모든 쿼리가 문자열인지 확인하세요",
        ],
        "en": [
            "Verify every query is a string",
        ],
    },
    "EMBEDDING-004": {
        "ko": [
            "프로바이더 응답 형식을 확인하세요",
            "서버 로그를 확인하여 자세한 오류를 파악하세요",
        ],
        "en": [
            "Verify the provider response format",
            "Check server logs for detailed error information",
        ],
    },
    # SEARCH (검색)
    "SEARCH-001": {
        "ko": [
            "검색 백엔드 연결을 확인하세요",
            "서버 로그를 확인하여 자세한 오류를 파악하세요",
        ],
        "en": [
            "Verify search backend connection",
            "Check server logs for detailed error information",
        ],
    },
    "SEARCH-002": {
        "ko": [
            "parallel_search.task_timeout_seconds 값을 늘려보세요",
            "검색 백엔드 응답 시간을 확인하세요",
        ],
        "en": [
            "Increase parallel_search.task_timeout_seconds",
            "Check search backend response time",
        ],
    },
    "SEARCH-003": {
        "ko": [
            "top_k가 양의 정수인지 확인하세요",
            "tenant_id가 비어있지 않은지 확인하세요",
        ],
        "en": [
            "Verify top_k is a positive integer",
            "Verify tenant_id is not empty",
        ],
    },
    # CONFIG (설정)
    "CONFIG-001": {
        "ko": [
            "SEARCH_CACHE_CONFIG 환경 변수의 경로를 확인하세요",
            "설정 파일이 존재하는지 확인하세요",
        ],
        "en": [
            "Verify the path in SEARCH_CACHE_CONFIG environment variable",
            "Verify the configuration file exists",
        ],
    },
    "CONFIG-002": {
        "ko": [
            "YAML 문법을 확인하세요",
            "최상위 요소가 매핑(dict)인지 확인하세요",
        ],
        "en": [
            "Check YAML syntax",
            "Verify the top-level element is a mapping",
        ],
    },
    "CONFIG-003": {
        "ko": [
            "설정값의 타입과 범위를 확인하세요",
            "default.yaml을 참고하여 필드명을 확인하세요",
        ],
        "en": [
            "Verify types and ranges of configuration values",
            "Check field names against default.yaml",
        ],
    },
    "CONFIG-004": {
        "ko": [
            "설정 파일의 최상위 요소가 섹션 매핑인지 확인하세요",
        ],
        "en": [
            "Verify the top-level element of the configuration file is a mapping of sections",
        ],
    },
    # GENERAL (일반)
    "GENERAL-001": {
        "ko": [
            "서버 로그를 확인하여 자세한 오류를 파악하세요",
            "시스템 관리자에게 문의하세요",
        ],
        "en": [
            "Check server logs for detailed error information",
            "Contact system administrator",
        ],
    },
    "GENERAL-002": {
        "ko": [
            "입력 데이터 형식을 확인하세요",
        ],
        "en": [
            "Verify input data format",
        ],
    },
}


def _lookup(table: dict[str, dict[str, Any]], error_code: str, lang: str) -> Any:
    """코드/언어 조회 (없는 코드는 KeyError, 지원하지 않는 언어는 ValueError)"""
    entry = table.get(error_code)
    if entry is None:
        raise KeyError(f"Unknown error code: {error_code}")
    if lang not in entry:
        raise ValueError(f"Unsupported language: {lang}")
    return entry[lang]


def get_message_template(error_code: str, lang: str = "ko") -> str:
    """에러 메시지 템플릿 (자리표시자 포함)"""
    return str(_lookup(ERROR_MESSAGES, error_code, lang))


def get_solutions_list(error_code: str, lang: str = "ko") -> list[str]:
    """에러 해결 방법 목록 (복사본)"""
    return list(_lookup(ERROR_SOLUTIONS, error_code, lang))
