"""에러 코드 정의 모듈.

검색 캐시 레이어의 모든 에러 코드를 Enum으로 정의합니다.
도메인별로 그룹화되어 있어 에러 분류 및 추적이 용이합니다.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """검색 캐시 레이어 에러 코드 Enum.

    형식: {DOMAIN}-{NUMBER}
    - CACHE: 캐시 구성/생성
    - EMBEDDING: 임베딩 프로바이더 호출
    - SEARCH: 유사도 검색
    - CONFIG: 설정 관리
    - GENERAL: 일반 오류
    """

    # CACHE (캐시) - 2개
    CACHE_001 = "CACHE-001"  # 지원하지 않는 캐시 프로바이더
    CACHE_002 = "CACHE-002"  # 캐시 생성 실패

    # EMBEDDING (임베딩) - 4개
    EMBEDDING_001 = "EMBEDDING-001"  # 임베딩 프로바이더 미설정/초기화 실패
    EMBEDDING_002 = "EMBEDDING-002"  # 배치 임베딩 요청 실패
    EMBEDDING_003 = "EMBEDDING-003"  # 잘못된 입력 (문자열이 아닌 쿼리 등)
    EMBEDDING_004 = "EMBEDDING-004"  # 응답 벡터 수 불일치

    # SEARCH (검색) - 3개
    SEARCH_001 = "SEARCH-001"  # 검색 백엔드 호출 실패
    SEARCH_002 = "SEARCH-002"  # 검색 작업 타임아웃
    SEARCH_003 = "SEARCH-003"  # 잘못된 검색 요청 (top_k 등)

    # CONFIG (설정) - 4개
    CONFIG_001 = "CONFIG-001"  # 설정 파일을 찾을 수 없음
    CONFIG_002 = "CONFIG-002"  # 설정 파일 파싱 실패
    CONFIG_003 = "CONFIG-003"  # 설정 검증 실패
    CONFIG_004 = "CONFIG-004"  # 잘못된 설정 형식

    # GENERAL (일반) - 2개
    GENERAL_001 = "GENERAL-001"  # 알 수 없는 오류
    GENERAL_002 = "GENERAL-002"  # 검증 오류

    # === 별칭 ===
    PROVIDER_BATCH_FAILED = "EMBEDDING-002"  # 프로바이더 배치 실패
    SEARCH_TASK_TIMEOUT = "SEARCH-002"  # 검색 작업 타임아웃
