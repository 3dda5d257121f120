"""
Query Utilities
쿼리 정규화 및 캐시 키 해시 유틸리티
"""

import re
from hashlib import sha256


class QueryNormalizer:
    """
    쿼리 정규화 유틸리티

    임베딩 캐시, 결과 캐시, 쿼리 필터가 모두 같은 규칙을 사용해야
    "What properties?"와 "what  properties? "가 한쪽 캐시에서만 병합되는 일이 없습니다.
    """

    # 공백 정규화 패턴
    WHITESPACE_PATTERN = re.compile(r"\s+")

    @staticmethod
    def normalize(query: str) -> str:
        """
        쿼리 정규화 (앞뒤 공백 제거, 소문자 변환, 연속 공백 축약)

        Args:
            query: 원본 쿼리

        Returns:
            정규화된 쿼리 문자열
        """
        if not query:
            return ""

        normalized = query.strip().lower()
        return QueryNormalizer.WHITESPACE_PATTERN.sub(" ", normalized)

    @staticmethod
    def digest(text: str) -> str:
        """
        SHA256 해시 (hex)

        Args:
            text: 해시할 문자열

        Returns:
            64자리 hex 문자열
        """
        return sha256(text.encode("utf-8")).hexdigest()


def normalize_query(query: str) -> str:
    """QueryNormalizer.normalize 단축 함수"""
    return QueryNormalizer.normalize(query)
