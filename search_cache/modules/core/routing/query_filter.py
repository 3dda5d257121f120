"""
SmartQueryFilter - 임베딩 검색이 필요 없는 대화성 쿼리 필터

인사말, 감사, 작별, 짧은 맞장구(ok/yes/no)처럼 문서 검색이 의미 없는 쿼리를 걸러내
임베딩 프로바이더와 검색 백엔드 호출을 생략합니다.

매칭 규칙:
- 쿼리 정규화 후 끝의 문장부호(. ! ? , ~)를 제거한 문자열이 허용 목록과 정확히 일치해야 필터링
- 부분 일치는 하지 않음 ("no parking near the property"는 검색 대상)
- 빈 쿼리는 검색 대상 아님

성능 목표: 해시 조회 1회 (< 1ms)
"""

from dataclasses import dataclass

from ....lib.logger import get_logger
from ....lib.query_utils import QueryNormalizer

logger = get_logger(__name__)

# 카테고리별 필러 문구 (정규화된 형태)
DEFAULT_FILLER_PHRASES: dict[str, tuple[str, ...]] = {
    "greeting": (
        "hi",
        "hello",
        "hey",
        "hi there",
        "hello there",
        "good morning",
        "good afternoon",
        "good evening",
        "안녕",
        "안녕하세요",
    ),
    "thanks": (
        "thanks",
        "thank you",
        "thank you so much",
        "thanks a lot",
        "thx",
        "ty",
        "고마워",
        "감사합니다",
    ),
    "farewell": (
        "bye",
        "goodbye",
        "bye bye",
        "see you",
        "see you later",
        "good night",
        "잘가",
        "안녕히 계세요",
    ),
    "acknowledgement": (
        "ok",
        "okay",
        "k",
        "got it",
        "i see",
        "cool",
        "great",
        "nice",
        "alright",
        "알겠습니다",
    ),
    "affirmation": (
        "yes",
        "yeah",
        "yep",
        "sure",
        "of course",
        "네",
        "예",
    ),
    "negation": (
        "no",
        "nope",
        "nah",
        "no thanks",
        "no thank you",
        "아니요",
    ),
}

# 카테고리별 기본 응답
DEFAULT_RESPONSES: dict[str, str] = {
    "greeting": "Hello! How can I help you today?",
    "thanks": "You're welcome! Let me know if there's anything else I can help with.",
    "farewell": "Goodbye! Feel free to come back anytime.",
    "acknowledgement": "Great! Is there anything else you'd like to know?",
    "affirmation": "Sure! What would you like to know more about?",
    "negation": "No problem. Let me know if you need anything else.",
}

# 필러가 아닌 쿼리에 대한 일반 응답 (프로바이더 장애 시 폴백으로도 사용)
FALLBACK_RESPONSE = "I'm here to help. Could you tell me a bit more about what you're looking for?"

TRAILING_PUNCTUATION = ".!?,~ "


@dataclass
class FilterMatch:
    """
    필터 매칭 결과

    Attributes:
        category: 매칭된 카테고리 (예: "greeting", "thanks")
        phrase: 매칭된 정규화 문구
        default_response: 즉시 응답할 텍스트
    """

    category: str
    phrase: str
    default_response: str


class SmartQueryFilter:
    """
    대화성 쿼리 분류기

    사용 예시:
        query_filter = SmartQueryFilter()
        if not query_filter.needs_embedding_search("thank you"):
            return query_filter.get_default_response("thank you")
    """

    def __init__(
        self,
        enabled: bool = True,
        extra_phrases: dict[str, list[str]] | None = None,
        responses: dict[str, str] | None = None,
    ):
        """
        Args:
            enabled: False면 모든 쿼리를 검색 대상으로 처리
            extra_phrases: 카테고리별 추가 필러 문구 (새 카테고리도 허용)
            responses: 카테고리별 응답 덮어쓰기
        """
        self.enabled = enabled
        self.responses = {**DEFAULT_RESPONSES, **(responses or {})}

        # 정규화 문구 → 카테고리 (먼저 등록된 카테고리 우선)
        self._phrase_index: dict[str, str] = {}
        for category, phrases in DEFAULT_FILLER_PHRASES.items():
            self._register(category, phrases)
        for category, phrases in (extra_phrases or {}).items():
            self._register(category, phrases)

        self._stats = {"total_checks": 0, "filtered": 0}

        logger.info(
            f"🔀 SmartQueryFilter initialized (enabled={enabled}, "
            f"phrases={len(self._phrase_index)})"
        )

    def _register(self, category: str, phrases: tuple[str, ...] | list[str]) -> None:
        for phrase in phrases:
            key = self._canonical(phrase)
            if key:
                self._phrase_index.setdefault(key, category)

    @staticmethod
    def _canonical(query: str) -> str:
        """정규화 + 끝 문장부호 제거"""
        normalized = QueryNormalizer.normalize(query)
        return normalized.rstrip(TRAILING_PUNCTUATION)

    def match(self, query: str) -> FilterMatch | None:
        """
        필러 문구 매칭

        Returns:
            매칭 결과 (필러가 아니면 None)
        """
        if not self.enabled or not isinstance(query, str):
            return None

        key = self._canonical(query)
        category = self._phrase_index.get(key)
        if category is None:
            return None

        return FilterMatch(
            category=category,
            phrase=key,
            default_response=self.responses.get(category, FALLBACK_RESPONSE),
        )

    def needs_embedding_search(self, query: str) -> bool:
        """
        임베딩 검색 필요 여부

        Args:
            query: 사용자 쿼리

        Returns:
            필러 문구나 빈 쿼리면 False, 그 외 True
        """
        self._stats["total_checks"] += 1
        is_empty = not isinstance(query, str) or not self._canonical(query)
        if not is_empty and self.match(query) is None:
            return True

        self._stats["filtered"] += 1
        logger.debug(f"검색 생략 쿼리: {str(query)[:30]}")
        return False

    def get_default_response(self, query: str) -> str:
        """
        쿼리에 대한 기본 응답 (필러가 아니어도 항상 비어있지 않은 문자열)

        Args:
            query: 사용자 쿼리

        Returns:
            카테고리 응답 또는 일반 응답
        """
        matched = self.match(query)
        if matched is None:
            return FALLBACK_RESPONSE
        return matched.default_response

    def get_categories(self) -> list[str]:
        """등록된 카테고리 목록"""
        return sorted(set(self._phrase_index.values()))

    def get_stats(self) -> dict[str, int]:
        """필터 통계 반환"""
        return dict(self._stats)
