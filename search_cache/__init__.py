"""
Search Cache - 쿼리 임베딩 캐시 및 검색 최적화 레이어

벡터 유사도 검색 백엔드 앞단에서 임베딩 생성 비용과 검색 지연을 줄이는 라이브러리입니다.

주요 구성:
- SmartQueryFilter: 검색이 필요 없는 대화성 쿼리 필터링
- EmbeddingCache: 쿼리 → 임베딩 벡터 LRU+TTL 캐시
- ResultCache: (테넌트, 쿼리) → 검색 결과 LRU+TTL 캐시 (테넌트 단위 무효화)
- BatchEmbeddingProcessor: 프로바이더 배치 한도를 지키는 배치 임베딩
- ParallelEmbeddingSearch: 독립 검색 병렬 실행 (작업별 실패 격리)
- SearchOrchestrator: 위 구성요소를 하나의 요청 경로로 조율
"""

__version__ = "1.0.0"
