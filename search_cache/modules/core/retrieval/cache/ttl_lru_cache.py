"""
TTL LRU Cache
임베딩 캐시와 결과 캐시가 공유하는 제네릭 LRU+TTL 저장소

MemoryCacheManager의 LRUCache + 만료 시간 추적 로직을 제네릭 클래스로 일반화한 모듈입니다.

특징:
- cachetools.LRUCache 기반 O(1) 조회/저장/퇴출
- 엔트리별 만료 시간 (조회 시점에 지연 만료, 백그라운드 정리 없음)
- 인스턴스당 하나의 Lock으로 recency 구조 갱신을 원자적으로 처리
- 주입 가능한 timer (테스트에서 가짜 시계 사용)
"""

import threading
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from cachetools import Cache, LRUCache

from .....lib.logger import get_logger
from .....lib.types import CacheStatsDict

logger = get_logger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class CacheEntry(Generic[V]):
    """
    캐시 엔트리

    Attributes:
        value: 저장된 값
        expires_at: 만료 시각 (timer 기준 초, None이면 만료 없음)
        last_accessed: 마지막 조회/저장 시각
    """

    value: V
    expires_at: float | None
    last_accessed: float

    def is_expired(self, now: float) -> bool:
        """now 시점에 논리적으로 존재하지 않는 엔트리인지 여부"""
        return self.expires_at is not None and now >= self.expires_at


class _RecencyStore(LRUCache):
    """퇴출 시 콜백을 호출하는 LRUCache"""

    def __init__(self, maxsize: int, on_evict: Callable[[Any, CacheEntry], None]):
        super().__init__(maxsize=maxsize)
        self._on_evict = on_evict

    def popitem(self) -> tuple[Any, CacheEntry]:
        key, entry = super().popitem()
        self._on_evict(key, entry)
        return key, entry


class TTLLRUCache(Generic[K, V]):
    """
    제네릭 LRU+TTL 캐시

    - get: 없는 키와 만료된 키는 None (만료 엔트리는 미스로 집계 후 즉시 제거)
    - set: 기존 키는 값/TTL 갱신 + 최신 사용으로 표시
    - 새 키 삽입으로 용량을 넘으면 가장 오래 사용되지 않은 엔트리 1개를 퇴출
    """

    def __init__(
        self,
        max_size: int,
        ttl_ms: int | None = None,
        timer: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ):
        """
        Args:
            max_size: 최대 엔트리 수 (양의 정수)
            ttl_ms: 기본 TTL (밀리초, None이면 만료 없음, 0이면 즉시 만료)
            timer: 초 단위 시각을 반환하는 함수
            name: 로그/통계용 캐시 이름

        Raises:
            ValueError: max_size가 양의 정수가 아니거나 ttl_ms가 음수인 경우
        """
        if isinstance(max_size, bool) or not isinstance(max_size, int) or max_size <= 0:
            raise ValueError(f"max_size must be a positive integer, got {max_size!r}")
        self._validate_ttl(ttl_ms)

        self.name = name
        self.max_size = max_size
        self.default_ttl_ms = ttl_ms
        self._timer = timer
        self._lock = threading.Lock()
        self._store: LRUCache[K, CacheEntry[V]] = _RecencyStore(max_size, self._on_evict)
        self._stats = self._empty_stats()

    @staticmethod
    def _validate_ttl(ttl_ms: int | None) -> None:
        if ttl_ms is not None and ttl_ms < 0:
            raise ValueError(f"ttl_ms must be zero or greater, got {ttl_ms!r}")

    @staticmethod
    def _empty_stats() -> dict[str, int]:
        return {
            "hits": 0,
            "misses": 0,
            "sets": 0,
            "evictions": 0,
            "expirations": 0,
            "invalidations": 0,
        }

    def _peek(self, key: K) -> CacheEntry[V] | None:
        """recency를 갱신하지 않고 엔트리 조회 (Lock 보유 상태에서 호출)"""
        if key not in self._store:
            return None
        entry: CacheEntry[V] = Cache.__getitem__(self._store, key)
        return entry

    def _on_evict(self, key: K, entry: CacheEntry[V]) -> None:
        # LRUCache.__setitem__ 내부에서 호출되므로 이미 Lock 보유 상태
        if entry.is_expired(self._timer()):
            self._stats["expirations"] += 1
        else:
            self._stats["evictions"] += 1
        logger.debug(f"{self.name} LRU 퇴출: {str(key)[:32]}")

    def _purge_expired_locked(self, now: float) -> int:
        """만료 엔트리 제거 (Lock 보유 상태에서 호출)"""
        expired = [
            key
            for key in list(self._store.keys())
            if (entry := self._peek(key)) is not None and entry.is_expired(now)
        ]
        for key in expired:
            del self._store[key]
        self._stats["expirations"] += len(expired)
        return len(expired)

    def get(self, key: K, accept: Callable[[V], bool] | None = None) -> V | None:
        """
        값 조회

        Args:
            key: 캐시 키
            accept: 저장된 값을 히트로 인정할지 판단하는 함수 (False면 미스, 엔트리는 유지)

        Returns:
            저장된 값 (없거나 만료되었거나 accept가 거부하면 None)
        """
        with self._lock:
            now = self._timer()
            entry = self._peek(key)

            if entry is None:
                self._stats["misses"] += 1
                return None

            if entry.is_expired(now):
                del self._store[key]
                self._stats["expirations"] += 1
                self._stats["misses"] += 1
                logger.debug(f"{self.name} 캐시 만료: {str(key)[:32]}")
                return None

            if accept is not None and not accept(entry.value):
                self._stats["misses"] += 1
                return None

            # LRUCache.__getitem__이 recency를 갱신
            entry = self._store[key]
            entry.last_accessed = now
            self._stats["hits"] += 1
            return entry.value

    def set(self, key: K, value: V, ttl_ms: int | None = None) -> None:
        """
        값 저장

        Args:
            key: 캐시 키
            value: 저장할 값
            ttl_ms: 이 엔트리의 TTL (None이면 기본 TTL 사용)
        """
        self._validate_ttl(ttl_ms)
        effective_ttl = ttl_ms if ttl_ms is not None else self.default_ttl_ms

        with self._lock:
            now = self._timer()
            # 용량 초과 퇴출은 유효 엔트리 중 LRU만 대상
            if key not in self._store and len(self._store) >= self.max_size:
                self._purge_expired_locked(now)
            expires_at = None if effective_ttl is None else now + effective_ttl / 1000.0
            self._store[key] = CacheEntry(value=value, expires_at=expires_at, last_accessed=now)
            self._stats["sets"] += 1

    def delete(self, key: K) -> bool:
        """
        특정 키 삭제

        Returns:
            삭제된 엔트리가 있었는지 여부
        """
        with self._lock:
            if key not in self._store:
                return False
            del self._store[key]
            self._stats["invalidations"] += 1
            return True

    def delete_where(self, predicate: Callable[[K], bool]) -> int:
        """
        조건에 맞는 키를 모두 삭제

        Args:
            predicate: 키를 받아 삭제 여부를 반환하는 함수

        Returns:
            삭제된 엔트리 수
        """
        with self._lock:
            targets = [key for key in list(self._store.keys()) if predicate(key)]
            for key in targets:
                del self._store[key]
            self._stats["invalidations"] += len(targets)
            return len(targets)

    def purge_expired(self) -> int:
        """
        만료된 엔트리를 모두 제거

        Returns:
            제거된 엔트리 수
        """
        with self._lock:
            return self._purge_expired_locked(self._timer())

    def clear(self) -> None:
        """전체 엔트리 및 통계 초기화"""
        with self._lock:
            # MutableMapping.clear()는 popitem()을 반복 호출하므로 퇴출 콜백을 피해 새 저장소로 교체
            self._store = _RecencyStore(self.max_size, self._on_evict)
            self._stats = self._empty_stats()
        logger.info(f"{self.name} 캐시 전체 클리어")

    def keys(self) -> list[K]:
        """만료되지 않은 키 목록 (recency 갱신 없음)"""
        with self._lock:
            now = self._timer()
            return [
                key
                for key in list(self._store.keys())
                if (entry := self._peek(key)) is not None and not entry.is_expired(now)
            ]

    def __len__(self) -> int:
        return len(self.keys())

    def __contains__(self, key: object) -> bool:
        with self._lock:
            entry = self._peek(key)  # type: ignore[arg-type]
            return entry is not None and not entry.is_expired(self._timer())

    def get_stats(self) -> CacheStatsDict:
        """
        캐시 통계 반환

        Returns:
            히트/미스, 히트율, 현재 유효 엔트리 수 등
        """
        size = len(self)
        with self._lock:
            hits = self._stats["hits"]
            misses = self._stats["misses"]
            total_requests = hits + misses
            hit_rate = hits / total_requests if total_requests > 0 else 0.0

            return {
                "hits": hits,
                "misses": misses,
                "hit_rate": round(hit_rate, 4),
                "size": size,
                "max_size": self.max_size,
                "sets": self._stats["sets"],
                "evictions": self._stats["evictions"],
                "expirations": self._stats["expirations"],
                "invalidations": self._stats["invalidations"],
            }
