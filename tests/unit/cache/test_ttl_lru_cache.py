"""
TTLLRUCache 단위 테스트

제네릭 LRU+TTL 저장소 검증.

테스트 케이스:
1. 저장/조회 및 TTL 만료 (만료 읽기는 미스 + 즉시 제거)
2. LRU 퇴출 순서 (조회/저장 모두 최신 사용으로 표시)
3. 통계 (히트율, 유효 엔트리 수, 퇴출/만료/무효화 카운터)
4. 생성 인자 검증
5. 조건 삭제, 만료 일괄 정리, 클리어
6. accept 조건 조회, 다중 스레드 동시 접근
"""

import threading

import pytest

from search_cache.modules.core.retrieval.cache.ttl_lru_cache import CacheEntry, TTLLRUCache


@pytest.fixture
def cache(fake_clock) -> TTLLRUCache[str, int]:
    return TTLLRUCache(max_size=3, ttl_ms=1000, timer=fake_clock, name="test")


class TestCacheEntry:
    """CacheEntry 만료 경계 테스트"""

    def test_entry_without_expiry_never_expires(self):
        entry = CacheEntry(value=1, expires_at=None, last_accessed=0.0)
        assert entry.is_expired(10**9) is False

    def test_entry_expires_at_boundary(self):
        """now >= expires_at 이면 만료"""
        entry = CacheEntry(value=1, expires_at=5.0, last_accessed=0.0)
        assert entry.is_expired(4.999) is False
        assert entry.is_expired(5.0) is True


class TestGetSet:
    """저장/조회 및 TTL 테스트"""

    def test_get_missing_returns_none(self, cache):
        assert cache.get("missing") is None

    def test_set_then_get_before_ttl(self, cache, fake_clock):
        cache.set("q", 1)
        fake_clock.advance_ms(999)
        assert cache.get("q") == 1

    def test_get_after_ttl_is_absent(self, cache, fake_clock):
        cache.set("q", 1)
        fake_clock.advance_ms(1001)
        assert cache.get("q") is None
        assert "q" not in cache

    def test_expired_read_counts_as_miss_and_purges(self, cache, fake_clock):
        cache.set("q", 1)
        fake_clock.advance_ms(1500)

        assert cache.get("q") is None
        stats = cache.get_stats()
        assert stats["misses"] == 1
        assert stats["hits"] == 0
        assert stats["expirations"] == 1
        assert stats["size"] == 0

    def test_ttl_zero_is_stale_immediately(self, fake_clock):
        cache = TTLLRUCache(max_size=3, ttl_ms=0, timer=fake_clock)
        cache.set("q", 1)
        assert cache.get("q") is None

    def test_none_ttl_never_expires(self, fake_clock):
        cache = TTLLRUCache(max_size=3, ttl_ms=None, timer=fake_clock)
        cache.set("q", 1)
        fake_clock.advance_ms(10**9)
        assert cache.get("q") == 1

    def test_overwrite_replaces_value_and_resets_ttl(self, cache, fake_clock):
        cache.set("q", 1)
        fake_clock.advance_ms(800)
        cache.set("q", 2)
        fake_clock.advance_ms(800)

        assert cache.get("q") == 2
        assert len(cache) == 1

    def test_per_entry_ttl_override(self, cache, fake_clock):
        cache.set("short", 1, ttl_ms=100)
        cache.set("default", 2)
        fake_clock.advance_ms(200)

        assert cache.get("short") is None
        assert cache.get("default") == 2


class TestLRUEviction:
    """LRU 퇴출 테스트"""

    def test_least_recently_used_is_evicted(self, cache):
        """용량 3: q1,q2,q3 저장 → q1,q3 조회 → q4 저장 시 q2 퇴출"""
        cache.set("q1", 1)
        cache.set("q2", 2)
        cache.set("q3", 3)
        cache.get("q1")
        cache.get("q3")

        cache.set("q4", 4)

        assert cache.get("q1") == 1
        assert cache.get("q2") is None
        assert cache.get("q3") == 3
        assert cache.get("q4") == 4
        assert cache.get_stats()["evictions"] == 1

    def test_set_marks_key_recently_used(self, cache):
        cache.set("q1", 1)
        cache.set("q2", 2)
        cache.set("q3", 3)
        cache.set("q1", 10)

        cache.set("q4", 4)

        assert cache.get("q1") == 10
        assert cache.get("q2") is None

    def test_capacity_one(self, fake_clock):
        cache = TTLLRUCache(max_size=1, ttl_ms=None, timer=fake_clock)
        cache.set("a", 1)
        cache.set("b", 2)

        assert cache.get("a") is None
        assert cache.get("b") == 2

    def test_contains_does_not_touch_recency(self, cache):
        cache.set("q1", 1)
        cache.set("q2", 2)
        cache.set("q3", 3)

        assert "q1" in cache
        cache.set("q4", 4)

        assert "q1" not in cache
        assert cache.get_stats()["hits"] == 0

    def test_evicting_expired_entry_counts_as_expiration(self, cache, fake_clock):
        cache.set("old", 1, ttl_ms=10)
        cache.set("q2", 2)
        cache.set("q3", 3)
        fake_clock.advance_ms(20)

        cache.set("q4", 4)

        stats = cache.get_stats()
        assert stats["expirations"] == 1
        assert stats["evictions"] == 0

    def test_expired_entry_is_dropped_before_live_lru_entry(self, fake_clock):
        """
        최근 조회된 a가 만료되고 b는 유효한 상태에서 c 저장 시
        유효한 b 대신 만료된 a가 제거되어야 함
        """
        cache = TTLLRUCache(max_size=2, ttl_ms=1000, timer=fake_clock)
        cache.set("a", 1)
        fake_clock.advance_ms(500)
        cache.set("b", 2)
        fake_clock.advance_ms(400)
        assert cache.get("a") == 1
        fake_clock.advance_ms(300)

        cache.set("c", 3)

        assert cache.get("b") == 2
        assert cache.get("c") == 3
        assert "a" not in cache
        stats = cache.get_stats()
        assert stats["evictions"] == 0
        assert stats["expirations"] == 1

    def test_live_lru_entry_evicted_when_nothing_expired(self, fake_clock):
        cache = TTLLRUCache(max_size=2, ttl_ms=1000, timer=fake_clock)
        cache.set("a", 1)
        cache.set("b", 2)
        fake_clock.advance_ms(100)

        cache.set("c", 3)

        assert "a" not in cache
        assert cache.keys() == ["b", "c"]
        assert cache.get_stats()["evictions"] == 1


class TestAcceptPredicate:
    """조회 시 저장 값 검사 (accept) 테스트"""

    def test_rejected_entry_is_miss_and_kept(self, cache):
        cache.set("q", 3)

        assert cache.get("q", accept=lambda value: value >= 5) is None
        assert "q" in cache
        assert cache.get("q", accept=lambda value: value >= 2) == 3

        stats = cache.get_stats()
        assert stats["misses"] == 1
        assert stats["hits"] == 1

    def test_rejected_entry_does_not_touch_recency(self, cache):
        cache.set("q1", 1)
        cache.set("q2", 2)
        cache.set("q3", 3)

        cache.get("q1", accept=lambda value: False)
        cache.set("q4", 4)

        assert "q1" not in cache
        assert "q2" in cache


class TestThreadSafety:
    """여러 스레드에서 동시 조회/저장 테스트"""

    def test_concurrent_get_set_keeps_capacity_and_counts(self, fake_clock):
        cache = TTLLRUCache(max_size=5, ttl_ms=None, timer=fake_clock)
        thread_count = 8
        rounds = 500
        barrier = threading.Barrier(thread_count)
        errors: list[BaseException] = []

        def worker(worker_id: int) -> None:
            barrier.wait()
            try:
                for i in range(rounds):
                    key = f"k{(worker_id * 7 + i) % 20}"
                    cache.set(key, i)
                    cache.get(key)
                    cache.get(f"k{(i * 3) % 20}")
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(thread_count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        stats = cache.get_stats()
        assert len(cache) <= 5
        assert stats["size"] <= stats["max_size"]
        assert stats["hits"] + stats["misses"] == thread_count * rounds * 2
        assert stats["sets"] == thread_count * rounds
        # 새 키 저장마다 최대 1개 퇴출
        assert stats["evictions"] <= stats["sets"]


class TestStats:
    """통계 테스트"""

    def test_one_set_one_hit_one_miss(self, cache):
        cache.set("query1", 1)
        cache.get("query1")
        cache.get("query2")

        stats = cache.get_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 0.5
        assert stats["size"] == 1
        assert stats["sets"] == 1
        assert stats["max_size"] == 3

    def test_hit_rate_zero_without_requests(self, cache):
        assert cache.get_stats()["hit_rate"] == 0.0

    def test_size_excludes_expired_entries(self, cache, fake_clock):
        cache.set("a", 1, ttl_ms=10)
        cache.set("b", 2)
        fake_clock.advance_ms(20)

        assert cache.get_stats()["size"] == 1
        assert cache.keys() == ["b"]


class TestValidation:
    """생성 인자 검증 테스트"""

    @pytest.mark.parametrize("max_size", [0, -1, 1.5, "10", True, None])
    def test_invalid_max_size_rejected(self, max_size):
        with pytest.raises(ValueError):
            TTLLRUCache(max_size=max_size)

    def test_negative_ttl_rejected(self):
        with pytest.raises(ValueError):
            TTLLRUCache(max_size=1, ttl_ms=-1)

    def test_negative_per_entry_ttl_rejected(self, cache):
        with pytest.raises(ValueError):
            cache.set("q", 1, ttl_ms=-5)


class TestBulkOperations:
    """조건 삭제 / 만료 정리 / 클리어 테스트"""

    def test_delete(self, cache):
        cache.set("q", 1)
        assert cache.delete("q") is True
        assert cache.delete("q") is False
        assert cache.get_stats()["invalidations"] == 1

    def test_delete_where(self, cache):
        cache.set("a:1", 1)
        cache.set("a:2", 2)
        cache.set("b:1", 3)

        removed = cache.delete_where(lambda key: key.startswith("a:"))

        assert removed == 2
        assert cache.keys() == ["b:1"]
        assert cache.get_stats()["invalidations"] == 2

    def test_purge_expired(self, cache, fake_clock):
        cache.set("a", 1, ttl_ms=10)
        cache.set("b", 2, ttl_ms=10)
        cache.set("c", 3)
        fake_clock.advance_ms(50)

        assert cache.purge_expired() == 2
        assert cache.keys() == ["c"]

    def test_clear_resets_entries_and_stats(self, cache):
        cache.set("a", 1)
        cache.get("a")
        cache.get("b")

        cache.clear()

        stats = cache.get_stats()
        assert stats["size"] == 0
        assert stats["hits"] == 0
        assert stats["misses"] == 0
        assert stats["evictions"] == 0
