"""
玩家追踪缓存测试
"""

import threading

from pingplus.cache.policy import CachePolicy
from pingplus.cache.tracking_cache import TrackingCache


def make_cache(text, clock):
    return TrackingCache(CachePolicy.parse(text), clock=clock)


class TestTrackingCache:
    """缓存读写、淘汰与过期"""

    def test_put_and_get(self, clock):
        cache = make_cache("maximumSize=10", clock)
        cache.put("10.0.0.1", "Alice")
        assert cache.get_if_present("10.0.0.1") == "Alice"
        assert cache.get_if_present("10.0.0.2") is None

    def test_overwrite(self, clock):
        cache = make_cache("maximumSize=10", clock)
        cache.put("10.0.0.1", "Alice")
        cache.put("10.0.0.1", "Bob")
        assert cache.get_if_present("10.0.0.1") == "Bob"
        assert cache.size() == 1

    def test_maximum_size_evicts_least_recently_used(self, clock):
        cache = make_cache("maximumSize=2", clock)
        cache.put("a", "A")
        cache.put("b", "B")
        assert cache.get_if_present("a") == "A"
        cache.put("c", "C")

        assert cache.size() == 2
        assert cache.get_if_present("b") is None
        assert cache.get_if_present("a") == "A"
        assert cache.get_if_present("c") == "C"

    def test_expire_after_access(self, clock):
        cache = make_cache("expireAfterAccess=10s", clock)
        cache.put("a", "A")
        clock.advance(5)
        assert cache.get_if_present("a") == "A"
        clock.advance(9)
        assert cache.get_if_present("a") == "A"
        clock.advance(10)
        assert cache.get_if_present("a") is None

    def test_expire_after_write(self, clock):
        cache = make_cache("expireAfterWrite=10s", clock)
        cache.put("a", "A")
        clock.advance(9)
        assert cache.get_if_present("a") == "A"
        clock.advance(1)
        assert cache.get_if_present("a") is None

    def test_clean_up_removes_expired(self, clock):
        cache = make_cache("expireAfterWrite=1m", clock)
        cache.put("a", "A")
        cache.put("b", "B")
        clock.advance(60)
        cache.clean_up()
        assert cache.size() == 0

    def test_invalidate(self, clock):
        cache = make_cache("", clock)
        cache.put("a", "A")
        cache.put("b", "B")
        cache.invalidate("a")
        assert cache.get_if_present("a") is None
        cache.invalidate_all()
        assert cache.size() == 0

    def test_retired_cache_rejects_writes(self, clock):
        cache = make_cache("maximumSize=10", clock)
        cache.put("a", "A")
        cache.retire()

        assert cache.retired
        assert cache.size() == 0
        assert cache.put("b", "B") is False
        assert cache.get_if_present("b") is None

    def test_stats_only_when_recorded(self, clock):
        plain = make_cache("maximumSize=10", clock)
        plain.put("a", "A")
        assert plain.stats() == {'size': 1}

        recorded = make_cache("maximumSize=10,recordStats", clock)
        recorded.put("a", "A")
        recorded.get_if_present("a")
        recorded.get_if_present("b")
        assert recorded.stats() == {'size': 1, 'hits': 1, 'misses': 1, 'evictions': 0}

    def test_concurrent_access(self, clock):
        cache = make_cache("maximumSize=50", clock)
        errors = []

        def worker(n):
            try:
                for i in range(200):
                    cache.put(f"10.0.{n}.{i}", f"player{i}")
                    cache.get_if_present(f"10.0.{n}.{i // 2}")
            except Exception as e:  # pragma: no cover
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert cache.size() <= 50

    def test_put_expires_from_least_recent_end(self, clock):
        cache = make_cache("expireAfterAccess=10s", clock)
        cache.put("a", "A")
        clock.advance(5)
        cache.put("b", "B")
        clock.advance(7)
        cache.put("c", "C")

        assert cache.size() == 2
        assert cache.get_if_present("a") is None
        assert cache.get_if_present("b") == "B"

    def test_put_stops_at_first_live_entry(self, clock):
        cache = make_cache("expireAfterWrite=10s", clock)
        cache.put("a", "A")
        clock.advance(5)
        cache.put("b", "B")
        assert cache.get_if_present("a") == "A"
        clock.advance(6)
        cache.put("c", "C")

        # a 已过期但排在未过期的 b 之后，读取时才移除
        assert cache.size() == 3
        assert cache.get_if_present("a") is None
        assert cache.size() == 2
