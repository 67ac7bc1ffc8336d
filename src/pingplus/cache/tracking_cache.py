#!/usr/bin/python3
# -*- coding: UTF-8 -*-

"""
玩家追踪缓存

功能说明：
1. 记录网络地址到玩家名的映射
2. 按缓存策略限制条目数（按访问顺序淘汰最久未使用的条目）
3. 支持访问后过期和写入后过期
4. 线程安全，停用后不再接受写入

作者：AI Agent Development Team
版本：v1.0.0
"""

import threading
import time
from collections import OrderedDict
from typing import Callable, Dict, Optional, Tuple

from .policy import CachePolicy


class TrackingCache:
    """有界、可过期的地址 -> 玩家名缓存"""

    def __init__(self, policy: CachePolicy, clock: Callable[[], float] = time.monotonic):
        """
        初始化缓存

        Args:
            policy: 缓存策略
            clock: 时间源，测试时可替换
        """
        self.policy = policy
        self._clock = clock
        self._lock = threading.Lock()
        # 地址 -> (玩家名, 写入时间, 最后访问时间)
        self._entries: "OrderedDict[str, Tuple[str, float, float]]" = OrderedDict()
        self._retired = False
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def put(self, key: str, value: str) -> bool:
        """写入条目

        Returns:
            bool: 缓存已停用时返回False
        """
        with self._lock:
            if self._retired:
                return False
            now = self._clock()
            self._entries[key] = (value, now, now)
            self._entries.move_to_end(key)
            self._evict(now)
            return True

    def get_if_present(self, key: str) -> Optional[str]:
        """读取条目，不存在或已过期时返回None"""
        with self._lock:
            entry = self._entries.get(key)
            now = self._clock()
            if entry is None or self._expired(entry, now):
                if entry is not None:
                    del self._entries[key]
                    self._evictions += 1
                self._misses += 1
                return None

            value, written, _ = entry
            self._entries[key] = (value, written, now)
            self._entries.move_to_end(key)
            self._hits += 1
            return value

    def invalidate(self, key: str):
        with self._lock:
            self._entries.pop(key, None)

    def invalidate_all(self):
        """清空所有条目"""
        with self._lock:
            self._entries.clear()

    def clean_up(self):
        """清理已过期的条目"""
        with self._lock:
            self._evict(self._clock(), full=True)

    def retire(self):
        """清空并停用缓存，之后的写入将被忽略"""
        with self._lock:
            self._retired = True
            self._entries.clear()

    @property
    def retired(self) -> bool:
        return self._retired

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> Dict[str, int]:
        """获取统计信息，仅在策略开启 recordStats 时计数有效"""
        with self._lock:
            if not self.policy.record_stats:
                return {'size': len(self._entries)}
            return {
                'size': len(self._entries),
                'hits': self._hits,
                'misses': self._misses,
                'evictions': self._evictions,
            }

    def _expired(self, entry: Tuple[str, float, float], now: float) -> bool:
        _, written, accessed = entry
        if self.policy.expire_after_write is not None and now - written >= self.policy.expire_after_write:
            return True
        if self.policy.expire_after_access is not None and now - accessed >= self.policy.expire_after_access:
            return True
        return False

    def _evict(self, now: float, full: bool = False):
        # 调用方需持有锁
        if self.policy.expire_after_write is not None or self.policy.expire_after_access is not None:
            if full:
                for key in [k for k, entry in self._entries.items() if self._expired(entry, now)]:
                    del self._entries[key]
                    self._evictions += 1
            else:
                # 条目按最后访问时间排列，从最久未访问的一端清理，遇到未过期的条目即停止；
                # 其余过期条目在读取或 clean_up 时清理
                while self._entries:
                    key, entry = next(iter(self._entries.items()))
                    if not self._expired(entry, now):
                        break
                    del self._entries[key]
                    self._evictions += 1

        limit = self.policy.maximum_size
        if limit is not None:
            while len(self._entries) > limit:
                self._entries.popitem(last=False)
                self._evictions += 1
