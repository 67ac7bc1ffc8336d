#!/usr/bin/python3
# -*- coding: UTF-8 -*-

"""
玩家追踪缓存生命周期控制器

功能说明：
1. 每次配置重新加载后决定保留、重建或删除追踪缓存
2. 策略文本未变化时保留原缓存及其中的条目
3. 策略文本无法解析时回退到默认策略，且不会在下次加载时重复回退
4. 缓存引用整体替换，读写操作总是落在同一个缓存实例上

作者：AI Agent Development Team
版本：v1.0.0
"""

import logging
import time
from enum import Enum
from typing import Callable, Dict, NamedTuple, Optional

from .policy import CachePolicy
from .tracking_cache import TrackingCache
from ..utils.exceptions import PolicyParseError


class ReconcileAction(Enum):
    """一次协调的结果"""
    NONE = "none"
    CREATED = "created"
    REBUILT = "rebuilt"
    DELETED = "deleted"


class _LiveCache(NamedTuple):
    policy_text: str
    # 被拒绝的原始策略文本，回退到默认策略时记录
    rejected_text: Optional[str]
    cache: TrackingCache


class CacheLifecycleController:
    """追踪缓存生命周期控制器

    持有零个或一个缓存实例。当前状态是一个不可变的句柄，
    协调时整体替换，读写路径无需加锁即可拿到一致的缓存。
    """

    def __init__(self, name: str = "玩家追踪", clock: Callable[[], float] = time.monotonic):
        """
        初始化控制器

        Args:
            name: 缓存名称，用于日志
            clock: 传递给缓存的时间源
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.name = name
        self._clock = clock
        self._live: Optional[_LiveCache] = None

    def reconcile(self, enabled: bool, policy_text: Optional[str],
                  default_policy_text: str) -> ReconcileAction:
        """
        根据最新配置协调缓存

        Args:
            enabled: 是否启用追踪
            policy_text: 当前配置中的策略文本
            default_policy_text: 默认配置中的策略文本，解析失败时使用

        Returns:
            ReconcileAction: 本次执行的操作
        """
        live = self._live

        if not enabled:
            if live is None:
                return ReconcileAction.NONE
            self.logger.info(f"追踪已关闭，删除{self.name}缓存")
            live.cache.retire()
            self._live = None
            return ReconcileAction.DELETED

        if policy_text is None:
            policy_text = default_policy_text

        if live is not None and policy_text in (live.policy_text, live.rejected_text):
            return ReconcileAction.NONE

        if live is not None:
            self.logger.info(f"配置已变化，重建{self.name}缓存")
        else:
            self.logger.info(f"创建{self.name}缓存...")

        replacement = self._build(policy_text, default_policy_text)

        if live is not None:
            # 先清空并停用旧缓存，再发布新缓存
            live.cache.retire()
        self._live = replacement

        return ReconcileAction.CREATED if live is None else ReconcileAction.REBUILT

    def _build(self, policy_text: str, default_policy_text: str) -> _LiveCache:
        try:
            policy = CachePolicy.parse(policy_text)
            return _LiveCache(policy_text, None, TrackingCache(policy, clock=self._clock))
        except PolicyParseError as e:
            self.logger.error(f"无法解析{self.name}缓存策略 {policy_text!r}，"
                              f"回退到默认策略 {default_policy_text!r}: {e}", exc_info=True)

        policy = CachePolicy.parse(default_policy_text)
        return _LiveCache(default_policy_text, policy_text, TrackingCache(policy, clock=self._clock))

    def put(self, key: str, value: str):
        """写入条目，未启用时忽略"""
        live = self._live
        if live is not None:
            live.cache.put(key, value)

    def get(self, key: str) -> Optional[str]:
        """读取条目，未启用或不存在时返回None"""
        live = self._live
        if live is None:
            return None
        return live.cache.get_if_present(key)

    def is_active(self) -> bool:
        return self._live is not None

    @property
    def policy_text(self) -> Optional[str]:
        """当前缓存所依据的策略文本"""
        live = self._live
        return live.policy_text if live is not None else None

    @property
    def cache(self) -> Optional[TrackingCache]:
        live = self._live
        return live.cache if live is not None else None

    def stats(self) -> Dict[str, int]:
        live = self._live
        return live.cache.stats() if live is not None else {}

    def close(self):
        """释放缓存"""
        live, self._live = self._live, None
        if live is not None:
            live.cache.retire()
            self.logger.info(f"{self.name}缓存已释放")
