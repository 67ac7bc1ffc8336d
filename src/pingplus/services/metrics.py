"""
计数指标模块
"""

import threading
from typing import Dict, Iterable


class SimpleCounter:
    """线程安全的累加计数器"""

    def __init__(self, name: str):
        self.name = name
        self._value = 0
        self._lock = threading.Lock()

    def count(self, amount: int = 1):
        """累加计数"""
        with self._lock:
            self._value += amount

    @property
    def value(self) -> int:
        return self._value

    def reset(self) -> int:
        """清零并返回清零前的值"""
        with self._lock:
            value, self._value = self._value, 0
            return value


class MetricsRegistry:
    """按名称管理一组计数器"""

    def __init__(self, names: Iterable[str] = ()):
        """初始化计数器集合
        
        Args:
            names: 预先创建的计数器名称
        """
        self._counters: Dict[str, SimpleCounter] = {name: SimpleCounter(name) for name in names}

    def counter(self, name: str) -> SimpleCounter:
        """获取计数器，不存在时创建"""
        counter = self._counters.get(name)
        if counter is None:
            counter = self._counters.setdefault(name, SimpleCounter(name))
        return counter

    def snapshot(self) -> Dict[str, int]:
        """获取所有计数器的当前值"""
        return {name: counter.value for name, counter in self._counters.items()}

    def reset(self) -> Dict[str, int]:
        """清零所有计数器，返回清零前的值（用于周期性上报）"""
        return {name: counter.reset() for name, counter in self._counters.items()}
