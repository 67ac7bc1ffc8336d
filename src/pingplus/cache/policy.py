#!/usr/bin/python3
# -*- coding: UTF-8 -*-

"""
缓存策略解析

策略文本由逗号分隔的 key=value 指令组成，例如：

    maximumSize=1000,expireAfterAccess=1h

支持的指令：
    initialCapacity=<int>      初始容量
    maximumSize=<int>          最大条目数
    concurrencyLevel=<int>     并发级别（仅记录）
    expireAfterAccess=<时长>   最后访问后过期
    expireAfterWrite=<时长>    写入后过期
    recordStats                记录命中统计

时长为非负整数加单位 d/h/m/s。任何未知、重复或格式错误的指令都会使整条策略被拒绝。

作者：AI Agent Development Team
版本：v1.0.0
"""

import re
from dataclasses import dataclass
from typing import Dict, Optional

from ..utils.exceptions import PolicyParseError


_DURATION_UNITS = {
    'd': 24 * 60 * 60,
    'h': 60 * 60,
    'm': 60,
    's': 1,
}

_DURATION_PATTERN = re.compile(r'^(\d+)([dhms])$')
_INTEGER_PATTERN = re.compile(r'^\d+$')


@dataclass(frozen=True)
class CachePolicy:
    """缓存策略"""
    initial_capacity: Optional[int] = None
    maximum_size: Optional[int] = None
    concurrency_level: Optional[int] = None
    expire_after_access: Optional[float] = None
    expire_after_write: Optional[float] = None
    record_stats: bool = False
    text: str = ""

    @classmethod
    def parse(cls, text: str) -> 'CachePolicy':
        """解析策略文本

        Args:
            text: 策略文本，空字符串表示不限制

        Returns:
            CachePolicy: 解析结果

        Raises:
            PolicyParseError: 策略文本无法解析
        """
        if text is None:
            raise PolicyParseError("缓存策略不能为空", policy_text=text)

        values: Dict[str, object] = {}
        for raw in text.split(','):
            directive = raw.strip()
            if not directive:
                if text.strip():
                    raise PolicyParseError(f"缓存策略包含空指令: '{text}'", policy_text=text)
                continue

            key, sep, value = directive.partition('=')
            key = key.strip()
            value = value.strip() if sep else None

            handler = _HANDLERS.get(key)
            if handler is None:
                raise PolicyParseError(f"未知的缓存策略指令: {key}", policy_text=text, directive=directive)

            field_name = handler[0]
            if field_name in values:
                raise PolicyParseError(f"缓存策略指令重复: {key}", policy_text=text, directive=directive)

            values[field_name] = handler[1](key, value, text)

        return cls(text=text, **values)

    @property
    def unbounded(self) -> bool:
        return self.maximum_size is None and self.expire_after_access is None and self.expire_after_write is None


def _parse_int(key: str, value: Optional[str], text: str) -> int:
    if value is None or not _INTEGER_PATTERN.match(value):
        raise PolicyParseError(f"缓存策略指令 {key} 需要非负整数值: {value}",
                               policy_text=text, directive=key)
    return int(value)


def _parse_duration(key: str, value: Optional[str], text: str) -> float:
    match = _DURATION_PATTERN.match(value or '')
    if match is None:
        raise PolicyParseError(f"缓存策略指令 {key} 需要时长值（如 10m、1h）: {value}",
                               policy_text=text, directive=key)
    return float(int(match.group(1)) * _DURATION_UNITS[match.group(2)])


def _parse_flag(key: str, value: Optional[str], text: str) -> bool:
    if value is not None:
        raise PolicyParseError(f"缓存策略指令 {key} 不接受值: {value}",
                               policy_text=text, directive=key)
    return True


# 指令名 -> (字段名, 解析函数)
_HANDLERS = {
    'initialCapacity': ('initial_capacity', _parse_int),
    'maximumSize': ('maximum_size', _parse_int),
    'concurrencyLevel': ('concurrency_level', _parse_int),
    'expireAfterAccess': ('expire_after_access', _parse_duration),
    'expireAfterWrite': ('expire_after_write', _parse_duration),
    'recordStats': ('record_stats', _parse_flag),
}
