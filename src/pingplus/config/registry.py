"""
配置段注册表模块
"""

import dataclasses
import logging
from typing import Any, Dict, List, Optional, Tuple

from .sections import SectionId, SECTION_TYPES
from ..utils.exceptions import UnregisteredSectionError


class SectionRegistry:
    """配置段注册表

    记录每个配置段的编译期默认实例及其在配置文件中的别名。
    启动时一次性注册，之后只读。
    """

    def __init__(self):
        """初始化注册表"""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._entries: Dict[SectionId, Tuple[Any, str]] = {}

    def register(self, section_id: SectionId, default: Any, alias: str):
        """注册配置段

        Args:
            section_id: 配置段标识
            default: 默认配置实例
            alias: 配置文件中使用的别名

        Raises:
            ValueError: 默认实例为空、类型不符、别名重复或重复注册
        """
        if default is None:
            raise ValueError(f"配置段 {section_id} 的默认实例不能为空")
        if not alias:
            raise ValueError(f"配置段 {section_id} 的别名不能为空")

        expected = SECTION_TYPES.get(section_id)
        if expected is None or not dataclasses.is_dataclass(default) or not isinstance(default, expected):
            raise ValueError(f"配置段 {section_id} 的默认实例类型错误: {type(default).__name__}")

        if section_id in self._entries:
            raise ValueError(f"配置段已注册: {section_id}")

        owner = self.find_by_alias(alias)
        if owner is not None:
            raise ValueError(f"别名 {alias} 已被配置段 {owner} 使用")

        self._entries[section_id] = (default, alias)
        self.logger.debug(f"配置段已注册: {section_id.name} -> {alias}")

    def is_registered(self, section_id: SectionId) -> bool:
        return section_id in self._entries

    def get_default(self, section_id: SectionId) -> Any:
        """获取默认配置实例"""
        return self._entry(section_id)[0]

    def get_alias(self, section_id: SectionId) -> str:
        """获取配置段别名"""
        return self._entry(section_id)[1]

    def find_by_alias(self, alias: str) -> Optional[SectionId]:
        for section_id, (_, registered_alias) in self._entries.items():
            if registered_alias == alias:
                return section_id
        return None

    def sections(self) -> List[SectionId]:
        """按注册顺序返回所有配置段"""
        return list(self._entries)

    def _entry(self, section_id: SectionId) -> Tuple[Any, str]:
        try:
            return self._entries[section_id]
        except KeyError:
            raise UnregisteredSectionError(section_id) from None
