#!/usr/bin/python3
# -*- coding: UTF-8 -*-

"""
配置存储

功能说明：
1. 为每个已注册配置段维护当前生效的配置实例
2. 重新加载时整体替换配置映射，读者不会看到新旧混合的配置
3. 保存时将当前配置写回配置文件（跳过None字段）
4. 加载失败时保留上一次成功加载的配置

作者：AI Agent Development Team
版本：v1.0.0
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Union

from . import yaml_codec
from .registry import SectionRegistry
from .sections import SectionId
from ..utils.exceptions import LoadError, SaveError, UnregisteredSectionError


class ConfigurationStore:
    """配置存储

    当前配置保存在只读映射中，重新加载时一次性替换引用。
    """

    def __init__(self, config_file: Union[str, Path], registry: SectionRegistry,
                 write_defaults: bool = True):
        """
        初始化配置存储

        Args:
            config_file: 配置文件路径
            registry: 配置段注册表
            write_defaults: 配置文件不存在时是否写出默认配置
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.config_file = Path(config_file)
        self.registry = registry
        self.write_defaults = write_defaults
        self._current: Mapping[SectionId, Any] = MappingProxyType({})

    def reload(self):
        """
        重新加载配置文件

        Raises:
            LoadError: 配置文件无法读取或结构错误，此时当前配置保持不变
        """
        path = str(self.config_file)
        exists = self.config_file.exists()

        if exists:
            document = yaml_codec.read_document(self.config_file)
        else:
            self.logger.info(f"配置文件不存在: {path}，使用默认配置")
            document = {}

        for alias in document:
            if self.registry.find_by_alias(alias) is None:
                self.logger.warning(f"忽略未知配置段: {alias}")

        current = {}
        for section_id in self.registry.sections():
            alias = self.registry.get_alias(section_id)
            default = self.registry.get_default(section_id)
            try:
                current[section_id] = yaml_codec.decode(document.get(alias), default, alias)
            except LoadError as e:
                e.details['path'] = path
                raise

        # 整体替换
        self._current = MappingProxyType(current)
        self.logger.info(f"配置加载完成: {path} ({len(current)} 个配置段)")

        if not exists and self.write_defaults:
            try:
                self.save()
            except SaveError as e:
                self.logger.warning(f"写出默认配置失败: {e}")

    def save(self):
        """
        保存当前配置到文件

        Raises:
            SaveError: 写入失败，内存中的配置不受影响
        """
        current = self._current
        document = {}
        for section_id in self.registry.sections():
            document[self.registry.get_alias(section_id)] = yaml_codec.encode(self._get(current, section_id))

        yaml_codec.write_document(document, self.config_file)
        self.logger.info(f"配置已保存到: {self.config_file}")

    def get(self, section_id: SectionId) -> Any:
        """获取当前配置实例，未加载前返回默认配置"""
        return self._get(self._current, section_id)

    def get_default(self, section_id: SectionId) -> Any:
        """获取编译期默认配置"""
        return self.registry.get_default(section_id)

    def snapshot(self) -> Mapping[SectionId, Any]:
        """获取同一代的全部配置"""
        current = self._current
        return MappingProxyType({section_id: self._get(current, section_id)
                                 for section_id in self.registry.sections()})

    def _get(self, current: Mapping[SectionId, Any], section_id: SectionId) -> Any:
        value = current.get(section_id)
        if value is None:
            if not self.registry.is_registered(section_id):
                raise UnregisteredSectionError(section_id)
            return self.registry.get_default(section_id)
        return value
