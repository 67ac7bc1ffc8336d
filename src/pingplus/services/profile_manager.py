"""
配置档案管理器模块
"""

import logging
from pathlib import Path
from typing import Union

from ..config import yaml_codec
from ..utils.exceptions import LoadError


class ProfileManager:
    """配置档案管理器

    在独立的档案文件中持久化插件的启用状态。
    """

    ENABLED_KEY = 'Enabled'

    def __init__(self, profiles_file: Union[str, Path], default_enabled: bool = True):
        """初始化档案管理器
        
        Args:
            profiles_file: 档案文件路径
            default_enabled: 档案文件不存在时的启用状态
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.profiles_file = Path(profiles_file)
        self.default_enabled = default_enabled
        self.enabled = default_enabled

    def reload(self):
        """重新加载档案文件
        
        Raises:
            LoadError: 档案文件无法读取或格式错误
        """
        path = str(self.profiles_file)
        if not self.profiles_file.exists():
            self.enabled = self.default_enabled
            return

        document = yaml_codec.read_document(self.profiles_file)

        enabled = document.get(self.ENABLED_KEY, self.default_enabled)
        if not isinstance(enabled, bool):
            raise LoadError(f"档案项 {self.ENABLED_KEY} 必须是布尔值", path=path)
        self.enabled = enabled
        self.logger.debug(f"档案已加载: {path} (enabled={enabled})")

    def set_enabled(self, enabled: bool):
        """设置启用状态并写入档案文件
        
        Raises:
            SaveError: 档案文件写入失败，此时内存中的状态不变
        """
        if enabled == self.enabled and self.profiles_file.exists():
            return

        yaml_codec.write_document({self.ENABLED_KEY: enabled}, self.profiles_file)

        self.enabled = enabled
        self.logger.info(f"档案已保存: {self.profiles_file} (enabled={enabled})")
