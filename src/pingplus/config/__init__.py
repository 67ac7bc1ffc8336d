# 配置管理模块
# Configuration Management Module
#
# 负责多个配置段的默认值、配置文件覆盖、重新加载与保存

from .sections import (
    SectionId,
    StatusConf,
    StatusLines,
    PluginConf,
    CoreConf,
    CachesConf,
    DEFAULT_PLAYER_TRACKING_POLICY
)
from .registry import SectionRegistry
from .store import ConfigurationStore

__all__ = [
    'SectionId',
    'StatusConf',
    'StatusLines',
    'PluginConf',
    'CoreConf',
    'CachesConf',
    'DEFAULT_PLAYER_TRACKING_POLICY',
    'SectionRegistry',
    'ConfigurationStore'
]
