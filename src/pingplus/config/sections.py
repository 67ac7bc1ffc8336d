#!/usr/bin/python3
# -*- coding: UTF-8 -*-

"""
配置段定义

功能说明：
1. 定义封闭的配置段标识集合（SectionId）
2. 每个配置段对应一个不可变的数据类
3. 提供编译期默认配置实例

作者：AI Agent Development Team
版本：v1.0.0
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


DEFAULT_PLAYER_TRACKING_POLICY = "maximumSize=1000,expireAfterAccess=1h"


class SectionId(Enum):
    """配置段标识"""
    STATUS = "status"
    PLUGIN = "plugin"
    CORE = "core"


@dataclass(frozen=True)
class StatusLines:
    """一组状态显示文本"""
    description: Optional[Tuple[str, ...]] = None
    player_hover: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class StatusConf:
    """服务器状态配置段

    default 用于未知客户端，personalized 用于已被追踪识别的客户端，
    文本中的 %player% 会被替换为玩家名。
    """
    default: StatusLines = field(default_factory=StatusLines)
    personalized: StatusLines = field(default_factory=StatusLines)


@dataclass(frozen=True)
class PluginConf:
    """插件行为配置段"""
    player_tracking: bool = True
    unknown_player_name: str = "player"


@dataclass(frozen=True)
class CachesConf:
    """缓存策略配置"""
    player_tracking: Optional[str] = None


@dataclass(frozen=True)
class CoreConf:
    """核心配置段"""
    caches: CachesConf = field(default_factory=CachesConf)


# 配置段标识与数据类的对应关系
SECTION_TYPES = {
    SectionId.STATUS: StatusConf,
    SectionId.PLUGIN: PluginConf,
    SectionId.CORE: CoreConf,
}


def default_status_conf() -> StatusConf:
    """获取默认状态配置"""
    return StatusConf(
        default=StatusLines(
            description=("A Minecraft Server", "Hello, %player%!"),
        ),
        personalized=StatusLines(
            description=("Welcome back, %player%!",),
        ),
    )


def default_plugin_conf() -> PluginConf:
    """获取默认插件配置"""
    return PluginConf(player_tracking=True, unknown_player_name="player")


def default_core_conf() -> CoreConf:
    """获取默认核心配置"""
    return CoreConf(caches=CachesConf(player_tracking=DEFAULT_PLAYER_TRACKING_POLICY))
