"""
服务器状态管理器模块
"""

import logging
from typing import Callable, NamedTuple, Optional, Tuple

from ..config.sections import PluginConf, StatusConf, StatusLines

PLAYER_PLACEHOLDER = '%player%'


class _StatusView(NamedTuple):
    default: StatusLines
    personalized: StatusLines
    unknown_player_name: str


class StatusManager:
    """服务器状态管理器

    根据状态配置生成描述文本，已被追踪识别的客户端使用个性化文本。
    依赖追踪状态，因此在重新加载流程中最后执行。
    """

    def __init__(self, resolve_client: Callable[[str], Optional[str]]):
        """初始化状态管理器
        
        Args:
            resolve_client: 根据地址查询玩家名的函数
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._resolve_client = resolve_client
        self._view = _StatusView(StatusLines(), StatusLines(), PluginConf().unknown_player_name)

    def reload(self, status: StatusConf, plugin: PluginConf):
        """根据最新配置重新加载状态文本"""
        # 一次性发布，读者不会看到新旧混合的配置
        self._view = _StatusView(status.default, status.personalized, plugin.unknown_player_name)
        self.logger.debug("服务器状态配置已重新加载")

    def get_description(self, address: str) -> Optional[Tuple[str, ...]]:
        """获取服务器描述文本"""
        return self._lines(address, 'description')

    def get_player_hover(self, address: str) -> Optional[Tuple[str, ...]]:
        """获取玩家列表悬停文本"""
        return self._lines(address, 'player_hover')

    def _lines(self, address: str, name: str) -> Optional[Tuple[str, ...]]:
        view = self._view
        player = self._resolve_client(address)
        if player is not None:
            lines = getattr(view.personalized, name)
            if lines is not None:
                return self._format(lines, player)

        lines = getattr(view.default, name)
        if lines is None:
            return None
        return self._format(lines, player if player is not None else view.unknown_player_name)

    @staticmethod
    def _format(lines: Tuple[str, ...], player: str) -> Tuple[str, ...]:
        return tuple(line.replace(PLAYER_PLACEHOLDER, player) for line in lines)
