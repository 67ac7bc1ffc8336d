#!/usr/bin/python3
# -*- coding: UTF-8 -*-

"""
pingplus 核心

功能说明：
1. 组合配置注册表、配置存储与追踪缓存控制器
2. 提供重新加载、保存、启用/禁用等管理操作
3. 重新加载后按配置协调玩家追踪缓存
4. 提供客户端追踪接口（记录与查询）及追踪计数

由宿主进程显式创建、初始化与关闭，不使用全局单例。

作者：AI Agent Development Team
版本：v1.0.0
"""

import ipaddress
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .cache.controller import CacheLifecycleController, ReconcileAction
from .config.registry import SectionRegistry
from .config.sections import (
    SectionId,
    CoreConf,
    PluginConf,
    StatusConf,
    default_core_conf,
    default_plugin_conf,
    default_status_conf
)
from .config.store import ConfigurationStore
from .services.metrics import MetricsRegistry
from .services.profile_manager import ProfileManager
from .services.status_manager import StatusManager
from .utils.exceptions import PingPlusException
from .utils.logger import get_logger

# 追踪计数器名称
CLIENTS_ADDED = "clients_added"
CLIENTS_RESOLVED = "clients_resolved"
CLIENTS_UNRESOLVED = "clients_unresolved"


class PingPlusCore:
    """pingplus 核心管理器"""

    ADMIN_COMMANDS = ('reload', 'save', 'enable', 'disable')

    def __init__(self, data_dir: Union[str, Path], config_file: str = "ServerListPlus.yml",
                 profiles_file: str = "Profiles.yml", write_defaults: bool = True):
        """
        创建核心管理器

        Args:
            data_dir: 数据目录
            config_file: 配置文件名
            profiles_file: 档案文件名
            write_defaults: 配置文件不存在时是否写出默认配置
        """
        self.logger = get_logger('core')
        self.data_dir = Path(data_dir)

        self.registry = SectionRegistry()
        self.store = ConfigurationStore(self.data_dir / config_file, self.registry,
                                        write_defaults=write_defaults)
        self.tracking = CacheLifecycleController()
        self.profiles = ProfileManager(self.data_dir / profiles_file)
        self.status = StatusManager(self.resolve_client)
        self.metrics = MetricsRegistry((CLIENTS_ADDED, CLIENTS_RESOLVED, CLIENTS_UNRESOLVED))

        self._lock = threading.RLock()
        self.last_reconcile: Optional[ReconcileAction] = None

    def initialize(self) -> 'PingPlusCore':
        """注册配置段并执行首次加载

        Raises:
            LoadError: 首次加载失败
        """
        self.logger.info("正在初始化...")
        self.register_conf(SectionId.STATUS, default_status_conf(), "Status")
        self.register_conf(SectionId.PLUGIN, default_plugin_conf(), "Plugin")
        self.register_conf(SectionId.CORE, default_core_conf(), "Core")

        self.reload()
        self.logger.info("初始化完成")
        return self

    def close(self):
        """关闭核心，释放追踪缓存"""
        with self._lock:
            self.tracking.close()

    def __enter__(self) -> 'PingPlusCore':
        return self.initialize()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def register_conf(self, section_id: SectionId, default: Any, alias: str):
        """注册配置段"""
        self.registry.register(section_id, default, alias)

    def reload(self):
        """
        重新加载配置

        Raises:
            LoadError: 配置文件加载失败，此时配置与缓存均保持不变
        """
        with self._lock:
            self.store.reload()
            self.last_reconcile = self._reload_caches()
            self.profiles.reload()
            # 状态文本依赖追踪状态，最后加载
            self.status.reload(self.status_conf(), self.plugin_conf())

    def _reload_caches(self) -> ReconcileAction:
        enabled = self.plugin_conf().player_tracking
        policy_text = self.core_conf().caches.player_tracking
        default_policy_text = self.get_default_conf(SectionId.CORE).caches.player_tracking
        return self.tracking.reconcile(enabled, policy_text, default_policy_text)

    def save(self):
        """
        保存配置

        Raises:
            SaveError: 写入失败
        """
        with self._lock:
            self.store.save()

    def set_enabled(self, enabled: bool) -> bool:
        """
        启用或禁用插件

        Returns:
            bool: 操作是否成功，失败只记录日志
        """
        action = "启用" if enabled else "禁用"
        try:
            self.profiles.set_enabled(enabled)
        except PingPlusException as e:
            self.logger.error(f"{action}失败: {e}", exc_info=True)
            return False
        self.logger.info(f"已{action}")
        return True

    def enable(self) -> bool:
        return self.set_enabled(True)

    def disable(self) -> bool:
        return self.set_enabled(False)

    def is_enabled(self) -> bool:
        return self.profiles.enabled

    def run_admin_command(self, command: str, sender: str = "console") -> bool:
        """
        执行管理命令

        Args:
            command: reload / save / enable / disable
            sender: 命令发起者，仅用于日志

        Returns:
            bool: 执行是否成功

        Raises:
            ValueError: 未知命令
        """
        command = command.lower()
        if command not in self.ADMIN_COMMANDS:
            raise ValueError(f"未知的管理命令: {command}")

        self.logger.info(f"执行管理命令 {command}，请求者: {sender}")
        if command == 'enable':
            return self.enable()
        if command == 'disable':
            return self.disable()

        try:
            if command == 'reload':
                self.reload()
            else:
                self.save()
        except PingPlusException as e:
            self.logger.error(f"管理命令 {command} 执行失败: {e}", exc_info=True)
            return False
        return True

    def get_conf(self, section_id: SectionId) -> Any:
        """获取当前配置"""
        return self.store.get(section_id)

    def get_default_conf(self, section_id: SectionId) -> Any:
        """获取默认配置"""
        return self.store.get_default(section_id)

    def core_conf(self) -> CoreConf:
        return self.store.get(SectionId.CORE)

    def plugin_conf(self) -> PluginConf:
        return self.store.get(SectionId.PLUGIN)

    def status_conf(self) -> StatusConf:
        return self.store.get(SectionId.STATUS)

    def is_tracking(self) -> bool:
        """玩家追踪是否处于启用状态"""
        return self.tracking.is_active()

    def add_client(self, player_name: str, client: Any):
        """记录客户端地址对应的玩家名"""
        self.metrics.counter(CLIENTS_ADDED).count()
        self.tracking.put(_host_address(client), player_name)

    def resolve_client(self, client: Any) -> Optional[str]:
        """查询客户端地址对应的玩家名"""
        player = self.tracking.get(_host_address(client))
        self.metrics.counter(CLIENTS_RESOLVED if player is not None else CLIENTS_UNRESOLVED).count()
        return player

    def get_metrics(self) -> Dict[str, int]:
        """获取追踪计数"""
        return self.metrics.snapshot()

    def reset_metrics(self) -> Dict[str, int]:
        """清零追踪计数，返回清零前的值"""
        return self.metrics.reset()


def _host_address(client: Any) -> str:
    # 只接受字符串及ipaddress模块的地址对象，(host, port) 等形式会导致键不一致
    if isinstance(client, str):
        return client
    if isinstance(client, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return str(client)
    raise TypeError(f"客户端地址类型不支持: {type(client).__name__}")
