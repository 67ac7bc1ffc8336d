"""
pingplus

服务器列表状态自定义插件的核心：多配置段管理、配置重新加载与保存、玩家追踪缓存。
"""

__version__ = "1.0.0"
__author__ = "AI Agent Development Team"

from .core import PingPlusCore

__all__ = [
    "PingPlusCore",
    "__version__",
]
