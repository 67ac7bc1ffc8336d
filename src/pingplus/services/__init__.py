"""
依赖配置的服务模块
"""

from .metrics import MetricsRegistry, SimpleCounter
from .profile_manager import ProfileManager
from .status_manager import StatusManager

__all__ = [
    "MetricsRegistry",
    "SimpleCounter",
    "ProfileManager",
    "StatusManager"
]
