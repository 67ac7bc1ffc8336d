# 缓存模块
# Cache Module
#
# 玩家追踪缓存、缓存策略解析及缓存生命周期控制

from .policy import CachePolicy
from .tracking_cache import TrackingCache
from .controller import CacheLifecycleController, ReconcileAction

__all__ = [
    'CachePolicy',
    'TrackingCache',
    'CacheLifecycleController',
    'ReconcileAction'
]
