"""
异常处理模块
"""

from typing import Dict, Any, Optional


class PingPlusException(Exception):
    """pingplus基础异常"""
    
    def __init__(self, message: str, error_code: int = 500, details: Optional[Dict[str, Any]] = None):
        """初始化异常
        
        Args:
            message: 错误消息
            error_code: 错误代码
            details: 错误详情
        """
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class LoadError(PingPlusException):
    """配置文件加载异常"""
    
    def __init__(self, message: str, path: Optional[str] = None, section: Optional[str] = None):
        """初始化加载异常
        
        Args:
            message: 错误消息
            path: 配置文件路径
            section: 出错的配置段别名
        """
        super().__init__(message, 2001, {'path': path, 'section': section})


class SaveError(PingPlusException):
    """配置文件保存异常"""
    
    def __init__(self, message: str, path: Optional[str] = None):
        """初始化保存异常
        
        Args:
            message: 错误消息
            path: 配置文件路径
        """
        super().__init__(message, 2002, {'path': path})


class PolicyParseError(PingPlusException):
    """缓存策略解析异常"""

    def __init__(self, message: str, policy_text: Optional[str] = None, directive: Optional[str] = None):
        """初始化缓存策略解析异常

        Args:
            message: 错误消息
            policy_text: 原始策略文本
            directive: 出错的指令
        """
        super().__init__(message, 2003, {
            'policy_text': policy_text,
            'directive': directive
        })


class UnregisteredSectionError(PingPlusException, LookupError):
    """访问未注册配置段（编程错误）"""

    def __init__(self, section: Any):
        """初始化未注册配置段异常

        Args:
            section: 配置段标识
        """
        super().__init__(f"配置段未注册: {section}", 2004, {'section': str(section)})
