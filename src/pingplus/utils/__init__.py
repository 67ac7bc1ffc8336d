"""
工具模块
"""

from .logger import setup_logger, get_logger
from .exceptions import (
    PingPlusException,
    LoadError,
    SaveError,
    PolicyParseError,
    UnregisteredSectionError
)

__all__ = [
    "setup_logger",
    "get_logger",
    "PingPlusException",
    "LoadError",
    "SaveError",
    "PolicyParseError",
    "UnregisteredSectionError"
]
