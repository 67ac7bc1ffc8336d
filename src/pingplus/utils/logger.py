"""
日志系统模块

库本身在导入时不配置任何处理器，由宿主进程调用 setup_logger。
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Dict, Any

ROOT_LOGGER = 'pingplus'

DEFAULT_LOG_CONFIG: Dict[str, Any] = {
    'level': 'INFO',
    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'console': True,
    'file_path': None,
    'max_file_size': '10MB',
    'backup_count': 5,
    # 子模块级别覆盖，例如 {'cache': 'DEBUG', 'config.store': 'WARNING'}
    'levels': {},
}


def setup_logger(config: Dict[str, Any] = None) -> logging.Logger:
    """设置pingplus日志

    Args:
        config: 日志配置字典，未给出的项使用 DEFAULT_LOG_CONFIG

    Returns:
        配置好的pingplus根logger
    """
    settings = dict(DEFAULT_LOG_CONFIG)
    settings.update(config or {})
    level = _parse_level(settings['level'])

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    # 重复调用时替换旧的handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(settings['format'])

    if settings['console']:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if settings['file_path']:
        log_file = Path(settings['file_path'])
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=str(log_file),
            maxBytes=_parse_size(settings['max_file_size']),
            backupCount=settings['backup_count'],
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    for name, sub_level in settings['levels'].items():
        get_logger(name).setLevel(_parse_level(sub_level))

    return logger


def _parse_level(level) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"未知的日志级别: {level}")
    return value


def _parse_size(size_str) -> int:
    """解析文件大小字符串

    Args:
        size_str: 大小字符串，如 '100KB', '10MB', '1GB'，或字节数

    Returns:
        字节数
    """
    if isinstance(size_str, int):
        return size_str

    size_str = size_str.upper().strip()
    units = {'KB': 1024, 'MB': 1024 ** 2, 'GB': 1024 ** 3}
    for suffix, factor in units.items():
        if size_str.endswith(suffix):
            return int(size_str[:-2]) * factor
    # 默认为字节
    return int(size_str)


def get_logger(name: str = None) -> logging.Logger:
    """获取logger实例

    Args:
        name: pingplus下的子模块名，可带或不带 'pingplus.' 前缀

    Returns:
        logger实例
    """
    if not name or name == ROOT_LOGGER:
        return logging.getLogger(ROOT_LOGGER)
    if name.startswith(ROOT_LOGGER + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f'{ROOT_LOGGER}.{name}')
