#!/usr/bin/python3
# -*- coding: UTF-8 -*-

"""
YAML编解码适配器

功能说明：
1. 配置数据类与YAML文本之间的转换
2. 编码时跳过值为None的字段，配置文件中只保留显式设置的值
3. 解码时以默认实例为基础合并，未出现的字段保持默认值
4. 读写配置文件，写入时先写临时文件再整体替换
5. 对字段类型做基本校验

作者：AI Agent Development Team
版本：v1.0.0
"""

import dataclasses
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, IO, Optional, Tuple, Union, get_type_hints

import yaml

from ..utils.exceptions import LoadError, SaveError


logger = logging.getLogger(__name__)

_NONE_TYPE = type(None)


def load_document(stream: Union[str, IO], path: Optional[str] = None) -> Dict[str, Any]:
    """解析配置文档

    Args:
        stream: YAML文本或文件对象
        path: 配置文件路径，仅用于错误信息

    Returns:
        Dict[str, Any]: 以配置段别名为键的字典，空文档返回空字典

    Raises:
        LoadError: YAML语法错误或顶层结构不是映射
    """
    try:
        document = yaml.safe_load(stream)
    except yaml.YAMLError as e:
        raise LoadError(f"配置文件格式错误: {e}", path=path) from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise LoadError(f"配置文件顶层必须是映射，实际为 {type(document).__name__}", path=path)
    return document


def dump_document(document: Dict[str, Any], stream: Optional[IO] = None) -> Optional[str]:
    """输出配置文档

    Args:
        document: 以配置段别名为键的字典
        stream: 目标文件对象，为None时返回字符串
    """
    return yaml.safe_dump(document, stream, default_flow_style=False,
                          allow_unicode=True, sort_keys=False, indent=2)


def read_document(path: Union[str, Path]) -> Dict[str, Any]:
    """读取并解析配置文件

    Raises:
        LoadError: 文件无法读取、不是合法的UTF-8文本或格式错误
    """
    path = str(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return load_document(f, path=path)
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"无法读取配置文件: {e}", path=path) from e


def write_document(document: Dict[str, Any], path: Union[str, Path]):
    """写入配置文件

    先写入同目录下的临时文件，再整体替换目标文件。

    Raises:
        SaveError: 写入失败，原文件保持不变
    """
    target = Path(path)
    tmp_name = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix='.' + target.name + '.', dir=str(target.parent))
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            dump_document(document, f)
        os.replace(tmp_name, str(target))
        tmp_name = None
    except (OSError, yaml.YAMLError) as e:
        raise SaveError(f"保存配置文件失败: {e}", path=str(target)) from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)


def encode(instance: Any) -> Dict[str, Any]:
    """将配置实例编码为字典，跳过值为None的字段

    Args:
        instance: 配置数据类实例

    Returns:
        Dict[str, Any]: 可直接交给YAML输出的字典
    """
    result = {}
    for f in dataclasses.fields(instance):
        value = _encode_value(getattr(instance, f.name))
        if value is not None:
            result[f.name] = value
    return result


def _encode_value(value: Any) -> Any:
    if value is None:
        return None
    if dataclasses.is_dataclass(value):
        return encode(value)
    if isinstance(value, (tuple, list)):
        return [_encode_value(item) for item in value]
    return value


def decode(data: Any, default: Any, alias: str = None) -> Any:
    """以默认实例为基础解码配置段

    Args:
        data: 配置段对应的原始数据（映射或None）
        default: 默认配置实例
        alias: 配置段别名，仅用于错误信息

    Returns:
        新的配置实例，未出现或为None的字段保持默认值

    Raises:
        LoadError: 配置段结构或字段类型不正确
    """
    return _decode_dataclass(data, default, type(default), alias or type(default).__name__)


def _decode_dataclass(data: Any, default: Any, cls: type, where: str) -> Any:
    if data is None:
        return default if default is not None else cls()
    if not isinstance(data, dict):
        raise LoadError(f"{where} 必须是映射，实际为 {type(data).__name__}", section=where)

    base = default if default is not None else cls()
    hints = get_type_hints(cls)
    known = {f.name for f in dataclasses.fields(cls)}

    changes = {}
    for key, value in data.items():
        if key not in known:
            logger.warning(f"忽略未知配置项: {where}.{key}")
            continue
        if value is None:
            continue
        changes[key] = _decode_value(value, getattr(base, key), hints[key], f"{where}.{key}")

    return dataclasses.replace(base, **changes)


def _decode_value(value: Any, default: Any, hint: Any, where: str) -> Any:
    hint = _strip_optional(hint)

    if dataclasses.is_dataclass(hint):
        return _decode_dataclass(value, default, hint, where)

    if getattr(hint, '__origin__', None) is tuple:
        item_type = _tuple_item_type(hint)
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list):
            raise LoadError(f"{where} 必须是列表，实际为 {type(value).__name__}", section=where)
        return tuple(_check_scalar(item, item_type, f"{where}[{i}]") for i, item in enumerate(value))

    return _check_scalar(value, hint, where)


def _check_scalar(value: Any, expected: type, where: str) -> Any:
    # bool是int的子类，需要单独判断
    if expected is int and isinstance(value, bool):
        ok = False
    elif expected is float:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
    else:
        ok = isinstance(value, expected)

    if not ok:
        raise LoadError(f"{where} 类型错误: 期望 {expected.__name__}，实际为 {type(value).__name__}",
                        section=where)
    return value


def _strip_optional(hint: Any) -> Any:
    if getattr(hint, '__origin__', None) is Union:
        args = [arg for arg in hint.__args__ if arg is not _NONE_TYPE]
        if len(args) == 1:
            return args[0]
    return hint


def _tuple_item_type(hint: Any) -> type:
    args: Tuple = getattr(hint, '__args__', ()) or (object,)
    return args[0]
