"""
测试公共夹具
"""

import textwrap

import pytest

from pingplus import PingPlusCore


class FakeClock:
    """可手动推进的时间源"""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def write_config(tmp_path):
    """写入配置文件"""
    def _write(text: str, name: str = "ServerListPlus.yml"):
        path = tmp_path / name
        path.write_text(textwrap.dedent(text), encoding='utf-8')
        return path
    return _write


@pytest.fixture
def core(tmp_path):
    """未初始化的核心管理器"""
    instance = PingPlusCore(tmp_path)
    yield instance
    instance.close()
