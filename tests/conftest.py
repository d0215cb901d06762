# tests/conftest.py
import os
import sys

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pytest

# プロジェクトの src/ を import パスへ
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)


@pytest.fixture(autouse=True)
def patch_output_dirs(monkeypatch, tmp_path):
    """
    カレント配下への出力を避け、テスト毎に一時ディレクトリへ出力させる。
    """
    monkeypatch.setenv("INDOOR_ANALYTICS_RESULT_ROOT", str(tmp_path / "results"))
    monkeypatch.setenv("INDOOR_ANALYTICS_META_ROOT", str(tmp_path / "meta"))


@pytest.fixture
def ax():
    fig, ax = plt.subplots(figsize=(6, 4), dpi=100)
    yield ax
    plt.close(fig)


@pytest.fixture
def rng():
    return np.random.default_rng(42)


class FakeTimer:
    """イベントループなしで発火を手動制御するタイマー。"""

    def __init__(self, interval):
        self.interval = interval
        self.callbacks = []
        self.started = False
        self.stopped = False

    def add_callback(self, func):
        self.callbacks.append(func)

    def remove_callback(self, func):
        self.callbacks.remove(func)

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def fire(self):
        for cb in list(self.callbacks):
            cb()


@pytest.fixture
def fake_timers():
    """生成されたタイマーを記録する timer_factory。"""
    created = []

    def _factory(interval):
        timer = FakeTimer(interval)
        created.append(timer)
        return timer

    _factory.created = created
    return _factory
