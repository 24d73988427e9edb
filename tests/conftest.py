"""
pytest配置文件，定义共享的测试夹具（fixtures）。

主要功能：
1. 提供固定的"今天"（2026-10-18，周日），避免测试依赖运行日期
2. 提供可复现的随机源与固定取值的随机源
3. 提供测试用的会话数据样本

pytest自动发现机制：
- pytest会自动查找所有名为conftest.py的文件
- 自动加载其中定义的fixture（夹具）
- 测试用例中参数名与fixture名一致时自动注入
"""

import datetime
import random

import pytest


class FixedRandom:
    """按顺序循环返回给定值的随机源，用于精确控制抽样结果。"""

    def __init__(self, *values):
        self.values = list(values) or [0.0]
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def today():
    return datetime.date(2026, 10, 18)


@pytest.fixture
def seeded_rng():
    return random.Random(20261018)


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture
def sample_sessions():
    """提供测试用的会话样本（含派生字段，跨两周）"""
    return [
        {
            "activity_type": "running",
            "session_date": datetime.date(2026, 10, 12),
            "duration_minutes": 30,
            "distance_km": 5.0,
            "intensity_level": "moderate",
            "calories_burned": 300,
            "pace_min_per_km": 6.0,
        },
        {
            "activity_type": "cycling",
            "session_date": datetime.date(2026, 10, 14),
            "duration_minutes": 60,
            "distance_km": 20.0,
            "intensity_level": "high",
            "calories_burned": 700,
            "pace_min_per_km": 3.0,
        },
        {
            "activity_type": "stair_climbing",
            "session_date": datetime.date(2026, 10, 18),
            "duration_minutes": 20,
            "distance_km": None,
            "intensity_level": "very_high",
            "calories_burned": 280,
            "pace_min_per_km": None,
        },
        {
            "activity_type": "running",
            "session_date": datetime.date(2026, 10, 5),
            "duration_minutes": 44,
            "distance_km": 8.0,
            "intensity_level": "high",
            "calories_burned": 500,
            "pace_min_per_km": 5.5,
        },
    ]
