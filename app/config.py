"""
应用配置中心（Configuration Center）

说明：
- 统一管理有氧指标引擎的运行配置（日志、演示数据生成、趋势窗口）
- 配置从环境变量中读取，未设置时使用安全的默认值
- MET 表、速度表等算法常量不在此处，见 app/core/analytics（只读配置对象）

常用环境变量（全部可选）：
1) 日志
   - `LOG_LEVEL`：日志等级，默认 INFO（可选 DEBUG/INFO/WARN/ERROR 等）

2) 演示数据
   - `CARDIO_DEMO_DAYS_BACK`：生成演示会话时回溯的天数，默认 60
   - `CARDIO_DEMO_SEED`：随机种子（整数）。设置后演示数据可复现；未设置时使用系统随机源

3) 分析
   - `CARDIO_PACE_WINDOW`：配速移动平均窗口上限，默认 7
"""

import os
import random
from typing import Optional


def _int_env(name: str, default: int) -> int:
    """读取整数环境变量，解析失败时回退默认值。"""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# 日志（Logging）
# LOG_LEVEL 用于控制 logging 的根等级，详见 app/logging_config.py
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

# 演示数据（Demo data）
CARDIO_DEMO_DAYS_BACK = _int_env('CARDIO_DEMO_DAYS_BACK', 60)

# 分析（Analytics）
CARDIO_PACE_WINDOW = max(1, _int_env('CARDIO_PACE_WINDOW', 7))


def get_demo_seed() -> Optional[int]:
    """读取 CARDIO_DEMO_SEED；未设置或非法时返回 None。"""
    raw = os.environ.get('CARDIO_DEMO_SEED')
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def get_demo_rng(seed: Optional[int] = None) -> random.Random:
    """
    获取演示数据使用的随机源。

    读取顺序：
        1. 显式传入的 seed
        2. 环境变量 CARDIO_DEMO_SEED
        3. 系统随机源（不可复现）
    """
    if seed is None:
        seed = get_demo_seed()
    if seed is None:
        return random.SystemRandom()
    return random.Random(seed)
