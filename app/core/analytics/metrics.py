"""有氧训练单次指标核心算法

说明：
- 配速（分钟/公里）= 时长 / 距离，仅在距离与时长均为正数时有定义；
- 平均速度（公里/小时）= 距离 / 时长 × 60；
- 卡路里基于 MET（代谢当量）模型：kcal = MET × 体重(kg) × 时长(小时)，体重固定为 70kg；
- 跑步在距离与时长均可用时，按实际速度分档选择 MET，优先于强度表；
- 查表缺失时 MET 回退为 8.0，保证新增运动类型不会导致计算失败。

本模块不依赖数据库或网络，输入为简单标量，便于单元测试与复用。
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .time_utils import round_half_up


ACTIVITY_TYPES: Tuple[str, ...] = (
    'running', 'cycling', 'walking', 'swimming',
    'rowing', 'elliptical', 'hiking', 'stair_climbing',
)
INTENSITY_LEVELS: Tuple[str, ...] = ('low', 'moderate', 'high', 'very_high')

DEFAULT_MET = 8.0
ASSUMED_BODY_WEIGHT_KG = 70.0


def _met_row(low: float, moderate: float, high: float, very_high: float) -> Mapping[str, float]:
    return MappingProxyType({'low': low, 'moderate': moderate, 'high': high, 'very_high': very_high})


# (运动类型, 强度) -> MET
MET_VALUES: Mapping[str, Mapping[str, float]] = MappingProxyType({
    'running': _met_row(6.0, 9.8, 11.5, 14.5),
    'cycling': _met_row(4.0, 8.0, 10.0, 12.0),
    'swimming': _met_row(6.0, 8.0, 10.0, 11.0),
    'walking': _met_row(3.0, 3.5, 4.5, 5.0),
    'rowing': _met_row(4.8, 7.0, 8.5, 12.0),
    'elliptical': _met_row(5.0, 7.0, 8.0, 9.5),
    'stair_climbing': _met_row(4.0, 8.0, 9.0, 12.0),
    'hiking': _met_row(4.5, 6.0, 7.5, 9.0),
})

# 跑步速度分档（km/h 上界，不含）-> MET；超过最后一档取 RUNNING_TOP_MET
RUNNING_SPEED_BANDS: Tuple[Tuple[float, float], ...] = (
    (8.0, 6.0),
    (9.0, 8.3),
    (10.0, 9.8),
    (11.0, 10.5),
    (12.0, 11.5),
    (13.0, 12.5),
    (14.0, 13.5),
)
RUNNING_TOP_MET = 14.5


@dataclass(frozen=True)
class MetricConfig:
    """卡路里估算所需的只读配置，可在测试中注入替换。"""
    met_values: Mapping[str, Mapping[str, float]] = field(default_factory=lambda: MET_VALUES)
    running_speed_bands: Tuple[Tuple[float, float], ...] = RUNNING_SPEED_BANDS
    running_top_met: float = RUNNING_TOP_MET
    default_met: float = DEFAULT_MET
    body_weight_kg: float = ASSUMED_BODY_WEIGHT_KG


DEFAULT_METRIC_CONFIG = MetricConfig()


def enum_value(value: Any) -> Any:
    """枚举取值（兼容 str 与 Enum 成员）。"""
    return getattr(value, 'value', value)


def _positive(value: Optional[float]) -> bool:
    try:
        return value is not None and float(value) > 0
    except (TypeError, ValueError):
        return False


def calculate_pace(duration_minutes: Optional[float], distance_km: Optional[float]) -> Optional[float]:
    """
    计算配速（分钟/公里）

    参数：
        duration_minutes: 时长（分钟）
        distance_km: 距离（公里），可为空

    返回：
        配速（分钟/公里），距离为 0/空或时长非正时返回 None
    """
    if not _positive(distance_km) or not _positive(duration_minutes):
        return None
    return float(duration_minutes) / float(distance_km)


def calculate_average_speed(duration_minutes: Optional[float], distance_km: Optional[float]) -> Optional[float]:
    """平均速度（km/h），输入不合法返回 None。"""
    if not _positive(distance_km) or not _positive(duration_minutes):
        return None
    return (float(distance_km) / float(duration_minutes)) * 60.0


def running_met_for_speed(speed_kmh: float, config: MetricConfig = DEFAULT_METRIC_CONFIG) -> float:
    """按跑步速度分档查找 MET。"""
    for upper, met in config.running_speed_bands:
        if speed_kmh < upper:
            return met
    return config.running_top_met


def lookup_met(
    activity_type: str,
    intensity_level: Optional[str],
    distance_km: Optional[float] = None,
    duration_minutes: Optional[float] = None,
    config: MetricConfig = DEFAULT_METRIC_CONFIG,
) -> float:
    """
    选择 MET 值

    规则：
    1. 跑步且距离、时长均为正：按实际平均速度分档；
    2. 否则查 (运动类型, 强度) 表；
    3. 表中缺失时回退 default_met（8.0）。
    """
    activity_type = enum_value(activity_type)
    intensity_level = enum_value(intensity_level)

    if activity_type == 'running':
        speed = calculate_average_speed(duration_minutes, distance_km)
        if speed is not None:
            return running_met_for_speed(speed, config)

    row = config.met_values.get(activity_type)
    if row is None:
        return config.default_met
    met = row.get(intensity_level)
    if met is None:
        return config.default_met
    return float(met)


def calculate_calories(
    activity_type: str,
    duration_minutes: float,
    intensity_level: Optional[str],
    distance_km: Optional[float] = None,
    config: MetricConfig = DEFAULT_METRIC_CONFIG,
) -> int:
    """
    估算卡路里消耗（kcal）

    公式：MET × 体重(kg) × 时长(小时)，四舍五入为整数。

    返回：
        非负整数；时长非正时返回 0
    """
    if not _positive(duration_minutes):
        return 0
    met = lookup_met(activity_type, intensity_level, distance_km, duration_minutes, config)
    duration_hours = float(duration_minutes) / 60.0
    return max(0, round_half_up(met * config.body_weight_kg * duration_hours))


def derive_session_metrics(
    activity_type: str,
    duration_minutes: float,
    intensity_level: Optional[str],
    distance_km: Optional[float] = None,
    config: MetricConfig = DEFAULT_METRIC_CONFIG,
) -> Dict[str, Any]:
    """汇总单次会话的派生指标：卡路里、配速、平均速度。"""
    return {
        'calories_burned': calculate_calories(activity_type, duration_minutes, intensity_level, distance_km, config),
        'pace_min_per_km': calculate_pace(duration_minutes, distance_km),
        'average_speed_kmh': calculate_average_speed(duration_minutes, distance_km),
    }
