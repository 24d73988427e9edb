"""演示用有氧会话生成器

说明：
- 从今天开始向前逐日遍历 days_back 天，每天按星期几决定是否有训练（周末 0.5、周三 0.4、其他 0.3）；
- 运动类型、强度均通过加权随机选择；强度分布依赖运动类型；
- 距离 = 平均距离 ± 波动，最小 0.5 公里；爬楼梯等无距离项目不生成距离；
- 时长由距离 / (基准速度 × 0.85~1.15 抖动) 推导，最少 5 分钟；无距离项目时长为 15~45 分钟；
- 卡路里、配速、平均速度通过 metrics 模块计算，保证与记录接口一致；
- 结果按日期升序返回。

所有查找表均为只读配置（GeneratorConfig），随机源可注入以便测试复现。
"""

import datetime
import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .metrics import DEFAULT_METRIC_CONFIG, MetricConfig, derive_session_metrics
from .sampling import RandomSource, default_random_source, uniform, uniform_choice, weighted_choice

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivityProfile:
    """单个运动类型的生成参数。"""
    activity_type: str
    weight: float
    avg_distance_km: float
    distance_variance_km: float
    locations: Tuple[str, ...]

    @property
    def has_distance(self) -> bool:
        return self.avg_distance_km > 0


ACTIVITY_PROFILES: Tuple[ActivityProfile, ...] = (
    ActivityProfile('running', 40, 5, 2, ('Outdoor', 'Treadmill', 'Park', 'Track', 'Trail')),
    ActivityProfile('cycling', 25, 15, 5, ('Outdoor', 'Indoor Bike', 'Bike Path', 'Road')),
    ActivityProfile('walking', 15, 3, 1, ('Outdoor', 'Treadmill', 'Park', 'Neighborhood')),
    ActivityProfile('swimming', 10, 1.5, 0.5, ('Pool', 'Lap Pool', 'Open Water')),
    ActivityProfile('rowing', 5, 3, 1, ('Gym', 'Indoor Rower', 'Water')),
    ActivityProfile('elliptical', 3, 4, 1, ('Gym', 'Home')),
    ActivityProfile('hiking', 1, 8, 3, ('Trail', 'Mountain', 'Forest')),
    ActivityProfile('stair_climbing', 1, 0, 0, ('Gym', 'Stair Machine', 'Building Stairs')),
)

DEFAULT_INTENSITY_WEIGHTS: Tuple[Tuple[str, float], ...] = (
    ('low', 15), ('moderate', 50), ('high', 30), ('very_high', 5),
)

# 高强度项目偏向 moderate/high，步行偏向 low/moderate
INTENSITY_WEIGHTS: Mapping[str, Tuple[Tuple[str, float], ...]] = MappingProxyType({
    'running': (('low', 10), ('moderate', 40), ('high', 35), ('very_high', 15)),
    'rowing': (('low', 10), ('moderate', 40), ('high', 35), ('very_high', 15)),
    'walking': (('low', 40), ('moderate', 45), ('high', 15), ('very_high', 0)),
})


def _speeds(low: float, moderate: float, high: float, very_high: float) -> Mapping[str, float]:
    return MappingProxyType({'low': low, 'moderate': moderate, 'high': high, 'very_high': very_high})


# 基准速度（km/h），与 MET 表相互独立。
# walking/hiking 的 very_high 沿用 low 档速度，与历史种子数据保持一致。
BASE_SPEEDS_KMH: Mapping[str, Mapping[str, float]] = MappingProxyType({
    'running': _speeds(7, 9, 11, 14),
    'cycling': _speeds(15, 20, 25, 30),
    'walking': _speeds(4, 5, 6, 4),
    'swimming': _speeds(1, 1.5, 2, 2.5),
    'rowing': _speeds(6, 8, 10, 12),
    'elliptical': _speeds(6, 8, 10, 12),
    'hiking': _speeds(3, 4, 5, 3),
})
DEFAULT_BASE_SPEED_KMH = 8.0

NOTES: Tuple[Optional[str], ...] = (
    'Felt great today!',
    'Good pace, pushed harder than usual',
    'Tired but finished strong',
    'Easy recovery session',
    'New personal best!',
    'Legs were a bit heavy',
    'Perfect weather conditions',
    'Challenging but rewarding',
    'Building endurance',
    'Interval training session',
    None,
    None,
)


@dataclass(frozen=True)
class GeneratorConfig:
    activity_profiles: Tuple[ActivityProfile, ...] = ACTIVITY_PROFILES
    intensity_weights: Mapping[str, Tuple[Tuple[str, float], ...]] = field(default_factory=lambda: INTENSITY_WEIGHTS)
    default_intensity_weights: Tuple[Tuple[str, float], ...] = DEFAULT_INTENSITY_WEIGHTS
    base_speeds_kmh: Mapping[str, Mapping[str, float]] = field(default_factory=lambda: BASE_SPEEDS_KMH)
    default_base_speed_kmh: float = DEFAULT_BASE_SPEED_KMH
    weekend_probability: float = 0.5
    wednesday_probability: float = 0.4
    weekday_probability: float = 0.3
    min_distance_km: float = 0.5
    min_duration_minutes: int = 5
    duration_only_range: Tuple[int, int] = (15, 45)
    speed_jitter: Tuple[float, float] = (0.85, 1.15)
    notes: Tuple[Optional[str], ...] = NOTES
    metric_config: MetricConfig = DEFAULT_METRIC_CONFIG

    def profile_for(self, activity_type: str) -> Optional[ActivityProfile]:
        for profile in self.activity_profiles:
            if profile.activity_type == activity_type:
                return profile
        return None


DEFAULT_GENERATOR_CONFIG = GeneratorConfig()


def session_probability(day: datetime.date, config: GeneratorConfig = DEFAULT_GENERATOR_CONFIG) -> float:
    """当天有训练的概率：周末 > 周三 > 其他工作日。"""
    weekday = day.weekday()
    if weekday >= 5:
        return config.weekend_probability
    if weekday == 2:
        return config.wednesday_probability
    return config.weekday_probability


def pick_activity(rng: RandomSource, config: GeneratorConfig = DEFAULT_GENERATOR_CONFIG) -> ActivityProfile:
    return weighted_choice([(p, p.weight) for p in config.activity_profiles], rng)


def pick_intensity(activity_type: str, rng: RandomSource, config: GeneratorConfig = DEFAULT_GENERATOR_CONFIG) -> str:
    weights = config.intensity_weights.get(activity_type, config.default_intensity_weights)
    return weighted_choice(weights, rng)


def generate_distance(profile: ActivityProfile, rng: RandomSource, config: GeneratorConfig = DEFAULT_GENERATOR_CONFIG) -> Optional[float]:
    """距离（公里，两位小数）；无距离项目返回 None。"""
    if not profile.has_distance:
        return None
    distance = profile.avg_distance_km + (rng.random() - 0.5) * 2 * profile.distance_variance_km
    return round(max(config.min_distance_km, distance), 2)


def base_speed(activity_type: str, intensity_level: str, config: GeneratorConfig = DEFAULT_GENERATOR_CONFIG) -> float:
    speeds = config.base_speeds_kmh.get(activity_type)
    if not speeds:
        return config.default_base_speed_kmh
    return float(speeds.get(intensity_level, config.default_base_speed_kmh))


def generate_duration(
    distance_km: Optional[float],
    activity_type: str,
    intensity_level: str,
    rng: RandomSource,
    config: GeneratorConfig = DEFAULT_GENERATOR_CONFIG,
) -> int:
    """
    生成时长（分钟）

    - 无距离：在 [15, 45) 内均匀取整；
    - 有距离：基准速度 × 抖动，时长 = round(距离 / 速度 × 60)，最少 5 分钟。
    """
    if not distance_km:
        low, high = config.duration_only_range
        return int(math.floor(low + rng.random() * (high - low)))

    speed = base_speed(activity_type, intensity_level, config) * uniform(rng, *config.speed_jitter)
    duration = int(math.floor((distance_km / speed) * 60 + 0.5))
    return max(config.min_duration_minutes, duration)


def generate_session(
    day: datetime.date,
    rng: RandomSource,
    config: GeneratorConfig = DEFAULT_GENERATOR_CONFIG,
) -> Dict[str, Any]:
    """为指定日期生成一条完整的会话记录（含派生指标）。"""
    profile = pick_activity(rng, config)
    intensity = pick_intensity(profile.activity_type, rng, config)
    distance = generate_distance(profile, rng, config)
    duration = generate_duration(distance, profile.activity_type, intensity, rng, config)
    derived = derive_session_metrics(profile.activity_type, duration, intensity, distance, config.metric_config)

    return {
        'activity_type': profile.activity_type,
        'session_date': day,
        'duration_minutes': duration,
        'distance_km': distance,
        'intensity_level': intensity,
        'location': uniform_choice(profile.locations, rng),
        'notes': uniform_choice(config.notes, rng),
        **derived,
    }


def generate_cardio_sessions(
    days_back: int = 60,
    rng: Optional[RandomSource] = None,
    today: Optional[datetime.date] = None,
    config: GeneratorConfig = DEFAULT_GENERATOR_CONFIG,
) -> List[Dict[str, Any]]:
    """
    生成过去 days_back 天的演示会话

    参数：
        days_back: 回溯天数（含今天）
        rng: 随机源，测试时传入 random.Random(seed)
        today: 基准日期，默认当天

    返回：
        按 session_date 升序排列的会话列表
    """
    rng = rng or default_random_source()
    today = today or datetime.date.today()

    sessions: List[Dict[str, Any]] = []
    for offset in range(max(0, days_back)):
        day = today - datetime.timedelta(days=offset)
        if rng.random() > session_probability(day, config):
            continue
        sessions.append(generate_session(day, rng, config))

    sessions.sort(key=lambda s: s['session_date'])
    logger.info("[cardio-generator][generate] days_back=%s sessions=%s", days_back, len(sessions))
    return sessions
