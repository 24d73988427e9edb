"""
有氧会话服务层

职责：
1. 记录会话：校验输入、填充缺省值（日期默认当天、强度默认 moderate），计算派生指标；
2. 编辑会话：合并提供的字段后重新计算所有派生指标（卡路里、配速、平均速度）；
3. 聚合分析：接受字典或模型对象，按选择器分发到核心聚合算法；
4. 仪表盘数据与周期统计；
5. 演示数据生成，并输出按运动类型的汇总日志。

核心算法位于 app.core.analytics，本层只负责数据结构转换与日志。
"""

import datetime
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel

from ..config import CARDIO_DEMO_DAYS_BACK, CARDIO_PACE_WINDOW
from ..core.analytics import aggregation
from ..core.analytics.generator import DEFAULT_GENERATOR_CONFIG, GeneratorConfig, generate_cardio_sessions
from ..core.analytics.metrics import DEFAULT_METRIC_CONFIG, MetricConfig, derive_session_metrics
from ..core.analytics.sampling import RandomSource
from . import schemas

logger = logging.getLogger(__name__)

SessionRecord = Union[schemas.CardioSession, Mapping[str, Any]]

_BUCKET_MODELS = {
    schemas.Reduction.weekly: schemas.WeeklyBucket,
    schemas.Reduction.moving_average_pace: schemas.PacePoint,
    schemas.Reduction.by_activity_type: schemas.TypeBucket,
}


def _derive(data: Dict[str, Any], metric_config: MetricConfig) -> schemas.CardioSession:
    derived = derive_session_metrics(
        data['activity_type'],
        data['duration_minutes'],
        data['intensity_level'],
        data.get('distance_km'),
        metric_config,
    )
    return schemas.CardioSession(**{**data, **derived})


def log_session(
    payload: Union[schemas.CardioSessionCreate, Mapping[str, Any]],
    today: Optional[datetime.date] = None,
    metric_config: MetricConfig = DEFAULT_METRIC_CONFIG,
) -> schemas.CardioSession:
    """记录一次新会话，返回含派生指标的完整会话。"""
    if not isinstance(payload, schemas.CardioSessionCreate):
        payload = schemas.CardioSessionCreate.model_validate(payload)
    data = payload.model_dump()
    if data.get('session_date') is None:
        data['session_date'] = today or datetime.date.today()
    session = _derive(data, metric_config)
    logger.info(
        "[cardio][log] activity=%s date=%s duration=%s calories=%s",
        session.activity_type.value, session.session_date, session.duration_minutes, session.calories_burned,
    )
    return session


def update_session(
    session: schemas.CardioSession,
    changes: Union[schemas.CardioSessionUpdate, Mapping[str, Any]],
    metric_config: MetricConfig = DEFAULT_METRIC_CONFIG,
) -> schemas.CardioSession:
    """编辑会话：只更新提供的字段，然后重新计算派生指标。"""
    if not isinstance(changes, schemas.CardioSessionUpdate):
        changes = schemas.CardioSessionUpdate.model_validate(changes)
    update_data = changes.model_dump(exclude_unset=True)

    data = session.model_dump(exclude={'calories_burned', 'pace_min_per_km', 'average_speed_kmh'})
    for field, value in update_data.items():
        # 必填字段传入 None 视为未修改
        if value is None and field in ('activity_type', 'session_date', 'duration_minutes', 'intensity_level'):
            continue
        data[field] = value

    updated = _derive(data, metric_config)
    logger.info(
        "[cardio][update] fields=%s calories=%s->%s",
        sorted(update_data), session.calories_burned, updated.calories_burned,
    )
    return updated


def to_sessions(records: Iterable[SessionRecord]) -> List[schemas.CardioSession]:
    """把字典或 ORM/模型对象统一转换为 CardioSession。"""
    out = []
    for record in records:
        if isinstance(record, schemas.CardioSession):
            out.append(record)
        elif isinstance(record, Mapping):
            out.append(schemas.CardioSession.model_validate(dict(record)))
        else:
            out.append(schemas.CardioSession.model_validate(record, from_attributes=True))
    return out


def _as_dicts(records: Iterable[SessionRecord]) -> List[Dict[str, Any]]:
    return [s.model_dump() for s in to_sessions(records)]


def aggregate_sessions(
    records: Iterable[SessionRecord],
    reduction: Union[schemas.Reduction, str],
    sort_by: str = 'calories',
    window_cap: int = CARDIO_PACE_WINDOW,
) -> List[BaseModel]:
    """
    聚合会话

    参数：
        records: 会话列表（字典或 CardioSession）
        reduction: weekly / movingAveragePace / byActivityType
        sort_by: 类型分布排序指标（calories / duration / sessions）
        window_cap: 配速移动平均窗口上限

    返回：
        对应的聚合结果模型列表；空输入返回空列表
    """
    try:
        reduction = schemas.Reduction(reduction)
    except ValueError:
        raise ValueError(f"unknown reduction: {reduction}") from None
    rows = aggregation.aggregate(_as_dicts(records), reduction.value, sort_by=sort_by, window_cap=window_cap)
    model = _BUCKET_MODELS[reduction]
    return [model(**row) for row in rows]


def build_analytics(
    records: Iterable[SessionRecord],
    window_cap: int = CARDIO_PACE_WINDOW,
) -> schemas.CardioAnalytics:
    """仪表盘数据：各图表所需的序列一次性计算。"""
    sessions = _as_dicts(records)
    return schemas.CardioAnalytics(
        pace_per_session=[schemas.PacePoint(**p) for p in aggregation.pace_series(sessions)],
        pace_trend=[schemas.PacePoint(**p) for p in aggregation.moving_average_pace(sessions, window_cap)],
        calories_per_session=[schemas.CaloriesPoint(**c) for c in aggregation.calories_per_session(sessions)],
        weekly_calories=[schemas.WeeklyBucket(**w) for w in aggregation.weekly_totals(sessions)],
        calories_by_type=[schemas.TypeBucket(**t) for t in aggregation.breakdown_by_activity_type(sessions)],
        pace_summary=schemas.PaceSummary(**aggregation.pace_summary(sessions, window_cap)),
    )


def get_stats(
    records: Iterable[SessionRecord],
    period: str = 'week',
    today: Optional[datetime.date] = None,
) -> schemas.CardioStats:
    """周期统计（week / month / year / all）。"""
    return schemas.CardioStats(**aggregation.summarize(_as_dicts(records), period, today))


def get_daily_totals(
    records: Iterable[SessionRecord],
    days: int = 7,
    today: Optional[datetime.date] = None,
    week_offset: int = 0,
) -> List[schemas.DailyBucket]:
    rows = aggregation.daily_totals(_as_dicts(records), days, today, week_offset)
    return [schemas.DailyBucket(**row) for row in rows]


def generate_demo_sessions(
    days_back: int = CARDIO_DEMO_DAYS_BACK,
    rng: Optional[RandomSource] = None,
    today: Optional[datetime.date] = None,
    generator_config: GeneratorConfig = DEFAULT_GENERATOR_CONFIG,
) -> List[schemas.CardioSession]:
    """生成演示会话，并按运动类型输出汇总日志。"""
    sessions = [schemas.CardioSession(**s) for s in generate_cardio_sessions(days_back, rng, today, generator_config)]

    breakdown = aggregation.breakdown_by_activity_type([s.model_dump() for s in sessions], sort_by='sessions')
    for row in breakdown:
        logger.info(
            "[cardio-demo][breakdown] activity=%s sessions=%s duration=%s distance=%.1f calories=%s",
            row['activity_type'], row['sessions'], row['duration_minutes'], row['distance_km'], row['calories'],
        )
    if sessions:
        logger.info(
            "[cardio-demo][range] first=%s last=%s", sessions[0].session_date, sessions[-1].session_date,
        )
    return sessions
