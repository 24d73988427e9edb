"""有氧会话聚合分析核心算法

说明：
- 输入为会话字典列表（字段：activity_type, session_date, duration_minutes, distance_km,
  calories_burned, pace_min_per_km, intensity_level），只读取已计算好的字段，不重新推导指标；
- 周汇总：按周一为起点分桶，按周起始日期升序；
- 配速移动平均：仅使用有配速的会话，窗口 min(7, N)，只向后看（因果）；
- 按运动类型分组：支持按卡路里、时长或次数降序；
- 空输入对三种聚合均返回空列表。
"""

import datetime
from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

from .metrics import enum_value
from .time_utils import days_ago, format_pace, week_start

REDUCTION_WEEKLY = 'weekly'
REDUCTION_MOVING_AVERAGE_PACE = 'movingAveragePace'
REDUCTION_BY_ACTIVITY_TYPE = 'byActivityType'
REDUCTIONS = (REDUCTION_WEEKLY, REDUCTION_MOVING_AVERAGE_PACE, REDUCTION_BY_ACTIVITY_TYPE)

BREAKDOWN_SORT_KEYS = {
    'calories': 'calories',
    'duration': 'duration_minutes',
    'sessions': 'sessions',
}

# 统计周期 -> 回溯天数（None 表示全部）
PERIOD_DAYS = {'week': 7, 'month': 30, 'year': 365, 'all': None}

HIGH_INTENSITY_LEVELS = ('high', 'very_high')
DEFAULT_PACE_WINDOW = 7

Session = Mapping[str, Any]


def _int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _float(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _pace(session: Session) -> Optional[float]:
    pace = session.get('pace_min_per_km')
    if pace is None:
        return None
    pace = _float(pace)
    return pace if pace > 0 else None


def _short_date(day: datetime.date) -> str:
    return f"{day:%b} {day.day}"


def sort_chronologically(sessions: Sequence[Session]) -> List[Session]:
    return sorted(sessions, key=lambda s: s['session_date'])


def weekly_totals(sessions: Sequence[Session]) -> List[Dict[str, Any]]:
    """按周（周一起）汇总卡路里、次数、时长、距离，按周起始日期升序。"""
    buckets: Dict[datetime.date, Dict[str, Any]] = {}
    for session in sessions:
        monday = week_start(session['session_date'])
        bucket = buckets.get(monday)
        if bucket is None:
            bucket = buckets[monday] = {
                'week_start': monday,
                'label': f"Week of {_short_date(monday)}",
                'calories': 0,
                'sessions': 0,
                'duration_minutes': 0,
                'distance_km': 0.0,
            }
        bucket['calories'] += _int(session.get('calories_burned'))
        bucket['sessions'] += 1
        bucket['duration_minutes'] += _int(session.get('duration_minutes'))
        bucket['distance_km'] += _float(session.get('distance_km'))
    return [buckets[k] for k in sorted(buckets)]


def pace_series(sessions: Sequence[Session]) -> List[Dict[str, Any]]:
    """按时间顺序列出有配速的会话（无配速的会话直接剔除）。"""
    points = []
    for session in sort_chronologically(sessions):
        pace = _pace(session)
        if pace is None:
            continue
        points.append({
            'session_date': session['session_date'],
            'label': _short_date(session['session_date']),
            'pace': pace,
            'activity_type': enum_value(session.get('activity_type')),
        })
    return points


def moving_average(values: Sequence[float], window_cap: int = DEFAULT_PACE_WINDOW) -> List[float]:
    """
    因果（向后看）移动平均

    窗口大小 = min(window_cap, N)，第 i 个值取 [max(0, i-window+1), i] 的均值。
    """
    if not values:
        return []
    window = max(1, min(window_cap, len(values)))
    arr = np.asarray(values, dtype=float)
    out = []
    for i in range(len(arr)):
        start = max(0, i - window + 1)
        out.append(float(np.mean(arr[start:i + 1])))
    return out


def moving_average_pace(sessions: Sequence[Session], window_cap: int = DEFAULT_PACE_WINDOW) -> List[Dict[str, Any]]:
    """配速趋势：对有配速的会话序列计算因果移动平均。"""
    points = pace_series(sessions)
    averaged = moving_average([p['pace'] for p in points], window_cap)
    return [
        {
            'session_date': p['session_date'],
            'label': p['label'],
            'pace': avg,
            'activity_type': p['activity_type'],
        }
        for p, avg in zip(points, averaged)
    ]


def breakdown_by_activity_type(sessions: Sequence[Session], sort_by: str = 'calories') -> List[Dict[str, Any]]:
    """按运动类型分组汇总，按指定指标降序（calories / duration / sessions）。"""
    if sort_by not in BREAKDOWN_SORT_KEYS:
        raise ValueError(f"unknown breakdown sort key: {sort_by}")
    groups: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
    for session in sessions:
        activity = enum_value(session.get('activity_type'))
        group = groups.get(activity)
        if group is None:
            group = groups[activity] = {
                'activity_type': activity,
                'calories': 0,
                'sessions': 0,
                'duration_minutes': 0,
                'distance_km': 0.0,
            }
        group['calories'] += _int(session.get('calories_burned'))
        group['sessions'] += 1
        group['duration_minutes'] += _int(session.get('duration_minutes'))
        group['distance_km'] += _float(session.get('distance_km'))
    key = BREAKDOWN_SORT_KEYS[sort_by]
    return sorted(groups.values(), key=lambda g: g[key], reverse=True)


def aggregate(
    sessions: Sequence[Session],
    reduction: str,
    sort_by: str = 'calories',
    window_cap: int = DEFAULT_PACE_WINDOW,
) -> List[Dict[str, Any]]:
    """按选择器分发聚合：weekly / movingAveragePace / byActivityType。"""
    reduction = enum_value(reduction)
    if reduction == REDUCTION_WEEKLY:
        return weekly_totals(sessions)
    if reduction == REDUCTION_MOVING_AVERAGE_PACE:
        return moving_average_pace(sessions, window_cap)
    if reduction == REDUCTION_BY_ACTIVITY_TYPE:
        return breakdown_by_activity_type(sessions, sort_by)
    raise ValueError(f"unknown reduction: {reduction}")


def calories_per_session(sessions: Sequence[Session]) -> List[Dict[str, Any]]:
    return [
        {
            'session_date': s['session_date'],
            'label': _short_date(s['session_date']),
            'calories': _int(s.get('calories_burned')),
            'activity_type': enum_value(s.get('activity_type')),
        }
        for s in sort_chronologically(sessions)
    ]


def daily_totals(
    sessions: Sequence[Session],
    days: int = 7,
    today: Optional[datetime.date] = None,
    week_offset: int = 0,
) -> List[Dict[str, Any]]:
    """
    逐日汇总（无训练的日期补 0），日期升序

    参数：
        days: 天数（7 为一周视图，标签为星期；更长为月趋势，标签为 "Oct 12"）
        week_offset: 向前偏移的周数，0 表示以今天结尾
    """
    today = today or datetime.date.today()
    base = abs(week_offset) * 7
    by_day: Dict[datetime.date, List[Session]] = {}
    for session in sessions:
        by_day.setdefault(session['session_date'], []).append(session)

    out = []
    for i in range(days - 1, -1, -1):
        day = days_ago(base + i, today)
        day_sessions = by_day.get(day, [])
        out.append({
            'day': day,
            'label': _short_date(day) if days > 7 else f"{day:%a}",
            'duration_minutes': sum(_int(s.get('duration_minutes')) for s in day_sessions),
            'calories': sum(_int(s.get('calories_burned')) for s in day_sessions),
            'distance_km': sum(_float(s.get('distance_km')) for s in day_sessions),
            'sessions': len(day_sessions),
        })
    return out


def pace_summary(sessions: Sequence[Session], window_cap: int = DEFAULT_PACE_WINDOW) -> Dict[str, Any]:
    """
    配速概览

    返回：
        best_pace / average_pace: 最佳与平均配速（min/km）
        improvement: 移动平均首值减末值（至少 2 个点），正数表示变快
        trend: improving / declining / steady
        *_display: 对应数值的 m:ss 格式；improvement_display 取绝对值，方向看 trend
    """
    paces = [p['pace'] for p in pace_series(sessions)]
    best = min(paces) if paces else None
    average = float(np.mean(paces)) if paces else None
    improvement = None
    trend = None
    averaged = moving_average(paces, window_cap)
    if len(averaged) >= 2:
        improvement = averaged[0] - averaged[-1]
        # 配速数值越小越快
        if improvement > 0:
            trend = 'improving'
        elif improvement < 0:
            trend = 'declining'
        else:
            trend = 'steady'
    return {
        'best_pace': best,
        'average_pace': average,
        'sessions': len(paces),
        'trend': trend,
        'improvement': improvement,
        'best_pace_display': format_pace(best),
        'average_pace_display': format_pace(average),
        'improvement_display': format_pace(abs(improvement)) if improvement is not None else None,
    }


def _mean_or_none(values: List[float]) -> Optional[float]:
    return float(np.mean(values)) if values else None


def _totals(sessions: Sequence[Session]) -> Dict[str, Any]:
    distances = [_float(s.get('distance_km')) for s in sessions if s.get('distance_km') is not None]
    durations = [_int(s.get('duration_minutes')) for s in sessions]
    return {
        'total_sessions': len(sessions),
        'total_duration': sum(durations),
        'total_distance': sum(distances),
        'total_calories': sum(_int(s.get('calories_burned')) for s in sessions),
        'avg_distance': _mean_or_none(distances),
        'avg_duration': _mean_or_none(durations),
    }


def filter_period(sessions: Sequence[Session], period: str, today: Optional[datetime.date] = None) -> List[Session]:
    if period not in PERIOD_DAYS:
        raise ValueError(f"unknown period: {period}")
    lookback = PERIOD_DAYS[period]
    if lookback is None:
        return list(sessions)
    since = days_ago(lookback, today)
    return [s for s in sessions if s['session_date'] >= since]


def summarize(sessions: Sequence[Session], period: str = 'week', today: Optional[datetime.date] = None) -> Dict[str, Any]:
    """
    周期统计（整体 + 按运动类型）

    周期：week / month / year / all，分别为最近 7 / 30 / 365 天与全部。
    平均值忽略缺失字段（与 SQL AVG 一致），无数据时为 None。
    """
    selected = filter_period(sessions, period, today)

    groups: "OrderedDict[str, List[Session]]" = OrderedDict()
    for session in selected:
        groups.setdefault(enum_value(session.get('activity_type')), []).append(session)

    by_activity = []
    for activity, group in groups.items():
        row = _totals(group)
        paces = [p for p in (_pace(s) for s in group) if p is not None]
        row['activity_type'] = activity
        row['avg_pace'] = _mean_or_none(paces)
        row['high_intensity_count'] = sum(
            1 for s in group if enum_value(s.get('intensity_level')) in HIGH_INTENSITY_LEVELS
        )
        by_activity.append(row)

    return {
        'period': period,
        'overall': _totals(selected),
        'by_activity': by_activity,
    }
