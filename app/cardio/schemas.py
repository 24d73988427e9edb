"""
本文件定义了有氧会话相关的Pydantic数据模型，用于输入校验与结果序列化。

包含以下模型：
1. ActivityType / IntensityLevel: 运动类型与强度枚举
2. CardioSessionCreate: 记录会话时的输入模型（不接受卡路里等派生字段）
3. CardioSessionUpdate: 编辑会话时的输入模型（所有字段可选）
4. CardioSession: 完整会话模型（包含派生字段）
5. WeeklyBucket / TypeBucket / PacePoint / DailyBucket / CaloriesPoint: 聚合结果
6. CardioStats / CardioAnalytics: 统计与仪表盘数据
"""

import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ActivityType(str, Enum):
    """运动类型"""
    running = "running"
    cycling = "cycling"
    walking = "walking"
    swimming = "swimming"
    rowing = "rowing"
    elliptical = "elliptical"
    hiking = "hiking"
    stair_climbing = "stair_climbing"


class IntensityLevel(str, Enum):
    """强度等级"""
    low = "low"
    moderate = "moderate"
    high = "high"
    very_high = "very_high"


class Reduction(str, Enum):
    """聚合方式"""
    weekly = "weekly"
    moving_average_pace = "movingAveragePace"
    by_activity_type = "byActivityType"


class CardioSessionBase(BaseModel):
    activity_type: ActivityType
    duration_minutes: int = Field(ge=5)
    distance_km: Optional[float] = Field(default=None, ge=0)
    location: Optional[str] = None
    notes: Optional[str] = None


class CardioSessionCreate(CardioSessionBase):
    """记录会话时的请求模型"""
    session_date: Optional[datetime.date] = None  # 缺省为当天
    intensity_level: IntensityLevel = IntensityLevel.moderate


class CardioSessionUpdate(BaseModel):
    """编辑会话时的请求模型（只更新提供的字段）"""
    activity_type: Optional[ActivityType] = None
    session_date: Optional[datetime.date] = None
    duration_minutes: Optional[int] = Field(default=None, ge=5)
    distance_km: Optional[float] = Field(default=None, ge=0)
    intensity_level: Optional[IntensityLevel] = None
    location: Optional[str] = None
    notes: Optional[str] = None


class CardioSession(CardioSessionBase):
    """完整会话模型"""
    session_date: datetime.date
    intensity_level: IntensityLevel
    calories_burned: int = Field(ge=0)
    pace_min_per_km: Optional[float] = None
    average_speed_kmh: Optional[float] = None
    model_config = ConfigDict(from_attributes=True)


class WeeklyBucket(BaseModel):
    week_start: datetime.date
    label: str
    calories: int
    sessions: int
    duration_minutes: int
    distance_km: float


class TypeBucket(BaseModel):
    activity_type: str
    calories: int
    sessions: int
    duration_minutes: int
    distance_km: float


class PacePoint(BaseModel):
    session_date: datetime.date
    label: str
    pace: float
    activity_type: Optional[str] = None


class CaloriesPoint(BaseModel):
    session_date: datetime.date
    label: str
    calories: int
    activity_type: str


class DailyBucket(BaseModel):
    day: datetime.date
    label: str
    duration_minutes: int
    calories: int
    distance_km: float
    sessions: int


class PaceSummary(BaseModel):
    best_pace: Optional[float] = None
    average_pace: Optional[float] = None
    sessions: int = 0
    trend: Optional[str] = None  # improving / declining / steady
    improvement: Optional[float] = None
    best_pace_display: Optional[str] = None
    average_pace_display: Optional[str] = None
    improvement_display: Optional[str] = None


class SessionTotals(BaseModel):
    total_sessions: int
    total_duration: int
    total_distance: float
    total_calories: int
    avg_distance: Optional[float] = None
    avg_duration: Optional[float] = None


class ActivityTotals(SessionTotals):
    activity_type: str
    avg_pace: Optional[float] = None
    high_intensity_count: int = 0


class CardioStats(BaseModel):
    period: str
    overall: SessionTotals
    by_activity: List[ActivityTotals]


class CardioAnalytics(BaseModel):
    """仪表盘数据：配速、配速趋势、单次卡路里、周卡路里、类型分布"""
    pace_per_session: List[PacePoint]
    pace_trend: List[PacePoint]
    calories_per_session: List[CaloriesPoint]
    weekly_calories: List[WeeklyBucket]
    calories_by_type: List[TypeBucket]
    pace_summary: PaceSummary
