"""
有氧会话服务层测试
测试会话记录、编辑重算、聚合分发、仪表盘数据与演示数据生成
"""

import datetime
import logging

import pytest
from pydantic import ValidationError

from app.cardio import schemas, service


class TestLogSession:
    """会话记录测试"""

    def test_log_session_derives_metrics(self, today):
        session = service.log_session(
            {"activity_type": "running", "duration_minutes": 53, "distance_km": 10, "intensity_level": "low"},
            today=today,
        )
        assert session.session_date == today
        assert session.calories_burned == 711
        assert session.pace_min_per_km == pytest.approx(5.3)
        assert session.average_speed_kmh == pytest.approx(600 / 53)

    def test_defaults_to_moderate_intensity(self, today):
        session = service.log_session({"activity_type": "cycling", "duration_minutes": 60}, today=today)
        assert session.intensity_level == schemas.IntensityLevel.moderate
        assert session.calories_burned == 560
        assert session.pace_min_per_km is None

    def test_client_supplied_calories_are_ignored(self, today):
        session = service.log_session(
            {"activity_type": "walking", "duration_minutes": 30, "intensity_level": "low", "calories_burned": 9999},
            today=today,
        )
        assert session.calories_burned == 105

    def test_explicit_session_date(self):
        session = service.log_session(schemas.CardioSessionCreate(
            activity_type=schemas.ActivityType.swimming,
            duration_minutes=40,
            distance_km=1.6,
            session_date=datetime.date(2026, 9, 1),
        ))
        assert session.session_date == datetime.date(2026, 9, 1)
        assert session.pace_min_per_km == pytest.approx(25.0)

    @pytest.mark.parametrize("payload", [
        {"activity_type": "running", "duration_minutes": 3},
        {"activity_type": "running", "duration_minutes": 30, "distance_km": -1},
        {"activity_type": "skydiving", "duration_minutes": 30},
        {"duration_minutes": 30},
    ])
    def test_invalid_payload(self, payload):
        with pytest.raises(ValidationError):
            service.log_session(payload)


class TestUpdateSession:
    """会话编辑测试"""

    def test_update_recomputes_calories(self, today):
        session = service.log_session({"activity_type": "cycling", "duration_minutes": 60}, today=today)
        updated = service.update_session(session, {"duration_minutes": 30})
        assert updated.duration_minutes == 30
        assert updated.calories_burned == 280
        assert updated.session_date == today

    def test_adding_distance_adds_pace(self, today):
        session = service.log_session(
            {"activity_type": "running", "duration_minutes": 30, "intensity_level": "high"}, today=today,
        )
        assert session.pace_min_per_km is None
        assert session.calories_burned == 403

        updated = service.update_session(session, schemas.CardioSessionUpdate(distance_km=4.8))
        assert updated.pace_min_per_km == pytest.approx(6.25)
        assert updated.calories_burned == 343  # 9.6 km/h -> MET 9.8

    def test_none_for_required_field_is_ignored(self, today):
        session = service.log_session({"activity_type": "rowing", "duration_minutes": 45}, today=today)
        updated = service.update_session(session, {"activity_type": None, "notes": "Easy recovery session"})
        assert updated.activity_type == schemas.ActivityType.rowing
        assert updated.notes == "Easy recovery session"
        assert updated.calories_burned == session.calories_burned


class TestAggregateSessions:
    """聚合分发测试"""

    def test_weekly_from_dicts(self, sample_sessions):
        rows = service.aggregate_sessions(sample_sessions, "weekly")
        assert all(isinstance(r, schemas.WeeklyBucket) for r in rows)
        assert [r.calories for r in rows] == [500, 1280]

    def test_by_activity_type_enum_selector(self, sample_sessions):
        rows = service.aggregate_sessions(sample_sessions, schemas.Reduction.by_activity_type, sort_by="duration")
        assert isinstance(rows[0], schemas.TypeBucket)
        assert rows[0].activity_type == "running"

    def test_moving_average_pace(self, sample_sessions):
        rows = service.aggregate_sessions(sample_sessions, "movingAveragePace")
        assert [r.pace for r in rows] == pytest.approx([5.5, 5.75, 14.5 / 3])

    @pytest.mark.parametrize("reduction", [r.value for r in schemas.Reduction])
    def test_empty(self, reduction):
        assert service.aggregate_sessions([], reduction) == []

    def test_unknown_reduction(self, sample_sessions):
        with pytest.raises(ValueError):
            service.aggregate_sessions(sample_sessions, "yearly")


def test_build_analytics(sample_sessions):
    analytics = service.build_analytics(sample_sessions)
    assert len(analytics.pace_per_session) == 3
    assert len(analytics.pace_trend) == 3
    assert len(analytics.calories_per_session) == 4
    assert [w.week_start for w in analytics.weekly_calories] == [
        datetime.date(2026, 10, 5), datetime.date(2026, 10, 12),
    ]
    assert analytics.calories_by_type[0].activity_type == "running"
    assert analytics.pace_summary.best_pace == 3.0
    dumped = analytics.pace_summary.model_dump()
    assert dumped["improvement"] == pytest.approx(5.5 - 14.5 / 3)
    assert dumped["best_pace_display"] == "3:00"
    assert dumped["improvement_display"] == "0:40"
    assert analytics.pace_trend[-1].activity_type == "cycling"


def test_build_analytics_empty():
    analytics = service.build_analytics([])
    assert analytics.pace_per_session == []
    assert analytics.weekly_calories == []
    assert analytics.calories_by_type == []
    assert analytics.pace_summary.sessions == 0


def test_get_stats_and_daily_totals(sample_sessions, today):
    stats = service.get_stats(sample_sessions, period="month", today=today)
    assert stats.overall.total_sessions == 4
    assert {row.activity_type for row in stats.by_activity} == {"running", "cycling", "stair_climbing"}

    days = service.get_daily_totals(sample_sessions, days=30, today=today)
    assert len(days) == 30
    assert sum(d.calories for d in days) == 1780
    assert days[0].label == "Sep 19"


def test_generate_demo_sessions_round_trip(seeded_rng, today, caplog):
    with caplog.at_level(logging.INFO, logger="app.cardio.service"):
        sessions = service.generate_demo_sessions(60, rng=seeded_rng, today=today)

    assert sessions
    assert all(isinstance(s, schemas.CardioSession) for s in sessions)
    assert [s.session_date for s in sessions] == sorted(s.session_date for s in sessions)

    weeks = service.aggregate_sessions(sessions, "weekly")
    assert sum(w.calories for w in weeks) == sum(s.calories_burned for s in sessions)
    assert "[cardio-demo][breakdown]" in caplog.text
