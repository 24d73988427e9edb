"""
演示数据命令行工具测试
"""

import json

from tools.cardio_demo import main


def test_outputs_sessions(capsys):
    assert main(["--days-back", "21", "--seed", "3", "--log-level", "WARNING"]) == 0
    sessions = json.loads(capsys.readouterr().out)
    assert isinstance(sessions, list)
    dates = [s["session_date"] for s in sessions]
    assert dates == sorted(dates)
    for s in sessions:
        assert s["calories_burned"] >= 0
        assert s["duration_minutes"] >= 5


def test_seed_makes_output_reproducible(capsys):
    main(["--days-back", "14", "--seed", "11", "--log-level", "WARNING"])
    first = capsys.readouterr().out
    main(["--days-back", "14", "--seed", "11", "--log-level", "WARNING"])
    second = capsys.readouterr().out
    # 基准日期相同（同一天运行）时输出一致
    assert first == second


def test_weekly_reduction(capsys):
    main(["--days-back", "60", "--seed", "3", "--log-level", "WARNING"])
    sessions = json.loads(capsys.readouterr().out)

    main(["--days-back", "60", "--seed", "3", "--reduction", "weekly", "--log-level", "WARNING"])
    weeks = json.loads(capsys.readouterr().out)
    assert sum(w["calories"] for w in weeks) == sum(s["calories_burned"] for s in sessions)


def test_stats(capsys):
    main(["--days-back", "30", "--seed", "8", "--stats", "all", "--log-level", "WARNING"])
    stats = json.loads(capsys.readouterr().out)
    assert stats["period"] == "all"
    assert "overall" in stats
    assert isinstance(stats["by_activity"], list)
