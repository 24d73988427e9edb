#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
有氧演示数据工具

生成过去若干天的演示会话，并以 JSON 输出会话列表或聚合结果。
不写入数据库，只用于本地查看生成效果。

用法：
    python -m tools.cardio_demo                        # 输出全部会话
    python -m tools.cardio_demo --days-back 30 --seed 7
    python -m tools.cardio_demo --reduction weekly     # 输出周汇总
    python -m tools.cardio_demo --stats month          # 输出月度统计
"""

import argparse
import json
import sys
from typing import List, Optional

from app import config
from app.cardio import service
from app.cardio.schemas import Reduction
from app.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="生成有氧演示会话并输出聚合结果")
    parser.add_argument("--days-back", type=int, default=config.CARDIO_DEMO_DAYS_BACK, help="回溯天数")
    parser.add_argument("--seed", type=int, default=None, help="随机种子（可复现）")
    parser.add_argument(
        "--reduction",
        choices=[r.value for r in Reduction],
        default=None,
        help="聚合方式，未指定时输出会话列表",
    )
    parser.add_argument(
        "--sort-by",
        choices=["calories", "duration", "sessions"],
        default="calories",
        help="byActivityType 的排序指标",
    )
    parser.add_argument("--stats", choices=["week", "month", "year", "all"], default=None, help="输出周期统计")
    parser.add_argument("--log-level", default=None, help="日志等级（默认读取 LOG_LEVEL）")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level or config.LOG_LEVEL)

    rng = config.get_demo_rng(args.seed)
    sessions = service.generate_demo_sessions(args.days_back, rng=rng)

    if args.stats:
        payload = service.get_stats(sessions, period=args.stats).model_dump(mode="json")
    elif args.reduction:
        rows = service.aggregate_sessions(
            sessions, args.reduction, sort_by=args.sort_by, window_cap=config.CARDIO_PACE_WINDOW,
        )
        payload = [row.model_dump(mode="json") for row in rows]
    else:
        payload = [s.model_dump(mode="json") for s in sessions]

    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
