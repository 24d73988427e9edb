"""
日志初始化（Logging Bootstrap）

说明：
- 统一初始化根日志记录器（root logger），设置格式与日志等级；
- 等级从显式传入 `level` 或环境变量 `LOG_LEVEL` 读取，默认 INFO；
- 日志固定输出到 stderr，stdout 留给命令行工具输出 JSON；
- 在命令行入口（tools/cardio_demo.py）启动时调用一次，库代码只使用 logging.getLogger(__name__)。
"""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def resolve_log_level(level: Optional[str] = None) -> int:
    """把等级字符串转换为 logging 常量，未知等级回退 INFO。"""
    name = (level or os.environ.get('LOG_LEVEL', 'INFO')).upper()
    if name == 'WARN':
        name = 'WARNING'
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: Optional[str] = None) -> int:
    """
    初始化全局日志配置。

    参数：
        level: 可选的日志等级（字符串）。若未提供，则读取环境变量 LOG_LEVEL（默认 INFO）。

    返回：
        实际生效的日志等级
    """
    log_level = resolve_log_level(level)
    logging.basicConfig(level=log_level, format=LOG_FORMAT, stream=sys.stderr, force=True)
    return log_level
