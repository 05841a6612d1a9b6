"""时长解析与格式化工具。"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass

DURATION_PATTERN = re.compile(r"P(?:(\d+)D)?T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


@dataclass(frozen=True, slots=True)
class DurationParts:
    """拆分后的时/分/秒。"""

    hours: int
    minutes: int
    seconds: int


def parse_duration(text: str) -> int:
    """将`PT1H30M15S`形式的时长解析为秒数，无法识别时返回0。"""
    match = DURATION_PATTERN.search(text or "")
    if not match:
        return 0
    days, hours, minutes, seconds = (int(group or 0) for group in match.groups())
    return days * 86400 + hours * 3600 + minutes * 60 + seconds


def round_half_up(value: float) -> int:
    """四舍五入到整数（.5 向上取整）。"""
    return int(math.floor(value + 0.5))


def split_seconds(total_seconds: int) -> DurationParts:
    """将秒数拆分为时、分、秒。"""
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return DurationParts(hours=hours, minutes=minutes, seconds=seconds)


def format_hms(parts: DurationParts) -> str:
    return f"{parts.hours}h {parts.minutes}m {parts.seconds}s"


def _plural(value: int, unit: str) -> str:
    return f"{value} {unit}" if value == 1 else f"{value} {unit}s"


def format_verbose(parts: DurationParts) -> str:
    """输出如`1 hour 30 minutes`的描述，省略为0的部分。"""
    pieces = []
    if parts.hours > 0:
        pieces.append(_plural(parts.hours, "hour"))
    if parts.minutes > 0:
        pieces.append(_plural(parts.minutes, "minute"))
    if parts.seconds > 0:
        pieces.append(_plural(parts.seconds, "second"))
    return " ".join(pieces)
