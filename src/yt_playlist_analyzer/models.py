"""数据模型定义。"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

from .durations import DurationParts, split_seconds

SPEED_FACTORS = (1.25, 1.5, 1.75, 2.0)


class Availability(str, Enum):
    """播放列表条目的可用状态。"""

    AVAILABLE = "available"
    PRIVATE = "private"
    DELETED = "deleted"


@dataclass(slots=True)
class PlaylistInfo:
    """播放列表元信息。"""

    playlist_id: str
    title: str
    creator: str


@dataclass(slots=True)
class PlaylistEntry:
    """播放列表中的视频条目。"""

    title: str
    availability: Availability
    video_id: Optional[str] = None

    @property
    def is_available(self) -> bool:
        return self.availability is Availability.AVAILABLE


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """播放列表统计结果，一次分析生成一次。"""

    title: str
    creator: str
    video_count: int
    unavailable_count: int
    total_seconds: int
    average_seconds: int
    speed_times: Mapping[float, int] = field(default_factory=dict)

    @property
    def available_count(self) -> int:
        return self.video_count - self.unavailable_count

    @property
    def total_duration(self) -> DurationParts:
        return split_seconds(self.total_seconds)

    @property
    def average_duration(self) -> DurationParts:
        return split_seconds(self.average_seconds)

    def speed_duration(self, factor: float) -> DurationParts:
        return split_seconds(self.speed_times[factor])
