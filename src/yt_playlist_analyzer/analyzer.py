"""封装播放列表统计逻辑。"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

import requests

from .durations import parse_duration, round_half_up
from .models import SPEED_FACTORS, AnalysisResult, PlaylistEntry, PlaylistInfo
from .utils import build_session, chunked, extract_playlist_id
from .yt_client import DEFAULT_MAX_PAGES, MAX_RESULTS, YouTubeAPIError, YouTubeClient, YouTubeRequestError

logger = logging.getLogger(__name__)


class AnalysisError(RuntimeError):
    """分析播放列表时的错误。"""


class InvalidInputError(AnalysisError):
    """URL中没有可用的播放列表ID。"""


class PlaylistNotFoundError(AnalysisError):
    """远端没有匹配的播放列表。"""


class FetchFailedError(AnalysisError):
    """网络请求或远端响应异常。"""


def aggregate(info: PlaylistInfo, entries: Iterable[PlaylistEntry], durations: Iterable[int]) -> AnalysisResult:
    """根据条目与可用视频时长计算统计结果。"""
    entries = list(entries)
    unavailable_count = sum(1 for entry in entries if not entry.is_available)
    available_count = len(entries) - unavailable_count
    total = sum(durations)
    average = round_half_up(total / available_count) if available_count > 0 else 0
    speed_times = {factor: round_half_up(total / factor) for factor in SPEED_FACTORS}
    return AnalysisResult(
        title=info.title,
        creator=info.creator,
        video_count=len(entries),
        unavailable_count=unavailable_count,
        total_seconds=total,
        average_seconds=average,
        speed_times=speed_times,
    )


def analyze_playlist(
    url: str,
    *,
    client: Optional[YouTubeClient] = None,
    api_key: Optional[str] = None,
    session: Optional[requests.Session] = None,
    timeout: float = 10.0,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> AnalysisResult:
    """分析指定播放列表，返回统计结果。"""
    playlist_id = extract_playlist_id(url)
    if not playlist_id:
        raise InvalidInputError(f"无法在链接中找到list参数: {url}")

    if client is None:
        if not api_key:
            raise ValueError("缺少API Key")
        client = YouTubeClient(api_key, session=session or build_session(), timeout=timeout, max_pages=max_pages)

    try:
        info = client.get_playlist_info(playlist_id)
    except (YouTubeAPIError, YouTubeRequestError) as exc:
        raise FetchFailedError(f"获取播放列表信息失败: {exc}") from exc
    if info is None:
        raise PlaylistNotFoundError(f"播放列表不存在: {playlist_id}")

    try:
        entries = list(client.iter_playlist_items(playlist_id))
    except (YouTubeAPIError, YouTubeRequestError) as exc:
        raise FetchFailedError(f"抓取播放列表条目失败: {exc}") from exc

    video_ids = [entry.video_id for entry in entries if entry.is_available and entry.video_id]
    durations: List[int] = []
    for batch in chunked(video_ids, MAX_RESULTS):
        try:
            encoded = client.get_video_durations(batch)
        except (YouTubeAPIError, YouTubeRequestError) as exc:
            raise FetchFailedError(f"获取视频时长失败: {exc}") from exc
        durations.extend(parse_duration(text) for text in encoded)

    logger.debug(
        "playlist %s: %d entries, %d available, %d durations",
        playlist_id,
        len(entries),
        len(video_ids),
        len(durations),
    )
    return aggregate(info, entries, durations)
