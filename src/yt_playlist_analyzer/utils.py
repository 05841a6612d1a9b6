"""通用工具方法。"""
from __future__ import annotations

import re
from typing import Dict, Iterator, List, Optional, Sequence, TypeVar

import requests

T = TypeVar("T")

PLAYLIST_ID_PATTERN = re.compile(r"[&?]list=([^&]+)")
_DEFAULT_HEADERS = {
    "User-Agent": "yt-playlist-analyzer/0.1 (+https://www.youtube.com/)",
    "Accept": "application/json",
}


def extract_playlist_id(url: str) -> Optional[str]:
    """从播放列表URL中提取`list`参数，找不到时返回None。"""
    match = PLAYLIST_ID_PATTERN.search(url or "")
    if not match:
        return None
    return match.group(1)


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """按固定大小切分序列。"""
    if size <= 0:
        raise ValueError("size必须大于0")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


def build_session(extra_headers: Optional[Dict[str, str]] = None) -> requests.Session:
    """构造带默认Headers的requests会话。"""
    session = requests.Session()
    session.headers.update(_DEFAULT_HEADERS)
    if extra_headers:
        session.headers.update(extra_headers)
    return session
