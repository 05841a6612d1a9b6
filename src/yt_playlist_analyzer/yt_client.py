"""YouTube Data API v3 封装。"""
from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Sequence

import requests

from .models import Availability, PlaylistEntry, PlaylistInfo

API_BASE = "https://www.googleapis.com/youtube/v3"
PLAYLISTS_ENDPOINT = f"{API_BASE}/playlists"
PLAYLIST_ITEMS_ENDPOINT = f"{API_BASE}/playlistItems"
VIDEOS_ENDPOINT = f"{API_BASE}/videos"

MAX_RESULTS = 50
DEFAULT_MAX_PAGES = 200

PRIVATE_TITLE = "Private video"
DELETED_TITLE = "Deleted video"

logger = logging.getLogger(__name__)


class YouTubeAPIError(RuntimeError):
    """表示API返回错误响应体。"""

    def __init__(self, code: int, message: str, endpoint: str) -> None:
        super().__init__(f"API响应错误(code={code}, message={message}, endpoint={endpoint})")
        self.code = code
        self.message = message
        self.endpoint = endpoint


class YouTubeRequestError(RuntimeError):
    """表示网络请求或响应格式异常。"""

    def __init__(self, reason: str, endpoint: str) -> None:
        super().__init__(f"请求{endpoint}失败: {reason}")
        self.reason = reason
        self.endpoint = endpoint


def _object(value, name: str, endpoint: str) -> Dict:
    value = value or {}
    if not isinstance(value, dict):
        raise YouTubeRequestError(f"{name}字段不是JSON对象", endpoint)
    return value


def _items(data: Dict, endpoint: str) -> List[Dict]:
    items = data.get("items") or []
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise YouTubeRequestError("items字段格式无效", endpoint)
    return items


def classify_item(item: Dict) -> PlaylistEntry:
    """根据标题与隐私状态判定条目是否可用。"""
    snippet = _object(item.get("snippet"), "snippet", PLAYLIST_ITEMS_ENDPOINT)
    title = snippet.get("title", "")
    if not isinstance(title, str):
        raise YouTubeRequestError("title字段不是字符串", PLAYLIST_ITEMS_ENDPOINT)
    privacy = _object(item.get("status"), "status", PLAYLIST_ITEMS_ENDPOINT).get("privacyStatus")
    if title == DELETED_TITLE:
        return PlaylistEntry(title=title, availability=Availability.DELETED)
    if title == PRIVATE_TITLE or privacy == "private":
        return PlaylistEntry(title=title, availability=Availability.PRIVATE)
    video_id = _object(snippet.get("resourceId"), "resourceId", PLAYLIST_ITEMS_ENDPOINT).get("videoId")
    if not video_id or not isinstance(video_id, str):
        raise YouTubeRequestError("条目缺少videoId", PLAYLIST_ITEMS_ENDPOINT)
    return PlaylistEntry(title=title, availability=Availability.AVAILABLE, video_id=video_id)


class YouTubeClient:
    """封装播放列表相关的三个只读查询。"""

    def __init__(
        self,
        api_key: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        max_pages: int = DEFAULT_MAX_PAGES,
    ) -> None:
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout
        self.max_pages = max_pages

    def _request(self, method: str, url: str, params: Dict) -> Dict:
        query = dict(params)
        query["key"] = self.api_key
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self.session.request(method, url, params=query, timeout=self.timeout)
        except requests.RequestException as exc:
            raise YouTubeRequestError(str(exc), url) from exc
        try:
            payload = response.json()
        except ValueError as exc:
            if not response.ok:
                raise YouTubeRequestError(f"HTTP {response.status_code}", url) from exc
            raise YouTubeRequestError("响应不是有效的JSON", url) from exc
        if not isinstance(payload, dict):
            raise YouTubeRequestError("响应不是JSON对象", url)
        error = payload.get("error")
        if error or not response.ok:
            error = error if isinstance(error, dict) else {"message": str(error or "unknown")}
            raise YouTubeAPIError(error.get("code", response.status_code), error.get("message", "unknown"), url)
        return payload

    def get_playlist_info(self, playlist_id: str) -> Optional[PlaylistInfo]:
        """查询播放列表标题与创建者，不存在时返回None。"""
        data = self._request("GET", PLAYLISTS_ENDPOINT, params={"part": "snippet", "id": playlist_id})
        items = _items(data, PLAYLISTS_ENDPOINT)
        if not items:
            return None
        snippet = _object(items[0].get("snippet"), "snippet", PLAYLISTS_ENDPOINT)
        title = snippet.get("title", "")
        creator = snippet.get("channelTitle", "")
        if not isinstance(title, str) or not isinstance(creator, str):
            raise YouTubeRequestError("播放列表标题格式无效", PLAYLISTS_ENDPOINT)
        return PlaylistInfo(playlist_id=playlist_id, title=title, creator=creator)

    def iter_playlist_pages(self, playlist_id: str) -> Iterator[List[Dict]]:
        """按 nextPageToken 分页遍历播放列表，每次调用都从第一页开始。"""
        page_token: Optional[str] = None
        seen_tokens = set()
        pages = 0
        while True:
            if pages >= self.max_pages:
                raise YouTubeRequestError(f"分页超过上限{self.max_pages}页", PLAYLIST_ITEMS_ENDPOINT)
            params = {
                "part": "snippet,status",
                "maxResults": MAX_RESULTS,
                "playlistId": playlist_id,
            }
            if page_token:
                params["pageToken"] = page_token
            data = self._request("GET", PLAYLIST_ITEMS_ENDPOINT, params=params)
            pages += 1
            items = _items(data, PLAYLIST_ITEMS_ENDPOINT)
            logger.debug("playlist %s page %d: %d items", playlist_id, pages, len(items))
            yield items
            page_token = data.get("nextPageToken")
            if not page_token:
                break
            if not isinstance(page_token, str):
                raise YouTubeRequestError("nextPageToken不是字符串", PLAYLIST_ITEMS_ENDPOINT)
            if page_token in seen_tokens:
                raise YouTubeRequestError(f"重复的nextPageToken: {page_token}", PLAYLIST_ITEMS_ENDPOINT)
            seen_tokens.add(page_token)

    def iter_playlist_items(self, playlist_id: str) -> Iterator[PlaylistEntry]:
        for items in self.iter_playlist_pages(playlist_id):
            for item in items:
                yield classify_item(item)

    def get_video_durations(self, video_ids: Sequence[str]) -> List[str]:
        """批量查询视频时长编码，单次最多50个。"""
        if len(video_ids) > MAX_RESULTS:
            raise ValueError(f"单次最多查询{MAX_RESULTS}个视频")
        if not video_ids:
            return []
        data = self._request(
            "GET",
            VIDEOS_ENDPOINT,
            params={"part": "contentDetails", "id": ",".join(video_ids)},
        )
        durations: List[str] = []
        for item in _items(data, VIDEOS_ENDPOINT):
            duration = _object(item.get("contentDetails"), "contentDetails", VIDEOS_ENDPOINT).get("duration", "")
            if not isinstance(duration, str):
                raise YouTubeRequestError("duration字段不是字符串", VIDEOS_ENDPOINT)
            durations.append(duration)
        return durations
