import pytest
import requests
import responses

from yt_playlist_analyzer.analyzer import (
    FetchFailedError,
    InvalidInputError,
    PlaylistNotFoundError,
    aggregate,
    analyze_playlist,
)
from yt_playlist_analyzer.models import Availability, PlaylistEntry, PlaylistInfo
from yt_playlist_analyzer.yt_client import PLAYLIST_ITEMS_ENDPOINT, PLAYLISTS_ENDPOINT, VIDEOS_ENDPOINT

PLAYLIST_URL = "https://www.youtube.com/playlist?list=PLdemo123"
INFO = PlaylistInfo(playlist_id="PLdemo123", title="测试列表", creator="测试频道")


def _available(video_id: str) -> PlaylistEntry:
    return PlaylistEntry(title=f"视频{video_id}", availability=Availability.AVAILABLE, video_id=video_id)


def _mock_playlist_response() -> dict:
    return {"items": [{"id": "PLdemo123", "snippet": {"title": "测试列表", "channelTitle": "测试频道"}}]}


def _mock_items_response() -> dict:
    return {
        "items": [
            {"snippet": {"title": "第一集", "resourceId": {"videoId": "v1"}}, "status": {"privacyStatus": "public"}},
            {"snippet": {"title": "Private video", "resourceId": {"videoId": "v2"}}, "status": {"privacyStatus": "private"}},
            {"snippet": {"title": "第三集", "resourceId": {"videoId": "v3"}}, "status": {"privacyStatus": "public"}},
        ]
    }


def _mock_videos_response() -> dict:
    return {
        "items": [
            {"id": "v1", "contentDetails": {"duration": "PT10M"}},
            {"id": "v3", "contentDetails": {"duration": "PT15M"}},
        ]
    }


def test_aggregate_average() -> None:
    entries = [_available("a"), _available("b"), _available("c")]
    result = aggregate(INFO, entries, [60, 120, 180])
    assert result.total_seconds == 360
    assert result.average_seconds == 120


def test_aggregate_without_available_entries() -> None:
    entries = [
        PlaylistEntry(title="Private video", availability=Availability.PRIVATE),
        PlaylistEntry(title="Deleted video", availability=Availability.DELETED),
    ]
    result = aggregate(INFO, entries, [])
    assert result.video_count == 2
    assert result.unavailable_count == 2
    assert result.average_seconds == 0
    assert result.total_seconds == 0
    assert all(seconds == 0 for seconds in result.speed_times.values())


def test_aggregate_speed_times() -> None:
    entries = [_available("a"), _available("b")]
    result = aggregate(INFO, entries, [3600, 3600])
    assert result.speed_times[2.0] == 3600
    assert result.speed_times[1.25] == 5760
    assert result.speed_times[1.5] == 4800
    assert result.speed_times[1.75] == 4114
    assert (result.speed_duration(1.25).hours, result.speed_duration(1.25).minutes) == (1, 36)


def test_aggregate_excludes_unavailable_from_average() -> None:
    entries = [_available("a"), PlaylistEntry(title="Private video", availability=Availability.PRIVATE)]
    result = aggregate(INFO, entries, [300])
    assert result.video_count == 2
    assert result.unavailable_count == 1
    assert result.available_count == 1
    assert result.average_seconds == 300


@responses.activate
def test_analyze_playlist_end_to_end() -> None:
    responses.add(responses.GET, PLAYLISTS_ENDPOINT, json=_mock_playlist_response(), status=200)
    responses.add(responses.GET, PLAYLIST_ITEMS_ENDPOINT, json=_mock_items_response(), status=200)
    responses.add(responses.GET, VIDEOS_ENDPOINT, json=_mock_videos_response(), status=200)

    result = analyze_playlist(PLAYLIST_URL, api_key="KEY")

    assert result.title == "测试列表"
    assert result.creator == "测试频道"
    assert result.video_count == 3
    assert result.unavailable_count == 1
    assert result.total_seconds == 1500
    assert result.average_seconds == 750
    assert result.speed_times == {1.25: 1200, 1.5: 1000, 1.75: 857, 2.0: 750}
    assert len(responses.calls) == 3
    assert "id=v1%2Cv3" in responses.calls[2].request.url


@responses.activate
def test_analyze_playlist_batches_duration_lookups() -> None:
    items = [
        {"snippet": {"title": f"视频{i}", "resourceId": {"videoId": f"v{i}"}}, "status": {"privacyStatus": "public"}}
        for i in range(120)
    ]
    responses.add(responses.GET, PLAYLISTS_ENDPOINT, json=_mock_playlist_response(), status=200)
    responses.add(
        responses.GET,
        PLAYLIST_ITEMS_ENDPOINT,
        json={"items": items[:50], "nextPageToken": "P2"},
        status=200,
    )
    responses.add(
        responses.GET,
        PLAYLIST_ITEMS_ENDPOINT,
        json={"items": items[50:100], "nextPageToken": "P3"},
        status=200,
    )
    responses.add(responses.GET, PLAYLIST_ITEMS_ENDPOINT, json={"items": items[100:]}, status=200)
    for size in (50, 50, 20):
        responses.add(
            responses.GET,
            VIDEOS_ENDPOINT,
            json={"items": [{"contentDetails": {"duration": "PT1M"}} for _ in range(size)]},
            status=200,
        )

    result = analyze_playlist(PLAYLIST_URL, api_key="KEY")

    assert result.video_count == 120
    assert result.total_seconds == 120 * 60
    assert result.average_seconds == 60
    assert len(responses.calls) == 1 + 3 + 3


@responses.activate
def test_analyze_playlist_invalid_input_makes_no_request() -> None:
    with pytest.raises(InvalidInputError):
        analyze_playlist("https://www.youtube.com/watch?v=abc", api_key="KEY")
    assert len(responses.calls) == 0


@responses.activate
def test_analyze_playlist_not_found() -> None:
    responses.add(responses.GET, PLAYLISTS_ENDPOINT, json={"items": []}, status=200)
    with pytest.raises(PlaylistNotFoundError):
        analyze_playlist(PLAYLIST_URL, api_key="KEY")


@responses.activate
def test_analyze_playlist_fetch_failed_on_items() -> None:
    responses.add(responses.GET, PLAYLISTS_ENDPOINT, json=_mock_playlist_response(), status=200)
    responses.add(responses.GET, PLAYLIST_ITEMS_ENDPOINT, body=requests.ConnectionError("boom"))
    with pytest.raises(FetchFailedError):
        analyze_playlist(PLAYLIST_URL, api_key="KEY")


@responses.activate
def test_analyze_playlist_fetch_failed_on_durations() -> None:
    responses.add(responses.GET, PLAYLISTS_ENDPOINT, json=_mock_playlist_response(), status=200)
    responses.add(responses.GET, PLAYLIST_ITEMS_ENDPOINT, json=_mock_items_response(), status=200)
    responses.add(
        responses.GET,
        VIDEOS_ENDPOINT,
        json={"error": {"code": 500, "message": "backendError"}},
        status=500,
    )
    with pytest.raises(FetchFailedError):
        analyze_playlist(PLAYLIST_URL, api_key="KEY")


def test_analyze_playlist_requires_key_or_client() -> None:
    with pytest.raises(ValueError):
        analyze_playlist(PLAYLIST_URL)


@responses.activate
def test_analyze_playlist_malformed_items_fail_as_fetch_error() -> None:
    responses.add(responses.GET, PLAYLISTS_ENDPOINT, json=_mock_playlist_response(), status=200)
    responses.add(responses.GET, PLAYLIST_ITEMS_ENDPOINT, json={"items": ["oops"]}, status=200)
    with pytest.raises(FetchFailedError):
        analyze_playlist(PLAYLIST_URL, api_key="KEY")


@responses.activate
def test_analyze_playlist_malformed_duration_fails_as_fetch_error() -> None:
    responses.add(responses.GET, PLAYLISTS_ENDPOINT, json=_mock_playlist_response(), status=200)
    responses.add(responses.GET, PLAYLIST_ITEMS_ENDPOINT, json=_mock_items_response(), status=200)
    responses.add(
        responses.GET,
        VIDEOS_ENDPOINT,
        json={"items": [{"contentDetails": {"duration": 600}}]},
        status=200,
    )
    with pytest.raises(FetchFailedError):
        analyze_playlist(PLAYLIST_URL, api_key="KEY")
