from __future__ import annotations

from typing import Any

import httpx
import pytest
import yt_dlp
from youtube_transcript_api import (
    IpBlocked,
    RequestBlocked,
    TranscriptsDisabled,
    VideoUnavailable,
)

from recipe_note.services import fetcher
from recipe_note.services.errors import CaptionFetchFailedError, NoCaptionsError

VTT = "WEBVTT\n\n00:01.000 --> 00:03.000\nboil water\n"


class FakeYoutubeDL:
    info: Any = {}
    error: Exception | None = None
    urls: list[str] = []

    def __init__(self, opts: dict) -> None:
        self.opts = opts

    def __enter__(self) -> "FakeYoutubeDL":
        return self

    def __exit__(self, *exc: object) -> None:
        return None

    def extract_info(self, url: str, download: bool = False) -> Any:
        assert download is False
        FakeYoutubeDL.urls.append(url)
        if FakeYoutubeDL.error:
            raise FakeYoutubeDL.error
        return FakeYoutubeDL.info


class FakeTranscriptApi:
    data: list[dict] | None = None
    error: Exception | None = None

    def fetch(self, video_id: str, languages: list[str]) -> "FakeTranscriptApi":
        if FakeTranscriptApi.error:
            raise FakeTranscriptApi.error
        return self

    def to_raw_data(self) -> list[dict]:
        return FakeTranscriptApi.data or []


@pytest.fixture(autouse=True)
def fakes(monkeypatch: pytest.MonkeyPatch) -> None:
    FakeYoutubeDL.info = {}
    FakeYoutubeDL.error = None
    FakeYoutubeDL.urls = []
    FakeTranscriptApi.data = None
    FakeTranscriptApi.error = None
    monkeypatch.setattr(fetcher.yt_dlp, "YoutubeDL", FakeYoutubeDL)
    monkeypatch.setattr(fetcher, "YouTubeTranscriptApi", FakeTranscriptApi)


class TestPickCaptionSource:
    def test_language_priority(self) -> None:
        info = {
            "subtitles": {
                "en": [{"ext": "vtt", "url": "https://subs/en.vtt"}],
                "ja": [{"ext": "json3", "url": "https://subs/ja.json3"}, {"ext": "vtt", "url": "https://subs/ja.vtt"}],
            }
        }
        source = fetcher.pick_caption_source(info, ["ja", "en"])

        assert source is not None
        assert source.url == "https://subs/ja.vtt"
        assert source.language == "ja"

    def test_manual_subtitles_before_automatic(self) -> None:
        info = {
            "automatic_captions": {"ja": [{"ext": "vtt", "url": "https://auto/ja.vtt"}]},
            "subtitles": {"ja": [{"ext": "vtt", "url": "https://manual/ja.vtt"}]},
        }
        assert fetcher.pick_caption_source(info, ["ja"]).url == "https://manual/ja.vtt"

    def test_falls_back_to_automatic(self) -> None:
        info = {"subtitles": {}, "automatic_captions": {"ja": [{"ext": "vtt", "url": "https://auto/ja.vtt"}]}}
        assert fetcher.pick_caption_source(info, ["ja"]).url == "https://auto/ja.vtt"

    def test_nothing_matching(self) -> None:
        info = {"automatic_captions": {"en": [{"ext": "vtt", "url": "https://auto/en.vtt"}]}}
        assert fetcher.pick_caption_source(info, ["ja"]) is None


class TestFetchCaptionDocument:
    def test_downloads_vtt_track(self, monkeypatch: pytest.MonkeyPatch) -> None:
        FakeYoutubeDL.info = {"automatic_captions": {"ja": [{"ext": "vtt", "url": "https://auto/ja.vtt"}]}}
        downloaded: list[str] = []

        def fake_download(url: str, timeout: float = 15.0) -> str:
            downloaded.append(url)
            return VTT

        monkeypatch.setattr(fetcher, "download_vtt", fake_download)

        assert fetcher.fetch_caption_document("abc123") == VTT
        assert downloaded == ["https://auto/ja.vtt"]
        assert FakeYoutubeDL.urls == ["https://www.youtube.com/watch?v=abc123"]

    def test_transcript_api_fallback(self) -> None:
        FakeTranscriptApi.data = [
            {"text": "boil water", "start": 1.0, "duration": 2.0},
            {"text": "drain", "start": 65.5, "duration": 1.0},
        ]

        document = fetcher.fetch_caption_document("abc123")

        assert document.startswith("WEBVTT")
        assert "00:00:01.000 --> 00:00:03.000\nboil water" in document

    def test_no_captions(self) -> None:
        FakeTranscriptApi.error = TranscriptsDisabled("abc123")

        with pytest.raises(NoCaptionsError) as exc_info:
            fetcher.fetch_caption_document("abc123")
        assert exc_info.value.video_id == "abc123"

    @pytest.mark.parametrize("error_type", [RequestBlocked, IpBlocked, VideoUnavailable])
    def test_transcript_api_failure(self, error_type: type) -> None:
        FakeTranscriptApi.error = error_type("abc123")

        with pytest.raises(CaptionFetchFailedError, match="abc123") as exc_info:
            fetcher.fetch_caption_document("abc123")
        assert isinstance(exc_info.value.__cause__, error_type)

    def test_yt_dlp_failure(self) -> None:
        FakeYoutubeDL.error = yt_dlp.utils.DownloadError("Video unavailable")

        with pytest.raises(CaptionFetchFailedError, match="Video unavailable"):
            fetcher.fetch_caption_document("abc123")


class TestDownloadVtt:
    def _patch_transport(self, monkeypatch: pytest.MonkeyPatch, handler: Any) -> None:
        real_client = httpx.Client
        transport = httpx.MockTransport(handler)
        monkeypatch.setattr(
            fetcher.httpx, "Client", lambda **kwargs: real_client(transport=transport, **kwargs)
        )

    def test_returns_body(self, monkeypatch: pytest.MonkeyPatch) -> None:
        self._patch_transport(monkeypatch, lambda request: httpx.Response(200, text=VTT))
        assert fetcher.download_vtt("https://subs/ja.vtt") == VTT

    def test_http_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        self._patch_transport(monkeypatch, lambda request: httpx.Response(404, text="missing"))
        with pytest.raises(CaptionFetchFailedError):
            fetcher.download_vtt("https://subs/ja.vtt")

    def test_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        self._patch_transport(monkeypatch, handler)
        with pytest.raises(CaptionFetchFailedError, match="Timeout"):
            fetcher.download_vtt("https://subs/ja.vtt")
