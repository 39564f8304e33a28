from __future__ import annotations

import logging
from typing import Sequence

import httpx
import yt_dlp
from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    TranscriptsDisabled,
    YouTubeTranscriptApi,
)

from .errors import CaptionFetchFailedError, NoCaptionsError
from .ids import watch_url
from .subtitles import to_vtt
from .types import CaptionSource

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGES = ("ja",)
CAPTION_KEYS = ("subtitles", "automatic_captions")


def _create_ydl_options() -> dict:
    return {
        "quiet": True,
        "noprogress": True,
        "skip_download": True,
        "check_formats": False,
    }


def _find_vtt_entry(entries: list) -> str | None:
    for item in entries:
        if isinstance(item, dict) and item.get("ext") == "vtt" and item.get("url"):
            return item.get("url")
    return None


def _pick_caption_source(submap: dict | None, languages: Sequence[str]) -> CaptionSource | None:
    if not submap:
        return None

    for lang in languages:
        entries = submap.get(lang)
        if not entries:
            continue

        vtt_url = _find_vtt_entry(entries)
        if vtt_url:
            return CaptionSource(url=vtt_url, language=lang, extension="vtt")

    return None


def pick_caption_source(info: dict, languages: Sequence[str]) -> CaptionSource | None:
    """Manual subtitles win over automatic captions for the same language list."""
    for key in CAPTION_KEYS:
        source = _pick_caption_source(info.get(key), languages)
        if source:
            return source
    return None


def _extract_info(video_id: str) -> dict:
    try:
        with yt_dlp.YoutubeDL(_create_ydl_options()) as ydl:
            info = ydl.extract_info(watch_url(video_id), download=False)
    except yt_dlp.utils.DownloadError as error:
        raise CaptionFetchFailedError(f"yt-dlp failed: {error}") from error
    except (ConnectionError, TimeoutError) as error:
        raise CaptionFetchFailedError(f"Network error looking up video: {error}") from error

    if not isinstance(info, dict):
        raise CaptionFetchFailedError(f"yt-dlp returned no metadata for {video_id}")
    return info


def download_vtt(url: str, timeout: float = 15.0) -> str:
    try:
        with httpx.Client(timeout=timeout, follow_redirects=True) as client:
            response = client.get(url)
            response.raise_for_status()
            return response.text
    except httpx.TimeoutException as error:
        raise CaptionFetchFailedError(f"Timeout after {timeout}s downloading captions") from error
    except httpx.HTTPError as error:
        raise CaptionFetchFailedError(f"HTTP error downloading captions: {error}") from error


def _fetch_transcript_segments(video_id: str, languages: Sequence[str]) -> list[dict] | None:
    try:
        fetched = YouTubeTranscriptApi().fetch(video_id, languages=list(languages))
    except (TranscriptsDisabled, NoTranscriptFound):
        return None
    except CouldNotRetrieveTranscript as error:
        raise CaptionFetchFailedError(f"Transcript API failed for {video_id}: {error}") from error
    except (ConnectionError, TimeoutError) as error:
        logger.warning("Network error fetching transcript: %s", error)
        return None

    return fetched.to_raw_data() if hasattr(fetched, "to_raw_data") else list(fetched)


def _transcript_as_vtt(video_id: str, languages: Sequence[str]) -> str | None:
    data = _fetch_transcript_segments(video_id, languages)
    if not data:
        return None

    segments = [
        (float(item.get("start", 0.0)), float(item.get("duration", 0.0)), item.get("text", ""))
        for item in data
        if isinstance(item, dict) and item.get("text")
    ]
    return to_vtt(segments) if segments else None


def fetch_caption_document(video_id: str, languages: Sequence[str] = DEFAULT_LANGUAGES) -> str:
    """WebVTT caption document for a video, or NoCaptionsError."""
    info = _extract_info(video_id)
    source = pick_caption_source(info, languages)

    if source:
        logger.info("Downloading %s captions for %s", source.language, video_id)
        return download_vtt(source.url)

    logger.warning("No VTT track for %s, trying the transcript API", video_id)
    document = _transcript_as_vtt(video_id, languages)
    if not document:
        raise NoCaptionsError(video_id)
    return document
