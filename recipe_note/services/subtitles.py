"""
WebVTT caption documents to timestamped plain text.

Auto-generated YouTube tracks repeat every utterance across rolling cues, so
payload text is deduplicated over the whole document and the first
occurrence keeps its timestamp.
"""
from __future__ import annotations

import re
from typing import Iterable, Iterator, Optional

from recipe_note.services.timestamps import (
    format_timestamp,
    seconds_to_vtt,
    timestamp_to_seconds,
)
from recipe_note.services.types import CaptionLine

VTT_TAG_PATTERN = re.compile(r"<[^>]+>")
VTT_CUE_TIMING_PATTERN = re.compile(r"((?:\d+:)?\d{2}:\d{2}\.\d{3})\s*-->")
VTT_BLOCK_PATTERN = re.compile(r"^(NOTE|STYLE|REGION)(\s|$)")
VTT_HEADER_PREFIXES = ("WEBVTT", "Kind:", "Language:")


def _is_header_line(line: str) -> bool:
    return not line.strip() or line.startswith(VTT_HEADER_PREFIXES)


def _iter_payload(lines: list[str]) -> Iterator[tuple[Optional[str], str]]:
    """Yield ``(cue start, payload text)`` pairs in document order."""
    active_start: Optional[str] = None
    in_block = False

    for index, line in enumerate(lines):
        if in_block:
            if not line.strip():
                in_block = False
            continue

        starts_block = index == 0 or not lines[index - 1].strip()

        if starts_block and VTT_BLOCK_PATTERN.match(line):
            in_block = True
            continue

        if _is_header_line(line):
            continue

        timing = VTT_CUE_TIMING_PATTERN.search(line)
        if timing:
            active_start = timing.group(1)
            continue

        # cue identifier
        next_line = lines[index + 1] if index + 1 < len(lines) else ""
        if starts_block and VTT_CUE_TIMING_PATTERN.search(next_line):
            continue

        text = VTT_TAG_PATTERN.sub("", line).strip()
        if text:
            yield active_start, text


def parse_caption_lines(document: str) -> list[CaptionLine]:
    """Deduplicated caption lines of a WebVTT document, in document order."""
    seen: set[str] = set()
    caption_lines: list[CaptionLine] = []

    for start, text in _iter_payload(document.splitlines()):
        if text in seen:
            continue
        seen.add(text)

        if start is None:
            caption_lines.append(CaptionLine(start_offset_seconds=None, timestamp="", text=text))
        else:
            caption_lines.append(
                CaptionLine(
                    start_offset_seconds=timestamp_to_seconds(start),
                    timestamp=format_timestamp(start),
                    text=text,
                )
            )

    return caption_lines


def normalize_subtitles(document: str) -> str:
    """Render a WebVTT document as ``[M:SS] text`` lines joined by newlines."""
    return "\n".join(line.render() for line in parse_caption_lines(document))


def to_vtt(segments: Iterable[tuple[float, float, str]]) -> str:
    """Build a WebVTT document from ``(start, duration, text)`` segments."""
    blocks = ["WEBVTT"]
    for start, duration, text in segments:
        cleaned = text.strip()
        if not cleaned:
            continue
        timing = f"{seconds_to_vtt(start)} --> {seconds_to_vtt(start + duration)}"
        blocks.append(f"{timing}\n{cleaned}")
    return "\n\n".join(blocks) + "\n"
