import argparse
import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from recipe_note.services.fetcher import fetch_caption_document
from recipe_note.services.ids import extract_video_id
from recipe_note.services.subtitles import normalize_subtitles, parse_caption_lines


def show(source: str, languages: list[str]) -> None:
    print("\n===", source)
    path = pathlib.Path(source)
    if path.exists():
        document = path.read_text(encoding="utf-8")
    else:
        video_id = extract_video_id(source)
        print("video_id:", video_id)
        if not video_id:
            return
        document = fetch_caption_document(video_id, languages)

    lines = parse_caption_lines(document)
    transcript = normalize_subtitles(document)
    print("document_chars:", len(document))
    print("caption_lines:", len(lines))
    print("transcript_chars:", len(transcript))
    print("transcript_preview:\n" + transcript[:400])


def main() -> None:
    parser = argparse.ArgumentParser(description="Caption fetch + normalize smoke test")
    parser.add_argument("source", nargs="+", help="YouTube URL or local .vtt file")
    parser.add_argument("--lang", action="append", default=None, help="caption language, repeatable")
    args = parser.parse_args()

    for source in args.source:
        show(source, args.lang or ["ja"])


if __name__ == "__main__":
    main()
