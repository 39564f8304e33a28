from dataclasses import dataclass
from typing import Literal, Optional

SourceType = Literal["youtube", "text"]


@dataclass(frozen=True)
class CaptionLine:
    start_offset_seconds: Optional[float]
    timestamp: str
    text: str

    def render(self) -> str:
        if self.timestamp:
            return f"[{self.timestamp}] {self.text}"
        return self.text


@dataclass(frozen=True)
class CaptionSource:
    url: str
    language: str
    extension: str
