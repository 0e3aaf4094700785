"""Data models for CueSync."""

from dataclasses import dataclass, field
from typing import List, Optional

@dataclass(frozen=True)
class Cue:
    """A timed caption unit. `end` is exclusive."""
    start: float
    end: float
    text: str

    @property
    def duration(self) -> float:
        return self.end - self.start

    def contains(self, time: float) -> bool:
        """True when `time` falls inside the half-open interval [start, end)."""
        return self.start <= time < self.end

@dataclass(frozen=True)
class MatchResult:
    """Best candidate found by the similarity matcher."""
    line_index: int
    score: float

@dataclass(frozen=True)
class LineMatch:
    """Pairs a transcript line with the cue that best matches it, if any."""
    line_index: int
    line: str
    cue_index: int = -1
    cue: Optional[Cue] = None
    score: float = 0.0

    @property
    def matched(self) -> bool:
        return self.cue is not None

@dataclass
class Segment:
    """A timed chunk of recognised speech, before it becomes a caption cue."""
    start_time: float
    end_time: float
    text: str

@dataclass
class TranscriptionResult:
    """Holds the structured output from the ASR process."""
    language: Optional[str]
    segments: List[Segment] = field(default_factory=list)
    original_audio_path: Optional[str] = None

@dataclass(frozen=True)
class Lesson:
    """Lesson metadata as listed in lessons.json."""
    code: str
    title: str
    audio: str
