"""Maps active caption cues onto the rendered transcript lines."""

import logging
from typing import Callable, List, Optional, Sequence

from .cue_index import NO_CUE
from .models import Cue, MatchResult
from .similarity import HIGHLIGHT_THRESHOLD, SimilarityScorer, best_match

logger = logging.getLogger(__name__)

HighlightCallback = Callable[[int, str, float], None]

class TranscriptHighlighter:
    """
    Keeps track of which transcript line is highlighted.

    Intended as the SyncController's cue-change subscriber: each new cue is
    matched against the transcript lines and the best one above the
    threshold becomes the highlighted line. Rendering is left to the
    `on_highlight` callback.
    """

    def __init__(
        self,
        min_score: float = HIGHLIGHT_THRESHOLD,
        scorer: Optional[SimilarityScorer] = None,
        on_highlight: Optional[HighlightCallback] = None
    ):
        self.min_score = min_score
        self.scorer = scorer
        self.on_highlight = on_highlight
        self._lines: List[str] = []
        self._highlighted_index = NO_CUE

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    @property
    def highlighted_index(self) -> int:
        return self._highlighted_index

    @property
    def highlighted_line(self) -> Optional[str]:
        if 0 <= self._highlighted_index < len(self._lines):
            return self._lines[self._highlighted_index]
        return None

    def set_lines(self, lines: Sequence[str]) -> None:
        self._lines = list(lines)
        self._highlighted_index = NO_CUE

    def attach(self, controller) -> None:
        """Registers this highlighter as the controller's cue-change callback."""
        controller.on_cue_change = self.handle_cue_change

    def handle_cue_change(self, cue: Cue, cue_index: int) -> Optional[MatchResult]:
        self._highlighted_index = NO_CUE
        result = best_match(cue.text, self._lines, self.min_score, scorer=self.scorer)
        if result is None:
            logger.debug(f"No transcript line matches cue {cue_index}: '{cue.text[:40]}'")
            return None

        self._highlight(result.line_index, result.score)
        return result

    def select(self, line_index: int) -> None:
        """Highlights a line chosen by the user rather than by playback."""
        if not 0 <= line_index < len(self._lines):
            raise IndexError(f"Transcript line {line_index} out of range (0-{len(self._lines) - 1})")
        self._highlight(line_index, 1.0)

    def clear(self) -> None:
        self._highlighted_index = NO_CUE

    def _highlight(self, line_index: int, score: float) -> None:
        self._highlighted_index = line_index
        if self.on_highlight is not None:
            self.on_highlight(line_index, self._lines[line_index], score)
