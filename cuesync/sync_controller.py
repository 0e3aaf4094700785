"""Turns playback-time updates into caption cue change notifications."""

import logging
import threading
from typing import Callable, List, Optional, Sequence, Tuple

from .caption_loader import CaptionLoader
from .cue_index import CueIndex, NO_CUE
from .cue_parser import CueParser
from .exceptions import CaptionLoadError
from .models import Cue, LineMatch
from .similarity import LINE_MATCH_THRESHOLD, SimilarityScorer, JaccardScorer, best_match

logger = logging.getLogger(__name__)

CueChangeCallback = Callable[[Cue, int], None]

class SyncController:
    """
    Tracks which caption cue is active for one lesson.

    The controller is purely reactive: the audio player pushes the current
    position through `update()`, and the registered callback fires whenever a
    different cue becomes active. Leaving a cue for a gap between cues only
    moves the internal index to NO_CUE; no callback fires, so whatever the
    consumer highlighted last stays highlighted until the next cue starts.
    """

    def __init__(
        self,
        caption_loader: Optional[CaptionLoader] = None,
        parser: Optional[CueParser] = None,
        scorer: Optional[SimilarityScorer] = None
    ):
        self.caption_loader = caption_loader
        self.parser = parser or CueParser()
        self.scorer = scorer or JaccardScorer()
        self._lock = threading.RLock()
        self._index = CueIndex()
        self._current_cue_index = NO_CUE
        self._last_fired_cue: Optional[Cue] = None
        self._on_cue_change: Optional[CueChangeCallback] = None

    @property
    def on_cue_change(self) -> Optional[CueChangeCallback]:
        return self._on_cue_change

    @on_cue_change.setter
    def on_cue_change(self, callback: Optional[CueChangeCallback]) -> None:
        with self._lock:
            self._on_cue_change = callback

    @property
    def cues(self) -> Tuple[Cue, ...]:
        return self._index.cues

    @property
    def current_cue_index(self) -> int:
        return self._current_cue_index

    @property
    def last_fired_cue(self) -> Optional[Cue]:
        """The cue most recently delivered to the callback; survives gaps."""
        return self._last_fired_cue

    @property
    def is_loaded(self) -> bool:
        return len(self._index) > 0

    def load(self, cues: Sequence[Cue]) -> None:
        """Replaces the cue sequence. Does not notify."""
        index = CueIndex(cues)
        if not index.is_ordered:
            problems = index.ordering_problems
            first_at, first_reason = problems[0]
            logger.warning(
                f"Caption track has {len(problems)} out-of-order or overlapping cue(s) "
                f"(first: cue {first_at} {first_reason}); the earliest listed cue wins on overlap."
            )
        with self._lock:
            self._index = index
            self._current_cue_index = NO_CUE
            self._last_fired_cue = None
        logger.info(f"Loaded {len(index)} caption cues")

    def load_payload(self, payload: str) -> bool:
        """Parses a caption payload and loads it. True if any cue was found."""
        cues = self.parser.parse(payload)
        self.load(cues)
        return bool(cues)

    def load_lesson(self, lesson_code: str) -> bool:
        """
        Loads the caption track for a lesson through the caption loader.

        Returns:
            True when captions were loaded. False when the source is missing
            or empty; the controller is then left without cues and will
            never fire until a later successful load.
        """
        if self.caption_loader is None:
            logger.warning(f"No caption loader configured; cannot load lesson {lesson_code}")
            self.reset()
            return False
        try:
            payload = self.caption_loader.load(lesson_code)
        except CaptionLoadError as e:
            logger.warning(f"Could not load captions for lesson {lesson_code}: {e}")
            self.reset()
            return False

        loaded = self.load_payload(payload)
        if not loaded:
            logger.warning(f"Caption file for lesson {lesson_code} contains no usable cues")
        return loaded

    def update(self, time: float) -> None:
        """
        Re-resolves the active cue for the given playback position.

        Every call recomputes from scratch, so seeking backward or jumping
        ahead is handled like any other tick.
        """
        with self._lock:
            new_index = self._index.find(time)
            if new_index == self._current_cue_index:
                return
            self._current_cue_index = new_index
            if new_index == NO_CUE:
                return

            cue = self._index[new_index]
            self._last_fired_cue = cue
            callback = self._on_cue_change
            if callback is None:
                return
            try:
                callback(cue, new_index)
            except Exception as e:
                logger.error(f"Cue change callback failed for cue {new_index}: {e}", exc_info=True)

    def get_current_cue(self) -> Optional[Cue]:
        with self._lock:
            index = self._current_cue_index
            if 0 <= index < len(self._index):
                return self._index[index]
            return None

    def reset(self, clear_callback: bool = False) -> None:
        """Drops the cues and the active index, keeping the callback unless asked."""
        with self._lock:
            self._index = CueIndex()
            self._current_cue_index = NO_CUE
            self._last_fired_cue = None
            if clear_callback:
                self._on_cue_change = None

    def match_transcript_lines(
        self,
        lines: Sequence[str],
        min_score: float = LINE_MATCH_THRESHOLD
    ) -> List[LineMatch]:
        """
        Pairs every transcript line with its most similar cue.

        Args:
            lines: Transcript line texts in display order.
            min_score: A cue must score strictly above this to count.

        Returns:
            One LineMatch per line, unmatched lines included.
        """
        with self._lock:
            cues = self._index.cues
        cue_texts = [cue.text for cue in cues]
        matches = []
        for line_index, line in enumerate(lines):
            result = best_match(line, cue_texts, min_score, scorer=self.scorer)
            if result is None:
                matches.append(LineMatch(line_index=line_index, line=line))
            else:
                matches.append(LineMatch(
                    line_index=line_index,
                    line=line,
                    cue_index=result.line_index,
                    cue=cues[result.line_index],
                    score=result.score
                ))
        matched = sum(1 for m in matches if m.matched)
        logger.debug(f"Matched {matched}/{len(matches)} transcript lines to caption cues")
        return matches
