"""Resolves a playback position to the active caption cue."""

import bisect
import logging
import math
from typing import List, Sequence, Tuple

from .models import Cue

logger = logging.getLogger(__name__)

NO_CUE = -1

def find_active_cue(cues: Sequence[Cue], time: float) -> int:
    """
    Returns the index of the first cue whose [start, end) interval holds `time`.

    Args:
        cues: The cue sequence, in source order.
        time: Playback position in seconds.

    Returns:
        The cue index, or NO_CUE when `time` falls in a gap, before the
        first cue or after the last one.
    """
    for i, cue in enumerate(cues):
        if cue.start <= time < cue.end:
            return i
    return NO_CUE

def find_ordering_problems(cues: Sequence[Cue]) -> List[Tuple[int, str]]:
    """Lists cues that start before their predecessor starts or ends."""
    problems = []
    for i in range(1, len(cues)):
        prev, cue = cues[i - 1], cues[i]
        if cue.start < prev.start:
            problems.append((i, f"starts at {cue.start:.3f}s before previous cue ({prev.start:.3f}s)"))
        elif cue.start < prev.end:
            problems.append((i, f"starts at {cue.start:.3f}s inside previous cue (ends {prev.end:.3f}s)"))
    return problems

class CueIndex:
    """
    Lookup structure over an immutable cue sequence.

    Time-ordered, non-overlapping sequences are searched with a binary search
    over start times. Anything else falls back to a linear scan so that the
    "first matching cue in sequence order" rule still holds.
    """

    def __init__(self, cues: Sequence[Cue] = ()):
        self._cues: Tuple[Cue, ...] = tuple(cues)
        self._problems = find_ordering_problems(self._cues)
        searchable = not self._problems and all(cue.end > cue.start for cue in self._cues)
        self._starts = [cue.start for cue in self._cues] if searchable else None

    @property
    def cues(self) -> Tuple[Cue, ...]:
        return self._cues

    @property
    def is_ordered(self) -> bool:
        return not self._problems

    @property
    def ordering_problems(self) -> List[Tuple[int, str]]:
        return list(self._problems)

    def __len__(self) -> int:
        return len(self._cues)

    def __getitem__(self, index: int) -> Cue:
        return self._cues[index]

    def find(self, time: float) -> int:
        """Index of the active cue at `time`, or NO_CUE."""
        if not self._cues or not math.isfinite(time):
            return NO_CUE
        if self._starts is None:
            return find_active_cue(self._cues, time)

        # Starts are strictly increasing and intervals disjoint, so only the
        # last cue starting at or before `time` can contain it.
        i = bisect.bisect_right(self._starts, time) - 1
        if i >= 0 and self._cues[i].contains(time):
            return i
        return NO_CUE
