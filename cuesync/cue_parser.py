"""Parses WebVTT-style caption payloads into timed cues."""

import logging
import math
from typing import List, Optional

from .models import Cue
from .utils import normalize_whitespace

logger = logging.getLogger(__name__)

ARROW = "-->"

def parse_timestamp(token: str) -> Optional[float]:
    """
    Converts a caption timestamp into seconds.

    Accepted forms are `H:MM:SS.mmm`, `M:SS.mmm` and `S.mmm`. Hours and
    minutes are optional and seconds may be fractional.

    Args:
        token: The timestamp text, surrounding whitespace allowed.

    Returns:
        The time in seconds, or None if the token cannot be interpreted.
    """
    parts = token.strip().split(":")
    if not parts or len(parts) > 3:
        return None
    try:
        seconds = float(parts[-1])
        units = [int(p) for p in parts[:-1]]
    except ValueError:
        return None
    if not math.isfinite(seconds) or seconds < 0 or any(u < 0 for u in units):
        return None
    for weight, value in zip((60, 3600), reversed(units)):
        seconds += value * weight
    return seconds

class CueParser:
    """Turns a caption-track payload into an ordered list of cues."""

    def parse(self, payload: str) -> List[Cue]:
        """
        Parses a WebVTT-like payload.

        Lines before the first time-range line are treated as header and
        skipped. Each time-range line starts a cue whose text is every
        following non-blank line, joined with single spaces. Cues without text
        or with an unreadable timestamp are dropped. The output keeps source
        order; it is neither sorted nor checked for overlaps.

        Args:
            payload: The caption text.

        Returns:
            The parsed cues.
        """
        cues: List[Cue] = []
        if not payload:
            return cues

        lines = payload.lstrip("\ufeff").splitlines()
        i = 0
        while i < len(lines) and ARROW not in lines[i]:
            i += 1

        while i < len(lines):
            line = lines[i].strip()
            i += 1
            if ARROW not in line:
                continue # cue identifiers, NOTE blocks, stray text

            text_lines = []
            while i < len(lines) and lines[i].strip():
                text_lines.append(lines[i].strip())
                i += 1

            cue = self._build_cue(line, text_lines)
            if cue is not None:
                cues.append(cue)

        logger.debug(f"Parsed {len(cues)} caption cues")
        return cues

    def _build_cue(self, timing_line: str, text_lines: List[str]) -> Optional[Cue]:
        start_token, _, rest = timing_line.partition(ARROW)
        end_fields = rest.split()
        start = parse_timestamp(start_token)
        end = parse_timestamp(end_fields[0]) if end_fields else None

        if start is None or end is None:
            logger.debug(f"Dropping cue with unreadable timing: '{timing_line}'")
            return None
        if not text_lines:
            logger.debug(f"Dropping cue without text at {timing_line}")
            return None
        return Cue(start=start, end=end, text=normalize_whitespace(" ".join(text_lines)))

def parse_vtt(payload: str) -> List[Cue]:
    """Convenience wrapper around `CueParser().parse`."""
    return CueParser().parse(payload)
