"""Fuzzy text matching between caption cues and transcript lines."""

import logging
import re
from abc import ABC, abstractmethod
from typing import FrozenSet, Optional, Sequence

from rapidfuzz import fuzz

from .exceptions import ConfigurationError
from .models import MatchResult

logger = logging.getLogger(__name__)

HIGHLIGHT_THRESHOLD = 0.4
LINE_MATCH_THRESHOLD = 0.5

_NON_WORD = re.compile(r"[^\w\s]")

def word_set(text: str) -> FrozenSet[str]:
    """Lower-cased, punctuation-free set of the words in `text`."""
    return frozenset(_NON_WORD.sub("", text.lower()).split())

class SimilarityScorer(ABC):
    """Abstract base class for text similarity measures."""

    @abstractmethod
    def score(self, text1: str, text2: str) -> float:
        """
        Scores how alike two texts are.

        Args:
            text1: The query text.
            text2: The candidate text.

        Returns:
            A similarity in [0, 1], 1 meaning identical.
        """
        pass

class JaccardScorer(SimilarityScorer):
    """Jaccard overlap of the two texts' word sets."""

    def score(self, text1: str, text2: str) -> float:
        words1 = word_set(text1)
        words2 = word_set(text2)
        union = words1 | words2
        if not union:
            return 0.0
        return len(words1 & words2) / len(union)

class TokenSetScorer(SimilarityScorer):
    """rapidfuzz token-set ratio, more forgiving of extra or missing words."""

    def score(self, text1: str, text2: str) -> float:
        norm1 = " ".join(sorted(word_set(text1)))
        norm2 = " ".join(sorted(word_set(text2)))
        if not norm1 or not norm2:
            return 0.0
        return fuzz.token_set_ratio(norm1, norm2) / 100.0

_SCORERS = {
    "jaccard": JaccardScorer,
    "token_set": TokenSetScorer,
}

def get_scorer(name: str) -> SimilarityScorer:
    """Builds the scorer registered under `name`."""
    try:
        return _SCORERS[name.lower()]()
    except KeyError:
        raise ConfigurationError(
            f"Unknown similarity scorer '{name}'. Choose one of: {', '.join(sorted(_SCORERS))}"
        ) from None

def best_match(
    query: str,
    candidates: Sequence[str],
    min_score: float,
    scorer: Optional[SimilarityScorer] = None
) -> Optional[MatchResult]:
    """
    Finds the candidate most similar to `query`.

    The highest score wins and ties keep the earliest candidate. The winner
    is only returned when its score is strictly above `min_score`.

    Args:
        query: Text to look up, e.g. a caption cue.
        candidates: Texts to compare against, e.g. rendered transcript lines.
        min_score: Rejection threshold.
        scorer: Similarity measure; Jaccard over word sets by default.

    Returns:
        The best MatchResult, or None when nothing clears the threshold.
    """
    scorer = scorer or JaccardScorer()
    best_index = -1
    best_score = 0.0
    for i, candidate in enumerate(candidates):
        score = scorer.score(query, candidate)
        if best_index < 0 or score > best_score:
            best_index, best_score = i, score

    if best_index < 0 or best_score <= min_score:
        return None
    return MatchResult(line_index=best_index, score=best_score)
