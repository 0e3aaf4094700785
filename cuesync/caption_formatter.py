"""Handles writing transcription results as caption files (WebVTT)."""

import logging
from abc import ABC, abstractmethod
from typing import List

from .models import TranscriptionResult, Segment
from .exceptions import FormattingError
from .utils import format_time_vtt, normalize_whitespace

logger = logging.getLogger(__name__)

MIN_CUE_DURATION = 0.1

class CaptionFormatter(ABC):
    """Abstract base class for caption formatters."""

    @abstractmethod
    def format_captions(self, transcription_result: TranscriptionResult, output_path: str) -> int:
        """
        Writes the transcription result as a caption file.

        Args:
            transcription_result: The result from the transcription process.
            output_path: The path to save the caption file.

        Returns:
            The number of cues written.

        Raises:
            FormattingError: If formatting or writing fails.
        """
        pass


class VTTFormatter(CaptionFormatter):
    """Formats captions in the WebVTT (Web Video Text Tracks) format."""

    def render(self, segments: List[Segment]) -> str:
        """Builds the WebVTT document for the given segments."""
        return "\n\n".join(["WEBVTT"] + self._cue_blocks(segments)) + "\n"

    def _cue_blocks(self, segments: List[Segment]) -> List[str]:
        blocks = []
        for index, segment in enumerate(segments, start=1):
            text = normalize_whitespace(segment.text)
            if not text:
                logger.debug(f"Skipping segment {index} without text")
                continue

            end_time = segment.end_time
            if end_time <= segment.start_time:
                logger.warning(
                    f"Segment {index} has zero or negative duration "
                    f"({segment.start_time:.3f}s -> {end_time:.3f}s). Adjusting end time slightly."
                )
                end_time = segment.start_time + MIN_CUE_DURATION

            blocks.append(
                f"{format_time_vtt(segment.start_time)} --> {format_time_vtt(end_time)}\n{text}"
            )
        return blocks

    def format_captions(self, transcription_result: TranscriptionResult, output_path: str) -> int:
        logger.info(f"Formatting captions to VTT: {output_path}")
        document = self.render(transcription_result.segments)
        cue_count = sum(1 for segment in transcription_result.segments if normalize_whitespace(segment.text))
        try:
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(document)
        except OSError as e:
            logger.error(f"Failed to write VTT file to {output_path}: {e}", exc_info=True)
            raise FormattingError(f"Could not write VTT file: {e}") from e

        logger.info(f"Successfully wrote {cue_count} caption cues to {output_path}")
        return cue_count
