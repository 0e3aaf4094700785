"""Generates lesson caption tracks from lesson audio."""

import json
import logging
import os
import time
from dataclasses import dataclass
from typing import List, Optional

from .audio_extractor import AudioExtractor
from .caption_formatter import CaptionFormatter, VTTFormatter
from .caption_loader import CaptionLoader
from .transcriber import Transcriber
from .models import Lesson, TranscriptionResult
from .exceptions import CueSyncError, ConfigurationError, FileSystemError
from .utils import ensure_dir_exists

logger = logging.getLogger(__name__)

@dataclass
class GenerationOutcome:
    """What happened to one lesson during caption generation."""
    lesson_code: str
    caption_path: str
    skipped: bool = False
    cue_count: int = 0

def load_lessons(lessons_path: str) -> List[Lesson]:
    """
    Reads the lesson list (a JSON array of objects with code/title/audio).

    Entries without a code or audio source are skipped with a warning.

    Raises:
        FileNotFoundError: If the lessons file does not exist.
        ConfigurationError: If the file is not a JSON array.
    """
    if not os.path.isfile(lessons_path):
        raise FileNotFoundError(f"Lessons file not found: {lessons_path}")
    try:
        with open(lessons_path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read lessons file {lessons_path}: {e}", exc_info=True)
        raise ConfigurationError(f"Could not read lessons file {lessons_path}: {e}") from e
    if not isinstance(raw, list):
        raise ConfigurationError(f"Lessons file {lessons_path} must contain a JSON array")

    lessons = []
    for position, entry in enumerate(raw):
        if not isinstance(entry, dict) or not entry.get('code') or not entry.get('audio'):
            logger.warning(f"Skipping lesson entry {position}: missing 'code' or 'audio'")
            continue
        lessons.append(Lesson(
            code=str(entry['code']),
            title=str(entry.get('title', '')),
            audio=str(entry['audio'])
        ))
    logger.info(f"Found {len(lessons)} lessons in {lessons_path}")
    return lessons


class CaptionGenerator:
    """
    Manages the end-to-end process of producing a caption track for a lesson.
    """

    def __init__(
        self,
        config: dict,
        audio_extractor: AudioExtractor,
        transcriber: Transcriber,
        formatter: Optional[CaptionFormatter] = None
    ):
        """
        Initializes the CaptionGenerator.

        Args:
            config: A dictionary containing configuration settings.
            audio_extractor: Converts lesson audio to WAV.
            transcriber: Speech recogniser producing timed segments.
            formatter: Caption writer, WebVTT by default.

        Raises:
            CueSyncError: If the temporary directory is missing or unusable.
        """
        self.config = config
        self.audio_extractor = audio_extractor
        self.transcriber = transcriber
        self.formatter = formatter or VTTFormatter()

        self.temp_dir = config.get('temp_dir')
        if not self.temp_dir:
            raise CueSyncError("Configuration missing 'temp_dir'.")
        try:
            ensure_dir_exists(self.temp_dir)
        except (FileSystemError, ValueError) as e:
            raise CueSyncError(f"Temporary directory '{self.temp_dir}' is invalid: {e}") from e

    def _cleanup_temp_files(self, *file_paths: Optional[str]) -> None:
        """Removes temporary files specified."""
        for file_path in file_paths:
            if file_path and os.path.exists(file_path):
                try:
                    os.remove(file_path)
                    logger.debug(f"Cleaned up temporary file: {file_path}")
                except OSError as e:
                    logger.warning(f"Could not remove temporary file {file_path}: {e}")

    def generate(self, lesson: Lesson, output_dir: str) -> GenerationOutcome:
        """
        Produces the caption file for one lesson unless it already exists.

        Args:
            lesson: The lesson to caption.
            output_dir: Directory receiving the caption files.

        Returns:
            A GenerationOutcome describing the result.

        Raises:
            CueSyncError: For any processing error in the pipeline.
            FileNotFoundError: If a local audio file is missing.
        """
        loader = CaptionLoader(output_dir, self.config.get('caption_filename_template', 'englishpod_{code}.vtt'))
        caption_path = loader.caption_path(lesson.code)
        if os.path.exists(caption_path):
            logger.info(f"Skipping {lesson.code} - captions already exist at {caption_path}")
            return GenerationOutcome(lesson_code=lesson.code, caption_path=caption_path, skipped=True)

        start_time = time.time()
        logger.info(f"--- Generating captions for {lesson.code}: {lesson.title} ---")
        ensure_dir_exists(output_dir)
        wav_path = None

        try:
            wav_path = self.audio_extractor.extract_audio(
                lesson.audio, self.temp_dir, f"{lesson.code}_{int(time.time())}"
            )

            result: TranscriptionResult = self.transcriber.transcribe(wav_path)
            if not result or not result.segments:
                raise CueSyncError(f"Transcription of lesson {lesson.code} produced no segments.")

            cue_count = self.formatter.format_captions(result, caption_path)
            logger.info(f"Captions for {lesson.code} written in {time.time() - start_time:.2f} seconds")
            return GenerationOutcome(lesson_code=lesson.code, caption_path=caption_path, cue_count=cue_count)

        except (CueSyncError, FileNotFoundError) as e:
            logger.error(f"Caption generation failed for {lesson.code}: {e}")
            raise
        except Exception as e:
            logger.critical(f"Unexpected error while generating captions for {lesson.code}: {e}", exc_info=True)
            raise CueSyncError(f"An unexpected error occurred: {e}") from e
        finally:
            self._cleanup_temp_files(wav_path)
