#!/usr/bin/env python3
"""
CueSync Batch Caption Generation

Transcribes every lesson listed in lessons.json with Whisper and writes one
WebVTT caption file per lesson into the subtitles directory. Lessons that
already have captions are skipped.
"""

import argparse
import logging
import sys
import time
from typing import Optional, Sequence

from tqdm import tqdm

from cuesync.config_loader import ConfigLoader
from cuesync.log_setup import setup_logging
from cuesync.audio_extractor import AudioExtractor
from cuesync.transcriber import WhisperTranscriber
from cuesync.caption_generator import CaptionGenerator, load_lessons
from cuesync.exceptions import CueSyncError, ConfigurationError, FileSystemError
from cuesync.utils import ensure_dir_exists

logger = logging.getLogger(__name__)


def run_batch_processing(argv: Optional[Sequence[str]] = None) -> None:
    """Parses arguments, sets up, and runs the batch caption generation."""
    parser = argparse.ArgumentParser(
        description="CueSync Batch: generate WebVTT captions for every lesson in lessons.json.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "-l", "--lessons",
        default=None, # Default taken from config file
        help="Override the lessons JSON file specified in the config file."
    )
    parser.add_argument(
        "-o", "--output-dir",
        default=None, # Default taken from config file
        help="Override the subtitles directory specified in the config file."
    )
    parser.add_argument(
        "-c", "--config",
        default="config.yaml",
        help="Path to the configuration YAML file."
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Only process the first N lessons (useful for testing)."
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level for console and file output."
    )
    parser.add_argument(
        "--device",
        default=None, # Default taken from config
        choices=["cuda", "cpu"],
        help="Override the processing device (cuda or cpu) specified in config."
    )
    parser.add_argument(
        "--model",
        default=None, # Default taken from config
        help="Override the Whisper model (tiny, base, small, medium, large)."
    )

    args = parser.parse_args(argv)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    setup_logging(log_level=log_level, log_dir='logs', log_file='cuesync_batch_init.log')

    try:
        config = ConfigLoader().load_config(args.config)
    except (ConfigurationError, FileNotFoundError) as e:
        logger.critical(f"Failed to load configuration: {e}")
        sys.exit(1)

    setup_logging(log_level=log_level, log_dir=config['log_dir'], log_file='cuesync_batch.log')

    if args.lessons:
        config['lessons_file'] = args.lessons
    if args.output_dir:
        config['subtitles_dir'] = args.output_dir
    if args.device:
        config['device'] = args.device
    if args.model:
        config['whisper_model'] = args.model

    try:
        lessons = load_lessons(config['lessons_file'])
    except (ConfigurationError, FileNotFoundError) as e:
        logger.critical(f"Could not load lessons: {e}")
        sys.exit(1)
    if args.limit is not None:
        lessons = lessons[:max(args.limit, 0)]
    if not lessons:
        logger.warning("No lessons to process. Exiting.")
        sys.exit(0)

    subtitles_dir = config['subtitles_dir']
    try:
        ensure_dir_exists(subtitles_dir)
    except FileSystemError as e:
        logger.critical(f"Could not create subtitles directory: {e}")
        sys.exit(1)

    # Load the Whisper model once for the whole batch
    try:
        device = config['device']
        transcriber = WhisperTranscriber(
            model_name=config['whisper_model'],
            device=device,
            fp16=config['whisper_fp16'] if device == 'cuda' else False
        )
        generator = CaptionGenerator(
            config=config,
            audio_extractor=AudioExtractor(ffmpeg_path=config.get('ffmpeg_path')),
            transcriber=transcriber
        )
    except (CueSyncError, ValueError) as e:
        logger.critical(f"Failed to initialize CueSync components: {e}")
        sys.exit(1)

    generated = skipped = failed = 0
    batch_start_time = time.time()
    logger.info(f"--- Starting batch caption generation for {len(lessons)} lessons ---")

    with tqdm(total=len(lessons), unit="lesson", desc="Starting Batch") as pbar:
        for lesson in lessons:
            pbar.set_description(f"Lesson {lesson.code}")
            try:
                outcome = generator.generate(lesson, subtitles_dir)
                if outcome.skipped:
                    skipped += 1
                else:
                    generated += 1
            except (CueSyncError, FileNotFoundError) as e:
                logger.error(f"Captions failed for lesson {lesson.code}: {e}")
                failed += 1
            except KeyboardInterrupt:
                logger.warning("Batch process interrupted by user (Ctrl+C). Exiting.")
                sys.exit(1)
            finally:
                pbar.update(1)

    logger.info("--- Batch caption generation finished ---")
    logger.info(f"Total time: {time.time() - batch_start_time:.2f} seconds")
    logger.info(f"Generated: {generated}, Skipped: {skipped}, Errors: {failed}")

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    run_batch_processing()
