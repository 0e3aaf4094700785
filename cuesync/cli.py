"""Command-Line Interface handler for CueSync."""

import argparse
import logging
import os
import sys
from typing import List, Optional, Sequence

from .caption_loader import CaptionLoader
from .config_loader import ConfigLoader
from .log_setup import setup_logging
from .similarity import get_scorer
from .sync_controller import SyncController
from .transcript_highlighter import TranscriptHighlighter
from .exceptions import CueSyncError, ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"

def playback_times(duration: float, step: float) -> List[float]:
    """Evenly spaced clock ticks from 0 up to and including `duration`."""
    if step <= 0:
        raise ValueError("step must be positive")
    ticks = int(duration / step)
    return [round(i * step, 6) for i in range(ticks + 1)]

def read_transcript(path: str) -> List[str]:
    """One transcript line per non-blank line of the file."""
    with open(path, 'r', encoding='utf-8') as f:
        return [line.strip() for line in f if line.strip()]

class CLIHandler:
    """Parses arguments and replays a lesson's playback clock against its captions."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Creates the argument parser for the CLI."""
        parser = argparse.ArgumentParser(
            description="CueSync: follow a lesson's captions and highlight the matching transcript lines.",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter
        )
        source = parser.add_mutually_exclusive_group(required=True)
        source.add_argument(
            "--captions",
            help="Path to a WebVTT caption file."
        )
        source.add_argument(
            "--lesson",
            help="Lesson code; the caption file is looked up in the configured subtitles directory."
        )
        parser.add_argument(
            "-t", "--transcript",
            default=None,
            help="Transcript text file, one dialogue line per line. Without it only cue changes are printed."
        )
        parser.add_argument(
            "--times",
            type=float,
            nargs="+",
            default=None,
            help="Explicit playback positions (seconds) to replay, in order. Seeks backwards are allowed."
        )
        parser.add_argument(
            "--step",
            type=float,
            default=0.25,
            help="Clock tick interval in seconds when --times is not given."
        )
        parser.add_argument(
            "--match-lines",
            action="store_true",
            help="Instead of replaying playback, print which cue each transcript line maps to."
        )
        parser.add_argument(
            "-c", "--config",
            default=DEFAULT_CONFIG_PATH,
            help="Path to the configuration YAML file."
        )
        parser.add_argument(
            "--scorer",
            default=None,
            choices=["jaccard", "token_set"],
            help="Override the similarity scorer specified in config."
        )
        parser.add_argument(
            "--threshold",
            type=float,
            default=None,
            help="Override the highlight threshold specified in config."
        )
        parser.add_argument(
            "--log-level",
            default="WARNING",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Set the logging level for console and file output."
        )
        return parser

    def _load_config(self, config_path: str) -> dict:
        config_loader = ConfigLoader()
        if config_path == DEFAULT_CONFIG_PATH and not os.path.exists(config_path):
            logger.info(f"No {DEFAULT_CONFIG_PATH} found; using built-in defaults.")
            return config_loader.with_defaults({})
        return config_loader.load_config(config_path)

    def run(self, argv: Optional[Sequence[str]] = None) -> None:
        """Parses arguments, sets up logging, loads config, and replays playback."""
        args = self.parser.parse_args(argv)
        log_level = getattr(logging, args.log_level.upper(), logging.WARNING)
        setup_logging(log_level=log_level, log_dir='logs', log_file='cuesync_init.log')

        try:
            config = self._load_config(args.config)
            if args.scorer:
                config['scorer'] = args.scorer
            if args.threshold is not None:
                # re-validate with the override applied
                config = ConfigLoader().with_defaults({**config, 'highlight_threshold': args.threshold})
        except (ConfigurationError, FileNotFoundError) as e:
            logger.critical(f"Failed to load configuration from {args.config}: {e}")
            sys.exit(1)

        setup_logging(log_level=log_level, log_dir=config['log_dir'], log_file=config['log_file'])

        try:
            scorer = get_scorer(config['scorer'])
            controller = SyncController(
                caption_loader=CaptionLoader(config['subtitles_dir'], config['caption_filename_template']),
                scorer=scorer
            )
            loaded = self._load_captions(controller, args)
            if not loaded:
                logger.error("No captions loaded; nothing to synchronise.")
                sys.exit(1)

            lines = read_transcript(args.transcript) if args.transcript else []
            if args.match_lines:
                self._print_line_matches(controller, lines, config['line_match_threshold'])
                sys.exit(0)

            highlighter = TranscriptHighlighter(
                min_score=config['highlight_threshold'],
                scorer=scorer,
                on_highlight=lambda i, text, score: print(f"    -> line {i + 1} ({score:.2f}): {text}")
            )
            highlighter.set_lines(lines)

            def on_cue_change(cue, index):
                print(f"[{cue.start:8.3f}s] cue {index}: {cue.text}")
                if lines and highlighter.handle_cue_change(cue, index) is None:
                    print("    -> no matching transcript line")

            controller.on_cue_change = on_cue_change

            times = args.times if args.times else playback_times(max(cue.end for cue in controller.cues), args.step)
            for t in times:
                controller.update(t)
            sys.exit(0)

        except (CueSyncError, ValueError) as e:
            logger.error(f"A CueSync error occurred: {e}")
            sys.exit(1)
        except OSError as e:
            logger.error(f"Could not read input file: {e}")
            sys.exit(1)
        except KeyboardInterrupt:
            logger.warning("Process interrupted by user (Ctrl+C). Exiting.")
            sys.exit(1)

    def _print_line_matches(self, controller: SyncController, lines: List[str], min_score: float) -> None:
        if not lines:
            raise ValueError("--match-lines needs a --transcript file")
        for match in controller.match_transcript_lines(lines, min_score=min_score):
            if match.matched:
                print(f"line {match.line_index + 1} -> cue {match.cue_index} "
                      f"[{match.cue.start:.3f}s-{match.cue.end:.3f}s] ({match.score:.2f}): {match.line}")
            else:
                print(f"line {match.line_index + 1} -> (no cue): {match.line}")

    def _load_captions(self, controller: SyncController, args: argparse.Namespace) -> bool:
        if args.lesson:
            return controller.load_lesson(args.lesson)
        try:
            with open(args.captions, 'r', encoding='utf-8') as f:
                payload = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read caption file {args.captions}: {e}")
            return False
        return controller.load_payload(payload)
