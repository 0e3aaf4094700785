#!/usr/bin/env python3
"""
CueSync Entry Point Script

This script initializes the CLI handler and replays a lesson's playback clock
against its caption track.
"""

import sys
from cuesync.cli import CLIHandler

if __name__ == "__main__":
    if sys.version_info < (3, 8):
        sys.stderr.write("CueSync requires Python 3.8 or later.\n")
        sys.exit(1)

    cli = CLIHandler()
    cli.run()
