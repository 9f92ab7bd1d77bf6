#!/usr/bin/env python3
# ABOUTME: Command-line entry point for running the report from a source checkout
# ABOUTME: Same as the installed scene-info console script

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / 'src'))

from scene_info.cli import main


if __name__ == '__main__':
    sys.exit(main())
