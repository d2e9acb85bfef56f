#!/usr/bin/env python3
"""
LumenTrace - A Python Ray Tracer

Main entry point for rendering scenes.
"""

import sys

from lumentrace.cli import main


if __name__ == '__main__':
    sys.exit(main())
