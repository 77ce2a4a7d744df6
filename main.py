"""
Studio booking manager entry point.

Runs the console front end against the configured JSON store.

Usage:
    python main.py dashboard
    python main.py add --client "Arun" --date 2024-06-01 --time 10:00
    python main.py report --csv --pdf
"""

import sys

from studiobook.console import main

if __name__ == "__main__":
    sys.exit(main())
