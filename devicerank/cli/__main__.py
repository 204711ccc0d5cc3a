"""
DeviceRank CLI entry point.

Usage:
    python -m devicerank.cli presets
    python -m devicerank.cli rank <catalog.json>
    python -m devicerank.cli explain <catalog.json> <id>
"""

import sys
from .main import main

if __name__ == "__main__":
    sys.exit(main())
