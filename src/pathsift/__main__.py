"""CLI entry point.

Usage:
    python -m pathsift extract FILE
    python -m pathsift config --json
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
