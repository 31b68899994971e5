"""
Chess game finder — entry point.

Run directly (`python main.py magnuscarlsen --pgn`) or through the installed
`cgf` console script; both go through chessfinder.cli.app.main.
"""

from __future__ import annotations

import sys

from chessfinder.cli.app import main

if __name__ == "__main__":
    sys.exit(main())
