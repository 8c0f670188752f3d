"""Interactive viewer for the beam puzzle."""

from __future__ import annotations

import sys

from beam_puzzle.ui.main import main

if __name__ == "__main__":
    sys.exit(main())
