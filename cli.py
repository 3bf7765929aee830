#!/usr/bin/env python3
"""
AI Study Notes CLI.

Entry point when running from a source checkout without installing.
Installed copies expose the same application as the `studynotes` command.

Usage:
    python cli.py --help
    python cli.py notes list
    python cli.py ai explain "amortized analysis"
"""

import sys
from pathlib import Path

# Add project root to path for absolute imports
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from studynotes.cli.main import app  # noqa: E402

if __name__ == "__main__":
    app()
