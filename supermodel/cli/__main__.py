"""
SuperModel CLI entry point.

Usage:
    python -m supermodel.cli describe <module:Class>
    python -m supermodel.cli load <module:Class> <file.json>
    python -m supermodel.cli models
"""

import sys
from .main import main

if __name__ == "__main__":
    sys.exit(main())
