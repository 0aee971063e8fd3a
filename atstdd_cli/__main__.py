"""
Module execution entry point.

Allows running with: python -m atstdd_cli
"""

import sys
from atstdd_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
