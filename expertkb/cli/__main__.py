"""
Expert KB CLI entry point.

Usage:
    python -m expertkb.cli check <file>
    python -m expertkb.cli show <file>
    python -m expertkb.cli ask <file> --target <category> --answer <category>=<value>
    python -m expertkb.cli interview <file>
"""

import sys
from .main import main

if __name__ == "__main__":
    sys.exit(main())
