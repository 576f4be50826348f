"""Allow running as ``python -m docx_composer``."""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
