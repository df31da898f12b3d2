"""Entry point for ``python -m blockscript``."""

import sys

from blockscript.main import main

if __name__ == "__main__":
    sys.exit(main())
