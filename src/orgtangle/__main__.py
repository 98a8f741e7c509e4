"""Allow ``python -m orgtangle``."""
import sys

from orgtangle.cli._dispatcher import main

if __name__ == "__main__":
    sys.exit(main())
