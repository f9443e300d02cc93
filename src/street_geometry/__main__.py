"""Entry point for running the street_geometry package as a module."""

import sys

from street_geometry.cli import main

if __name__ == "__main__":
    sys.exit(main())
