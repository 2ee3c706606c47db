"""Module entrypoint for ``python -m quickfile``.

Runs the interactive launcher exactly like the ``quickfile`` script.
"""

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
