"""Allow ``python -m qti_toolkit``."""

import sys

from .cli import main

sys.exit(main())
