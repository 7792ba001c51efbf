"""Allow running as ``python -m math_battle``."""

import sys

from .cli import main

sys.exit(main())
