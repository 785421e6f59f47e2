"""Allow ``python -m minitrace``."""

import sys

from minitrace.cli import main

sys.exit(main())
