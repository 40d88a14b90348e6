"""Allow ``python -m torrtree``."""

import sys

from torrtree.cli import main

sys.exit(main())
