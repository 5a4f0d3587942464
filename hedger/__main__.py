"""Allow running as `python -m hedger`."""

import sys

from hedger.cli import main

sys.exit(main())
