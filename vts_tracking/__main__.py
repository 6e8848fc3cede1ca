"""Entry point for ``python -m vts_tracking``."""

import sys

from vts_tracking.main import main

sys.exit(main())
