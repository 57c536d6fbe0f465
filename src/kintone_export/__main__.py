"""Allow running as ``python -m kintone_export``."""

import sys

from kintone_export.cli import main

sys.exit(main())
