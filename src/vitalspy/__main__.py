"""Allow ``python -m vitalspy``."""

import sys

from vitalspy.cli import main

sys.exit(main())
