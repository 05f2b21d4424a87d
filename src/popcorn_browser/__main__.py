"""Allow ``python -m popcorn_browser``."""

import sys

from popcorn_browser.app import main

sys.exit(main())
